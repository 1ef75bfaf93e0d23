from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable


def _fixnum(value: int) -> bytes:
    # Marshal short form, valid for 0 <= value <= 122
    return b"\x00" if value == 0 else bytes([value + 5])


def dump_specs(entries: list[tuple[str, str, str]]) -> bytes:
    """Dump ``[name, Gem::Version, platform]`` entries like ``Marshal.dump``."""
    symbols: list[bytes] = []

    def symbol(name: bytes) -> bytes:
        if name in symbols:
            return b";" + _fixnum(symbols.index(name))
        symbols.append(name)
        return b":" + _fixnum(len(name)) + name

    def string(value: str) -> bytes:
        data = value.encode()
        # UTF-8 string: instance variable E set to true
        return b'I"' + _fixnum(len(data)) + data + _fixnum(1) + symbol(b"E") + b"T"

    def version(value: str) -> bytes:
        return b"U" + symbol(b"Gem::Version") + b"[" + _fixnum(1) + string(value)

    body = b"".join(
        b"[" + _fixnum(3) + string(name) + version(number) + string(platform)
        for name, number, platform in entries
    )
    return b"\x04\x08[" + _fixnum(len(entries)) + body


@pytest.fixture
def marshal_specs() -> Callable[[list[tuple[str, str, str]]], bytes]:
    return dump_specs


@pytest.fixture
def specs_index() -> bytes:
    """Marshal dump of a legacy index listing foo-1.0.0 and foo-1.0.0-java."""
    return dump_specs([("foo", "1.0.0", "ruby"), ("foo", "1.0.0", "java")])
