r"""Decode the legacy Marshal indexes of a RubyGems source.

``specs.4.8`` and ``prerelease_specs.4.8`` are Ruby Marshal dumps of an
array of ``[name, Gem::Version, platform]`` arrays. The versions are
user-marshaled objects whose dumped data is ``[version_string]``.
"""

from __future__ import annotations

__all__ = ["load_specs_index"]

from typing import TYPE_CHECKING, Any

from rubymarshal.classes import UsrMarshal
from rubymarshal.reader import loads

if TYPE_CHECKING:
    from gemawait.client.protocol import IndexEntry

MARSHAL_HEADER = b"\x04\x08"


def _text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    # RubyString keeps the decoded value in ``text``
    text = getattr(value, "text", value)
    if not isinstance(text, str):
        msg = f"Expected a string, got {type(value).__name__}"
        raise TypeError(msg)
    return text


def _version(value: Any) -> str:
    if isinstance(value, UsrMarshal):
        data = value.marshal_dump()
        if isinstance(data, (list, tuple)) and data:
            return _text(data[0])
        msg = f"Unexpected Gem::Version data: {data!r}"
        raise ValueError(msg)
    return _text(value)


def load_specs_index(data: bytes) -> list[IndexEntry]:
    """Decode an uncompressed legacy index.

    Args:
        data: The Marshal dump of the index.

    Returns:
        The ``(name, version, platform)`` entries of the index.

    Raises:
        ValueError: If ``data`` is not a Marshal dump of an index.
        TypeError: If an entry does not hold strings.
    """
    if not data.startswith(MARSHAL_HEADER):
        msg = "Not a Marshal 4.8 dump"
        raise ValueError(msg)
    specs = loads(data)
    if not isinstance(specs, list):
        msg = f"Expected an array of specs, got {type(specs).__name__}"
        raise ValueError(msg)

    entries: list[IndexEntry] = []
    for spec in specs:
        if not isinstance(spec, list) or len(spec) != 3:
            msg = f"Expected a [name, version, platform] array, got {spec!r}"
            raise ValueError(msg)
        name, version, platform = spec
        entries.append((_text(name), _version(version), None if platform is None else _text(platform)))
    return entries
