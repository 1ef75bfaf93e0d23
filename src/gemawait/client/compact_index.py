r"""Parsers for the compact index text formats.

The compact index exposes three plain text files:

- ``/names``: one package name per line.
- ``/versions``: one ``name v1,v2-platform,-v3 checksum`` line per
  update; a version prefixed with ``-`` was yanked.
- ``/info/<name>``: one ``version[-platform] dependencies|requirements``
  line per version.

All three files may start with a preamble terminated by a ``---`` line.
"""

from __future__ import annotations

__all__ = ["parse_info", "parse_names", "parse_version_entry", "parse_versions"]

from typing import TYPE_CHECKING

from gemawait.identifier import normalize_platform

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gemawait.client.protocol import VersionEntry


def _body_lines(text: str) -> Iterator[str]:
    lines = text.splitlines()
    if "---" in lines:
        lines = lines[lines.index("---") + 1 :]
    for line in lines:
        stripped = line.strip()
        if stripped:
            yield stripped


def parse_version_entry(value: str) -> VersionEntry:
    """Split a ``version[-platform]`` string.

    Args:
        value: The string to split.

    Returns:
        The ``(version, platform)`` pair, with a normalized platform.

    Example:
        ```pycon
        >>> from gemawait.client.compact_index import parse_version_entry
        >>> parse_version_entry("1.0.0-x86_64-linux")
        ('1.0.0', 'x86_64-linux')
        >>> parse_version_entry("1.0.0")
        ('1.0.0', None)

        ```
    """
    version, _, platform = value.partition("-")
    return (version, normalize_platform(platform))


def parse_names(text: str) -> list[str]:
    """Parse the ``/names`` file.

    Example:
        ```pycon
        >>> from gemawait.client.compact_index import parse_names
        >>> parse_names("---\\nfoo\\nbar\\n")
        ['foo', 'bar']

        ```
    """
    return list(_body_lines(text))


def parse_versions(text: str) -> dict[str, set[VersionEntry]]:
    """Parse the ``/versions`` file.

    Lines are applied in order, so a version yanked by a later line is
    removed from the result.

    Example:
        ```pycon
        >>> from gemawait.client.compact_index import parse_versions
        >>> text = "created_at: 2024-01-01\\n---\\nfoo 1.0.0,1.0.1-java abc\\nfoo -1.0.0 def\\n"
        >>> parse_versions(text)
        {'foo': {('1.0.1', 'java')}}

        ```
    """
    versions: dict[str, set[VersionEntry]] = {}
    for line in _body_lines(text):
        fields = line.split(" ")
        if len(fields) < 2:
            continue
        found = versions.setdefault(fields[0], set())
        for value in fields[1].split(","):
            if value.startswith("-"):
                found.discard(parse_version_entry(value[1:]))
            else:
                found.add(parse_version_entry(value))
    return versions


def parse_info(text: str) -> list[VersionEntry]:
    """Parse an ``/info/<name>`` file.

    Example:
        ```pycon
        >>> from gemawait.client.compact_index import parse_info
        >>> parse_info("---\\n1.0.0 bar:>= 1|checksum:abc\\n1.0.0-java |checksum:def\\n")
        [('1.0.0', None), ('1.0.0', 'java')]

        ```
    """
    return [parse_version_entry(line.split(" ", 1)[0]) for line in _body_lines(text)]
