r"""Unit tests for the compact index parsers."""

from __future__ import annotations

from gemawait.client.compact_index import parse_info, parse_names, parse_version_entry, parse_versions

NAMES = """\
---
-
bar
foo
"""

VERSIONS = """\
created_at: 2024-01-01T00:00:00Z
---
bar 1.0.0 0123456789abcdef
foo 1.0.0,1.0.1,1.0.1-java 0123456789abcdef
foo 1.0.2-x86_64-linux fedcba9876543210
foo -1.0.1 fedcba9876543210
"""

INFO = """\
---
1.0.0 bar:>= 1.0&< 3|checksum:abc,ruby:>= 2.7
1.0.0-java bar:>= 1.0|checksum:def
2.0.0.pre.1 |checksum:ghi
"""


def test_parse_version_entry() -> None:
    assert parse_version_entry("1.0.0") == ("1.0.0", None)
    assert parse_version_entry("1.0.0-java") == ("1.0.0", "java")
    assert parse_version_entry("1.0.0-x86_64-linux") == ("1.0.0", "x86_64-linux")
    assert parse_version_entry("1.0.0-ruby") == ("1.0.0", None)


def test_parse_names() -> None:
    assert parse_names(NAMES) == ["-", "bar", "foo"]


def test_parse_names_without_preamble() -> None:
    assert parse_names("bar\nfoo\n") == ["bar", "foo"]


def test_parse_versions() -> None:
    assert parse_versions(VERSIONS) == {
        "bar": {("1.0.0", None)},
        "foo": {("1.0.0", None), ("1.0.1", "java"), ("1.0.2", "x86_64-linux")},
    }


def test_parse_versions_empty() -> None:
    assert parse_versions("created_at: 2024-01-01T00:00:00Z\n---\n") == {}


def test_parse_info() -> None:
    assert parse_info(INFO) == [("1.0.0", None), ("1.0.0", "java"), ("2.0.0.pre.1", None)]
