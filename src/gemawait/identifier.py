r"""Package identifiers and their parsing.

A package identifier is the ``(name, version, platform)`` triple of one
published artifact. The platform values ``None``, ``""`` and ``"ruby"``
all designate the default platform and are normalized to ``None``.
"""

from __future__ import annotations

__all__ = [
    "PackageIdentifier",
    "is_prerelease",
    "normalize_platform",
    "parse_identifier",
    "parse_identifiers",
]

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gemawait.exceptions import InvalidIdentifierError
from gemawait.gemfile import read_name_tuple

if TYPE_CHECKING:
    from collections.abc import Iterable

# Platform markers that mean "no specific platform"
DEFAULT_PLATFORMS = frozenset({"", "ruby"})

# Same grammar as RubyGems' Gem::Version::ANCHORED_VERSION_PATTERN
VERSION_PATTERN = re.compile(
    r"\A\s*[0-9]+(?:\.[0-9a-zA-Z]+)*(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?\s*\Z"
)

_LETTER = re.compile(r"[a-z]", re.IGNORECASE)


def normalize_platform(platform: str | None) -> str | None:
    """Return the canonical form of a platform value.

    Args:
        platform: The platform value to normalize.

    Returns:
        ``None`` for the default platform, the platform otherwise.

    Example:
        ```pycon
        >>> from gemawait.identifier import normalize_platform
        >>> normalize_platform("ruby") is None
        True
        >>> normalize_platform("") is None
        True
        >>> normalize_platform("java")
        'java'

        ```
    """
    if platform is None or platform in DEFAULT_PLATFORMS:
        return None
    return platform


def is_prerelease(version: str) -> bool:
    """Indicate if a version is a prerelease.

    A version is considered a prerelease as soon as it contains a
    letter, which is how RubyGems splits its legacy indexes.

    Args:
        version: The version to classify.

    Returns:
        ``True`` if the version contains a letter, otherwise ``False``.

    Example:
        ```pycon
        >>> from gemawait.identifier import is_prerelease
        >>> is_prerelease("1.0.0")
        False
        >>> is_prerelease("2.0.0.pre.1")
        True
        >>> is_prerelease("1.0.RC1")
        True

        ```
    """
    return _LETTER.search(version) is not None


def _validate(name: str, version: str, given: str) -> None:
    if not name:
        msg = f"Please specify a name:version[:platform], given {given!r}"
        raise InvalidIdentifierError(msg)
    if not VERSION_PATTERN.match(version):
        msg = f"Please specify a valid version, given {given!r}"
        raise InvalidIdentifierError(msg)


@dataclass(frozen=True)
class PackageIdentifier:
    """Identifier of one published package artifact.

    Args:
        name: The package name.
        version: The package version.
        platform: The optional platform. ``""`` and ``"ruby"`` are
            stored as ``None``.

    Raises:
        InvalidIdentifierError: If the name is empty or if the version
            is not a valid version.

    Example:
        ```pycon
        >>> from gemawait.identifier import PackageIdentifier
        >>> PackageIdentifier("foo", "1.0.0", "ruby") == PackageIdentifier("foo", "1.0.0")
        True
        >>> PackageIdentifier("foo", "1.0.0", "java").full_name
        'foo-1.0.0-java'

        ```
    """

    name: str
    version: str
    platform: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "platform", normalize_platform(self.platform))
        _validate(self.name, self.version, ":".join(self.to_tuple()))

    def __str__(self) -> str:
        return self.full_name

    @property
    def full_name(self) -> str:
        """The ``name-version[-platform]`` form used for file names."""
        return "-".join(self.to_tuple())

    @property
    def is_prerelease(self) -> bool:
        """``True`` if the version contains a letter."""
        return is_prerelease(self.version)

    def sort_key(self) -> tuple[str, str, str]:
        return (self.name, self.version, self.platform or "")

    def to_tuple(self) -> tuple[str, ...]:
        """Return the identifier as a tuple without the default platform.

        Example:
            ```pycon
            >>> from gemawait.identifier import PackageIdentifier
            >>> PackageIdentifier("foo", "1.0.0").to_tuple()
            ('foo', '1.0.0')

            ```
        """
        if self.platform is None:
            return (self.name, self.version)
        return (self.name, self.version, self.platform)


def parse_identifier(value: str) -> PackageIdentifier:
    """Parse a ``name:version[:platform]`` string or a ``.gem`` file path.

    A value ending with ``.gem`` is read as a gem archive and identifies
    the package described by its metadata.

    Args:
        value: The string to parse.

    Returns:
        The parsed identifier.

    Raises:
        InvalidIdentifierError: If the name or the version is missing, if
            the version is not a valid version, or if the gem archive
            cannot be read.

    Example:
        ```pycon
        >>> from gemawait.identifier import parse_identifier
        >>> parse_identifier("foo:1.0.0:java")
        PackageIdentifier(name='foo', version='1.0.0', platform='java')
        >>> parse_identifier("foo:1.0.0")
        PackageIdentifier(name='foo', version='1.0.0', platform=None)

        ```
    """
    if value.endswith(".gem"):
        parts = [part for part in read_name_tuple(value) if part is not None]
    else:
        parts = [part.strip() for part in value.split(":", 2)]
    if len(parts) < 2:
        msg = f"Please specify a name:version[:platform], given {value!r}"
        raise InvalidIdentifierError(msg)
    _validate(parts[0], parts[1], value)
    return PackageIdentifier(*parts)


def parse_identifiers(values: Iterable[str]) -> tuple[PackageIdentifier, ...]:
    """Parse several ``name:version[:platform]`` strings or ``.gem`` paths.

    Args:
        values: The strings to parse.

    Returns:
        The parsed identifiers, in the given order.

    Raises:
        InvalidIdentifierError: If no value is given or if one of them
            is malformed.
    """
    identifiers = tuple(parse_identifier(value) for value in values)
    if not identifiers:
        msg = "Please specify at least one gem to await"
        raise InvalidIdentifierError(msg)
    return identifiers
