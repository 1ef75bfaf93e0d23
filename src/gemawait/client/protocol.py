r"""Protocol of the registry client consumed by the awaiters.

Each method queries one facet of the registry. Any method may raise
(transport, authorization or decoding errors); the awaiters treat such
failures as "not confirmed yet" and retry on the next iteration.
"""

from __future__ import annotations

__all__ = ["IndexEntry", "RegistryClient", "VersionEntry"]

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from gemawait.identifier import PackageIdentifier

# (version, platform) pair as listed by the compact index
VersionEntry = tuple[str, "str | None"]

# (name, version, platform) triple as listed by the legacy indexes
IndexEntry = tuple[str, str, "str | None"]


@runtime_checkable
class RegistryClient(Protocol):
    """Protocol for package registry queries.

    Implementations:

    - :class:`~gemawait.client.http.HttpRegistryClient`: RubyGems-compatible
      HTTP source.
    """

    async def list_names(self) -> Iterable[str]:
        """Return every package name known to the registry."""
        ...

    async def list_versions(self) -> Mapping[str, Iterable[VersionEntry]]:
        """Return every ``(version, platform)`` pair, keyed by package name."""
        ...

    async def fetch_info(self, name: str) -> Iterable[VersionEntry]:
        """Return the ``(version, platform)`` pairs listed for one package.

        Args:
            name: The package name.
        """
        ...

    async def fetch_gemspec(self, identifier: PackageIdentifier) -> bool:
        """Fetch the metadata file of one package.

        Args:
            identifier: The package to fetch.

        Returns:
            ``True`` if the file was found, ``False`` if the registry
            answered "not found" or "forbidden".
        """
        ...

    async def fetch_gem(self, identifier: PackageIdentifier) -> bool:
        """Fetch the archive of one package.

        Args:
            identifier: The package to fetch.

        Returns:
            ``True`` if the archive was found, ``False`` otherwise.
        """
        ...

    async def fetch_full_index(self) -> Iterable[IndexEntry]:
        """Return the entries of the legacy index of released versions."""
        ...

    async def fetch_prerelease_index(self) -> Iterable[IndexEntry]:
        """Return the entries of the legacy index of prerelease versions."""
        ...

    async def fetch_dependencies(self, names: Sequence[str]) -> Iterable[IndexEntry]:
        """Query the dependency API for several packages at once.

        Args:
            names: The package names to query.

        Returns:
            The ``(name, version, platform)`` triple of every listed version.
        """
        ...
