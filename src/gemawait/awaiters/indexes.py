r"""Awaiters checking the legacy full indexes.

Released and prerelease versions are listed in two separate indexes. A
version is a prerelease if it contains a letter, so each awaiter only
waits for the packages its index is expected to list.
"""

from __future__ import annotations

__all__ = ["FullIndexAwaiter", "IndexAwaiter", "PrereleaseIndexAwaiter"]

from typing import TYPE_CHECKING, ClassVar

from gemawait.awaiters.base import Awaiter, MissingSet, group_by_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gemawait.client.protocol import IndexEntry


class IndexAwaiter(Awaiter):
    """Base class of the awaiters reading a legacy index."""

    prerelease: ClassVar[bool] = False

    def initial_missing(self) -> MissingSet:
        return group_by_name(
            identifier for identifier in self.identifiers if identifier.is_prerelease is self.prerelease
        )

    async def fetch_index(self) -> Iterable[IndexEntry]:
        msg = f"{self.__class__.__qualname__} must implement fetch_index()"
        raise NotImplementedError(msg)

    async def poll(self, missing: MissingSet) -> None:
        self.remove_listed(missing, await self.fetch_index())


class FullIndexAwaiter(IndexAwaiter):
    """Wait until every released version is listed in the full index."""

    name = "full index"

    async def fetch_index(self) -> Iterable[IndexEntry]:
        return await self.client.fetch_full_index()


class PrereleaseIndexAwaiter(IndexAwaiter):
    """Wait until every prerelease version is listed in the prerelease index."""

    name = "pre index"
    prerelease = True

    async def fetch_index(self) -> Iterable[IndexEntry]:
        return await self.client.fetch_prerelease_index()
