r"""Awaiter checking the dependency API."""

from __future__ import annotations

__all__ = ["DependencyAPIAwaiter"]

from gemawait.awaiters.base import Awaiter, MissingSet


class DependencyAPIAwaiter(Awaiter):
    """Wait until every version is returned by the dependency API.

    One request per iteration queries all the packages that are still
    missing.
    """

    name = "dependency api"

    async def poll(self, missing: MissingSet) -> None:
        self.remove_listed(missing, await self.client.fetch_dependencies(sorted(missing)))
