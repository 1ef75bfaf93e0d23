r"""Awaiter checking the registry's bulk list of versions."""

from __future__ import annotations

__all__ = ["VersionsAwaiter"]

from gemawait.awaiters.base import Awaiter, MissingSet


class VersionsAwaiter(Awaiter):
    """Wait until every version is listed in the bulk versions listing."""

    name = "versions"

    async def poll(self, missing: MissingSet) -> None:
        versions = await self.client.list_versions()
        for package_name in list(missing):
            self.remove_versions(missing, package_name, versions.get(package_name, ()))
