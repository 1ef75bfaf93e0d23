r"""Awaiter checking the per-package info listing."""

from __future__ import annotations

__all__ = ["InfoAwaiter"]

from gemawait.awaiters.base import Awaiter, MissingSet


class InfoAwaiter(Awaiter):
    """Wait until every version is listed in its package's info file.

    The info file of each missing package is fetched separately; a failed
    fetch leaves that package missing and does not prevent the other
    packages from being checked.
    """

    name = "info"

    async def poll(self, missing: MissingSet) -> None:
        for package_name in sorted(missing):
            try:
                entries = await self.client.fetch_info(package_name)
            except Exception as exc:  # noqa: BLE001
                self.log_error(exc)
                continue
            self.remove_versions(missing, package_name, entries)
