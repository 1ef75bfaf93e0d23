r"""Awaiters fetching the files of each package.

Both awaiters check packages one by one. A file that is not found (or
forbidden, which is how some storage backends answer for missing files)
leaves the package missing until the next iteration.
"""

from __future__ import annotations

__all__ = ["GemsAwaiter", "GemspecsAwaiter"]

import logging
from typing import TYPE_CHECKING

from gemawait.awaiters.base import Awaiter
from gemawait.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from gemawait.identifier import PackageIdentifier

logger: logging.Logger = logging.getLogger(__name__)


class GemspecsAwaiter(Awaiter):
    """Wait until the metadata file of every package can be fetched."""

    name = "gemspecs"

    async def check(self, identifier: PackageIdentifier) -> bool:
        if await self.client.fetch_gemspec(identifier):
            return True
        log_structured(logger, logging.WARNING, f"{identifier.full_name}.gemspec.rz not found", tags=["not found"])
        return False


class GemsAwaiter(Awaiter):
    """Wait until the archive of every package can be fetched."""

    name = "gems"

    async def check(self, identifier: PackageIdentifier) -> bool:
        if await self.client.fetch_gem(identifier):
            return True
        log_structured(logger, logging.WARNING, f"{identifier.full_name}.gem not found", tags=["not found"])
        return False
