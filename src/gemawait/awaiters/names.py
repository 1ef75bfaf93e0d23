r"""Awaiter checking the registry's list of package names."""

from __future__ import annotations

__all__ = ["NamesAwaiter"]

import logging

from gemawait.awaiters.base import Awaiter, MissingSet
from gemawait.callbacks import invoke_on_found
from gemawait.utils.structured_logging import log_structured

logger: logging.Logger = logging.getLogger(__name__)


class NamesAwaiter(Awaiter):
    """Wait until every package name is listed by the registry.

    A listed name confirms all the awaited versions of that package at
    once.
    """

    name = "names"

    async def poll(self, missing: MissingSet) -> None:
        for package_name in await self.client.list_names():
            group = missing.pop(package_name, None)
            if group is None:
                continue
            log_structured(logger, logging.INFO, f"found {package_name}")
            for identifier in group:
                invoke_on_found(self.callbacks.on_found, awaiter=self.name, identifier=identifier)
