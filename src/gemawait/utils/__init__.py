r"""Utility functions shared by the awaiters and the command line."""

from __future__ import annotations

__all__ = [
    "AwaiterFilter",
    "ConsoleFormatter",
    "StructuredFormatter",
    "clear_current_awaiter",
    "current_awaiter",
    "filter_credentials",
    "log_structured",
    "set_current_awaiter",
]

from gemawait.utils.structured_logging import (
    AwaiterFilter,
    ConsoleFormatter,
    StructuredFormatter,
    clear_current_awaiter,
    current_awaiter,
    log_structured,
    set_current_awaiter,
)
from gemawait.utils.urls import filter_credentials
