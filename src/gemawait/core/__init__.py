r"""Configuration and validation shared by the runner and the command line."""

from __future__ import annotations

__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_SKIP",
    "DEFAULT_SOURCE",
    "DEFAULT_TIMEOUT",
    "AwaitConfig",
    "validate_awaiter_names",
    "validate_source",
    "validate_timeout",
]

from gemawait.core.config import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SKIP,
    DEFAULT_SOURCE,
    DEFAULT_TIMEOUT,
    AwaitConfig,
)
from gemawait.core.validation import validate_awaiter_names, validate_source, validate_timeout
