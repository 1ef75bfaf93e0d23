r"""Configuration dataclass and defaults for awaiting packages.

This module provides configuration constants and a dataclass-based
configuration object shared by the runner and the command line.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_REQUEST_TIMEOUT",
    "DEFAULT_SKIP",
    "DEFAULT_SOURCE",
    "DEFAULT_TIMEOUT",
    "AwaitConfig",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from gemawait.backoff import BaseBackoffStrategy, LinearBackoff
from gemawait.callbacks import CallbackConfig
from gemawait.core.validation import validate_awaiter_names, validate_source, validate_timeout

if TYPE_CHECKING:
    from collections.abc import Callable

    from gemawait.awaiters.base import Awaiter
    from gemawait.callbacks import CompletionInfo, FoundInfo, IterationInfo

# Default package source
DEFAULT_SOURCE = "https://rubygems.org"

# Default time budget in seconds for all the awaiters (5 minutes)
DEFAULT_TIMEOUT = 300.0

# Default timeout in seconds for each HTTP request to the source
DEFAULT_REQUEST_TIMEOUT = 10.0

# Awaiters skipped unless explicitly included
# The dependency API is deprecated on rubygems.org
DEFAULT_SKIP = ("dependency api",)


@dataclass
class AwaitConfig:
    """Configuration for awaiting published packages.

    Args:
        source: The URL of the package source.
        timeout: Time budget in seconds shared by all the awaiters. Must be > 0.
        request_timeout: Timeout in seconds for each HTTP request. Must be > 0.
        backoff_strategy: Optional backoff strategy for the delay between
            iterations. ``None`` means ``LinearBackoff()`` (0s, 1s, 2s, ...).
        only: Optional names of the only awaiters to run.
        skip: Names of the awaiters to skip.
        bypass_cache: Whether registry requests bypass intermediate caches.
        on_iteration: Optional callback called after each iteration.
        on_found: Optional callback called for each confirmed package.
        on_complete: Optional callback called when an awaiter stops.

    Example:
        ```pycon
        >>> from gemawait.core.config import AwaitConfig
        >>> config = AwaitConfig()
        >>> config.timeout
        300.0
        >>> [awaiter.name for awaiter in config.select_awaiters()]
        ['names', 'versions', 'info', 'gemspecs', 'gems', 'full index', 'pre index']
        >>> config.merge(only=("gems",)).only
        ('gems',)

        ```
    """

    source: str = DEFAULT_SOURCE
    timeout: float = DEFAULT_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    backoff_strategy: BaseBackoffStrategy | None = None
    only: tuple[str, ...] | None = None
    skip: tuple[str, ...] = DEFAULT_SKIP
    bypass_cache: bool = True
    on_iteration: Callable[[IterationInfo], None] | None = None
    on_found: Callable[[FoundInfo], None] | None = None
    on_complete: Callable[[CompletionInfo], None] | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        from gemawait.awaiters import AWAITER_NAMES

        validate_source(self.source)
        validate_timeout(self.timeout)
        validate_timeout(self.request_timeout, name="request_timeout")
        validate_awaiter_names(self.only or (), AWAITER_NAMES)
        validate_awaiter_names(self.skip, AWAITER_NAMES)

    def merge(self, **overrides: Any) -> AwaitConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new AwaitConfig instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def get_backoff_strategy(self) -> BaseBackoffStrategy:
        if self.backoff_strategy is None:
            return LinearBackoff()
        return self.backoff_strategy

    def callbacks(self) -> CallbackConfig:
        return CallbackConfig(
            on_iteration=self.on_iteration,
            on_found=self.on_found,
            on_complete=self.on_complete,
        )

    def select_awaiters(self) -> list[type[Awaiter]]:
        """Return the awaiter classes selected by ``only`` and ``skip``.

        ``only`` is applied first, then ``skip``. The awaiters keep their
        canonical order.
        """
        from gemawait.awaiters import select_awaiters

        return select_awaiters(only=self.only, skip=self.skip)
