r"""Callback types and data structures for observability.

This module lets callers hook into the awaiter lifecycle for progress
reporting, metrics or alerting, in addition to the log records emitted
under the ``gemawait`` logger.

The callback system provides three lifecycle hooks:
- on_iteration: Called after each polling iteration
- on_found: Called each time a package is confirmed by an awaiter
- on_complete: Called once when an awaiter stops (success or timeout)

Example:
    ```pycon
    >>> from gemawait.callbacks import CallbackConfig, FoundInfo
    >>> def log_found(info: FoundInfo):
    ...     print(f"{info.awaiter}: found {info.identifier}")
    ...
    >>> callbacks = CallbackConfig(on_found=log_found)

    ```
"""

from __future__ import annotations

__all__ = [
    "CallbackConfig",
    "CompletionInfo",
    "FoundInfo",
    "IterationInfo",
    "invoke_on_complete",
    "invoke_on_found",
    "invoke_on_iteration",
]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from gemawait.identifier import PackageIdentifier


@dataclass
class IterationInfo:
    """Information passed to on_iteration callback.

    Attributes:
        awaiter: The name of the awaiter.
        iteration: The iteration number (0-indexed).
        missing: The number of packages still missing after the iteration.
        duration: The duration of the iteration in seconds, backoff included.
        error: The exception raised during the iteration (if any).
    """

    awaiter: str
    iteration: int
    missing: int
    duration: float
    error: Exception | None = None


@dataclass
class FoundInfo:
    """Information passed to on_found callback.

    Attributes:
        awaiter: The name of the awaiter that confirmed the package.
        identifier: The confirmed package identifier.
    """

    awaiter: str
    identifier: PackageIdentifier


@dataclass
class CompletionInfo:
    """Information passed to on_complete callback.

    Attributes:
        awaiter: The name of the awaiter.
        missing: The packages that are still missing, empty on success.
        iterations: The number of iterations that were run.
        total_time: Total time spent by the awaiter (seconds).
    """

    awaiter: str
    missing: frozenset[PackageIdentifier]
    iterations: int
    total_time: float

    @property
    def success(self) -> bool:
        return not self.missing


@dataclass
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_iteration: Optional callback invoked after each iteration.
        on_found: Optional callback invoked for each confirmed package.
        on_complete: Optional callback invoked when an awaiter stops.
    """

    on_iteration: Callable[[IterationInfo], None] | None = None
    on_found: Callable[[FoundInfo], None] | None = None
    on_complete: Callable[[CompletionInfo], None] | None = None


def invoke_on_iteration(
    on_iteration: Callable[[IterationInfo], None] | None,
    *,
    awaiter: str,
    iteration: int,
    missing: int,
    start_time: float,
    error: Exception | None = None,
) -> None:
    """Invoke on_iteration callback if provided.

    Args:
        on_iteration: Optional callback to invoke after each iteration.
        awaiter: The name of the awaiter.
        iteration: The iteration number (0-indexed).
        missing: The number of packages still missing.
        start_time: The timestamp when the iteration started.
        error: The exception raised during the iteration (if any).
    """
    if on_iteration is not None:
        on_iteration(
            IterationInfo(
                awaiter=awaiter,
                iteration=iteration,
                missing=missing,
                duration=time.time() - start_time,
                error=error,
            )
        )


def invoke_on_found(
    on_found: Callable[[FoundInfo], None] | None,
    *,
    awaiter: str,
    identifier: PackageIdentifier,
) -> None:
    """Invoke on_found callback if provided."""
    if on_found is not None:
        on_found(FoundInfo(awaiter=awaiter, identifier=identifier))


def invoke_on_complete(
    on_complete: Callable[[CompletionInfo], None] | None,
    *,
    awaiter: str,
    missing: frozenset[PackageIdentifier],
    iterations: int,
    start_time: float,
) -> None:
    """Invoke on_complete callback if provided.

    Args:
        on_complete: Optional callback to invoke when the awaiter stops.
        awaiter: The name of the awaiter.
        missing: The packages that are still missing.
        iterations: The number of iterations that were run.
        start_time: The timestamp when the awaiter started.
    """
    if on_complete is not None:
        on_complete(
            CompletionInfo(
                awaiter=awaiter,
                missing=missing,
                iterations=iterations,
                total_time=time.time() - start_time,
            )
        )
