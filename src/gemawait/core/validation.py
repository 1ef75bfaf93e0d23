r"""Parameter validation utilities for awaiting packages.

This module provides validation functions for the configuration values
to ensure they meet the required constraints before any awaiter starts.
"""

from __future__ import annotations

__all__ = ["validate_awaiter_names", "validate_source", "validate_timeout"]

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Iterable


def validate_timeout(timeout: float, name: str = "timeout") -> None:
    """Validate a timeout parameter.

    Args:
        timeout: Number of seconds. Must be > 0.
        name: The parameter name used in the error message.

    Raises:
        ValueError: If timeout is <= 0.

    Example:
        ```pycon
        >>> from gemawait.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if timeout <= 0:
        msg = f"{name} must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_source(source: str) -> None:
    """Validate the URL of a package source.

    Args:
        source: The source URL. Must be an absolute http(s) URL.

    Raises:
        ValueError: If the URL is not an absolute http(s) URL.

    Example:
        ```pycon
        >>> from gemawait.core.validation import validate_source
        >>> validate_source("https://rubygems.org")

        ```
    """
    parts = urlsplit(source)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        msg = f"source must be an absolute http(s) URL, got {source!r}"
        raise ValueError(msg)


def validate_awaiter_names(names: Iterable[str], available: Iterable[str]) -> None:
    """Validate awaiter names.

    Args:
        names: The names to validate.
        available: The names of the existing awaiters.

    Raises:
        ValueError: If one of the names is not an existing awaiter.

    Example:
        ```pycon
        >>> from gemawait.core.validation import validate_awaiter_names
        >>> validate_awaiter_names(["names"], ["names", "versions"])

        ```
    """
    available = tuple(available)
    unknown = [name for name in names if name not in available]
    if unknown:
        msg = f"Unknown awaiter(s) {', '.join(map(repr, unknown))}, valid names are: {', '.join(available)}"
        raise ValueError(msg)
