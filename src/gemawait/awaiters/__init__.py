r"""Awaiters, one per registry facet.

The set of awaiters is closed: ``AWAITERS`` lists them in the order in
which they are started and reported.
"""

from __future__ import annotations

__all__ = [
    "AWAITERS",
    "AWAITER_NAMES",
    "Awaiter",
    "AwaiterResult",
    "DependencyAPIAwaiter",
    "FullIndexAwaiter",
    "GemsAwaiter",
    "GemspecsAwaiter",
    "InfoAwaiter",
    "MissingSet",
    "NamesAwaiter",
    "PrereleaseIndexAwaiter",
    "VersionsAwaiter",
    "get_awaiter",
    "select_awaiters",
]

from typing import TYPE_CHECKING

from gemawait.awaiters.base import Awaiter, AwaiterResult, MissingSet
from gemawait.awaiters.dependency_api import DependencyAPIAwaiter
from gemawait.awaiters.files import GemsAwaiter, GemspecsAwaiter
from gemawait.awaiters.indexes import FullIndexAwaiter, PrereleaseIndexAwaiter
from gemawait.awaiters.info import InfoAwaiter
from gemawait.awaiters.names import NamesAwaiter
from gemawait.awaiters.versions import VersionsAwaiter
from gemawait.core.validation import validate_awaiter_names

if TYPE_CHECKING:
    from collections.abc import Iterable

AWAITERS: tuple[type[Awaiter], ...] = (
    NamesAwaiter,
    VersionsAwaiter,
    InfoAwaiter,
    GemspecsAwaiter,
    GemsAwaiter,
    FullIndexAwaiter,
    PrereleaseIndexAwaiter,
    DependencyAPIAwaiter,
)

AWAITER_NAMES: tuple[str, ...] = tuple(awaiter.name for awaiter in AWAITERS)


def get_awaiter(name: str) -> type[Awaiter]:
    """Return the awaiter class with the given name.

    Raises:
        ValueError: If no awaiter has this name.

    Example:
        ```pycon
        >>> from gemawait.awaiters import get_awaiter
        >>> get_awaiter("full index").__name__
        'FullIndexAwaiter'

        ```
    """
    validate_awaiter_names([name], AWAITER_NAMES)
    return AWAITERS[AWAITER_NAMES.index(name)]


def select_awaiters(
    only: Iterable[str] | None = None, skip: Iterable[str] = ()
) -> list[type[Awaiter]]:
    """Select awaiter classes by name.

    Args:
        only: Optional names of the only awaiters to keep.
        skip: Names of the awaiters to drop, applied after ``only``.

    Returns:
        The selected awaiter classes, in canonical order.

    Raises:
        ValueError: If a name is not an existing awaiter.

    Example:
        ```pycon
        >>> from gemawait.awaiters import select_awaiters
        >>> [awaiter.name for awaiter in select_awaiters(only=["gems", "names"])]
        ['names', 'gems']
        >>> len(select_awaiters(skip=["dependency api"]))
        7

        ```
    """
    only = None if only is None else tuple(only)
    skip = tuple(skip)
    validate_awaiter_names(only or (), AWAITER_NAMES)
    validate_awaiter_names(skip, AWAITER_NAMES)
    return [
        awaiter
        for awaiter in AWAITERS
        if (only is None or awaiter.name in only) and awaiter.name not in skip
    ]
