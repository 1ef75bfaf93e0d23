r"""Base class of the awaiters.

An awaiter checks one facet of the registry. It starts from the set of
packages to await and polls the registry until every package has been
confirmed or the deadline has passed, removing packages from its
"missing" working set as they are confirmed.
"""

from __future__ import annotations

__all__ = ["Awaiter", "AwaiterResult", "MissingSet", "format_missing", "group_by_name"]

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from gemawait.backoff import LinearBackoff
from gemawait.callbacks import (
    CallbackConfig,
    invoke_on_complete,
    invoke_on_found,
    invoke_on_iteration,
)
from gemawait.identifier import PackageIdentifier, normalize_platform
from gemawait.utils.structured_logging import log_structured, set_current_awaiter

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gemawait.backoff import BaseBackoffStrategy
    from gemawait.client.protocol import IndexEntry, RegistryClient
    from gemawait.deadline import Deadline

logger: logging.Logger = logging.getLogger(__name__)

# Package name -> identifiers not confirmed yet. Groups are never empty.
MissingSet = dict[str, set[PackageIdentifier]]


def group_by_name(identifiers: Iterable[PackageIdentifier]) -> MissingSet:
    """Group identifiers by package name.

    Example:
        ```pycon
        >>> from gemawait.awaiters.base import group_by_name
        >>> from gemawait.identifier import PackageIdentifier
        >>> missing = group_by_name([PackageIdentifier("foo", "1.0"), PackageIdentifier("foo", "2.0")])
        >>> sorted(str(identifier) for identifier in missing["foo"])
        ['foo-1.0', 'foo-2.0']

        ```
    """
    missing: MissingSet = {}
    for identifier in identifiers:
        missing.setdefault(identifier.name, set()).add(identifier)
    return missing


def flatten(missing: MissingSet) -> frozenset[PackageIdentifier]:
    return frozenset(identifier for group in missing.values() for identifier in group)


def format_missing(missing: MissingSet | Iterable[PackageIdentifier]) -> str:
    """Format missing packages as a sorted, comma separated list.

    Example:
        ```pycon
        >>> from gemawait.awaiters.base import format_missing
        >>> from gemawait.identifier import PackageIdentifier
        >>> format_missing([PackageIdentifier("foo", "1.0", "java"), PackageIdentifier("bar", "2.0")])
        'bar-2.0, foo-1.0-java'

        ```
    """
    identifiers = flatten(missing) if isinstance(missing, dict) else missing
    return ", ".join(identifier.full_name for identifier in sorted(identifiers, key=PackageIdentifier.sort_key))


@dataclass(frozen=True)
class AwaiterResult:
    """Final state of an awaiter.

    Attributes:
        name: The awaiter name.
        missing: The packages that were not confirmed before the deadline.
        iterations: The number of iterations that were run.
        elapsed: Time spent by the awaiter in seconds.
    """

    name: str
    missing: frozenset[PackageIdentifier]
    iterations: int
    elapsed: float

    @property
    def success(self) -> bool:
        return not self.missing


class Awaiter:
    r"""Poll one facet of the registry until packages are confirmed.

    The loop stops as soon as nothing is missing (success) or the
    deadline has passed (timeout). Before each iteration the awaiter waits
    for the delay given by the backoff strategy, then calls ``poll`` which
    removes the confirmed packages from the working set. An exception
    raised by an iteration is logged and the next iteration proceeds; only
    ``NotImplementedError`` aborts the awaiter.

    Subclasses set ``name`` and override ``check`` (per package) or
    ``poll`` (per iteration), and optionally ``initial_missing``.

    Args:
        identifiers: The packages to await.
        client: The registry client.
        deadline: The deadline shared by all the awaiters.
        backoff_strategy: Optional backoff strategy, defaults to
            ``LinearBackoff()`` (0s, 1s, 2s, ...).
        callbacks: Optional lifecycle callbacks.

    Example:
        ```pycon
        >>> import asyncio
        >>> from gemawait.awaiters import VersionsAwaiter
        >>> from gemawait.deadline import Deadline
        >>> from gemawait.identifier import PackageIdentifier
        >>> class Client:
        ...     async def list_versions(self):
        ...         return {"foo": {("1.0.0", None)}}
        ...
        >>> awaiter = VersionsAwaiter([PackageIdentifier("foo", "1.0.0")], Client(), Deadline.after(10))
        >>> result = asyncio.run(awaiter.run())
        >>> result.success, result.iterations
        (True, 1)

        ```
    """

    name: ClassVar[str] = "awaiter"

    def __init__(
        self,
        identifiers: Iterable[PackageIdentifier],
        client: RegistryClient,
        deadline: Deadline,
        *,
        backoff_strategy: BaseBackoffStrategy | None = None,
        callbacks: CallbackConfig | None = None,
    ) -> None:
        self.identifiers = tuple(identifiers)
        self.client = client
        self.deadline = deadline
        self.backoff_strategy = backoff_strategy if backoff_strategy is not None else LinearBackoff()
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(identifiers={len(self.identifiers)}, deadline={self.deadline})"

    def initial_missing(self) -> MissingSet:
        """Return the working set the awaiter starts from."""
        return group_by_name(self.identifiers)

    async def run(self) -> AwaiterResult:
        """Poll the registry until nothing is missing or the deadline passes.

        Returns:
            The final state of the awaiter. Its ``missing`` set is empty on
            success.

        Raises:
            NotImplementedError: If the awaiter does not implement
                ``check`` or ``poll``.
        """
        set_current_awaiter(self.name)
        start_time = time.time()
        missing = self.initial_missing()
        iteration = 0

        while missing and not self.deadline.expired(iteration):
            iteration_start = time.time()
            error: Exception | None = None
            try:
                delay = self.backoff_strategy.calculate(iteration)
                if delay > 0:
                    logger.debug(f"Waiting {delay:.2f}s before iteration #{iteration + 1}")
                    await asyncio.sleep(delay)
                iteration_start = time.time()

                log_structured(logger, logging.INFO, f"missing: {format_missing(missing)}")
                await self.poll(missing)
            except NotImplementedError:
                raise
            except Exception as exc:
                error = exc
                self.log_error(exc)

            iteration += 1
            log_structured(logger, logging.DEBUG, f"#{iteration} {time.time() - iteration_start:.2f}s")
            invoke_on_iteration(
                self.callbacks.on_iteration,
                awaiter=self.name,
                iteration=iteration - 1,
                missing=sum(len(group) for group in missing.values()),
                start_time=iteration_start,
                error=error,
            )

        if missing:
            log_structured(logger, logging.ERROR, f"missing {format_missing(missing)}")
        else:
            log_structured(logger, logging.INFO, "all found!")

        remaining = flatten(missing)
        invoke_on_complete(
            self.callbacks.on_complete,
            awaiter=self.name,
            missing=remaining,
            iterations=iteration,
            start_time=start_time,
        )
        return AwaiterResult(
            name=self.name,
            missing=remaining,
            iterations=iteration,
            elapsed=time.time() - start_time,
        )

    async def poll(self, missing: MissingSet) -> None:
        """Run one iteration, removing confirmed packages from ``missing``.

        The default implementation calls ``check`` for every missing
        package. A package whose check raises stays missing and the
        remaining packages are still checked.

        Args:
            missing: The working set, modified in place.
        """
        for identifier in sorted(flatten(missing), key=PackageIdentifier.sort_key):
            try:
                found = await self.check(identifier)
            except NotImplementedError:
                raise
            except Exception as exc:
                self.log_error(exc)
                continue
            if found:
                self.mark_found(missing, identifier)

    async def check(self, identifier: PackageIdentifier) -> bool:
        """Indicate if one package is visible on the registry.

        Args:
            identifier: The package to check.

        Returns:
            ``True`` if the package is confirmed.
        """
        msg = f"{self.__class__.__qualname__} must implement check() or poll()"
        raise NotImplementedError(msg)

    def mark_found(self, missing: MissingSet, identifier: PackageIdentifier) -> bool:
        """Remove a confirmed package from the working set.

        Args:
            missing: The working set, modified in place.
            identifier: The confirmed package.

        Returns:
            ``True`` if the package was missing, ``False`` if it was
            already confirmed or was never awaited by this awaiter.
        """
        group = missing.get(identifier.name)
        if group is None or identifier not in group:
            return False
        group.remove(identifier)
        if not group:
            del missing[identifier.name]
        log_structured(logger, logging.INFO, f"found {identifier.full_name}")
        invoke_on_found(self.callbacks.on_found, awaiter=self.name, identifier=identifier)
        return True

    def remove_listed(self, missing: MissingSet, entries: Iterable[IndexEntry]) -> None:
        """Remove every missing package listed in ``(name, version, platform)`` entries."""
        listed = {(name, version, normalize_platform(platform)) for name, version, platform in entries}
        for identifier in sorted(flatten(missing), key=PackageIdentifier.sort_key):
            if (identifier.name, identifier.version, identifier.platform) in listed:
                self.mark_found(missing, identifier)

    def remove_versions(self, missing: MissingSet, name: str, entries: Iterable[Sequence[str | None]]) -> None:
        """Remove the missing packages of ``name`` listed as ``(version, platform)`` pairs."""
        found = {(version, normalize_platform(platform)) for version, platform in entries}
        for identifier in sorted(missing.get(name, ()), key=PackageIdentifier.sort_key):
            if (identifier.version, identifier.platform) in found:
                self.mark_found(missing, identifier)

    def log_error(self, error: Exception, message: str | None = None) -> None:
        """Log a failed check, tagged with the exception class."""
        log_structured(
            logger,
            logging.WARNING,
            message if message is not None else str(error),
            tags=[type(error).__name__],
        )
