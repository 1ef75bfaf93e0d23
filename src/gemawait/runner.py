r"""Run the awaiters concurrently and aggregate their results.

One asyncio task is started per selected awaiter. The awaiters share the
identifiers, the registry client and the deadline, but each owns its
working set. The run succeeds when no awaiter has anything left missing.
"""

from __future__ import annotations

__all__ = ["AwaitResult", "aggregate", "await_packages", "await_packages_sync"]

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gemawait.awaiters.base import format_missing
from gemawait.client.http import HttpRegistryClient
from gemawait.core.config import AwaitConfig
from gemawait.deadline import Deadline
from gemawait.exceptions import InvalidIdentifierError
from gemawait.identifier import PackageIdentifier, parse_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gemawait.awaiters.base import Awaiter, AwaiterResult
    from gemawait.client.protocol import RegistryClient

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwaitResult:
    """Overall outcome of awaiting packages.

    Attributes:
        missing: The packages that at least one awaiter could not confirm,
            de-duplicated and sorted.
        results: The final state of each awaiter.
        elapsed: Wall time of the whole run in seconds.
    """

    missing: tuple[PackageIdentifier, ...]
    results: tuple[AwaiterResult, ...]
    elapsed: float

    @property
    def success(self) -> bool:
        return not self.missing


def aggregate(results: Iterable[AwaiterResult], elapsed: float) -> AwaitResult:
    """Union the packages left missing by several awaiters.

    Args:
        results: The final state of each awaiter.
        elapsed: Wall time of the run in seconds.

    Returns:
        The overall outcome.

    Example:
        ```pycon
        >>> from gemawait.awaiters import AwaiterResult
        >>> from gemawait.identifier import PackageIdentifier
        >>> from gemawait.runner import aggregate
        >>> a, b = PackageIdentifier("a", "1.0"), PackageIdentifier("b", "1.0")
        >>> result = aggregate(
        ...     [
        ...         AwaiterResult("names", frozenset(), 1, 0.1),
        ...         AwaiterResult("gems", frozenset({b, a}), 5, 10.0),
        ...         AwaiterResult("info", frozenset({a}), 5, 10.0),
        ...     ],
        ...     elapsed=10.0,
        ... )
        >>> result.success, [str(identifier) for identifier in result.missing]
        (False, ['a-1.0', 'b-1.0'])

        ```
    """
    results = tuple(results)
    missing: set[PackageIdentifier] = set()
    for result in results:
        missing.update(result.missing)
    return AwaitResult(
        missing=tuple(sorted(missing, key=PackageIdentifier.sort_key)),
        results=results,
        elapsed=elapsed,
    )


def _coerce_identifiers(
    identifiers: Iterable[PackageIdentifier | str],
) -> tuple[PackageIdentifier, ...]:
    coerced = tuple(
        parse_identifier(identifier) if isinstance(identifier, str) else identifier
        for identifier in identifiers
    )
    if not coerced:
        msg = "Please specify at least one gem to await"
        raise InvalidIdentifierError(msg)
    return coerced


async def await_packages(
    identifiers: Iterable[PackageIdentifier | str],
    client: RegistryClient,
    *,
    config: AwaitConfig | None = None,
    awaiters: Sequence[type[Awaiter]] | None = None,
    deadline: Deadline | None = None,
) -> AwaitResult:
    r"""Wait until packages are visible through every selected awaiter.

    All the awaiters run concurrently and are always joined, even when
    one of them finishes early. An awaiter's per-iteration errors are
    handled inside the awaiter and never reach its siblings.

    Args:
        identifiers: The packages to await, as identifiers or as
            ``name:version[:platform]`` strings.
        client: The registry client.
        config: Optional configuration. If ``None``, a default
            AwaitConfig is used.
        awaiters: Optional awaiter classes overriding the configuration's
            ``only``/``skip`` selection.
        deadline: Optional deadline overriding the configuration's
            ``timeout``.

    Returns:
        The overall outcome. ``success`` is ``False`` if any package is
        still missing when the deadline passes.

    Raises:
        InvalidIdentifierError: If no identifier is given or if one is
            malformed. No awaiter is started in this case.
        ValueError: If no awaiter is selected.
        NotImplementedError: If an awaiter is incomplete. It is raised
            once all the other awaiters have finished.

    Example:
        ```pycon
        >>> import asyncio
        >>> from gemawait import HttpRegistryClient, await_packages
        >>> async def main():  # doctest: +SKIP
        ...     async with HttpRegistryClient() as client:
        ...         return await await_packages(["rake:13.0.0"], client)
        ...
        >>> asyncio.run(main()).success  # doctest: +SKIP
        True

        ```
    """
    identifiers = _coerce_identifiers(identifiers)
    config = config if config is not None else AwaitConfig()
    awaiter_classes = list(awaiters) if awaiters is not None else config.select_awaiters()
    if not awaiter_classes:
        msg = "No awaiter selected, check only and skip"
        raise ValueError(msg)

    start_time = time.time()
    if deadline is None:
        deadline = Deadline.after(config.timeout)

    logger.debug(f"Starting awaiters: {', '.join(a.name for a in awaiter_classes)}")
    workers = [
        awaiter_class(
            identifiers,
            client,
            deadline,
            backoff_strategy=config.get_backoff_strategy(),
            callbacks=config.callbacks(),
        )
        for awaiter_class in awaiter_classes
    ]
    outcomes = await asyncio.gather(*(worker.run() for worker in workers), return_exceptions=True)

    for worker, outcome in zip(workers, outcomes):
        if isinstance(outcome, BaseException):
            logger.error(f"{worker.name} awaiter aborted: {outcome!r}")
            raise outcome

    result = aggregate(outcomes, elapsed=time.time() - start_time)
    if result.success:
        logger.info(f"Found {format_missing(identifiers)}")
    else:
        logger.error(
            f"Timed out after {result.elapsed:.2f}s. "
            f"Check that {format_missing(result.missing)} are published."
        )
    return result


def await_packages_sync(
    identifiers: Iterable[PackageIdentifier | str],
    client: RegistryClient | None = None,
    *,
    config: AwaitConfig | None = None,
    awaiters: Sequence[type[Awaiter]] | None = None,
    deadline: Deadline | None = None,
) -> AwaitResult:
    """Synchronous version of ``await_packages``.

    Runs ``await_packages`` in a new event loop, so it cannot be called
    from a running event loop. If ``client`` is ``None``, an
    ``HttpRegistryClient`` is created from the configuration and closed
    afterwards.
    """
    config = config if config is not None else AwaitConfig()

    async def _run() -> AwaitResult:
        if client is not None:
            return await await_packages(
                identifiers, client, config=config, awaiters=awaiters, deadline=deadline
            )
        async with HttpRegistryClient(
            config.source, timeout=config.request_timeout, bypass_cache=config.bypass_cache
        ) as http_client:
            return await await_packages(
                identifiers, http_client, config=config, awaiters=awaiters, deadline=deadline
            )

    return asyncio.run(_run())
