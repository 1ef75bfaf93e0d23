r"""Command line interface: ``gem-await``."""

from __future__ import annotations

__all__ = ["configure_logging", "main", "resolve_skip"]

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from gemawait import __version__
from gemawait.awaiters import AWAITER_NAMES
from gemawait.awaiters.base import format_missing
from gemawait.client.http import HttpRegistryClient
from gemawait.core.config import DEFAULT_SKIP, DEFAULT_SOURCE, DEFAULT_TIMEOUT, AwaitConfig
from gemawait.exceptions import InvalidIdentifierError
from gemawait.identifier import parse_identifiers
from gemawait.runner import await_packages
from gemawait.utils.structured_logging import AwaiterFilter, ConsoleFormatter, StructuredFormatter
from gemawait.utils.urls import filter_credentials

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gemawait.identifier import PackageIdentifier
    from gemawait.runner import AwaitResult

logger: logging.Logger = logging.getLogger("gemawait")


def resolve_skip(
    skip: Iterable[str],
    include: Iterable[str],
    only: Iterable[str],
) -> tuple[str, ...]:
    """Compute the awaiters to skip from the command line options.

    ``--include`` and ``--only`` take precedence over the default and
    explicit skips.

    Example:
        ```pycon
        >>> from gemawait.cli import resolve_skip
        >>> resolve_skip(["gems"], include=[], only=[])
        ('dependency api', 'gems')
        >>> resolve_skip([], include=["dependency api"], only=[])
        ()

        ```
    """
    requested = set(include) | set(only)
    names = list(DEFAULT_SKIP) + list(skip)
    return tuple(name for name in dict.fromkeys(names) if name not in requested)


def configure_logging(log_format: str, level: int, name_width: int) -> None:
    """Attach a stderr handler to the ``gemawait`` logger."""
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(AwaiterFilter())
    if log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(name_width=name_width, color=sys.stderr.isatty()))
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


async def _run(identifiers: tuple[PackageIdentifier, ...], config: AwaitConfig) -> AwaitResult:
    async with HttpRegistryClient(
        config.source, timeout=config.request_timeout, bypass_cache=config.bypass_cache
    ) as client:
        return await await_packages(identifiers, client, config=config)


@click.command(
    help=(
        "Wait for pushed gems to be available on the given source. "
        f"Fails after --timeout seconds. The available awaiters are: {', '.join(AWAITER_NAMES)}."
    )
)
@click.argument("gems", nargs=-1, metavar="GEMNAME:VERSION[:PLATFORM]|FILE.gem...")
@click.option("-s", "--source", default=DEFAULT_SOURCE, show_default=True, help="URL of the gem source.")
@click.option(
    "-t",
    "--timeout",
    type=click.IntRange(min=1),
    default=int(DEFAULT_TIMEOUT),
    show_default=True,
    help="Wait for the given duration (seconds) before failing.",
)
@click.option("--skip", multiple=True, type=click.Choice(AWAITER_NAMES), help="Skip the given awaiter.")
@click.option(
    "--include", multiple=True, type=click.Choice(AWAITER_NAMES), help="Do not skip the given awaiter."
)
@click.option("--only", multiple=True, type=click.Choice(AWAITER_NAMES), help="Only run the given awaiter.")
@click.option(
    "--log-format", type=click.Choice(["console", "json"]), default="console", show_default=True
)
@click.option("-v", "--verbose", is_flag=True, help="Also show debug output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors.")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    gems: tuple[str, ...],
    source: str,
    timeout: int,
    skip: tuple[str, ...],
    include: tuple[str, ...],
    only: tuple[str, ...],
    log_format: str,
    verbose: bool,
    quiet: bool,
) -> None:
    try:
        identifiers = parse_identifiers(gems)
    except InvalidIdentifierError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    try:
        config = AwaitConfig(
            source=source,
            timeout=float(timeout),
            only=only or None,
            skip=resolve_skip(skip, include, only),
        )
    except ValueError as exc:
        raise click.UsageError(str(exc), ctx=ctx) from exc

    selected = config.select_awaiters()
    if not selected:
        msg = "No awaiter selected, check --only and --skip"
        raise click.UsageError(msg, ctx=ctx)
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.INFO
    configure_logging(log_format, level, name_width=max((len(a.name) for a in selected), default=0))

    logger.info(f"Awaiting {format_missing(identifiers)} on {filter_credentials(source)}")
    result = asyncio.run(_run(identifiers, config))
    if not result.success:
        ctx.exit(1)
