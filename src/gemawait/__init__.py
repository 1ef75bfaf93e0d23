r"""gemawait - Wait for published gems to be visible on a gem source.

After a gem is pushed, the endpoints of the gem source (name and version
listings, per-gem info files, gemspecs, gem archives, legacy indexes,
dependency API) become consistent independently of each other. gemawait
polls every endpoint concurrently until the given gems are visible
everywhere, or fails after a timeout listing what is still missing.

Example:
    ```pycon
    >>> from gemawait import AwaitConfig, await_packages_sync
    >>> result = await_packages_sync(
    ...     ["rake:13.0.0"], config=AwaitConfig(timeout=60)
    ... )  # doctest: +SKIP
    >>> result.success  # doctest: +SKIP
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "AwaitConfig",
    "AwaitError",
    "AwaitResult",
    "Deadline",
    "HttpRegistryClient",
    "InvalidIdentifierError",
    "PackageIdentifier",
    "RegistryClient",
    "RegistryFormatError",
    "RegistryRequestError",
    "__version__",
    "await_packages",
    "await_packages_sync",
    "parse_identifier",
]

from importlib.metadata import PackageNotFoundError, version

from gemawait.client import HttpRegistryClient, RegistryClient
from gemawait.core.config import AwaitConfig
from gemawait.deadline import Deadline
from gemawait.exceptions import (
    AwaitError,
    InvalidIdentifierError,
    RegistryFormatError,
    RegistryRequestError,
)
from gemawait.identifier import PackageIdentifier, parse_identifier
from gemawait.runner import AwaitResult, await_packages, await_packages_sync

try:
    __version__ = version("gem-await")
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
