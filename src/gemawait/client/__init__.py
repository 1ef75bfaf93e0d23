r"""Registry clients queried by the awaiters."""

from __future__ import annotations

__all__ = ["HttpRegistryClient", "IndexEntry", "RegistryClient", "VersionEntry"]

from gemawait.client.http import HttpRegistryClient
from gemawait.client.protocol import IndexEntry, RegistryClient, VersionEntry
