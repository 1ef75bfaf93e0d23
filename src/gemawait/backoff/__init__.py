r"""Backoff strategies for the delay between awaiter iterations."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "LinearBackoff"]

from gemawait.backoff.base import BaseBackoffStrategy
from gemawait.backoff.linear import LinearBackoff
