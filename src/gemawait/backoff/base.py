r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long an awaiter waits before
    polling the registry again, based on the iteration number.
    """

    @abstractmethod
    def calculate(self, iteration: int) -> float:
        """Calculate the delay before a given iteration.

        Args:
            iteration: The current iteration number (0-indexed). The
                first iteration is 0 and usually runs without delay.

        Returns:
            The delay in seconds before polling the registry.
        """
