r"""Absolute deadline shared by all the awaiters of one invocation."""

from __future__ import annotations

__all__ = ["Deadline"]

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Deadline:
    """Absolute point in time after which awaiters stop polling.

    The deadline is created once per invocation and only read afterwards,
    so it can be shared by concurrently running awaiters.

    Args:
        expires_at: The expiry timestamp, in seconds since the epoch.

    Example:
        ```pycon
        >>> from gemawait.deadline import Deadline
        >>> deadline = Deadline.after(60)
        >>> deadline.expired()
        False
        >>> deadline.expired(padding=120)
        True
        >>> Deadline.after(0).remaining()
        0.0

        ```
    """

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """Create a deadline that expires ``seconds`` from now."""
        return cls(time.time() + seconds)

    def expired(self, padding: float = 0) -> bool:
        """Indicate if the deadline has passed.

        Args:
            padding: Grace padding in seconds added to the current time.
                The awaiters pass the iteration number, so the check gets
                stricter as the delay between iterations grows.

        Returns:
            ``True`` if ``now + padding`` is after the deadline.
        """
        return time.time() + padding > self.expires_at

    def remaining(self) -> float:
        """Return the number of seconds left, never negative."""
        return max(self.expires_at - time.time(), 0.0)
