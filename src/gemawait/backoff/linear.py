r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from gemawait.backoff.base import BaseBackoffStrategy


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: base_delay * iteration, with optional max_delay cap.
    The first iteration (0) runs immediately, then each iteration waits one
    ``base_delay`` longer than the previous one.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds. Delays are not
            capped by default, so late iterations of a long run can wait
            several minutes.

    Example:
        ```pycon
        >>> from gemawait.backoff import LinearBackoff
        >>> backoff = LinearBackoff()
        >>> backoff.calculate(0)
        0.0
        >>> backoff.calculate(1)
        1.0
        >>> backoff.calculate(3)
        3.0
        >>> # With max_delay cap
        >>> backoff = LinearBackoff(base_delay=2.0, max_delay=5.0)
        >>> backoff.calculate(5)  # Would be 10.0, but capped
        5.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if max_delay is not None and max_delay <= 0:
            msg = f"max_delay must be positive if specified, got {max_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(base_delay={self.base_delay}, max_delay={self.max_delay})"

    def calculate(self, iteration: int) -> float:
        """Calculate linear backoff delay.

        Args:
            iteration: The current iteration number (0-indexed).

        Returns:
            The calculated delay: base_delay * iteration,
            capped at max_delay if set.
        """
        delay = float(self.base_delay * iteration)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
