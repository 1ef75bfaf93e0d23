r"""Exception classes raised while awaiting published packages.

Timing out is not an error: it is reported through the ``success``
flag of the result. The exceptions below cover malformed input and
failed registry requests.
"""

from __future__ import annotations

__all__ = [
    "AwaitError",
    "InvalidIdentifierError",
    "RegistryFormatError",
    "RegistryRequestError",
]


class AwaitError(Exception):
    """Base class of all the errors raised by gemawait."""


class InvalidIdentifierError(AwaitError, ValueError):
    """Raised when a package identifier cannot be parsed or validated.

    This error is raised before any awaiter starts, so an invocation with
    a malformed identifier never performs a partial run.

    Example:
        ```pycon
        >>> from gemawait.exceptions import InvalidIdentifierError
        >>> error = InvalidIdentifierError("Please specify a valid version, given 'foo:bar'")
        >>> isinstance(error, ValueError)
        True

        ```
    """


class RegistryRequestError(AwaitError):
    """Raised when a request to the package registry fails.

    Awaiters treat this error as "not confirmed yet": it is logged and
    the affected packages stay missing until the next iteration.

    Args:
        url: The URL that was requested, with credentials filtered out.
        message: A descriptive error message.
        status_code: The HTTP status code, if a response was received.
        cause: The original exception, if any.

    Example:
        ```pycon
        >>> from gemawait.exceptions import RegistryRequestError
        >>> error = RegistryRequestError(
        ...     url="https://rubygems.org/versions",
        ...     message="GET https://rubygems.org/versions failed with status 503",
        ...     status_code=503,
        ... )
        >>> error.status_code
        503

        ```
    """

    def __init__(
        self,
        url: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class RegistryFormatError(RegistryRequestError):
    """Raised when a registry payload cannot be decoded."""
