r"""Logging utilities for awaiter output.

This module provides the context variable that tags log records with the
name of the awaiter that emitted them, and two formatters:

- ``ConsoleFormatter`` renders one human-readable line per record, with
  the awaiter name aligned in a column.
- ``StructuredFormatter`` renders JSON objects with consistent field
  names for log aggregation systems.

Both formatters are opt-in and are enabled by configuring Python's logging
system.

Example:
    ```python
    import logging
    from gemawait.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("gemawait")
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    ```
"""

from __future__ import annotations

__all__ = [
    "AwaiterFilter",
    "ConsoleFormatter",
    "StructuredFormatter",
    "clear_current_awaiter",
    "current_awaiter",
    "log_structured",
    "set_current_awaiter",
]

import contextvars
import json
import logging
import time
from typing import Any

import click

# Name of the awaiter running in the current context (one per asyncio task)
_current_awaiter: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "current_awaiter", default=None
)

# Attributes of a bare LogRecord, excluded from the structured extra fields
_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "msecs",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "sinfo",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
        "awaiter",
        "tags",
    }
)

_LEVEL_LETTERS = {
    logging.DEBUG: ("D", None),
    logging.INFO: ("I", "white"),
    logging.WARNING: ("W", "yellow"),
    logging.ERROR: ("E", "red"),
    logging.CRITICAL: ("E", "red"),
}


def current_awaiter() -> str | None:
    """Get the name of the awaiter running in the current context.

    Returns:
        The awaiter name, or None outside an awaiter.

    Example:
        ```pycon
        >>> from gemawait.utils.structured_logging import (
        ...     clear_current_awaiter,
        ...     current_awaiter,
        ...     set_current_awaiter,
        ... )
        >>> set_current_awaiter("versions")
        >>> current_awaiter()
        'versions'
        >>> clear_current_awaiter()
        >>> current_awaiter()

        ```
    """
    return _current_awaiter.get()


def set_current_awaiter(name: str) -> None:
    """Set the awaiter name for the current context.

    The name is stored in a context variable. Each asyncio task runs in
    a copy of the context, so concurrently running awaiters do not see
    each other's name.

    Args:
        name: The awaiter name.
    """
    _current_awaiter.set(name)


def clear_current_awaiter() -> None:
    """Clear the awaiter name for the current context."""
    _current_awaiter.set(None)


class AwaiterFilter(logging.Filter):
    """Logging filter that attaches the current awaiter name and tags.

    Records get an ``awaiter`` attribute (the current awaiter name, or
    None) and a ``tags`` attribute (an empty list unless the caller passed
    ``extra={"tags": [...]}``).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "awaiter", None) is None:
            record.awaiter = current_awaiter()
        if getattr(record, "tags", None) is None:
            record.tags = []
        return True


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter with an aligned awaiter column.

    Lines look like::

        2024-01-01 12:00:00 I [  versions] [found] foo-1.0.0

    Args:
        name_width: Width of the awaiter column.
        color: Whether to colorize the output with ANSI escape codes.

    Example:
        ```pycon
        >>> import logging
        >>> from gemawait.utils.structured_logging import ConsoleFormatter
        >>> formatter = ConsoleFormatter(name_width=8, color=False)
        >>> record = logging.LogRecord("gemawait", logging.WARNING, __file__, 1, "boom", None, None)
        >>> record.awaiter = "gems"
        >>> record.tags = ["RegistryRequestError"]
        >>> formatter.format(record).split(" ", 2)[2]
        'W [    gems] [RegistryRequestError] boom'

        ```
    """

    def __init__(self, name_width: int = 0, color: bool = True) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.name_width = name_width
        self.color = color

    def _colorize(self, text: str, **styles: Any) -> str:
        if not self.color:
            return text
        return click.style(text, **styles)

    def format(self, record: logging.LogRecord) -> str:
        letter, fg = _LEVEL_LETTERS.get(record.levelno, ("I", "white"))
        parts = [self.formatTime(record, self.datefmt), self._colorize(letter, fg=fg)]

        awaiter = getattr(record, "awaiter", None)
        if awaiter is not None:
            name = awaiter.rjust(self.name_width)
            parts.append("[" + self._colorize(name, fg="white", bold=True) + "]")
        else:
            parts.append(" " * (self.name_width + 2))
        parts.extend(self._colorize(f"[{tag}]", fg="white") for tag in getattr(record, "tags", ()) or ())
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp
        - level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        - logger: Logger name
        - message: Log message
        - awaiter: Name of the awaiter that emitted the record (if any)
        - tags: List of tags (e.g., the exception class of a failed check)
        - module, function, line: Where the log originated

    Any additional fields added via the ``extra`` parameter in logging calls
    are included in the JSON output.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from gemawait.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("gemawait", logging.INFO, __file__, 1, "found", None, None)
        >>> record.awaiter = "names"
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["awaiter"], data["message"]
        ('names', 'found')

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "awaiter": getattr(record, "awaiter", None) or current_awaiter(),
            "tags": list(getattr(record, "tags", None) or []),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(  # noqa: N802
        self, record: logging.LogRecord, datefmt: str | None = None
    ) -> str:
        """Format timestamp as ISO 8601 with millisecond precision."""
        return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)) + f".{int(record.msecs):03d}Z"


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    tags: list[str] | None = None,
    **extra: Any,
) -> None:
    """Log a message with tags and structured data.

    The awaiter name of the current context is attached automatically.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        tags: Optional tags shown in brackets before the message.
        **extra: Additional structured fields to include in the log.
    """
    logger.log(level, message, extra={"awaiter": current_awaiter(), "tags": tags or [], **extra})
