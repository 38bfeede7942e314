"""Shared logging helpers that default to structured logfire logging."""

from __future__ import annotations

from typing import Any, Literal, Protocol

import logfire


class StructuredLogger(Protocol):
    """Protocol for loggers supporting logfire-style structured methods."""

    def info(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def debug(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def warning(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...

    def error(self, message: str, /, *args: Any, **kwargs: Any) -> Any:
        ...


def get_structured_logger(preferred: StructuredLogger | None = None) -> StructuredLogger:
    """Return the preferred logger, or logfire when none is given."""

    if preferred is not None:
        return preferred
    return logfire  # type: ignore[return-value]


def log_structured(
    logger: StructuredLogger,
    level: Literal["debug", "info", "warning", "error"],
    message: str,
    **data: Any,
) -> None:
    """Invoke ``logger.<level>`` passing structured kwargs when supported.

    Stdlib loggers reject arbitrary keyword arguments; for those the data is
    folded into the message as ``message | key=value``.
    """

    method = getattr(logger, level)
    try:
        method(message, **data)
    except TypeError:
        if data:
            formatted = ", ".join(f"{key}={value!r}" for key, value in data.items())
            message = f"{message} | {formatted}"
        method(message)


__all__ = [
    "StructuredLogger",
    "get_structured_logger",
    "log_structured",
]
