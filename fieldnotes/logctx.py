"""Loggers carried in the current context and loggers with persistent fields."""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from typing import Any, Union

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]

_current: contextvars.ContextVar[LoggerLike | None] = contextvars.ContextVar(
    "fieldnotes_logger", default=None
)


class _BoundLogger(logging.LoggerAdapter):
    """Adds fixed fields to every record, both as attributes and in the message."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]):
        fields = dict(self.extra or {})
        kwargs["extra"] = {**fields, **kwargs.get("extra", {})}
        suffix = " ".join(f"{key}={value}" for key, value in fields.items())
        return (f"{msg} {suffix}" if suffix else msg), kwargs


@contextmanager
def use_logger(logger: LoggerLike) -> Iterator[LoggerLike]:
    """Make logger the current logger for the duration of the block."""
    token = _current.set(logger)
    try:
        yield logger
    finally:
        _current.reset(token)


def current_logger() -> LoggerLike:
    """Return the logger set by use_logger, or the root logger if none is set."""
    logger = _current.get()
    return logger if logger is not None else logging.getLogger()


def bind(logger: LoggerLike, **fields: Any) -> _BoundLogger:
    """Return a logger that attaches fields to every record it emits."""
    if isinstance(logger, _BoundLogger):
        merged = {**dict(logger.extra or {}), **fields}
        return _BoundLogger(logger.logger, merged)
    return _BoundLogger(logger, fields)