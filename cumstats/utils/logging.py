# SPDX-License-Identifier: MIT
"""Structured JSON logging for cumstats.

Log records carry a correlation id and arbitrary structured fields. Kernels
use :meth:`StructuredLogger.debug_operation`, which is a no-op unless DEBUG
is enabled, so instrumentation costs nothing on the hot path.
"""
from __future__ import annotations

import json
import logging
import sys
import time
from contextlib import contextmanager, nullcontext
from contextvars import ContextVar
from typing import Any, ContextManager, Dict, Iterator, Optional
from uuid import uuid4


_CORRELATION_ID_VAR: ContextVar[Optional[str]] = ContextVar(
    "cumstats_correlation_id", default=None
)


def generate_correlation_id() -> str:
    """Generate a new correlation identifier."""

    return uuid4().hex


def get_correlation_id() -> Optional[str]:
    """Return the currently active correlation identifier, if any."""

    return _CORRELATION_ID_VAR.get()


@contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation identifier to every record logged inside the block."""

    resolved = correlation_id or generate_correlation_id()
    token = _CORRELATION_ID_VAR.set(resolved)
    try:
        yield resolved
    finally:
        _CORRELATION_ID_VAR.reset(token)


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """Wrapper around a standard logger that attaches structured fields."""

    def __init__(self, name: str, correlation_id: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self._correlation_id = correlation_id

    def _resolve_correlation_id(self, explicit: Optional[str] = None) -> str:
        if explicit:
            return explicit

        current = get_correlation_id()
        if current:
            return current

        if self._correlation_id is None:
            self._correlation_id = generate_correlation_id()
        return self._correlation_id

    def _log(self, level: int, msg: str, **kwargs: Any) -> None:
        if not self.logger.isEnabledFor(level):
            return
        correlation_id = kwargs.pop("correlation_id", None)
        extra_data: Dict[str, Any] = {
            "correlation_id": self._resolve_correlation_id(correlation_id)
        }
        if kwargs:
            extra_data["extra_fields"] = kwargs
        self.logger.log(level, msg, extra=extra_data)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, **kwargs)

    @contextmanager
    def operation(
        self,
        operation_name: str,
        *,
        level: int = logging.INFO,
        correlation_id: Optional[str] = None,
        **context: Any,
    ) -> Iterator[Dict[str, Any]]:
        """Track timing and outcome of an operation.

        Args:
            operation_name: Name of the operation being tracked
            level: Level used for the start and completion records
            **context: Additional context fields to log

        Yields:
            Mutable dictionary merged into the completion record

        Example:
            >>> logger = StructuredLogger("cumstats")
            >>> with logger.operation("cumulative_sum_init", length=3) as op:
            ...     op["last_value"] = 12.0
        """
        start_time = time.perf_counter()
        resolved_id = self._resolve_correlation_id(correlation_id)
        op_context: Dict[str, Any] = {"operation": operation_name, **context}

        with correlation_context(resolved_id):
            self._log(level, f"Starting operation: {operation_name}", **op_context)
            try:
                yield op_context
            except Exception as exc:
                op_context["status"] = op_context.get("status") or "failure"
                self.error(
                    f"Failed operation: {operation_name}",
                    **op_context,
                    duration_seconds=time.perf_counter() - start_time,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                raise
            op_context["status"] = op_context.get("status") or "success"
            self._log(
                level,
                f"Completed operation: {operation_name}",
                **op_context,
                duration_seconds=time.perf_counter() - start_time,
            )

    def debug_operation(
        self, operation_name: str, **context: Any
    ) -> ContextManager[Dict[str, Any]]:
        """Like :meth:`operation` at DEBUG level, or a null context when DEBUG is off."""
        if not self.logger.isEnabledFor(logging.DEBUG):
            return nullcontext({})
        return self.operation(operation_name, level=logging.DEBUG, **context)


def configure_logging(
    level: str = "INFO",
    use_json: bool = True,
    stream: Any = None,
) -> None:
    """Configure the ``cumstats`` logger hierarchy.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: Whether to use JSON formatting
        stream: Output stream (defaults to sys.stderr)
    """
    package_logger = logging.getLogger("cumstats")
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    package_logger.addHandler(handler)


def get_logger(name: str, correlation_id: Optional[str] = None) -> StructuredLogger:
    """Get a structured logger instance (``name`` is typically ``__name__``)."""
    return StructuredLogger(name, correlation_id)


__all__ = [
    "JSONFormatter",
    "StructuredLogger",
    "configure_logging",
    "get_logger",
    "correlation_context",
    "generate_correlation_id",
    "get_correlation_id",
]
