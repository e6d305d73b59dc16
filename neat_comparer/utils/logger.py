"""
Structured logging utility for the comparison library.

Provides JSON-formatted logging with value previews (so large or sensitive
property values never flood log output), context injection and operation timing.

Loggers configure themselves on first use rather than at import time: the
configured level is applied only to loggers the host application has left at
NOTSET, and is never re-applied afterwards.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from functools import wraps

from neat_comparer.config.settings import DEFAULTS, ConfigurationError, get_settings


def preview_value(value: Any, max_length: int = 80) -> str:
    """
    Render a value for log output, truncated to max_length characters.

    Args:
        value: Any property value
        max_length: Maximum length of the returned string (including "...")

    Returns:
        repr() of the value, shortened with a trailing "..." when too long

    Example:
        >>> preview_value("Test")
        "'Test'"
        >>> preview_value("x" * 100, max_length=10)
        "'xxxxxx..."
    """
    text = repr(value)
    if max_length <= 3 or len(text) <= max_length:
        return text
    return f"{text[: max_length - 3]}..."


class StructuredLogger:
    """
    JSON-formatted logger with context injection and operation timing.

    All log output is one JSON object per line for easier parsing.
    """

    def __init__(self, name: str, level: Optional[int] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name (typically __name__ from calling module)
            level: Logging level; when omitted the configured log level is
                applied on first use, unless the logger already has a level
        """
        self.logger = logging.getLogger(name)
        self._configured = False
        if level is not None:
            self.logger.setLevel(level)

    def _ensure_configured(self) -> None:
        if self._configured:
            return
        self._configured = True

        settings_error = None
        if self.logger.level == logging.NOTSET:
            try:
                self.logger.setLevel(get_settings().log_level)
            except ConfigurationError as e:
                self.logger.setLevel(getattr(logging, DEFAULTS["log_level"]))
                settings_error = str(e)

        # Create console handler with JSON formatting
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

        if settings_error:
            self.warning(
                "Settings unavailable, using default log level",
                operation="configure_logger",
                error=settings_error,
            )

    def _emit(self, level: int, message: str, **fields: Any) -> None:
        self._ensure_configured()
        if self.logger.isEnabledFor(level):
            self.logger.log(
                level, self._format_log(logging.getLevelName(level), message, **fields)
            )

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            message: Human-readable message
            operation: Operation name (e.g., "compare", "resolve_accessor")
            context: Context dict with type names, property names, counts
            duration_ms: Operation duration in milliseconds
            error: Error message if applicable

        Returns:
            JSON-formatted log string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "message": message,
        }

        if operation:
            log_entry["operation"] = operation

        if context:
            log_entry["context"] = context

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        if error:
            log_entry["error"] = error

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def debug(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log debug message."""
        self._emit(
            logging.DEBUG,
            message,
            operation=operation,
            context=context,
            duration_ms=duration_ms,
            error=error,
        )

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log info message."""
        self._emit(
            logging.INFO, message, operation=operation, context=context, duration_ms=duration_ms
        )

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        """Log warning message."""
        self._emit(logging.WARNING, message, operation=operation, context=context, error=error)

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        """Log error message."""
        self._emit(
            logging.ERROR,
            message,
            operation=operation,
            context=context,
            duration_ms=duration_ms,
            error=error,
        )


def log_operation(operation_name: str):
    """
    Decorator to log operation start, duration, and completion.

    Start and completion are logged at DEBUG level; failures are logged at
    ERROR level and re-raised unchanged.

    Usage:
        @log_operation("compare")
        def compare(self, first_instance, second_instance):
            ...
    """

    def decorator(func):
        logger = get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            context = {"function": func.__qualname__}
            if args:
                context["arg_count"] = len(args)

            logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)

            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context=context,
                    error=f"{type(e).__name__}: {e}",
                    duration_ms=(time.perf_counter() - start_time) * 1000,
                )
                raise

            logger.debug(
                f"Completed {operation_name}",
                operation=operation_name,
                context=context,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            )
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """
    Factory function to get a structured logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
