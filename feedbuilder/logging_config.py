"""Structured logging configuration for the feed builder."""

import json
import logging
import sys
from datetime import UTC, datetime

# Context fields copied from log records into the JSON payload
CONTEXT_FIELDS = (
    "execution_id",
    "component",
    "feed_format",
    "cache_key",
    "cache_ttl",
    "cache_hit",
    "items_count",
    "template",
    "error",
    "lambda_request_id",
)


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger:
    """Logger with execution context and structured logging."""

    def __init__(self, execution_id: str, component: str = "main"):
        """Initialize execution logger.

        Args:
            execution_id: Unique identifier for this execution
            component: Component name (e.g., 'feed', 'cache')
        """
        self.execution_id = execution_id
        self.component = component
        self.logger = logging.getLogger(f"feedbuilder.{component}")

    def _log_with_context(self, level: int, message: str, **kwargs) -> None:
        """Log message with execution context."""
        extra = {
            "execution_id": self.execution_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, extra=extra)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with context."""
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with context."""
        self._log_with_context(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def log_render(
        self, feed_format: str, items_count: int, cache_ttl: int, cache_key: str
    ) -> None:
        """Log a render request with structured data."""
        self.info(
            f"Rendering {feed_format} feed with {items_count} items",
            feed_format=feed_format,
            items_count=items_count,
            cache_ttl=cache_ttl,
            cache_key=cache_key,
        )

    def log_cache_decision(self, cache_key: str, cache_hit: bool) -> None:
        """Log whether a render was served from the cache."""
        self.info(
            "Served feed from cache" if cache_hit else "Feed not cached, rendering",
            cache_key=cache_key,
            cache_hit=cache_hit,
        )


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    loggers = [
        "feedbuilder",
        "feedbuilder.main",
        "feedbuilder.feed",
        "feedbuilder.cache",
        "feedbuilder.renderer",
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, log_level.upper()))
        logger.propagate = True


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
