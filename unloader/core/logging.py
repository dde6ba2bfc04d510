"""Structured logging configuration for unloader."""

import logging
import sys
from typing import Optional

try:
    from json_log_formatter import JSONFormatter
except ImportError:
    JSONFormatter = None  # type: ignore


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    relation: Optional[str] = None,
) -> None:
    """Configure logging for unloader.

    Logs are written to stderr because stdout may carry unloaded rows.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: If True, use JSON format; otherwise use normal format
        relation: Optional relation name to include in every log line
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("unloader")
    logger.setLevel(log_level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)

    if json_format:
        if JSONFormatter is None:
            raise ImportError(
                "json-log-formatter is required for JSON logging. "
                "Install it with: pip install unloader[json-logs]"
            )
        formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter()

    handler.setFormatter(formatter)
    if relation:
        handler.addFilter(_RelationFilter(relation))
    logger.addHandler(handler)


class _RelationFilter(logging.Filter):
    """Stamp records with the relation being unloaded."""

    def __init__(self, relation: str):
        super().__init__()
        self.relation = relation

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "relation"):
            record.relation = self.relation
        return True


class StructuredFormatter(logging.Formatter):
    """Structured formatter that adds context to log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        context = getattr(record, "context", {})

        parts = [f"[{record.levelname}]"]

        if hasattr(record, "relation"):
            parts.append(f"relation={record.relation}")

        if hasattr(record, "batch_id"):
            parts.append(f"batch={record.batch_id}")

        for key, value in context.items():
            parts.append(f"{key}={value}")

        parts.append(record.getMessage())

        return " ".join(parts)
