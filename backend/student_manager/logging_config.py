"""
Structured JSON logging configuration.

Provides structured logging with channels (db, validation, stats, export,
ingest, cli), operation ID tracking, and context-rich log entries. All log
output is valid JSON written to stderr so it never mixes with command output.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# ──────────────────────────────────────────────────────────────
# Context variable to track the current operation ID.
# Each CLI command (or import run) gets a unique UUID, which is
# then attached to every log entry produced while it runs.
# ──────────────────────────────────────────────────────────────
operation_id_var: ContextVar[str] = ContextVar("operation_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CHANNELS = ["db", "validation", "stats", "export", "ingest", "cli"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Logging formatter that outputs one JSON object per log entry.

    Each log line contains:
    - timestamp: ISO 8601 timestamp in UTC
    - level: Log severity (INFO, WARNING, ERROR, DEBUG)
    - message: Human-readable log message
    - channel: Log source category (db, validation, stats, ...)
    - context: Business context (operation_id, student_id, etc.)
    - extra: Additional metadata (duration_ms, counts, etc.)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "operation_id": operation_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logging(level: str = None):
    """
    Configure the root logger and all channel-specific loggers.

    Args:
        level: Optional level name overriding the LOG_LEVEL environment variable

    Returns:
        The configured root logger
    """
    level_name = (level or LOG_LEVEL).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    # Channel loggers inherit the root handler but keep distinct names
    # so log entries can be filtered by channel
    for channel in CHANNELS:
        logging.getLogger(f"student_manager.{channel}").setLevel(log_level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Get a channel-specific logger."""
    return logging.getLogger(f"student_manager.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None, exc_info=None):
    """
    Emit a structured log entry with business context and extra metadata.

    This is the logging function used throughout the package. It attaches
    business context (student_id, email, etc.) and extra metadata
    (duration_ms, counts, etc.) to each log entry.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (student_id, email)
        extra_data: Additional metadata dict (duration_ms, row counts)
        exc_info: Optional exception to attach to the entry
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        exc_info=exc_info,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_operation_id() -> str:
    """Generate a new UUID for operation tracking."""
    return str(uuid.uuid4())


def start_operation() -> str:
    """Generate an operation ID and make it current for subsequent log entries."""
    op_id = generate_operation_id()
    operation_id_var.set(op_id)
    return op_id
