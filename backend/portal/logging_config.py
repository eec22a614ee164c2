"""
Structured JSON logging configuration.

Provides structured logging with channels (http, db, auth, scoring,
leaderboard, files), request ID tracking, and context-rich log entries.
All log output is JSON written to stdout.

Passwords and password hashes must never be passed as context or extra data.
"""

import logging
import json
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from portal import config

# Request ID for the request currently being handled; attached to every
# log entry emitted while that request is in flight.
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

CHANNELS = ["http", "db", "auth", "scoring", "leaderboard", "files"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Formatter that renders each record as one JSON object with:
    - timestamp: ISO 8601 timestamp in UTC
    - level: log severity
    - message: human-readable message
    - channel: log source category
    - context: business context (request_id, student_id, submission_id)
    - extra: additional metadata (ip, duration_ms, ...)
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1] if "." in record.name else "app"),
            "context": {
                "request_id": request_id_var.get(""),
                **(getattr(record, "context", {}) or {})
            },
            "extra": getattr(record, "extra_data", {}) or {}
        }
        return json.dumps(log_entry, default=str)


def setup_logging():
    """
    Configure the root logger with the JSON formatter on stdout and
    set the level of every channel logger.
    """
    level = getattr(logging, config.LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        logging.getLogger(f"portal.{channel}").setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    """Get the logger for one of the CHANNELS."""
    return logging.getLogger(f"portal.{channel}")


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit a structured log entry with business context and extra metadata.

    Args:
        logger: The channel logger to use
        level: Log level string (INFO, WARNING, ERROR, DEBUG)
        message: Human-readable log message
        context: Business context dict (student_id, submission_id)
        extra_data: Additional metadata dict (ip, duration_ms, query_params)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={"context": context or {}, "extra_data": extra_data or {}, "channel": logger.name.split(".")[-1]}
    )


def generate_request_id() -> str:
    """Generate a new UUID for request tracking."""
    return str(uuid.uuid4())
