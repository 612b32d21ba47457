"""
JSON logging for the registry.

Every entry is one JSON object on stdout. Loggers are named
``roster.<channel>``; the channel ends up as a field of the entry and the
current request id is merged into its context.
"""

import logging
import json
import os
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# Set by the HTTP middleware, read by the formatter
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGER_PREFIX = "roster"
CHANNELS = ("http", "db", "xml")


def channel_of(logger_name: str) -> str:
    """Channel part of a logger name; "app" for loggers outside the prefix."""
    prefix, _, channel = logger_name.partition(".")
    if prefix != LOGGER_PREFIX or not channel:
        return "app"
    return channel


class StructuredJsonFormatter(logging.Formatter):
    """Render a record as {timestamp, level, message, channel, context, extra}."""

    def format(self, record: logging.LogRecord) -> str:
        context = {"request_id": request_id_var.get("")}
        context.update(getattr(record, "context", None) or {})

        return json.dumps({
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", None) or channel_of(record.name),
            "context": context,
            "extra": getattr(record, "extra_data", None) or {},
        }, default=str)


def setup_logging():
    """Install a single stdout JSON handler on the root logger."""
    level = getattr(logging, LOG_LEVEL, logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredJsonFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for channel in CHANNELS:
        get_logger(channel).setLevel(level)

    return root_logger


def get_logger(channel: str) -> logging.Logger:
    if channel not in CHANNELS:
        raise ValueError("Unknown log channel: {}".format(channel))
    return logging.getLogger("{}.{}".format(LOGGER_PREFIX, channel))


def log_with_context(logger: logging.Logger, level: str, message: str,
                     context: dict = None, extra_data: dict = None):
    """
    Emit one entry with business context (student_id, discipline) and
    extra metadata (duration_ms, size). Unknown level names log at INFO.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(
        log_level,
        message,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": channel_of(logger.name),
        }
    )


def generate_request_id() -> str:
    return str(uuid.uuid4())
