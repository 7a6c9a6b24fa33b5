"""Structured logging configuration for the issue sync.

- JSON structured logging with StructuredFormatter
- Logger hierarchy under the issue_sync namespace
- Environment variable control (ISSUE_SYNC_LOG_LEVEL, ISSUE_SYNC_LOG_FORMAT)

Logs go to stderr: stdout is reserved for values consumed by workflow steps
(mapped issue type, created issue key).
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

LOGGER_NAMESPACE = "issue_sync"

# Extra keys whose values must never reach log output (Jira API token, Basic auth header)
SENSITIVE_KEYS = {
    "password",
    "token",
    "api_token",
    "secret",
    "apikey",
    "api_key",
    "authorization",
    "credential",
    "credentials",
    "auth",
    "auth_header",
    "bearer",
}

_STANDARD_FIELDS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


def _redact(values: dict) -> dict:
    """Mask sensitive keys, including inside nested dicts such as request headers."""
    return {
        k: (
            "[REDACTED]"
            if str(k).lower() in SENSITIVE_KEYS
            else _redact(v) if isinstance(v, dict) else v
        )
        for k, v in values.items()
    }


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    Outputs logs in JSON format with:
    - timestamp: UTC ISO 8601 format with 'Z' suffix
    - level: Log level name (INFO, ERROR, etc.)
    - logger: Logger name (issue_sync hierarchy)
    - message: Log message
    - context: Extras dict merged from LogRecord attributes

    Sensitive keys (token, authorization, etc.) are redacted.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extras = _redact(
            {
                k: v
                for k, v in record.__dict__.items()
                if k not in _STANDARD_FIELDS and not k.startswith("_")
            }
        )

        if extras:
            log_data["context"] = extras

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter, used when ISSUE_SYNC_LOG_FORMAT=text."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


def configure_logging(level: Optional[str] = None) -> None:
    """Configure structured logging for all issue_sync loggers.

    Args:
        level: Optional log level override. If not provided, uses
               ISSUE_SYNC_LOG_LEVEL environment variable (default: INFO).

    Environment Variables:
        ISSUE_SYNC_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
        ISSUE_SYNC_LOG_FORMAT: Output format (json, text). Default: json
    """
    if level is None:
        level = os.getenv("ISSUE_SYNC_LOG_LEVEL", "INFO")

    log_level = getattr(logging, level.upper(), logging.INFO)

    log_format = os.getenv("ISSUE_SYNC_LOG_FORMAT", "json").lower()
    if log_format == "text":
        formatter = TextFormatter()
    else:
        formatter = StructuredFormatter()

    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(log_level)

    # Idempotent: repeated calls must not stack handlers
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setFormatter(formatter)

    logger.propagate = False
