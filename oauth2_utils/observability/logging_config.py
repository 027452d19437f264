"""
Logging configuration for oauth2-utils.

This module provides:
- Structured JSON logging with python-json-logger
- Human-readable text logging
- Redaction of credential values (client secrets, tokens, passwords)
- Log level configuration per component
"""

import logging
import re
import sys
from typing import Any

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(levelname)s [%(asctime)s] %(name)s - %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

REDACTED = "[REDACTED]"

# Parameters whose values must never reach the logs
SECRET_PARAMETERS = (
    "client_secret",
    "password",
    "access_token",
    "refresh_token",
    "code",
)

_SECRET_PATTERN = re.compile(
    r"\b(" + "|".join(SECRET_PARAMETERS) + r")=.*",
)


class SecretRedactionFilter(logging.Filter):
    """
    Logging filter that masks credential values in log messages.

    Once ``name=`` appears with ``name`` one of SECRET_PARAMETERS, the rest of
    the line is replaced. Passwords and client secrets may contain spaces, so
    the value has no reliable end short of the line break.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact secrets from the record message.

        Args:
            record: LogRecord instance

        Returns:
            Always True; records are rewritten, never dropped
        """
        message = record.getMessage()
        redacted = _SECRET_PATTERN.sub(rf"\1={REDACTED}", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


class StructuredJsonFormatter(JsonFormatter):
    """
    JSON formatter with consistent field naming.

    Every entry carries timestamp, level, logger and message fields.
    """

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        """
        Add custom fields to the log record.

        Args:
            log_record: Dictionary to be serialized as JSON
            record: LogRecord instance
            message_dict: Dictionary of extra fields from log call
        """
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["message"] = record.getMessage()

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(log_format: str = "text", log_level: str = "WARNING") -> None:
    """
    Configure logging for oauth2-utils.

    Args:
        log_format: "json" for JSON logging, "text" for human-readable text (default: "text")
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL) (default: "WARNING")
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    # stdout carries command output, logs go to stderr
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.addFilter(SecretRedactionFilter())

    if log_format.lower() == "json":
        formatter: logging.Formatter = StructuredJsonFormatter(
            JSON_FORMAT,
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    configure_component_loggers(log_level)

    root_logger.debug(f"Logging configured: format={log_format}, level={log_level}")


def configure_component_loggers(default_level: str = "WARNING") -> None:
    """
    Configure log levels for the library's components.

    Args:
        default_level: Log level for the oauth2_utils loggers
    """
    logger_levels = {
        "oauth2_utils": default_level,
        "oauth2_utils.scope": default_level,
        "oauth2_utils.registry": default_level,
        "oauth2_utils.cli": default_level,
    }

    for logger_name, level in logger_levels.items():
        logger = logging.getLogger(logger_name)
        logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
