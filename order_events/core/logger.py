"""
Centralized logging configuration for the order events services.

Provides a structured logger with:
- Console (coloured) or JSON output selected by LOG_FORMAT
- A ``metadata`` dict attached to every entry
- ``bind()`` for request-scoped loggers carrying trace context
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
SERVICE_NAME = os.getenv("SERVICE_NAME", "order-events")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
LOG_FORMAT = os.getenv("LOG_FORMAT", "console").strip().lower()

# WARN is accepted as an alias the way the sidecar tooling spells it
_LEVEL_ALIASES = {"WARN": "WARNING"}

LOGGER_NAME = "order_events"


def resolve_log_level(level: str) -> int:
    """Map a LOG_LEVEL string to a logging level, defaulting to INFO"""
    name = _LEVEL_ALIASES.get(level.strip().upper(), level.strip().upper())
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


class StructuredLogger:
    """
    Logger with structured entries and optional bound context.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None, py_logger: Optional[logging.Logger] = None):
        self.service_name = SERVICE_NAME
        self.environment = ENVIRONMENT
        self.context = dict(context or {})
        self._logger = py_logger or logging.getLogger(LOGGER_NAME)

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger whose entries also carry ``context``"""
        return StructuredLogger({**self.context, **context}, self._logger)

    def _build_log_entry(
        self,
        level: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ) -> Dict[str, Any]:
        """Build structured log entry"""
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level.upper(),
            "service": self.service_name,
            "environment": self.environment,
            "message": message,
        }
        entry.update(self.context)

        if metadata:
            entry["metadata"] = metadata

        entry.update(kwargs)
        return entry

    def _log(self, level: str, message: str, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        log_level = resolve_log_level(level)
        if not self._logger.isEnabledFor(log_level):
            return

        log_entry = self._build_log_entry(level, message, metadata, **kwargs)
        self._logger.log(log_level, message, extra={"structured": log_entry})

    def debug(self, message: str, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("DEBUG", message, metadata, **kwargs)

    def info(self, message: str, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("INFO", message, metadata, **kwargs)

    def warning(self, message: str, metadata: Optional[Dict[str, Any]] = None, **kwargs):
        self._log("WARNING", message, metadata, **kwargs)

    def error(
        self,
        message: str,
        error: Optional[Union[str, Exception]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        """Error level logging"""
        metadata = dict(metadata or {})

        if error:
            if isinstance(error, Exception):
                metadata["error"] = {
                    "type": type(error).__name__,
                    "message": str(error),
                }
            else:
                metadata["error"] = {"message": str(error)}

        self._log("ERROR", message, metadata, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        entry = getattr(record, "structured", None)
        if entry is None:
            entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": record.levelname,
                "service": SERVICE_NAME,
                "message": record.getMessage(),
            }
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored console formatter for development"""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'
    }

    # Shown inline after the message, in this order
    CONTEXT_FIELDS = ("traceId", "spanId", "method", "path")

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']

        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        line = f"{color}[{timestamp}] {record.levelname}{reset} - {record.getMessage()}"

        entry = getattr(record, "structured", None) or {}
        fields = [f"{key}={entry[key]}" for key in self.CONTEXT_FIELDS if key in entry]
        fields.extend(f"{key}={value}" for key, value in (entry.get("metadata") or {}).items())
        if fields:
            line = f"{line} {' '.join(fields)}"
        return line


def configure_logging(level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """Install a single stdout handler on the service logger"""
    py_logger = logging.getLogger(LOGGER_NAME)
    py_logger.handlers.clear()
    py_logger.setLevel(resolve_log_level(level))
    py_logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if log_format == "json" else ConsoleFormatter())
    py_logger.addHandler(handler)


configure_logging()

# Create and export the logger instance
logger = StructuredLogger()
