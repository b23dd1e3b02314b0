"""Structured JSON logger.

Wraps Python's logging module and emits one JSON object per line:

    {
        "timestamp": "2026-02-01T09:10:00.123456+00:00",
        "level": "INFO",
        "service": "onboarding-tracker",
        "component": "scans",
        "event": "scan.accepted",
        "message": "Checkpoint completed",
        "metadata": {"studentId": "S-001", "checkpoint": "arrival"}
    }
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent

SERVICE_NAME = "onboarding-tracker"
ROOT_LOGGER_NAME = "onboarding_tracker"


class StructuredLogger:
    """JSON structured logger bound to one component.

    Thread-safe via Python's logging module.
    """

    def __init__(self, component: str, level: Optional[int] = None, logger_name: Optional[str] = None):
        self.component = component
        self.logger_name = logger_name or f"{ROOT_LOGGER_NAME}.{component}"
        self.logger = logging.getLogger(self.logger_name)
        if level is not None:
            self.logger.setLevel(level)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        log_level = getattr(logging, level)
        if not self.logger.isEnabledFor(log_level):
            return

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "service": SERVICE_NAME,
            "component": self.component,
            "event": event.value,
            "message": message,
        }

        if metadata:
            log_entry["metadata"] = metadata

        if exc_info:
            log_entry["exception"] = {
                "type": type(exc_info).__name__,
                "message": str(exc_info),
            }

        self.logger.log(
            log_level,
            json.dumps(log_entry, default=str),
            exc_info=exc_info if level == "ERROR" else None,
        )

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log("DEBUG", event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log("INFO", event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log("WARNING", event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        self._log("ERROR", event, message, metadata, exc_info)


class JSONFormatter(logging.Formatter):
    """Pass-through formatter: StructuredLogger messages are already JSON."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a JSON stream handler to the package root logger (idempotent)."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(isinstance(h.formatter, JSONFormatter) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    return root


def create_logger(component: str, level: Optional[int] = None) -> StructuredLogger:
    return StructuredLogger(component=component, level=level)
