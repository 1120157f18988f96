"""
Logging formatters for the Shopify gateway
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional


def _record_entry(record: logging.LogRecord) -> Dict[str, Any]:
    """
    Base JSON entry for a record.

    Records logged through ``StructuredLogger`` carry the bare message as
    ``event`` and their keyword fields as ``extra_fields``; those fields
    become top-level keys so ``shop`` or ``wait_seconds`` can be queried
    directly. Other records fall back to the rendered message.
    """
    entry: Dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(record.created).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": getattr(record, "event", None) or record.getMessage(),
    }
    for key, value in getattr(record, "extra_fields", {}).items():
        entry.setdefault(key, value)
    return entry


class StructuredFormatter(logging.Formatter):
    """JSON entries with source location and the asyncio task name"""

    def format(self, record: logging.LogRecord) -> str:
        entry = _record_entry(record)
        entry["source"] = f"{record.module}.{record.funcName}:{record.lineno}"
        # Every asyncio task shares one thread, the task name tells them apart
        entry["task"] = getattr(record, "taskName", None)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class JSONFormatter(logging.Formatter):
    """Flat JSON formatter for machine-readable logs"""

    def format(self, record: logging.LogRecord) -> str:
        entry = _record_entry(record)
        entry["process"] = record.process
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter with colors"""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",  # Reset
    }

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS["RESET"])
        reset = self.COLORS["RESET"]

        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        formatted = f"{color}[{timestamp}] {record.levelname:8s} {record.name}: {record.getMessage()}{reset}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


class SimpleFormatter(logging.Formatter):
    """Simple, clean formatter for basic logging"""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        if fmt is None:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        if datefmt is None:
            datefmt = "%Y-%m-%d %H:%M:%S"

        super().__init__(fmt, datefmt)


def create_formatter(formatter_type: str) -> logging.Formatter:
    """Pick a formatter by name, falling back to the simple one"""
    if formatter_type == "console":
        return ConsoleFormatter()
    if formatter_type == "json":
        return JSONFormatter()
    if formatter_type == "structured":
        return StructuredFormatter()
    return SimpleFormatter()
