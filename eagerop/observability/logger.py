# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Structured Logger for EagerOp

Trace events for op descriptors (creation, execution, timing) with text
or JSON output.

Example:
    from eagerop.observability import get_logger, Verbosity

    logger = get_logger()
    logger.set_verbosity(Verbosity.DEBUG)
    logger.set_json_format(True)
"""

import json
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Callable, Optional, TextIO

from ..config import get_config


class Verbosity(IntEnum):
    """
    Logging verbosity levels.

    Uses IntEnum for numeric comparison (e.g., if verbosity >= INFO).
    """

    SILENT = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4


@dataclass
class LogEntry:
    """
    Structured log entry.

    Attributes:
        level: Log level (ERROR, WARNING, INFO, DEBUG)
        message: Log message
        timestamp: ISO format timestamp
        component: Source component (native, eager, cli)
        operation: Optional op name
        device: Optional device name
        duration_ms: Optional duration in milliseconds
        extra: Additional context fields
    """

    level: str
    message: str
    timestamp: str
    component: str = "eagerop"
    operation: Optional[str] = None
    device: Optional[str] = None
    duration_ms: Optional[float] = None
    extra: dict = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if not data.get("extra"):
            data.pop("extra", None)
        return json.dumps(data, default=str)

    def to_text(self) -> str:
        """Convert to human-readable text format."""
        parts = [f"[{self.level}]", f"[{self.component}]"]
        if self.operation:
            parts.append(f"{self.operation}:")
        parts.append(self.message)
        if self.device:
            parts.append(f"@{self.device}")
        if self.duration_ms is not None:
            parts.append(f"({self.duration_ms:.3f}ms)")
        return " ".join(parts)


class EagerOpLogger:
    """
    Structured logger for EagerOp.

    Singleton; the initial verbosity comes from EAGEROP_VERBOSITY.
    """

    _instance: Optional["EagerOpLogger"] = None

    def __init__(self):
        self._verbosity = Verbosity.INFO
        self._output: TextIO = sys.stderr
        self._json_format = False
        self._handlers: list[Callable[[LogEntry], None]] = []

        configured = get_config().verbosity
        if configured is not None:
            self.set_verbosity(configured)

    @classmethod
    def get(cls) -> "EagerOpLogger":
        """Get the singleton logger instance."""
        if cls._instance is None:
            cls._instance = EagerOpLogger()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    def set_verbosity(self, level: int) -> None:
        """
        Set verbosity level.

        Args:
            level: Verbosity level (0-4 or Verbosity enum); clamped.
        """
        self._verbosity = Verbosity(max(0, min(4, int(level))))

    def get_verbosity(self) -> Verbosity:
        return self._verbosity

    def is_enabled(self, level: Verbosity) -> bool:
        return self._verbosity >= level

    def set_json_format(self, enabled: bool) -> None:
        self._json_format = enabled

    def set_output(self, output: TextIO) -> None:
        self._output = output

    def add_handler(self, handler: Callable[[LogEntry], None]) -> None:
        """Add a callback receiving every emitted entry."""
        self._handlers.append(handler)

    def _log(self, level: Verbosity, message: str, context: dict) -> None:
        if self._verbosity < level:
            return
        entry = LogEntry(
            level=level.name,
            message=message,
            timestamp=datetime.now().isoformat(),
            component=context.pop("component", "eagerop"),
            operation=context.pop("operation", None),
            device=context.pop("device", None),
            duration_ms=context.pop("duration_ms", None),
            extra=context,
        )
        line = entry.to_json() if self._json_format else entry.to_text()
        self._output.write(line + "\n")
        self._output.flush()

        for handler in self._handlers:
            handler(entry)

    def debug(self, message: str, **context) -> None:
        self._log(Verbosity.DEBUG, message, context)

    def info(self, message: str, **context) -> None:
        self._log(Verbosity.INFO, message, context)

    def warning(self, message: str, **context) -> None:
        self._log(Verbosity.WARNING, message, context)

    def error(self, message: str, **context) -> None:
        self._log(Verbosity.ERROR, message, context)


def get_logger() -> EagerOpLogger:
    """Get the global EagerOp logger."""
    return EagerOpLogger.get()


def set_verbosity(level: int) -> None:
    """
    Set global verbosity level.

    Args:
        level: Verbosity level (0=SILENT, 1=ERROR, 2=WARNING, 3=INFO, 4=DEBUG)
    """
    EagerOpLogger.get().set_verbosity(level)
