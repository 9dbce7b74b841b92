# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Observability Module

Structured trace logging for op descriptors.
"""

from .logger import (
    EagerOpLogger,
    LogEntry,
    Verbosity,
    get_logger,
    set_verbosity,
)

__all__ = [
    "EagerOpLogger",
    "LogEntry",
    "Verbosity",
    "get_logger",
    "set_verbosity",
]
