# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for EagerOp Observability Module

Validates:
- Verbosity levels
- Structured log entries (text and JSON)
- Logger singleton and handlers
- Op lifecycle trace events
"""

import io
import json

import numpy as np

from eagerop.config import configure
from eagerop.eager import Op, TensorHandle
from eagerop.observability import (
    EagerOpLogger,
    LogEntry,
    Verbosity,
    get_logger,
    set_verbosity,
)


class TestVerbosity:
    """Tests for Verbosity enum."""

    def test_verbosity_values(self):
        assert Verbosity.SILENT == 0
        assert Verbosity.ERROR == 1
        assert Verbosity.WARNING == 2
        assert Verbosity.INFO == 3
        assert Verbosity.DEBUG == 4

    def test_verbosity_comparison(self):
        assert Verbosity.DEBUG > Verbosity.INFO
        assert Verbosity.ERROR > Verbosity.SILENT


class TestLogEntry:
    """Tests for LogEntry dataclass."""

    def test_to_text(self):
        entry = LogEntry(
            level="DEBUG",
            message="Executed op",
            timestamp="2025-01-01T00:00:00",
            component="eager",
            operation="Add",
            device="/device:CPU:0",
            duration_ms=0.25,
        )
        text = entry.to_text()
        assert "[DEBUG]" in text
        assert "[eager]" in text
        assert "Add:" in text
        assert "@/device:CPU:0" in text
        assert "(0.250ms)" in text

    def test_to_json_drops_empty_fields(self):
        entry = LogEntry(level="INFO", message="hello", timestamp="t")
        data = json.loads(entry.to_json())
        assert data["message"] == "hello"
        assert "operation" not in data
        assert "extra" not in data

    def test_to_json_keeps_extra(self):
        entry = LogEntry(level="INFO", message="m", timestamp="t", extra={"num_outputs": 1})
        assert json.loads(entry.to_json())["extra"] == {"num_outputs": 1}


class TestEagerOpLogger:
    """Tests for the logger singleton."""

    def test_singleton(self):
        assert get_logger() is EagerOpLogger.get()

    def test_default_verbosity(self):
        assert get_logger().get_verbosity() == Verbosity.INFO

    def test_verbosity_from_config(self):
        configure(verbosity=4)
        assert get_logger().get_verbosity() == Verbosity.DEBUG

    def test_set_verbosity_clamped(self):
        set_verbosity(10)
        assert get_logger().get_verbosity() == Verbosity.DEBUG
        set_verbosity(-3)
        assert get_logger().get_verbosity() == Verbosity.SILENT

    def test_filtering(self):
        logger = get_logger()
        output = io.StringIO()
        logger.set_output(output)
        logger.set_verbosity(Verbosity.WARNING)
        logger.info("hidden")
        logger.warning("shown")
        assert "hidden" not in output.getvalue()
        assert "[WARNING]" in output.getvalue()

    def test_json_output(self):
        logger = get_logger()
        output = io.StringIO()
        logger.set_output(output)
        logger.set_json_format(True)
        logger.error("failed", component="native", operation="Add")
        data = json.loads(output.getvalue().strip())
        assert data["level"] == "ERROR"
        assert data["component"] == "native"
        assert data["operation"] == "Add"

    def test_handler_receives_entries(self):
        logger = get_logger()
        logger.set_output(io.StringIO())
        entries = []
        logger.add_handler(entries.append)
        logger.info("hello", key="value")
        assert len(entries) == 1
        assert entries[0].extra == {"key": "value"}


class TestOpTraceEvents:
    """Op creation and execution emit debug entries."""

    def test_execute_is_traced(self, ctx):
        logger = get_logger()
        logger.set_output(io.StringIO())
        logger.set_verbosity(Verbosity.DEBUG)
        entries = []
        logger.add_handler(entries.append)

        x = TensorHandle.from_numpy(ctx, np.array([1, 2], dtype=np.int32))
        with Op(ctx, "Identity") as op:
            op.add_input(x)
            op.execute()

        messages = [(e.message, e.operation) for e in entries]
        assert ("Created op", "Identity") in messages
        assert ("Executed op", "Identity") in messages
        executed = [e for e in entries if e.message == "Executed op"][0]
        assert executed.duration_ms is not None
        assert executed.extra["num_outputs"] == 1

    def test_nothing_logged_at_info(self, ctx):
        logger = get_logger()
        output = io.StringIO()
        logger.set_output(output)

        x = TensorHandle.from_numpy(ctx, np.array([1.0], dtype=np.float32))
        with Op(ctx, "Identity") as op:
            op.add_input(x)
            op.execute()
        assert output.getvalue() == ""
