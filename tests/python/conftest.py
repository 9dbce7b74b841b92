# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Pytest configuration for EagerOp Python tests.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so we can import eagerop
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from eagerop.config import reset_config  # noqa: E402
from eagerop.native import reset_library, set_library  # noqa: E402
from eagerop.observability import EagerOpLogger  # noqa: E402

from fake_native import FakeTensorFlow  # noqa: E402

# Skip test modules that require optional dependencies not installed
collect_ignore = []

# Check for hypothesis
try:
    import hypothesis  # noqa: F401
except ImportError:
    collect_ignore.append("test_property_based.py")

_ENV_VARS = [
    "EAGEROP_LIBRARY_PATH",
    "EAGEROP_DEVICE",
    "EAGEROP_ASYNC",
    "EAGEROP_PLACEMENT_POLICY",
    "EAGEROP_VERBOSITY",
]


@pytest.fixture(autouse=True)
def clean_state(monkeypatch):
    """Isolate process-wide library, configuration and logger."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_library()
    reset_config()
    EagerOpLogger.reset()
    yield
    reset_library()
    reset_config()
    EagerOpLogger.reset()


@pytest.fixture
def fake_tf():
    """Fake native library installed as the process-wide library."""
    fake = FakeTensorFlow()
    set_library(fake.symbols(), path="fake-libtensorflow.so")
    return fake


@pytest.fixture
def ctx(fake_tf):
    """Eager context on the fake library."""
    from eagerop.eager import Context

    context = Context()
    yield context
    context.close()
