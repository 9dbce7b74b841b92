# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for eager contexts and native library loading.
"""

import pytest

from eagerop.config import configure
from eagerop.core.types import DevicePlacementPolicy
from eagerop.eager import Context, ContextOptions, DeviceInfo
from eagerop.errors import ClosedHandleError, InvalidArgumentError, LibraryNotFoundError
from eagerop.native import TFLibrary, get_library, load_library, set_library

from fake_native import CPU0, FakeTensorFlow


class TestContextOptions:
    """Tests for ContextOptions."""

    def test_defaults(self, fake_tf):
        with ContextOptions() as options:
            recorded = fake_tf.options[options.handle]
            assert recorded["async"] == 0
            assert recorded["policy"] is None
            assert options.async_execution is False

    def test_explicit_values(self, fake_tf):
        with ContextOptions(
            async_execution=True,
            placement_policy=DevicePlacementPolicy.Silent,
            config=b"",
        ) as options:
            recorded = fake_tf.options[options.handle]
            assert recorded["async"] == 1
            assert recorded["policy"] == 2
            assert recorded["config"] == b""

    def test_defaults_from_config(self, fake_tf):
        configure(async_execution=True, placement_policy=DevicePlacementPolicy.Warn)
        with ContextOptions() as options:
            assert fake_tf.options[options.handle]["async"] == 1
            assert fake_tf.options[options.handle]["policy"] == 1

    def test_invalid_config_proto(self, fake_tf):
        with pytest.raises(InvalidArgumentError):
            ContextOptions(config=b"\xff\x00")


class TestContext:
    """Tests for Context."""

    def test_create_and_close(self, fake_tf):
        ctx = Context()
        assert fake_tf.live("contexts") == 1
        # Options created internally are released right away
        assert fake_tf.live("options") == 0
        ctx.close()
        ctx.close()
        assert fake_tf.deleted["contexts"] == 1

    def test_with_options(self, fake_tf):
        with ContextOptions(async_execution=True) as options:
            with Context(options) as ctx:
                assert fake_tf.contexts[ctx.handle]["async"] == 1
            # Caller-owned options stay open
            assert not options.closed

    def test_list_devices(self, fake_tf):
        fake_tf.devices.append(("/job:localhost/replica:0/task:0/device:GPU:0", "GPU", 2**30))
        with Context() as ctx:
            devices = ctx.list_devices()
        assert devices == [
            DeviceInfo(CPU0, "CPU", 0),
            DeviceInfo("/job:localhost/replica:0/task:0/device:GPU:0", "GPU", 2**30),
        ]
        assert fake_tf.live("device_lists") == 0

    def test_clear_caches(self, fake_tf):
        with Context() as ctx:
            ctx.clear_caches()
            assert fake_tf.contexts[ctx.handle]["cleared"] is True

    def test_use_after_close(self, fake_tf):
        ctx = Context()
        ctx.close()
        with pytest.raises(ClosedHandleError):
            ctx.list_devices()


class TestLibrary:
    """Tests for native library resolution."""

    def test_set_library_wraps_raw_object(self):
        fake = FakeTensorFlow(version="9.9.9")
        library = set_library(fake.symbols(), path="custom.so")
        assert isinstance(library, TFLibrary)
        assert get_library() is library
        assert library.path == "custom.so"
        assert library.version() == "9.9.9"

    def test_prototypes_declared(self, fake_tf):
        library = get_library()
        symbol = library.TFE_Execute
        assert symbol.argtypes is not None
        assert len(symbol.argtypes) == 4
        assert library.TFE_Execute is symbol

    def test_missing_symbol(self, fake_tf):
        fake_tf.missing.add("TFE_OpGetName")
        with pytest.raises(LibraryNotFoundError) as exc_info:
            get_library().TFE_OpGetName
        assert "TFE_OpGetName" in str(exc_info.value)

    def test_undeclared_symbol(self, fake_tf):
        with pytest.raises(AttributeError):
            get_library().TF_GraphNextOperation

    def test_load_explicit_path_failure(self, tmp_path):
        missing = str(tmp_path / "libtensorflow.so")
        with pytest.raises(LibraryNotFoundError) as exc_info:
            load_library(missing)
        assert exc_info.value.candidates[0].startswith(missing)

    def test_load_uses_configured_path_first(self, tmp_path, monkeypatch):
        import eagerop.native.library as library_module

        configured = str(tmp_path / "configured.so")
        configure(library_path=configured)
        monkeypatch.setattr(library_module.ctypes.util, "find_library", lambda name: None)
        monkeypatch.setattr(library_module.importlib.util, "find_spec", lambda name: None)
        with pytest.raises(LibraryNotFoundError) as exc_info:
            load_library()
        assert [c.split(":")[0] for c in exc_info.value.candidates] == [configured]

    def test_no_candidates(self, monkeypatch):
        import eagerop.native.library as library_module

        monkeypatch.setattr(library_module.ctypes.util, "find_library", lambda name: None)
        monkeypatch.setattr(library_module.importlib.util, "find_spec", lambda name: None)
        with pytest.raises(LibraryNotFoundError) as exc_info:
            load_library()
        assert "not found" in str(exc_info.value)
