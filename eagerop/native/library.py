# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
TensorFlow C Library Loader

Locates the native TensorFlow library and declares the ctypes prototypes
of the C API symbols used by EagerOp.

Detection priority:
1. Explicit path (load_library(path) or EAGEROP_LIBRARY_PATH)
2. libtensorflow found on the system library path
3. _pywrap_tensorflow_internal from an installed tensorflow wheel
"""

import ctypes
import ctypes.util
import importlib.util
import logging
import os
from ctypes import POINTER, c_char_p, c_float, c_int, c_int64, c_size_t, c_ubyte, c_void_p
from typing import Any, Optional

from ..config import get_config
from ..errors import LibraryNotFoundError

logger = logging.getLogger("eagerop.native.library")

# Opaque native pointers (TF_Status*, TFE_Op*, ...)
_P = c_void_p

# symbol -> (argtypes, restype)
_PROTOTYPES: dict[str, tuple[list, Any]] = {
    "TF_Version": ([], c_char_p),
    # TF_Status
    "TF_NewStatus": ([], _P),
    "TF_DeleteStatus": ([_P], None),
    "TF_GetCode": ([_P], c_int),
    "TF_Message": ([_P], c_char_p),
    # TF_Tensor
    "TF_AllocateTensor": ([c_int, POINTER(c_int64), c_int, c_size_t], _P),
    "TF_DeleteTensor": ([_P], None),
    "TF_TensorType": ([_P], c_int),
    "TF_NumDims": ([_P], c_int),
    "TF_Dim": ([_P, c_int], c_int64),
    "TF_TensorByteSize": ([_P], c_size_t),
    "TF_TensorData": ([_P], _P),
    "TF_TensorElementCount": ([_P], c_int64),
    # TFE_ContextOptions / TFE_Context
    "TFE_NewContextOptions": ([], _P),
    "TFE_ContextOptionsSetConfig": ([_P, c_void_p, c_size_t, _P], None),
    "TFE_ContextOptionsSetAsync": ([_P, c_ubyte], None),
    "TFE_ContextOptionsSetDevicePlacementPolicy": ([_P, c_int], None),
    "TFE_DeleteContextOptions": ([_P], None),
    "TFE_NewContext": ([_P, _P], _P),
    "TFE_DeleteContext": ([_P], None),
    "TFE_ContextListDevices": ([_P, _P], _P),
    "TFE_ContextClearCaches": ([_P], None),
    # TF_DeviceList
    "TF_DeviceListCount": ([_P], c_int),
    "TF_DeviceListName": ([_P, c_int, _P], c_char_p),
    "TF_DeviceListType": ([_P, c_int, _P], c_char_p),
    "TF_DeviceListMemoryBytes": ([_P, c_int, _P], c_int64),
    "TF_DeleteDeviceList": ([_P], None),
    # TFE_TensorHandle
    "TFE_NewTensorHandle": ([_P, _P], _P),
    "TFE_DeleteTensorHandle": ([_P], None),
    "TFE_TensorHandleDataType": ([_P], c_int),
    "TFE_TensorHandleNumDims": ([_P, _P], c_int),
    "TFE_TensorHandleNumElements": ([_P, _P], c_int64),
    "TFE_TensorHandleDim": ([_P, c_int, _P], c_int64),
    "TFE_TensorHandleDeviceName": ([_P, _P], c_char_p),
    "TFE_TensorHandleBackingDeviceName": ([_P, _P], c_char_p),
    "TFE_TensorHandleCopySharingTensor": ([_P, _P], _P),
    "TFE_TensorHandleResolve": ([_P, _P], _P),
    "TFE_TensorHandleCopyToDevice": ([_P, _P, c_char_p, _P], _P),
    # TFE_Op
    "TFE_NewOp": ([_P, c_char_p, _P], _P),
    "TFE_DeleteOp": ([_P], None),
    "TFE_OpGetName": ([_P, _P], c_char_p),
    "TFE_OpSetDevice": ([_P, c_char_p, _P], None),
    "TFE_OpGetDevice": ([_P, _P], c_char_p),
    "TFE_OpAddInput": ([_P, _P, _P], None),
    "TFE_OpAddInputList": ([_P, POINTER(c_void_p), c_int, _P], None),
    "TFE_OpGetFlatInputCount": ([_P, _P], c_int),
    "TFE_OpGetAttrType": ([_P, c_char_p, POINTER(c_ubyte), _P], c_int),
    "TFE_OpGetInputLength": ([_P, c_char_p, _P], c_int),
    "TFE_OpGetOutputLength": ([_P, c_char_p, _P], c_int),
    "TFE_OpSetAttrString": ([_P, c_char_p, c_void_p, c_size_t], None),
    "TFE_OpSetAttrInt": ([_P, c_char_p, c_int64], None),
    "TFE_OpSetAttrFloat": ([_P, c_char_p, c_float], None),
    "TFE_OpSetAttrBool": ([_P, c_char_p, c_ubyte], None),
    "TFE_OpSetAttrType": ([_P, c_char_p, c_int], None),
    "TFE_OpSetAttrShape": ([_P, c_char_p, POINTER(c_int64), c_int, _P], None),
    "TFE_OpSetAttrFunctionName": ([_P, c_char_p, c_char_p, c_size_t], None),
    "TFE_OpSetAttrTensor": ([_P, c_char_p, _P, _P], None),
    "TFE_OpSetAttrStringList": (
        [_P, c_char_p, POINTER(c_void_p), POINTER(c_size_t), c_int],
        None,
    ),
    "TFE_OpSetAttrTypeList": ([_P, c_char_p, POINTER(c_int), c_int], None),
    "TFE_OpSetAttrIntList": ([_P, c_char_p, POINTER(c_int64), c_int], None),
    "TFE_OpSetAttrFloatList": ([_P, c_char_p, POINTER(c_float), c_int], None),
    "TFE_OpSetAttrBoolList": ([_P, c_char_p, POINTER(c_ubyte), c_int], None),
    "TFE_OpSetAttrShapeList": (
        [_P, c_char_p, POINTER(POINTER(c_int64)), POINTER(c_int), c_int, _P],
        None,
    ),
    "TFE_Execute": ([_P, POINTER(c_void_p), POINTER(c_int), _P], None),
}


class TFLibrary:
    """
    Prototyped view over the loaded TensorFlow C library.

    Symbols are resolved on first access and get their ``argtypes`` and
    ``restype`` declared from the prototype table, so every call site can
    pass plain Python values and ctypes arrays.

    Example:
        lib = get_library()
        status = lib.TF_NewStatus()
    """

    def __init__(self, dll: Any, path: Optional[str] = None):
        """
        Args:
            dll: Loaded library (``ctypes.CDLL``) or any object exposing
                the C API symbols by name.
            path: Where the library was loaded from, for diagnostics.
        """
        self._dll = dll
        self.path = path
        self._symbols: dict[str, Any] = {}

    def __getattr__(self, name: str) -> Any:
        if name not in _PROTOTYPES:
            raise AttributeError(name)
        symbol = self._symbols.get(name)
        if symbol is None:
            try:
                symbol = getattr(self._dll, name)
            except AttributeError:
                raise LibraryNotFoundError(
                    f"symbol {name} is missing from the native library",
                    candidates=[self.path] if self.path else None,
                ) from None
            argtypes, restype = _PROTOTYPES[name]
            symbol.argtypes = argtypes
            symbol.restype = restype
            self._symbols[name] = symbol
        return symbol

    def version(self) -> str:
        """Version string reported by the native library."""
        return self.TF_Version().decode("utf-8")

    def __repr__(self) -> str:
        return f"TFLibrary(path={self.path!r})"


def _candidate_paths(path: Optional[str]) -> list[str]:
    if path:
        return [path]

    candidates = []
    configured = get_config().library_path
    if configured:
        candidates.append(configured)

    system = ctypes.util.find_library("tensorflow")
    if system:
        candidates.append(system)

    spec = importlib.util.find_spec("tensorflow")
    if spec is not None and spec.submodule_search_locations:
        for location in spec.submodule_search_locations:
            python_dir = os.path.join(location, "python")
            if not os.path.isdir(python_dir):
                continue
            for entry in sorted(os.listdir(python_dir)):
                if entry.startswith("_pywrap_tensorflow_internal") and entry.endswith(
                    (".so", ".pyd", ".dylib")
                ):
                    candidates.append(os.path.join(python_dir, entry))

    return candidates


def load_library(path: Optional[str] = None) -> TFLibrary:
    """
    Load the native TensorFlow library.

    Args:
        path: Explicit library path. When omitted, the configured path,
            the system library path and an installed tensorflow wheel are
            tried in that order.

    Returns:
        TFLibrary wrapping the first candidate that loads.

    Raises:
        LibraryNotFoundError: If no candidate can be loaded.
    """
    candidates = _candidate_paths(path)
    failures = []
    for candidate in candidates:
        try:
            dll = ctypes.CDLL(candidate, mode=ctypes.RTLD_GLOBAL)
        except OSError as e:
            failures.append(f"{candidate}: {e}")
            logger.debug(f"Could not load {candidate}: {e}")
            continue
        logger.info(f"Loaded TensorFlow C library from {candidate}")
        return TFLibrary(dll, path=candidate)

    raise LibraryNotFoundError(
        "TensorFlow C library not found" if not candidates else "TensorFlow C library failed to load",
        candidates=failures or candidates,
    )


_library: Optional[TFLibrary] = None


def get_library() -> TFLibrary:
    """Get the process-wide library, loading it on first use."""
    global _library
    if _library is None:
        _library = load_library()
    return _library


def set_library(library: Any, path: Optional[str] = None) -> TFLibrary:
    """
    Install the process-wide library explicitly.

    Args:
        library: A TFLibrary, or a raw library object to wrap.
        path: Optional origin, kept for diagnostics.

    Returns:
        The installed TFLibrary.
    """
    global _library
    if not isinstance(library, TFLibrary):
        library = TFLibrary(library, path=path)
    _library = library
    return _library


def reset_library() -> None:
    """Forget the process-wide library."""
    global _library
    _library = None
