# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Native Layer

ctypes access to the TensorFlow C API:
- TFLibrary: prototyped symbol table over the loaded library
- NativeHandle: exclusive ownership of one native pointer
- Status: TF_Status out-parameter mapped to EagerOp errors
"""

from .library import (
    TFLibrary,
    get_library,
    load_library,
    reset_library,
    set_library,
)
from .handle import NativeHandle
from .status import Status
from .strings import decode_c_string, encode_bytes, encode_c_string

__all__ = [
    "TFLibrary",
    "get_library",
    "load_library",
    "reset_library",
    "set_library",
    "NativeHandle",
    "Status",
    "decode_c_string",
    "encode_bytes",
    "encode_c_string",
]
