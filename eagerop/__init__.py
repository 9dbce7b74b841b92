# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp: eager operation binding for the TensorFlow C API

Builds operation descriptors (op name, input tensor handles, typed
attributes) and executes them against a native eager context.

Example:
    import numpy as np
    import eagerop
    from eagerop.eager import raw_ops

    with eagerop.Context() as ctx:
        x = eagerop.TensorHandle.from_numpy(ctx, np.array([[1, 2], [3, 4]], dtype=np.int32))
        z = raw_ops.add(ctx, x, x)
        print(z.to_numpy())
"""

__version__ = "0.1.0"
__author__ = "Wahyu Ardiansyah"

from .core.types import (
    AttrType,
    DataType,
    DevicePlacementPolicy,
    Shape,
    StatusCode,
    dtype_size,
    dtype_to_string,
)
from .core.tensor import Tensor

# Errors
from .errors import (
    EagerOpError,
    StatusError,
    InvalidArgumentError,
    NotFoundError,
    UnknownOpError,
    FailedPreconditionError,
    NulByteError,
    StringDecodeError,
    ClosedHandleError,
    UnsupportedDTypeError,
    ValidationError,
    ConfigurationError,
    LibraryNotFoundError,
    error_from_status,
)

# Configuration
from .config import EagerOpConfig, configure, get_config, reset_config

# Native library
from .native import Status, get_library, load_library, set_library

# Eager execution
from .eager import Context, ContextOptions, DeviceInfo, Op, TensorHandle, raw_ops

# Observability
from .observability import Verbosity, set_verbosity

__all__ = [
    # Core types
    "AttrType",
    "DataType",
    "DevicePlacementPolicy",
    "Shape",
    "StatusCode",
    "Tensor",
    "dtype_size",
    "dtype_to_string",
    # Errors
    "EagerOpError",
    "StatusError",
    "InvalidArgumentError",
    "NotFoundError",
    "UnknownOpError",
    "FailedPreconditionError",
    "NulByteError",
    "StringDecodeError",
    "ClosedHandleError",
    "UnsupportedDTypeError",
    "ValidationError",
    "ConfigurationError",
    "LibraryNotFoundError",
    "error_from_status",
    # Configuration
    "EagerOpConfig",
    "configure",
    "get_config",
    "reset_config",
    # Native library
    "Status",
    "get_library",
    "load_library",
    "set_library",
    # Eager execution
    "Context",
    "ContextOptions",
    "DeviceInfo",
    "Op",
    "TensorHandle",
    "raw_ops",
    # Observability
    "Verbosity",
    "set_verbosity",
]
