# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Eager Execution Module

Components:
- Context / ContextOptions: the native eager runtime
- TensorHandle: tensors managed by a context
- Op: operation descriptor (inputs, attributes, execute)
- raw_ops: typed wrappers for individual ops
"""

from .context import Context, ContextOptions, DeviceInfo
from .tensor_handle import TensorHandle
from .op import Op
from . import raw_ops

__all__ = [
    "Context",
    "ContextOptions",
    "DeviceInfo",
    "TensorHandle",
    "Op",
    "raw_ops",
]
