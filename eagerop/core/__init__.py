# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""EagerOp Core Module"""

from .types import (
    AttrType,
    DataType,
    DevicePlacementPolicy,
    Shape,
    StatusCode,
    dtype_size,
    dtype_to_string,
)

__all__ = [
    "AttrType",
    "DataType",
    "DevicePlacementPolicy",
    "Shape",
    "StatusCode",
    "dtype_size",
    "dtype_to_string",
]
