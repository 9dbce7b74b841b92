# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Core Types

Host-side counterparts of the native library's wire-level encodings:
numeric data type tags, status codes, attribute kinds, device placement
policies and optional-rank shapes.
"""

import ctypes
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Sequence

import numpy as np


class DataType(IntEnum):
    """Tensor element types, valued by their native ``TF_DataType`` tag."""

    Float32 = 1
    Float64 = 2
    Int32 = 3
    UInt8 = 4
    Int16 = 5
    Int8 = 6
    String = 7
    Complex64 = 8
    Int64 = 9
    Bool = 10
    QInt8 = 11
    QUInt8 = 12
    QInt32 = 13
    BFloat16 = 14
    QInt16 = 15
    QUInt16 = 16
    UInt16 = 17
    Complex128 = 18
    Float16 = 19
    Resource = 20
    Variant = 21
    UInt32 = 22
    UInt64 = 23

    def to_c(self) -> int:
        """Native type tag."""
        return int(self)

    @classmethod
    def from_c(cls, tag: int) -> "DataType":
        """Decode a native type tag."""
        try:
            return cls(tag)
        except ValueError:
            from ..errors import ValidationError

            raise ValidationError(
                f"unknown native data type tag {tag}",
                parameter="dtype",
                received=str(tag),
            ) from None

    @classmethod
    def from_numpy(cls, dtype) -> "DataType":
        """Map a numpy dtype (or anything ``np.dtype`` accepts)."""
        np_dtype = np.dtype(dtype).newbyteorder("=")
        for member, candidate in _NUMPY_DTYPES.items():
            if np_dtype == candidate:
                return member

        from ..errors import UnsupportedDTypeError

        raise UnsupportedDTypeError(np_dtype, operation="DataType.from_numpy")

    @property
    def numpy_dtype(self) -> np.dtype:
        """numpy dtype with the same memory layout."""
        if self not in _NUMPY_DTYPES:
            from ..errors import UnsupportedDTypeError

            raise UnsupportedDTypeError(self.name, operation="DataType.numpy_dtype")
        return _NUMPY_DTYPES[self]


_NUMPY_DTYPES: dict[DataType, np.dtype] = {
    DataType.Float32: np.dtype(np.float32),
    DataType.Float64: np.dtype(np.float64),
    DataType.Float16: np.dtype(np.float16),
    DataType.Int8: np.dtype(np.int8),
    DataType.Int16: np.dtype(np.int16),
    DataType.Int32: np.dtype(np.int32),
    DataType.Int64: np.dtype(np.int64),
    DataType.UInt8: np.dtype(np.uint8),
    DataType.UInt16: np.dtype(np.uint16),
    DataType.UInt32: np.dtype(np.uint32),
    DataType.UInt64: np.dtype(np.uint64),
    DataType.Bool: np.dtype(np.bool_),
    DataType.Complex64: np.dtype(np.complex64),
    DataType.Complex128: np.dtype(np.complex128),
}


def dtype_size(dtype: DataType) -> int:
    """Get the size in bytes for a data type (0 if variable sized)."""
    sizes = {
        DataType.BFloat16: 2,
        DataType.QInt8: 1,
        DataType.QUInt8: 1,
        DataType.QInt16: 2,
        DataType.QUInt16: 2,
        DataType.QInt32: 4,
    }
    if dtype in _NUMPY_DTYPES:
        return _NUMPY_DTYPES[dtype].itemsize
    return sizes.get(dtype, 0)


def dtype_to_string(dtype: DataType) -> str:
    """Get string representation of data type."""
    return dtype.name.lower()


class StatusCode(IntEnum):
    """Native status codes (``TF_Code``)."""

    Ok = 0
    Cancelled = 1
    Unknown = 2
    InvalidArgument = 3
    DeadlineExceeded = 4
    NotFound = 5
    AlreadyExists = 6
    PermissionDenied = 7
    ResourceExhausted = 8
    FailedPrecondition = 9
    Aborted = 10
    OutOfRange = 11
    Unimplemented = 12
    Internal = 13
    Unavailable = 14
    DataLoss = 15
    Unauthenticated = 16

    @classmethod
    def from_c(cls, code: int) -> "StatusCode":
        try:
            return cls(code)
        except ValueError:
            return cls.Unknown


class AttrType(IntEnum):
    """Attribute kinds (``TF_AttrType``)."""

    String = 0
    Int = 1
    Float = 2
    Bool = 3
    Type = 4
    Shape = 5
    Tensor = 6
    Placeholder = 7
    Func = 8


class DevicePlacementPolicy(IntEnum):
    """How the runtime reacts to inputs that live on the wrong device."""

    Explicit = 0
    Warn = 1
    Silent = 2
    SilentForInt32 = 3


@dataclass(frozen=True, init=False)
class Shape:
    """
    Tensor dimensions with optional rank and optional dimensions.

    ``dims`` is ``None`` when the rank is unknown; otherwise every entry
    is a non-negative int or ``None`` for an unknown dimension. The native
    ``-1`` sentinel is only produced and consumed by ``to_c``/``from_c``.
    """

    dims: Optional[tuple[Optional[int], ...]]

    def __init__(self, dims: Optional[Sequence[Optional[int]]] = ()):
        if dims is not None:
            dims = tuple(dims)
            for d in dims:
                if d is not None and (
                    isinstance(d, (bool, np.bool_))
                    or not isinstance(d, (int, np.integer))
                    or d < 0
                ):
                    from ..errors import ValidationError

                    raise ValidationError(
                        "dimensions must be non-negative ints or None",
                        parameter="dims",
                        received=repr(dims),
                    )
            dims = tuple(None if d is None else int(d) for d in dims)
        object.__setattr__(self, "dims", dims)

    @classmethod
    def unknown(cls) -> "Shape":
        """Shape of unknown rank."""
        return cls(None)

    @classmethod
    def scalar(cls) -> "Shape":
        return cls(())

    def rank(self) -> Optional[int]:
        """Get number of dimensions, or None if unknown."""
        if self.dims is None:
            return None
        return len(self.dims)

    def numel(self) -> Optional[int]:
        """Get total number of elements, or None if not fully defined."""
        if not self.is_fully_defined():
            return None
        result = 1
        for d in self.dims:
            result *= d
        return result

    def is_fully_defined(self) -> bool:
        return self.dims is not None and all(d is not None for d in self.dims)

    def to_c(self) -> tuple[Optional[ctypes.Array], int]:
        """
        Encode for the native layer.

        Returns:
            ``(dims, num_dims)`` where ``dims`` is a ``c_int64`` array (or
            None for unknown rank) and unknown values are ``-1``.
        """
        if self.dims is None:
            return None, -1
        values = [-1 if d is None else d for d in self.dims]
        return (ctypes.c_int64 * len(values))(*values), len(values)

    @classmethod
    def from_c(cls, num_dims: int, dims: Optional[Sequence[int]]) -> "Shape":
        """Decode a native ``(num_dims, dims)`` pair."""
        if num_dims < 0:
            return cls.unknown()
        return cls([None if dims[i] < 0 else int(dims[i]) for i in range(num_dims)])

    def __getitem__(self, idx: int) -> Optional[int]:
        if self.dims is None:
            raise ValueError("Cannot index a shape of unknown rank")
        return self.dims[idx]

    def __len__(self) -> int:
        if self.dims is None:
            raise ValueError("Shape of unknown rank has no length")
        return len(self.dims)

    def __iter__(self):
        if self.dims is None:
            raise ValueError("Cannot iterate a shape of unknown rank")
        return iter(self.dims)

    def __repr__(self) -> str:
        if self.dims is None:
            return "Shape(<unknown>)"
        return f"Shape({list(self.dims)})"
