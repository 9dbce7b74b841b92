# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Host Tensor (TF_Tensor)

A dense tensor whose buffer is allocated and owned by the native library.
Data moves in and out through numpy.

Example:
    t = Tensor([2, 2], DataType.Int32).with_values([1, 2, 3, 4])
    t.to_numpy()  # array([[1, 2], [3, 4]], dtype=int32)
"""

import ctypes
from typing import Any, Optional, Sequence

import numpy as np

from ..errors import (
    ResourceExhaustedError,
    UnsupportedDTypeError,
    ValidationError,
    format_shape_mismatch,
)
from ..native.handle import NativeHandle
from ..native.library import TFLibrary, get_library
from .types import DataType, Shape, dtype_size, dtype_to_string

_VARIABLE_SIZE_TYPES = {DataType.String, DataType.Resource, DataType.Variant}


class Tensor(NativeHandle):
    """Owned TF_Tensor with a fixed-size element type."""

    _kind = "tensor"
    _deleter = "TF_DeleteTensor"

    def __init__(
        self,
        dims: Sequence[int],
        dtype: DataType = DataType.Float32,
        library: Optional[TFLibrary] = None,
    ):
        """
        Allocate a zero-filled tensor.

        Args:
            dims: Fully defined dimensions.
            dtype: Element type.
            library: Native library; defaults to the process-wide one.
        """
        library = library if library is not None else get_library()
        dtype = DataType(dtype)
        if dtype in _VARIABLE_SIZE_TYPES or dtype_size(dtype) == 0:
            raise UnsupportedDTypeError(dtype.name, operation="Tensor")

        dims = [int(d) for d in dims]
        if any(d < 0 for d in dims):
            raise ValidationError(
                "tensor dimensions must be non-negative",
                parameter="dims",
                received=str(dims),
            )

        num_elements = 1
        for d in dims:
            num_elements *= d
        nbytes = num_elements * dtype_size(dtype)

        c_dims = (ctypes.c_int64 * len(dims))(*dims)
        handle = library.TF_AllocateTensor(dtype.to_c(), c_dims, len(dims), nbytes)
        if not handle:
            raise ResourceExhaustedError(
                f"could not allocate {nbytes} bytes",
                context={"dims": dims, "dtype": dtype_to_string(dtype)},
            )
        super().__init__(handle, library)

        if nbytes:
            ctypes.memset(self._data_pointer(), 0, nbytes)

    @classmethod
    def _adopt(cls, handle: Any, library: TFLibrary) -> "Tensor":
        """Take ownership of a TF_Tensor produced by the native library."""
        tensor = cls.__new__(cls)
        NativeHandle.__init__(tensor, handle, library)
        return tensor

    @classmethod
    def from_numpy(
        cls,
        array: Any,
        dtype: Optional[DataType] = None,
        library: Optional[TFLibrary] = None,
    ) -> "Tensor":
        """
        Allocate a tensor holding a copy of ``array``.

        Args:
            array: Anything ``np.asarray`` accepts.
            dtype: Element type; inferred from the array when omitted.
            library: Native library; defaults to the process-wide one.
        """
        if dtype is not None:
            dtype = DataType(dtype)
            array = np.asarray(array, dtype=dtype.numpy_dtype)
        else:
            array = np.asarray(array)
            dtype = DataType.from_numpy(array.dtype)
            # Native byte order for the memmove below
            array = array.astype(dtype.numpy_dtype, copy=False)

        # ascontiguousarray promotes 0-d arrays to 1-d
        shape = array.shape
        array = np.ascontiguousarray(array).reshape(shape)
        tensor = cls(shape, dtype, library=library)
        tensor._copy_in(array)
        return tensor

    def with_values(self, values: Any) -> "Tensor":
        """
        Fill the tensor from a flat (or same-shaped) sequence.

        Returns:
            self, for chaining.
        """
        array = np.ascontiguousarray(values, dtype=self.dtype.numpy_dtype).ravel()
        expected = self.num_elements
        if array.size != expected:
            raise format_shape_mismatch(expected, array.size)
        self._copy_in(array)
        return self

    def _data_pointer(self) -> int:
        return self._library.TF_TensorData(self.handle)

    def _copy_in(self, array: np.ndarray) -> None:
        nbytes = self.byte_size
        if array.nbytes != nbytes:
            raise ValidationError(
                "buffer size does not match tensor size",
                parameter="values",
                expected=f"{nbytes} bytes",
                received=f"{array.nbytes} bytes",
            )
        if nbytes:
            ctypes.memmove(self._data_pointer(), array.ctypes.data, nbytes)

    @property
    def dtype(self) -> DataType:
        return DataType.from_c(self._library.TF_TensorType(self.handle))

    @property
    def num_dims(self) -> int:
        return self._library.TF_NumDims(self.handle)

    @property
    def dims(self) -> tuple[int, ...]:
        handle = self.handle
        return tuple(self._library.TF_Dim(handle, i) for i in range(self.num_dims))

    @property
    def shape(self) -> Shape:
        return Shape(self.dims)

    @property
    def byte_size(self) -> int:
        return self._library.TF_TensorByteSize(self.handle)

    @property
    def num_elements(self) -> int:
        return self._library.TF_TensorElementCount(self.handle)

    def to_numpy(self) -> np.ndarray:
        """Copy the tensor contents into a new numpy array."""
        out = np.empty(self.dims, dtype=self.dtype.numpy_dtype)
        if out.nbytes:
            ctypes.memmove(out.ctypes.data, self._data_pointer(), out.nbytes)
        return out

    def __repr__(self) -> str:
        if self.closed:
            return "Tensor(<released>)"
        return f"Tensor(dims={list(self.dims)}, dtype={dtype_to_string(self.dtype)})"
