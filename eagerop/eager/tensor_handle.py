# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tensor Handle (TFE_TensorHandle)

Reference to a tensor managed by an eager context, possibly living on a
device. Inputs and outputs of op descriptors are tensor handles.
"""

import ctypes
from typing import Any, Optional

import numpy as np

from ..core.tensor import Tensor
from ..core.types import DataType, Shape
from ..native.handle import NativeHandle
from ..native.status import Status
from ..native.strings import decode_c_string, encode_c_string
from .context import Context


class TensorHandle(NativeHandle):
    """
    Owned TFE_TensorHandle.

    Example:
        x = Tensor([2, 2], DataType.Int32).with_values([1, 2, 3, 4])
        h = TensorHandle(ctx, x)
        h.to_numpy()
    """

    _kind = "tensor handle"
    _deleter = "TFE_DeleteTensorHandle"

    def __init__(self, ctx: Context, tensor: Tensor):
        """
        Create a handle sharing the buffer of a host tensor.

        Args:
            ctx: Context the handle belongs to.
            tensor: Host tensor; it may be closed afterwards.
        """
        lib = ctx.library
        with Status(lib) as status:
            handle = lib.TFE_NewTensorHandle(tensor.handle, status.handle)
            status.raise_for_status(operation="TFE_NewTensorHandle")
        super().__init__(handle, lib)
        self._context = ctx

    @classmethod
    def _adopt(cls, ctx: Context, handle: Any) -> "TensorHandle":
        """Take ownership of a handle produced by the native library."""
        tensor_handle = cls.__new__(cls)
        NativeHandle.__init__(tensor_handle, handle, ctx.library)
        tensor_handle._context = ctx
        return tensor_handle

    @classmethod
    def from_numpy(cls, ctx: Context, array: Any, dtype: Optional[DataType] = None) -> "TensorHandle":
        """Copy a numpy array into a new host tensor and wrap it."""
        with Tensor.from_numpy(array, dtype=dtype, library=ctx.library) as tensor:
            return cls(ctx, tensor)

    @property
    def context(self) -> Context:
        return self._context

    @property
    def dtype(self) -> DataType:
        return DataType.from_c(self._library.TFE_TensorHandleDataType(self.handle))

    def num_dims(self) -> int:
        with Status(self._library) as status:
            result = self._library.TFE_TensorHandleNumDims(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleNumDims")
        return result

    def num_elements(self) -> int:
        with Status(self._library) as status:
            result = self._library.TFE_TensorHandleNumElements(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleNumElements")
        return result

    def dim(self, index: int) -> int:
        with Status(self._library) as status:
            result = self._library.TFE_TensorHandleDim(self.handle, index, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleDim", index=index)
        return result

    def shape(self) -> Shape:
        """Shape decoded from the native (-1 sentinel) representation."""
        num_dims = self.num_dims()
        dims = [self.dim(i) for i in range(max(num_dims, 0))]
        return Shape.from_c(num_dims, dims)

    def device_name(self) -> str:
        """Device of the op that produced this handle."""
        with Status(self._library) as status:
            raw = self._library.TFE_TensorHandleDeviceName(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleDeviceName")
        return decode_c_string(raw, source="TFE_TensorHandleDeviceName")

    def backing_device_name(self) -> str:
        """Device whose memory holds the tensor."""
        with Status(self._library) as status:
            raw = self._library.TFE_TensorHandleBackingDeviceName(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleBackingDeviceName")
        return decode_c_string(raw, source="TFE_TensorHandleBackingDeviceName")

    def copy_sharing_tensor(self) -> "TensorHandle":
        """New handle referring to the same underlying tensor."""
        with Status(self._library) as status:
            handle = self._library.TFE_TensorHandleCopySharingTensor(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleCopySharingTensor")
        return TensorHandle._adopt(self._context, handle)

    def copy_to_device(self, device_name: str) -> "TensorHandle":
        """Copy the tensor to another device of the same context."""
        c_device = encode_c_string(device_name, parameter="device_name")
        with Status(self._library) as status:
            handle = self._library.TFE_TensorHandleCopyToDevice(
                self.handle, self._context.handle, c_device, status.handle
            )
            status.raise_for_status(operation="TFE_TensorHandleCopyToDevice", device=device_name)
        return TensorHandle._adopt(self._context, handle)

    def resolve(self) -> Tensor:
        """Wait for the value and return it as an owned host tensor."""
        with Status(self._library) as status:
            handle = self._library.TFE_TensorHandleResolve(self.handle, status.handle)
            status.raise_for_status(operation="TFE_TensorHandleResolve")
        return Tensor._adopt(handle, self._library)

    def to_numpy(self) -> np.ndarray:
        with self.resolve() as tensor:
            return tensor.to_numpy()

    def __repr__(self) -> str:
        if self.closed:
            return "TensorHandle(<released>)"
        return f"TensorHandle(dtype={self.dtype.name}, shape={self.shape()})"


def handle_array(handles) -> ctypes.Array:
    """Pack tensor handles into a ``TFE_TensorHandle*`` array."""
    pointers = [h.handle for h in handles]
    return (ctypes.c_void_p * len(pointers))(*pointers)
