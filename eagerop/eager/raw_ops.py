# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Raw Ops - typed call surface for individual native ops.

Each op has a builder class whose optional attributes are set through
chained methods, and a module-level function using the defaults:

    z = raw_ops.Add().t(DataType.Int32).call(ctx, x, y)
    z = raw_ops.add(ctx, x, y)

Attributes left unset are inferred by the native runtime from the inputs.
"""

from typing import Any, Optional, Sequence, Union

from ..core.types import DataType
from .context import Context
from .op import Op
from .tensor_handle import TensorHandle

Input = Union[TensorHandle, Sequence[TensorHandle]]


def execute_op(
    ctx: Context,
    op_name: str,
    inputs: Sequence[Input],
    attrs: Optional[dict[str, tuple[str, Any]]] = None,
    num_outputs: int = 1,
    device: Optional[str] = None,
) -> list[TensorHandle]:
    """
    Build, run and release one op descriptor.

    Args:
        ctx: Context to execute against.
        op_name: Registered op type.
        inputs: Handles in argument order; a list or tuple is attached as
            one list-valued input.
        attrs: ``{attr_name: (setter_name, value)}`` where ``setter_name``
            is an Op method such as ``"set_attr_type"``.
        num_outputs: Output buffer size.
        device: Optional device hint.

    Returns:
        Output handles.
    """
    with Op(ctx, op_name) as op:
        if device is not None:
            op.set_device(device)
        # Attrs first: type attrs set after the inputs lose to inferred ones
        for attr_name, (setter, value) in (attrs or {}).items():
            getattr(op, setter)(attr_name, value)
        for item in inputs:
            if isinstance(item, (list, tuple)):
                op.add_input_list(item)
            else:
                op.add_input(item)
        return op.execute(num_outputs=num_outputs)


class RawOp:
    """Base class for op builders."""

    op_name = ""
    # attr name -> Op setter
    attr_setters: dict[str, str] = {}

    def __init__(self):
        self._attrs: dict[str, Any] = {}
        self._device: Optional[str] = None

    def _set(self, attr_name: str, value: Any) -> "RawOp":
        self._attrs[attr_name] = value
        return self

    def device(self, device_name: str) -> "RawOp":
        """Set the device hint for the call."""
        self._device = device_name
        return self

    def _call(self, ctx: Context, inputs: Sequence[Input], num_outputs: int = 1) -> list[TensorHandle]:
        attrs = {name: (self.attr_setters[name], value) for name, value in self._attrs.items()}
        return execute_op(
            ctx, self.op_name, inputs, attrs, num_outputs=num_outputs, device=self._device
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._attrs})"


class _BinaryOp(RawOp):
    attr_setters = {"T": "set_attr_type"}

    def t(self, value: DataType) -> "_BinaryOp":
        """Sets the ``T`` attribute."""
        return self._set("T", DataType(value))

    def call(self, ctx: Context, x: TensorHandle, y: TensorHandle) -> TensorHandle:
        (z,) = self._call(ctx, [x, y])
        return z


class Add(_BinaryOp):
    """Returns x + y element-wise."""

    op_name = "Add"


class AddV2(_BinaryOp):
    """Returns x + y element-wise, without string support."""

    op_name = "AddV2"


class Sub(_BinaryOp):
    """Returns x - y element-wise."""

    op_name = "Sub"


class Mul(_BinaryOp):
    """Returns x * y element-wise."""

    op_name = "Mul"


class Identity(RawOp):
    """Returns a tensor with the same shape and contents as the input."""

    op_name = "Identity"
    attr_setters = {"T": "set_attr_type"}

    def t(self, value: DataType) -> "Identity":
        return self._set("T", DataType(value))

    def call(self, ctx: Context, input: TensorHandle) -> TensorHandle:
        (output,) = self._call(ctx, [input])
        return output


class AddN(RawOp):
    """Adds all input tensors element-wise."""

    op_name = "AddN"
    attr_setters = {"N": "set_attr_int", "T": "set_attr_type"}

    def n(self, value: int) -> "AddN":
        return self._set("N", value)

    def t(self, value: DataType) -> "AddN":
        return self._set("T", DataType(value))

    def call(self, ctx: Context, inputs: Sequence[TensorHandle]) -> TensorHandle:
        (total,) = self._call(ctx, [list(inputs)])
        return total


class Cast(RawOp):
    """Casts x to DstT."""

    op_name = "Cast"
    attr_setters = {
        "SrcT": "set_attr_type",
        "DstT": "set_attr_type",
        "Truncate": "set_attr_bool",
    }

    def src_t(self, value: DataType) -> "Cast":
        return self._set("SrcT", DataType(value))

    def dst_t(self, value: DataType) -> "Cast":
        return self._set("DstT", DataType(value))

    def truncate(self, value: bool) -> "Cast":
        return self._set("Truncate", bool(value))

    def call(self, ctx: Context, x: TensorHandle) -> TensorHandle:
        (y,) = self._call(ctx, [x])
        return y


class Reshape(RawOp):
    """Reshapes a tensor to the shape given by a 1-D int tensor."""

    op_name = "Reshape"
    attr_setters = {"T": "set_attr_type", "Tshape": "set_attr_type"}

    def t(self, value: DataType) -> "Reshape":
        return self._set("T", DataType(value))

    def tshape(self, value: DataType) -> "Reshape":
        return self._set("Tshape", DataType(value))

    def call(self, ctx: Context, tensor: TensorHandle, shape: TensorHandle) -> TensorHandle:
        (output,) = self._call(ctx, [tensor, shape])
        return output


def add(ctx: Context, x: TensorHandle, y: TensorHandle) -> TensorHandle:
    """add with default options."""
    return Add().call(ctx, x, y)


def add_v2(ctx: Context, x: TensorHandle, y: TensorHandle) -> TensorHandle:
    return AddV2().call(ctx, x, y)


def sub(ctx: Context, x: TensorHandle, y: TensorHandle) -> TensorHandle:
    return Sub().call(ctx, x, y)


def mul(ctx: Context, x: TensorHandle, y: TensorHandle) -> TensorHandle:
    return Mul().call(ctx, x, y)


def identity(ctx: Context, input: TensorHandle) -> TensorHandle:
    return Identity().call(ctx, input)


def add_n(ctx: Context, inputs: Sequence[TensorHandle]) -> TensorHandle:
    return AddN().n(len(inputs)).call(ctx, inputs)


def cast(ctx: Context, x: TensorHandle, dst_t: DataType) -> TensorHandle:
    return Cast().dst_t(dst_t).call(ctx, x)


def reshape(ctx: Context, tensor: TensorHandle, shape: TensorHandle) -> TensorHandle:
    return Reshape().call(ctx, tensor, shape)
