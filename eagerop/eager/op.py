# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Operation Descriptor (TFE_Op)

Stages one op invocation: name, inputs and attributes are attached to a
native descriptor, then a single execute() call runs it and consumes the
descriptor.

Example:
    with Op(ctx, "Add") as op:
        op.add_input(x)
        op.add_input(y)
        op.set_attr_type("T", DataType.Int32)
        (z,) = op.execute(num_outputs=1)

Lifecycle:
    built (inputs/attributes attached in any order, any number of times)
    -> executed or closed. Any use after that raises ClosedHandleError.

A descriptor is not thread-safe; callers must serialize access to it.
"""

import ctypes
import operator
import time
from typing import Any, Optional, Sequence, Union

from ..config import get_config
from ..core.tensor import Tensor
from ..core.types import AttrType, DataType, Shape
from ..errors import (
    ClosedHandleError,
    InternalError,
    NotFoundError,
    UnknownOpError,
    ValidationError,
)
from ..native.handle import NativeHandle
from ..native.status import Status
from ..native.strings import decode_c_string, encode_bytes, encode_c_string
from ..observability import Verbosity, get_logger
from .context import Context
from .tensor_handle import TensorHandle, handle_array

ShapeLike = Union[Shape, Sequence[Optional[int]], None]


def _as_shape(value: ShapeLike) -> Shape:
    if isinstance(value, Shape):
        return value
    if value is None:
        return Shape.unknown()
    return Shape(value)


def _as_int(value: Any, parameter: str) -> int:
    try:
        return operator.index(value)
    except TypeError:
        raise ValidationError(
            "expected an integer",
            parameter=parameter,
            received=type(value).__name__,
        ) from None


class Op(NativeHandle):
    """Owned TFE_Op descriptor."""

    _kind = "op descriptor"
    _deleter = "TFE_DeleteOp"

    def __init__(self, ctx: Context, op_or_function_name: str):
        """
        Create a descriptor for a registered op or a function.

        Args:
            ctx: Context the op is executed against.
            op_or_function_name: Op type (e.g. "Add") or function name.

        Raises:
            NulByteError: If the name contains a NUL byte.
            UnknownOpError: If the context does not know the name.
            StatusError: For any other native failure.
        """
        self._inputs: list[TensorHandle] = []
        self._executed = False

        lib = ctx.library
        c_name = encode_c_string(op_or_function_name, parameter="op_or_function_name")
        with Status(lib) as status:
            handle = lib.TFE_NewOp(ctx.handle, c_name, status.handle)
            try:
                status.raise_for_status(operation=op_or_function_name, call="TFE_NewOp")
            except NotFoundError as e:
                raise UnknownOpError(
                    e.native_message, suggestions=e.suggestions, context=e.context
                ) from None
        if not handle:
            raise InternalError(
                "TFE_NewOp returned no descriptor",
                context={"operation": op_or_function_name},
            )

        super().__init__(handle, lib)
        self._context = ctx
        self._op_name = op_or_function_name

        default_device = get_config().default_device
        if default_device:
            try:
                self.set_device(default_device)
            except Exception:
                self.close()
                raise

        get_logger().debug("Created op", component="eager", operation=self._op_name)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @property
    def handle(self) -> Any:
        if self._handle is None:
            raise ClosedHandleError(
                self._kind, "consumed by execute" if self._executed else None
            )
        return self._handle

    def close(self) -> None:
        """Release the descriptor; attached inputs are not touched."""
        self._inputs = []
        super().close()

    def _checked(self, symbol: str, *args, **context) -> Any:
        """Call a status-reporting symbol and raise on a non-OK status."""
        with Status(self._library) as status:
            result = getattr(self._library, symbol)(*args, status.handle)
            status.raise_for_status(operation=self._op_name, call=symbol, **context)
        return result

    @staticmethod
    def _attr_name(attr_name: str) -> bytes:
        return encode_c_string(attr_name, parameter="attr_name")

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def context(self) -> Context:
        return self._context

    @property
    def name(self) -> str:
        """Op or function name as known to the native layer."""
        raw = self._checked("TFE_OpGetName", self.handle)
        return decode_c_string(raw, source="TFE_OpGetName")

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def add_input(self, input: TensorHandle) -> None:
        """Append one input."""
        self._checked("TFE_OpAddInput", self.handle, input.handle, input_index=len(self._inputs))
        self._inputs.append(input)

    def add_input_list(self, inputs: Sequence[TensorHandle]) -> None:
        """Append ``inputs`` as a single list-valued input, in order."""
        inputs = list(inputs)
        array = handle_array(inputs)
        self._checked("TFE_OpAddInputList", self.handle, array, len(inputs))
        self._inputs.extend(inputs)

    def flat_input_count(self) -> int:
        """Number of input tensors attached so far, lists flattened."""
        return self._checked("TFE_OpGetFlatInputCount", self.handle)

    def input_length(self, input_name: str) -> int:
        """Number of tensors bound to a named (possibly list) input."""
        return self._checked(
            "TFE_OpGetInputLength",
            self.handle,
            encode_c_string(input_name, parameter="input_name"),
            input=input_name,
        )

    def output_length(self, output_name: str) -> int:
        """Number of tensors a named (possibly list) output produces."""
        return self._checked(
            "TFE_OpGetOutputLength",
            self.handle,
            encode_c_string(output_name, parameter="output_name"),
            output=output_name,
        )

    # ------------------------------------------------------------------
    # Device
    # ------------------------------------------------------------------

    def set_device(self, device_name: str) -> None:
        """Set the device hint; an empty string lets the runtime choose."""
        c_device = encode_c_string(device_name, parameter="device_name")
        self._checked("TFE_OpSetDevice", self.handle, c_device, device=device_name)

    def get_device(self) -> str:
        """Device as resolved by the native layer (may differ from the hint)."""
        raw = self._checked("TFE_OpGetDevice", self.handle)
        return decode_c_string(raw, source="TFE_OpGetDevice")

    @property
    def device(self) -> str:
        return self.get_device()

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def get_attr_type(self, attr_name: str) -> tuple[AttrType, bool]:
        """
        Kind of a named attribute.

        Returns:
            ``(kind, is_list)``.
        """
        is_list = ctypes.c_ubyte(0)
        kind = self._checked(
            "TFE_OpGetAttrType",
            self.handle,
            self._attr_name(attr_name),
            ctypes.pointer(is_list),
            attr=attr_name,
        )
        return AttrType(kind), bool(is_list.value)

    def set_attr_string(self, attr_name: str, value: Union[str, bytes]) -> None:
        data = encode_bytes(value)
        self._library.TFE_OpSetAttrString(self.handle, self._attr_name(attr_name), data, len(data))

    def set_attr_string_list(self, attr_name: str, values: Sequence[Union[str, bytes]]) -> None:
        data = [encode_bytes(v) for v in values]
        buffers = [ctypes.create_string_buffer(d, len(d) + 1) for d in data]
        pointers = (ctypes.c_void_p * len(buffers))(*[ctypes.addressof(b) for b in buffers])
        lengths = (ctypes.c_size_t * len(data))(*[len(d) for d in data])
        self._library.TFE_OpSetAttrStringList(
            self.handle, self._attr_name(attr_name), pointers, lengths, len(data)
        )

    def set_attr_int(self, attr_name: str, value: int) -> None:
        value = _as_int(value, attr_name)
        self._library.TFE_OpSetAttrInt(self.handle, self._attr_name(attr_name), value)

    def set_attr_int_list(self, attr_name: str, values: Sequence[int]) -> None:
        values = [_as_int(v, attr_name) for v in values]
        array = (ctypes.c_int64 * len(values))(*values)
        self._library.TFE_OpSetAttrIntList(self.handle, self._attr_name(attr_name), array, len(values))

    def set_attr_float(self, attr_name: str, value: float) -> None:
        self._library.TFE_OpSetAttrFloat(self.handle, self._attr_name(attr_name), float(value))

    def set_attr_float_list(self, attr_name: str, values: Sequence[float]) -> None:
        array = (ctypes.c_float * len(values))(*[float(v) for v in values])
        self._library.TFE_OpSetAttrFloatList(self.handle, self._attr_name(attr_name), array, len(values))

    def set_attr_bool(self, attr_name: str, value: bool) -> None:
        self._library.TFE_OpSetAttrBool(self.handle, self._attr_name(attr_name), 1 if value else 0)

    def set_attr_bool_list(self, attr_name: str, values: Sequence[bool]) -> None:
        array = (ctypes.c_ubyte * len(values))(*[1 if v else 0 for v in values])
        self._library.TFE_OpSetAttrBoolList(self.handle, self._attr_name(attr_name), array, len(values))

    def set_attr_type(self, attr_name: str, value: DataType) -> None:
        self._library.TFE_OpSetAttrType(
            self.handle, self._attr_name(attr_name), DataType(value).to_c()
        )

    def set_attr_type_list(self, attr_name: str, values: Sequence[DataType]) -> None:
        array = (ctypes.c_int * len(values))(*[DataType(v).to_c() for v in values])
        self._library.TFE_OpSetAttrTypeList(self.handle, self._attr_name(attr_name), array, len(values))

    def set_attr_shape(self, attr_name: str, value: ShapeLike) -> None:
        """
        Set a shape attribute.

        ``None`` (or ``Shape.unknown()``) means unknown rank, ``None``
        dimensions mean unknown size.
        """
        dims, num_dims = _as_shape(value).to_c()
        self._checked(
            "TFE_OpSetAttrShape",
            self.handle,
            self._attr_name(attr_name),
            dims,
            num_dims,
            attr=attr_name,
        )

    def set_attr_shape_list(self, attr_name: str, values: Sequence[ShapeLike]) -> None:
        encoded = [_as_shape(v).to_c() for v in values]
        int64_p = ctypes.POINTER(ctypes.c_int64)
        dims = (int64_p * len(encoded))(
            *[int64_p() if d is None else ctypes.cast(d, int64_p) for d, _ in encoded]
        )
        num_dims = (ctypes.c_int * len(encoded))(*[n for _, n in encoded])
        self._checked(
            "TFE_OpSetAttrShapeList",
            self.handle,
            self._attr_name(attr_name),
            dims,
            num_dims,
            len(encoded),
            attr=attr_name,
        )

    def set_attr_tensor(self, attr_name: str, value: Tensor) -> None:
        self._checked(
            "TFE_OpSetAttrTensor",
            self.handle,
            self._attr_name(attr_name),
            value.handle,
            attr=attr_name,
        )

    def set_attr_function_name(self, attr_name: str, function_name: str) -> None:
        data = encode_bytes(function_name)
        self._library.TFE_OpSetAttrFunctionName(
            self.handle, self._attr_name(attr_name), data, len(data)
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def execute(self, num_outputs: int = 1) -> list[TensorHandle]:
        """
        Run the op and consume the descriptor.

        Args:
            num_outputs: Size of the output buffer; the native side may
                report fewer outputs.

        Returns:
            Owned handles of the produced tensors.

        Raises:
            ClosedHandleError: If the descriptor or one of its inputs was
                released.
            StatusError: If the native execution fails.
        """
        num_outputs = _as_int(num_outputs, "num_outputs")
        if num_outputs < 0:
            raise ValidationError(
                "num_outputs must be non-negative",
                parameter="num_outputs",
                received=str(num_outputs),
            )

        handle = self.handle
        logger = get_logger()
        try:
            device = self.get_device() if logger.is_enabled(Verbosity.DEBUG) else None
            for i, input in enumerate(self._inputs):
                if input.closed:
                    raise ClosedHandleError(
                        "tensor handle",
                        f"input {i} of {self._op_name} was released before execute",
                    )

            retvals = (ctypes.c_void_p * num_outputs)()
            num_retvals = ctypes.c_int(num_outputs)
            start = time.perf_counter()
            with Status(self._library) as status:
                self._library.TFE_Execute(handle, retvals, ctypes.pointer(num_retvals), status.handle)
                status.raise_for_status(operation=self._op_name, call="TFE_Execute")
            duration_ms = (time.perf_counter() - start) * 1000
        finally:
            self._executed = True
            self.close()

        outputs = [TensorHandle._adopt(self._context, retvals[i]) for i in range(num_retvals.value)]
        logger.debug(
            "Executed op",
            component="eager",
            operation=self._op_name,
            device=device,
            duration_ms=duration_ms,
            num_outputs=len(outputs),
        )
        return outputs

    def __repr__(self) -> str:
        state = "executed" if self._executed else ("closed" if self.closed else "built")
        return f"Op({self._op_name!r}, {state}, inputs={len(self._inputs)})"
