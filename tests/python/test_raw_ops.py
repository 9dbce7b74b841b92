# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for the typed per-op wrappers in eagerop.eager.raw_ops.
"""

import numpy as np
import pytest

from eagerop.core.tensor import Tensor
from eagerop.core.types import DataType, Shape
from eagerop.eager import TensorHandle, raw_ops
from eagerop.errors import InvalidArgumentError

from fake_native import CPU0


def _handle(ctx, values, dtype=np.int32):
    return TensorHandle.from_numpy(ctx, np.array(values, dtype=dtype))


class TestAdd:
    """End-to-end Add scenario."""

    def test_add_with_explicit_type(self, ctx, fake_tf):
        x = TensorHandle(ctx, Tensor([2, 2], DataType.Int32).with_values([1, 2, 3, 4]))
        y = TensorHandle(ctx, Tensor([2, 2], DataType.Int32).with_values([1, 2, 3, 4]))

        z = raw_ops.Add().t(DataType.Int32).call(ctx, x, y)

        np.testing.assert_array_equal(z.to_numpy(), [[2, 4], [6, 8]])
        assert z.dtype is DataType.Int32
        name, attrs, _ = fake_tf.executed[-1]
        assert name == "Add"
        assert attrs == {"T": 3}
        assert fake_tf.live("ops") == 0

    def test_add_default_attrs(self, ctx, fake_tf):
        x = _handle(ctx, [[1, 2], [3, 4]])
        z = raw_ops.add(ctx, x, x)
        np.testing.assert_array_equal(z.to_numpy(), [[2, 4], [6, 8]])
        assert fake_tf.executed[-1][1] == {}

    def test_add_type_mismatch(self, ctx, fake_tf):
        x = _handle(ctx, [1.0], dtype=np.float32)
        with pytest.raises(InvalidArgumentError):
            raw_ops.Add().t(DataType.Int32).call(ctx, x, x)
        assert fake_tf.live("ops") == 0

    def test_builder_sets_type_before_inputs(self, ctx, fake_tf):
        x = _handle(ctx, [1])
        raw_ops.Add().t(DataType.Int32).call(ctx, x, x)
        assert fake_tf.calls.index("TFE_OpSetAttrType") < fake_tf.calls.index("TFE_OpAddInput")

    def test_device_hint(self, ctx):
        x = _handle(ctx, [1])
        z = raw_ops.Add().device("/device:CPU:0").call(ctx, x, x)
        assert z.device_name() == CPU0


class TestElementwise:
    def test_scalar_add(self, ctx):
        x = TensorHandle.from_numpy(ctx, np.int32(2))
        z = raw_ops.add(ctx, x, x)
        assert z.shape() == Shape.scalar()
        assert z.to_numpy().shape == ()
        assert z.to_numpy() == 4

    def test_add_v2(self, ctx):
        x = _handle(ctx, [1.5, 2.5], dtype=np.float64)
        assert raw_ops.add_v2(ctx, x, x).to_numpy().tolist() == [3.0, 5.0]

    def test_sub(self, ctx):
        x, y = _handle(ctx, [5, 7]), _handle(ctx, [2, 3])
        assert raw_ops.sub(ctx, x, y).to_numpy().tolist() == [3, 4]

    def test_mul(self, ctx):
        x, y = _handle(ctx, [5, 7]), _handle(ctx, [2, 3])
        assert raw_ops.Mul().t(DataType.Int32).call(ctx, x, y).to_numpy().tolist() == [10, 21]

    def test_identity(self, ctx):
        x = _handle(ctx, [[True, False]], dtype=np.bool_)
        y = raw_ops.identity(ctx, x)
        assert y.dtype is DataType.Bool
        assert y.to_numpy().tolist() == [[True, False]]


class TestAddN:
    def test_add_n(self, ctx, fake_tf):
        inputs = [_handle(ctx, [i, 10 * i]) for i in range(1, 5)]
        total = raw_ops.add_n(ctx, inputs)
        assert total.to_numpy().tolist() == [10, 100]
        assert fake_tf.executed[-1][1] == {"N": 4}

    def test_add_n_wrong_count(self, ctx):
        inputs = [_handle(ctx, [1]), _handle(ctx, [2])]
        with pytest.raises(InvalidArgumentError):
            raw_ops.AddN().n(3).call(ctx, inputs)


class TestCast:
    def test_cast(self, ctx, fake_tf):
        x = _handle(ctx, [1.7, -2.2], dtype=np.float32)
        y = raw_ops.cast(ctx, x, DataType.Int32)
        assert y.dtype is DataType.Int32
        assert y.to_numpy().tolist() == [1, -2]
        assert fake_tf.executed[-1][1] == {"DstT": 3}

    def test_cast_all_attrs(self, ctx, fake_tf):
        x = _handle(ctx, [1, 2])
        y = (
            raw_ops.Cast()
            .src_t(DataType.Int32)
            .dst_t(DataType.Float64)
            .truncate(False)
            .call(ctx, x)
        )
        assert y.to_numpy().dtype == np.float64
        assert fake_tf.executed[-1][1] == {"SrcT": 3, "DstT": 2, "Truncate": False}


class TestReshape:
    def test_reshape(self, ctx):
        x = _handle(ctx, [1, 2, 3, 4, 5, 6])
        shape = _handle(ctx, [2, 3])
        y = raw_ops.Reshape().t(DataType.Int32).tshape(DataType.Int32).call(ctx, x, shape)
        assert y.shape().dims == (2, 3)
        assert y.to_numpy().tolist() == [[1, 2, 3], [4, 5, 6]]

    def test_reshape_incompatible(self, ctx):
        x = _handle(ctx, [1, 2, 3])
        shape = _handle(ctx, [2, 2])
        with pytest.raises(InvalidArgumentError):
            raw_ops.reshape(ctx, x, shape)


class TestExecuteOp:
    def test_execute_op(self, ctx):
        x = _handle(ctx, [3])
        (y,) = raw_ops.execute_op(
            ctx, "Mul", [x, x], attrs={"T": ("set_attr_type", DataType.Int32)}
        )
        assert y.to_numpy().tolist() == [9]

    def test_builder_repr(self):
        assert repr(raw_ops.Add().t(DataType.Int32)) == "Add({'T': <DataType.Int32: 3>})"
