# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Unit tests for eagerop.core.types.
"""

import ctypes

import numpy as np
import pytest

from eagerop.core.types import (
    AttrType,
    DataType,
    DevicePlacementPolicy,
    Shape,
    StatusCode,
    dtype_size,
    dtype_to_string,
)
from eagerop.errors import UnsupportedDTypeError, ValidationError


class TestDataType:
    """Tests for DataType tags."""

    def test_native_tags(self):
        assert DataType.Float32.to_c() == 1
        assert DataType.Int32.to_c() == 3
        assert DataType.String.to_c() == 7
        assert DataType.Bool.to_c() == 10
        assert DataType.Float16.to_c() == 19
        assert DataType.UInt64.to_c() == 23

    def test_from_c(self):
        assert DataType.from_c(9) is DataType.Int64

    def test_from_c_unknown_tag(self):
        with pytest.raises(ValidationError):
            DataType.from_c(99)

    def test_from_numpy(self):
        assert DataType.from_numpy(np.int32) is DataType.Int32
        assert DataType.from_numpy("float64") is DataType.Float64
        assert DataType.from_numpy(np.bool_) is DataType.Bool

    def test_from_numpy_non_native_byte_order(self):
        assert DataType.from_numpy(">i4") is DataType.Int32
        assert DataType.from_numpy("<f8") is DataType.Float64
        assert DataType.from_numpy(np.dtype(">u2")) is DataType.UInt16

    def test_from_numpy_unsupported(self):
        with pytest.raises(UnsupportedDTypeError):
            DataType.from_numpy(np.dtype("U4"))

    def test_numpy_dtype(self):
        assert DataType.Int32.numpy_dtype == np.dtype(np.int32)
        assert DataType.Complex128.numpy_dtype == np.dtype(np.complex128)

    def test_numpy_dtype_unsupported(self):
        with pytest.raises(UnsupportedDTypeError):
            DataType.String.numpy_dtype
        with pytest.raises(UnsupportedDTypeError):
            DataType.BFloat16.numpy_dtype

    def test_dtype_size(self):
        assert dtype_size(DataType.Float32) == 4
        assert dtype_size(DataType.Float64) == 8
        assert dtype_size(DataType.Int8) == 1
        assert dtype_size(DataType.BFloat16) == 2
        assert dtype_size(DataType.String) == 0
        assert dtype_size(DataType.Resource) == 0

    def test_dtype_to_string(self):
        assert dtype_to_string(DataType.Int32) == "int32"
        assert dtype_to_string(DataType.Float16) == "float16"


class TestStatusCode:
    def test_values(self):
        assert StatusCode.Ok == 0
        assert StatusCode.InvalidArgument == 3
        assert StatusCode.Unauthenticated == 16

    def test_unknown_value_decodes_to_unknown(self):
        assert StatusCode.from_c(1234) is StatusCode.Unknown
        assert StatusCode.from_c(5) is StatusCode.NotFound


class TestEnums:
    def test_attr_type(self):
        assert AttrType.String == 0
        assert AttrType.Shape == 5
        assert AttrType.Func == 8

    def test_placement_policy(self):
        assert DevicePlacementPolicy.Explicit == 0
        assert DevicePlacementPolicy.SilentForInt32 == 3


class TestShape:
    """Tests for optional-rank shapes."""

    def test_known_shape(self):
        shape = Shape([2, 3])
        assert shape.rank() == 2
        assert shape.numel() == 6
        assert shape.is_fully_defined()
        assert list(shape) == [2, 3]
        assert shape[1] == 3
        assert len(shape) == 2

    def test_scalar(self):
        shape = Shape.scalar()
        assert shape.rank() == 0
        assert shape.numel() == 1

    def test_unknown_rank(self):
        shape = Shape.unknown()
        assert shape.dims is None
        assert shape.rank() is None
        assert shape.numel() is None
        assert not shape.is_fully_defined()
        assert repr(shape) == "Shape(<unknown>)"

    def test_unknown_rank_has_no_length(self):
        with pytest.raises(ValueError):
            len(Shape.unknown())

    def test_unknown_dimension(self):
        shape = Shape([2, None])
        assert shape.rank() == 2
        assert shape.numel() is None
        assert not shape.is_fully_defined()

    def test_negative_dimension_rejected(self):
        """The -1 sentinel is not a valid dimension on the Python side."""
        with pytest.raises(ValidationError):
            Shape([2, -1])

    def test_non_integer_dimension_rejected(self):
        with pytest.raises(ValidationError):
            Shape([2.5])

    def test_bool_dimension_rejected(self):
        with pytest.raises(ValidationError):
            Shape([True, 2])
        with pytest.raises(ValidationError):
            Shape([np.bool_(False)])

    def test_numpy_integers_accepted(self):
        assert Shape([np.int64(4)]).dims == (4,)

    def test_equality(self):
        assert Shape([1, None]) == Shape((1, None))
        assert Shape.unknown() == Shape(None)
        assert Shape.unknown() != Shape.scalar()

    def test_to_c_unknown_rank(self):
        dims, num_dims = Shape.unknown().to_c()
        assert dims is None
        assert num_dims == -1

    def test_to_c_unknown_dimension(self):
        dims, num_dims = Shape([2, None, 3]).to_c()
        assert num_dims == 3
        assert isinstance(dims, ctypes.Array)
        assert list(dims) == [2, -1, 3]

    def test_to_c_scalar(self):
        dims, num_dims = Shape.scalar().to_c()
        assert num_dims == 0
        assert list(dims) == []

    def test_from_c(self):
        assert Shape.from_c(-1, None) == Shape.unknown()
        assert Shape.from_c(2, [4, -1]) == Shape([4, None])
        assert Shape.from_c(0, []) == Shape.scalar()
