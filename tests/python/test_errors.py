# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for LayerGauge Error Handling

Validates:
- Error hierarchy
- Error message formatting
- Suggestions in error messages
- Context information
"""

import pytest

from layergauge.errors import (
    LayerGaugeError,
    UnsupportedLayerTypeError,
    MissingNamedBlobError,
    DuplicateOutputNameError,
    InvalidParameterError,
    ConfigurationError,
    MemoryBudgetExceededError,
    format_shape_mismatch,
)


class TestLayerGaugeError:
    """Tests for LayerGaugeError base class."""

    def test_basic_error(self):
        error = LayerGaugeError("Test error")
        assert "Test error" in str(error)
        assert error.layer_name is None

    def test_error_with_suggestions(self):
        error = LayerGaugeError("Test error", suggestions=["Fix A", "Fix B"])
        msg = str(error)
        assert "Suggestions:" in msg
        assert "1. Fix A" in msg
        assert "2. Fix B" in msg

    def test_error_with_context(self):
        error = LayerGaugeError(
            "Test error", context={"layer_name": "conv1", "layer_type": "Convolution"}
        )
        msg = str(error)
        assert "Context:" in msg
        assert "layer_name: conv1" in msg
        assert error.layer_name == "conv1"
        assert error.layer_type == "Convolution"

    def test_is_exception(self):
        with pytest.raises(Exception):
            raise LayerGaugeError("Test")


class TestUnsupportedLayerTypeError:
    """Tests for UnsupportedLayerTypeError."""

    def test_message(self):
        error = UnsupportedLayerTypeError("LRN", layer_name="norm1")
        assert "Layer type 'LRN' is not supported" in str(error)
        assert error.layer_name == "norm1"
        assert error.layer_type == "LRN"

    def test_similar_types(self):
        error = UnsupportedLayerTypeError(
            "Softmax_v2", supported_types=["Softmax", "SoftmaxWithLoss", "Pooling"]
        )
        assert "Try using: Softmax" in str(error)

    def test_no_similar_types(self):
        error = UnsupportedLayerTypeError("LSTM", supported_types=["Pooling"])
        assert "Try using" not in str(error)

    def test_inheritance(self):
        assert isinstance(UnsupportedLayerTypeError("X"), LayerGaugeError)


class TestBlobErrors:
    """Tests for MissingNamedBlobError and DuplicateOutputNameError."""

    def test_missing(self):
        error = MissingNamedBlobError("pool2", layer_name="conv3", layer_type="Convolution")
        msg = str(error)
        assert "No blob named 'pool2' available as input" in msg
        assert "blob: pool2" in msg
        assert error.blob_name == "pool2"

    def test_missing_role(self):
        error = MissingNamedBlobError("ref", role="shape source")
        assert "as shape source" in str(error)

    def test_duplicate(self):
        error = DuplicateOutputNameError("conv1", layer_name="pool1", layer_type="Pooling")
        msg = str(error)
        assert "Output blob 'conv1' already exists" in msg
        assert "Dropout and ReLU" in msg
        assert error.layer_name == "pool1"


class TestInvalidParameterError:
    """Tests for InvalidParameterError."""

    def test_message(self):
        error = InvalidParameterError(
            "kernel too large", layer_name="pool1", layer_type="Pooling", parameter="kernel_size"
        )
        msg = str(error)
        assert "Invalid parameter: kernel too large" in msg
        assert "parameter: kernel_size" in msg
        assert error.parameter == "kernel_size"

    def test_format_shape_mismatch(self):
        error = format_shape_mismatch((1, 2, 8, 8), (1, 2, 8, 9), tensor_name="up1")
        assert isinstance(error, InvalidParameterError)
        assert "(1, 2, 8, 8)" in str(error)
        assert error.parameter == "up1"


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_message(self):
        error = ConfigurationError("bad phase", config_key="phase", config_value="deploy")
        msg = str(error)
        assert "Configuration error: bad phase" in msg
        assert "config_key: phase" in msg
        assert "config_value: deploy" in msg


class TestMemoryBudgetExceededError:
    """Tests for MemoryBudgetExceededError."""

    def test_context(self):
        error = MemoryBudgetExceededError(
            required_bytes=3 * 1024 * 1024, available_bytes=1024 * 1024, accelerated=True
        )
        msg = str(error)
        assert "required_mb: 3.00" in msg
        assert "available_mb: 1.00" in msg
        assert "accelerated library" not in msg

    def test_plain_mode_suggestion(self):
        error = MemoryBudgetExceededError(2, 1, accelerated=False)
        assert "Enable the accelerated library" in str(error)


class TestErrorHierarchy:
    """Tests for error class hierarchy."""

    def test_all_inherit_from_base(self):
        errors = [
            UnsupportedLayerTypeError("X"),
            MissingNamedBlobError("x"),
            DuplicateOutputNameError("x"),
            InvalidParameterError("x"),
            ConfigurationError("x"),
            MemoryBudgetExceededError(2, 1),
        ]
        for error in errors:
            assert isinstance(error, LayerGaugeError)

    def test_catch_base(self):
        try:
            raise MissingNamedBlobError("data")
        except LayerGaugeError as e:
            assert e.blob_name == "data"
