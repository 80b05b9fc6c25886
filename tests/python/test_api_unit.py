# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Unit tests for the layergauge.analyze entry point.
"""

import io

import pytest

import layergauge
from layergauge import AnalyzerConfig, Phase, analyze
from layergauge.errors import MemoryBudgetExceededError, MissingNamedBlobError
from layergauge.observability import Verbosity, get_logger


DECLARATIONS = [
    {"type": "Convolution", "name": "conv", "inputs": ["data"], "outputs": ["conv"],
     "params": {"kernel_size": [3], "num_output": 4}},
]


class TestAnalyze:
    """Tests for analyze()."""

    def test_default_config(self):
        report = analyze(DECLARATIONS, input_names=["data"], input_shapes=[[1, 1, 10, 10]])
        assert report.phase == "test"
        assert report.accelerated is False
        assert report.total_bytes == 3888

    def test_train_accelerated(self):
        report = analyze(
            DECLARATIONS,
            AnalyzerConfig(phase=Phase.TRAIN, accelerated=True),
            input_names=["data"],
            input_shapes=[[1, 1, 10, 10]],
        )
        assert report.backward_bytes == 1024
        assert report.overhead_bytes == 8 * 1024 * 1024

    def test_budget_enforced(self):
        with pytest.raises(MemoryBudgetExceededError):
            analyze(
                DECLARATIONS,
                AnalyzerConfig(accelerated=True, gpu_memory_mb=1),
                input_names=["data"],
                input_shapes=[[1, 1, 10, 10]],
            )

    def test_budget_met(self):
        report = analyze(
            DECLARATIONS,
            AnalyzerConfig(gpu_memory_mb=1),
            input_names=["data"],
            input_shapes=[[1, 1, 10, 10]],
        )
        assert report.fits(1024 * 1024)

    def test_construction_error_propagates(self):
        with pytest.raises(MissingNamedBlobError):
            analyze(DECLARATIONS)

    def test_summary_logged(self):
        logger = get_logger()
        output = io.StringIO()
        logger.set_output(output)
        logger.set_verbosity(Verbosity.INFO)

        analyze(DECLARATIONS, input_names=["data"], input_shapes=[[1, 1, 10, 10]], name="tiny")

        content = output.getvalue()
        assert "Network built" in content
        assert "LayerGauge Analysis Complete" in content
        assert "tiny" in content

    def test_failure_logged(self):
        logger = get_logger()
        output = io.StringIO()
        logger.set_output(output)
        logger.set_verbosity(Verbosity.ERROR)

        with pytest.raises(MissingNamedBlobError):
            analyze(DECLARATIONS, name="broken")

        assert "[ERROR]" in output.getvalue()
        assert "(layer=conv)" in output.getvalue()


class TestPackage:
    """Tests for the package namespace."""

    def test_version(self):
        assert layergauge.__version__ == "0.3.0"

    def test_exports(self):
        for name in layergauge.__all__:
            assert hasattr(layergauge, name)
