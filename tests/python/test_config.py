# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for AnalyzerConfig.
"""

import pytest

from layergauge.config import AnalyzerConfig
from layergauge.core import MiB, Phase
from layergauge.errors import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("LAYERGAUGE_PHASE", "LAYERGAUGE_ACCELERATED", "LAYERGAUGE_GPU_MEMORY_MB"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestAnalyzerConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = AnalyzerConfig()
        assert config.phase is Phase.TEST
        assert config.accelerated is False
        assert config.gpu_memory_mb is None
        assert config.budget_bytes is None

    def test_phase_string_normalized(self):
        config = AnalyzerConfig(phase="Train").validate()
        assert config.phase is Phase.TRAIN

    def test_invalid_phase(self):
        with pytest.raises(ConfigurationError):
            AnalyzerConfig(phase="deploy").validate()

    def test_budget_bytes(self):
        assert AnalyzerConfig(gpu_memory_mb=1.5).budget_bytes == int(1.5 * MiB)

    def test_non_positive_budget(self):
        with pytest.raises(ConfigurationError):
            AnalyzerConfig(gpu_memory_mb=0).validate()

    def test_element_size(self):
        config = AnalyzerConfig(element_size=[1, 2]).validate()
        assert config.element_size == (1.0, 2.0)
        with pytest.raises(ConfigurationError):
            AnalyzerConfig(element_size=[1.0, -1.0]).validate()

    def test_to_dict(self):
        data = AnalyzerConfig(phase=Phase.TRAIN, accelerated=True).to_dict()
        assert data == {
            "phase": "train",
            "accelerated": True,
            "gpu_memory_mb": None,
            "element_size": None,
        }


class TestFromEnv:
    """Tests for LAYERGAUGE_* environment variables."""

    def test_empty_env(self, clean_env):
        config = AnalyzerConfig.from_env()
        assert config == AnalyzerConfig()

    def test_env_values(self, clean_env):
        clean_env.setenv("LAYERGAUGE_PHASE", "train")
        clean_env.setenv("LAYERGAUGE_ACCELERATED", "on")
        clean_env.setenv("LAYERGAUGE_GPU_MEMORY_MB", "8000")
        config = AnalyzerConfig.from_env()
        assert config.phase is Phase.TRAIN
        assert config.accelerated is True
        assert config.gpu_memory_mb == 8000.0

    def test_overrides_win(self, clean_env):
        clean_env.setenv("LAYERGAUGE_PHASE", "train")
        config = AnalyzerConfig.from_env(phase="test", accelerated=None)
        assert config.phase is Phase.TEST
        assert config.accelerated is False

    def test_bad_accelerated_flag(self, clean_env):
        clean_env.setenv("LAYERGAUGE_ACCELERATED", "maybe")
        with pytest.raises(ConfigurationError):
            AnalyzerConfig.from_env()

    def test_bad_budget(self, clean_env):
        clean_env.setenv("LAYERGAUGE_GPU_MEMORY_MB", "lots")
        with pytest.raises(ConfigurationError):
            AnalyzerConfig.from_env()
