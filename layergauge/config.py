# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Analyzer configuration.

Environment variables:
- LAYERGAUGE_PHASE: "train" or "test"
- LAYERGAUGE_ACCELERATED: "1"/"on"/"true" to assume an accelerated library
- LAYERGAUGE_GPU_MEMORY_MB: device memory budget in MiB
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .core.types import MiB, Phase
from .errors import ConfigurationError


_TRUE_VALUES = ("1", "on", "true", "yes")
_FALSE_VALUES = ("0", "off", "false", "no", "")


@dataclass
class AnalyzerConfig:
    """Configuration for a network memory analysis."""

    phase: Phase = Phase.TEST
    accelerated: bool = False
    gpu_memory_mb: Optional[float] = None
    element_size: Optional[tuple[float, ...]] = None

    def validate(self) -> "AnalyzerConfig":
        """Check value ranges, returning self for chaining."""
        if not isinstance(self.phase, Phase):
            try:
                self.phase = Phase.parse(self.phase)
            except ValueError:
                raise ConfigurationError(
                    "phase must be 'train' or 'test'",
                    config_key="phase",
                    config_value=self.phase,
                )
        if self.gpu_memory_mb is not None and self.gpu_memory_mb <= 0:
            raise ConfigurationError(
                "GPU memory budget must be positive",
                config_key="gpu_memory_mb",
                config_value=self.gpu_memory_mb,
            )
        if self.element_size is not None:
            self.element_size = tuple(float(e) for e in self.element_size)
            if not self.element_size or any(e <= 0 for e in self.element_size):
                raise ConfigurationError(
                    "element size must contain positive extents",
                    config_key="element_size",
                    config_value=self.element_size,
                )
        return self

    @property
    def budget_bytes(self) -> Optional[int]:
        if self.gpu_memory_mb is None:
            return None
        return int(self.gpu_memory_mb * MiB)

    @classmethod
    def from_env(cls, **overrides) -> "AnalyzerConfig":
        """Build a config from LAYERGAUGE_* variables, then apply overrides."""
        values = {}

        phase = os.environ.get("LAYERGAUGE_PHASE")
        if phase:
            values["phase"] = phase

        accelerated = os.environ.get("LAYERGAUGE_ACCELERATED")
        if accelerated is not None:
            flag = accelerated.strip().lower()
            if flag in _TRUE_VALUES:
                values["accelerated"] = True
            elif flag in _FALSE_VALUES:
                values["accelerated"] = False
            else:
                raise ConfigurationError(
                    "cannot interpret accelerated flag",
                    config_key="LAYERGAUGE_ACCELERATED",
                    config_value=accelerated,
                )

        budget = os.environ.get("LAYERGAUGE_GPU_MEMORY_MB")
        if budget:
            try:
                values["gpu_memory_mb"] = float(budget)
            except ValueError:
                raise ConfigurationError(
                    "GPU memory budget must be a number",
                    config_key="LAYERGAUGE_GPU_MEMORY_MB",
                    config_value=budget,
                )

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values).validate()

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "accelerated": self.accelerated,
            "gpu_memory_mb": self.gpu_memory_mb,
            "element_size": list(self.element_size) if self.element_size else None,
        }
