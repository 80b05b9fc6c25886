# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Pytest configuration for LayerGauge Python tests.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so we can import layergauge
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Skip test modules that require optional dependencies not installed
collect_ignore = []

# Check for hypothesis
try:
    import hypothesis  # noqa: F401
except ImportError:
    collect_ignore.append("test_property_based.py")

from layergauge.core import GraphRegistry, LayerDeclaration, Phase  # noqa: E402
from layergauge.layers import LayerFactory  # noqa: E402
from layergauge.observability import LayerGaugeLogger, Verbosity  # noqa: E402


@pytest.fixture(autouse=True)
def quiet_logger():
    """Fresh, silent structured logger for every test."""
    LayerGaugeLogger.reset()
    LayerGaugeLogger.get().set_verbosity(Verbosity.SILENT)
    yield
    LayerGaugeLogger.reset()


@pytest.fixture
def registry():
    return GraphRegistry(phase=Phase.TEST)


@pytest.fixture
def train_registry():
    return GraphRegistry(phase=Phase.TRAIN)


@pytest.fixture
def add_layer():
    """Create a layer from keyword parameters and append it to a registry."""

    def _add(registry, type_tag, name, inputs=(), outputs=None, **params):
        declaration = LayerDeclaration(
            type=type_tag,
            name=name,
            inputs=list(inputs),
            outputs=list(outputs) if outputs is not None else [name],
            params=params,
        )
        return LayerFactory.create(declaration, registry)

    return _add


@pytest.fixture
def add_input(add_layer):
    """Declare an external input blob and return its descriptor."""

    def _input(registry, name, shape):
        layer = add_layer(
            registry, "Input", f"{name}_input", outputs=[name], shape=[list(shape)]
        )
        return layer.outputs[0]

    return _input
