# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge: Static Memory Analyzer for Layer Graphs

Reconstructs the blob shapes of a network from its ordered layer
declarations and computes the device memory a deployment would need,
before any weights are loaded or any computation is run.

Example:
    import layergauge

    report = layergauge.analyze(
        declarations,
        layergauge.AnalyzerConfig(phase="train", accelerated=True),
        input_names=["data"],
        input_shapes=[[1, 1, 508, 508]],
    )
    print(report.format_breakdown())
"""

__version__ = "0.3.0"

from .core import (
    BYTES_PER_ELEMENT,
    LayerType,
    Phase,
    LayerDeclaration,
    TensorDescriptor,
    GraphRegistry,
    broadcast_last,
)
from .layers import Layer, LayerFactory, create_layer
from .network import Network, build_network
from .memory import LayerMemory, MemoryReport
from .config import AnalyzerConfig
from .api import analyze

# Observability
from .observability import set_verbosity, Verbosity

# Errors
from .errors import (
    LayerGaugeError,
    UnsupportedLayerTypeError,
    MissingNamedBlobError,
    DuplicateOutputNameError,
    InvalidParameterError,
    ConfigurationError,
    MemoryBudgetExceededError,
)

__all__ = [
    # Core types
    "BYTES_PER_ELEMENT",
    "LayerType",
    "Phase",
    "LayerDeclaration",
    "TensorDescriptor",
    "GraphRegistry",
    "broadcast_last",
    # Layers
    "Layer",
    "LayerFactory",
    "create_layer",
    # Network
    "Network",
    "build_network",
    "LayerMemory",
    "MemoryReport",
    # API
    "AnalyzerConfig",
    "analyze",
    # Observability
    "set_verbosity",
    "Verbosity",
    # Errors
    "LayerGaugeError",
    "UnsupportedLayerTypeError",
    "MissingNamedBlobError",
    "DuplicateOutputNameError",
    "InvalidParameterError",
    "ConfigurationError",
    "MemoryBudgetExceededError",
    # Version
    "__version__",
]
