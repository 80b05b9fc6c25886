# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""LayerGauge Core Module"""

from .types import (
    BYTES_PER_ELEMENT,
    MiB,
    LayerType,
    Phase,
    LayerDeclaration,
    ParamValue,
    ParamMap,
    broadcast_last,
)
from .tensor import TensorDescriptor
from .registry import GraphRegistry

__all__ = [
    "BYTES_PER_ELEMENT",
    "MiB",
    "LayerType",
    "Phase",
    "LayerDeclaration",
    "ParamValue",
    "ParamMap",
    "broadcast_last",
    "TensorDescriptor",
    "GraphRegistry",
]
