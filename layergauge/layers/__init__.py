# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Layers

One module per layer family. Importing this package registers every
family with the LayerFactory.
"""

from .base import Layer
from .factory import LayerFactory, create_layer

from .data import DataLayer
from .convolution import ConvolutionLayer, UpConvolutionLayer
from .pooling import PoolingLayer, pooled_extent
from .elementwise import (
    ValueTransformationLayer,
    ValueAugmentationLayer,
    ReLULayer,
    DropoutLayer,
    SoftmaxLayer,
)
from .concat import ConcatAndCropLayer
from .deformation import CreateDeformationLayer, ApplyDeformationLayer
from .loss import SoftmaxWithLossLayer

__all__ = [
    "Layer",
    "LayerFactory",
    "create_layer",
    "DataLayer",
    "ConvolutionLayer",
    "UpConvolutionLayer",
    "PoolingLayer",
    "pooled_extent",
    "ValueTransformationLayer",
    "ValueAugmentationLayer",
    "ReLULayer",
    "DropoutLayer",
    "SoftmaxLayer",
    "ConcatAndCropLayer",
    "CreateDeformationLayer",
    "ApplyDeformationLayer",
    "SoftmaxWithLossLayer",
]
