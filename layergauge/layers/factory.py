# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Layer Factory

Maps layer type tags to the layer family implementing them. Families
register themselves with a decorator; the set of keys is the closed
``LayerType`` enum, so an unknown tag fails here and nowhere else.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ..core.registry import GraphRegistry
from ..core.tensor import TensorDescriptor
from ..core.types import LayerDeclaration, LayerType
from ..errors import UnsupportedLayerTypeError
from .base import Layer


logger = logging.getLogger("layergauge.layers.factory")

LayerClass = type[Layer]


class LayerFactory:
    """
    Registry of layer family implementations.

    Example:
        @LayerFactory.register(LayerType.POOLING)
        class PoolingLayer(Layer):
            ...

        layer = LayerFactory.create(declaration, registry)
    """

    _registry: dict[LayerType, LayerClass] = {}

    @classmethod
    def register(
        cls,
        layer_type: LayerType,
        aliases: Optional[list[LayerType]] = None,
    ) -> Callable[[LayerClass], LayerClass]:
        """
        Decorator to register a layer family.

        Args:
            layer_type: Primary type handled by the class.
            aliases: Further type tags handled by the same class.
        """

        def decorator(layer_cls: LayerClass) -> LayerClass:
            layer_cls.layer_type = layer_type
            cls._registry[layer_type] = layer_cls
            for alias in aliases or []:
                cls._registry[alias] = layer_cls
            return layer_cls

        return decorator

    @classmethod
    def get_class(cls, type_tag: str, layer_name: Optional[str] = None) -> LayerClass:
        """
        Get the family implementing a type tag.

        Raises:
            UnsupportedLayerTypeError: If the tag is unknown.
        """
        layer_type = LayerType.from_tag(type_tag)
        if layer_type is None or layer_type not in cls._registry:
            raise UnsupportedLayerTypeError(
                type_tag,
                layer_name=layer_name,
                supported_types=cls.supported_types(),
            )
        return cls._registry[layer_type]

    @classmethod
    def is_supported(cls, type_tag: str) -> bool:
        layer_type = LayerType.from_tag(type_tag)
        return layer_type is not None and layer_type in cls._registry

    @classmethod
    def supported_types(cls) -> list[str]:
        return sorted(t.value for t in cls._registry)

    @classmethod
    def unregistered_types(cls) -> list[LayerType]:
        """Enum members without an implementation (should be empty)."""
        return [t for t in LayerType if t not in cls._registry]

    @classmethod
    def create(
        cls,
        declaration: LayerDeclaration,
        registry: GraphRegistry,
        inputs: Optional[Sequence[TensorDescriptor]] = None,
        register: bool = True,
    ) -> Layer:
        """
        Create a layer from its declaration.

        Args:
            declaration: The layer declaration record.
            registry: Registry used to resolve inputs and references.
            inputs: Pre-resolved inputs; resolved by name when omitted.
            register: Append the layer (and its outputs) to the registry.

        Returns:
            The constructed layer.

        Raises:
            UnsupportedLayerTypeError: Unknown type tag.
            MissingNamedBlobError: An input or reference is not registered.
            DuplicateOutputNameError: An output name is already taken.
            InvalidParameterError: Inconsistent parameters or shapes.
        """
        layer_cls = cls.get_class(declaration.type, declaration.name)

        if inputs is None:
            inputs = [
                registry.resolve(
                    name, layer_name=declaration.name, layer_type=declaration.type
                )
                for name in declaration.inputs
            ]

        layer = layer_cls(declaration, registry, inputs)
        if register:
            registry.append(layer)
        logger.debug("created %s", layer)
        return layer


def create_layer(
    declaration: LayerDeclaration,
    registry: GraphRegistry,
    inputs: Optional[Sequence[TensorDescriptor]] = None,
) -> Layer:
    """Create a layer and append it to the registry."""
    return LayerFactory.create(declaration, registry, inputs)
