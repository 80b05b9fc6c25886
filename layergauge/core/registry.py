# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
GraphRegistry

Ordered layer list plus the descriptor table every layer resolves its
inputs from. Declaration order is the only ordering guarantee: a blob
name becomes resolvable once its producing layer has been appended.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence, TYPE_CHECKING

from ..errors import DuplicateOutputNameError, InvalidParameterError, MissingNamedBlobError
from .tensor import TensorDescriptor
from .types import Phase

if TYPE_CHECKING:
    from ..layers.base import Layer


logger = logging.getLogger("layergauge.core.registry")


class GraphRegistry:
    """
    Append-only layer sequence and name -> descriptor index.

    Descriptors live in an arena and keep the integer id they receive on
    registration for the lifetime of the registry.

    Example:
        registry = GraphRegistry(element_size=(1.0, 1.0))
        registry.append(layer)
        registry.find("conv1")
    """

    def __init__(
        self,
        element_size: Optional[Sequence[float]] = None,
        phase: Phase = Phase.TEST,
    ):
        self.phase = phase
        self._element_size: Optional[tuple[float, ...]] = (
            tuple(float(e) for e in element_size) if element_size is not None else None
        )
        self._layers: list["Layer"] = []
        self._layer_names: set[str] = set()
        self._descriptors: list[TensorDescriptor] = []
        self._index: dict[str, int] = {}
        # Produced but not (yet) consumed, in production order
        self._terminal: dict[int, None] = {}

    # ------------------------------------------------------------------
    # Network geometry
    # ------------------------------------------------------------------

    @property
    def training(self) -> bool:
        return self.phase == Phase.TRAIN

    @property
    def element_size(self) -> Optional[tuple[float, ...]]:
        return self._element_size

    @property
    def n_spatial_dims(self) -> Optional[int]:
        """Spatial dimension count, None until known."""
        if self._element_size is None:
            return None
        return len(self._element_size)

    def element_size_for(self, n_spatial_dims: int) -> tuple[float, ...]:
        """Element size to use for a freshly declared blob."""
        if self._element_size is not None:
            return self._element_size
        return (1.0,) * n_spatial_dims

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find(self, name: str) -> Optional[TensorDescriptor]:
        """Get a registered descriptor by name."""
        idx = self._index.get(name)
        if idx is None:
            return None
        return self._descriptors[idx]

    def resolve(
        self,
        name: str,
        layer_name: Optional[str] = None,
        layer_type: Optional[str] = None,
        role: str = "input",
    ) -> TensorDescriptor:
        """Get a registered descriptor or raise MissingNamedBlobError."""
        blob = self.find(name)
        if blob is None:
            raise MissingNamedBlobError(
                name, layer_name=layer_name, layer_type=layer_type, role=role
            )
        return blob

    def descriptor(self, blob_id: int) -> TensorDescriptor:
        return self._descriptors[blob_id]

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def find_layer(self, name: str) -> Optional["Layer"]:
        for layer in self._layers:
            if layer.name == name:
                return layer
        return None

    @property
    def layers(self) -> list["Layer"]:
        return list(self._layers)

    @property
    def descriptors(self) -> list[TensorDescriptor]:
        return list(self._descriptors)

    def outputs(self) -> list[TensorDescriptor]:
        """Blobs produced by some layer and consumed by none."""
        return [self._descriptors[i] for i in self._terminal]

    def num_layers(self) -> int:
        return len(self._layers)

    def num_blobs(self) -> int:
        return len(self._descriptors)

    def __len__(self) -> int:
        return len(self._layers)

    def __iter__(self) -> Iterator["Layer"]:
        return iter(self._layers)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, layer: "Layer") -> None:
        """
        Append a fully constructed layer and register its outputs.

        All checks run before anything is registered, so a rejected layer
        leaves the registry and the flags of its inputs unchanged.
        """
        layer_type = layer.type_tag
        if layer.name in self._layer_names:
            raise InvalidParameterError(
                f"Layer name '{layer.name}' is declared twice",
                layer_name=layer.name,
                layer_type=layer_type,
                parameter="name",
            )

        fresh: list[TensorDescriptor] = []
        n_spatial = self.n_spatial_dims
        for blob in layer.outputs:
            existing = self.find(blob.name)
            if existing is not None:
                if existing is blob and layer.supports_in_place:
                    continue
                raise DuplicateOutputNameError(
                    blob.name, layer_name=layer.name, layer_type=layer_type
                )
            if any(blob.name == other.name for other in fresh):
                raise DuplicateOutputNameError(
                    blob.name, layer_name=layer.name, layer_type=layer_type
                )
            if not blob.scalar:
                if n_spatial is None:
                    n_spatial = blob.n_spatial_dims
                elif blob.n_spatial_dims != n_spatial:
                    raise InvalidParameterError(
                        f"Blob '{blob.name}' has {blob.n_spatial_dims} spatial "
                        f"dimensions, the network has {n_spatial}",
                        layer_name=layer.name,
                        layer_type=layer_type,
                        parameter="shape",
                    )
            fresh.append(blob)

        if self._element_size is None and n_spatial is not None:
            self._element_size = (1.0,) * n_spatial

        layer.commit()
        self._layers.append(layer)
        self._layer_names.add(layer.name)
        for blob in layer.inputs:
            if blob.id is not None:
                self._terminal.pop(blob.id, None)
        for blob in fresh:
            blob.id = len(self._descriptors)
            self._descriptors.append(blob)
            self._index[blob.name] = blob.id
        for blob in layer.outputs:
            self._terminal[blob.id] = None

        logger.debug(
            "registered layer %s (%s), %d new blob(s)", layer.name, layer_type, len(fresh)
        )

    def __repr__(self) -> str:
        return (
            f"GraphRegistry(layers={len(self._layers)}, "
            f"blobs={len(self._descriptors)}, phase={self.phase.value})"
        )
