# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Data layer.

Placeholder for any kind of data generation (input blobs, HDF5 readers).
Output shapes are copied verbatim from the ``shape`` parameter, one shape
per output.
"""

from __future__ import annotations

from ..core.types import LayerType
from .base import Layer
from .factory import LayerFactory


@LayerFactory.register(LayerType.DATA, aliases=[LayerType.INPUT, LayerType.HDF5_DATA])
class DataLayer(Layer):
    """Source layer without inputs."""

    def setup(self) -> None:
        self._require_inputs(0, 0)
        self._require_outputs(1)

        shapes = self.param("shape")
        if shapes is None:
            raise self._error("'shape' is required", "shape")
        if not isinstance(shapes, (list, tuple)):
            raise self._error(f"'shape' must be a list, got {shapes!r}", "shape")
        if shapes and not isinstance(shapes[0], (list, tuple)):
            shapes = [shapes]
        if len(shapes) != len(self.declaration.outputs):
            raise self._error(
                f"{len(self.declaration.outputs)} output(s) but "
                f"{len(shapes)} shape(s) declared",
                "shape",
            )

        for top, shape in zip(self.declaration.outputs, shapes):
            try:
                dims = [int(d) for d in shape]
            except (TypeError, ValueError):
                raise self._error(
                    f"shape of '{top}' must be a list of integers, got {shape!r}",
                    "shape",
                )
            if len(dims) < 2:
                raise self._error(
                    f"shape of '{top}' needs sample and channel axes, got {dims}",
                    "shape",
                )
            self._check_fresh_name(top)
            element_size = self._registry.element_size_for(len(dims) - 2)
            self.outputs.append(self._new_blob(top, dims, element_size=element_size))
