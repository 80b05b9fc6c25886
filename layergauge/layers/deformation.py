# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Deformation layers used for on-the-fly elastic data augmentation.

- CreateDeformation: produces a dense deformation field of shape
  ``[batch, (nz,) ny, nx, ncomponents]``
- ApplyDeformation: warps a blob with a deformation field
"""

from __future__ import annotations

from ..core.types import LayerType
from ..errors import format_shape_mismatch
from .base import Layer
from .factory import LayerFactory


@LayerFactory.register(LayerType.CREATE_DEFORMATION)
class CreateDeformationLayer(Layer):
    """
    Deformation field source.

    A positive ``nz`` selects a 3-D field, otherwise the field is 2-D. The
    batch size is taken from the optional input, else from ``batch_size``.
    """

    def setup(self) -> None:
        self._require_inputs(0, 1)
        self._require_outputs(1, 1)

        nz = self._int_param("nz", default=0)
        ny = self._int_param("ny", minimum=1)
        nx = self._int_param("nx", minimum=1)
        n_dims = 3 if nz > 0 else 2
        n_components = self._int_param("ncomponents", default=n_dims, minimum=1)

        if self.inputs:
            batch = self.inputs[0].n_samples
        else:
            batch = self._int_param("batch_size", default=1, minimum=1)

        sizes = [nz, ny, nx] if n_dims == 3 else [ny, nx]
        self.n_dims = n_dims

        top = self.declaration.outputs[0]
        self._check_fresh_name(top)
        self.outputs.append(
            self._new_blob(
                top,
                [batch] + sizes + [n_components],
                element_size=self._registry.element_size_for(n_dims),
            )
        )

    def param_string(self) -> str:
        return f"nDims: {self.n_dims}"


@LayerFactory.register(LayerType.APPLY_DEFORMATION)
class ApplyDeformationLayer(Layer):
    """
    Warps the first input with the deformation field given as second input.

    Spatial output extents come from the field's spatial extents or, if
    ``output_shape_from`` names a blob, from that blob's spatial shape.
    """

    def setup(self) -> None:
        shape_from = str(self.param("output_shape_from", "") or "")
        self._require_inputs(1 if shape_from else 2)
        self._require_outputs(1, 1)

        src = self.inputs[0]
        n = src.n_spatial_dims
        if shape_from:
            reference = self._registry.resolve(
                shape_from,
                layer_name=self.name,
                layer_type=self.type_tag,
                role="shape source",
            )
            spatial = list(reference.spatial_shape())
        else:
            # Field layout is [batch, spatial..., components]
            spatial = list(self.inputs[1].shape[1 : 1 + n])
        if len(spatial) != n:
            raise format_shape_mismatch(
                src.spatial_shape(),
                tuple(spatial),
                tensor_name="output_shape_from",
                layer_name=self.name,
                layer_type=self.type_tag,
            )
        self.shape_from = shape_from

        top = self.declaration.outputs[0]
        self._check_fresh_name(top)
        self.outputs.append(
            self._new_blob(top, [src.n_samples, src.n_channels] + spatial)
        )

    def param_string(self) -> str:
        if self.shape_from:
            return f"shapeFrom: {self.shape_from}"
        return ""
