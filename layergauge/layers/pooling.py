# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Pooling layer (windowed reduction).

Output extent per axis is ``ceil((in + 2*pad - kernel) / stride) + 1``.
With padding, a last window starting inside the padding is dropped, and
the parameters are rejected if the window still starts there.
"""

from __future__ import annotations

from ..core.types import BYTES_PER_ELEMENT, LayerType
from .base import Layer, format_axes
from .factory import LayerFactory


def _ceil_div(numerator: int, denominator: int) -> int:
    return -((-numerator) // denominator)


def pooled_extent(extent: int, kernel: int, pad: int, stride: int) -> int:
    """Unadjusted pooled extent of one axis."""
    return _ceil_div(extent + 2 * pad - kernel, stride) + 1


@LayerFactory.register(LayerType.POOLING)
class PoolingLayer(Layer):
    """Max or average pooling over all spatial axes."""

    def setup(self) -> None:
        self._require_inputs(1, 1)
        self._require_outputs(1, 1)

        src = self.inputs[0]
        n = src.n_spatial_dims
        self.method = str(self.param("pool", "MAX")).upper()
        if self.param("global_pooling", False):
            self.kernel_shape = list(src.spatial_shape())
            self.pad = [0] * n
            self.stride = [1] * n
        else:
            self.kernel_shape = self._axis_param("kernel_size", n, minimum=1)
            self.pad = self._axis_param("pad", n, default=0, minimum=0)
            self.stride = self._axis_param("stride", n, default=1, minimum=1)

        top = self.declaration.outputs[0]
        self._check_fresh_name(top)

        # Scratch shape; the descriptor is only created once all axes pass.
        spatial = [
            pooled_extent(extent, self.kernel_shape[d], self.pad[d], self.stride[d])
            for d, extent in enumerate(src.spatial_shape())
        ]
        if sum(self.pad) > 0:
            for d, extent in enumerate(src.spatial_shape()):
                if (spatial[d] - 1) * self.stride[d] >= extent + self.pad[d]:
                    spatial[d] -= 1
                if (spatial[d] - 1) * self.stride[d] >= extent + self.pad[d]:
                    raise self._error(
                        f"last pooling window of axis {d} starts in the padding",
                        "pad",
                    )
        for d, extent in enumerate(spatial):
            if extent <= 0:
                raise self._error(
                    f"pooling would reduce axis {d} of '{src.name}' to zero",
                    "kernel_size",
                )

        element_size = [e * s for e, s in zip(src.element_size, self.stride)]
        self.outputs.append(
            self._new_blob(
                top,
                [src.n_samples, src.n_channels] + spatial,
                element_size=element_size,
                device_resident=True,
                gradient_required=src.gradient_required,
            )
        )
        self._mark_inputs_resident()

    def internal_bytes(self) -> int:
        # Arg-max indices for the backward pass and unpooling, plus the
        # kernel/pad/stride/shape descriptors kept on the device.
        n = len(self.kernel_shape)
        return BYTES_PER_ELEMENT * (self.outputs[0].count() + 4 * n + (n + 1))

    def param_string(self) -> str:
        return " ".join(
            [
                f"pool: {self.method}",
                format_axes("kernelShape", self.kernel_shape),
                format_axes("pad", self.pad),
                format_axes("stride", self.stride),
            ]
        )
