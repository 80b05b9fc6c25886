# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Convolution Layers

- Convolution: strided forward convolution
- Deconvolution: transposed (up-sampling) convolution

Both charge ``4 * out_channels * (in_channels * kernel_volume + 1)`` bytes
of parameters (weights plus bias). Without an accelerated library the
convolutions are lowered to matrix products over an explicit im2col /
col2im buffer, which is charged as workspace instead of the fixed
accelerated-library workspace.
"""

from __future__ import annotations

from ..core.types import BYTES_PER_ELEMENT, MiB, LayerType
from .base import Layer, format_axes
from .factory import LayerFactory


# Workspace reserved by the accelerated library per convolution
CONV_WORKSPACE_BYTES = 8 * MiB
DECONV_WORKSPACE_BYTES = 3 * 8 * MiB


class _WindowedLayer(Layer):
    """Shared kernel/pad/stride/dilation handling."""

    def _read_window(self, with_dilation: bool = True) -> None:
        n = self.inputs[0].n_spatial_dims
        self.kernel_shape = self._axis_param("kernel_size", n, minimum=1)
        self.pad = self._axis_param("pad", n, default=0, minimum=0)
        self.stride = self._axis_param("stride", n, default=1, minimum=1)
        if with_dilation:
            self.dilation = self._axis_param("dilation", n, default=1, minimum=1)
        else:
            self.dilation = [1] * n

    @property
    def kernel_volume(self) -> int:
        return self._kernel_volume(self.kernel_shape)

    def param_string(self) -> str:
        return " ".join(
            [
                format_axes("kernelShape", self.kernel_shape),
                format_axes("pad", self.pad),
                format_axes("stride", self.stride),
                format_axes("dilation", self.dilation),
            ]
        )


@LayerFactory.register(LayerType.CONVOLUTION)
class ConvolutionLayer(_WindowedLayer):
    """Forward convolution; output extents shrink with kernel and stride."""

    def setup(self) -> None:
        self._require_inputs(1, 1)
        self._require_outputs(1, 1)
        self._read_window()
        self.num_output = self._int_param("num_output", minimum=1)

        top = self.declaration.outputs[0]
        self._check_fresh_name(top)

        src = self.inputs[0]
        shape = [src.n_samples, self.num_output]
        for d, extent in enumerate(src.spatial_shape()):
            numerator = (
                extent
                + 2 * self.pad[d]
                - (self.dilation[d] * (self.kernel_shape[d] - 1) + 1)
            )
            if numerator <= 0:
                raise self._error(
                    f"convolution would reduce axis {d} of '{src.name}' to zero",
                    "kernel_size",
                )
            if numerator % self.stride[d] != 0:
                raise self._error(
                    f"stride {self.stride[d]} does not divide axis {d} "
                    f"of '{src.name}' evenly",
                    "stride",
                )
            shape.append(numerator // self.stride[d] + 1)

        element_size = [e * s for e, s in zip(src.element_size, self.stride)]
        self.outputs.append(
            self._new_blob(
                top,
                shape,
                element_size=element_size,
                device_resident=True,
                gradient_required=True,
            )
        )
        self._mark_inputs_resident()

    def parameter_bytes(self) -> int:
        return (
            BYTES_PER_ELEMENT
            * self.num_output
            * (self.inputs[0].n_channels * self.kernel_volume + 1)
        )

    def workspace_bytes(self, accelerated: bool) -> int:
        if accelerated:
            return CONV_WORKSPACE_BYTES
        return (
            BYTES_PER_ELEMENT
            * self.outputs[0].count(2)
            * self.inputs[0].n_channels
            * self.kernel_volume
        )


@LayerFactory.register(LayerType.DECONVOLUTION)
class UpConvolutionLayer(_WindowedLayer):
    """Transposed convolution; one output per input."""

    def setup(self) -> None:
        self._require_inputs(1)
        self._require_outputs(1, len(self.inputs))
        self._read_window()
        self.num_output = self._int_param("num_output", minimum=1)

        for src, top in zip(self.inputs, self.declaration.outputs):
            self._check_fresh_name(top)
            shape = [src.n_samples, self.num_output]
            for d, extent in enumerate(src.spatial_shape()):
                out = (
                    self.stride[d] * (extent - 1)
                    + (self.dilation[d] * (self.kernel_shape[d] - 1) + 1)
                    - 2 * self.pad[d]
                )
                if out <= 0:
                    raise self._error(
                        f"up-convolution would reduce axis {d} of '{src.name}' to zero",
                        "pad",
                    )
                shape.append(out)
            element_size = [e / s for e, s in zip(src.element_size, self.stride)]
            self.outputs.append(
                self._new_blob(
                    top,
                    shape,
                    element_size=element_size,
                    device_resident=True,
                    gradient_required=True,
                )
            )
        self._mark_inputs_resident()

    def parameter_bytes(self) -> int:
        return (
            BYTES_PER_ELEMENT
            * self.outputs[0].n_channels
            * (self.inputs[0].n_channels * self.kernel_volume + 1)
        )

    def workspace_bytes(self, accelerated: bool) -> int:
        if accelerated:
            return DECONV_WORKSPACE_BYTES
        return (
            BYTES_PER_ELEMENT
            * self.inputs[0].count(2)
            * self.outputs[0].n_channels
            * self.kernel_volume
        )
