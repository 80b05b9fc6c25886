# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Identity-Shaped Layers

Layers whose outputs have exactly the shape of their inputs:
- ValueTransformation: per-channel scale and shift
- ValueAugmentation: random intensity augmentation
- ReLU: rectification, may run in place
- Dropout: random masking, may reuse the input name
- Softmax: channel-wise normalization
"""

from __future__ import annotations

from ..core.types import BYTES_PER_ELEMENT, LayerType
from .base import Layer
from .factory import LayerFactory


class _ValueLayer(Layer):
    """Single output that inherits the accounting flags of its input."""

    def setup(self) -> None:
        self._require_inputs(1, 1)
        self._require_outputs(1, 1)
        top = self.declaration.outputs[0]
        self._check_fresh_name(top)
        src = self.inputs[0]
        self.outputs.append(
            self._new_blob(
                top,
                src.shape,
                device_resident=src.device_resident,
                forward_required=src.forward_required,
                gradient_required=src.gradient_required,
            )
        )


@LayerFactory.register(LayerType.VALUE_TRANSFORMATION)
class ValueTransformationLayer(_ValueLayer):
    """Elementwise ``scale * x + shift`` with per-channel coefficients."""

    def parameter_bytes(self) -> int:
        return BYTES_PER_ELEMENT * 2 * self.inputs[0].n_channels


@LayerFactory.register(LayerType.VALUE_AUGMENTATION)
class ValueAugmentationLayer(_ValueLayer):
    pass


class _AliasingLayer(Layer):
    """
    One output per input. An output declared with its input's name reuses
    the input descriptor instead of creating a new one.
    """

    supports_in_place = True

    def setup(self) -> None:
        self._require_inputs(1)
        self._require_outputs(len(self.inputs), len(self.inputs))
        self.aliased: list[bool] = []
        for src, top in zip(self.inputs, self.declaration.outputs):
            if top == src.name:
                self.outputs.append(src)
                self.aliased.append(True)
                continue
            self._check_fresh_name(top)
            self.outputs.append(
                self._new_blob(
                    top,
                    src.shape,
                    device_resident=True,
                    gradient_required=src.gradient_required,
                )
            )
            self.aliased.append(False)
        self._mark_inputs_resident()


@LayerFactory.register(LayerType.RELU)
class ReLULayer(_AliasingLayer):
    """Rectified linear unit; truly in place when aliased."""


@LayerFactory.register(LayerType.DROPOUT)
class DropoutLayer(_AliasingLayer):
    """
    Dropout with one 32-bit random mask per input.

    Execution is never actually in place: an aliased output still needs a
    full-size buffer, which is charged as internal memory.
    """

    def internal_bytes(self) -> int:
        masks = sum(self._blob_bytes(src) for src in self.inputs)
        alias_buffers = sum(
            self._blob_bytes(src)
            for src, aliased in zip(self.inputs, self.aliased)
            if aliased
        )
        return masks + alias_buffers

    def param_string(self) -> str:
        ratio = self.param("dropout_ratio")
        return "" if ratio is None else f"ratio: {ratio}"


@LayerFactory.register(LayerType.SOFTMAX)
class SoftmaxLayer(Layer):
    """Softmax over the channel axis."""

    def setup(self) -> None:
        self._require_inputs(1, 1)
        self._require_outputs(1, 1)
        top = self.declaration.outputs[0]
        self._check_fresh_name(top)
        src = self.inputs[0]
        self.outputs.append(
            self._new_blob(
                top,
                src.shape,
                device_resident=True,
                gradient_required=src.gradient_required,
            )
        )
        self._mark_inputs_resident()

    def internal_bytes(self) -> int:
        # Channel sum multiplier plus one scale value per channel vector
        src = self.inputs[0]
        return BYTES_PER_ELEMENT * (src.n_channels + src.count() // src.n_channels)
