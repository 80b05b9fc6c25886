# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Concat-and-crop layer.

Concatenates along the channel axis and center-crops every input to the
smallest spatial extent found among them, as needed for the skip
connections of encoder/decoder networks.
"""

from __future__ import annotations

from ..core.types import LayerType
from .base import Layer
from .factory import LayerFactory


@LayerFactory.register(LayerType.CONCAT)
class ConcatAndCropLayer(Layer):
    """
    Channel concatenation with cropping.

    Sample counts of the inputs are not compared; the first input's sample
    count is used.
    """

    def setup(self) -> None:
        self._require_inputs(1)
        self._require_outputs(1, 1)
        top = self.declaration.outputs[0]
        self._check_fresh_name(top)

        first = self.inputs[0]
        for blob in self.inputs[1:]:
            if blob.n_spatial_dims != first.n_spatial_dims:
                raise self._error(
                    f"'{blob.name}' and '{first.name}' differ in spatial rank",
                    "inputs",
                )

        channels = sum(blob.n_channels for blob in self.inputs)
        spatial = [
            min(blob.shape[d] for blob in self.inputs)
            for d in range(2, first.rank())
        ]
        self.outputs.append(
            self._new_blob(
                top,
                [first.n_samples, channels] + spatial,
                device_resident=True,
                gradient_required=self._any_input_gradient(),
            )
        )
        self._mark_inputs_resident()
