# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Softmax-with-loss layer.

Produces the scalar loss and optionally the full-shape score blob. The
normalized probabilities are computed by an internal softmax layer that
is never registered in the network; it exists only for its memory
contribution.
"""

from __future__ import annotations

import uuid

from ..core.types import LayerDeclaration, LayerType
from .base import Layer
from .elementwise import SoftmaxLayer
from .factory import LayerFactory


@LayerFactory.register(LayerType.SOFTMAX_WITH_LOSS)
class SoftmaxWithLossLayer(Layer):
    """Multinomial logistic loss over softmax probabilities."""

    def setup(self) -> None:
        self._require_inputs(1)
        self._require_outputs(1, 2)

        helper_decl = LayerDeclaration(
            type=LayerType.SOFTMAX.value,
            name=f"{self.name}/softmax",
            inputs=[self.inputs[0].name],
            outputs=[uuid.uuid4().hex],
        )
        self.softmax = SoftmaxLayer(helper_decl, self._registry, self.inputs[:1])

        tops = self.declaration.outputs
        self._check_fresh_name(tops[0])
        self.outputs.append(
            self._new_blob(
                tops[0],
                [1],
                device_resident=True,
                gradient_required=True,
                scalar=True,
            )
        )
        if len(tops) > 1:
            self._check_fresh_name(tops[1])
            self.outputs.append(
                self._new_blob(tops[1], self.inputs[0].shape, device_resident=True)
            )
        self._mark_inputs_resident()

    def commit(self) -> None:
        super().commit()
        self.softmax.commit()

    @property
    def score(self):
        return self.outputs[1] if len(self.outputs) > 1 else None

    def internal_bytes(self) -> int:
        probabilities = self.softmax.outputs[0]
        mem = self.softmax.internal_bytes() + self._blob_bytes(probabilities)
        if self.score is not None:
            mem += self._blob_bytes(self.score)
        return mem
