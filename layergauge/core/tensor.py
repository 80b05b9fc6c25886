# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tensor Descriptor

Named blob shape plus the accounting flags used for memory estimation.
No tensor data is ever stored.
"""

from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

import numpy as np

from .types import BYTES_PER_ELEMENT

if TYPE_CHECKING:
    from ..layers.base import Layer


class TensorDescriptor:
    """
    Describes a blob's metadata without holding actual data.

    Axis 0 is the sample count, axis 1 the channel count and all remaining
    axes are spatial. The shape and the forward/gradient flags are fixed at
    construction. Residency can only be raised, never cleared, so repeated
    marking by consumer layers is order independent.

    Example:
        blob = TensorDescriptor("data", (1, 1, 572, 572))
        blob.mark_device_resident()
        blob.forward_bytes()  # 4 * 572 * 572
    """

    __slots__ = (
        "name",
        "_shape",
        "_element_size",
        "producer",
        "scalar",
        "id",
        "_device_resident",
        "_forward_required",
        "_gradient_required",
    )

    def __init__(
        self,
        name: str,
        shape: Sequence[int],
        element_size: Optional[Sequence[float]] = None,
        producer: Optional["Layer"] = None,
        device_resident: bool = False,
        forward_required: bool = True,
        gradient_required: bool = False,
        scalar: bool = False,
    ):
        dims = tuple(int(d) for d in shape)
        if any(d < 0 for d in dims):
            raise ValueError(f"Negative extent in shape {dims} of blob '{name}'")
        self.name = name
        self._shape = dims
        if element_size is None:
            element_size = [1.0] * max(0, len(dims) - 2)
        self._element_size = tuple(float(e) for e in element_size)
        self.producer = producer
        self.scalar = scalar
        # Assigned by the GraphRegistry on registration
        self.id: Optional[int] = None
        self._device_resident = bool(device_resident)
        self._forward_required = bool(forward_required)
        self._gradient_required = bool(gradient_required)

    # ------------------------------------------------------------------
    # Shape queries
    # ------------------------------------------------------------------

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    @property
    def element_size(self) -> tuple[float, ...]:
        """Physical extent of one element along each spatial axis."""
        return self._element_size

    def rank(self) -> int:
        return len(self._shape)

    @property
    def n_samples(self) -> int:
        return self._shape[0]

    @property
    def n_channels(self) -> int:
        return self._shape[1]

    @property
    def n_spatial_dims(self) -> int:
        if self.scalar:
            return 0
        return len(self._shape) - 2

    def spatial_shape(self) -> tuple[int, ...]:
        """Trailing extents beyond the sample and channel axes."""
        if self.scalar:
            return ()
        return self._shape[2:]

    def count(self, from_axis: int = 0, to_axis: Optional[int] = None) -> int:
        """
        Product of the extents in the inclusive axis range.

        Args:
            from_axis: First axis of the range
            to_axis: Last axis of the range (default: last axis)
        """
        if to_axis is None:
            to_axis = len(self._shape) - 1
        extents = self._shape[from_axis : to_axis + 1]
        return int(np.prod(extents, dtype=np.int64))

    # ------------------------------------------------------------------
    # Accounting flags
    # ------------------------------------------------------------------

    @property
    def device_resident(self) -> bool:
        return self._device_resident

    @property
    def forward_required(self) -> bool:
        return self._forward_required

    @property
    def gradient_required(self) -> bool:
        return self._gradient_required

    def mark_device_resident(self) -> None:
        """Place the blob on the accelerator."""
        self._device_resident = True

    def forward_bytes(self) -> int:
        """Device bytes needed to hold the blob values."""
        if self._device_resident and self._forward_required:
            return BYTES_PER_ELEMENT * self.count()
        return 0

    def backward_bytes(self) -> int:
        """Additional device bytes needed to hold the blob gradient."""
        if self._device_resident and self._gradient_required:
            return BYTES_PER_ELEMENT * self.count()
        return 0

    def size_bytes(self) -> int:
        """Size of the blob values irrespective of residency."""
        return BYTES_PER_ELEMENT * self.count()

    def __str__(self) -> str:
        dims = " ".join(str(d) for d in self._shape)
        return f"{self.name} [ {dims} ]"

    def __repr__(self) -> str:
        return (
            f"TensorDescriptor(name='{self.name}', shape={list(self._shape)}, "
            f"device_resident={self._device_resident}, "
            f"gradient_required={self._gradient_required})"
        )
