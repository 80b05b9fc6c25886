# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Layer base class.

A layer computes its output descriptors once, at construction, from the
shapes of its inputs and its parameters. Afterwards it only answers memory
questions:

- parameter_bytes(): learnable parameters
- internal_bytes(): internal buffers (pooling indices, dropout masks, ...)
- workspace_bytes(accelerated): convolution workspaces or the explicit
  buffers used instead when no accelerated library is available
- overhead_bytes(accelerated) = workspace_bytes + internal_bytes
- memory_consumption(accelerated) = parameter_bytes + overhead_bytes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from ..core.registry import GraphRegistry
from ..core.tensor import TensorDescriptor
from ..core.types import BYTES_PER_ELEMENT, LayerDeclaration, LayerType, broadcast_last
from ..errors import DuplicateOutputNameError, InvalidParameterError


class Layer(ABC):
    """
    Base class of all layer families.

    Attributes:
        declaration: The declaration record the layer was built from
        inputs: Resolved input descriptors (not owned)
        outputs: Output descriptors, created by this layer unless aliased
    """

    layer_type: LayerType
    supports_in_place: bool = False

    def __init__(
        self,
        declaration: LayerDeclaration,
        registry: GraphRegistry,
        inputs: Sequence[TensorDescriptor] = (),
    ):
        self.declaration = declaration
        self._registry = registry
        self.inputs: list[TensorDescriptor] = list(inputs)
        self.outputs: list[TensorDescriptor] = []
        # Input flag changes, applied by commit() once the layer is accepted
        self._pending_resident: list[TensorDescriptor] = []
        self.setup()

    @abstractmethod
    def setup(self) -> None:
        """Validate parameters and create the output descriptors."""

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.declaration.name

    @property
    def type_tag(self) -> str:
        return self.declaration.type

    @property
    def training(self) -> bool:
        return self._registry.training

    def param(self, key: str, default: Any = None) -> Any:
        return self.declaration.get_param(key, default)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def _error(self, message: str, parameter: Optional[str] = None) -> InvalidParameterError:
        return InvalidParameterError(
            message,
            layer_name=self.name,
            layer_type=self.type_tag,
            parameter=parameter,
        )

    def _require_inputs(self, minimum: int, maximum: Optional[int] = None) -> None:
        n = len(self.inputs)
        if n < minimum or (maximum is not None and n > maximum):
            if maximum is None:
                expected = f"at least {minimum}"
            elif minimum == maximum:
                expected = str(minimum)
            else:
                expected = f"{minimum} to {maximum}"
            raise self._error(f"expected {expected} input(s), got {n}", "inputs")

    def _require_outputs(self, minimum: int, maximum: Optional[int] = None) -> None:
        n = len(self.declaration.outputs)
        if n < minimum or (maximum is not None and n > maximum):
            raise self._error(
                f"unexpected number of outputs ({n})", "outputs"
            )

    def _check_fresh_name(self, name: str) -> None:
        if name in self._registry:
            raise DuplicateOutputNameError(
                name, layer_name=self.name, layer_type=self.type_tag
            )

    def _int_param(
        self, key: str, default: Optional[int] = None, minimum: int = 0
    ) -> int:
        value = self.param(key, default)
        if value is None:
            raise self._error(f"'{key}' is required", key)
        try:
            value = int(value)
        except (TypeError, ValueError):
            raise self._error(f"'{key}' must be an integer, got {value!r}", key)
        if value < minimum:
            raise self._error(f"'{key}' must be >= {minimum}, got {value}", key)
        return value

    def _axis_param(
        self,
        key: str,
        n_axes: int,
        default: Optional[int] = None,
        minimum: int = 0,
    ) -> list[int]:
        """Per-spatial-axis parameter expanded by the broadcast-last rule."""
        try:
            values = broadcast_last(self.param(key), n_axes, default)
        except (TypeError, ValueError):
            raise self._error(f"'{key}' must be a list of integers", key)
        if values is None:
            raise self._error(f"'{key}' is required", key)
        for v in values:
            if v < minimum:
                raise self._error(f"'{key}' must be >= {minimum}, got {values}", key)
        return values

    def _new_blob(
        self,
        name: str,
        shape: Sequence[int],
        element_size: Optional[Sequence[float]] = None,
        device_resident: bool = False,
        forward_required: bool = True,
        gradient_required: bool = False,
        scalar: bool = False,
    ) -> TensorDescriptor:
        """Create an output descriptor owned by this layer."""
        for extent in shape:
            if extent <= 0:
                raise self._error(
                    f"output blob '{name}' would have shape {list(shape)}", "shape"
                )
        if element_size is None and self.inputs and not scalar:
            element_size = self.inputs[0].element_size
        return TensorDescriptor(
            name,
            shape,
            element_size=element_size,
            producer=self,
            device_resident=device_resident,
            forward_required=forward_required,
            gradient_required=gradient_required and self.training,
            scalar=scalar,
        )

    def _mark_inputs_resident(self) -> None:
        self._pending_resident.extend(self.inputs)

    def commit(self) -> None:
        """
        Apply the recorded input flag changes.

        Called by the registry after the layer passed every check. A layer
        built with ``register=False`` leaves its inputs untouched until
        this is called explicitly.
        """
        for blob in self._pending_resident:
            blob.mark_device_resident()
        self._pending_resident = []

    def _any_input_gradient(self) -> bool:
        return any(blob.gradient_required for blob in self.inputs)

    # ------------------------------------------------------------------
    # Memory accounting
    # ------------------------------------------------------------------

    def parameter_bytes(self) -> int:
        """Bytes for learnable parameters."""
        return 0

    def internal_bytes(self) -> int:
        """Bytes for internal data structures."""
        return 0

    def workspace_bytes(self, accelerated: bool) -> int:
        """Bytes for accelerated-library workspaces or their replacement."""
        return 0

    def overhead_bytes(self, accelerated: bool) -> int:
        return self.workspace_bytes(accelerated) + self.internal_bytes()

    def memory_consumption(self, accelerated: bool) -> int:
        return self.parameter_bytes() + self.overhead_bytes(accelerated)

    def owned_outputs(self) -> list[TensorDescriptor]:
        """Outputs created by this layer (aliased inputs excluded)."""
        return [blob for blob in self.outputs if blob.producer is self]

    def forward_bytes(self) -> int:
        return sum(blob.forward_bytes() for blob in self.owned_outputs())

    def backward_bytes(self) -> int:
        return sum(blob.backward_bytes() for blob in self.owned_outputs())

    @staticmethod
    def _kernel_volume(kernel: Sequence[int]) -> int:
        volume = 1
        for extent in kernel:
            volume *= extent
        return volume

    @staticmethod
    def _blob_bytes(blob: TensorDescriptor) -> int:
        return BYTES_PER_ELEMENT * blob.count()

    # ------------------------------------------------------------------
    # String representation
    # ------------------------------------------------------------------

    def param_string(self) -> str:
        """Additional parameters appended to the string form."""
        return ""

    def __str__(self) -> str:
        res = f"{self.type_tag} {self.name} {{"
        if self.inputs:
            res += " in: " + " ".join(str(blob) for blob in self.inputs)
        if self.outputs:
            res += " out: " + " ".join(str(blob) for blob in self.outputs)
        params = self.param_string()
        if params:
            res += " " + params
        return res + " }"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name='{self.name}')"


def format_axes(label: str, values: Sequence[int]) -> str:
    return f"{label}: [ " + " ".join(str(v) for v in values) + " ]"
