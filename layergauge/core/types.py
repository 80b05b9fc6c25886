# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Core Types

Layer type tags, build phases, the structured layer declaration record and
the per-axis parameter broadcast rule.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

from ..errors import InvalidParameterError


# Single precision is assumed for every blob and parameter.
BYTES_PER_ELEMENT = 4

MiB = 1024 * 1024


class LayerType(Enum):
    """
    Closed set of supported layer type tags.

    Several tags can map to the same layer family (see ``LayerType.family``).
    """

    INPUT = "Input"
    DATA = "Data"
    HDF5_DATA = "HDF5Data"
    CONVOLUTION = "Convolution"
    DECONVOLUTION = "Deconvolution"
    POOLING = "Pooling"
    CONCAT = "Concat"
    RELU = "ReLU"
    DROPOUT = "Dropout"
    VALUE_TRANSFORMATION = "ValueTransformation"
    VALUE_AUGMENTATION = "ValueAugmentation"
    CREATE_DEFORMATION = "CreateDeformation"
    APPLY_DEFORMATION = "ApplyDeformation"
    SOFTMAX = "Softmax"
    SOFTMAX_WITH_LOSS = "SoftmaxWithLoss"

    @classmethod
    def tags(cls) -> list[str]:
        """All accepted type tags."""
        return [member.value for member in cls]

    @classmethod
    def from_tag(cls, tag: str) -> Optional["LayerType"]:
        """Look up a tag, returning None for unknown tags."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def family(self) -> "LayerType":
        """Canonical member for aliased tags."""
        if self in (LayerType.INPUT, LayerType.HDF5_DATA):
            return LayerType.DATA
        return self


class Phase(Enum):
    """Network build phase."""

    TRAIN = "train"
    TEST = "test"

    @classmethod
    def parse(cls, value: Union[str, "Phase"]) -> "Phase":
        if isinstance(value, Phase):
            return value
        return cls(str(value).strip().lower())


# Parameter value types
ParamValue = Union[int, float, str, bool, list[int], list[float], list[list[int]]]
ParamMap = dict[str, ParamValue]


@dataclass
class LayerDeclaration:
    """
    One pre-parsed layer record of a network description.

    Attributes:
        type: Layer type tag (e.g. "Pooling")
        name: Unique layer name
        inputs: Names of consumed blobs (bottoms)
        outputs: Names of produced blobs (tops)
        params: Type-specific parameters
        include: Phases the layer is restricted to (empty = all)
        exclude: Phases the layer is removed from
    """

    type: str
    name: str
    inputs: list[str] = field(default_factory=list)
    outputs: list[str] = field(default_factory=list)
    params: ParamMap = field(default_factory=dict)
    include: list[Phase] = field(default_factory=list)
    exclude: list[Phase] = field(default_factory=list)

    def in_phase(self, phase: Phase) -> bool:
        """Check the include/exclude rules against a build phase."""
        if phase in self.exclude:
            return False
        if self.include and phase not in self.include:
            return False
        return True

    def get_param(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    @classmethod
    def from_dict(cls, data: dict) -> "LayerDeclaration":
        """
        Create a declaration from a plain mapping (e.g. decoded JSON).

        Raises:
            InvalidParameterError: The record is not a mapping, has no
                ``type`` or names an unknown phase.
        """
        if not isinstance(data, dict):
            raise InvalidParameterError(
                f"layer declaration must be a mapping, got {type(data).__name__}"
            )
        name = str(data.get("name", ""))
        if "type" not in data:
            raise InvalidParameterError(
                "layer declaration has no 'type'",
                layer_name=name or None,
                parameter="type",
            )
        type_tag = str(data["type"])
        params = data.get("params", {})
        if not isinstance(params, dict):
            raise InvalidParameterError(
                "'params' must be a mapping",
                layer_name=name or None,
                layer_type=type_tag,
                parameter="params",
            )
        return cls(
            type=type_tag,
            name=name,
            inputs=[str(n) for n in data.get("inputs", data.get("bottom", []))],
            outputs=[str(n) for n in data.get("outputs", data.get("top", []))],
            params=dict(params),
            include=_parse_phases(data.get("include", []), name, type_tag, "include"),
            exclude=_parse_phases(data.get("exclude", []), name, type_tag, "exclude"),
        )

    def to_dict(self) -> dict:
        result = {
            "type": self.type,
            "name": self.name,
            "inputs": list(self.inputs),
            "outputs": list(self.outputs),
            "params": dict(self.params),
        }
        if self.include:
            result["include"] = [p.value for p in self.include]
        if self.exclude:
            result["exclude"] = [p.value for p in self.exclude]
        return result


def _parse_phases(values: Any, name: str, type_tag: str, key: str) -> list[Phase]:
    phases = []
    for value in _as_list(values):
        try:
            phases.append(Phase.parse(value))
        except ValueError:
            raise InvalidParameterError(
                f"unknown phase {value!r} in '{key}'",
                layer_name=name or None,
                layer_type=type_tag,
                parameter=key,
            )
    return phases


def _as_list(values: Any) -> list:
    if values is None:
        return []
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


def broadcast_last(
    values: Union[None, int, Sequence[int]],
    n_axes: int,
    default: Optional[int] = None,
) -> Optional[list[int]]:
    """
    Expand a per-axis parameter to ``n_axes`` entries.

    Missing trailing entries repeat the last declared value. With no
    declared value every axis gets ``default``; None is returned if there
    is no default either. Surplus entries are dropped.

    Example:
        broadcast_last([3], 3)        -> [3, 3, 3]
        broadcast_last([2, 1], 3)     -> [2, 1, 1]
        broadcast_last([], 2, 1)      -> [1, 1]
    """
    declared = [int(v) for v in _as_list(values)]
    if not declared:
        if default is None:
            return None
        return [int(default)] * n_axes
    result = declared[:n_axes]
    while len(result) < n_axes:
        result.append(result[-1])
    return result
