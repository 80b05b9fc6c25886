# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Error Hierarchy

Provides the error types raised while building a network graph and
accounting its memory:
- Clear error categorization
- Helpful error messages with suggestions
- Context information (offending layer name and type) for debugging

Error Categories:
- LayerGaugeError: Base class for all LayerGauge errors
- UnsupportedLayerTypeError: Type tag not known to the layer factory
- MissingNamedBlobError: Referenced blob not (yet) registered
- DuplicateOutputNameError: Output name collides with an existing blob
- InvalidParameterError: Inconsistent layer parameters or shapes
- ConfigurationError: Invalid analyzer configuration
- MemoryBudgetExceededError: Network does not fit the device budget
"""

from typing import Optional


class LayerGaugeError(Exception):
    """
    Base class for all LayerGauge errors.

    Provides consistent error formatting and context tracking.

    Attributes:
        message: Human-readable error message
        suggestions: List of suggestions to fix the error
        context: Optional context dictionary for debugging
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[list[str]] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}

        full_message = self._format_message()
        super().__init__(full_message)

    def _format_message(self) -> str:
        """Format the error message with suggestions."""
        lines = [self.message]

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                lines.append(f"  {i}. {suggestion}")

        if self.context:
            lines.append("")
            lines.append("Context:")
            for key, value in self.context.items():
                lines.append(f"  {key}: {value}")

        return "\n".join(lines)

    @property
    def layer_name(self) -> Optional[str]:
        return self.context.get("layer_name")

    @property
    def layer_type(self) -> Optional[str]:
        return self.context.get("layer_type")


def _layer_context(
    layer_name: Optional[str], layer_type: Optional[str]
) -> dict:
    context = {}
    if layer_name:
        context["layer_name"] = layer_name
    if layer_type:
        context["layer_type"] = layer_type
    return context


class UnsupportedLayerTypeError(LayerGaugeError):
    """
    Layer type tag not recognized by the layer factory.

    Raised before any layer object is created, so the registry is left
    untouched.
    """

    def __init__(
        self,
        type_tag: str,
        layer_name: Optional[str] = None,
        supported_types: Optional[list[str]] = None,
    ):
        self.type_tag = type_tag
        self.supported_types = supported_types or []

        context = _layer_context(layer_name, type_tag)

        suggestions = [
            "Check the spelling and capitalization of the layer type",
            "Remove the layer from the declaration if it does not affect memory",
        ]

        if supported_types:
            similar = self._find_similar_types(type_tag, supported_types)
            if similar:
                suggestions.insert(0, f"Try using: {', '.join(similar)}")

        super().__init__(
            message=f"Layer type '{type_tag}' is not supported",
            suggestions=suggestions,
            context=context,
        )

    @staticmethod
    def _find_similar_types(type_tag: str, supported_types: list[str]) -> list[str]:
        """Find similar supported layer types."""
        tag_lower = type_tag.lower()
        similar = []
        for tag in supported_types:
            if tag_lower in tag.lower() or tag.lower() in tag_lower:
                similar.append(tag)
        return similar[:3]


class MissingNamedBlobError(LayerGaugeError):
    """
    A referenced blob name is not in the registry.

    Raised when:
    - A layer input names a blob no earlier layer produced
    - A shape-source reference cannot be resolved
    - The producer was excluded from the current phase
    """

    def __init__(
        self,
        blob_name: str,
        layer_name: Optional[str] = None,
        layer_type: Optional[str] = None,
        role: str = "input",
    ):
        self.blob_name = blob_name

        context = _layer_context(layer_name, layer_type)
        context["blob"] = blob_name

        suggestions = [
            "Declare the producing layer before its consumers",
            "Check that the producing layer is included in the current phase",
        ]

        super().__init__(
            message=f"No blob named '{blob_name}' available as {role}",
            suggestions=suggestions,
            context=context,
        )


class DuplicateOutputNameError(LayerGaugeError):
    """
    An output name collides with an already registered blob.

    Only layers that support in-place operation may reuse a name.
    """

    def __init__(
        self,
        blob_name: str,
        layer_name: Optional[str] = None,
        layer_type: Optional[str] = None,
    ):
        self.blob_name = blob_name

        context = _layer_context(layer_name, layer_type)
        context["blob"] = blob_name

        suggestions = [
            f"Rename the output '{blob_name}' to a fresh name",
            "In-place operation is only supported by Dropout and ReLU layers",
        ]

        super().__init__(
            message=f"Output blob '{blob_name}' already exists",
            suggestions=suggestions,
            context=context,
        )


class InvalidParameterError(LayerGaugeError):
    """
    Layer parameters are inconsistent with the input shapes.

    Raised when:
    - A resulting output extent is non-positive
    - Pooling parameters remain inconsistent after adjustment
    - A required parameter is missing or out of range
    """

    def __init__(
        self,
        message: str,
        layer_name: Optional[str] = None,
        layer_type: Optional[str] = None,
        parameter: Optional[str] = None,
    ):
        self.parameter = parameter

        context = _layer_context(layer_name, layer_type)
        if parameter:
            context["parameter"] = parameter

        suggestions = [
            "Increase the input tile shape",
            "Check kernel, pad, stride and dilation values",
        ]

        super().__init__(
            message=f"Invalid parameter: {message}",
            suggestions=suggestions,
            context=context,
        )


class ConfigurationError(LayerGaugeError):
    """
    Configuration or setup error.

    Raised when:
    - Invalid configuration parameters
    - Malformed command line input
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = str(config_value)

        suggestions = [
            "Check configuration parameters",
            "Review the LAYERGAUGE_* environment variables",
        ]

        super().__init__(
            message=f"Configuration error: {message}",
            suggestions=suggestions,
            context=context,
        )


class MemoryBudgetExceededError(LayerGaugeError):
    """
    The analyzed network needs more device memory than available.
    """

    def __init__(
        self,
        required_bytes: int,
        available_bytes: int,
        accelerated: Optional[bool] = None,
    ):
        self.required_bytes = required_bytes
        self.available_bytes = available_bytes

        context = {
            "required_mb": f"{required_bytes / (1024 * 1024):.2f}",
            "available_mb": f"{available_bytes / (1024 * 1024):.2f}",
        }
        if accelerated is not None:
            context["accelerated"] = accelerated

        suggestions = [
            "Reduce the input tile shape",
            "Reduce the batch size",
        ]
        if accelerated is False:
            suggestions.append(
                "Enable the accelerated library to replace explicit buffers"
            )

        super().__init__(
            message="Memory error: network exceeds the device memory budget",
            suggestions=suggestions,
            context=context,
        )


def format_shape_mismatch(
    expected_shape: tuple,
    actual_shape: tuple,
    tensor_name: Optional[str] = None,
    layer_name: Optional[str] = None,
    layer_type: Optional[str] = None,
) -> InvalidParameterError:
    """Create an InvalidParameterError for a shape mismatch."""
    msg = f"Shape mismatch: expected {expected_shape}, got {actual_shape}"
    return InvalidParameterError(
        message=msg,
        layer_name=layer_name,
        layer_type=layer_type,
        parameter=tensor_name or "shape",
    )
