# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Public API

Main entry point for estimating the device memory of a network before
launching a job with it.
"""

from typing import Iterable, Optional, Sequence

from .config import AnalyzerConfig
from .memory import MemoryReport
from .network import DeclarationLike, build_network
from .observability import get_logger


def analyze(
    declarations: Iterable[DeclarationLike],
    config: Optional[AnalyzerConfig] = None,
    input_names: Optional[Sequence[str]] = None,
    input_shapes: Optional[Sequence[Sequence[int]]] = None,
    name: str = "",
) -> MemoryReport:
    """
    Build the network graph and compute its memory requirements.

    Args:
        declarations: Ordered layer declarations.
        config: Analyzer configuration (default: ``AnalyzerConfig()``).
        input_names: External input blobs fed by a synthesized data layer.
        input_shapes: One shape per external input, e.g. [1, 1, 572, 572].
        name: Optional network name used in logs.

    Returns:
        MemoryReport for the configured phase and acceleration mode.

    Raises:
        UnsupportedLayerTypeError, MissingNamedBlobError,
        DuplicateOutputNameError, InvalidParameterError: The network
            description is invalid.
        MemoryBudgetExceededError: ``config.gpu_memory_mb`` is set and the
            network does not fit.

    Example:
        >>> report = analyze(
        ...     declarations,
        ...     AnalyzerConfig(phase=Phase.TRAIN, gpu_memory_mb=8000),
        ...     input_names=["data"],
        ...     input_shapes=[[1, 1, 508, 508]],
        ... )
        >>> report.total_bytes
    """
    config = (config or AnalyzerConfig()).validate()

    network = build_network(
        declarations,
        phase=config.phase,
        input_names=input_names,
        input_shapes=input_shapes,
        element_size=config.element_size,
        name=name,
    )
    report = network.memory_report(config.accelerated)

    get_logger().analysis_summary(
        {
            "network": name or "N/A",
            "phase": config.phase.value,
            "accelerated": config.accelerated,
            "layers": network.num_layers(),
            "blobs": len(network.blobs),
            "total_mb": report.total_mb,
            "budget_mb": config.gpu_memory_mb,
        }
    )

    budget = config.budget_bytes
    if budget is not None:
        report.check_budget(budget)
    return report
