# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
LayerGauge Observability Module

Structured logging for network construction and memory analysis.
"""

from .logger import (
    Verbosity,
    LogEntry,
    LayerGaugeLogger,
    get_logger,
    set_verbosity,
)

__all__ = [
    "Verbosity",
    "LogEntry",
    "LayerGaugeLogger",
    "get_logger",
    "set_verbosity",
]
