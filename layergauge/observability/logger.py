# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Structured Logger for LayerGauge

Provides structured logging with an optional JSON output format, so
network analyses running on background workers can be collected by log
shippers.

Example:
    from layergauge.observability import get_logger, Verbosity

    logger = get_logger()
    logger.set_verbosity(Verbosity.INFO)
    logger.info("Network built", component="network", network="unet")
"""

import json
import os
import sys
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import IntEnum
from typing import Callable, Optional, TextIO


class Verbosity(IntEnum):
    """
    Logging verbosity levels.

    Uses IntEnum for numeric comparison (e.g., if verbosity >= INFO).
    """

    SILENT = 0
    ERROR = 1
    WARNING = 2
    INFO = 3
    DEBUG = 4


@dataclass
class LogEntry:
    """
    Structured log entry.

    Attributes:
        level: Log level (ERROR, WARNING, INFO, DEBUG)
        message: Log message
        timestamp: ISO format timestamp
        component: Source component (network, layers, cli)
        network: Optional network name
        layer: Optional layer name
        memory_mb: Optional memory figure in MiB
        extra: Additional context fields
    """

    level: str
    message: str
    timestamp: str
    component: str = "layergauge"
    network: Optional[str] = None
    layer: Optional[str] = None
    memory_mb: Optional[float] = None
    extra: dict = field(default_factory=dict)

    def to_json(self) -> str:
        """Convert to JSON string."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        if not data.get("extra"):
            data.pop("extra", None)
        return json.dumps(data, default=str)

    def to_text(self) -> str:
        """Convert to human-readable text format."""
        parts = [
            f"[{self.level}]",
            f"[{self.component}]",
            self.message,
        ]
        if self.layer is not None:
            parts.append(f"(layer={self.layer})")
        if self.memory_mb is not None:
            parts.append(f"[{self.memory_mb:.1f}MB]")
        return " ".join(parts)


class LayerGaugeLogger:
    """
    Structured logger for LayerGauge.

    Singleton pattern ensures consistent logging configuration across the
    package. The initial verbosity can be set with LAYERGAUGE_VERBOSITY.
    """

    _instance: Optional["LayerGaugeLogger"] = None

    def __init__(self):
        self._verbosity = Verbosity.WARNING
        self._output: TextIO = sys.stderr
        self._json_format = False
        self._handlers: list[Callable[[LogEntry], None]] = []

        env_verbosity = os.environ.get("LAYERGAUGE_VERBOSITY")
        if env_verbosity is not None:
            try:
                self._verbosity = Verbosity(int(env_verbosity))
            except ValueError:
                pass

    @classmethod
    def get(cls) -> "LayerGaugeLogger":
        """Get the singleton logger instance."""
        if cls._instance is None:
            cls._instance = LayerGaugeLogger()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    def set_verbosity(self, level: int) -> None:
        """
        Set verbosity level.

        Args:
            level: Verbosity level (0-4 or Verbosity enum)
        """
        if isinstance(level, Verbosity):
            self._verbosity = level
        else:
            self._verbosity = Verbosity(max(0, min(4, int(level))))

    def get_verbosity(self) -> Verbosity:
        return self._verbosity

    def set_json_format(self, enabled: bool) -> None:
        self._json_format = enabled

    def set_output(self, output: TextIO) -> None:
        self._output = output

    def add_handler(self, handler: Callable[[LogEntry], None]) -> None:
        """Add a custom log handler receiving every emitted entry."""
        self._handlers.append(handler)

    def _emit(self, entry: LogEntry) -> None:
        if self._json_format:
            line = entry.to_json()
        else:
            line = entry.to_text()

        self._output.write(line + "\n")
        self._output.flush()

        for handler in self._handlers:
            handler(entry)

    def _log(self, level: Verbosity, message: str, context: dict) -> None:
        if self._verbosity < level:
            return
        self._emit(
            LogEntry(
                level=level.name,
                message=message,
                timestamp=datetime.now().isoformat(),
                component=context.pop("component", "layergauge"),
                network=context.pop("network", None),
                layer=context.pop("layer", None),
                memory_mb=context.pop("memory_mb", None),
                extra=context,
            )
        )

    def debug(self, message: str, **context) -> None:
        self._log(Verbosity.DEBUG, message, context)

    def info(self, message: str, **context) -> None:
        self._log(Verbosity.INFO, message, context)

    def warning(self, message: str, **context) -> None:
        self._log(Verbosity.WARNING, message, context)

    def error(self, message: str, **context) -> None:
        self._log(Verbosity.ERROR, message, context)

    def analysis_summary(self, stats: dict) -> None:
        """
        Log a network analysis summary (formatted box output).

        Shown at INFO level.
        """
        if self._verbosity < Verbosity.INFO:
            return
        network = str(stats.get("network", "N/A"))
        phase = str(stats.get("phase", "N/A"))
        mode = "accelerated" if stats.get("accelerated") else "plain"
        layers = stats.get("layers", 0)
        blobs = stats.get("blobs", 0)
        total_mb = stats.get("total_mb", 0.0)
        budget_mb = stats.get("budget_mb")
        budget = "none" if budget_mb is None else f"{budget_mb:.1f} MB"
        required = f"{total_mb:.1f} MB"

        summary = f"""
+-----------------------------------------------------------+
| LayerGauge Analysis Complete                              |
+-----------------------------------------------------------+
| Network:    {network:<45} |
| Phase:      {phase:<45} |
| Mode:       {mode:<45} |
| Layers:     {layers:<45} |
| Blobs:      {blobs:<45} |
| Required:   {required:<45} |
| Budget:     {budget:<45} |
+-----------------------------------------------------------+
"""
        self._output.write(summary)
        self._output.flush()


def get_logger() -> LayerGaugeLogger:
    """Get the global LayerGauge logger."""
    return LayerGaugeLogger.get()


def set_verbosity(level: int) -> None:
    """
    Set global verbosity level.

    Args:
        level: Verbosity level (0=SILENT, 1=ERROR, 2=WARNING, 3=INFO, 4=DEBUG)
    """
    LayerGaugeLogger.get().set_verbosity(level)
