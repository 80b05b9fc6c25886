# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Memory Report

Per-layer and aggregate device memory figures of a built network:
1. Parameter memory (learnable weights)
2. Overhead (workspaces, explicit buffers and internal structures)
3. Forward memory (blob values)
4. Backward memory (blob gradients)

All figures are in bytes and depend on whether an accelerated
convolution library is available.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional, TYPE_CHECKING

from .core.types import MiB
from .errors import MemoryBudgetExceededError

if TYPE_CHECKING:
    from .layers.base import Layer


@dataclass
class LayerMemory:
    """Memory figures of a single layer."""

    name: str
    type: str
    parameter_bytes: int = 0
    overhead_bytes: int = 0
    forward_bytes: int = 0
    backward_bytes: int = 0

    @property
    def total_bytes(self) -> int:
        return (
            self.parameter_bytes
            + self.overhead_bytes
            + self.forward_bytes
            + self.backward_bytes
        )

    @classmethod
    def from_layer(cls, layer: "Layer", accelerated: bool) -> "LayerMemory":
        return cls(
            name=layer.name,
            type=layer.type_tag,
            parameter_bytes=layer.parameter_bytes(),
            overhead_bytes=layer.overhead_bytes(accelerated),
            forward_bytes=layer.forward_bytes(),
            backward_bytes=layer.backward_bytes(),
        )

    def to_dict(self) -> dict:
        result = asdict(self)
        result["total_bytes"] = self.total_bytes
        return result


@dataclass
class MemoryReport:
    """
    Memory breakdown of a network.

    Example:
        report = network.memory_report(accelerated=True)
        print(report.format_breakdown())
        report.check_budget(8 * 1024**3)
    """

    accelerated: bool
    phase: str
    layers: list[LayerMemory] = field(default_factory=list)

    @property
    def parameter_bytes(self) -> int:
        return sum(row.parameter_bytes for row in self.layers)

    @property
    def overhead_bytes(self) -> int:
        return sum(row.overhead_bytes for row in self.layers)

    @property
    def forward_bytes(self) -> int:
        return sum(row.forward_bytes for row in self.layers)

    @property
    def backward_bytes(self) -> int:
        return sum(row.backward_bytes for row in self.layers)

    @property
    def total_bytes(self) -> int:
        return (
            self.parameter_bytes
            + self.overhead_bytes
            + self.forward_bytes
            + self.backward_bytes
        )

    @property
    def total_mb(self) -> float:
        return self.total_bytes / MiB

    def get_layer(self, name: str) -> Optional[LayerMemory]:
        for row in self.layers:
            if row.name == name:
                return row
        return None

    def fits(self, budget_bytes: int) -> bool:
        return self.total_bytes <= budget_bytes

    def check_budget(self, budget_bytes: int) -> None:
        """
        Raise if the network does not fit into ``budget_bytes``.

        Raises:
            MemoryBudgetExceededError: If total memory exceeds the budget.
        """
        if not self.fits(budget_bytes):
            raise MemoryBudgetExceededError(
                required_bytes=self.total_bytes,
                available_bytes=int(budget_bytes),
                accelerated=self.accelerated,
            )

    def to_dict(self) -> dict:
        return {
            "accelerated": self.accelerated,
            "phase": self.phase,
            "parameter_bytes": self.parameter_bytes,
            "overhead_bytes": self.overhead_bytes,
            "forward_bytes": self.forward_bytes,
            "backward_bytes": self.backward_bytes,
            "total_bytes": self.total_bytes,
            "layers": [row.to_dict() for row in self.layers],
        }

    def format_breakdown(self) -> str:
        """Render the breakdown as a fixed-width table in MiB."""
        header = (
            f"{'Layer':<24} {'Type':<20} {'Params':>10} {'Overhead':>10} "
            f"{'Forward':>10} {'Backward':>10}"
        )
        mode = "accelerated" if self.accelerated else "plain"
        lines = [
            f"Memory breakdown ({self.phase}, {mode}) [MiB]",
            header,
            "-" * len(header),
        ]
        for row in self.layers:
            lines.append(
                f"{row.name[:24]:<24} {row.type[:20]:<20} "
                f"{row.parameter_bytes / MiB:>10.2f} "
                f"{row.overhead_bytes / MiB:>10.2f} "
                f"{row.forward_bytes / MiB:>10.2f} "
                f"{row.backward_bytes / MiB:>10.2f}"
            )
        lines.append("-" * len(header))
        lines.append(
            f"{'Total':<24} {'':<20} "
            f"{self.parameter_bytes / MiB:>10.2f} "
            f"{self.overhead_bytes / MiB:>10.2f} "
            f"{self.forward_bytes / MiB:>10.2f} "
            f"{self.backward_bytes / MiB:>10.2f}"
        )
        lines.append(f"Required: {self.total_mb:.2f} MiB")
        return "\n".join(lines)
