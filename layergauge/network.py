# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Network

Builds the blob graph of a network from its ordered layer declarations
and exposes the memory accounting of the result.

Layers are processed strictly in declaration order. A layer may only
reference blobs produced by layers declared before it; there is no
topological reordering. Construction is fail-fast: the first error
propagates and no partial network is returned.
"""

from __future__ import annotations

import uuid
from typing import Iterable, Optional, Sequence, Union

from .core.registry import GraphRegistry
from .core.tensor import TensorDescriptor
from .core.types import LayerDeclaration, LayerType, Phase
from .errors import InvalidParameterError, LayerGaugeError
from .layers import Layer, LayerFactory
from .memory import LayerMemory, MemoryReport
from .observability import get_logger


DeclarationLike = Union[LayerDeclaration, dict]


class Network:
    """
    A fully constructed network graph.

    Example:
        net = build_network(declarations, phase=Phase.TRAIN,
                            input_names=["data"], input_shapes=[[1, 1, 572, 572]])
        print(net)
        net.memory_total(accelerated=True)
    """

    def __init__(self, registry: GraphRegistry, name: str = ""):
        self.name = name
        self._registry = registry

    @property
    def registry(self) -> GraphRegistry:
        return self._registry

    @property
    def phase(self) -> Phase:
        return self._registry.phase

    @property
    def layers(self) -> list[Layer]:
        return self._registry.layers

    @property
    def blobs(self) -> list[TensorDescriptor]:
        return self._registry.descriptors

    def outputs(self) -> list[TensorDescriptor]:
        """Blobs no layer consumes."""
        return self._registry.outputs()

    def find_blob(self, name: str) -> Optional[TensorDescriptor]:
        return self._registry.find(name)

    def find_layer(self, name: str) -> Optional[Layer]:
        return self._registry.find_layer(name)

    def num_layers(self) -> int:
        return self._registry.num_layers()

    def count_layer_types(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for layer in self._registry:
            counts[layer.type_tag] = counts.get(layer.type_tag, 0) + 1
        return counts

    def memory_report(self, accelerated: bool = False) -> MemoryReport:
        return MemoryReport(
            accelerated=accelerated,
            phase=self.phase.value,
            layers=[LayerMemory.from_layer(layer, accelerated) for layer in self._registry],
        )

    def memory_total(self, accelerated: bool = False) -> int:
        """Total device bytes required by the network."""
        return self.memory_report(accelerated).total_bytes

    def summary(self) -> str:
        lines = [
            f"Network: {self.name or '<unnamed>'}",
            f"  Phase: {self.phase.value}",
            f"  Layers: {self.num_layers()}",
            f"  Blobs: {self._registry.num_blobs()}",
            "  Outputs: " + " ".join(blob.name for blob in self.outputs()),
            "  Layer types:",
        ]
        for tag, count in self.count_layer_types().items():
            lines.append(f"    {tag}: {count}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return self.num_layers()

    def __str__(self) -> str:
        res = "Net {\n"
        for layer in self._registry:
            res += f"  {layer}\n"
        return res + "}"

    def __repr__(self) -> str:
        return f"Network(name='{self.name}', layers={self.num_layers()})"


def _as_declaration(item: DeclarationLike) -> LayerDeclaration:
    if isinstance(item, LayerDeclaration):
        return item
    return LayerDeclaration.from_dict(item)


def input_declaration(
    input_names: Sequence[str], input_shapes: Sequence[Sequence[int]]
) -> LayerDeclaration:
    """Declaration of the synthesized data layer feeding external inputs."""
    if len(input_names) != len(input_shapes):
        raise InvalidParameterError(
            f"{len(input_names)} input name(s) but {len(input_shapes)} shape(s)",
            layer_type=LayerType.INPUT.value,
            parameter="input_shapes",
        )
    return LayerDeclaration(
        type=LayerType.INPUT.value,
        name=f"input-{uuid.uuid4().hex[:8]}",
        outputs=list(input_names),
        params={"shape": [list(shape) for shape in input_shapes]},
    )


def build_network(
    declarations: Iterable[DeclarationLike],
    phase: Union[Phase, str] = Phase.TEST,
    input_names: Optional[Sequence[str]] = None,
    input_shapes: Optional[Sequence[Sequence[int]]] = None,
    element_size: Optional[Sequence[float]] = None,
    name: str = "",
) -> Network:
    """
    Build a network from ordered layer declarations.

    Args:
        declarations: Layer declarations (records or plain mappings).
        phase: Build phase; declarations excluded from it are skipped and
            gradients are only required when training.
        input_names: External input blobs provided by a synthesized data
            layer prepended to the network.
        input_shapes: One shape per external input.
        element_size: Physical element size per spatial axis; fixes the
            spatial dimension count of the network.
        name: Optional network name used in logs.

    Returns:
        The constructed Network.

    Raises:
        LayerGaugeError: The first construction error encountered.
    """
    log = get_logger()
    phase = Phase.parse(phase)
    registry = GraphRegistry(element_size=element_size, phase=phase)

    pending = [_as_declaration(item) for item in declarations]
    if input_names:
        pending.insert(0, input_declaration(input_names, input_shapes or []))

    for declaration in pending:
        if not declaration.in_phase(phase):
            log.debug(
                "Layer skipped in phase",
                component="network",
                network=name or None,
                layer=declaration.name,
                phase=phase.value,
            )
            continue
        try:
            layer = LayerFactory.create(declaration, registry)
        except LayerGaugeError as e:
            log.error(
                f"Network construction failed: {e.message}",
                component="network",
                network=name or None,
                layer=declaration.name,
                layer_type=declaration.type,
            )
            raise
        log.debug(
            str(layer),
            component="network",
            network=name or None,
            layer=layer.name,
        )

    log.info(
        "Network built",
        component="network",
        network=name or None,
        layers=registry.num_layers(),
        blobs=registry.num_blobs(),
        phase=phase.value,
    )
    return Network(registry, name=name)
