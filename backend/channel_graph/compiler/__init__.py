from typing import Optional

from channel_graph.compiler.compiler import compile_topology
from channel_graph.compiler.layout import apply_layout, layout_nodes
from channel_graph.compiler.types import Graph
from channel_graph.layout_engine import LayoutEngine


def compile_and_layout(
    topology,
    engine: Optional[LayoutEngine] = None,
    timeout: Optional[float] = None,
) -> Graph:
    graph = compile_topology(topology)
    return apply_layout(graph, engine=engine, timeout=timeout)


__all__ = [
    "compile_topology",
    "compile_and_layout",
    "apply_layout",
    "layout_nodes",
]
