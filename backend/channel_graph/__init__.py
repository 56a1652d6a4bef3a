"""Compile server/channel/identifier topologies into laid-out node-and-edge graphs."""

from channel_graph.compiler import apply_layout, compile_and_layout, compile_topology, layout_nodes
from channel_graph.compiler.types import Edge, EdgeDirection, Graph, Node, NodeKind
from channel_graph.errors import ChannelGraphError, LayoutEngineError, TopologyValidationError
from channel_graph.schemas import Topology, load_topology

__all__ = [
    "compile_topology",
    "compile_and_layout",
    "apply_layout",
    "layout_nodes",
    "Edge",
    "EdgeDirection",
    "Graph",
    "Node",
    "NodeKind",
    "ChannelGraphError",
    "LayoutEngineError",
    "TopologyValidationError",
    "Topology",
    "load_topology",
]
