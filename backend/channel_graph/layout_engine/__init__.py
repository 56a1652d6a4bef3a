# Layout engines: the in-process layered engine and the ELK service client

from channel_graph.layout_engine.base import (
    DEFAULT_LAYOUT_OPTIONS,
    LayoutChild,
    LayoutEdge,
    LayoutEngine,
    LayoutRequest,
    LayoutResponse,
)
from channel_graph.layout_engine.config import get_layout_engine
from channel_graph.layout_engine.elk_client import ElkHttpLayoutEngine
from channel_graph.layout_engine.layered import LayeredLayoutEngine

__all__ = [
    "DEFAULT_LAYOUT_OPTIONS",
    "LayoutChild",
    "LayoutEdge",
    "LayoutEngine",
    "LayoutRequest",
    "LayoutResponse",
    "ElkHttpLayoutEngine",
    "LayeredLayoutEngine",
    "get_layout_engine",
]
