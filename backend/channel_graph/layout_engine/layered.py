"""
In-process layered layout backed by grandalf's Sugiyama implementation.

grandalf lays each connected component out top-down: layers advance
along y (`yspace` between layers), nodes inside a layer along x
(`xspace`). The engine rotates/mirrors that drawing into the requested
ELK direction:
  - components are stacked across the flow, separated by
    `elk.spacing.nodeNode`, in request order
  - a lone node is its own component and skips Sugiyama
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from grandalf.graphs import Edge, Graph, Vertex
from grandalf.layouts import SugiyamaLayout

from channel_graph.errors import LayoutEngineError
from channel_graph.layout_engine.base import (
    DEFAULT_LAYOUT_OPTIONS,
    LayoutEngine,
    LayoutRequest,
    LayoutResponse,
)

logger = logging.getLogger(__name__)

# ELK's default padding around the root graph.
GRAPH_PADDING: float = 12.0

_DIRECTIONS = {"RIGHT", "LEFT", "DOWN", "UP"}


class _VertexView:
    """Size + center slot that SugiyamaLayout reads and writes."""

    def __init__(self, w: float, h: float) -> None:
        self.w = w
        self.h = h
        self.xy = (0.0, 0.0)


def _option(request: LayoutRequest, key: str) -> float:
    raw = request.layout_options.get(key, DEFAULT_LAYOUT_OPTIONS[key])
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise LayoutEngineError(f"Layout option {key}={raw!r} is not a number") from e


def build_graph(request: LayoutRequest, horizontal: bool) -> Tuple[Graph, Dict[str, Vertex]]:
    """
    grandalf graph of the request. Edges to unknown children are
    rejected; self-loops and repeated edges are dropped.
    """
    vertices: Dict[str, Vertex] = {}
    for child in request.children:
        vertex = Vertex(child.id)
        # grandalf flows along y: swap sizes when the flow is horizontal
        if horizontal:
            vertex.view = _VertexView(child.height, child.width)
        else:
            vertex.view = _VertexView(child.width, child.height)
        vertices[child.id] = vertex

    edges: List[Edge] = []
    seen = set()
    for edge in request.edges:
        if edge.source not in vertices or edge.target not in vertices:
            raise LayoutEngineError(f"Layout edge {edge.id} references an unknown child")
        key = (edge.source, edge.target)
        if edge.source == edge.target or key in seen:
            continue
        seen.add(key)
        edges.append(Edge(vertices[edge.source], vertices[edge.target]))

    return Graph(list(vertices.values()), edges), vertices


def _draw_component(component, node_gap: float, layer_gap: float) -> None:
    members = list(component.sV)
    if len(members) == 1:
        view = members[0].view
        view.xy = (view.w / 2, view.h / 2)
        return

    sugiyama = SugiyamaLayout(component)
    sugiyama.xspace = node_gap
    sugiyama.yspace = layer_gap
    sugiyama.init_all()
    sugiyama.draw()


def _boxes(component) -> Dict[str, Tuple[float, float, float, float]]:
    """id -> (left, top, width, height), shifted so the component starts at 0,0."""
    boxes = {}
    for vertex in component.sV:
        view = vertex.view
        boxes[vertex.data] = (view.xy[0] - view.w / 2, view.xy[1] - view.h / 2, view.w, view.h)

    min_x = min(box[0] for box in boxes.values())
    min_y = min(box[1] for box in boxes.values())
    return {
        node_id: (left - min_x, top - min_y, w, h)
        for node_id, (left, top, w, h) in boxes.items()
    }


class LayeredLayoutEngine(LayoutEngine):
    name = "local"

    def layout(self, request: LayoutRequest) -> LayoutResponse:
        direction = request.layout_options.get("elk.direction", "RIGHT").upper()
        if direction not in _DIRECTIONS:
            raise LayoutEngineError(f"Unsupported layout direction {direction!r}")

        node_gap = _option(request, "elk.spacing.nodeNode")
        layer_gap = _option(request, "elk.layered.spacing.nodeNodeBetweenLayers")
        horizontal = direction in ("RIGHT", "LEFT")

        graph, _ = build_graph(request, horizontal)
        order = {child.id: index for index, child in enumerate(request.children)}
        components = sorted(graph.C, key=lambda c: min(order[v.data] for v in c.sV))

        # (cross, main, across size, along size) in grandalf axes
        placed: Dict[str, Tuple[float, float, float, float]] = {}
        cross_offset = 0.0
        for component in components:
            _draw_component(component, node_gap, layer_gap)
            boxes = _boxes(component)
            for node_id, (left, top, w, h) in boxes.items():
                placed[node_id] = (cross_offset + left, top, w, h)
            cross_offset += max(left + w for left, _, w, _ in boxes.values()) + node_gap

        flow_extent = max((main + along for _, main, _, along in placed.values()), default=0.0)

        positions = {}
        for node_id, (cross, main, _, along) in placed.items():
            if direction in ("LEFT", "UP"):
                main = flow_extent - main - along
            if horizontal:
                positions[node_id] = (GRAPH_PADDING + main, GRAPH_PADDING + cross)
            else:
                positions[node_id] = (GRAPH_PADDING + cross, GRAPH_PADDING + main)

        logger.debug(
            "Sugiyama layout: %d children in %d components (%s)",
            len(request.children),
            len(components),
            direction,
        )
        return LayoutResponse(positions=positions)
