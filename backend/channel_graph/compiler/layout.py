import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from channel_graph.compiler.types import Edge, Graph, Node, Position
from channel_graph.config import LAYOUT_TIMEOUT_SECONDS
from channel_graph.errors import LayoutEngineError
from channel_graph.layout_engine import (
    LayoutChild,
    LayoutEdge,
    LayoutEngine,
    LayoutRequest,
    LayoutResponse,
    get_layout_engine,
)

logger = logging.getLogger(__name__)

# Used when a top-level node has no size hint.
DEFAULT_NODE_WIDTH = 240
DEFAULT_NODE_HEIGHT = 80


def partition_nodes(nodes: Sequence[Node]) -> Tuple[List[Node], List[Node]]:
    """Split into (top_level, contained)."""
    top_level = [n for n in nodes if n.parent_id is None]
    contained = [n for n in nodes if n.parent_id is not None]
    return top_level, contained


def build_layout_request(nodes: Sequence[Node], edges: Sequence[Edge]) -> LayoutRequest:
    """
    Only the top-level skeleton goes to the engine.
    Edges touching a contained node are dropped: contained nodes
    move rigidly with their group.
    """
    top_level, _ = partition_nodes(nodes)
    top_level_ids = {n.id for n in top_level}

    children = [
        LayoutChild(
            id=node.id,
            width=node.size.width if node.size.width is not None else DEFAULT_NODE_WIDTH,
            height=node.size.height if node.size.height is not None else DEFAULT_NODE_HEIGHT,
        )
        for node in top_level
    ]
    layout_edges = [
        LayoutEdge(id=edge.id, source=edge.source, target=edge.target)
        for edge in edges
        if edge.source in top_level_ids and edge.target in top_level_ids
    ]

    return LayoutRequest(children=children, edges=layout_edges)


def merge_positions(nodes: Sequence[Node], response: LayoutResponse) -> List[Node]:
    merged: List[Node] = []
    for node in nodes:
        if node.parent_id is not None:
            merged.append(node)
            continue

        x, y = response.positions.get(node.id, (None, None))
        merged.append(
            replace(
                node,
                position=Position(
                    x=x if x is not None else 0.0,
                    y=y if y is not None else 0.0,
                ),
            )
        )
    return merged


def run_engine(engine: LayoutEngine, request: LayoutRequest, timeout: float) -> LayoutResponse:
    """
    Single bounded engine call. On timeout the worker thread is
    abandoned, never joined.
    """
    if not timeout > 0:
        raise LayoutEngineError(f"Layout timeout must be positive, got {timeout!r}")

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="layout")
    future = executor.submit(engine.layout, request)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        future.cancel()
        raise LayoutEngineError(
            f"Layout engine '{engine.name}' did not answer within {timeout}s"
        ) from e
    finally:
        executor.shutdown(wait=False)


def layout_nodes(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    engine: Optional[LayoutEngine] = None,
    timeout: Optional[float] = None,
) -> List[Node]:
    """
    Position the top-level nodes with a layered layout engine.

    Returns a new node list. Contained nodes pass through untouched.
    Any failure degrades to the input positions; nothing is raised.
    """
    try:
        engine = engine or get_layout_engine()
        request = build_layout_request(nodes, edges)
        response = run_engine(
            engine,
            request,
            timeout if timeout is not None else LAYOUT_TIMEOUT_SECONDS,
        )
        laid_out = merge_positions(nodes, response)
    except Exception as e:
        logger.warning("Layout failed; keeping default positions (%s)", e, exc_info=True)
        return list(nodes)

    logger.debug(
        "Layout applied to %d top-level nodes via '%s'",
        len(request.children),
        engine.name,
    )
    return laid_out


def apply_layout(
    graph: Graph,
    engine: Optional[LayoutEngine] = None,
    timeout: Optional[float] = None,
) -> Graph:
    return Graph(
        nodes=layout_nodes(graph.nodes, graph.edges, engine=engine, timeout=timeout),
        edges=list(graph.edges),
    )
