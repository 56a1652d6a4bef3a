from typing import Any, Dict, Optional, Set

from channel_graph.compiler.types import (
    ChannelPayload,
    Edge,
    Graph,
    IdentifierPayload,
    Node,
    NodeKind,
    ServerPayload,
)
from channel_graph.visual import EDGE_STYLE, VISUAL_STYLE


def _payload_data(node: Node) -> Dict[str, Any]:
    payload = node.payload

    if isinstance(payload, ServerPayload):
        return {
            "serverName": payload.server_name,
            "serverId": payload.server_id,
            "serverAddress": payload.server_address,
        }
    if isinstance(payload, ChannelPayload):
        return {
            "channelName": payload.channel_name,
            "txIdentifiers": list(payload.tx_identifiers),
            "rxIdentifiers": list(payload.rx_identifiers),
        }
    if isinstance(payload, IdentifierPayload):
        return {"label": payload.label}

    raise TypeError(f"Unknown payload type for node {node.id}: {type(payload).__name__}")


def serialize_node(node: Node, selected_service: Optional[str] = None) -> Dict[str, Any]:
    visual = VISUAL_STYLE[node.kind.value]

    style: Dict[str, Any] = dict(visual["style"])
    if node.size.width is not None:
        style["width"] = node.size.width
    if node.size.height is not None:
        style["height"] = node.size.height

    data = _payload_data(node)
    # Channel chips and identifier nodes highlight against this.
    if node.kind in (NodeKind.CHANNEL, NodeKind.IDENTIFIER):
        data["selectedService"] = selected_service

    result: Dict[str, Any] = {
        "id": node.id,
        "type": visual["type"],
        "position": {"x": node.position.x, "y": node.position.y},
        "data": data,
        "style": style,
        "draggable": node.draggable,
        "selectable": node.selectable,
    }
    if node.parent_id is not None:
        result["parentNode"] = node.parent_id
        result["extent"] = "parent"

    return result


def serialize_edge(edge: Edge) -> Dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "type": EDGE_STYLE["type"],
        "markerEnd": dict(EDGE_STYLE["markerEnd"]),
        "label": edge.label,
    }


def to_react_flow(graph: Graph, selected_service: Optional[str] = None) -> Dict[str, Any]:
    """
    Serialize a graph into React Flow `nodes` / `edges` arrays.
    Parents always precede their children.
    """
    return {
        "nodes": [serialize_node(node, selected_service) for node in graph.nodes],
        "edges": [serialize_edge(edge) for edge in graph.edges],
    }


def nodes_for_identifier(graph: Graph, identifier: str) -> Set[str]:
    """Identifier node id plus every channel node it is wired to."""
    index = graph.node_index()
    identifier_ids = {
        node.id
        for node in graph.nodes
        if node.kind == NodeKind.IDENTIFIER and node.payload.label == identifier
    }

    related: Set[str] = set(identifier_ids)
    for edge in graph.edges:
        if edge.source in identifier_ids:
            other = index.get(edge.target)
        elif edge.target in identifier_ids:
            other = index.get(edge.source)
        else:
            continue
        if other is not None and other.kind == NodeKind.CHANNEL:
            related.add(other.id)

    return related
