import logging
from typing import Dict, List, Set, Tuple

from channel_graph.compiler.types import (
    ChannelPayload,
    Edge,
    EdgeDirection,
    Graph,
    IdentifierPayload,
    Node,
    NodeKind,
    Position,
    ServerPayload,
    Size,
)
from channel_graph.errors import TopologyValidationError
from channel_graph.schemas import Channel, Server, Topology, parse_topology

logger = logging.getLogger(__name__)


# ============================================================
# Geometry (pixels, relative to the containing group)
# ============================================================

GROUP_WIDTH = 380
GROUP_BASE_HEIGHT = 120
GROUP_HEIGHT_PER_CHANNEL = 136

HEADER_OFFSET = Position(x=12, y=10)
HEADER_WIDTH = 350

CHANNEL_OFFSET_X = 35
CHANNEL_OFFSET_Y = 70
CHANNEL_ROW_HEIGHT = 132
CHANNEL_WIDTH = 310

IDENTIFIER_WIDTH = 190


# ============================================================
# Node / edge id helpers
# ============================================================

def escape_id_part(part: str) -> str:
    """Make a name safe to join with hyphens: '%' -> '%25', '-' -> '%2D'."""
    return part.replace("%", "%25").replace("-", "%2D")


def server_group_id(server_id: str) -> str:
    return f"server-group-{escape_id_part(server_id)}"


def server_header_id(server_id: str) -> str:
    return f"server-header-{escape_id_part(server_id)}"


def channel_node_id(server_id: str, channel_name: str) -> str:
    return f"channel-{escape_id_part(server_id)}-{escape_id_part(channel_name)}"


def identifier_node_id(identifier: str) -> str:
    return f"identifier-{escape_id_part(identifier)}"


# channel_id is already built from escaped parts
def tx_edge_id(identifier: str, channel_id: str) -> str:
    return f"edge-tx-{escape_id_part(identifier)}-{channel_id}"


def rx_edge_id(channel_id: str, identifier: str) -> str:
    return f"edge-rx-{channel_id}-{escape_id_part(identifier)}"


def group_height(channel_count: int) -> int:
    return GROUP_BASE_HEIGHT + GROUP_HEIGHT_PER_CHANNEL * channel_count


def channel_position(channel_index: int) -> Position:
    return Position(x=CHANNEL_OFFSET_X, y=CHANNEL_OFFSET_Y + channel_index * CHANNEL_ROW_HEIGHT)


# ============================================================
# Graph builder
# ============================================================

class TopologyGraphBuilder:
    """
    Deterministic topology -> graph builder.
    No I/O. One node per distinct identifier, one edge per
    (channel, identifier, direction).
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self._node_ids: Set[str] = set()
        self._edge_keys: Set[Tuple[str, str, EdgeDirection]] = set()
        # dict keeps first-seen order
        self._identifiers: Dict[str, None] = {}

    # ---------- helpers ----------

    def _add_node(self, node: Node):
        if node.id not in self._node_ids:
            self.nodes.append(node)
            self._node_ids.add(node.id)

    def _add_edge(self, edge_id: str, source: str, target: str, direction: EdgeDirection):
        edge_key = (source, target, direction)
        if edge_key in self._edge_keys:
            return
        self._edge_keys.add(edge_key)
        self.edges.append(Edge(id=edge_id, source=source, target=target, direction=direction))

    # ---------- servers ----------

    def add_server(self, server: Server):
        group_id = server_group_id(server.server_id)
        metadata = ServerPayload(
            server_id=server.server_id,
            server_name=server.server_name,
            server_address=server.server_address,
        )

        self._add_node(
            Node(
                id=group_id,
                kind=NodeKind.SERVER_GROUP,
                payload=metadata,
                size=Size(width=GROUP_WIDTH, height=group_height(len(server.channels))),
            )
        )

        # Decorative: pinned to the group, never picked.
        self._add_node(
            Node(
                id=server_header_id(server.server_id),
                kind=NodeKind.SERVER_HEADER,
                payload=metadata,
                size=Size(width=HEADER_WIDTH),
                position=HEADER_OFFSET,
                parent_id=group_id,
                draggable=False,
                selectable=False,
            )
        )

        for index, channel in enumerate(server.channels):
            self.add_channel(server, channel, index)

    # ---------- channels ----------

    def add_channel(self, server: Server, channel: Channel, index: int):
        channel_id = channel_node_id(server.server_id, channel.channel_name)

        self._add_node(
            Node(
                id=channel_id,
                kind=NodeKind.CHANNEL,
                payload=ChannelPayload(
                    channel_name=channel.channel_name,
                    tx_identifiers=tuple(channel.tx_identifiers),
                    rx_identifiers=tuple(channel.rx_identifiers),
                ),
                size=Size(width=CHANNEL_WIDTH),
                position=channel_position(index),
                parent_id=server_group_id(server.server_id),
            )
        )

        for identifier in channel.tx_identifiers:
            self._identifiers.setdefault(identifier)
            self._add_edge(
                tx_edge_id(identifier, channel_id),
                identifier_node_id(identifier),
                channel_id,
                EdgeDirection.TX,
            )

        for identifier in channel.rx_identifiers:
            self._identifiers.setdefault(identifier)
            self._add_edge(
                rx_edge_id(channel_id, identifier),
                channel_id,
                identifier_node_id(identifier),
                EdgeDirection.RX,
            )

    # ---------- identifiers ----------

    def add_identifiers(self):
        """Emit the collected identifiers. Call once, after every server."""
        for identifier in self._identifiers:
            self._add_node(
                Node(
                    id=identifier_node_id(identifier),
                    kind=NodeKind.IDENTIFIER,
                    payload=IdentifierPayload(label=identifier),
                    size=Size(width=IDENTIFIER_WIDTH),
                )
            )

    # ---------- output ----------

    def build(self) -> Graph:
        return Graph(nodes=list(self.nodes), edges=list(self.edges))


def _check_topology(topology: Topology):
    problems: List[str] = []
    seen_servers: Set[str] = set()

    for server in topology.servers:
        if server.server_id in seen_servers:
            problems.append(f"duplicate serverId '{server.server_id}'")
        seen_servers.add(server.server_id)

        seen_channels: Set[str] = set()
        for channel in server.channels:
            if channel.channel_name in seen_channels:
                problems.append(
                    f"duplicate channelName '{channel.channel_name}' in server '{server.server_id}'"
                )
            seen_channels.add(channel.channel_name)

    if problems:
        raise TopologyValidationError("Topology description is invalid", problems)


# ============================================================
# PUBLIC COMPILER ENTRY POINT
# ============================================================

def compile_topology(topology) -> Graph:
    """
    Compile a topology description (Topology model or plain mapping)
    into nodes and edges. Raises TopologyValidationError on bad input.
    """
    topology = parse_topology(topology)
    _check_topology(topology)

    builder = TopologyGraphBuilder()
    for server in topology.servers:
        builder.add_server(server)
    builder.add_identifiers()

    graph = builder.build()
    logger.debug(
        "Compiled topology: %d servers, %d nodes, %d edges",
        len(topology.servers),
        len(graph.nodes),
        len(graph.edges),
    )
    return graph
