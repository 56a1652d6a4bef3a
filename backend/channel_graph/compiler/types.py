from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class NodeKind(str, Enum):
    SERVER_GROUP = "ServerGroup"
    SERVER_HEADER = "ServerHeader"
    CHANNEL = "Channel"
    IDENTIFIER = "Identifier"


class EdgeDirection(str, Enum):
    TX = "TX"  # identifier -> channel
    RX = "RX"  # channel -> identifier


@dataclass(frozen=True)
class ServerPayload:
    server_id: str
    server_name: str
    server_address: str


@dataclass(frozen=True)
class ChannelPayload:
    channel_name: str
    tx_identifiers: Tuple[str, ...] = ()
    rx_identifiers: Tuple[str, ...] = ()


@dataclass(frozen=True)
class IdentifierPayload:
    label: str


# ServerGroup and ServerHeader carry ServerPayload
NodePayload = Union[ServerPayload, ChannelPayload, IdentifierPayload]


@dataclass(frozen=True)
class Size:
    width: Optional[float] = None
    height: Optional[float] = None  # None lets the renderer size to content


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Node:
    id: str
    kind: NodeKind
    payload: NodePayload
    size: Size = field(default_factory=Size)
    position: Position = field(default_factory=Position)
    parent_id: Optional[str] = None  # set only inside a ServerGroup
    draggable: bool = True
    selectable: bool = True

    @property
    def is_top_level(self) -> bool:
        return self.parent_id is None


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    direction: EdgeDirection

    @property
    def label(self) -> str:
        return self.direction.value


@dataclass
class Graph:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def node_index(self) -> Dict[str, Node]:
        return {node.id: node for node in self.nodes}
