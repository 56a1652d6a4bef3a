from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from channel_graph.errors import LayoutEngineError


DEFAULT_LAYOUT_OPTIONS: Dict[str, str] = {
    "elk.algorithm": "layered",
    "elk.direction": "RIGHT",
    "elk.spacing.nodeNode": "45",
    "elk.layered.spacing.nodeNodeBetweenLayers": "90",
}


@dataclass(frozen=True)
class LayoutChild:
    id: str
    width: float
    height: float


@dataclass(frozen=True)
class LayoutEdge:
    id: str
    source: str
    target: str


@dataclass
class LayoutRequest:
    children: List[LayoutChild] = field(default_factory=list)
    edges: List[LayoutEdge] = field(default_factory=list)
    layout_options: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_LAYOUT_OPTIONS))

    def to_elk(self) -> Dict[str, Any]:
        """ELK JSON graph understood by elkjs and the ELK layout service."""
        return {
            "id": "root",
            "layoutOptions": dict(self.layout_options),
            "children": [
                {"id": child.id, "width": child.width, "height": child.height}
                for child in self.children
            ],
            "edges": [
                {"id": edge.id, "sources": [edge.source], "targets": [edge.target]}
                for edge in self.edges
            ],
        }


@dataclass
class LayoutResponse:
    # id -> (x, y); a missing coordinate is None
    positions: Dict[str, Tuple[Optional[float], Optional[float]]] = field(default_factory=dict)

    @classmethod
    def from_elk(cls, payload: Any) -> "LayoutResponse":
        """Parse `{children: [{id, x, y}]}`. Other engine metadata is ignored."""
        if not isinstance(payload, dict):
            raise LayoutEngineError(f"Layout response is not an object: {type(payload).__name__}")

        children = payload.get("children")
        if not isinstance(children, list):
            raise LayoutEngineError("Layout response has no 'children' list")

        positions: Dict[str, Tuple[Optional[float], Optional[float]]] = {}
        for child in children:
            if not isinstance(child, dict) or not isinstance(child.get("id"), str):
                raise LayoutEngineError(f"Malformed layout child: {child!r}")
            positions[child["id"]] = (_coordinate(child.get("x")), _coordinate(child.get("y")))

        return cls(positions=positions)


def _coordinate(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutEngineError(f"Layout coordinate is not a number: {value!r}")
    return float(value)


class LayoutEngine(ABC):
    name: str

    @abstractmethod
    def layout(self, request: LayoutRequest) -> LayoutResponse:
        """
        Compute coordinates for every child of the request.
        Raise LayoutEngineError when no usable answer can be produced.
        """
