import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from channel_graph.api.serializers import to_react_flow
from channel_graph.compiler import apply_layout, compile_topology
from channel_graph.errors import TopologyValidationError
from channel_graph.schemas import load_sample_topology
from channel_graph.validation import validate_graph

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="",
    tags=["graph"],
)


def _build_response(
    topology: Any,
    layout: bool,
    selected_service: Optional[str],
) -> Dict[str, Any]:
    try:
        graph = compile_topology(topology)
    except TopologyValidationError as e:
        logger.info("Rejected topology: %s", e)
        raise HTTPException(
            status_code=422,
            detail={"message": str(e), "problems": e.problems},
        ) from e

    if layout:
        graph = apply_layout(graph)

    payload = to_react_flow(graph, selected_service=selected_service)
    payload["validation"] = validate_graph(graph).to_dict()
    return payload


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/graph")
def build_graph(
    topology: Dict[str, Any],
    layout: bool = True,
    selected_service: Optional[str] = None,
):
    # Raw dict: shape errors are reported by the compiler, not by FastAPI.
    return _build_response(topology, layout, selected_service)


@router.get("/graph/sample")
def sample_graph(layout: bool = True, selected_service: Optional[str] = None):
    return _build_response(load_sample_topology(), layout, selected_service)
