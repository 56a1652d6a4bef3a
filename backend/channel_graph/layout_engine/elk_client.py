import logging

import requests

from channel_graph.errors import LayoutEngineError
from channel_graph.layout_engine.base import LayoutEngine, LayoutRequest, LayoutResponse

logger = logging.getLogger(__name__)


class ElkHttpLayoutEngine(LayoutEngine):
    """
    Client for an ELK layout service (an elkjs process behind HTTP).
    POST {base_url}/layout with an ELK JSON graph, get the laid-out graph back.
    """

    name = "elk"

    def __init__(self, base_url: str, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def layout(self, request: LayoutRequest) -> LayoutResponse:
        url = f"{self.base_url}/layout"
        graph = request.to_elk()
        logger.debug(
            "POST %s (%d children, %d edges)", url, len(graph["children"]), len(graph["edges"])
        )

        try:
            response = requests.post(url, json=graph, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise LayoutEngineError(f"ELK layout service call failed: {e}") from e
        except ValueError as e:
            raise LayoutEngineError(f"ELK layout service returned invalid JSON: {e}") from e

        return LayoutResponse.from_elk(payload)
