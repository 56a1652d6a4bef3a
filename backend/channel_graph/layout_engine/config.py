from typing import Optional

from channel_graph.config import ELK_BASE_URL, LAYOUT_ENGINE, LAYOUT_TIMEOUT_SECONDS
from channel_graph.layout_engine.base import LayoutEngine
from channel_graph.layout_engine.elk_client import ElkHttpLayoutEngine
from channel_graph.layout_engine.layered import LayeredLayoutEngine


def get_layout_engine(name: Optional[str] = None) -> LayoutEngine:
    name = (name or LAYOUT_ENGINE).lower()

    if name == "local":
        return LayeredLayoutEngine()
    if name == "elk":
        return ElkHttpLayoutEngine(base_url=ELK_BASE_URL, timeout=LAYOUT_TIMEOUT_SECONDS)

    raise ValueError(f"Unknown layout engine '{name}' (expected 'local' or 'elk')")
