# Visual styling for the React Flow hand-off

from channel_graph.visual.visual_style import EDGE_STYLE, VISUAL_STYLE

__all__ = [
    "EDGE_STYLE",
    "VISUAL_STYLE",
]
