# React Flow node type + static style per node kind
VISUAL_STYLE = {
    "ServerGroup": {
        "type": "group",
        "style": {
            "border": "2px solid #4f46e5",
            "borderRadius": 12,
            "background": "rgba(79, 70, 229, 0.12)",
        },
    },
    "ServerHeader": {
        "type": "serverHeader",
        "style": {},
    },
    "Channel": {
        "type": "channelNode",
        "style": {},
    },
    "Identifier": {
        "type": "identifierNode",
        "style": {},
    },
}

EDGE_STYLE = {
    "type": "smoothstep",
    "markerEnd": {"type": "arrowclosed"},
}
