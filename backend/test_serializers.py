from channel_graph.api.serializers import nodes_for_identifier, to_react_flow
from channel_graph.compiler import compile_topology


TOPOLOGY = {
    "servers": [
        {
            "serverId": "S1",
            "serverName": "Gateway",
            "serverAddress": "10.0.0.1:7000",
            "channels": [
                {"channelName": "in", "txIdentifiers": ["A"], "rxIdentifiers": ["B"]},
                {"channelName": "out", "txIdentifiers": ["B"], "rxIdentifiers": ["C"]},
            ],
        },
    ]
}


def flow(selected_service=None):
    return to_react_flow(compile_topology(TOPOLOGY), selected_service=selected_service)


def by_id(items):
    return {item["id"]: item for item in items}


def test_top_level_shape():
    result = flow()

    assert set(result) == {"nodes", "edges"}
    assert len(result["nodes"]) == 7
    assert len(result["edges"]) == 4


def test_group_node():
    group = by_id(flow()["nodes"])["server-group-S1"]

    assert group["type"] == "group"
    assert group["position"] == {"x": 0.0, "y": 0.0}
    assert group["style"]["width"] == 380
    assert group["style"]["height"] == 392
    assert group["style"]["border"] == "2px solid #4f46e5"
    assert group["data"] == {
        "serverName": "Gateway",
        "serverId": "S1",
        "serverAddress": "10.0.0.1:7000",
    }
    assert "parentNode" not in group
    assert "extent" not in group


def test_contained_nodes_reference_parent():
    nodes = by_id(flow()["nodes"])

    header = nodes["server-header-S1"]
    assert header["type"] == "serverHeader"
    assert header["parentNode"] == "server-group-S1"
    assert header["extent"] == "parent"
    assert header["draggable"] is False
    assert header["selectable"] is False

    channel = nodes["channel-S1-out"]
    assert channel["type"] == "channelNode"
    assert channel["parentNode"] == "server-group-S1"
    assert channel["position"] == {"x": 35, "y": 70 + 132}
    assert channel["data"]["txIdentifiers"] == ["B"]
    assert channel["data"]["rxIdentifiers"] == ["C"]


def test_parents_precede_children():
    seen = set()
    for node in flow()["nodes"]:
        if "parentNode" in node:
            assert node["parentNode"] in seen
        seen.add(node["id"])


def test_selected_service_is_passed_to_channels_and_identifiers():
    nodes = by_id(flow(selected_service="B")["nodes"])

    assert nodes["channel-S1-in"]["data"]["selectedService"] == "B"
    assert nodes["identifier-A"]["data"] == {"label": "A", "selectedService": "B"}
    assert "selectedService" not in nodes["server-group-S1"]["data"]
    assert "selectedService" not in nodes["server-header-S1"]["data"]


def test_edges():
    edges = by_id(flow()["edges"])

    tx = edges["edge-tx-A-channel-S1-in"]
    assert tx == {
        "id": "edge-tx-A-channel-S1-in",
        "source": "identifier-A",
        "target": "channel-S1-in",
        "type": "smoothstep",
        "markerEnd": {"type": "arrowclosed"},
        "label": "TX",
    }
    assert edges["edge-rx-channel-S1-out-C"]["label"] == "RX"


def test_nodes_for_identifier():
    graph = compile_topology(TOPOLOGY)

    assert nodes_for_identifier(graph, "B") == {
        "identifier-B",
        "channel-S1-in",
        "channel-S1-out",
    }
    assert nodes_for_identifier(graph, "A") == {"identifier-A", "channel-S1-in"}
    assert nodes_for_identifier(graph, "missing") == set()
