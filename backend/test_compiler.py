import pytest

from channel_graph.compiler import compile_topology
from channel_graph.compiler.compiler import (
    CHANNEL_OFFSET_X,
    CHANNEL_OFFSET_Y,
    CHANNEL_ROW_HEIGHT,
    GROUP_BASE_HEIGHT,
    GROUP_HEIGHT_PER_CHANNEL,
    GROUP_WIDTH,
)
from channel_graph.compiler.types import (
    ChannelPayload,
    EdgeDirection,
    IdentifierPayload,
    NodeKind,
    Position,
    ServerPayload,
)
from channel_graph.errors import TopologyValidationError
from channel_graph.schemas import Topology


def channel(name, tx=(), rx=()):
    return {"channelName": name, "txIdentifiers": list(tx), "rxIdentifiers": list(rx)}


def server(server_id, *channels, name=None, address="127.0.0.1:9000"):
    return {
        "serverId": server_id,
        "serverName": name or f"Server {server_id}",
        "serverAddress": address,
        "channels": list(channels),
    }


def topology(*servers):
    return {"servers": list(servers)}


def test_empty_topology_compiles_to_empty_graph():
    graph = compile_topology({"servers": []})

    assert graph.nodes == []
    assert graph.edges == []


def test_single_server_single_channel():
    graph = compile_topology(topology(server("S1", channel("C1", tx=["A"], rx=["B"]))))

    assert [(n.kind, n.id) for n in graph.nodes] == [
        (NodeKind.SERVER_GROUP, "server-group-S1"),
        (NodeKind.SERVER_HEADER, "server-header-S1"),
        (NodeKind.CHANNEL, "channel-S1-C1"),
        (NodeKind.IDENTIFIER, "identifier-A"),
        (NodeKind.IDENTIFIER, "identifier-B"),
    ]
    assert [(e.id, e.source, e.target, e.direction) for e in graph.edges] == [
        ("edge-tx-A-channel-S1-C1", "identifier-A", "channel-S1-C1", EdgeDirection.TX),
        ("edge-rx-channel-S1-C1-B", "channel-S1-C1", "identifier-B", EdgeDirection.RX),
    ]
    assert graph.edges[0].label == "TX"
    assert graph.edges[1].label == "RX"


def test_shared_identifier_across_servers_is_emitted_once():
    graph = compile_topology(
        topology(
            server("S1", channel("orders.out", tx=["ORDER_SERVICE"])),
            server("S2", channel("orders.in", rx=["ORDER_SERVICE"])),
        )
    )

    identifiers = [n for n in graph.nodes if n.kind == NodeKind.IDENTIFIER]
    assert [n.id for n in identifiers] == ["identifier-ORDER_SERVICE"]

    touching = [
        e for e in graph.edges
        if "identifier-ORDER_SERVICE" in (e.source, e.target)
    ]
    assert len(touching) == 2
    assert {e.direction for e in touching} == {EdgeDirection.TX, EdgeDirection.RX}


def test_identifiers_emitted_in_first_seen_order_after_servers():
    graph = compile_topology(
        topology(
            server("S1", channel("c1", tx=["Z", "A"], rx=["M"])),
            server("S2", channel("c2", tx=["A", "Q"], rx=["Z"])),
        )
    )

    kinds = [n.kind for n in graph.nodes]
    first_identifier = kinds.index(NodeKind.IDENTIFIER)
    assert all(k == NodeKind.IDENTIFIER for k in kinds[first_identifier:])
    assert [n.payload.label for n in graph.nodes[first_identifier:]] == ["Z", "A", "M", "Q"]


def test_identifier_used_as_tx_and_rx_on_same_channel_gets_two_edges():
    graph = compile_topology(topology(server("S1", channel("loop", tx=["X"], rx=["X"]))))

    assert [e.id for e in graph.edges] == [
        "edge-tx-X-channel-S1-loop",
        "edge-rx-channel-S1-loop-X",
    ]
    assert sum(1 for n in graph.nodes if n.kind == NodeKind.IDENTIFIER) == 1


def test_repeated_identifier_in_one_list_yields_single_edge():
    graph = compile_topology(topology(server("S1", channel("c", tx=["A", "A"], rx=["B", "B"]))))

    assert [e.id for e in graph.edges] == [
        "edge-tx-A-channel-S1-c",
        "edge-rx-channel-S1-c-B",
    ]


def test_containment():
    graph = compile_topology(
        topology(
            server("S1", channel("a", tx=["X"]), channel("b", rx=["Y"])),
            server("S2", channel("a", tx=["Y"])),
        )
    )
    index = graph.node_index()

    for node in graph.nodes:
        if node.kind in (NodeKind.SERVER_HEADER, NodeKind.CHANNEL):
            parent = index[node.parent_id]
            assert parent.kind == NodeKind.SERVER_GROUP
            server_id = parent.payload.server_id
            if node.kind == NodeKind.SERVER_HEADER:
                assert node.id == f"server-header-{server_id}"
            else:
                assert node.id.startswith(f"channel-{server_id}-")
        else:
            assert node.parent_id is None
            assert node.is_top_level


def test_edges_reference_existing_nodes():
    graph = compile_topology(
        topology(
            server("S1", channel("a", tx=["X", "Y"], rx=["Z"])),
            server("S2", channel("b", tx=["Z"], rx=["X"]), channel("c", rx=["W"])),
        )
    )
    node_ids = {n.id for n in graph.nodes}

    assert len(node_ids) == len(graph.nodes)
    assert len({e.id for e in graph.edges}) == len(graph.edges)
    for edge in graph.edges:
        assert edge.source in node_ids
        assert edge.target in node_ids


def test_compilation_is_deterministic():
    data = topology(
        server("S1", channel("a", tx=["X"], rx=["Y"])),
        server("S2", channel("b", tx=["Y"], rx=["X", "Z"])),
    )

    first = compile_topology(data)
    second = compile_topology(data)

    assert first == second


def test_server_group_geometry_grows_with_channels():
    graph = compile_topology(
        topology(server("S1", channel("a"), channel("b"), channel("c")), server("S2"))
    )
    index = graph.node_index()

    group = index["server-group-S1"]
    assert group.size.width == GROUP_WIDTH
    assert group.size.height == GROUP_BASE_HEIGHT + 3 * GROUP_HEIGHT_PER_CHANNEL
    assert index["server-group-S2"].size.height == GROUP_BASE_HEIGHT

    third = index["channel-S1-c"]
    assert third.position == Position(x=CHANNEL_OFFSET_X, y=CHANNEL_OFFSET_Y + 2 * CHANNEL_ROW_HEIGHT)
    # The last row must fit inside the group.
    assert third.position.y + CHANNEL_ROW_HEIGHT <= group.size.height


def test_header_is_decorative():
    graph = compile_topology(topology(server("S1", name="Gateway", address="10.0.0.1:80")))
    header = graph.node_index()["server-header-S1"]

    assert header.draggable is False
    assert header.selectable is False
    assert header.position == Position(x=12, y=10)
    assert header.payload == ServerPayload(
        server_id="S1", server_name="Gateway", server_address="10.0.0.1:80"
    )


def test_payloads_per_kind():
    graph = compile_topology(topology(server("S1", channel("c", tx=["A", "B"], rx=["C"]))))
    index = graph.node_index()

    assert index["channel-S1-c"].payload == ChannelPayload(
        channel_name="c", tx_identifiers=("A", "B"), rx_identifiers=("C",)
    )
    assert index["identifier-C"].payload == IdentifierPayload(label="C")


def test_all_positions_start_at_origin_for_top_level_nodes():
    graph = compile_topology(topology(server("S1", channel("c", tx=["A"]))))

    for node in graph.nodes:
        if node.is_top_level:
            assert node.position == Position()


def test_accepts_topology_model():
    model = Topology.model_validate(topology(server("S1", channel("c", rx=["A"]))))

    graph = compile_topology(model)

    assert len(graph.nodes) == 4


def test_missing_field_is_rejected():
    with pytest.raises(TopologyValidationError) as exc:
        compile_topology({"servers": [{"serverId": "S1", "channels": []}]})

    assert any("serverName" in p for p in exc.value.problems)
    assert any("serverAddress" in p for p in exc.value.problems)


def test_wrong_identifier_type_is_rejected():
    with pytest.raises(TopologyValidationError):
        compile_topology(topology(server("S1", channel("c", tx=[42]))))


def test_duplicate_server_id_is_rejected():
    with pytest.raises(TopologyValidationError) as exc:
        compile_topology(topology(server("S1"), server("S1")))

    assert "duplicate serverId 'S1'" in str(exc.value)


def test_duplicate_channel_name_within_server_is_rejected():
    with pytest.raises(TopologyValidationError) as exc:
        compile_topology(topology(server("S1", channel("c"), channel("c"))))

    assert "duplicate channelName 'c'" in str(exc.value)


def test_same_channel_name_on_different_servers_is_allowed():
    graph = compile_topology(topology(server("S1", channel("c")), server("S2", channel("c"))))

    assert {"channel-S1-c", "channel-S2-c"} <= {n.id for n in graph.nodes}


def test_hyphenated_names_get_distinct_ids():
    graph = compile_topology(
        topology(
            server("eu", channel("west-orders", tx=["A"], rx=["B"])),
            server("eu-west", channel("orders", tx=["A"], rx=["B"])),
        )
    )
    channels = [n for n in graph.nodes if n.kind == NodeKind.CHANNEL]

    assert [n.id for n in channels] == ["channel-eu-west%2Dorders", "channel-eu%2Dwest-orders"]
    assert [n.parent_id for n in channels] == ["server-group-eu", "server-group-eu%2Dwest"]
    assert len({e.id for e in graph.edges}) == len(graph.edges) == 4
    assert {e.target for e in graph.edges if e.direction == EdgeDirection.TX} == {
        n.id for n in channels
    }


def test_escaped_ids_stay_unique():
    graph = compile_topology(
        topology(
            server("a", channel("b-c", tx=["x-y"])),
            server("a-b", channel("c", tx=["x"], rx=["y"])),
            server("a%2Db", channel("c", rx=["x%2Dy"])),
        )
    )

    assert len({n.id for n in graph.nodes}) == len(graph.nodes)
    assert len({e.id for e in graph.edges}) == len(graph.edges) == 4
    assert "identifier-x%2Dy" in {n.id for n in graph.nodes}
    assert "identifier-x%252Dy" in {n.id for n in graph.nodes}
