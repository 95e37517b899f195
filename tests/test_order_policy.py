from datetime import datetime, timezone

import pytest

from src.courier.models.domain import Edge, Graph, Node, User
from src.courier.services.orders import (
    DispatchState,
    DispatchStore,
    InvalidStatusTransition,
    active_orders_for_agent,
    advance_order,
    can_transition,
    count_orders_by_status,
    filter_orders,
    place_order,
    recompute_routes,
    revoke_order,
    toggle_obstacle,
    update_order_status,
)


def _node(nid: str, lat: float, lon: float) -> Node:
    return Node(id=nid, name=f"Node {nid}", latitude=lat, longitude=lon)


def _state() -> DispatchState:
    graph = Graph(
        nodes=[
            _node("A", 0.0, 0.0),
            _node("B", 0.0, 0.01),
            _node("C", 0.01, 0.01),
            _node("D", 0.02, 0.02),
        ],
        edges=[
            Edge("AB", "A", "B", 5),
            Edge("BC", "B", "C", 5),
            Edge("AC", "A", "C", 12),
            Edge("CD", "C", "D", 2),
        ],
    )
    users = [
        User("u1", "Customer One", "customer", "C"),
        User("u2", "Customer Two", "customer", "D"),
        User("d1", "Driver One", "delivery", "A"),
        User("d2", "Driver Two", "delivery", "D"),
        User("a1", "Admin", "admin", "B"),
    ]
    return DispatchState(graph=graph, users=users)


def test_place_order_routes_from_agent_home():
    state = _state()
    created = datetime(2024, 5, 2, 8, 0, tzinfo=timezone.utc)

    order = place_order(state, "u1", "C", "d1", now=created)

    assert order is not None
    assert order.id == "o1"
    assert order.status == "placed"
    assert order.source_address_id == "A"
    assert order.target_address_id == "C"
    assert order.path == ["A", "B", "C"]
    assert order.distance == 10
    assert order.estimated_delivery_time == 60
    assert order.created_at == created
    assert state.orders == [order]


def test_place_order_ids_are_sequential():
    state = _state()
    first = place_order(state, "u1", "C", "d1")
    second = place_order(state, "u2", "B", "d2")
    assert [first.id, second.id] == ["o1", "o2"]


def test_place_order_with_unknown_agent_is_noop():
    state = _state()
    assert place_order(state, "u1", "C", "nobody") is None
    assert place_order(state, "u1", "C", "u2") is None
    assert state.orders == []


def test_place_order_to_unreachable_target_keeps_empty_route():
    state = _state()
    state.graph.toggle_edge_blocked("CD")

    order = place_order(state, "u2", "D", "d1")

    assert order is not None
    assert order.path == []
    assert order.distance == 0
    assert order.estimated_delivery_time == 0
    assert not order.has_route


def test_toggle_obstacle_reroutes_open_orders():
    state = _state()
    order = place_order(state, "u1", "C", "d1")

    edge, refreshed = toggle_obstacle(state, "AB")

    assert edge.is_blocked
    assert state.graph.get_edge("AB") is edge
    assert refreshed == 1
    assert order.path == ["A", "C"]
    assert order.distance == 12
    assert order.estimated_delivery_time == 72

    toggle_obstacle(state, "AC")
    assert order.path == []
    assert order.distance == 0

    toggle_obstacle(state, "AB")
    toggle_obstacle(state, "AC")
    assert order.path == ["A", "B", "C"]
    assert order.distance == 10


def test_toggle_obstacle_unknown_edge_is_noop():
    state = _state()
    order = place_order(state, "u1", "C", "d1")
    before = (list(order.path), order.distance, order.estimated_delivery_time)

    edge, refreshed = toggle_obstacle(state, "missing")

    assert edge is None
    assert refreshed == 0
    assert (order.path, order.distance, order.estimated_delivery_time) == before
    assert not state.graph.blocked_edges()


def test_toggle_obstacle_leaves_terminal_orders_alone():
    state = _state()
    delivered = place_order(state, "u1", "C", "d1")
    revoked = place_order(state, "u1", "C", "d1")
    open_order = place_order(state, "u1", "C", "d1")
    for status in ("assigned", "in-progress", "delivered"):
        update_order_status(state, delivered.id, status)
    revoke_order(state, revoked.id)

    _, refreshed = toggle_obstacle(state, "AB")

    assert refreshed == 1
    assert open_order.path == ["A", "C"]
    for frozen in (delivered, revoked):
        assert frozen.path == ["A", "B", "C"]
        assert frozen.distance == 10
        assert frozen.estimated_delivery_time == 60


def test_toggle_unrelated_edge_keeps_routes():
    state = _state()
    order = place_order(state, "u1", "C", "d1")
    before = (list(order.path), order.distance, order.estimated_delivery_time)

    toggle_obstacle(state, "CD")

    assert (order.path, order.distance, order.estimated_delivery_time) == before


def test_recompute_routes_is_idempotent():
    state = _state()
    order = place_order(state, "u2", "D", "d1")
    before = (list(order.path), order.distance, order.estimated_delivery_time)

    assert recompute_routes(state) == 1
    assert recompute_routes(state) == 1
    assert (order.path, order.distance, order.estimated_delivery_time) == before


def test_status_follows_happy_path():
    state = _state()
    order = place_order(state, "u1", "C", "d1")

    for expected in ("assigned", "in-progress", "delivered"):
        assert advance_order(state, order.id).status == expected

    with pytest.raises(InvalidStatusTransition):
        advance_order(state, order.id)


def test_status_update_does_not_recompute_route():
    state = _state()
    order = place_order(state, "u1", "C", "d1")
    state.graph.toggle_edge_blocked("AB")

    update_order_status(state, order.id, "assigned")

    assert order.path == ["A", "B", "C"]


@pytest.mark.parametrize(
    "current,new,allowed",
    [
        ("placed", "assigned", True),
        ("placed", "in-progress", False),
        ("placed", "delivered", False),
        ("assigned", "in-progress", True),
        ("assigned", "placed", False),
        ("in-progress", "delivered", True),
        ("placed", "revoked", True),
        ("in-progress", "revoked", True),
        ("delivered", "revoked", False),
        ("revoked", "placed", False),
        ("revoked", "revoked", False),
    ],
)
def test_can_transition(current, new, allowed):
    assert can_transition(current, new) is allowed


def test_skipping_a_status_is_rejected():
    state = _state()
    order = place_order(state, "u1", "C", "d1")
    with pytest.raises(InvalidStatusTransition):
        update_order_status(state, order.id, "delivered")
    assert order.status == "placed"


def test_unknown_status_is_rejected():
    state = _state()
    order = place_order(state, "u1", "C", "d1")
    with pytest.raises(InvalidStatusTransition):
        update_order_status(state, order.id, "lost")


def test_status_update_for_unknown_order_is_noop():
    state = _state()
    place_order(state, "u1", "C", "d1")
    assert update_order_status(state, "o99", "assigned") is None
    assert update_order_status(state, "o99", "lost") is None
    assert advance_order(state, "o99") is None
    assert revoke_order(state, "o99") is None
    assert len(state.orders) == 1


def test_counts_and_filters():
    state = _state()
    first = place_order(state, "u1", "C", "d1")
    second = place_order(state, "u2", "D", "d2")
    place_order(state, "u1", "B", "d2")
    advance_order(state, first.id)
    revoke_order(state, second.id)

    counts = count_orders_by_status(state.orders)
    assert counts == {"placed": 1, "assigned": 1, "in-progress": 0, "delivered": 0, "revoked": 1}
    assert [o.id for o in filter_orders(state.orders, user_id="u1")] == ["o1", "o3"]
    assert [o.id for o in filter_orders(state.orders, status="revoked")] == ["o2"]
    assert [o.id for o in active_orders_for_agent(state.orders, "d2")] == ["o3"]


def test_store_snapshot_is_isolated():
    state = _state()
    store = DispatchStore(state)
    with store.transaction() as live:
        place_order(live, "u1", "C", "d1")

    snapshot = store.snapshot()
    snapshot.orders[0].status = "revoked"
    snapshot.graph.toggle_edge_blocked("AB")

    with store.transaction() as live:
        assert live.orders[0].status == "placed"
        assert not live.graph.blocked_edges()
