import json
from pathlib import Path

import pytest

from src.courier.config import settings
from src.courier.data.repository import build_state, load_seed_file, parse_seed


def _payload() -> dict:
    return {
        "nodes": [
            {"id": "A", "name": "Alpha", "latitude": 6.90, "longitude": 79.85},
            {"id": "B", "name": "Bravo", "latitude": 6.91, "longitude": 79.86},
            {"id": "C", "name": "Charlie", "latitude": 6.92, "longitude": 79.87},
        ],
        "edges": [
            {"id": "AB", "source": "A", "target": "B", "weight": 5},
            {"id": "BC", "source": "B", "target": "C", "weight": 5},
            {"id": "AC", "source": "A", "target": "C", "weight": 12, "is_blocked": True},
        ],
        "users": [
            {"id": "u1", "name": "Customer", "role": "customer", "address_id": "C"},
            {"id": "d1", "name": "Driver", "role": "delivery", "address_id": "A"},
        ],
        "orders": [
            {"id": "o1", "user_id": "u1", "delivery_guy_id": "d1", "target_address_id": "C"},
        ],
    }


def test_build_state_routes_seed_orders():
    state = build_state(parse_seed(_payload()))

    assert [node.id for node in state.graph.nodes] == ["A", "B", "C"]
    assert [edge.id for edge in state.graph.blocked_edges()] == ["AC"]
    order = state.orders[0]
    assert order.source_address_id == "A"
    assert order.status == "placed"
    assert order.path == ["A", "B", "C"]
    assert order.distance == 10
    assert order.estimated_delivery_time == 60


def test_seed_orders_keep_cached_routes():
    payload = _payload()
    payload["orders"][0].update(status="delivered", path=["A", "C"], distance=12, estimated_delivery_time=72)

    order = build_state(parse_seed(payload)).orders[0]

    assert order.status == "delivered"
    assert order.path == ["A", "C"]
    assert order.distance == 12


def test_open_seed_order_with_closed_cached_path_is_rerouted():
    payload = _payload()
    payload["orders"][0].update(status="assigned", path=["A", "C"], distance=12, estimated_delivery_time=72)

    order = build_state(parse_seed(payload)).orders[0]

    assert order.path == ["A", "B", "C"]
    assert order.distance == 10
    assert order.estimated_delivery_time == 60


def test_open_seed_order_keeps_open_cached_path():
    payload = _payload()
    payload["orders"][0].update(status="in-progress", path=["A", "B", "C"])

    order = build_state(parse_seed(payload)).orders[0]

    assert order.path == ["A", "B", "C"]
    assert order.distance == 10
    assert order.estimated_delivery_time == 60


@pytest.mark.parametrize(
    "mutate,message",
    [
        (lambda p: p["nodes"].append(dict(p["nodes"][0])), "Duplicate node ids"),
        (lambda p: p["edges"].append(dict(p["edges"][0])), "Duplicate edge ids"),
        (lambda p: p["edges"][0].update(target="Z"), "unknown nodes"),
        (lambda p: p["edges"][0].update(weight=-1), "greater than or equal to 0"),
        (lambda p: p["users"][0].update(address_id="Z"), "unknown node"),
        (lambda p: p["orders"][0].update(delivery_guy_id="ghost"), "unknown delivery agent"),
        (lambda p: p["orders"][0].update(delivery_guy_id="u1"), "unknown delivery agent"),
        (lambda p: p["orders"][0].update(user_id="ghost"), "unknown user"),
        (lambda p: p["users"][0].update(role="pilot"), "role"),
    ],
)
def test_malformed_seed_is_rejected(mutate, message):
    payload = _payload()
    mutate(payload)
    with pytest.raises(ValueError, match=message):
        parse_seed(payload)


def test_load_seed_file(tmp_path: Path):
    seed_path = tmp_path / "seed.json"
    seed_path.write_text(json.dumps(_payload()), encoding="utf-8")

    state = load_seed_file(seed_path)

    assert len(state.users) == 2
    assert state.get_order("o1").path == ["A", "B", "C"]


def test_load_seed_file_missing(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_seed_file(tmp_path / "missing.json")


def test_bundled_demo_seed_is_valid():
    state = load_seed_file(settings.seed_file)

    assert state.graph.nodes
    assert {user.role for user in state.users} == {"customer", "delivery", "admin"}
    delivered = [order for order in state.orders if order.status == "delivered"]
    assert delivered and all(order.path for order in delivered)
