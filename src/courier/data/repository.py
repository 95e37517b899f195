"""Seed loader that builds the dispatch state from a JSON document."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..config import settings
from ..models.domain import TERMINAL_STATUSES, Edge, Graph, Node, Order, User
from ..schemas.seed import SeedDocument
from ..services.orders.state import DispatchState, DispatchStore
from ..services.routing.dijkstra import estimate_minutes, find_shortest_path, path_distance

logger = logging.getLogger(__name__)


def parse_seed(payload: dict[str, Any]) -> SeedDocument:
    try:
        return SeedDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid seed document: {exc}") from exc


def build_state(document: SeedDocument) -> DispatchState:
    """Turn a validated seed into domain objects.

    Orders without a cached path are routed. An open order whose cached path
    crosses a blocked or missing edge is routed again; terminal orders keep
    whatever they were seeded with.
    """
    graph = Graph(
        nodes=[Node(node.id, node.name, node.latitude, node.longitude) for node in document.nodes],
        edges=[Edge(edge.id, edge.source, edge.target, edge.weight, edge.is_blocked) for edge in document.edges],
    )
    users = [User(user.id, user.name, user.role, user.address_id) for user in document.users]
    homes = {user.id: user.address_id for user in users}

    orders: list[Order] = []
    for seed in document.orders:
        order = Order(
            id=seed.id,
            user_id=seed.user_id,
            delivery_guy_id=seed.delivery_guy_id,
            source_address_id=seed.source_address_id or homes[seed.delivery_guy_id],
            target_address_id=seed.target_address_id,
            status=seed.status,
            created_at=seed.created_at or datetime.now(timezone.utc),
        )
        cached_distance = None if seed.path is None else path_distance(graph, seed.path)
        if seed.path is None or (cached_distance is None and seed.status not in TERMINAL_STATUSES):
            if seed.path is not None:
                logger.warning("Seed order %s has a stale cached path; re-routing", seed.id)
            result = find_shortest_path(graph, order.source_address_id, order.target_address_id)
            order.path = result.path
            order.distance = result.distance
            order.estimated_delivery_time = result.estimated_time
        else:
            order.path = list(seed.path)
            order.distance = seed.distance if seed.distance is not None else (cached_distance or 0.0)
            if seed.estimated_delivery_time is not None:
                order.estimated_delivery_time = seed.estimated_delivery_time
            else:
                order.estimated_delivery_time = estimate_minutes(order.distance)
        orders.append(order)

    return DispatchState(graph=graph, users=users, orders=orders)


def load_seed_file(path: Path | None = None) -> DispatchState:
    seed_path = path or settings.seed_file
    if not seed_path.exists():
        raise FileNotFoundError(f"Seed file not found: {seed_path}")
    with seed_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    state = build_state(parse_seed(payload))
    logger.info(
        "Loaded seed %s: %s nodes, %s edges, %s users, %s orders",
        seed_path.name,
        len(state.graph.nodes),
        len(state.graph.edges),
        len(state.users),
        len(state.orders),
    )
    return state


@lru_cache(maxsize=1)
def get_store() -> DispatchStore:
    """Process-wide store seeded from ``settings.seed_file``."""
    return DispatchStore(load_seed_file())


def reset_store() -> None:
    get_store.cache_clear()
