"""Order routing policy: route on placement, re-route on every obstacle change."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from ...models.domain import (
    NEXT_STATUS,
    ORDER_STATUSES,
    TERMINAL_STATUSES,
    Edge,
    Order,
)
from ..routing.dijkstra import find_shortest_path
from .state import DispatchState

logger = logging.getLogger(__name__)


class InvalidStatusTransition(ValueError):
    """Raised when an order is asked to move to a status it cannot reach."""


def can_transition(current: str, new: str) -> bool:
    """Return whether an order can move from ``current`` to ``new``."""
    if current in TERMINAL_STATUSES:
        return False
    if new == "revoked":
        return True
    return NEXT_STATUS.get(current) == new


def _apply_route(state: DispatchState, order: Order) -> None:
    result = find_shortest_path(state.graph, order.source_address_id, order.target_address_id)
    order.path = result.path
    order.distance = result.distance
    order.estimated_delivery_time = result.estimated_time


def place_order(
    state: DispatchState,
    user_id: str,
    target_address_id: str,
    delivery_guy_id: str,
    *,
    now: datetime | None = None,
) -> Optional[Order]:
    """Create an order routed from the delivery agent's home node to the target.

    Returns ``None`` without touching the state when the agent is unknown or is
    not a delivery user. An unreachable target still creates the order, with an
    empty path.
    """
    delivery_guy = state.get_user(delivery_guy_id)
    if delivery_guy is None or delivery_guy.role != "delivery":
        logger.warning("Ignoring order for unknown delivery agent '%s'", delivery_guy_id)
        return None

    order = Order(
        id=state.next_order_id(),
        user_id=user_id,
        delivery_guy_id=delivery_guy_id,
        source_address_id=delivery_guy.address_id,
        target_address_id=target_address_id,
        status=ORDER_STATUSES[0],
        created_at=now or datetime.now(timezone.utc),
    )
    _apply_route(state, order)
    state.orders.append(order)

    if order.has_route:
        logger.info(
            "Placed order %s: %s -> %s, %.2f km, ETA %s min",
            order.id,
            order.source_address_id,
            order.target_address_id,
            order.distance,
            order.estimated_delivery_time,
        )
    else:
        logger.warning(
            "Placed order %s with no available route from %s to %s",
            order.id,
            order.source_address_id,
            order.target_address_id,
        )
    return order


def recompute_routes(state: DispatchState) -> int:
    """Re-route every non-terminal order against the current graph; returns how many."""
    refreshed = 0
    for order in state.orders:
        if order.is_terminal:
            continue
        _apply_route(state, order)
        refreshed += 1
    return refreshed


def toggle_obstacle(state: DispatchState, edge_id: str) -> tuple[Optional[Edge], int]:
    """Block or unblock an edge and re-route all open orders.

    Returns the toggled edge (``None`` for an unknown id, in which case nothing
    changes) and the number of orders re-routed.
    """
    edge = state.graph.toggle_edge_blocked(edge_id)
    if edge is None:
        logger.warning("Ignoring obstacle toggle for unknown edge '%s'", edge_id)
        return None, 0

    refreshed = recompute_routes(state)
    logger.info(
        "Edge %s (%s-%s) is now %s; re-routed %s open orders",
        edge.id,
        edge.source,
        edge.target,
        "blocked" if edge.is_blocked else "open",
        refreshed,
    )
    return edge, refreshed


def update_order_status(state: DispatchState, order_id: str, new_status: str) -> Optional[Order]:
    """Move an order to ``new_status``. Routes are left as they are.

    Unknown order ids are a no-op returning ``None``.
    """
    order = state.get_order(order_id)
    if order is None:
        logger.warning("Ignoring status update for unknown order '%s'", order_id)
        return None

    if new_status not in ORDER_STATUSES:
        raise InvalidStatusTransition(f"Unknown order status '{new_status}'.")

    if not can_transition(order.status, new_status):
        raise InvalidStatusTransition(
            f"Order {order_id} cannot move from '{order.status}' to '{new_status}'."
        )

    logger.info("Order %s: %s -> %s", order_id, order.status, new_status)
    order.status = new_status
    return order


def advance_order(state: DispatchState, order_id: str) -> Optional[Order]:
    """Step an order to the next status on the delivery happy path."""
    order = state.get_order(order_id)
    if order is None:
        logger.warning("Ignoring advance for unknown order '%s'", order_id)
        return None
    next_status = NEXT_STATUS.get(order.status)
    if next_status is None:
        raise InvalidStatusTransition(f"Order {order_id} is already '{order.status}'.")
    return update_order_status(state, order_id, next_status)


def revoke_order(state: DispatchState, order_id: str) -> Optional[Order]:
    return update_order_status(state, order_id, "revoked")


def count_orders_by_status(orders: Iterable[Order]) -> dict[str, int]:
    counts = {status: 0 for status in ORDER_STATUSES}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return counts


def filter_orders(
    orders: Sequence[Order],
    *,
    user_id: str | None = None,
    delivery_guy_id: str | None = None,
    status: str | None = None,
    include_terminal: bool = True,
) -> list[Order]:
    selected = []
    for order in orders:
        if user_id is not None and order.user_id != user_id:
            continue
        if delivery_guy_id is not None and order.delivery_guy_id != delivery_guy_id:
            continue
        if status is not None and order.status != status:
            continue
        if not include_terminal and order.is_terminal:
            continue
        selected.append(order)
    return selected


def active_orders_for_agent(orders: Sequence[Order], delivery_guy_id: str) -> list[Order]:
    """Orders a delivery agent still has to work on."""
    return filter_orders(orders, delivery_guy_id=delivery_guy_id, include_terminal=False)
