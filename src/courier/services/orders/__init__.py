"""Order lifecycle and routing policy helpers."""

from .policy import (
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
from .state import DispatchState, DispatchStore

__all__ = [
    "DispatchState",
    "DispatchStore",
    "InvalidStatusTransition",
    "active_orders_for_agent",
    "advance_order",
    "can_transition",
    "count_orders_by_status",
    "filter_orders",
    "place_order",
    "recompute_routes",
    "revoke_order",
    "toggle_obstacle",
    "update_order_status",
]
