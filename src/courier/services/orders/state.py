"""Owned application state and the lock that serialises events against it."""

from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ...models.domain import Graph, Order, User


@dataclass(slots=True)
class DispatchState:
    """Graph, actors and orders owned by a single coordinating context."""

    graph: Graph
    users: list[User] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)

    def get_user(self, user_id: str) -> Optional[User]:
        return next((user for user in self.users if user.id == user_id), None)

    def get_order(self, order_id: str) -> Optional[Order]:
        return next((order for order in self.orders if order.id == order_id), None)

    def next_order_id(self) -> str:
        taken = {order.id for order in self.orders}
        counter = len(self.orders) + 1
        while f"o{counter}" in taken:
            counter += 1
        return f"o{counter}"


class DispatchStore:
    """Holds one ``DispatchState`` and applies events to it one at a time.

    Writers run inside :meth:`transaction`; readers take a deep copy through
    :meth:`snapshot` so they never see a toggled graph whose orders are only
    partly re-routed.
    """

    def __init__(self, state: DispatchState) -> None:
        self._state = state
        self._lock = threading.Lock()

    @contextmanager
    def transaction(self) -> Iterator[DispatchState]:
        with self._lock:
            yield self._state

    def snapshot(self) -> DispatchState:
        with self._lock:
            return copy.deepcopy(self._state)
