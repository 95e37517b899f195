"""Domain models for the routing graph, actors and delivery orders."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

ORDER_STATUSES: tuple[str, ...] = ("placed", "assigned", "in-progress", "delivered", "revoked")
TERMINAL_STATUSES: frozenset[str] = frozenset({"delivered", "revoked"})

# Happy path only; "revoked" is reachable out of band from any non-terminal state.
NEXT_STATUS: dict[str, str] = {
    "placed": "assigned",
    "assigned": "in-progress",
    "in-progress": "delivered",
}


@dataclass(frozen=True, slots=True)
class Node:
    """A location vertex in the routing graph."""

    id: str
    name: str
    latitude: float
    longitude: float


@dataclass(slots=True)
class Edge:
    """Undirected road between two nodes; weight is in kilometres."""

    id: str
    source: str
    target: str
    weight: float
    is_blocked: bool = False


@dataclass(slots=True)
class Graph:
    """Ordered node list plus edges; only the blocked flag of an edge ever changes."""

    nodes: list[Node]
    edges: list[Edge]
    _node_index: dict[str, Node] = field(init=False, repr=False, compare=False)
    _edge_index: dict[str, Edge] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._node_index = {node.id: node for node in self.nodes}
        self._edge_index = {edge.id: edge for edge in self.edges}

    def has_node(self, node_id: str) -> bool:
        return node_id in self._node_index

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._node_index.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edge_index.get(edge_id)

    def blocked_edges(self) -> list[Edge]:
        return [edge for edge in self.edges if edge.is_blocked]

    def toggle_edge_blocked(self, edge_id: str) -> Optional[Edge]:
        """Flip ``is_blocked`` on the edge; unknown ids are ignored and return ``None``."""
        edge = self._edge_index.get(edge_id)
        if edge is None:
            return None
        edge.is_blocked = not edge.is_blocked
        return edge


@dataclass(slots=True)
class User:
    """Customer, delivery agent or administrator living at a graph node."""

    id: str
    name: str
    role: str
    address_id: str


@dataclass(slots=True)
class Order:
    """Delivery request with the last route computed for it."""

    id: str
    user_id: str
    delivery_guy_id: str
    source_address_id: str
    target_address_id: str
    status: str
    created_at: datetime
    path: list[str] = field(default_factory=list)
    distance: float = 0.0
    estimated_delivery_time: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def has_route(self) -> bool:
        return bool(self.path)
