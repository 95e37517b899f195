"""Shortest-path search over the open edges of the delivery graph."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ...config import settings
from ...models.domain import Graph
from .adjacency import build_adjacency
from .models import PathResult

logger = logging.getLogger(__name__)


def estimate_minutes(distance_km: float, average_speed_kmh: float | None = None) -> int:
    """Coarse ETA in whole minutes, rounded half up."""
    speed = average_speed_kmh if average_speed_kmh is not None else settings.average_speed_kmh
    return int(math.floor(distance_km / speed * 60 + 0.5))


def find_shortest_path(
    graph: Graph,
    start_node_id: str,
    end_node_id: str,
    *,
    average_speed_kmh: float | None = None,
) -> PathResult:
    """Dijkstra from ``start_node_id`` to ``end_node_id`` ignoring blocked edges.

    Unknown endpoints and disconnected pairs yield an empty ``PathResult``
    rather than an error. Ties on tentative distance go to the node listed
    first in ``graph.nodes``.
    """

    if not graph.has_node(start_node_id) or not graph.has_node(end_node_id):
        logger.debug("Unknown endpoint in path query %s -> %s", start_node_id, end_node_id)
        return PathResult()
    if start_node_id == end_node_id:
        return PathResult(path=[start_node_id], distance=0.0, estimated_time=0)

    adjacency = build_adjacency(graph)
    distances: dict[str, float] = {node.id: math.inf for node in graph.nodes}
    previous: dict[str, str | None] = {node.id: None for node in graph.nodes}
    distances[start_node_id] = 0.0
    # List keeps graph order so the scan below breaks ties the same way every run.
    unvisited = [node.id for node in graph.nodes]
    unvisited_set = set(unvisited)

    while unvisited:
        current = None
        smallest = math.inf
        for node_id in unvisited:
            if distances[node_id] < smallest:
                smallest = distances[node_id]
                current = node_id

        if current is None or current == end_node_id:
            break

        unvisited.remove(current)
        unvisited_set.discard(current)

        for neighbour, weight in adjacency.get(current, ()):
            if neighbour not in unvisited_set:
                continue
            tentative = distances[current] + weight
            if tentative < distances[neighbour]:
                distances[neighbour] = tentative
                previous[neighbour] = current

    if previous[end_node_id] is None:
        return PathResult()

    path = [end_node_id]
    current = end_node_id
    while current != start_node_id:
        current = previous[current]
        path.append(current)
    path.reverse()

    distance = distances[end_node_id]
    logger.debug("Shortest path %s -> %s: %s (%.3f km)", start_node_id, end_node_id, path, distance)
    return PathResult(
        path=path,
        distance=distance,
        estimated_time=estimate_minutes(distance, average_speed_kmh),
    )


def path_distance(graph: Graph, path: Sequence[str]) -> float | None:
    """Sum of the cheapest open edge between consecutive nodes, ``None`` if a hop is closed."""
    if not path:
        return None
    if any(not graph.has_node(node_id) for node_id in path):
        return None
    adjacency = build_adjacency(graph)
    total = 0.0
    for here, there in zip(path, path[1:]):
        weights = [weight for neighbour, weight in adjacency[here] if neighbour == there]
        if not weights:
            return None
        total += min(weights)
    return total
