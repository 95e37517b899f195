"""Display geometry for node paths, with a straight-line fallback."""

from __future__ import annotations

import logging
from typing import Sequence

from ...models.domain import Graph
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)

Coordinate = tuple[float, float]


def straight_line_geometry(graph: Graph, path: Sequence[str]) -> list[Coordinate]:
    """Node coordinates of the path in order; ids missing from the graph are skipped."""
    coordinates: list[Coordinate] = []
    for node_id in path:
        node = graph.get_node(node_id)
        if node is not None:
            coordinates.append((node.latitude, node.longitude))
    return coordinates


def _coordinates_from_response(data: dict) -> list[Coordinate]:
    routes = data.get("routes") or []
    if not routes:
        raise ValueError("OSRM response contains no routes.")
    geometry = routes[0].get("geometry") or {}
    points = geometry.get("coordinates")
    if not points:
        raise ValueError("OSRM route is missing geometry coordinates.")
    # GeoJSON order is [lon, lat]
    return [(float(point[1]), float(point[0])) for point in points]


def get_route_geometry(
    graph: Graph,
    path: Sequence[str],
    client: OSRMClient | None = None,
) -> list[Coordinate]:
    """Road polyline for a node path as (lat, lon) pairs.

    Best effort: any failure of the routing service degrades to the straight
    line through the path's nodes. Paths shorter than two nodes have no geometry.
    """
    if len(path) < 2:
        return []

    waypoints = straight_line_geometry(graph, path)
    if len(waypoints) < 2:
        return waypoints

    try:
        osrm = client or OSRMClient()
        return _coordinates_from_response(osrm.route(waypoints))
    except Exception as exc:
        logger.warning("Failed to get route geometry from OSRM, falling back to straight lines: %s", exc)
    return waypoints
