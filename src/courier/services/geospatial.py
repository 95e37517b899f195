"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Sequence

from ..config import settings
from ..models.domain import Graph

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def straight_line_km(graph: Graph, path: Sequence[str]) -> float:
    """Great-circle length of the polyline through the path's known nodes."""
    nodes = [graph.get_node(node_id) for node_id in path]
    points = [node for node in nodes if node is not None]
    return sum(
        haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)
        for a, b in zip(points, points[1:])
    )


def display_eta_minutes(graph: Graph, path: Sequence[str], speed_kmh: float | None = None) -> int:
    """Cosmetic ETA shown beside the map geometry.

    Orders carry the graph-distance ETA from the solver; this one is never stored.
    """
    speed = speed_kmh if speed_kmh is not None else settings.display_speed_kmh
    return int(math.floor(straight_line_km(graph, path) / speed * 60 + 0.5))
