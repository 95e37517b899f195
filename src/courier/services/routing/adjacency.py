"""Neighbour index over the open edges of a graph."""

from __future__ import annotations

from ...models.domain import Graph

Adjacency = dict[str, list[tuple[str, float]]]


def build_adjacency(graph: Graph) -> Adjacency:
    """Map every node id to ``(neighbour_id, weight)`` pairs reachable over unblocked edges.

    Each open edge is recorded on both endpoints. Nodes without open edges still
    get an (empty) entry so callers can tell "isolated" from "unknown".
    """

    adjacency: Adjacency = {node.id: [] for node in graph.nodes}
    for edge in graph.edges:
        if edge.is_blocked:
            continue
        adjacency.setdefault(edge.source, []).append((edge.target, edge.weight))
        adjacency.setdefault(edge.target, []).append((edge.source, edge.weight))
    return adjacency
