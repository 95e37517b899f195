"""Graph and obstacle endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, status

from ...data.repository import get_store
from ...schemas.graph import EdgeModel, GraphModel, ShortestPathResponse, ToggleObstacleResponse
from ...services.orders.policy import toggle_obstacle
from ...services.routing.dijkstra import find_shortest_path

router = APIRouter(prefix="/graph", tags=["graph"])


@router.get("", response_model=GraphModel, status_code=status.HTTP_200_OK)
def get_graph() -> GraphModel:
    snapshot = get_store().snapshot()
    return GraphModel.model_validate(snapshot.graph)


@router.get("/shortest-path", response_model=ShortestPathResponse, status_code=status.HTTP_200_OK)
def shortest_path(
    source: str = Query(..., description="Start node id"),
    target: str = Query(..., description="End node id"),
) -> ShortestPathResponse:
    """Unknown or disconnected nodes give an empty path rather than an error."""
    snapshot = get_store().snapshot()
    result = find_shortest_path(snapshot.graph, source, target)
    return ShortestPathResponse(
        source=source,
        target=target,
        path=result.path,
        distance=result.distance,
        estimated_time=result.estimated_time,
        reachable=result.reachable,
    )


@router.post("/edges/{edge_id}/toggle", response_model=ToggleObstacleResponse, status_code=status.HTTP_200_OK)
def toggle_edge(edge_id: str) -> ToggleObstacleResponse:
    """Block or unblock a road and re-route every open order."""
    with get_store().transaction() as state:
        edge, refreshed = toggle_obstacle(state, edge_id)
        if edge is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Edge '{edge_id}' not found",
            )
        return ToggleObstacleResponse(
            edge=EdgeModel.model_validate(edge),
            rerouted_orders=refreshed,
            blocked_edges=[blocked.id for blocked in state.graph.blocked_edges()],
        )
