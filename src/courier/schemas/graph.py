"""Graph request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class EdgeModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    source: str
    target: str
    weight: float = Field(..., ge=0, description="Road length in kilometres.")
    is_blocked: bool = False


class GraphModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    nodes: List[NodeModel]
    edges: List[EdgeModel]

    @model_validator(mode="after")
    def _check_integrity(self) -> "GraphModel":
        node_ids = [node.id for node in self.nodes]
        duplicates = sorted({node_id for node_id in node_ids if node_ids.count(node_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate node ids: {', '.join(duplicates)}")

        edge_ids = [edge.id for edge in self.edges]
        duplicates = sorted({edge_id for edge_id in edge_ids if edge_ids.count(edge_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate edge ids: {', '.join(duplicates)}")

        known = set(node_ids)
        for edge in self.edges:
            missing = [endpoint for endpoint in (edge.source, edge.target) if endpoint not in known]
            if missing:
                raise ValueError(f"Edge {edge.id} references unknown nodes: {', '.join(missing)}")
        return self


class ShortestPathResponse(BaseModel):
    source: str
    target: str
    path: List[str]
    distance: float
    estimated_time: int
    reachable: bool


class ToggleObstacleResponse(BaseModel):
    edge: EdgeModel
    rerouted_orders: int
    blocked_edges: List[str]


class GeometryResponse(BaseModel):
    order_id: Optional[str] = None
    path: List[str]
    coordinates: List[tuple[float, float]]
    display_eta_minutes: int
