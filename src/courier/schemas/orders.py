"""Order and actor schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OrderStatusLiteral = Literal["placed", "assigned", "in-progress", "delivered", "revoked"]
UserRoleLiteral = Literal["customer", "delivery", "admin"]


class UserModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    name: str
    role: UserRoleLiteral
    address_id: str


class OrderModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    delivery_guy_id: str
    source_address_id: str
    target_address_id: str
    status: OrderStatusLiteral
    created_at: datetime
    path: List[str] = Field(default_factory=list)
    distance: float = 0.0
    estimated_delivery_time: int = 0


class SeedOrderModel(BaseModel):
    """Order as stored in a seed document; the route is recomputed on load when missing."""

    id: str
    user_id: str
    delivery_guy_id: str
    target_address_id: str
    source_address_id: Optional[str] = None
    status: OrderStatusLiteral = "placed"
    created_at: Optional[datetime] = None
    path: Optional[List[str]] = None
    distance: Optional[float] = None
    estimated_delivery_time: Optional[int] = None


class PlaceOrderRequest(BaseModel):
    user_id: str
    target_address_id: str
    delivery_guy_id: str


class UpdateOrderStatusRequest(BaseModel):
    status: OrderStatusLiteral


class OrderSummaryResponse(BaseModel):
    total: int
    counts: Dict[str, int]
