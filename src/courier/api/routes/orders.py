"""Order endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...data.repository import get_store
from ...models.domain import Order
from ...schemas.graph import GeometryResponse
from ...schemas.orders import (
    OrderModel,
    OrderStatusLiteral,
    OrderSummaryResponse,
    PlaceOrderRequest,
    UpdateOrderStatusRequest,
)
from ...services.geospatial import display_eta_minutes
from ...services.orders.policy import (
    InvalidStatusTransition,
    advance_order,
    count_orders_by_status,
    filter_orders,
    place_order,
    revoke_order,
    update_order_status,
)
from ...services.routing.geometry import get_route_geometry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def _not_found(order_id: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Order '{order_id}' not found")


def _to_model(order: Order) -> OrderModel:
    return OrderModel.model_validate(order)


@router.get("", response_model=List[OrderModel], status_code=status.HTTP_200_OK)
def list_orders(
    user_id: Optional[str] = Query(default=None, description="Orders placed by this customer"),
    delivery_guy_id: Optional[str] = Query(default=None, description="Orders assigned to this agent"),
    status_filter: Optional[OrderStatusLiteral] = Query(default=None, alias="status"),
    active_only: bool = Query(default=False, description="Hide delivered and revoked orders"),
) -> List[OrderModel]:
    snapshot = get_store().snapshot()
    selected = filter_orders(
        snapshot.orders,
        user_id=user_id,
        delivery_guy_id=delivery_guy_id,
        status=status_filter,
        include_terminal=not active_only,
    )
    return [_to_model(order) for order in selected]


@router.get("/summary", response_model=OrderSummaryResponse, status_code=status.HTTP_200_OK)
def order_summary() -> OrderSummaryResponse:
    snapshot = get_store().snapshot()
    return OrderSummaryResponse(total=len(snapshot.orders), counts=count_orders_by_status(snapshot.orders))


@router.get("/{order_id}", response_model=OrderModel, status_code=status.HTTP_200_OK)
def get_order(order_id: str) -> OrderModel:
    order = get_store().snapshot().get_order(order_id)
    if order is None:
        raise _not_found(order_id)
    return _to_model(order)


@router.post("", response_model=OrderModel, status_code=status.HTTP_201_CREATED)
def create_order(payload: PlaceOrderRequest) -> OrderModel:
    with get_store().transaction() as state:
        order = place_order(state, payload.user_id, payload.target_address_id, payload.delivery_guy_id)
        if order is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Delivery agent '{payload.delivery_guy_id}' not found",
            )
        return _to_model(order)


def _transition(order_id: str, action) -> OrderModel:
    try:
        with get_store().transaction() as state:
            order = action(state)
            if order is None:
                raise _not_found(order_id)
            return _to_model(order)
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.patch("/{order_id}/status", response_model=OrderModel, status_code=status.HTTP_200_OK)
def set_order_status(order_id: str, payload: UpdateOrderStatusRequest) -> OrderModel:
    return _transition(order_id, lambda state: update_order_status(state, order_id, payload.status))


@router.post("/{order_id}/advance", response_model=OrderModel, status_code=status.HTTP_200_OK)
def advance(order_id: str) -> OrderModel:
    return _transition(order_id, lambda state: advance_order(state, order_id))


@router.post("/{order_id}/revoke", response_model=OrderModel, status_code=status.HTTP_200_OK)
def revoke(order_id: str) -> OrderModel:
    return _transition(order_id, lambda state: revoke_order(state, order_id))


@router.get("/{order_id}/geometry", response_model=GeometryResponse, status_code=status.HTTP_200_OK)
def order_geometry(order_id: str) -> GeometryResponse:
    """Road geometry for the order's cached path; runs outside the state lock."""
    snapshot = get_store().snapshot()
    order = snapshot.get_order(order_id)
    if order is None:
        raise _not_found(order_id)
    try:
        coordinates = get_route_geometry(snapshot.graph, order.path)
    except Exception as exc:
        logger.exception(f"Error building geometry for order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build route geometry: {str(exc)}",
        ) from exc
    return GeometryResponse(
        order_id=order.id,
        path=order.path,
        coordinates=coordinates,
        display_eta_minutes=display_eta_minutes(snapshot.graph, order.path),
    )
