"""Seed document schema: the graph, its actors and any orders to start with."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator

from .graph import GraphModel
from .orders import SeedOrderModel, UserModel


class SeedDocument(GraphModel):
    users: List[UserModel] = Field(default_factory=list)
    orders: List[SeedOrderModel] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "SeedDocument":
        node_ids = {node.id for node in self.nodes}
        user_ids = [user.id for user in self.users]
        duplicates = sorted({user_id for user_id in user_ids if user_ids.count(user_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate user ids: {', '.join(duplicates)}")
        for user in self.users:
            if user.address_id not in node_ids:
                raise ValueError(f"User {user.id} lives at unknown node '{user.address_id}'")

        order_ids = [order.id for order in self.orders]
        duplicates = sorted({order_id for order_id in order_ids if order_ids.count(order_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate order ids: {', '.join(duplicates)}")
        roles = {user.id: user.role for user in self.users}
        for order in self.orders:
            if order.user_id not in roles:
                raise ValueError(f"Order {order.id} was placed by unknown user '{order.user_id}'")
            if roles.get(order.delivery_guy_id) != "delivery":
                raise ValueError(f"Order {order.id} is assigned to unknown delivery agent '{order.delivery_guy_id}'")
        return self
