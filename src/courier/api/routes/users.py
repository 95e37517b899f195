"""Actor endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...data.repository import get_store
from ...schemas.orders import UserModel, UserRoleLiteral

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserModel], status_code=status.HTTP_200_OK)
def list_users(
    role: Optional[UserRoleLiteral] = Query(default=None, description="Only users with this role"),
) -> List[UserModel]:
    snapshot = get_store().snapshot()
    return [UserModel.model_validate(user) for user in snapshot.users if role is None or user.role == role]
