"""
Users Management API

Admin CRUD proxied to the hosted user directory. Password fields are hashed
on the way in and stripped on the way out.
"""
from fastapi import APIRouter, Depends, status
from typing import Any, Dict, List

from staffhub.api.endpoints.auth import get_account_service
from staffhub.modules.auth.dependencies import (
    get_current_user,
    get_staff_or_admin,
    require_admin,
)
from staffhub.schemas.auth import ChangePasswordRequest, Identity
from staffhub.schemas.tracking import MessageResponse
from staffhub.schemas.user import UserCreate, UserUpdate
from staffhub.services.account_service import AccountService

router = APIRouter()


@router.get("", response_model=List[Dict[str, Any]])
async def list_users(
    current_user: Identity = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.list_users()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: Identity = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    return await accounts.create_user(user_data)


# Declared before /{user_id} so the literal path wins
@router.put("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Change the caller's own password after checking the current one"""
    await accounts.change_password(current_user, body.current_password, body.new_password)
    return {"success": True, "message": "Password changed successfully"}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: Identity = Depends(get_staff_or_admin),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    return await accounts.get_user(user_id)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: Identity = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
) -> Dict[str, Any]:
    return await accounts.update_user(user_id, user_data)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    current_user: Identity = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.delete_user(user_id)
    return MessageResponse(message="User deleted successfully")
