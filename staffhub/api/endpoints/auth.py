from fastapi import APIRouter, Depends, Request, status

from staffhub.core.rate_limiter import login_rate_limit, register_rate_limit
from staffhub.core.security import create_user_token
from staffhub.modules.auth.dependencies import get_current_user
from staffhub.schemas.auth import (
    Identity,
    LoginResponse,
    MeResponse,
    ProfileUpdate,
    RegisterResponse,
    UserLogin,
    UserRegister,
    UserSummary,
)
from staffhub.schemas.tracking import MessageResponse
from staffhub.services.account_service import AccountService
from staffhub.services.user_directory import UserDirectory, get_user_directory


router = APIRouter()


def get_account_service(directory: UserDirectory = Depends(get_user_directory)) -> AccountService:
    return AccountService(directory)


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@register_rate_limit()
async def register(
    request: Request,
    user_data: UserRegister,
    accounts: AccountService = Depends(get_account_service),
):
    """Register a new user in the directory and issue a token"""
    created = await accounts.register(user_data)
    return RegisterResponse(
        user=UserSummary.from_record(created),
        token=create_user_token(created),
    )


@router.post("/login", response_model=LoginResponse)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    accounts: AccountService = Depends(get_account_service),
):
    """Exchange email and password for a signed token"""
    user = await accounts.authenticate(credentials.email, credentials.password)
    return LoginResponse(
        token=create_user_token(user),
        user=UserSummary.from_record(user),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: Identity = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: Identity = Depends(get_current_user)):
    return MeResponse(user=current_user)


@router.put("/me")
async def update_me(
    profile: ProfileUpdate,
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Update the caller's own name, position or avatar"""
    updated = await accounts.update_profile(current_user, profile)
    return {"user": UserSummary.from_record(updated).model_dump(by_alias=True)}
