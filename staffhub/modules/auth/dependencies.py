from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from staffhub.core.exceptions import (
    InvalidCredentialError,
    MissingCredentialError,
    StaffHubError,
)
from staffhub.core.logging_config import logger, set_user_id
from staffhub.core.security import decode_token, is_mock_token, parse_mock_token
from staffhub.modules.auth.policies import require_admin as _require_admin
from staffhub.modules.auth.policies import require_staff_or_admin as _require_staff_or_admin
from staffhub.schemas.auth import Identity
from staffhub.services.user_directory import UserDirectory, get_user_directory

# auto_error=False so a missing header surfaces as MissingCredentialError (401)
security = HTTPBearer(auto_error=False)


async def resolve_identity(token: str, directory: UserDirectory) -> Identity:
    """
    Turn a bearer credential into a caller identity.

    Mock credentials (``mock_token_<id>_<ts>``) are resolved by fetching the
    user from the directory; anything else must be a valid signed token whose
    claims are taken as-is.
    """
    if is_mock_token(token):
        user_id = parse_mock_token(token)
        try:
            user = await directory.get_user(user_id)
        except StaffHubError as e:
            logger.log_auth_event(
                event="mock_token",
                success=False,
                reason=f"user {user_id} could not be resolved: {e.message}",
            )
            raise InvalidCredentialError("Invalid mock token") from e

        return Identity(
            id=str(user.get("id")),
            email=user.get("email"),
            role=user.get("role"),
            full_name=user.get("fullName"),
            position=user.get("position"),
        )

    claims = decode_token(token)
    return Identity.from_claims(claims)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    directory: UserDirectory = Depends(get_user_directory),
) -> Identity:
    """Get current authenticated caller"""
    if not credentials or not credentials.credentials:
        raise MissingCredentialError()

    identity = await resolve_identity(credentials.credentials, directory)
    set_user_id(identity.id)
    return identity


async def get_current_admin(
    current_user: Identity = Depends(get_current_user)
) -> Identity:
    """Get current admin caller"""
    return _require_admin(current_user)


async def get_staff_or_admin(
    current_user: Identity = Depends(get_current_user)
) -> Identity:
    """Get current caller with a staff or admin role"""
    return _require_staff_or_admin(current_user)


# Alias kept for route declarations that read better as a requirement
require_admin = get_current_admin
