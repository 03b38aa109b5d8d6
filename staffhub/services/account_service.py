"""
Account Service - registration, login and user administration

Users are stored in the hosted user directory. Email uniqueness is checked
against a full listing before creation; nothing makes that check atomic, so
two concurrent registrations can still both succeed.
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from staffhub.core.config import settings
from staffhub.core.exceptions import (
    AuthenticationError,
    UpstreamError,
    ValidationError,
)
from staffhub.core.logging_config import logger
from staffhub.core.security import get_password_hash, password_matches
from staffhub.modules.auth.policies import ROLES
from staffhub.schemas.auth import Identity, ProfileUpdate, UserRegister
from staffhub.schemas.user import UserCreate, UserUpdate
from staffhub.services.user_directory import UserDirectory, strip_password


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _check_password_length(password: str) -> None:
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long",
            field="password",
        )


class AccountService:

    def __init__(self, directory: UserDirectory):
        self.directory = directory

    async def _ensure_email_free(self, email: str, strict: bool) -> None:
        """
        Reject an email already in the directory.

        With ``strict=False`` a failed listing is logged and ignored, which is
        how self-registration behaves when the directory is flaky.
        """
        try:
            existing = await self.directory.find_by_email(email)
        except UpstreamError as e:
            if strict:
                raise
            logger.warning(f"[Auth] Could not check existing users, continuing: {e.message}")
            return

        if existing:
            raise ValidationError("Email already exists", field="email")

    # ==================== Self-service ====================

    async def register(self, data: UserRegister) -> Dict[str, Any]:
        """Validate and create a directory user; returns the created record"""
        if not (data.full_name and data.email and data.password and data.position):
            raise ValidationError("All fields are required: fullName, email, password, position")
        _check_password_length(data.password)
        if data.role not in ROLES:
            raise ValidationError('Role must be either "admin" or "staff"', field="role")
        if not EMAIL_PATTERN.match(data.email):
            raise ValidationError("Invalid email address", field="email")

        try:
            await self._ensure_email_free(data.email, strict=False)
        except ValidationError:
            logger.log_auth_event(
                event="register", success=False, user_email=data.email,
                reason="Email already exists",
            )
            raise

        now = _timestamp()
        new_user = {
            "fullName": data.full_name.strip(),
            "email": data.email.lower(),
            "password": get_password_hash(data.password),
            "role": data.role,
            "position": data.position,
            "status": "active",
            "avatar": f"avatar_{int(datetime.now().timestamp() * 1000)}.png",
            "attachments": "",
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            created = await self.directory.create_user(new_user)
        except UpstreamError as e:
            logger.log_error_with_context(e, context="register")
            raise UpstreamError("Error creating user. Please try again.") from e

        logger.log_auth_event(
            event="register", success=True, user_email=new_user["email"], user_role=data.role,
        )
        return created

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Return the directory record for valid credentials of an active user"""
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.directory.find_by_email(email)
        if not user or not password_matches(password, user.get("password")):
            logger.log_auth_event(event="login", success=False, user_email=email, reason="Invalid credentials")
            raise AuthenticationError()

        if user.get("status") == "inactive":
            logger.log_auth_event(event="login", success=False, user_email=email, reason="Account inactive")
            raise AuthenticationError("Account is inactive. Please contact an administrator.")

        logger.log_auth_event(event="login", success=True, user_email=email)
        return user

    async def change_password(
        self, identity: Identity, current_password: Optional[str], new_password: Optional[str]
    ) -> None:
        if not current_password or not new_password:
            raise ValidationError("Current and new password are required")
        _check_password_length(new_password)

        user = await self.directory.get_user(identity.id)
        if not password_matches(current_password, user.get("password")):
            logger.log_auth_event(
                event="change_password", success=False, user_email=identity.email,
                reason="Current password is incorrect",
            )
            raise ValidationError("Current password is incorrect", field="currentPassword")

        await self.directory.update_user(identity.id, {
            "password": get_password_hash(new_password),
            "updatedAt": _timestamp(),
        })
        logger.log_auth_event(event="change_password", success=True, user_email=identity.email)

    async def update_profile(self, identity: Identity, data: ProfileUpdate) -> Dict[str, Any]:
        changes = data.model_dump(by_alias=True, exclude_unset=True)
        if "fullName" in changes and not (changes["fullName"] or "").strip():
            raise ValidationError("Full name cannot be empty", field="fullName")
        changes["updatedAt"] = _timestamp()
        return await self.directory.update_user(identity.id, changes)

    # ==================== Administration ====================

    async def list_users(self) -> List[Dict[str, Any]]:
        return [strip_password(user) for user in await self.directory.list_users()]

    async def get_user(self, user_id: str) -> Dict[str, Any]:
        return strip_password(await self.directory.get_user(user_id))

    async def create_user(self, data: UserCreate) -> Dict[str, Any]:
        payload = data.model_dump(by_alias=True, exclude_unset=True)

        if data.password:
            _check_password_length(data.password)
            payload["password"] = get_password_hash(data.password)
        if data.role is not None and data.role not in ROLES:
            raise ValidationError('Role must be either "admin" or "staff"', field="role")
        if data.email:
            if not EMAIL_PATTERN.match(data.email):
                raise ValidationError("Invalid email address", field="email")
            await self._ensure_email_free(data.email, strict=True)

        now = _timestamp()
        payload.update({"status": "active", "createdAt": now, "updatedAt": now})
        created = await self.directory.create_user(payload)
        logger.info(f"[Users] Created user {created.get('id')} ({created.get('email')})")
        return strip_password(created)

    async def update_user(self, user_id: str, data: UserUpdate) -> Dict[str, Any]:
        payload = data.model_dump(by_alias=True, exclude_unset=True)

        if data.password:
            _check_password_length(data.password)
            payload["password"] = get_password_hash(data.password)
        else:
            payload.pop("password", None)
        if "role" in payload and payload["role"] not in ROLES:
            raise ValidationError('Role must be either "admin" or "staff"', field="role")
        if "status" in payload and payload["status"] not in ("active", "inactive"):
            raise ValidationError('Status must be either "active" or "inactive"', field="status")

        payload["updatedAt"] = _timestamp()
        updated = await self.directory.update_user(user_id, payload)
        logger.info(f"[Users] Updated user {user_id}")
        return strip_password(updated)

    async def delete_user(self, user_id: str) -> None:
        await self.directory.delete_user(user_id)
        logger.info(f"[Users] Deleted user {user_id}")
