"""
Unit Tests for Account Service
Tests for: registration rules, authentication, admin user management
"""
import pytest
from unittest.mock import AsyncMock

from staffhub.core.exceptions import AuthenticationError, UpstreamError, ValidationError
from staffhub.core.security import password_matches
from staffhub.schemas.auth import Identity, ProfileUpdate, UserRegister
from staffhub.schemas.user import UserCreate, UserUpdate
from staffhub.services.account_service import AccountService

from mocks.factories import make_user_data


@pytest.fixture
def accounts(directory) -> AccountService:
    return AccountService(directory)


class TestRegister:

    @pytest.mark.asyncio
    async def test_register_lowercases_email_and_hashes_password(self, accounts, mock_user_api):
        data = make_user_data()
        data["email"] = "New.Person@Example.com"

        created = await accounts.register(UserRegister(**data))

        stored = mock_user_api.users[created["id"]]
        assert stored["email"] == "new.person@example.com"
        assert stored["status"] == "active"
        assert stored["avatar"].startswith("avatar_")
        assert password_matches(data["password"], stored["password"])
        assert stored["password"] != data["password"]

    @pytest.mark.asyncio
    async def test_register_rejects_bad_email(self, accounts):
        data = make_user_data()
        data["email"] = "not-an-email"

        with pytest.raises(ValidationError):
            await accounts.register(UserRegister(**data))

    @pytest.mark.asyncio
    async def test_register_does_not_call_create_on_duplicate(self, accounts, staff_user):
        accounts.directory.create_user = AsyncMock()
        data = make_user_data()
        data["email"] = staff_user["email"]

        with pytest.raises(ValidationError):
            await accounts.register(UserRegister(**data))

        accounts.directory.create_user.assert_not_called()


class TestAuthenticate:

    @pytest.mark.asyncio
    async def test_authenticate_returns_record(self, accounts, staff_user):
        user = await accounts.authenticate(staff_user["email"], "password123")

        assert user["id"] == staff_user["id"]

    @pytest.mark.asyncio
    async def test_inactive_checked_after_password(self, accounts, mock_user_api):
        user = mock_user_api.add_user(status="inactive")

        with pytest.raises(AuthenticationError) as exc_info:
            await accounts.authenticate(user["email"], "wrong-password")
        assert exc_info.value.message == "Invalid credentials"

        with pytest.raises(AuthenticationError) as exc_info:
            await accounts.authenticate(user["email"], "password123")
        assert "inactive" in exc_info.value.message


class TestAdministration:

    @pytest.mark.asyncio
    async def test_create_user_strict_duplicate_check(self, accounts, mock_user_api):
        """Admin creation refuses to proceed when the listing fails"""
        mock_user_api.fail_listing = True

        with pytest.raises(UpstreamError):
            await accounts.create_user(UserCreate(email="x@example.com", password="secret1"))

    @pytest.mark.asyncio
    async def test_create_user_forwards_extra_fields(self, accounts, mock_user_api):
        created = await accounts.create_user(
            UserCreate.model_validate({"fullName": "Extra", "department": "Ops"})
        )

        assert mock_user_api.users[created["id"]]["department"] == "Ops"
        assert created["status"] == "active"

    @pytest.mark.asyncio
    async def test_update_user_invalid_status(self, accounts, staff_user):
        with pytest.raises(ValidationError):
            await accounts.update_user(staff_user["id"], UserUpdate(status="retired"))

    @pytest.mark.asyncio
    async def test_update_profile_only_sends_given_fields(self, accounts, mock_user_api, staff_user):
        identity = Identity(id=staff_user["id"], role="staff")

        await accounts.update_profile(identity, ProfileUpdate(avatar="me.png"))

        stored = mock_user_api.users[staff_user["id"]]
        assert stored["avatar"] == "me.png"
        assert stored["fullName"] == staff_user["fullName"]
        assert "updatedAt" in stored

    @pytest.mark.asyncio
    async def test_update_profile_rejects_blank_name(self, accounts, staff_user):
        identity = Identity(id=staff_user["id"], role="staff")

        with pytest.raises(ValidationError):
            await accounts.update_profile(identity, ProfileUpdate(full_name="  "))
