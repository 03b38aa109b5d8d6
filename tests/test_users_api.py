import pytest
from httpx import AsyncClient

from staffhub.core.security import password_matches


class TestUserAdministration:
    """Admin CRUD proxied to the user directory"""

    @pytest.mark.asyncio
    async def test_list_users_as_admin(self, client: AsyncClient, admin_headers, staff_user):
        response = await client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        users = response.json()
        assert len(users) == 2
        assert all("password" not in user for user in users)

    @pytest.mark.asyncio
    async def test_list_users_as_staff_forbidden(self, client: AsyncClient, staff_headers):
        response = await client.get("/api/users", headers=staff_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"

    @pytest.mark.asyncio
    async def test_get_user_as_staff(self, client: AsyncClient, staff_headers, other_staff_user):
        response = await client.get(f"/api/users/{other_staff_user['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["email"] == other_staff_user["email"]
        assert "password" not in response.json()

    @pytest.mark.asyncio
    async def test_get_unknown_user(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/users/999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_get_user_with_reserved_character_id(self, client: AsyncClient, admin_headers, staff_user):
        response = await client.get("/api/users/%3F", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    @pytest.mark.asyncio
    async def test_create_user_hashes_password(self, client: AsyncClient, admin_headers, mock_user_api):
        response = await client.post(
            "/api/users",
            json={
                "fullName": "New Hire",
                "email": "new.hire@example.com",
                "password": "welcome1",
                "position": "Analyst",
                "role": "staff",
                "status": "inactive",
            },
            headers=admin_headers
        )

        assert response.status_code == 201
        created = response.json()
        assert created["status"] == "active"
        assert "password" not in created

        stored = mock_user_api.users[created["id"]]
        assert stored["password"] != "welcome1"
        assert password_matches("welcome1", stored["password"])

    @pytest.mark.asyncio
    async def test_create_user_duplicate_email(self, client: AsyncClient, admin_headers, staff_user):
        response = await client.post(
            "/api/users",
            json={"fullName": "Copy", "email": staff_user["email"], "password": "welcome1", "role": "staff"},
            headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Email already exists"

    @pytest.mark.asyncio
    async def test_create_user_short_password(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/users",
            json={"fullName": "Short", "email": "short@example.com", "password": "123"},
            headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_user(self, client: AsyncClient, admin_headers, staff_user, mock_user_api):
        response = await client.put(
            f"/api/users/{staff_user['id']}",
            json={"status": "inactive", "position": "Senior Engineer"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["status"] == "inactive"
        assert mock_user_api.users[staff_user["id"]]["position"] == "Senior Engineer"
        # Password untouched when not supplied
        assert mock_user_api.users[staff_user["id"]]["password"] == "password123"

    @pytest.mark.asyncio
    async def test_update_user_rehashes_password(self, client: AsyncClient, admin_headers, staff_user, mock_user_api):
        response = await client.put(
            f"/api/users/{staff_user['id']}",
            json={"password": "rotated-pass"},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert password_matches("rotated-pass", mock_user_api.users[staff_user["id"]]["password"])
        assert mock_user_api.users[staff_user["id"]]["password"] != "rotated-pass"

    @pytest.mark.asyncio
    async def test_update_user_invalid_role(self, client: AsyncClient, admin_headers, staff_user):
        response = await client.put(
            f"/api/users/{staff_user['id']}",
            json={"role": "owner"},
            headers=admin_headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_user(self, client: AsyncClient, admin_headers, staff_user, mock_user_api):
        response = await client.delete(f"/api/users/{staff_user['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "User deleted successfully"
        assert staff_user["id"] not in mock_user_api.users

    @pytest.mark.asyncio
    async def test_delete_user_as_staff_forbidden(self, client: AsyncClient, staff_headers, other_staff_user):
        response = await client.delete(f"/api/users/{other_staff_user['id']}", headers=staff_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_directory_outage_surfaces_as_500(self, client: AsyncClient, admin_headers, mock_user_api):
        mock_user_api.fail_listing = True

        response = await client.get("/api/users", headers=admin_headers)

        assert response.status_code == 500
        assert "message" in response.json()


class TestChangePassword:
    """Self-service password change"""

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, staff_headers, staff_user, mock_user_api):
        response = await client.put(
            "/api/users/change-password",
            json={"currentPassword": "password123", "newPassword": "brand-new-pass"},
            headers=staff_headers
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Password changed successfully"}
        assert password_matches("brand-new-pass", mock_user_api.users[staff_user["id"]]["password"])

    @pytest.mark.asyncio
    async def test_change_password_wrong_current(self, client: AsyncClient, staff_headers):
        response = await client.put(
            "/api/users/change-password",
            json={"currentPassword": "nope-nope", "newPassword": "brand-new-pass"},
            headers=staff_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"

    @pytest.mark.asyncio
    async def test_change_password_too_short(self, client: AsyncClient, staff_headers):
        response = await client.put(
            "/api/users/change-password",
            json={"currentPassword": "password123", "newPassword": "abc"},
            headers=staff_headers
        )

        assert response.status_code == 400
