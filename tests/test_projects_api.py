import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_project(client: AsyncClient, admin_headers, admin_user):
    """Test project creation by an admin"""
    response = await client.post(
        "/api/projects",
        json={"name": "Apollo", "description": "Moonshot", "memberIds": [1, "2"]},
        headers=admin_headers
    )

    assert response.status_code == 201
    project = response.json()
    assert project["name"] == "Apollo"
    assert project["description"] == "Moonshot"
    assert project["memberIds"] == ["1", "2"]
    assert project["createdBy"] == admin_user["id"]
    assert project["id"]


@pytest.mark.asyncio
async def test_create_project_defaults(client: AsyncClient, admin_headers):
    response = await client.post("/api/projects", json={"name": "Gemini"}, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["description"] == ""
    assert response.json()["memberIds"] == []


@pytest.mark.asyncio
async def test_create_project_requires_name(client: AsyncClient, admin_headers):
    response = await client.post("/api/projects", json={"description": "Nameless"}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Project name is required"


@pytest.mark.asyncio
async def test_create_project_as_staff_forbidden(client: AsyncClient, staff_headers):
    response = await client.post("/api/projects", json={"name": "Rogue"}, headers=staff_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_malformed_body_is_400(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/projects", json={"name": "Bad", "memberIds": "not-a-list"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert "memberIds" in response.json()["message"]


@pytest.mark.asyncio
async def test_staff_can_list_and_read_projects(client: AsyncClient, admin_headers, staff_headers):
    created = (await client.post("/api/projects", json={"name": "Apollo"}, headers=admin_headers)).json()

    listed = await client.get("/api/projects", headers=staff_headers)
    fetched = await client.get(f"/api/projects/{created['id']}", headers=staff_headers)

    assert listed.status_code == 200
    assert [project["id"] for project in listed.json()] == [created["id"]]
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Apollo"


@pytest.mark.asyncio
async def test_get_unknown_project(client: AsyncClient, staff_headers):
    response = await client.get("/api/projects/missing", headers=staff_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"


@pytest.mark.asyncio
async def test_update_project(client: AsyncClient, admin_headers):
    created = (await client.post(
        "/api/projects", json={"name": "Apollo", "description": "Old"}, headers=admin_headers
    )).json()

    response = await client.put(
        f"/api/projects/{created['id']}",
        json={"name": "", "description": "New", "memberIds": [7]},
        headers=admin_headers
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Apollo"  # empty name is ignored
    assert updated["description"] == "New"
    assert updated["memberIds"] == ["7"]


@pytest.mark.asyncio
async def test_update_project_as_staff_forbidden(client: AsyncClient, admin_headers, staff_headers):
    created = (await client.post("/api/projects", json={"name": "Apollo"}, headers=admin_headers)).json()

    response = await client.put(
        f"/api/projects/{created['id']}", json={"name": "Mine"}, headers=staff_headers
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_delete_project_cascades_to_its_tasks(client: AsyncClient, admin_headers, staff_user):
    """Deleting p1 removes t1 (in p1) and keeps t2 (in p2)"""
    p1 = (await client.post("/api/projects", json={"name": "P1"}, headers=admin_headers)).json()
    p2 = (await client.post("/api/projects", json={"name": "P2"}, headers=admin_headers)).json()
    t1 = (await client.post(
        "/api/tasks", json={"title": "T1", "assigneeId": staff_user["id"], "projectId": p1["id"]},
        headers=admin_headers
    )).json()
    t2 = (await client.post(
        "/api/tasks", json={"title": "T2", "assigneeId": staff_user["id"], "projectId": p2["id"]},
        headers=admin_headers
    )).json()

    response = await client.delete(f"/api/projects/{p1['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Project deleted"

    tasks = (await client.get("/api/tasks", headers=admin_headers)).json()
    assert [task["id"] for task in tasks] == [t2["id"]]
    assert t1["id"] not in [task["id"] for task in tasks]

    projects = (await client.get("/api/projects", headers=admin_headers)).json()
    assert [project["id"] for project in projects] == [p2["id"]]


@pytest.mark.asyncio
async def test_delete_unknown_project(client: AsyncClient, admin_headers):
    response = await client.delete("/api/projects/missing", headers=admin_headers)

    assert response.status_code == 404
