"""HTTP-level tests through the ASGI app with in-memory backends."""
import uuid

import httpx
import pytest
import pytest_asyncio

from app.db.database import get_db
from app.main import create_app


@pytest_asyncio.fixture
async def client(session_maker, directory, storage):
    app = create_app()

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.directory_client = directory
    app.state.storage_client = storage

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _seed_badges(client):
    response = await client.post("/badges/bulk", json=[
        {"name": "Penjelajah", "description": "Created a profile"},
        {"name": "Warlok", "description": "Verified local resident"},
    ])
    assert response.status_code == 201
    return response.json()["data"]


class TestBadgesApi:
    """Test listing parameters end to end."""

    @pytest.mark.asyncio
    async def test_list_with_paging_and_sort(self, client):
        await _seed_badges(client)

        response = await client.get("/badges", params={"sort_by": "name", "sort_order": "asc", "per_page": 1})

        assert response.status_code == 200
        body = response.json()
        assert [b["name"] for b in body["data"]] == ["Penjelajah"]
        assert body["pagination"] == {
            "total": 2,
            "page": 1,
            "per_page": 1,
            "total_pages": 2,
            "has_next_page": True,
        }

    @pytest.mark.asyncio
    async def test_filter_parameter(self, client):
        await _seed_badges(client)

        response = await client.get("/badges", params={"filter": "name:like:war"})

        assert [b["name"] for b in response.json()["data"]] == ["Warlok"]

    @pytest.mark.asyncio
    async def test_invalid_sort_order(self, client):
        response = await client.get("/badges", params={"sort_order": "sideways"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "VAL_LIST_OPTIONS_001"

    @pytest.mark.asyncio
    async def test_bulk_create_reports_every_invalid_element(self, client):
        response = await client.post("/badges/bulk", json=[{"name": "Ok"}, {"name": ""}, {"name": ""}])

        assert response.status_code == 400
        fields = [e["field"] for e in response.json()["errors"][0]["details"]["errors"]]
        assert fields == ["[1].name", "[2].name"]

    @pytest.mark.asyncio
    async def test_duplicate_badge_name(self, client):
        await _seed_badges(client)

        response = await client.post("/badges", json={"name": "Warlok"})

        assert response.status_code == 409


class TestProfilesApi:
    """Test the profile workflow over HTTP."""

    @pytest.mark.asyncio
    async def test_profile_creation_awards_explorer_badge(self, client):
        await _seed_badges(client)
        user = (await client.post("/users", json={"email": "Ana@X.com", "password": "Str0ng!pass"})).json()["data"]
        assert user["email"] == "ana@x.com"
        assert user["role"] == "authenticated"

        response = await client.post("/profiles", json={"user_id": user["id"], "fullname": "Ana"})
        assert response.status_code == 201

        grants = (await client.get(f"/user-badges/user/{user['id']}")).json()["data"]
        assert [g["badge"]["name"] for g in grants] == ["Penjelajah"]

        duplicate = await client.post("/profiles", json={"user_id": user["id"], "fullname": "Ana"})
        assert duplicate.status_code == 409

    @pytest.mark.asyncio
    async def test_profile_for_unknown_user(self, client):
        response = await client.post("/profiles", json={"user_id": str(uuid.uuid4()), "fullname": "Ghost"})

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "NF_USER_001"

    @pytest.mark.asyncio
    async def test_avatar_upload(self, client, storage):
        user = (await client.post("/users", json={"email": "ana@x.com", "password": "Str0ng!pass"})).json()["data"]
        profile = (await client.post("/profiles", json={"user_id": user["id"], "fullname": "Ana"})).json()["data"]

        response = await client.post(
            f"/profiles/{profile['id']}/avatar",
            files={"file": ("me.png", b"\x89PNG", "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["avatar_url"].startswith("https://cdn.example/avatars/")
        assert len(storage.uploads) == 1

    @pytest.mark.asyncio
    async def test_invalid_user_payload(self, client):
        response = await client.post("/users", json={"email": "nope", "password": "weak"})

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"][0]["details"]["errors"]}
        assert fields == {"email", "password"}


class TestPlumbing:
    """Test request IDs and health."""

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health/liveness", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
