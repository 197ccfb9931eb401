"""Tests for the directory and storage HTTP clients using httpx.MockTransport."""
import json

import httpx
import pytest

from app.clients.directory import DirectoryClientError, SupabaseDirectoryClient
from app.clients.storage import StorageClient, StorageClientError

BASE_URL = "https://project.supabase.co"


def _directory(handler):
    return SupabaseDirectoryClient(
        base_url=BASE_URL,
        service_key="service-key",
        transport=httpx.MockTransport(handler),
    )


class TestDirectoryClient:
    """Test the GoTrue admin client."""

    @pytest.mark.asyncio
    async def test_create_user_sends_confirmed_signup(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "u-1", "email": "ana@x.com"})

        client = _directory(handler)
        user = await client.create_user({"email": "ana@x.com", "password": "Str0ng!pass"})
        await client.close()

        assert user["id"] == "u-1"
        assert seen["url"] == f"{BASE_URL}/auth/v1/admin/users"
        assert seen["auth"] == "Bearer service-key"
        assert seen["body"]["email_confirm"] is True

    @pytest.mark.asyncio
    async def test_list_users_passes_paging(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["page"] == "2"
            assert request.url.params["per_page"] == "50"
            return httpx.Response(200, json={"users": [{"id": "u-1"}], "aud": "authenticated"})

        client = _directory(handler)

        assert await client.list_users(page=2, per_page=50) == [{"id": "u-1"}]

    @pytest.mark.asyncio
    async def test_error_response_carries_status_and_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                422,
                json={"code": 422, "error_code": "email_exists", "msg": "already registered"},
            )

        client = _directory(handler)

        with pytest.raises(DirectoryClientError) as exc_info:
            await client.create_user({"email": "ana@x.com"})

        assert exc_info.value.status_code == 422
        assert exc_info.value.error_code == "email_exists"
        assert str(exc_info.value) == "already registered"

    @pytest.mark.asyncio
    async def test_transport_failure_has_no_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _directory(handler)

        with pytest.raises(DirectoryClientError) as exc_info:
            await client.get_user("u-1")

        assert exc_info.value.status_code is None


class TestStorageClient:
    """Test the storage upload client."""

    @pytest.mark.asyncio
    async def test_upload_upserts_object(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["upsert"] = request.headers["x-upsert"]
            seen["type"] = request.headers["Content-Type"]
            seen["body"] = request.content
            return httpx.Response(200, json={"Key": "cultour/avatars/a.png"})

        client = StorageClient(
            base_url=BASE_URL,
            service_key="service-key",
            bucket="cultour",
            transport=httpx.MockTransport(handler),
        )
        path = await client.upload("avatars/a.png", b"png-bytes", "image/png")

        assert path == "avatars/a.png"
        assert seen == {
            "path": "/storage/v1/object/cultour/avatars/a.png",
            "upsert": "true",
            "type": "image/png",
            "body": b"png-bytes",
        }

    def test_public_url(self):
        client = StorageClient(base_url=BASE_URL + "/", service_key="k", bucket="cultour")

        assert client.get_public_url("/avatars/a.png") == (
            f"{BASE_URL}/storage/v1/object/public/cultour/avatars/a.png"
        )

    @pytest.mark.asyncio
    async def test_upload_failure(self):
        client = StorageClient(
            base_url=BASE_URL,
            service_key="k",
            bucket="cultour",
            transport=httpx.MockTransport(lambda request: httpx.Response(413, text="too large")),
        )

        with pytest.raises(StorageClientError) as exc_info:
            await client.upload("avatars/a.png", b"x", "image/png")

        assert exc_info.value.status_code == 413
