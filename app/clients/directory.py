"""Identity directory client (Supabase GoTrue admin API)."""
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from app.config.settings import get_settings

logger = logging.getLogger(__name__)


class DirectoryClientError(Exception):
    """Raised for any failed directory call.

    ``status_code`` is None when the request never produced a response.
    """

    def __init__(self, message: str, status_code: int | None = None, error_code: str | None = None):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)


class DirectoryClient(ABC):
    """Admin operations offered by the identity directory.

    Entries are returned in the directory's native JSON shape. Listing supports
    page/per_page only; there is no server-side filter or sort.
    """

    @abstractmethod
    async def create_user(self, attributes: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def update_user(self, user_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    async def delete_user(self, user_id: str) -> None:
        ...

    @abstractmethod
    async def list_users(self, page: int, per_page: int) -> list[dict[str, Any]]:
        ...

    async def close(self) -> None:
        return None


class SupabaseDirectoryClient(DirectoryClient):
    """GoTrue admin API over httpx, authenticated with the service role key."""

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.supabase_url).rstrip('/')
        self.service_key = service_key or settings.supabase_service_key
        self.timeout = timeout or settings.directory_timeout
        self._transport = transport

        if not self.service_key:
            logger.warning("Supabase service key not configured. Directory calls will fail.")

        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/auth/v1",
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = _error_body(e.response)
            logger.error(f"Directory API error: {e.response.status_code} - {e.response.text}")
            raise DirectoryClientError(
                body.get("msg") or body.get("message") or body.get("error_description") or e.response.text,
                status_code=e.response.status_code,
                error_code=body.get("error_code") or body.get("error"),
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Directory API unreachable: {e}")
            raise DirectoryClientError(f"directory request failed: {e}") from e
        return response

    async def create_user(self, attributes: dict[str, Any]) -> dict[str, Any]:
        payload = {"email_confirm": True, **attributes}
        response = await self._request("POST", "/admin/users", json=payload)
        return response.json()

    async def get_user(self, user_id: str) -> dict[str, Any]:
        response = await self._request("GET", f"/admin/users/{user_id}")
        return response.json()

    async def update_user(self, user_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        response = await self._request("PUT", f"/admin/users/{user_id}", json=attributes)
        return response.json()

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/admin/users/{user_id}")

    async def list_users(self, page: int, per_page: int) -> list[dict[str, Any]]:
        response = await self._request(
            "GET", "/admin/users", params={"page": page, "per_page": per_page}
        )
        data = response.json()
        if isinstance(data, list):
            return data
        return data.get("users", [])


def _error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
