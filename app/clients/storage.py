"""Blob storage client (Supabase Storage API)."""
import logging

import httpx

from app.config.settings import get_settings

logger = logging.getLogger(__name__)


class StorageClientError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class StorageClient:
    """Uploads objects to one bucket and resolves their public URLs."""

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        bucket: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.supabase_url).rstrip('/')
        self.service_key = service_key or settings.supabase_service_key
        self.bucket = bucket or settings.storage_bucket
        self.timeout = timeout or settings.directory_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/storage/v1",
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                },
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store ``content`` at ``path``, replacing any existing object."""
        client = await self._get_client()
        try:
            response = await client.post(
                f"/object/{self.bucket}/{path.lstrip('/')}",
                content=content,
                headers={"Content-Type": content_type, "x-upsert": "true"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Storage API error: {e.response.status_code} - {e.response.text}")
            raise StorageClientError(e.response.text, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"Storage API unreachable: {e}")
            raise StorageClientError(f"storage request failed: {e}") from e
        return path

    def get_public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path.lstrip('/')}"
