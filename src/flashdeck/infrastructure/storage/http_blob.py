"""
HTTP Blob Gateway: Infrastructure adapter for a remote key-value blob store.

Each key maps to ``<base_url>/<key>``: HEAD checks existence, GET loads,
PUT saves. Requests carry the key-file credentials as HTTP basic auth and the
region as a header.
"""

import logging

import httpx

from flashdeck.domain.constants import REQUEST_TIMEOUT
from flashdeck.domain.errors import BlobNotFoundError, StorageError
from flashdeck.domain.ports import PersistenceGateway
from flashdeck.infrastructure.credentials import BlobCredentials

logger = logging.getLogger(__name__)


class HttpBlobGateway(PersistenceGateway):
    """Adapter for a blob store reachable over HTTP."""

    def __init__(
        self,
        base_url: str,
        credentials: BlobCredentials,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=REQUEST_TIMEOUT)
        return self._client

    def _url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    async def _send(self, method: str, key: str, content: str | None = None) -> httpx.Response:
        try:
            return await self._get_client().request(
                method,
                self._url(key),
                content=content.encode("utf-8") if content is not None else None,
                auth=(self.credentials.access_key, self.credentials.secret_key),
                headers={"X-Region": self.credentials.region},
            )
        except httpx.HTTPError as e:
            raise StorageError(f"{method} {key} failed: {e}") from e

    async def exists(self, key: str) -> bool:
        resp = await self._send("HEAD", key)
        if resp.status_code == 404:
            return False
        if resp.is_success:
            return True
        raise StorageError(f"HEAD {key} returned HTTP {resp.status_code}")

    async def load(self, key: str) -> str:
        resp = await self._send("GET", key)
        if resp.status_code == 404:
            raise BlobNotFoundError(key)
        if not resp.is_success:
            raise StorageError(f"GET {key} returned HTTP {resp.status_code}")
        return resp.text

    async def save(self, key: str, data: str) -> None:
        resp = await self._send("PUT", key, content=data)
        if not resp.is_success:
            raise StorageError(f"PUT {key} returned HTTP {resp.status_code}")
        logger.debug(f"Uploaded {len(data)} bytes to {self._url(key)}")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
