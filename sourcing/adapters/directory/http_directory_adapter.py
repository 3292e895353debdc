"""HTTP directory adapter — implements DirectoryLookup over the directory RPC."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from sourcing.application.ports.directory_port import DirectoryLookup
from sourcing.config import settings
from sourcing.domain.entities.note import DirectoryUser
from sourcing.domain.errors import ExternalServiceError

logger = logging.getLogger(__name__)

LIST_USERS_PATH = "/rest/v1/rpc/get_all_users"


class HttpDirectoryAdapter(DirectoryLookup):
    """Fetches the mentionable user list, cached for ``cache_ttl`` seconds."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        cache_ttl: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.directory_api_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.directory_api_key
        self._timeout = timeout or settings.directory_timeout
        self._cache_ttl = cache_ttl
        self._transport = transport
        self._cache: list[DirectoryUser] | None = None
        self._cached_at = 0.0

    async def list_users(self) -> list[DirectoryUser]:
        if self._cache is not None and time.monotonic() - self._cached_at < self._cache_ttl:
            logger.debug("Directory cache hit (%d users)", len(self._cache))
            return self._cache

        if not self._base_url:
            raise ExternalServiceError("DIRECTORY_API_URL is not configured")

        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._base_url}{LIST_USERS_PATH}", json={}, headers=headers
                )
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPError as e:
            logger.warning("Directory request failed: %s", e)
            raise ExternalServiceError(f"Directory unavailable: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Directory returned a non-JSON response") from e

        if not isinstance(rows, list):
            raise ExternalServiceError("Directory returned an unexpected payload")

        users = [u for u in (self._parse_user(r) for r in rows) if u is not None]
        logger.info("Directory loaded %d users", len(users))
        self._cache = users
        self._cached_at = time.monotonic()
        return users

    @staticmethod
    def _parse_user(row: Any) -> DirectoryUser | None:
        """Rows without an id or a full name cannot be mentioned."""
        if not isinstance(row, dict):
            return None
        user_id = row.get("id") or row.get("user_id")
        first = (row.get("first_name") or "").strip()
        last = (row.get("last_name") or "").strip()
        if not user_id or not first or not last:
            return None
        return DirectoryUser(id=str(user_id), first_name=first, last_name=last, email=row.get("email"))
