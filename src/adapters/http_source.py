"""HTTP remote source adapter.

Fetches the remote payload with httpx and keeps transport details out of the
reconciler.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from core.errors import DecodeError, TransportError

LOGGER = logging.getLogger(__name__)


class HttpQuoteSource:
    """RemoteSourcePort backed by an httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient, endpoint: str, limit: Optional[int] = None) -> None:
        self._client = client
        self._endpoint = endpoint
        self._limit = limit

    async def fetch(self) -> Any:
        """GET the endpoint and return the decoded JSON payload."""

        try:
            response = await self._client.get(self._endpoint)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"remote payload is not JSON: {exc}") from exc

        # The demo endpoint returns a long list, so only the head is merged.
        if self._limit and isinstance(payload, list):
            payload = payload[: self._limit]
        LOGGER.debug("Fetched payload from %s", self._endpoint)
        return payload
