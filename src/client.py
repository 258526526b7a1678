"""HTTP client factory for quoteboard.

The client is created explicitly and closed by whoever owns it, so it is
obvious when connections are opened and when they end.
"""

from __future__ import annotations

import logging
import os

import httpx
from dotenv import load_dotenv

from core.config import SyncConfig

USER_AGENT = "quoteboard/0.1"


def resolve_endpoint(config: SyncConfig) -> str:
    """Return the remote endpoint, preferring QUOTES_ENDPOINT from the env."""

    load_dotenv()
    return os.getenv("QUOTES_ENDPOINT") or config.endpoint


def build_http_client(config: SyncConfig) -> httpx.AsyncClient:
    """Create an httpx client from environment variables.

    We read QUOTES_API_TOKEN via python-dotenv to keep secrets out of the repo.
    The token is optional; public endpoints work without it.
    """

    load_dotenv()

    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    token = os.getenv("QUOTES_API_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    logging.getLogger(__name__).info("Initializing HTTP client")

    return httpx.AsyncClient(headers=headers, timeout=config.timeout_seconds)
