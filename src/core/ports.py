"""Ports (interfaces) used by the core.

Ports define the minimal contracts for slot storage and the remote source so
that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol


class SlotStorePort(Protocol):
    """Named string slots, either durable or session scoped."""

    def get(self, name: str) -> Optional[str]:
        ...

    def set(self, name: str, value: str) -> None:
        ...

    def delete(self, name: str) -> None:
        ...


class RemoteSourcePort(Protocol):
    """Remote source returning a JSON-decoded payload."""

    async def fetch(self) -> Any:
        ...
