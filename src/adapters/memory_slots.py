"""In-memory slot storage adapter.

Session-scoped state (the last viewed quote) lives here so it never outlives
the process.
"""

from __future__ import annotations

from typing import Optional


class MemorySlotStore:
    """Dict-backed SlotStorePort."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def delete(self, name: str) -> None:
        self._values.pop(name, None)
