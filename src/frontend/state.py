"""State container for the status line."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class StatusState:
    error: bool = False
    syncing: bool = False
