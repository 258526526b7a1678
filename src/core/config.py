"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageConfig:
    """Where the durable slots live."""

    db_path: str


@dataclass(frozen=True)
class SyncConfig:
    """Remote polling settings for the reconciler."""

    enabled: bool
    endpoint: str
    interval_seconds: float
    timeout_seconds: float
    limit: int
