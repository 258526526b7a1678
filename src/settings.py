"""Static configuration for quoteboard.

All user-editable settings (storage, sync, export, logging) live in a single
JSON file for quick edits without touching Python.
"""

import json
import os

from core.config import StorageConfig, SyncConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

DEFAULT_ENDPOINT = "https://jsonplaceholder.typicode.com/posts"


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _project_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Durable slots (snapshot + filter preference) live in one SQLite file.
_storage = _CONFIG.get("storage", {})
DB_PATH = _project_path(_storage.get("db_path", "quoteboard.db"))
STORAGE = StorageConfig(db_path=DB_PATH)

# Remote polling. QUOTES_ENDPOINT in the environment overrides the endpoint,
# see client.resolve_endpoint.
_sync = _CONFIG.get("sync", {})
SYNC = SyncConfig(
    enabled=bool(_sync.get("enabled", True)),
    endpoint=_sync.get("endpoint", DEFAULT_ENDPOINT),
    interval_seconds=float(_sync.get("interval_seconds", 30)),
    timeout_seconds=float(_sync.get("timeout_seconds", 10)),
    limit=int(_sync.get("limit", 10)),
)

# Exports land in a single folder as quotes.json.
_export = _CONFIG.get("export", {})
EXPORT_DIR = _project_path(_export.get("directory", "exports"))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
