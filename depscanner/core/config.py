"""Runtime settings read from ``DEPSCANNER_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_BACKEND_URL = "http://localhost:8000/api/deprecation-scanner"


@dataclass(frozen=True)
class Settings:
    backend_url: str = DEFAULT_BACKEND_URL
    api_token: str | None = None
    request_timeout: float = 10.0  # validate / repo-info / statistics only
    stats_interval: float = 300.0
    export_dir: str = "."


def _env_float(key: str, default: float) -> float:
    return float(os.environ.get(key, default))


def load_settings() -> Settings:
    """Build :class:`Settings` from the environment, falling back to defaults."""
    return Settings(
        backend_url=os.environ.get("DEPSCANNER_BACKEND_URL", DEFAULT_BACKEND_URL).rstrip("/"),
        api_token=os.environ.get("DEPSCANNER_API_TOKEN") or None,
        request_timeout=_env_float("DEPSCANNER_REQUEST_TIMEOUT", 10.0),
        stats_interval=_env_float("DEPSCANNER_STATS_INTERVAL", 300.0),
        export_dir=os.environ.get("DEPSCANNER_EXPORT_DIR", "."),
    )
