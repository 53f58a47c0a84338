from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ServiceConfig:
    """Settings for the HTTP adapter and feed ranking, not the scoring math."""

    neighborhood_cache_enabled: bool = _env_bool("NEIGHBORHOOD_CACHE_ENABLED", True)
    neighborhood_cache_ttl: float = float(os.getenv("NEIGHBORHOOD_CACHE_TTL", "300"))
    default_feed_limit: int = int(os.getenv("DEFAULT_FEED_LIMIT", "50"))


DEFAULT_SERVICE_CONFIG = ServiceConfig()
