"""
Application settings.

Responsibilities:
- Read configuration from environment variables and the project .env file.
- Provide defaults for optional settings.
- Expose one typed, immutable settings object for the store, batch worker and CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from backend_gamescore.config.env import (
    get_batch_workers,
    get_database_url,
    get_max_wallets_per_tick,
    get_recompute_interval_sec,
    load_gamescore_env,
)


@dataclass(frozen=True)
class Settings:
    """Service settings resolved from the environment."""

    database_url: str
    log_level: str = "INFO"
    log_format: str = "json"
    batch_workers: int = 4
    recompute_interval_sec: float = 300.0
    max_wallets_per_tick: int = 5000


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    load_gamescore_env()
    return Settings(
        database_url=get_database_url(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        log_format=(os.getenv("LOG_FORMAT") or "json").strip().lower(),
        batch_workers=get_batch_workers(),
        recompute_interval_sec=get_recompute_interval_sec(),
        max_wallets_per_tick=get_max_wallets_per_tick(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings.

    Cached after the first call; tests that change the environment call
    get_settings.cache_clear().
    """
    return load_settings()
