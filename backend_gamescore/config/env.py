"""
Environment variable loading for GameScore.

- DATABASE_URL / GAMESCORE_DB_URL: SQLAlchemy URL (PostgreSQL in production)
- GAMESCORE_DB_PATH: SQLite file used when no URL is set (default: gamescore.db)
- BATCH_WORKERS: worker threads for batch recompute (default: 4)
- RECOMPUTE_INTERVAL_SEC: periodic runner interval (default: 300)
- MAX_WALLETS_PER_TICK: wallets scored per periodic tick (default: 5000)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_gamescore/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SQLITE_PATH = "gamescore.db"
DEFAULT_BATCH_WORKERS = 4
DEFAULT_RECOMPUTE_INTERVAL_SEC = 300.0
DEFAULT_MAX_WALLETS_PER_TICK = 5000


def load_gamescore_env() -> None:
    """Load .env from project root. Existing environment variables win. Safe to call multiple times."""
    load_dotenv(_ENV_PATH, override=False)


def get_database_url() -> str:
    """
    Return the SQLAlchemy database URL.
    Order: GAMESCORE_DB_URL > DATABASE_URL > sqlite:///<GAMESCORE_DB_PATH>.
    """
    load_gamescore_env()
    url = (os.getenv("GAMESCORE_DB_URL") or os.getenv("DATABASE_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("GAMESCORE_DB_PATH") or "").strip() or DEFAULT_SQLITE_PATH
    return f"sqlite:///{path}"


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def get_batch_workers() -> int:
    """Return BATCH_WORKERS from env, at least 1."""
    load_gamescore_env()
    return max(1, _env_int("BATCH_WORKERS", DEFAULT_BATCH_WORKERS))


def get_recompute_interval_sec() -> float:
    """Return RECOMPUTE_INTERVAL_SEC from env, at least 1 second."""
    load_gamescore_env()
    return max(1.0, _env_float("RECOMPUTE_INTERVAL_SEC", DEFAULT_RECOMPUTE_INTERVAL_SEC))


def get_max_wallets_per_tick() -> int:
    """Return MAX_WALLETS_PER_TICK from env, at least 1."""
    load_gamescore_env()
    return max(1, _env_int("MAX_WALLETS_PER_TICK", DEFAULT_MAX_WALLETS_PER_TICK))


def mask_database_url(url: str) -> str:
    """Drop credentials and query string from a database URL for logging."""
    base = url.split("?")[0]
    if "@" in base:
        scheme, _, rest = base.partition("://")
        return f"{scheme}://***@{rest.split('@', 1)[1]}"
    return base
