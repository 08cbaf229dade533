"""Shared core: domain exceptions used across the engine, store and worker."""

from backend_gamescore.core.exceptions import (
    ConfigError,
    GameScoreError,
    InvalidProfileError,
    InvalidTransactionError,
    PlayerNotFoundError,
    ScoreAssemblyError,
    UpstreamUnavailableError,
)

__all__ = [
    "ConfigError",
    "GameScoreError",
    "InvalidProfileError",
    "InvalidTransactionError",
    "PlayerNotFoundError",
    "ScoreAssemblyError",
    "UpstreamUnavailableError",
]
