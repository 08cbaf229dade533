"""
Configuration management for Backend GameScore.

Loads settings from environment variables and an optional .env file at the
project root. Scoring weights and thresholds live in
backend_gamescore.analysis_engine.config and are passed explicitly.
"""

from backend_gamescore.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
