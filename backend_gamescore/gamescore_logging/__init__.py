"""
Structured logging for Backend GameScore.

Use get_logger(__name__) in every module; processes that need a different
level, format or stream call configure_logging() first.
"""

from backend_gamescore.gamescore_logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
