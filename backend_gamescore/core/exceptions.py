"""
Application-level exceptions.

Every error carries a stable ``code`` so logs, the batch worker and the CLI
can report failures per wallet without string matching on messages.
Insufficient transaction data is not an error: the metric calculators fall
back to baseline scores instead.
"""

from __future__ import annotations


class GameScoreError(Exception):
    """Base class for all Backend GameScore errors."""

    code = "GAMESCORE_ERROR"

    def __init__(self, message: str, *, wallet: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.wallet = wallet

    def to_dict(self) -> dict[str, str | None]:
        return {"code": self.code, "message": self.message, "wallet": self.wallet}


class ConfigError(GameScoreError):
    """Scoring or service configuration is inconsistent (weights, cutoffs, env)."""

    code = "CONFIG_INVALID"


class InvalidProfileError(GameScoreError):
    """Player profile cannot be scored: missing created_at, level < 1, negative counters."""

    code = "INVALID_PROFILE"


class InvalidTransactionError(GameScoreError):
    """Transaction record is malformed: unknown type, negative amount, missing endpoint."""

    code = "INVALID_TRANSACTION"


class UpstreamUnavailableError(GameScoreError):
    """The data-access collaborator could not supply the profile or transactions."""

    code = "DATA_UNAVAILABLE"


class PlayerNotFoundError(UpstreamUnavailableError):
    """No player profile is stored for the requested wallet."""

    code = "PLAYER_NOT_FOUND"


class ScoreAssemblyError(GameScoreError):
    """A value required to assemble the score record was not produced upstream."""

    code = "SCORE_ASSEMBLY_FAILED"
