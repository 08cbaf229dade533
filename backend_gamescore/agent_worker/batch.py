"""
Batch scoring: one independent unit of work per wallet on a thread pool.

Each unit loads its own snapshot (profile + transactions) and runs the pure
scorer; nothing is shared between units, so no locking is needed. A failure
for one wallet is recorded and never aborts the batch; the caller decides
whether to retry, skip or surface it.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

from backend_gamescore.analysis_engine.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.analysis_engine.engine import calculate_activity_score
from backend_gamescore.analysis_engine.models import ActivityScore, Player, Transaction
from backend_gamescore.analysis_engine.scorer import ScoreAggregator
from backend_gamescore.core.exceptions import GameScoreError
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)

SnapshotLoader = Callable[[str], tuple[Player, Sequence[Transaction]]]


@dataclass(frozen=True)
class WalletFailure:
    """Why one wallet could not be scored."""

    wallet: str
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"wallet": self.wallet, "code": self.code, "message": self.message}


@dataclass
class BatchResult:
    """Scores and failures of one batch run, keyed by wallet."""

    scores: dict[str, ActivityScore] = field(default_factory=dict)
    failures: dict[str, WalletFailure] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "scored": len(self.scores),
            "failed": len(self.failures),
            "scores": {w: s.to_dict() for w, s in sorted(self.scores.items())},
            "failures": {w: f.to_dict() for w, f in sorted(self.failures.items())},
        }


def failure_from_exception(wallet: str, exc: Exception) -> WalletFailure:
    if isinstance(exc, GameScoreError):
        return WalletFailure(wallet=wallet, code=exc.code, message=exc.message)
    return WalletFailure(wallet=wallet, code="UNEXPECTED_ERROR", message=f"{type(exc).__name__}: {exc}")


def score_wallet(
    wallet: str,
    load_snapshot: SnapshotLoader,
    now: datetime,
    aggregator: ScoreAggregator,
) -> ActivityScore:
    """Load one wallet's snapshot and score it. Exceptions propagate to the caller."""
    player, transactions = load_snapshot(wallet)
    return calculate_activity_score(player, transactions, now, aggregator=aggregator)


def score_wallets(
    wallets: Iterable[str],
    load_snapshot: SnapshotLoader,
    *,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    max_workers: int = 4,
) -> BatchResult:
    """
    Score many wallets concurrently.

    Args:
        wallets: Wallet addresses; duplicates are scored once.
        load_snapshot: Returns (Player, transactions) for a wallet; may raise
            UpstreamUnavailableError or any other exception.
        now: One reference time shared by every wallet in the batch.
        config: Scoring config applied to every wallet.
        max_workers: Thread pool size.

    Returns:
        BatchResult with a score or a failure for every distinct wallet.
    """
    unique = list(dict.fromkeys(w.strip() for w in wallets if w and w.strip()))
    ref_now = now or datetime.now(timezone.utc)
    aggregator = ScoreAggregator(config)
    result = BatchResult()
    if not unique:
        return result

    with ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="gamescore") as pool:
        futures = {
            pool.submit(score_wallet, wallet, load_snapshot, ref_now, aggregator): wallet
            for wallet in unique
        }
        for future in as_completed(futures):
            wallet = futures[future]
            try:
                result.scores[wallet] = future.result()
            except Exception as e:
                failure = failure_from_exception(wallet, e)
                result.failures[wallet] = failure
                logger.warning(
                    "batch_wallet_failed",
                    wallet_id=wallet,
                    code=failure.code,
                    error=failure.message,
                )

    logger.info(
        "batch_scoring_done",
        wallets=len(unique),
        scored=len(result.scores),
        failed=len(result.failures),
    )
    return result
