"""
Scoring engine entry point: profile + transactions -> ActivityScore.

Pure and synchronous: no I/O, no shared state. Identical (player,
transactions, now, config) always yields an identical ActivityScore,
whatever order the transactions arrive in.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from backend_gamescore.analysis_engine.assembler import assemble_activity_score
from backend_gamescore.analysis_engine.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.analysis_engine.filters import chronological, filter_wallet_transactions
from backend_gamescore.analysis_engine.metrics import compute_metrics
from backend_gamescore.analysis_engine.models import ActivityScore, Player, Transaction, to_utc
from backend_gamescore.analysis_engine.risk_factors import detect_risk_factors
from backend_gamescore.analysis_engine.scorer import ScoreAggregator
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)


def _as_player(player: Player | Mapping[str, Any]) -> Player:
    if isinstance(player, Player):
        return player
    return Player.from_mapping(player)


def _as_transactions(transactions: Iterable[Transaction | Mapping[str, Any]]) -> list[Transaction]:
    return [tx if isinstance(tx, Transaction) else Transaction.from_mapping(tx) for tx in transactions]


def calculate_activity_score(
    player: Player | Mapping[str, Any],
    transactions: Iterable[Transaction | Mapping[str, Any]],
    now: datetime | None = None,
    *,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    aggregator: ScoreAggregator | None = None,
) -> ActivityScore:
    """
    Score one wallet from its profile and a transaction set.

    The transaction set may contain other wallets' transfers; only those
    where the player's wallet is sender or receiver are used. Mappings are
    validated into Player/Transaction at this boundary.

    Args:
        player: Player record (or row mapping) for the wallet.
        transactions: Transactions to consider (records or row mappings).
        now: Reference time for age and frequency; defaults to the current UTC time.
            Pass it explicitly for reproducible results.
        config: Weights and thresholds; ignored when aggregator is given.
        aggregator: Pre-built aggregator (its config is used for every stage).

    Returns:
        ActivityScore with component scores, total_score, risk_level and risk factors.

    Raises:
        InvalidProfileError: the profile cannot be scored.
        InvalidTransactionError: a transaction row is malformed.
    """
    profile = _as_player(player)
    records = _as_transactions(transactions)
    agg = aggregator or ScoreAggregator(config)
    cfg = agg.config
    ref_now = to_utc(now) if now is not None else datetime.now(timezone.utc)

    wallet_txs = chronological(filter_wallet_transactions(profile.wallet_address, records))

    metrics = compute_metrics(profile, wallet_txs, ref_now, cfg)
    risk = detect_risk_factors(profile, wallet_txs, cfg)
    aggregate = agg.aggregate(metrics, risk.count)
    score = assemble_activity_score(profile, wallet_txs, metrics, aggregate, risk, ref_now)

    logger.debug(
        "activity_score_computed",
        wallet_id=profile.wallet_address,
        total_score=score.total_score,
        risk_level=score.risk_level.value,
        risk_factors=list(score.risk_factors),
        tx_count=score.transaction_count,
    )
    return score
