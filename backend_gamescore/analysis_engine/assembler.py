"""
Assemble the final ActivityScore from aggregate, metrics, risk factors and
bookkeeping fields derived from the wallet's transactions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from backend_gamescore.analysis_engine.metrics import MetricScores
from backend_gamescore.analysis_engine.models import ActivityScore, Player, Transaction
from backend_gamescore.analysis_engine.risk_factors import RiskFactorResult
from backend_gamescore.analysis_engine.scorer import AggregateScore
from backend_gamescore.core.exceptions import ScoreAssemblyError


def unique_counterparties(wallet: str, transactions: Sequence[Transaction]) -> int:
    """Distinct addresses the wallet sent to or received from; the wallet itself is not counted."""
    counterparties = {tx.counterparty(wallet) for tx in transactions}
    counterparties.discard(wallet)
    return len(counterparties)


def active_days(transactions: Sequence[Transaction]) -> int:
    """Distinct UTC calendar days with at least one transaction."""
    return len({tx.timestamp.date() for tx in transactions})


def assemble_activity_score(
    player: Player,
    transactions: Sequence[Transaction],
    metrics: MetricScores | None,
    aggregate: AggregateScore | None,
    risk: RiskFactorResult | None,
    now: datetime | None,
) -> ActivityScore:
    """
    Package the scoring outputs into one immutable record.

    Raises ScoreAssemblyError if any upstream value is missing; nothing is
    filled in with placeholders.
    """
    missing = [
        name
        for name, value in (("metrics", metrics), ("aggregate", aggregate), ("risk", risk), ("now", now))
        if value is None
    ]
    if missing:
        raise ScoreAssemblyError(
            f"cannot assemble activity score, missing: {', '.join(missing)}",
            wallet=player.wallet_address,
        )

    wallet = player.wallet_address
    timestamps = [tx.timestamp for tx in transactions]
    return ActivityScore(
        wallet_address=wallet,
        transaction_score=metrics.pattern,
        volume_score=metrics.volume,
        frequency_score=metrics.frequency,
        age_score=metrics.account_age,
        level_score=metrics.level_progress,
        pattern_score=metrics.pattern,
        total_score=aggregate.total_score,
        risk_level=aggregate.risk_level,
        risk_factors=risk.factors,
        human_probability=aggregate.human_probability,
        transaction_count=len(transactions),
        unique_interactions_count=unique_counterparties(wallet, transactions),
        circular_transactions_count=risk.circular_count,
        active_days=active_days(transactions),
        first_tx_date=min(timestamps) if timestamps else None,
        last_tx_date=max(timestamps) if timestamps else None,
        calculated_at=now,
    )
