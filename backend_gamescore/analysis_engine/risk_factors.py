"""
Rule-based risk factors for bot/sybil behavior.

Three independent heuristics over a wallet's transactions and profile:
rapid successive transactions, circular transfer pairs, and a level that is
high relative to the transaction count. Each fired rule appends a fixed,
human-readable description; the order of checks is fixed. Risk factors feed
risk_level and human_probability, never total_score directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from backend_gamescore.analysis_engine.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.analysis_engine.filters import chronological
from backend_gamescore.analysis_engine.models import Player, Transaction
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)

FACTOR_RAPID_TRANSACTIONS = "Unusual number of rapid transactions detected"
FACTOR_CIRCULAR_PATTERNS = "Circular transaction patterns detected"
FACTOR_LEVEL_MISMATCH = "Unusual level progression relative to transaction count"


@dataclass(frozen=True)
class RiskFactorResult:
    """Fired risk factors plus the counts behind them, for the score record."""

    factors: tuple[str, ...]
    rapid_count: int
    circular_count: int

    @property
    def count(self) -> int:
        return len(self.factors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "factors": list(self.factors),
            "rapid_count": self.rapid_count,
            "circular_count": self.circular_count,
        }


def count_rapid_transactions(
    ordered: Sequence[Transaction],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> int:
    """Count adjacent pairs (chronological order) closer together than config.rapid_gap."""
    return sum(
        1
        for prev, cur in zip(ordered, ordered[1:])
        if cur.timestamp - prev.timestamp < config.rapid_gap
    )


def count_circular_transactions(ordered: Sequence[Transaction]) -> int:
    """Count transactions whose reverse (to, from) pair was already seen earlier in the sequence."""
    seen: set[tuple[str, str]] = set()
    circular = 0
    for tx in ordered:
        if (tx.to_address, tx.from_address) in seen:
            circular += 1
        seen.add((tx.from_address, tx.to_address))
    return circular


def has_level_mismatch(player: Player, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> bool:
    return (
        player.level > config.level_mismatch_min_level
        and player.total_transactions < player.level * config.level_mismatch_tx_per_level
    )


def detect_risk_factors(
    player: Player,
    transactions: Sequence[Transaction],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> RiskFactorResult:
    """
    Evaluate all risk rules for one wallet.

    Transactions are sorted chronologically first, so the result does not
    depend on input order. A wallet with no transactions gets no factors:
    none of the rules is evaluated without activity to compare against.

    Args:
        player: Profile of the wallet being scored.
        transactions: The wallet's transactions (already filtered to the wallet).
        config: Ratios and gaps for the rules.

    Returns:
        RiskFactorResult with factor descriptions in rule order.
    """
    if not transactions:
        return RiskFactorResult(factors=(), rapid_count=0, circular_count=0)

    ordered = chronological(transactions)
    total = len(ordered)
    factors: list[str] = []

    rapid = count_rapid_transactions(ordered, config)
    if rapid > total * config.rapid_ratio:
        factors.append(FACTOR_RAPID_TRANSACTIONS)

    circular = count_circular_transactions(ordered)
    if circular > total * config.circular_ratio:
        factors.append(FACTOR_CIRCULAR_PATTERNS)

    if has_level_mismatch(player, config):
        factors.append(FACTOR_LEVEL_MISMATCH)

    if factors:
        logger.debug(
            "risk_factors_detected",
            wallet_id=player.wallet_address,
            factors=factors,
            rapid_count=rapid,
            circular_count=circular,
            tx_count=total,
        )
    return RiskFactorResult(factors=tuple(factors), rapid_count=rapid, circular_count=circular)
