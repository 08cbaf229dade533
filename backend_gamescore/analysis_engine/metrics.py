"""
Metric calculators: five independent, stateless scores in [0, 100].

Each calculator takes only what it needs (the wallet's filtered transactions,
profile fields, the reference time) and falls back to a baseline score when
there is not enough data: volume 0, frequency 0, pattern 50.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Sequence

from backend_gamescore.analysis_engine.config import DAY, DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.analysis_engine.models import Player, Transaction

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, value))


@dataclass(frozen=True)
class MetricScores:
    """The five component scores that feed total_score."""

    volume: float
    account_age: float
    level_progress: float
    frequency: float
    pattern: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "volume_score": self.volume,
            "account_age_score": self.account_age,
            "level_progress_score": self.level_progress,
            "frequency_score": self.frequency,
            "pattern_score": self.pattern,
        }


def volume_score(
    transactions: Sequence[Transaction],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Logarithmic score of the average transfer amount; 0 when there are no transactions."""
    if not transactions:
        return 0.0
    total = math.fsum(float(tx.amount) for tx in transactions)
    average = total / len(transactions)
    return clamp_score(math.log10(1 + average) * config.volume_log_multiplier)


def account_age_score(
    created_at: datetime,
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Linear in account age, plateauing at config.age_plateau_days."""
    age_days = (now - created_at) / DAY
    return clamp_score((age_days / config.age_plateau_days) * 100)


def level_progress_score(
    level: int,
    experience_points: int,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Level against the assumed max level, plus a capped experience bonus."""
    base = (level / config.max_level) * 100
    bonus = min(config.xp_bonus_cap, (experience_points / config.xp_bonus_scale) * config.xp_bonus_cap)
    return clamp_score(base + bonus)


def frequency_score(
    transactions: Sequence[Transaction],
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Transactions per day over the trailing window; 5/day saturates with defaults."""
    if not transactions:
        return 0.0
    window_start = now - config.frequency_window
    recent = sum(1 for tx in transactions if tx.timestamp > window_start)
    per_day = recent / config.frequency_window_days
    return clamp_score(per_day * config.frequency_per_day_multiplier)


def pattern_score(
    transactions: Sequence[Transaction],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """
    Reward natural irregularity in transaction timing.

    50 + min(50, coefficient_of_variation * 100) over successive gaps. Below
    pattern_min_transactions, or when every transaction shares one timestamp
    (mean gap 0), returns the neutral score. Perfectly regular timing scores
    50, never lower.
    """
    neutral = config.pattern_neutral_score
    if len(transactions) < config.pattern_min_transactions:
        return neutral
    timestamps = sorted(tx.timestamp.timestamp() for tx in transactions)
    intervals = [b - a for a, b in zip(timestamps, timestamps[1:])]
    mean = statistics.fmean(intervals)
    if mean <= 0:
        return neutral
    stddev = statistics.pstdev(intervals)
    variance = min(config.pattern_variance_cap, (stddev / mean) * 100)
    return clamp_score(neutral + variance)


def compute_metrics(
    player: Player,
    transactions: Sequence[Transaction],
    now: datetime,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> MetricScores:
    """Run all five calculators over a wallet's already-filtered transactions."""
    return MetricScores(
        volume=volume_score(transactions, config),
        account_age=account_age_score(player.created_at, now, config),
        level_progress=level_progress_score(player.level, player.experience_points, config),
        frequency=frequency_score(transactions, now, config),
        pattern=pattern_score(transactions, config),
    )
