"""
Immutable scoring configuration: metric weights, time periods, thresholds.

Passed explicitly into the aggregator and the risk detectors so a threshold
change is a new value, not a mutated global. Defaults reproduce the
production tables.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import timedelta

from backend_gamescore.core.exceptions import ConfigError

HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
MONTH = timedelta(days=30)


@dataclass(frozen=True)
class ScoreWeights:
    """Weight of each metric in total_score; must sum to 1.0."""

    volume: float = 0.25
    account_age: float = 0.15
    level_progress: float = 0.20
    frequency: float = 0.25
    pattern: float = 0.15

    def total(self) -> float:
        return self.volume + self.account_age + self.level_progress + self.frequency + self.pattern


@dataclass(frozen=True)
class ScoringConfig:
    """
    Thresholds for metrics, risk factors, risk banding and human probability.

    Risk banding: HIGH when total_score < high_risk_below or at least
    high_risk_min_factors risk factors fired; MEDIUM when total_score <
    medium_risk_below or at least medium_risk_min_factors fired; LOW otherwise.
    human_probability = clamp(total_score - human_penalty_per_factor * factors, 0, 100).
    """

    weights: ScoreWeights = field(default_factory=ScoreWeights)

    # Volume: log10(1 + avg_amount) * multiplier
    volume_log_multiplier: float = 20.0
    # Age: score reaches 100 at this many days
    age_plateau_days: float = 180.0
    # Level progress
    max_level: int = 50
    xp_bonus_scale: float = 10_000.0
    xp_bonus_cap: float = 20.0
    # Frequency: trailing window; tx/day * multiplier (5 tx/day saturates)
    frequency_window: timedelta = MONTH
    frequency_per_day_multiplier: float = 20.0
    # Pattern
    pattern_min_transactions: int = 2
    pattern_neutral_score: float = 50.0
    pattern_variance_cap: float = 50.0

    # Risk factors (strict inequalities)
    rapid_gap: timedelta = HOUR
    rapid_ratio: float = 0.30
    circular_ratio: float = 0.10
    level_mismatch_min_level: int = 10
    level_mismatch_tx_per_level: int = 2

    # Risk banding and human probability
    high_risk_below: float = 40.0
    medium_risk_below: float = 70.0
    high_risk_min_factors: int = 2
    medium_risk_min_factors: int = 1
    human_penalty_per_factor: float = 15.0

    def __post_init__(self) -> None:
        total = self.weights.total()
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ConfigError(f"score weights must sum to 1.0, got {total}")
        if not self.high_risk_below <= self.medium_risk_below:
            raise ConfigError(
                f"high_risk_below ({self.high_risk_below}) must not exceed "
                f"medium_risk_below ({self.medium_risk_below})"
            )
        if not 1 <= self.medium_risk_min_factors <= self.high_risk_min_factors:
            raise ConfigError("risk factor cutoffs must satisfy 1 <= medium <= high")
        if self.frequency_window <= timedelta(0):
            raise ConfigError("frequency_window must be positive")
        if self.age_plateau_days <= 0 or self.max_level <= 0 or self.xp_bonus_scale <= 0:
            raise ConfigError("age_plateau_days, max_level and xp_bonus_scale must be positive")

    @property
    def frequency_window_days(self) -> float:
        return self.frequency_window / DAY


DEFAULT_SCORING_CONFIG = ScoringConfig()
