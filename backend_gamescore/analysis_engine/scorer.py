"""
Activity score aggregation: weights, risk level, human probability.

Combines the five metric scores into total_score with fixed weights, then
derives risk_level and human_probability from total_score and the number of
fired risk factors. Fully explainable; thresholds come from ScoringConfig.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_gamescore.analysis_engine.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.analysis_engine.metrics import MetricScores, clamp_score
from backend_gamescore.analysis_engine.models import RiskLevel


@dataclass(frozen=True)
class AggregateScore:
    total_score: float
    risk_level: RiskLevel
    human_probability: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_score": self.total_score,
            "risk_level": self.risk_level.value,
            "human_probability": self.human_probability,
        }


class ScoreAggregator:
    """
    Weighted aggregate of metric scores.

    The config is fixed at construction so one aggregator always applies the
    same weights and cutoffs.
    """

    def __init__(self, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> None:
        self._config = config

    @property
    def config(self) -> ScoringConfig:
        return self._config

    def total_score(self, metrics: MetricScores) -> float:
        w = self._config.weights
        weighted = (
            metrics.volume * w.volume
            + metrics.account_age * w.account_age
            + metrics.level_progress * w.level_progress
            + metrics.frequency * w.frequency
            + metrics.pattern * w.pattern
        )
        return round(weighted, 2)

    def risk_level(self, total_score: float, factor_count: int) -> RiskLevel:
        cfg = self._config
        if total_score < cfg.high_risk_below or factor_count >= cfg.high_risk_min_factors:
            return RiskLevel.HIGH
        if total_score < cfg.medium_risk_below or factor_count >= cfg.medium_risk_min_factors:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def human_probability(self, total_score: float, factor_count: int) -> float:
        penalty = self._config.human_penalty_per_factor * factor_count
        return round(clamp_score(total_score - penalty), 2)

    def aggregate(self, metrics: MetricScores, factor_count: int) -> AggregateScore:
        """Compute total_score, risk_level and human_probability for one wallet."""
        total = self.total_score(metrics)
        return AggregateScore(
            total_score=total,
            risk_level=self.risk_level(total, factor_count),
            human_probability=self.human_probability(total, factor_count),
        )
