"""
Analysis engine package: activity/trust scoring for game wallets.

Turns a player profile and transaction history into component scores, a
weighted total score, a risk level and explainable risk factors. Pure
functions only; storage and scheduling live in the database and
agent_worker packages.
"""

from backend_gamescore.analysis_engine.assembler import assemble_activity_score
from backend_gamescore.analysis_engine.config import (
    DEFAULT_SCORING_CONFIG,
    ScoreWeights,
    ScoringConfig,
)
from backend_gamescore.analysis_engine.engine import calculate_activity_score
from backend_gamescore.analysis_engine.filters import (
    chronological,
    filter_wallet_transactions,
)
from backend_gamescore.analysis_engine.metrics import (
    MetricScores,
    account_age_score,
    compute_metrics,
    frequency_score,
    level_progress_score,
    pattern_score,
    volume_score,
)
from backend_gamescore.analysis_engine.models import (
    ActivityScore,
    Player,
    RiskLevel,
    Transaction,
    TransactionType,
)
from backend_gamescore.analysis_engine.risk_factors import (
    FACTOR_CIRCULAR_PATTERNS,
    FACTOR_LEVEL_MISMATCH,
    FACTOR_RAPID_TRANSACTIONS,
    RiskFactorResult,
    detect_risk_factors,
)
from backend_gamescore.analysis_engine.scorer import AggregateScore, ScoreAggregator
from backend_gamescore.analysis_engine.summary import (
    WalletTransactionSummary,
    summarize_transactions,
)

__all__ = [
    "assemble_activity_score",
    "DEFAULT_SCORING_CONFIG",
    "ScoreWeights",
    "ScoringConfig",
    "calculate_activity_score",
    "chronological",
    "filter_wallet_transactions",
    "MetricScores",
    "account_age_score",
    "compute_metrics",
    "frequency_score",
    "level_progress_score",
    "pattern_score",
    "volume_score",
    "ActivityScore",
    "Player",
    "RiskLevel",
    "Transaction",
    "TransactionType",
    "FACTOR_CIRCULAR_PATTERNS",
    "FACTOR_LEVEL_MISMATCH",
    "FACTOR_RAPID_TRANSACTIONS",
    "RiskFactorResult",
    "detect_risk_factors",
    "AggregateScore",
    "ScoreAggregator",
    "WalletTransactionSummary",
    "summarize_transactions",
]
