# Batch scoring and scheduled recompute.
# One side-effect-free unit of work per wallet; failures are isolated per wallet.

from backend_gamescore.agent_worker.batch import (
    BatchResult,
    WalletFailure,
    failure_from_exception,
    score_wallet,
    score_wallets,
)
from backend_gamescore.agent_worker.runner import (
    PeriodicRunnerConfig,
    run_periodic_worker,
    run_recompute_once,
)

__all__ = [
    "BatchResult",
    "WalletFailure",
    "failure_from_exception",
    "score_wallet",
    "score_wallets",
    "PeriodicRunnerConfig",
    "run_periodic_worker",
    "run_recompute_once",
]
