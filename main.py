"""
Main entrypoint: periodic activity score recompute.

Creates tables if needed, then recomputes every stored wallet each
RECOMPUTE_INTERVAL_SEC until SIGINT/SIGTERM. Env: GAMESCORE_DB_URL or
DATABASE_URL (else GAMESCORE_DB_PATH), BATCH_WORKERS, MAX_WALLETS_PER_TICK,
LOG_LEVEL, LOG_FORMAT.

One-off recompute: python -m backend_gamescore.tools.recompute_scores
"""

import signal
import threading

# Configure structured logging before other imports that may log
from backend_gamescore.config import get_settings
from backend_gamescore.gamescore_logging import configure_logging, get_logger

configure_logging(get_settings())
logger = get_logger("main")


def main() -> None:
    """Run the periodic recompute loop in the main thread until a stop signal arrives."""
    from backend_gamescore.agent_worker.runner import PeriodicRunnerConfig, run_periodic_worker
    from backend_gamescore.database import init_db

    settings = get_settings()
    init_db()

    stop_event = threading.Event()

    def _stop(signum, frame):
        logger.info("main_stop_requested", signal=signum)
        stop_event.set()

    signal.signal(signal.SIGINT, _stop)
    signal.signal(signal.SIGTERM, _stop)

    config = PeriodicRunnerConfig(
        interval_sec=settings.recompute_interval_sec,
        max_wallets_per_tick=settings.max_wallets_per_tick,
        batch_workers=settings.batch_workers,
    )
    logger.info(
        "main_runner_starting",
        interval_sec=config.interval_sec,
        batch_workers=config.batch_workers,
    )
    run_periodic_worker(config, stop_event)


if __name__ == "__main__":
    main()
