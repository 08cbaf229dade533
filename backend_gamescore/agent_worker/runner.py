"""
Recompute runner: score stored wallets and persist the results.

- run_recompute_once(): one sweep over stored (or given) wallets, upserting every score.
- run_periodic_worker(): repeat the sweep every interval_sec until stop_event is set.
  Crashes in a single tick are caught and logged; the loop continues.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from backend_gamescore.agent_worker.batch import BatchResult, failure_from_exception, score_wallets
from backend_gamescore.analysis_engine.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_gamescore.config.env import (
    DEFAULT_BATCH_WORKERS,
    DEFAULT_MAX_WALLETS_PER_TICK,
    DEFAULT_RECOMPUTE_INTERVAL_SEC,
)
from backend_gamescore.database import repository
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)


@dataclass
class PeriodicRunnerConfig:
    """Config for the periodic recompute runner (DB -> score -> DB)."""

    interval_sec: float = DEFAULT_RECOMPUTE_INTERVAL_SEC
    max_wallets_per_tick: int = DEFAULT_MAX_WALLETS_PER_TICK
    batch_workers: int = DEFAULT_BATCH_WORKERS
    scoring_config: ScoringConfig = DEFAULT_SCORING_CONFIG


def run_recompute_once(
    wallets: Sequence[str] | None = None,
    *,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    max_workers: int = DEFAULT_BATCH_WORKERS,
    max_wallets: int | None = None,
    persist: bool = True,
) -> BatchResult:
    """
    Score wallets from the store and upsert each successful score.

    wallets defaults to every stored player (up to max_wallets). A failed
    upsert is recorded as that wallet's failure; the remaining wallets are
    still persisted.
    """
    targets = list(wallets) if wallets is not None else repository.list_wallet_addresses(limit=max_wallets)
    result = score_wallets(
        targets,
        repository.load_wallet_snapshot,
        now=now,
        config=config,
        max_workers=max_workers,
    )
    if not persist:
        return result

    for wallet, score in list(result.scores.items()):
        try:
            repository.upsert_activity_score(score)
        except Exception as e:
            del result.scores[wallet]
            result.failures[wallet] = failure_from_exception(wallet, e)
            logger.warning("recompute_persist_failed", wallet_id=wallet, error=str(e))
    return result


def run_periodic_worker(
    config: PeriodicRunnerConfig,
    stop_event: threading.Event,
) -> int:
    """
    Recompute every stored wallet each interval_sec until stop_event is set.
    Intended to run in a background thread or as the main loop of main.py.
    A failed tick is logged and the loop carries on. Returns the number of ticks run.
    """
    interval = max(1.0, config.interval_sec)
    logger.info(
        "periodic_runner_started",
        interval_sec=interval,
        max_wallets_per_tick=config.max_wallets_per_tick,
        batch_workers=config.batch_workers,
    )
    tick_count = 0
    while not stop_event.is_set():
        tick_start = time.monotonic()
        tick_count += 1
        try:
            result = run_recompute_once(
                config=config.scoring_config,
                max_workers=config.batch_workers,
                max_wallets=config.max_wallets_per_tick,
            )
            logger.info(
                "periodic_tick_done",
                tick=tick_count,
                scored=len(result.scores),
                errors=len(result.failures),
            )
        except Exception as e:
            logger.exception("periodic_tick_failed", tick=tick_count, error=str(e))
        # Sleep until next tick; wake periodically to check stop_event
        deadline = tick_start + interval
        while not stop_event.is_set() and time.monotonic() < deadline:
            stop_event.wait(timeout=min(1.0, max(0, deadline - time.monotonic())))
    logger.info("periodic_runner_stopped", tick_count=tick_count)
    return tick_count
