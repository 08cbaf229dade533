"""
Recompute activity scores from the database.

    python -m backend_gamescore.tools.recompute_scores                 # every stored wallet
    python -m backend_gamescore.tools.recompute_scores --wallet 0xabc  # selected wallets
    python -m backend_gamescore.tools.recompute_scores --dry-run       # score without persisting

Prints one JSON document with scores and per-wallet failures. Exit code 1
when any wallet failed.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from backend_gamescore.agent_worker.runner import run_recompute_once
from backend_gamescore.analysis_engine.summary import summarize_transactions
from backend_gamescore.config import get_settings
from backend_gamescore.core.exceptions import GameScoreError
from backend_gamescore.database import get_transactions_for_wallet, init_db
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recompute wallet activity scores.")
    parser.add_argument(
        "--wallet",
        action="append",
        dest="wallets",
        metavar="ADDRESS",
        help="Wallet to score (repeatable). Default: every stored player.",
    )
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: BATCH_WORKERS).")
    parser.add_argument("--limit", type=int, default=None, help="Max stored wallets to score.")
    parser.add_argument("--dry-run", action="store_true", help="Score but do not persist.")
    parser.add_argument("--summary", action="store_true", help="Include a transaction summary per wallet.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    init_db()
    try:
        result = run_recompute_once(
            args.wallets,
            max_workers=args.workers or settings.batch_workers,
            max_wallets=args.limit,
            persist=not args.dry_run,
        )
    except GameScoreError as e:
        logger.error("recompute_failed", code=e.code, error=e.message)
        print(json.dumps({"error": e.to_dict()}), file=sys.stderr)
        return 2

    out = result.to_dict()
    if args.summary:
        out["summaries"] = {
            wallet: summarize_transactions(wallet, get_transactions_for_wallet(wallet)).to_dict()
            for wallet in sorted(result.scores)
        }
    print(json.dumps(out, indent=2))
    logger.info(
        "recompute_cli_done",
        scored=len(result.scores),
        failed=len(result.failures),
        dry_run=args.dry_run,
    )
    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
