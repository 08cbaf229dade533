"""
Database layer for players, transactions and the latest activity score per wallet.

SQLAlchemy engine from GAMESCORE_DB_URL / DATABASE_URL, SQLite fallback.
This is the data-access collaborator the scoring engine is fed from; the
engine itself never touches it.
"""

from backend_gamescore.database.models import (
    ActivityScoreRow,
    Base,
    PlayerRow,
    TransactionRow,
)
from backend_gamescore.database.repository import (
    add_player,
    add_transactions,
    get_activity_score,
    get_player,
    get_transactions_for_wallet,
    init_db,
    list_activity_scores,
    list_wallet_addresses,
    load_wallet_snapshot,
    reset_engine_for_test,
    upsert_activity_score,
)

__all__ = [
    "ActivityScoreRow",
    "Base",
    "PlayerRow",
    "TransactionRow",
    "add_player",
    "add_transactions",
    "get_activity_score",
    "get_player",
    "get_transactions_for_wallet",
    "init_db",
    "list_activity_scores",
    "list_wallet_addresses",
    "load_wallet_snapshot",
    "reset_engine_for_test",
    "upsert_activity_score",
]
