"""
Pytest fixtures for GameScore tests. Uses a temporary SQLite DB for the store.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backend_gamescore.analysis_engine.models import Player, Transaction, TransactionType

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
WALLET = "0xA11CE00000000000000000000000000000000001"
OTHER = "0xB0B0000000000000000000000000000000000002"
THIRD = "0xCAFE000000000000000000000000000000000003"


def make_player(
    wallet: str = WALLET,
    *,
    age_days: float = 90,
    level: int = 5,
    experience_points: int = 1000,
    total_transactions: int = 10,
) -> Player:
    return Player(
        wallet_address=wallet,
        created_at=NOW - timedelta(days=age_days),
        level=level,
        experience_points=experience_points,
        total_transactions=total_transactions,
    )


def make_tx(
    sender: str = WALLET,
    receiver: str = OTHER,
    *,
    at: datetime | None = None,
    hours_ago: float | None = None,
    amount: str = "1",
    tx_type: TransactionType = TransactionType.TOKEN_TRANSFER,
) -> Transaction:
    if at is None:
        at = NOW - timedelta(hours=hours_ago if hours_ago is not None else 1)
    return Transaction(
        from_address=sender,
        to_address=receiver,
        amount=Decimal(amount),
        transaction_type=tx_type,
        timestamp=at,
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def player() -> Player:
    return make_player()


@pytest.fixture
def gamescore_db(tmp_path, monkeypatch):
    """
    Point the store at a temporary SQLite DB and create tables.
    Resets the engine cache so each test gets a fresh DB.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("GAMESCORE_DB_URL", raising=False)
    monkeypatch.setenv("GAMESCORE_DB_PATH", str(tmp_path / "gamescore.db"))

    from backend_gamescore.database import repository

    repository.reset_engine_for_test()
    repository.init_db()
    yield repository
    repository.reset_engine_for_test()
