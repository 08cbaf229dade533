"""
Tests for the SQLAlchemy store: seeding, snapshot reads and score upserts.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from backend_gamescore.analysis_engine import RiskLevel, TransactionType, calculate_activity_score
from backend_gamescore.core.exceptions import PlayerNotFoundError, UpstreamUnavailableError
from conftest import NOW, OTHER, THIRD, WALLET, make_player, make_tx


def test_player_round_trip(gamescore_db):
    """Stored player comes back as a UTC-aware Player."""
    player = make_player(level=12, experience_points=4321, total_transactions=40)
    assert gamescore_db.add_player(player) is True
    loaded = gamescore_db.get_player(WALLET)
    assert loaded == player
    assert loaded.created_at.utcoffset() == timedelta(0)


def test_duplicate_player_is_not_inserted(gamescore_db):
    assert gamescore_db.add_player(make_player()) is True
    assert gamescore_db.add_player(make_player(level=9)) is False
    assert gamescore_db.get_player(WALLET).level == 5


def test_missing_player_raises(gamescore_db):
    with pytest.raises(PlayerNotFoundError) as exc:
        gamescore_db.get_player("0xnobody")
    assert exc.value.code == "PLAYER_NOT_FOUND"
    assert exc.value.wallet == "0xnobody"


def test_transactions_for_wallet(gamescore_db):
    """Only transactions touching the wallet, oldest first, amounts exact."""
    inserted = gamescore_db.add_transactions(
        [
            make_tx(OTHER, WALLET, hours_ago=1, amount="0.000001", tx_type=TransactionType.REWARD_CLAIM),
            make_tx(WALLET, OTHER, hours_ago=5, amount="12.5"),
            make_tx(OTHER, THIRD, hours_ago=3, amount="99"),
        ]
    )
    assert inserted == 3
    assert gamescore_db.add_transactions([]) == 0

    txs = gamescore_db.get_transactions_for_wallet(WALLET)
    assert [tx.amount for tx in txs] == [Decimal("12.5"), Decimal("0.000001")]
    assert txs[0].timestamp == NOW - timedelta(hours=5)
    assert txs[1].transaction_type is TransactionType.REWARD_CLAIM


def test_snapshot_scores_like_in_memory(gamescore_db):
    player = make_player()
    txs = [make_tx(hours_ago=h, amount=str(h)) for h in (50, 20, 4, 3)]
    gamescore_db.add_player(player)
    gamescore_db.add_transactions(txs)

    stored_player, stored_txs = gamescore_db.load_wallet_snapshot(WALLET)
    assert calculate_activity_score(stored_player, stored_txs, NOW) == calculate_activity_score(player, txs, NOW)


def test_upsert_keeps_one_row_per_wallet(gamescore_db):
    player = make_player()
    first = calculate_activity_score(player, [], NOW)
    second = calculate_activity_score(player, [make_tx(hours_ago=2)], NOW + timedelta(hours=1))

    gamescore_db.upsert_activity_score(first)
    gamescore_db.upsert_activity_score(second)

    stored = gamescore_db.list_activity_scores()
    assert len(stored) == 1
    assert stored[0] == second.to_dict()
    assert gamescore_db.get_activity_score(WALLET) == second.to_dict()
    assert gamescore_db.get_activity_score(OTHER) is None


def test_list_scores_filters_by_risk_level(gamescore_db):
    weak = calculate_activity_score(make_player(WALLET, age_days=1, level=1, experience_points=0), [], NOW)
    strong = calculate_activity_score(
        make_player(OTHER, age_days=365, level=50, experience_points=10_000, total_transactions=500),
        [make_tx(OTHER, THIRD, hours_ago=2 + 4 * h + h % 3, amount="500") for h in range(150)],
        NOW,
    )
    assert weak.risk_level is RiskLevel.HIGH
    assert strong.risk_level is RiskLevel.LOW
    gamescore_db.upsert_activity_score(weak)
    gamescore_db.upsert_activity_score(strong)

    assert [r["wallet_address"] for r in gamescore_db.list_activity_scores()] == [WALLET, OTHER]
    assert [r["wallet_address"] for r in gamescore_db.list_activity_scores(risk_level="high")] == [WALLET]
    assert gamescore_db.list_activity_scores(risk_level="MEDIUM") == []
    assert len(gamescore_db.list_activity_scores(limit=1)) == 1


def test_list_wallet_addresses(gamescore_db):
    for wallet in (WALLET, OTHER, THIRD):
        gamescore_db.add_player(make_player(wallet))
    assert gamescore_db.list_wallet_addresses() == [WALLET, OTHER, THIRD]
    assert gamescore_db.list_wallet_addresses(limit=2) == [WALLET, OTHER]


def test_store_failure_surfaces_as_upstream_unavailable(gamescore_db, monkeypatch):
    """A failing store is reported, never scored as an empty wallet."""

    def _broken():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(gamescore_db, "_get_session_factory", _broken)
    with pytest.raises(UpstreamUnavailableError) as exc:
        gamescore_db.get_transactions_for_wallet(WALLET)
    assert exc.value.code == "DATA_UNAVAILABLE"
    with pytest.raises(UpstreamUnavailableError):
        gamescore_db.get_player(WALLET)
    with pytest.raises(UpstreamUnavailableError):
        gamescore_db.list_wallet_addresses()


def test_score_reads_surface_store_failure(gamescore_db, monkeypatch):
    """Stored-score lookups report a failing store the same way snapshot reads do."""
    gamescore_db.upsert_activity_score(calculate_activity_score(make_player(), [], NOW))

    def _broken():
        raise OperationalError("SELECT 1", {}, Exception("db down"))

    monkeypatch.setattr(gamescore_db, "_get_session_factory", _broken)
    with pytest.raises(UpstreamUnavailableError) as exc:
        gamescore_db.get_activity_score(WALLET)
    assert exc.value.code == "DATA_UNAVAILABLE"
    assert exc.value.wallet == WALLET
    with pytest.raises(UpstreamUnavailableError):
        gamescore_db.list_activity_scores(risk_level="LOW")
