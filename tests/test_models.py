"""
Tests for the record types and their validation at the mapping boundary.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backend_gamescore.analysis_engine.models import (
    Player,
    Transaction,
    TransactionType,
    parse_timestamp,
)
from backend_gamescore.core.exceptions import InvalidProfileError, InvalidTransactionError
from conftest import NOW, OTHER, WALLET


def _tx_row(**overrides):
    row = {
        "from_address": WALLET,
        "to_address": OTHER,
        "amount": "10",
        "transaction_type": "TOKEN_TRANSFER",
        "timestamp": "2024-05-31T12:00:00Z",
    }
    row.update(overrides)
    return row


def test_parse_timestamp_variants():
    assert parse_timestamp("2024-05-31T12:00:00Z") == datetime(2024, 5, 31, 12, tzinfo=timezone.utc)
    assert parse_timestamp("2024-05-31T14:00:00+02:00") == datetime(2024, 5, 31, 12, tzinfo=timezone.utc)
    naive = parse_timestamp(datetime(2024, 5, 31, 12))
    assert naive.tzinfo is not None and naive.utcoffset() == timedelta(0)
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test_transaction_from_mapping():
    tx = Transaction.from_mapping(_tx_row(transaction_type="reward_claim"))
    assert tx.transaction_type is TransactionType.REWARD_CLAIM
    assert tx.amount == Decimal("10")
    assert tx.timestamp == datetime(2024, 5, 31, 12, tzinfo=timezone.utc)
    assert tx.involves(WALLET) and tx.involves(OTHER)
    assert tx.counterparty(WALLET) == OTHER
    assert tx.counterparty(OTHER) == WALLET


def test_float_amount_keeps_printed_precision():
    tx = Transaction.from_mapping(_tx_row(amount=0.1))
    assert tx.amount == Decimal("0.1")


@pytest.mark.parametrize(
    "overrides",
    [
        {"transaction_type": "AIRDROP"},
        {"amount": "-0.01"},
        {"amount": "abc"},
        {"amount": None},
        {"amount": "NaN"},
        {"timestamp": "not-a-date"},
        {"from_address": ""},
        {"to_address": None},
    ],
)
def test_malformed_transaction_rejected(overrides):
    with pytest.raises(InvalidTransactionError) as exc:
        Transaction.from_mapping(_tx_row(**overrides))
    assert exc.value.code == "INVALID_TRANSACTION"


def test_player_from_mapping():
    player = Player.from_mapping(
        {
            "wallet_address": f"  {WALLET} ",
            "created_at": "2024-01-01T00:00:00",
            "level": "7",
            "experience_points": 250,
            "total_transactions": 3,
            "username": "ada",
        }
    )
    assert player.wallet_address == WALLET
    assert player.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert player.level == 7
    assert player.username == "ada"


@pytest.mark.parametrize(
    "overrides",
    [
        {"created_at": None},
        {"wallet_address": ""},
        {"level": 0},
        {"level": True},
        {"level": "seven"},
        {"experience_points": -1},
        {"total_transactions": -5},
    ],
)
def test_invalid_profile_rejected(overrides):
    row = {
        "wallet_address": WALLET,
        "created_at": NOW.isoformat(),
        "level": 1,
        "experience_points": 0,
        "total_transactions": 0,
    }
    row.update(overrides)
    with pytest.raises(InvalidProfileError) as exc:
        Player.from_mapping(row)
    assert exc.value.code == "INVALID_PROFILE"


def test_records_are_immutable():
    tx = Transaction.from_mapping(_tx_row())
    with pytest.raises(AttributeError):
        tx.amount = Decimal("1")


@pytest.mark.parametrize(
    "raw, microsecond",
    [
        ("2024-01-01T00:00:00.12+00:00", 120000),
        ("2024-01-01T00:00:00.5Z", 500000),
        ("2024-01-01T00:00:00.1234567Z", 123456),
        ("2024-01-01T00:00:00.000001", 1),
    ],
)
def test_parse_timestamp_any_fraction_length(raw, microsecond):
    parsed = parse_timestamp(raw)
    assert parsed == datetime(2024, 1, 1, 0, 0, 0, microsecond, tzinfo=timezone.utc)


def test_player_created_at_with_short_fraction():
    player = Player.from_mapping(
        {"wallet_address": WALLET, "created_at": "2024-01-01T00:00:00.12+00:00", "level": 2}
    )
    assert player.created_at.microsecond == 120000
