"""
Tests for the per-wallet transaction summary.
"""

from __future__ import annotations

from decimal import Decimal

from backend_gamescore.analysis_engine import TransactionType, summarize_transactions
from conftest import OTHER, WALLET, make_tx


def test_summary_counts_and_volume():
    txs = [
        make_tx(WALLET, OTHER, hours_ago=3, amount="10", tx_type=TransactionType.ITEM_PURCHASE),
        make_tx(OTHER, WALLET, hours_ago=2, amount="5.5", tx_type=TransactionType.REWARD_CLAIM),
        make_tx(WALLET, OTHER, hours_ago=1, amount="0.5", tx_type=TransactionType.ITEM_PURCHASE),
    ]
    summary = summarize_transactions(WALLET, txs)
    assert summary.total_transactions == 3
    assert summary.total_volume == Decimal("16.0")
    assert summary.average_amount == Decimal("16.0") / 3
    assert summary.most_common_type is TransactionType.ITEM_PURCHASE
    assert summary.type_counts == {TransactionType.ITEM_PURCHASE: 2, TransactionType.REWARD_CLAIM: 1}

    data = summary.to_dict()
    assert data["total_volume"] == "16.0"
    assert data["most_common_type"] == "ITEM_PURCHASE"
    assert data["type_counts"] == {"ITEM_PURCHASE": 2, "REWARD_CLAIM": 1}


def test_summary_tie_goes_to_declaration_order():
    txs = [
        make_tx(hours_ago=2, tx_type=TransactionType.NFT_TRADE),
        make_tx(hours_ago=1, tx_type=TransactionType.TOKEN_TRANSFER),
    ]
    assert summarize_transactions(WALLET, txs).most_common_type is TransactionType.TOKEN_TRANSFER


def test_empty_summary():
    summary = summarize_transactions(WALLET, [])
    assert summary.total_transactions == 0
    assert summary.total_volume == Decimal(0)
    assert summary.average_amount == Decimal(0)
    assert summary.most_common_type is None
    assert summary.to_dict()["type_counts"] == {}
