"""Restrict a global transaction set to one wallet's transfers."""

from __future__ import annotations

from typing import Iterable

from backend_gamescore.analysis_engine.models import Transaction


def filter_wallet_transactions(
    wallet: str,
    transactions: Iterable[Transaction],
) -> list[Transaction]:
    """Keep transactions where wallet is sender or receiver; input order is preserved."""
    return [tx for tx in transactions if tx.involves(wallet)]


def chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Sort by timestamp. Ties are broken on the remaining fields so the result
    does not depend on the order the store returned rows in.
    """
    return sorted(
        transactions,
        key=lambda tx: (
            tx.timestamp,
            tx.from_address,
            tx.to_address,
            tx.amount,
            tx.transaction_type.value,
        ),
    )
