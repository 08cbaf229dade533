"""
Transaction summary for one wallet: counts, volume, average amount and the
most common transaction type. Descriptive only; does not feed total_score.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from backend_gamescore.analysis_engine.models import Transaction, TransactionType


@dataclass(frozen=True)
class WalletTransactionSummary:
    wallet_address: str
    total_transactions: int
    total_volume: Decimal
    average_amount: Decimal
    most_common_type: TransactionType | None
    type_counts: dict[TransactionType, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_address": self.wallet_address,
            "total_transactions": self.total_transactions,
            "total_volume": str(self.total_volume),
            "average_amount": str(self.average_amount),
            "most_common_type": self.most_common_type.value if self.most_common_type else None,
            "type_counts": {t.value: n for t, n in self.type_counts.items()},
        }


def summarize_transactions(
    wallet: str,
    transactions: Sequence[Transaction],
) -> WalletTransactionSummary:
    """
    Summarize a wallet's (already filtered) transactions.

    Ties for most_common_type go to the type declared first in TransactionType.
    """
    total = sum((tx.amount for tx in transactions), Decimal(0))
    counts = Counter(tx.transaction_type for tx in transactions)
    type_counts = {t: counts[t] for t in TransactionType if counts[t]}
    most_common: TransactionType | None = None
    if type_counts:
        most_common = max(type_counts, key=lambda t: type_counts[t])
    average = total / len(transactions) if transactions else Decimal(0)
    return WalletTransactionSummary(
        wallet_address=wallet,
        total_transactions=len(transactions),
        total_volume=total,
        average_amount=average,
        most_common_type=most_common,
        type_counts=type_counts,
    )
