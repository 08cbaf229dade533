"""
Typed records consumed and produced by the scoring engine.

Player and Transaction are read-only snapshots supplied by the data-access
layer; ActivityScore is the engine's only output. from_mapping() is the
validation boundary for loosely typed rows (database rows, JSON payloads).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from backend_gamescore.core.exceptions import (
    InvalidProfileError,
    InvalidTransactionError,
)

# fromisoformat on 3.10 only takes 3 or 6 fractional digits
_FRACTION = re.compile(r"\.(\d+)")


class TransactionType(str, Enum):
    ITEM_PURCHASE = "ITEM_PURCHASE"
    REWARD_CLAIM = "REWARD_CLAIM"
    TOKEN_TRANSFER = "TOKEN_TRANSFER"
    NFT_TRADE = "NFT_TRADE"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a datetime or ISO-8601 string into a UTC datetime.
    Returns None for missing or unparseable values; callers decide whether that is fatal.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        raw = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw, count=1)
        try:
            return to_utc(datetime.fromisoformat(raw))
        except ValueError:
            return None
    return None


def _as_int(value: Any, field_name: str, wallet: str | None) -> int:
    if isinstance(value, bool):
        raise InvalidProfileError(f"{field_name} must be an integer, got bool", wallet=wallet)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidProfileError(f"{field_name} must be an integer: {value!r}", wallet=wallet) from e


@dataclass(frozen=True)
class Player:
    """Player profile snapshot as seen by the scorer."""

    wallet_address: str
    created_at: datetime
    level: int
    experience_points: int
    total_transactions: int
    username: str | None = None

    def __post_init__(self) -> None:
        if not self.wallet_address or not self.wallet_address.strip():
            raise InvalidProfileError("wallet_address must be non-empty")
        if not isinstance(self.created_at, datetime):
            raise InvalidProfileError(
                f"created_at must be a datetime, got {type(self.created_at).__name__}",
                wallet=self.wallet_address,
            )
        if self.level < 1:
            raise InvalidProfileError(f"level must be >= 1, got {self.level}", wallet=self.wallet_address)
        if self.experience_points < 0:
            raise InvalidProfileError(
                f"experience_points must be >= 0, got {self.experience_points}",
                wallet=self.wallet_address,
            )
        if self.total_transactions < 0:
            raise InvalidProfileError(
                f"total_transactions must be >= 0, got {self.total_transactions}",
                wallet=self.wallet_address,
            )
        object.__setattr__(self, "created_at", to_utc(self.created_at))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Player:
        """Build a Player from a row or JSON object; raises InvalidProfileError."""
        wallet = str(data.get("wallet_address") or "").strip()
        created_at = parse_timestamp(data.get("created_at"))
        if created_at is None:
            raise InvalidProfileError(
                f"created_at missing or unparseable: {data.get('created_at')!r}",
                wallet=wallet or None,
            )
        return cls(
            wallet_address=wallet,
            created_at=created_at,
            level=_as_int(data.get("level", 1), "level", wallet),
            experience_points=_as_int(data.get("experience_points", 0), "experience_points", wallet),
            total_transactions=_as_int(data.get("total_transactions", 0), "total_transactions", wallet),
            username=data.get("username"),
        )


@dataclass(frozen=True)
class Transaction:
    """Single in-game transfer between two wallets."""

    from_address: str
    to_address: str
    amount: Decimal
    transaction_type: TransactionType
    timestamp: datetime

    def __post_init__(self) -> None:
        if not self.from_address or not self.to_address:
            raise InvalidTransactionError("from_address and to_address are required")
        if not isinstance(self.timestamp, datetime):
            raise InvalidTransactionError("timestamp must be a datetime")
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", _as_decimal(self.amount))
        if not self.amount.is_finite() or self.amount < 0:
            raise InvalidTransactionError(f"amount must be a non-negative number, got {self.amount}")
        if not isinstance(self.transaction_type, TransactionType):
            object.__setattr__(self, "transaction_type", _as_transaction_type(self.transaction_type))
        object.__setattr__(self, "timestamp", to_utc(self.timestamp))

    def involves(self, wallet: str) -> bool:
        return self.from_address == wallet or self.to_address == wallet

    def counterparty(self, wallet: str) -> str:
        """Address on the other side of the transfer from wallet's point of view."""
        return self.to_address if self.from_address == wallet else self.from_address

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Transaction:
        """Build a Transaction from a row or JSON object; raises InvalidTransactionError."""
        timestamp = parse_timestamp(data.get("timestamp"))
        if timestamp is None:
            raise InvalidTransactionError(f"timestamp missing or unparseable: {data.get('timestamp')!r}")
        return cls(
            from_address=str(data.get("from_address") or "").strip(),
            to_address=str(data.get("to_address") or "").strip(),
            amount=_as_decimal(data.get("amount")),
            transaction_type=_as_transaction_type(data.get("transaction_type")),
            timestamp=timestamp,
        )


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None or isinstance(value, bool):
        raise InvalidTransactionError(f"amount must be numeric, got {value!r}")
    try:
        # str() keeps float inputs at their printed precision (0.1 -> Decimal("0.1"))
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidTransactionError(f"amount must be numeric, got {value!r}") from e


def _as_transaction_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(str(value).strip().upper())
    except ValueError as e:
        raise InvalidTransactionError(f"unknown transaction_type: {value!r}") from e


@dataclass(frozen=True)
class ActivityScore:
    """
    Activity/trust score for one wallet at one point in time.

    Produced fresh on every computation and superseded wholesale by the next
    one; identity is wallet_address + calculated_at. transaction_score is the
    transaction-pattern metric, exposed under the name the display layer uses.
    """

    wallet_address: str
    transaction_score: float
    volume_score: float
    frequency_score: float
    age_score: float
    level_score: float
    pattern_score: float
    total_score: float
    risk_level: RiskLevel
    risk_factors: tuple[str, ...]
    human_probability: float
    transaction_count: int
    unique_interactions_count: int
    circular_transactions_count: int
    active_days: int
    first_tx_date: datetime | None
    last_tx_date: datetime | None
    calculated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-serializable persisted shape; stable key order."""
        return {
            "wallet_address": self.wallet_address,
            "transaction_score": self.transaction_score,
            "volume_score": self.volume_score,
            "frequency_score": self.frequency_score,
            "age_score": self.age_score,
            "level_score": self.level_score,
            "pattern_score": self.pattern_score,
            "total_score": self.total_score,
            "risk_level": self.risk_level.value,
            "risk_factors": list(self.risk_factors),
            "human_probability": self.human_probability,
            "transaction_count": self.transaction_count,
            "unique_interactions_count": self.unique_interactions_count,
            "circular_transactions_count": self.circular_transactions_count,
            "active_days": self.active_days,
            "first_tx_date": self.first_tx_date.isoformat() if self.first_tx_date else None,
            "last_tx_date": self.last_tx_date.isoformat() if self.last_tx_date else None,
            "calculated_at": self.calculated_at.isoformat(),
        }
