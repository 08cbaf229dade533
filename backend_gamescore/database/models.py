"""
SQLAlchemy models for players, transactions and activity scores.

Amounts are stored as strings to avoid precision loss across backends;
risk_factors is a JSON array string. One activity_scores row per wallet,
overwritten on every recompute.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _iso_utc(value: datetime | None) -> str | None:
    """ISO string in UTC; SQLite hands back naive datetimes, which are stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class PlayerRow(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), unique=True, nullable=False, index=True)
    username = Column(String(256), nullable=True)
    level = Column(Integer, nullable=False, default=1)
    experience_points = Column(Integer, nullable=False, default=0)
    total_transactions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_address": self.wallet_address,
            "username": self.username,
            "level": self.level,
            "experience_points": self.experience_points,
            "total_transactions": self.total_transactions,
            "created_at": self.created_at,
        }


class TransactionRow(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_address = Column(String(64), nullable=False, index=True)
    to_address = Column(String(64), nullable=False, index=True)
    amount = Column(String(64), nullable=False)
    transaction_type = Column(String(32), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "from_address": self.from_address,
            "to_address": self.to_address,
            "amount": self.amount,
            "transaction_type": self.transaction_type,
            "timestamp": self.timestamp,
        }


class ActivityScoreRow(Base):
    """Latest activity score per wallet (upsert on wallet_address)."""

    __tablename__ = "activity_scores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wallet_address = Column(String(64), unique=True, nullable=False, index=True)
    transaction_score = Column(Float, nullable=False)
    volume_score = Column(Float, nullable=False)
    frequency_score = Column(Float, nullable=False)
    age_score = Column(Float, nullable=False)
    level_score = Column(Float, nullable=False)
    pattern_score = Column(Float, nullable=False)
    total_score = Column(Float, nullable=False, index=True)
    risk_level = Column(String(16), nullable=False, index=True)
    risk_factors = Column(Text, nullable=False, default="[]")
    human_probability = Column(Float, nullable=False)
    transaction_count = Column(Integer, nullable=False, default=0)
    unique_interactions_count = Column(Integer, nullable=False, default=0)
    circular_transactions_count = Column(Integer, nullable=False, default=0)
    active_days = Column(Integer, nullable=False, default=0)
    first_tx_date = Column(DateTime(timezone=True), nullable=True)
    last_tx_date = Column(DateTime(timezone=True), nullable=True)
    calculated_at = Column(DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wallet_address": self.wallet_address,
            "transaction_score": self.transaction_score,
            "volume_score": self.volume_score,
            "frequency_score": self.frequency_score,
            "age_score": self.age_score,
            "level_score": self.level_score,
            "pattern_score": self.pattern_score,
            "total_score": self.total_score,
            "risk_level": self.risk_level,
            "risk_factors": json.loads(self.risk_factors or "[]"),
            "human_probability": self.human_probability,
            "transaction_count": self.transaction_count,
            "unique_interactions_count": self.unique_interactions_count,
            "circular_transactions_count": self.circular_transactions_count,
            "active_days": self.active_days,
            "first_tx_date": _iso_utc(self.first_tx_date),
            "last_tx_date": _iso_utc(self.last_tx_date),
            "calculated_at": _iso_utc(self.calculated_at),
        }
