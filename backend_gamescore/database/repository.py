"""
Data-access layer: SQLAlchemy-backed players, transactions and activity scores.

Uses GAMESCORE_DB_URL / DATABASE_URL when set (PostgreSQL in production);
otherwise falls back to SQLite at GAMESCORE_DB_PATH (default gamescore.db).
Read failures surface as UpstreamUnavailableError so the scorer never runs
on data it could not obtain.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Iterable, Iterator

from sqlalchemy import create_engine, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from backend_gamescore.analysis_engine.models import ActivityScore, Player, Transaction
from backend_gamescore.config.env import get_database_url, mask_database_url
from backend_gamescore.core.exceptions import PlayerNotFoundError, UpstreamUnavailableError
from backend_gamescore.database.models import (
    ActivityScoreRow,
    Base,
    PlayerRow,
    TransactionRow,
)
from backend_gamescore.gamescore_logging import get_logger

logger = get_logger(__name__)

_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create or return the cached engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        logger.info("gamescore_db_engine", url=mask_database_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Single session. Commits on success, rolls back on error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create tables if they do not exist. Safe to call on every startup."""
    try:
        Base.metadata.create_all(bind=_get_engine())
        logger.info("gamescore_init_db", url=mask_database_url(get_database_url()))
    except SQLAlchemyError as e:
        logger.exception("gamescore_init_db_failed", error=str(e))
        raise


def reset_engine_for_test() -> None:
    """Drop the cached engine and session factory. For tests only."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


# -----------------------------------------------------------------------------
# Writes (seeding and score persistence)
# -----------------------------------------------------------------------------


def add_player(player: Player) -> bool:
    """Insert a player. Returns True if inserted, False if the wallet already exists."""
    try:
        with _session_scope() as session:
            session.add(
                PlayerRow(
                    wallet_address=player.wallet_address,
                    username=player.username,
                    level=player.level,
                    experience_points=player.experience_points,
                    total_transactions=player.total_transactions,
                    created_at=player.created_at,
                )
            )
            session.flush()
        logger.debug("player_added", wallet_id=player.wallet_address)
        return True
    except IntegrityError:
        logger.info("player_already_exists", wallet_id=player.wallet_address)
        return False


def add_transactions(transactions: Iterable[Transaction]) -> int:
    """Insert transactions. Returns number of rows inserted."""
    rows = [
        TransactionRow(
            from_address=tx.from_address,
            to_address=tx.to_address,
            amount=str(tx.amount),
            transaction_type=tx.transaction_type.value,
            timestamp=tx.timestamp,
        )
        for tx in transactions
    ]
    if not rows:
        return 0
    with _session_scope() as session:
        session.add_all(rows)
    logger.debug("transactions_added", count=len(rows))
    return len(rows)


def upsert_activity_score(score: ActivityScore) -> None:
    """Insert or overwrite the stored score for score.wallet_address."""
    values: dict[str, Any] = {
        "transaction_score": score.transaction_score,
        "volume_score": score.volume_score,
        "frequency_score": score.frequency_score,
        "age_score": score.age_score,
        "level_score": score.level_score,
        "pattern_score": score.pattern_score,
        "total_score": score.total_score,
        "risk_level": score.risk_level.value,
        "risk_factors": json.dumps(list(score.risk_factors)),
        "human_probability": score.human_probability,
        "transaction_count": score.transaction_count,
        "unique_interactions_count": score.unique_interactions_count,
        "circular_transactions_count": score.circular_transactions_count,
        "active_days": score.active_days,
        "first_tx_date": score.first_tx_date,
        "last_tx_date": score.last_tx_date,
        "calculated_at": score.calculated_at,
    }
    try:
        with _session_scope() as session:
            row = (
                session.query(ActivityScoreRow)
                .filter(ActivityScoreRow.wallet_address == score.wallet_address)
                .first()
            )
            if row is None:
                session.add(ActivityScoreRow(wallet_address=score.wallet_address, **values))
            else:
                for key, value in values.items():
                    setattr(row, key, value)
        logger.debug(
            "activity_score_upserted",
            wallet_id=score.wallet_address,
            total_score=score.total_score,
            risk_level=score.risk_level.value,
        )
    except SQLAlchemyError as e:
        logger.exception("activity_score_upsert_failed", wallet_id=score.wallet_address, error=str(e))
        raise


# -----------------------------------------------------------------------------
# Reads (scoring inputs and presentation)
# -----------------------------------------------------------------------------


def get_player(wallet: str) -> Player:
    """
    Return the stored profile for wallet.

    Raises PlayerNotFoundError when absent, UpstreamUnavailableError when the
    store fails, InvalidProfileError when the stored row cannot be scored.
    """
    try:
        with _session_scope() as session:
            row = session.query(PlayerRow).filter(PlayerRow.wallet_address == wallet).first()
            data = row.to_dict() if row else None
    except SQLAlchemyError as e:
        logger.warning("player_read_failed", wallet_id=wallet, error=str(e))
        raise UpstreamUnavailableError(f"player lookup failed: {e}", wallet=wallet) from e
    if data is None:
        raise PlayerNotFoundError(f"no player stored for wallet {wallet}", wallet=wallet)
    return Player.from_mapping(data)


def get_transactions_for_wallet(wallet: str) -> list[Transaction]:
    """Return transactions where wallet is sender or receiver, oldest first."""
    try:
        with _session_scope() as session:
            rows = (
                session.query(TransactionRow)
                .filter(or_(TransactionRow.from_address == wallet, TransactionRow.to_address == wallet))
                .order_by(TransactionRow.timestamp, TransactionRow.id)
                .all()
            )
            data = [r.to_dict() for r in rows]
    except SQLAlchemyError as e:
        logger.warning("transactions_read_failed", wallet_id=wallet, error=str(e))
        raise UpstreamUnavailableError(f"transaction lookup failed: {e}", wallet=wallet) from e
    return [Transaction.from_mapping(d) for d in data]


def load_wallet_snapshot(wallet: str) -> tuple[Player, list[Transaction]]:
    """Profile and transactions for one wallet, as the scorer consumes them."""
    return get_player(wallet), get_transactions_for_wallet(wallet)


def list_wallet_addresses(*, limit: int | None = None) -> list[str]:
    """Return stored player wallets in insertion order."""
    try:
        with _session_scope() as session:
            q = session.query(PlayerRow.wallet_address).order_by(PlayerRow.id)
            if limit is not None:
                q = q.limit(limit)
            return [r[0] for r in q.all()]
    except SQLAlchemyError as e:
        logger.warning("wallet_list_failed", error=str(e))
        raise UpstreamUnavailableError(f"wallet listing failed: {e}") from e


def get_activity_score(wallet: str) -> dict[str, Any] | None:
    """Return the stored score for wallet as a dict, or None if never scored."""
    try:
        with _session_scope() as session:
            row = (
                session.query(ActivityScoreRow)
                .filter(ActivityScoreRow.wallet_address == wallet)
                .first()
            )
            return row.to_dict() if row else None
    except SQLAlchemyError as e:
        logger.warning("activity_score_read_failed", wallet_id=wallet, error=str(e))
        raise UpstreamUnavailableError(f"activity score lookup failed: {e}", wallet=wallet) from e


def list_activity_scores(
    *,
    risk_level: str | None = None,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """Return stored scores, lowest total_score first, optionally filtered by risk level."""
    try:
        with _session_scope() as session:
            q = session.query(ActivityScoreRow)
            if risk_level:
                q = q.filter(ActivityScoreRow.risk_level == risk_level.strip().upper())
            rows = q.order_by(ActivityScoreRow.total_score, ActivityScoreRow.wallet_address).limit(limit).all()
            return [r.to_dict() for r in rows]
    except SQLAlchemyError as e:
        logger.warning("activity_scores_list_failed", risk_level=risk_level, error=str(e))
        raise UpstreamUnavailableError(f"activity score listing failed: {e}") from e
