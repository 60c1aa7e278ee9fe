import uuid as uuid_pkg
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text, UniqueConstraint

from app.db.base_class import Base


class Contest(Base):
    __tablename__ = "contests"

    id = Column(String, primary_key=True, index=True, default=lambda: uuid_pkg.uuid4().hex)
    name = Column(String, nullable=False)
    time_limit_minutes = Column(Integer, nullable=False)
    questions_json = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)


class Participation(Base):
    __tablename__ = "participations"
    __table_args__ = (
        UniqueConstraint("contest_id", "wallet_address", name="uq_participations_contest_wallet"),
    )

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(String, nullable=False, index=True)
    wallet_address = Column(String, nullable=False)
    joined_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)


class ContestSession(Base):
    """Server-held start instant of a wallet's attempt at a contest. Written once."""
    __tablename__ = "contest_sessions"
    __table_args__ = (
        UniqueConstraint("contest_id", "wallet_address", name="uq_contest_sessions_contest_wallet"),
    )

    id = Column(Integer, primary_key=True, index=True)
    contest_id = Column(String, nullable=False, index=True)
    wallet_address = Column(String, nullable=False)
    started_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
