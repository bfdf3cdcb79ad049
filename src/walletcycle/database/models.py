"""SQLAlchemy models for the walletcycle record store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Numeric,
    Boolean,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class Wallet(Base):
    """Mobile-money wallet model."""

    __tablename__ = "wallets"

    id = Column(String(36), primary_key=True)
    # Insertion order, so list results are stable across reads
    position = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    wallet_type = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    sim_slot = Column(Integer, nullable=False, default=1)
    pin_code = Column(String, nullable=True)
    balance = Column(Numeric(14, 2), nullable=False)
    monthly_limit = Column(Numeric(14, 2), nullable=False)
    remaining_limit = Column(Numeric(14, 2), nullable=False)
    last_updated = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)


class Transaction(Base):
    """Transaction model.

    The wallet reference is a plain indexed column: referential integrity is
    the ledger's job, not the store's.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    wallet_id = Column(String(36), nullable=False, index=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    reference = Column(String, nullable=True)


class Notification(Base):
    """Notification model."""

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True)
    title = Column(String, nullable=False)
    message = Column(String, nullable=False)
    type = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)


class Setting(Base):
    """Key/value setting model."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(JSON, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
