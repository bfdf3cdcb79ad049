"""Shared pytest fixtures for walletcycle tests."""

import tempfile
import os
import time
from datetime import datetime, timedelta, UTC
from decimal import Decimal
import pytest

from walletcycle.database.factories import create_sqlite_database
from walletcycle.domain.backup import BackupService
from walletcycle.domain.entities import Wallet
from walletcycle.domain.monthly_reset import LAST_RESET_SETTING, MonthlyResetService
from walletcycle.domain.notification import NotificationService
from walletcycle.domain.transaction import TransactionService
from walletcycle.domain.wallet import WalletService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def notification_service(temp_db):
    """Create a NotificationService with a temporary database."""
    return NotificationService(temp_db)


@pytest.fixture
def wallet_service(temp_db, notification_service):
    """Create a WalletService with a temporary database."""
    return WalletService(temp_db, notification_service)


@pytest.fixture
def transaction_service(temp_db, notification_service):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, notification_service)


@pytest.fixture
def monthly_reset_service(temp_db, notification_service):
    """Create a MonthlyResetService with a temporary database."""
    return MonthlyResetService(temp_db, notification_service)


@pytest.fixture
def backup_service(temp_db, notification_service):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db, notification_service)


@pytest.fixture
def sample_wallet(wallet_service):
    """Create a sample wallet with a 200,000 limit and 10,000 balance."""
    return wallet_service.create_wallet(
        name="Samsung", phone_number="01012345678", balance=Decimal("10000")
    )


@pytest.fixture
def second_wallet(wallet_service):
    """Create a second wallet on another provider."""
    return wallet_service.create_wallet(
        name="Nokia",
        phone_number="01198765432",
        balance=Decimal("2000"),
        wallet_type="etisalat-cash",
        sim_slot=2,
    )


@pytest.fixture
def make_wallet():
    """Build an in-memory wallet snapshot for the pure analysis functions."""

    def _make(
        name="Wallet",
        balance="0",
        monthly_limit="200000",
        remaining_limit=None,
        wallet_id=None,
    ):
        monthly_limit = Decimal(str(monthly_limit))
        return Wallet(
            id=wallet_id or name.lower(),
            name=name,
            wallet_type="vodafone-cash",
            phone_number="01000000000",
            sim_slot=1,
            pin_code=None,
            balance=Decimal(str(balance)),
            monthly_limit=monthly_limit,
            remaining_limit=(
                Decimal(str(remaining_limit)) if remaining_limit is not None else monthly_limit
            ),
            last_updated=datetime(2024, 3, 10, 12, 0, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def cli_db_path(temp_db):
    """Database path for CLI tests, with this month's limit reset already recorded.

    The CLI runs the monthly reset check on startup; recording it keeps
    results independent of the day the tests run on.
    """
    temp_db.set_setting(LAST_RESET_SETTING, datetime.now(UTC).date().isoformat())
    return temp_db.database_path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def days_ago():
    """Return an aware UTC datetime the given number of days in the past."""

    def _days_ago(days: float) -> datetime:
        return datetime.now(UTC) - timedelta(days=days)

    return _days_ago


@pytest.fixture
def local_zone(monkeypatch):
    """Switch the process time zone, e.g. ``local_zone("XST-3")`` for UTC+3.

    Takes POSIX TZ strings, which need no zone database.
    """
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(tz: str) -> None:
        monkeypatch.setenv("TZ", tz)
        time.tzset()

    yield _set

    monkeypatch.undo()
    time.tzset()
