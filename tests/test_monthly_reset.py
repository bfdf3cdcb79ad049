"""Tests for the monthly limit reset."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from walletcycle.domain.errors import PersistenceError
from walletcycle.domain.monthly_reset import LAST_RESET_SETTING, ResetState


@pytest.fixture
def used_wallets(wallet_service, transaction_service, sample_wallet, second_wallet):
    """Two wallets with part of their limit used."""
    transaction_service.post_transaction(sample_wallet.id, "transfer", 5000, "Rent")
    transaction_service.post_transaction(second_wallet.id, "withdrawal", 1500, "Cash")
    return [sample_wallet, second_wallet]


def test_reset_restores_every_limit(monthly_reset_service, wallet_service, used_wallets):
    """Every wallet gets its full monthly limit back; balances are untouched."""
    updated = monthly_reset_service.reset_monthly_limits()

    assert updated == 2
    for wallet in wallet_service.list_wallets():
        assert wallet.remaining_limit == wallet.monthly_limit
    assert wallet_service.get_wallet(used_wallets[0].id).balance == Decimal("5000")


def test_reset_announces(monthly_reset_service, notification_service, used_wallets):
    """A reset that changed wallets leaves one info notification."""
    monthly_reset_service.reset_monthly_limits()

    [notification] = notification_service.list_notifications()
    assert notification.title == "Monthly limits reset"
    assert notification.message == "The remaining limit of 2 wallets was reset."


def test_reset_without_wallets_is_silent(monthly_reset_service, notification_service):
    """No wallets, no notification."""
    assert monthly_reset_service.reset_monthly_limits() == 0
    assert notification_service.list_notifications() == []


class TestRunIfDue:
    """Tests for the once-a-month startup check."""

    def test_first_of_month_resets_once(
        self, monthly_reset_service, wallet_service, used_wallets, temp_db
    ):
        """The reset runs on the first and is not repeated the same month."""
        today = date(2024, 4, 1)

        assert monthly_reset_service.run_if_due(today) == 2
        assert temp_db.get_setting(LAST_RESET_SETTING) == "2024-04-01"
        assert monthly_reset_service.state(today) is ResetState.DONE

        # Spend again, then check that a second startup the same day changes nothing
        wallet = wallet_service.list_wallets()[0]
        wallet_service.correct_balance(wallet.id, wallet.balance - 100)
        assert monthly_reset_service.run_if_due(today) is None
        assert wallet_service.get_wallet(wallet.id).remaining_limit == wallet.monthly_limit - 100

    def test_not_due_after_the_first(self, monthly_reset_service, wallet_service, used_wallets):
        """Other days never reset, even when the month was missed."""
        assert monthly_reset_service.run_if_due(date(2024, 4, 2)) is None
        assert monthly_reset_service.is_due(date(2024, 4, 2)) is False
        assert any(w.remaining_limit < w.monthly_limit for w in wallet_service.list_wallets())

    def test_due_again_next_month(self, monthly_reset_service, temp_db):
        """A March reset does not block the April one."""
        temp_db.set_setting(LAST_RESET_SETTING, "2024-03-01")

        assert monthly_reset_service.state(date(2024, 4, 1)) is ResetState.PENDING
        assert monthly_reset_service.is_due(date(2024, 4, 1))
        assert not monthly_reset_service.is_due(date(2024, 3, 1))

    def test_unreadable_setting_counts_as_never(self, monthly_reset_service, temp_db):
        """A garbled last-reset value is ignored."""
        temp_db.set_setting(LAST_RESET_SETTING, "first of march")

        assert monthly_reset_service.last_reset_date() is None
        assert monthly_reset_service.is_due(date(2024, 4, 1))


def test_force_reset_records_date(monthly_reset_service, wallet_service, used_wallets):
    """A forced reset runs on any day and counts as this month's reset."""
    updated = monthly_reset_service.force_reset(date(2024, 4, 15))

    assert updated == 2
    assert monthly_reset_service.last_reset_date() == date(2024, 4, 15)
    assert not monthly_reset_service.is_due(date(2024, 4, 1))
    assert all(w.remaining_limit == w.monthly_limit for w in wallet_service.list_wallets())


def test_store_failure_does_not_record_reset(
    monthly_reset_service, used_wallets, temp_db, monkeypatch
):
    """If writing a wallet fails, the month stays pending so the next start retries."""

    def failing_put(wallet):
        raise PersistenceError("locked")

    monkeypatch.setattr(temp_db, "put_wallet", failing_put)
    with pytest.raises(PersistenceError):
        monthly_reset_service.run_if_due(date(2024, 4, 1))

    assert monthly_reset_service.last_reset_date() is None


class TestLocalCalendar:
    """The first of the month is the user's local first."""

    def _pin_now(self, monkeypatch, moment):
        monkeypatch.setattr("walletcycle.domain.monthly_reset.utc_now", lambda: moment)

    def test_east_of_utc_resets_before_utc_midnight(
        self, monthly_reset_service, wallet_service, used_wallets, local_zone, monkeypatch
    ):
        """01:30 on 1 November in UTC+3 is still 31 October in UTC."""
        local_zone("XST-3")
        self._pin_now(monkeypatch, datetime(2024, 10, 31, 22, 30, tzinfo=UTC))

        assert monthly_reset_service.run_if_due() == 2
        assert monthly_reset_service.last_reset_date() == date(2024, 11, 1)
        assert all(w.remaining_limit == w.monthly_limit for w in wallet_service.list_wallets())

    def test_west_of_utc_waits_for_local_first(
        self, monthly_reset_service, used_wallets, local_zone, monkeypatch
    ):
        """20:00 on 31 October in UTC-5 is already 1 November in UTC."""
        local_zone("XST+5")
        self._pin_now(monkeypatch, datetime(2024, 11, 1, 1, 0, tzinfo=UTC))

        assert monthly_reset_service.run_if_due() is None
        assert monthly_reset_service.last_reset_date() is None

    def test_force_reset_records_local_date(
        self, monthly_reset_service, used_wallets, local_zone, monkeypatch
    ):
        local_zone("XST-3")
        self._pin_now(monkeypatch, datetime(2024, 10, 31, 22, 30, tzinfo=UTC))

        monthly_reset_service.force_reset()

        assert monthly_reset_service.last_reset_date() == date(2024, 11, 1)
