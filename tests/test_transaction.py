"""Tests for TransactionService."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from walletcycle.domain.entities import NotificationType, TransactionType
from walletcycle.domain.errors import NotFoundError, PersistenceError, ValidationError
from walletcycle.domain.transaction import OverLimitPolicy, TransactionService


class TestPostTransaction:
    """Tests for post_transaction."""

    def test_deposit_adds_to_balance_only(self, transaction_service, wallet_service, sample_wallet):
        """A deposit raises the balance and leaves the limit alone."""
        txn = transaction_service.post_transaction(sample_wallet.id, "deposit", "5000", "Salary")

        wallet = wallet_service.get_wallet(sample_wallet.id)
        assert txn.type is TransactionType.DEPOSIT
        assert txn.amount == Decimal("5000")
        assert wallet.balance == Decimal("15000")
        assert wallet.remaining_limit == Decimal("200000")

    @pytest.mark.parametrize("txn_type", ["withdrawal", "transfer"])
    def test_outgoing_consumes_limit(self, transaction_service, wallet_service, sample_wallet, txn_type):
        """Withdrawals and transfers reduce both the balance and the limit."""
        transaction_service.post_transaction(sample_wallet.id, txn_type, 2500, "Rent")

        wallet = wallet_service.get_wallet(sample_wallet.id)
        assert wallet.balance == Decimal("7500")
        assert wallet.remaining_limit == Decimal("197500")

    def test_deposit_then_withdrawal_restores_balance(
        self, transaction_service, wallet_service, sample_wallet
    ):
        """Depositing and withdrawing the same amount restores the balance, not the limit."""
        transaction_service.post_transaction(sample_wallet.id, "deposit", 1000, "In")
        transaction_service.post_transaction(sample_wallet.id, "withdrawal", 1000, "Out")

        wallet = wallet_service.get_wallet(sample_wallet.id)
        assert wallet.balance == sample_wallet.balance
        assert wallet.remaining_limit == sample_wallet.remaining_limit - 1000

    def test_date_and_reference(self, transaction_service, sample_wallet):
        """A plain date is stored as local midnight; the reference is kept."""
        txn = transaction_service.post_transaction(
            sample_wallet.id, "deposit", 10, "Gift", date=date(2024, 3, 5), reference="ABC123"
        )

        stored = transaction_service.get_transaction(txn.id)
        assert stored.date == datetime(2024, 3, 5).astimezone(UTC)
        assert stored.date.tzinfo is not None
        assert stored.reference == "ABC123"

    @pytest.mark.parametrize(
        "txn_type,amount,description",
        [
            ("refund", 10, "Bad type"),
            ("deposit", 0, "Zero"),
            ("deposit", -5, "Negative"),
            ("deposit", 10, "   "),
        ],
    )
    def test_invalid_input_changes_nothing(
        self, transaction_service, wallet_service, sample_wallet, txn_type, amount, description
    ):
        """Malformed postings are rejected before any write."""
        with pytest.raises(ValidationError):
            transaction_service.post_transaction(sample_wallet.id, txn_type, amount, description)

        assert transaction_service.list_transactions() == []
        assert wallet_service.get_wallet(sample_wallet.id) == sample_wallet

    def test_missing_wallet(self, transaction_service):
        """Posting to an unknown wallet raises NotFoundError and stores nothing."""
        with pytest.raises(NotFoundError):
            transaction_service.post_transaction("missing", "deposit", 10, "Lost")

        assert transaction_service.list_transactions() == []

    def test_store_failure_is_reported(
        self, transaction_service, sample_wallet, temp_db, monkeypatch, notification_service
    ):
        """A store failure propagates and leaves an error notification."""

        def failing_add(transaction):
            raise PersistenceError("locked")

        monkeypatch.setattr(temp_db, "add_transaction", failing_add)
        with pytest.raises(PersistenceError):
            transaction_service.post_transaction(sample_wallet.id, "deposit", 10, "Gift")

        [notification] = notification_service.list_notifications()
        assert notification.type is NotificationType.ERROR
        assert notification.message == "Could not record the transaction. Please try again."


class TestOverLimitPolicy:
    """Outgoing amounts larger than the remaining limit."""

    @pytest.fixture
    def small_wallet(self, wallet_service):
        return wallet_service.create_wallet(
            name="Small", phone_number="01000000009", balance=50000, monthly_limit=10000
        )

    def test_allow_goes_negative(self, transaction_service, wallet_service, small_wallet):
        """By default the remaining limit may go negative."""
        transaction_service.post_transaction(small_wallet.id, "transfer", 15000, "Big")

        wallet = wallet_service.get_wallet(small_wallet.id)
        assert wallet.remaining_limit == Decimal("-5000")
        assert wallet.balance == Decimal("35000")

    def test_clamp_stops_at_zero(self, temp_db, notification_service, wallet_service, small_wallet):
        """CLAMP keeps the remaining limit at zero."""
        service = TransactionService(temp_db, notification_service, OverLimitPolicy.CLAMP)
        service.post_transaction(small_wallet.id, "transfer", 15000, "Big")

        wallet = wallet_service.get_wallet(small_wallet.id)
        assert wallet.remaining_limit == Decimal(0)
        assert wallet.balance == Decimal("35000")

    def test_reject_refuses(self, temp_db, notification_service, wallet_service, small_wallet):
        """REJECT raises and writes nothing."""
        service = TransactionService(temp_db, notification_service, "reject")

        with pytest.raises(ValidationError, match="exceeds the remaining monthly limit"):
            service.post_transaction(small_wallet.id, "withdrawal", 15000, "Big")

        assert wallet_service.get_wallet(small_wallet.id) == small_wallet
        assert service.list_transactions() == []

    def test_reject_allows_exact_limit(self, temp_db, notification_service, wallet_service, small_wallet):
        """Using exactly the remaining limit is fine under REJECT."""
        service = TransactionService(temp_db, notification_service, OverLimitPolicy.REJECT)
        service.post_transaction(small_wallet.id, "withdrawal", 10000, "All of it")

        assert wallet_service.get_wallet(small_wallet.id).remaining_limit == Decimal(0)

    def test_deposits_ignore_policy(self, temp_db, notification_service, wallet_service, small_wallet):
        """Deposits never consult the limit."""
        service = TransactionService(temp_db, notification_service, OverLimitPolicy.REJECT)
        service.post_transaction(small_wallet.id, "deposit", 999999, "Windfall")

        assert wallet_service.get_wallet(small_wallet.id).remaining_limit == Decimal("10000")


class TestListTransactions:
    """Tests for list_transactions filters."""

    @pytest.fixture
    def history(self, transaction_service, sample_wallet, second_wallet):
        post = transaction_service.post_transaction
        return [
            post(sample_wallet.id, "deposit", 500, "A", date=date(2024, 3, 1)),
            post(sample_wallet.id, "withdrawal", 1500, "B", date=date(2024, 3, 10)),
            post(second_wallet.id, "transfer", 100, "C", date=date(2024, 3, 20)),
        ]

    def test_newest_first(self, transaction_service, history):
        """Results are sorted by date, newest first."""
        assert [t.description for t in transaction_service.list_transactions()] == ["C", "B", "A"]

    def test_filters(self, transaction_service, history, sample_wallet):
        """Wallet, type, date and amount filters combine."""
        list_ = transaction_service.list_transactions

        assert [t.description for t in list_(wallet_id=sample_wallet.id)] == ["B", "A"]
        assert [t.description for t in list_(type="transfer")] == ["C"]
        in_range = list_(start_date=date(2024, 3, 5), end_date=date(2024, 3, 10))
        assert [t.description for t in in_range] == ["B"]
        mid_sized = list_(min_amount=Decimal(200), max_amount=Decimal(1000))
        assert [t.description for t in mid_sized] == ["A"]


class TestUpdateAndDelete:
    """Tests for update_transaction and delete_transaction."""

    def test_update_leaves_wallet_alone(
        self, transaction_service, wallet_service, sample_wallet
    ):
        """Editing descriptive fields does not touch the wallet."""
        txn = transaction_service.post_transaction(sample_wallet.id, "withdrawal", 100, "Old")
        before = wallet_service.get_wallet(sample_wallet.id)

        updated = transaction_service.update_transaction(txn.id, description="New", reference="R1")

        assert updated.description == "New"
        assert updated.reference == "R1"
        assert updated.date == txn.date
        assert updated.amount == txn.amount
        assert transaction_service.get_transaction(txn.id) == updated
        assert wallet_service.get_wallet(sample_wallet.id) == before

    def test_date_cannot_be_edited(self, transaction_service, sample_wallet):
        """A posted transaction keeps its date."""
        txn = transaction_service.post_transaction(
            sample_wallet.id, "deposit", 10, "Gift", date=date(2024, 3, 5)
        )

        with pytest.raises(TypeError):
            transaction_service.update_transaction(txn.id, date=date(2000, 1, 1))

        assert transaction_service.get_transaction(txn.id).date == txn.date

    def test_update_missing(self, transaction_service):
        """Updating an unknown transaction raises NotFoundError."""
        with pytest.raises(NotFoundError):
            transaction_service.update_transaction("missing", description="X")

    def test_delete_does_not_reverse(self, transaction_service, wallet_service, sample_wallet):
        """Deleting a transaction leaves the balance and limit as posted."""
        txn = transaction_service.post_transaction(sample_wallet.id, "withdrawal", 1000, "Rent")
        after_post = wallet_service.get_wallet(sample_wallet.id)

        transaction_service.delete_transaction(txn.id)

        assert transaction_service.get_transaction(txn.id) is None
        wallet = wallet_service.get_wallet(sample_wallet.id)
        assert wallet.balance == after_post.balance == Decimal("9000")
        assert wallet.remaining_limit == after_post.remaining_limit == Decimal("199000")

    def test_delete_missing(self, transaction_service):
        """Deleting an unknown transaction raises NotFoundError."""
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction("missing")


class TestLocalCalendar:
    """Dates follow the local calendar, not UTC."""

    def test_plain_date_is_local_midnight(self, transaction_service, sample_wallet, local_zone):
        """In UTC+3, midnight of 5 March is 21:00 UTC on 4 March."""
        local_zone("XST-3")

        txn = transaction_service.post_transaction(
            sample_wallet.id, "deposit", 10, "Gift", date=date(2024, 3, 5)
        )

        assert txn.date == datetime(2024, 3, 4, 21, 0, tzinfo=UTC)

    def test_date_filter_uses_local_day(self, transaction_service, sample_wallet, local_zone):
        """A late-evening UTC posting falls on the next local day east of UTC."""
        local_zone("XST-3")
        late = datetime(2024, 3, 4, 22, 30, tzinfo=UTC)
        transaction_service.post_transaction(sample_wallet.id, "deposit", 10, "Late", date=late)

        on_fifth = transaction_service.list_transactions(
            start_date=date(2024, 3, 5), end_date=date(2024, 3, 5)
        )

        assert [t.description for t in on_fifth] == ["Late"]
        assert transaction_service.list_transactions(end_date=date(2024, 3, 4)) == []
