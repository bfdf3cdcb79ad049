"""Tests for transaction pattern analysis and limit forecasts."""

from datetime import datetime, timedelta, UTC
from decimal import Decimal

import pytest

from walletcycle.domain.entities import Transaction, TransactionType
from walletcycle.domain.patterns import (
    WEEKDAYS,
    analyze_transaction_patterns,
    predict_limit_exhaustion,
    weekday_name,
)

SUNDAY = datetime(2024, 3, 3, 10, 0, tzinfo=UTC)
NOW = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)


def _txn(txn_type, amount, when, wallet_id="wallet"):
    return Transaction(
        id=f"{txn_type}-{amount}-{when.isoformat()}",
        wallet_id=wallet_id,
        type=TransactionType(txn_type),
        amount=Decimal(str(amount)),
        description="Payment",
        date=when,
    )


def test_weekday_name():
    """Weekdays are named in English."""
    assert weekday_name(SUNDAY) == "Sunday"
    assert weekday_name(SUNDAY + timedelta(days=6)) == "Saturday"
    assert WEEKDAYS[0] == "Sunday"


class TestAnalyzeTransactionPatterns:
    """Tests for analyze_transaction_patterns."""

    def test_needs_five_transactions(self):
        """Short histories return a placeholder."""
        pattern = analyze_transaction_patterns([_txn("deposit", 100, SUNDAY)] * 4)

        assert not pattern.sufficient_data
        assert pattern.most_active_day == "N/A"
        assert pattern.least_active_day == "N/A"
        assert pattern.day_counts == {}

    def test_statistics(self):
        """Day shares, per-type averages and extremes are computed."""
        monday = SUNDAY + timedelta(days=1)
        tuesday = SUNDAY + timedelta(days=2)
        transactions = [
            _txn("deposit", 1000, SUNDAY),
            _txn("deposit", 3000, SUNDAY + timedelta(hours=1)),
            _txn("transfer", 200, SUNDAY + timedelta(hours=2)),
            _txn("withdrawal", 500, monday),
            _txn("withdrawal", 1500, tuesday),
        ]

        pattern = analyze_transaction_patterns(transactions)

        assert pattern.sufficient_data
        assert pattern.day_counts["Sunday"] == 3
        assert pattern.day_counts["Monday"] == 1
        assert pattern.day_counts["Friday"] == 0
        assert pattern.deposit_days["Sunday"] == pytest.approx(100.0)
        assert pattern.withdrawal_days["Monday"] == pytest.approx(25.0)
        assert pattern.withdrawal_days["Tuesday"] == pytest.approx(75.0)
        assert pattern.daily_average_deposit == Decimal(1400)
        assert pattern.daily_average_withdrawal == Decimal(1000)
        assert pattern.biggest_deposit == Decimal(3000)
        assert pattern.biggest_withdrawal == Decimal(1500)
        assert pattern.most_active_day == "Sunday"
        assert pattern.least_active_day == "Saturday"

    def test_ties(self):
        """With equal counts the earliest day is most active and the latest least active."""
        transactions = [
            _txn("deposit", 100, SUNDAY + timedelta(days=offset)) for offset in range(7)
        ]

        pattern = analyze_transaction_patterns(transactions)

        assert pattern.most_active_day == "Sunday"
        assert pattern.least_active_day == "Saturday"

    def test_only_withdrawals(self):
        """Missing deposit data yields zero averages, not an error."""
        transactions = [_txn("withdrawal", 100 * n, SUNDAY + timedelta(days=n)) for n in range(1, 6)]

        pattern = analyze_transaction_patterns(transactions)

        assert pattern.daily_average_deposit == Decimal(0)
        assert pattern.deposit_days["Monday"] == 0.0
        assert pattern.daily_average_withdrawal == Decimal(300)
        assert pattern.least_active_day == "Saturday"


class TestPredictLimitExhaustion:
    """Tests for predict_limit_exhaustion."""

    def test_plenty_left(self, make_wallet):
        """Nine tenths or more of the limit left needs no forecast."""
        wallet = make_wallet(remaining_limit="190000")

        prediction = predict_limit_exhaustion(wallet, [], now=NOW)

        assert not prediction.will_exhaust_limit
        assert prediction.days_until_exhausted is None
        assert prediction.recommended_action == "Plenty of limit left. Keep using this wallet."

    def test_too_few_transactions(self, make_wallet):
        """Fewer than three of the wallet's own transactions cannot be projected."""
        wallet = make_wallet(remaining_limit="100000")
        transactions = [
            _txn("withdrawal", 100, NOW - timedelta(days=1), wallet_id=wallet.id),
            _txn("withdrawal", 100, NOW - timedelta(days=1), wallet_id="other"),
            _txn("withdrawal", 100, NOW - timedelta(days=2), wallet_id="other"),
        ]

        prediction = predict_limit_exhaustion(wallet, transactions, now=NOW)

        assert prediction.will_exhaust_limit
        assert prediction.recommended_action.startswith("Not enough transactions")

    @pytest.mark.parametrize(
        "remaining,days,action",
        [
            ("100000", 14, "You can keep using this wallet for about 14 more days."),
            ("40000", 5, "Plan to switch the send wallet within the next week."),
            ("10000", 1, "Switch the send wallet now to avoid hitting the limit."),
        ],
    )
    def test_projection(self, make_wallet, remaining, days, action):
        """Recent outflow per recent transaction is divided into the remaining limit."""
        wallet = make_wallet(remaining_limit=remaining)
        transactions = [
            _txn("withdrawal", 12000, NOW - timedelta(days=1), wallet_id=wallet.id),
            _txn("transfer", 9000, NOW - timedelta(days=2), wallet_id=wallet.id),
            _txn("deposit", 5000, NOW - timedelta(days=3), wallet_id=wallet.id),
            _txn("withdrawal", 99999, NOW - timedelta(days=30), wallet_id=wallet.id),
        ]

        prediction = predict_limit_exhaustion(wallet, transactions, now=NOW)

        assert prediction.will_exhaust_limit
        assert prediction.days_until_exhausted == days
        assert prediction.recommended_action == action

    def test_no_recent_outflow(self, make_wallet):
        """Only deposits lately means no forecast."""
        wallet = make_wallet(remaining_limit="100000")
        transactions = [
            _txn("deposit", 100, NOW - timedelta(days=1), wallet_id=wallet.id),
            _txn("deposit", 200, NOW - timedelta(days=2), wallet_id=wallet.id),
            _txn("withdrawal", 5000, NOW - timedelta(days=20), wallet_id=wallet.id),
        ]

        prediction = predict_limit_exhaustion(wallet, transactions, now=NOW)

        assert not prediction.will_exhaust_limit
        assert prediction.recommended_action.startswith("No recent outgoing transfers")


class TestLocalWeekdays:
    """Weekdays are those of the local calendar."""

    def test_east_of_utc(self, local_zone):
        """Sunday 22:30 UTC is already Monday in UTC+3."""
        local_zone("XST-3")

        assert weekday_name(datetime(2024, 3, 3, 22, 30, tzinfo=UTC)) == "Monday"

    def test_west_of_utc(self, local_zone):
        """Monday 03:00 UTC is still Sunday in UTC-5."""
        local_zone("XST+5")

        assert weekday_name(datetime(2024, 3, 4, 3, 0, tzinfo=UTC)) == "Sunday"

    def test_pattern_buckets_follow_local_day(self, local_zone):
        local_zone("XST-3")
        monday_local = datetime(2024, 3, 3, 21, 30, tzinfo=UTC)

        pattern = analyze_transaction_patterns([_txn("deposit", 100, monday_local)] * 5)

        assert pattern.most_active_day == "Monday"
        assert pattern.day_counts["Monday"] == 5
        assert pattern.day_counts["Sunday"] == 0
