"""Transaction history statistics and limit-exhaustion forecasts."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Sequence
import math

from walletcycle.domain.entities import (
    LimitExhaustionPrediction,
    Transaction,
    TransactionPattern,
    TransactionType,
    Wallet,
    utc_now,
)

MIN_PATTERN_TRANSACTIONS = 5
MIN_PREDICTION_TRANSACTIONS = 3
HIGH_REMAINING_RATIO = Decimal("0.9")
RECENT_WINDOW_DAYS = 7

# Sunday first
WEEKDAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def weekday_name(moment: datetime) -> str:
    """Return the English weekday name of a datetime in local time."""
    # datetime.weekday() is Monday=0
    return WEEKDAYS[(moment.astimezone().weekday() + 1) % 7]


def _is_deposit(txn: Transaction) -> bool:
    return txn.type is TransactionType.DEPOSIT or (
        txn.type is TransactionType.TRANSFER and txn.amount > 0
    )


def _is_withdrawal(txn: Transaction) -> bool:
    return txn.type is TransactionType.WITHDRAWAL or (
        txn.type is TransactionType.TRANSFER and txn.amount < 0
    )


def _shares(totals: dict[str, Decimal], grand_total: Decimal) -> dict[str, float]:
    return {
        day: float(amount / grand_total * 100) if grand_total else 0.0
        for day, amount in totals.items()
    }


def analyze_transaction_patterns(transactions: Sequence[Transaction]) -> TransactionPattern:
    """Compute per-weekday and per-type statistics for a transaction history.

    The averages are per transaction of that type, not per calendar day.

    Args:
        transactions: Transactions of any wallet

    Returns:
        TransactionPattern; a placeholder with ``sufficient_data=False`` when
        there are fewer than five transactions
    """
    if len(transactions) < MIN_PATTERN_TRANSACTIONS:
        return TransactionPattern(sufficient_data=False)

    counts = {day: 0 for day in WEEKDAYS}
    deposits = {day: Decimal(0) for day in WEEKDAYS}
    withdrawals = {day: Decimal(0) for day in WEEKDAYS}

    total_deposits = Decimal(0)
    total_withdrawals = Decimal(0)
    deposit_count = 0
    withdrawal_count = 0
    biggest_deposit = Decimal(0)
    biggest_withdrawal = Decimal(0)

    for txn in transactions:
        day = weekday_name(txn.date)
        counts[day] += 1

        if _is_deposit(txn):
            deposits[day] += txn.amount
            total_deposits += txn.amount
            deposit_count += 1
            biggest_deposit = max(biggest_deposit, txn.amount)
        elif _is_withdrawal(txn):
            amount = abs(txn.amount)
            withdrawals[day] += amount
            total_withdrawals += amount
            withdrawal_count += 1
            biggest_withdrawal = max(biggest_withdrawal, amount)

    # Ties: most active is the earliest such day, least active the latest
    most_active_day = max(WEEKDAYS, key=lambda day: counts[day])
    least_active_day = min(reversed(WEEKDAYS), key=lambda day: counts[day])

    return TransactionPattern(
        sufficient_data=True,
        deposit_days=_shares(deposits, total_deposits),
        withdrawal_days=_shares(withdrawals, total_withdrawals),
        day_counts=counts,
        daily_average_deposit=total_deposits / deposit_count if deposit_count else Decimal(0),
        daily_average_withdrawal=(
            total_withdrawals / withdrawal_count if withdrawal_count else Decimal(0)
        ),
        biggest_deposit=biggest_deposit,
        biggest_withdrawal=biggest_withdrawal,
        most_active_day=most_active_day,
        least_active_day=least_active_day,
    )


def predict_limit_exhaustion(
    wallet: Wallet,
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
) -> LimitExhaustionPrediction:
    """Estimate how many days of recent spending the wallet's limit covers.

    Outflow over the last seven days is averaged over at most seven recent
    transactions, then divided into the remaining limit.

    Args:
        wallet: Wallet to forecast
        transactions: Transaction history; other wallets' entries are ignored
        now: Reference time (defaults to the current UTC time)

    Returns:
        LimitExhaustionPrediction with advice for the user
    """
    if wallet.remaining_limit >= wallet.monthly_limit * HIGH_REMAINING_RATIO:
        return LimitExhaustionPrediction(
            will_exhaust_limit=False,
            recommended_action="Plenty of limit left. Keep using this wallet.",
        )

    wallet_transactions = [t for t in transactions if t.wallet_id == wallet.id]
    if len(wallet_transactions) < MIN_PREDICTION_TRANSACTIONS:
        return LimitExhaustionPrediction(
            will_exhaust_limit=True,
            recommended_action="Not enough transactions for an accurate forecast. Keep an eye on the remaining limit.",
        )

    now = now or utc_now()
    window_start = now - timedelta(days=RECENT_WINDOW_DAYS)
    recent = [t for t in wallet_transactions if t.date >= window_start]

    total_spent = sum((abs(t.amount) for t in recent if t.type.is_outgoing), Decimal(0))
    days_count = min(RECENT_WINDOW_DAYS, len(recent))
    daily_average = total_spent / days_count if days_count else Decimal(0)

    if daily_average == 0:
        return LimitExhaustionPrediction(
            will_exhaust_limit=False,
            recommended_action="No recent outgoing transfers, so no forecast can be made.",
        )

    days_until_exhausted = math.floor(wallet.remaining_limit / daily_average)

    if days_until_exhausted <= 3:
        recommended_action = "Switch the send wallet now to avoid hitting the limit."
    elif days_until_exhausted <= 7:
        recommended_action = "Plan to switch the send wallet within the next week."
    else:
        recommended_action = (
            f"You can keep using this wallet for about {days_until_exhausted} more days."
        )

    return LimitExhaustionPrediction(
        will_exhaust_limit=True,
        recommended_action=recommended_action,
        days_until_exhausted=days_until_exhausted,
    )
