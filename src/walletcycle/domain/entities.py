"""Domain model entities for walletcycle.

These are pure data classes representing business concepts, independent of
the record store. Entities are immutable: every ledger mutation builds a new
instance, writes it to the store and hands it back to the caller.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional
import uuid

DEFAULT_MONTHLY_LIMIT = Decimal("200000")

WALLET_TYPES = {
    "vodafone-cash": "Vodafone Cash",
    "etisalat-cash": "Etisalat Cash",
    "orange-cash": "Orange Cash",
    "we-cash": "WE Cash",
}

NOT_AVAILABLE = "N/A"


def generate_id() -> str:
    """Return a new opaque record identifier."""
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def round_percentage(value: Decimal) -> int:
    """Round a percentage to a whole number, halves away from zero."""
    return int(Decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TransactionType(str, Enum):
    """Kind of money movement recorded against a wallet."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    TRANSFER = "transfer"

    @property
    def is_outgoing(self) -> bool:
        """Whether posting this type consumes the monthly transfer limit."""
        return self in (TransactionType.WITHDRAWAL, TransactionType.TRANSFER)


class NotificationType(str, Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Wallet:
    """Mobile-money wallet domain entity."""

    id: str
    name: str
    wallet_type: str
    phone_number: str
    sim_slot: int
    pin_code: Optional[str]
    balance: Decimal
    monthly_limit: Decimal
    remaining_limit: Decimal
    last_updated: datetime

    @property
    def remaining_percentage(self) -> Decimal:
        """Remaining limit as a percentage of the monthly limit."""
        if self.monthly_limit == 0:
            return Decimal(0)
        return self.remaining_limit / self.monthly_limit * 100

    @property
    def used_percentage(self) -> Decimal:
        """Consumed share of the monthly limit, in percent."""
        return 100 - self.remaining_percentage


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is a non-negative magnitude; the direction is implied by ``type``.
    """

    id: str
    wallet_id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: datetime
    reference: Optional[str] = None


@dataclass(frozen=True)
class Notification:
    """Notification surfaced to the user after ledger or reset side effects."""

    id: str
    title: str
    message: str
    type: NotificationType
    date: datetime
    is_read: bool = False


@dataclass(frozen=True)
class LimitWarning:
    """A wallet whose remaining limit dropped under the warning threshold."""

    wallet_id: str
    name: str
    remaining_percentage: Decimal


@dataclass(frozen=True)
class TransactionPattern:
    """Day-of-week and flow statistics computed from transaction history."""

    sufficient_data: bool
    deposit_days: dict[str, float] = field(default_factory=dict)
    withdrawal_days: dict[str, float] = field(default_factory=dict)
    day_counts: dict[str, int] = field(default_factory=dict)
    daily_average_deposit: Decimal = Decimal(0)
    daily_average_withdrawal: Decimal = Decimal(0)
    biggest_deposit: Decimal = Decimal(0)
    biggest_withdrawal: Decimal = Decimal(0)
    most_active_day: str = NOT_AVAILABLE
    least_active_day: str = NOT_AVAILABLE


@dataclass(frozen=True)
class LimitExhaustionPrediction:
    """Projection of when a wallet will run out of monthly limit."""

    will_exhaust_limit: bool
    recommended_action: str
    days_until_exhausted: Optional[int] = None


@dataclass(frozen=True)
class ImportSummary:
    """Counts of records restored from a backup document."""

    wallets: Optional[int] = None
    transactions: Optional[int] = None
    notifications: Optional[int] = None
    settings: Optional[int] = None

    def as_dict(self) -> dict[str, Any]:
        """Return only the collections that were present in the document."""
        return {
            key: value
            for key, value in (
                ("wallets", self.wallets),
                ("transactions", self.transactions),
                ("notifications", self.notifications),
                ("settings", self.settings),
            )
            if value is not None
        }
