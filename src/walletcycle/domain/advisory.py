"""Advisory collaborator interface and its fallback-guarded service.

The advisor is an optional remote service that categorizes transactions,
comments on spending patterns, forecasts limit usage and answers free-text
questions. It is never required: AdvisoryService catches
AdvisoryUnavailableError from the client and substitutes a locally computed
or static answer, so no ledger operation ever waits on it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Sequence
import logging
import math

from walletcycle.domain.entities import Transaction, Wallet, utc_now
from walletcycle.domain.errors import AdvisoryUnavailableError
from walletcycle.domain.patterns import MIN_PATTERN_TRANSACTIONS

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Other"
UNAVAILABLE = "Not available"
LARGE_TRANSACTION_FACTOR = Decimal("1.5")
USAGE_WINDOW_DAYS = 14
DEFAULT_FORECAST_DAYS = 30
FORECAST_HORIZON_DAYS = 365
RECENT_WALLET_TRANSACTIONS = 10
RECENT_ASSISTANT_TRANSACTIONS = 20


@dataclass(frozen=True)
class TransactionCategory:
    """Category guessed from a transaction description."""

    category: str
    confidence: float

    @classmethod
    def from_payload(cls, payload: Any) -> "TransactionCategory":
        try:
            confidence = float(payload["confidence"])
            category = str(payload["category"])
        except (KeyError, TypeError, ValueError) as e:
            raise AdvisoryUnavailableError(f"Malformed classification answer: {e}")
        if not 0.0 <= confidence <= 1.0:
            raise AdvisoryUnavailableError(f"Confidence out of range: {confidence}")
        return cls(category=category, confidence=confidence)


@dataclass(frozen=True)
class PatternInsight:
    """Advisor commentary on a transaction history."""

    frequent_days: tuple[str, ...] = ()
    peak_time_of_day: str = UNAVAILABLE
    unusual_activity: bool = False
    category_breakdown: dict[str, float] = field(default_factory=dict)
    average_transaction_size: Decimal = Decimal(0)
    large_transactions: int = 0
    top_counterparties: tuple[str, ...] = ()
    seasonal_patterns: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "PatternInsight":
        try:
            return cls(
                frequent_days=tuple(str(d) for d in payload.get("frequentDays", ())),
                peak_time_of_day=str(payload.get("peakTimeOfDay", UNAVAILABLE)),
                unusual_activity=bool(payload.get("unusualActivity", False)),
                category_breakdown={
                    str(k): float(v) for k, v in payload.get("categoryBreakdown", {}).items()
                },
                average_transaction_size=Decimal(str(payload.get("averageTransactionSize", 0))),
                large_transactions=int(payload.get("largeTransactions", 0)),
                top_counterparties=tuple(str(c) for c in payload.get("topCounterparties", ())),
                seasonal_patterns=tuple(str(s) for s in payload.get("seasonalPatterns", ())),
            )
        except (AttributeError, TypeError, ValueError, ArithmeticError) as e:
            raise AdvisoryUnavailableError(f"Malformed pattern answer: {e}")


@dataclass(frozen=True)
class LimitForecast:
    """Advisor projection of when a wallet's monthly limit runs out."""

    days_until_exhaustion: int
    recommendation: str
    exhaustion_date: Optional[datetime] = None
    daily_usage: Decimal = Decimal(0)
    weekly_usage: Decimal = Decimal(0)
    peak_days: tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "LimitForecast":
        try:
            patterns = payload.get("expectedPatterns") or {}
            exhaustion_date = payload.get("exhaustionDate") or None
            return cls(
                days_until_exhaustion=int(payload["daysUntilExhaustion"]),
                recommendation=str(payload["recommendation"]),
                exhaustion_date=(
                    datetime.fromisoformat(exhaustion_date.replace("Z", "+00:00"))
                    if exhaustion_date
                    else None
                ),
                daily_usage=Decimal(str(patterns.get("dailyUsage", 0))),
                weekly_usage=Decimal(str(patterns.get("weeklyUsage", 0))),
                peak_days=tuple(str(d) for d in patterns.get("peakDays", ())),
            )
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise AdvisoryUnavailableError(f"Malformed forecast answer: {e}")


@dataclass(frozen=True)
class Recommendation:
    """One piece of advice from the advisor."""

    type: str
    title: str
    description: str
    priority: str = "medium"
    action_text: Optional[str] = None
    action_type: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "Recommendation":
        try:
            return cls(
                type=str(payload["type"]),
                title=str(payload["title"]),
                description=str(payload["description"]),
                priority=str(payload.get("priority", "medium")),
                action_text=payload.get("actionText"),
                action_type=payload.get("actionType"),
                timestamp=payload.get("timestamp"),
            )
        except (AttributeError, KeyError, TypeError) as e:
            raise AdvisoryUnavailableError(f"Malformed recommendation: {e}")


def _number(value: Decimal) -> float:
    return float(value)


def wallet_summary(wallet: Wallet) -> dict[str, Any]:
    """Wallet fields shared with the advisor."""
    return {
        "id": wallet.id,
        "name": wallet.name,
        "type": wallet.wallet_type,
        "balance": _number(wallet.balance),
        "monthlyLimit": _number(wallet.monthly_limit),
        "remainingLimit": _number(wallet.remaining_limit),
        "lastUpdated": wallet.last_updated.isoformat(),
    }


def transaction_summary(transaction: Transaction) -> dict[str, Any]:
    """Transaction fields shared with the advisor."""
    return {
        "walletId": transaction.wallet_id,
        "date": transaction.date.isoformat(),
        "amount": _number(transaction.amount),
        "type": transaction.type.value,
        "description": transaction.description,
    }


def _newest_first(transactions: Sequence[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class AdvisoryClient(ABC):
    """Transport to the remote advisor.

    Every method raises AdvisoryUnavailableError when the advisor cannot be
    reached or its answer cannot be understood.
    """

    @abstractmethod
    def classify_transaction(self, description: str) -> TransactionCategory:
        """Guess a category from a transaction description."""
        pass

    @abstractmethod
    def analyze_patterns(self, transactions: list[dict[str, Any]]) -> PatternInsight:
        """Comment on a transaction history."""
        pass

    @abstractmethod
    def predict_limit(
        self, wallet: dict[str, Any], transactions: list[dict[str, Any]]
    ) -> LimitForecast:
        """Forecast when a wallet's limit runs out."""
        pass

    @abstractmethod
    def smart_recommendations(
        self, wallets: list[dict[str, Any]], transactions: dict[str, list[dict[str, Any]]]
    ) -> list[Recommendation]:
        """Suggest actions for a set of wallets."""
        pass

    @abstractmethod
    def ask(
        self, question: str, wallets: list[dict[str, Any]], transactions: list[dict[str, Any]]
    ) -> str:
        """Answer a free-text question about the user's wallets."""
        pass


class AdvisoryService:
    """Advisor front end that always returns an answer."""

    def __init__(self, client: Optional[AdvisoryClient] = None):
        """Initialize advisory service.

        Args:
            client: Advisor transport; None means only local fallbacks are used
        """
        self.client = client

    @property
    def available(self) -> bool:
        return self.client is not None

    def _call(self, method: str, *args):
        if self.client is None:
            raise AdvisoryUnavailableError("No advisor configured")
        try:
            return getattr(self.client, method)(*args)
        except AdvisoryUnavailableError as e:
            logger.warning("Advisor %s failed, using fallback: %s", method, e)
            raise

    def classify_transaction(self, description: str) -> TransactionCategory:
        """Categorize a description, or return ("Other", 0.0)."""
        try:
            return self._call("classify_transaction", description)
        except AdvisoryUnavailableError:
            return TransactionCategory(category=FALLBACK_CATEGORY, confidence=0.0)

    def analyze_patterns(self, transactions: Sequence[Transaction]) -> PatternInsight:
        """Ask for pattern commentary on five or more transactions.

        Shorter histories get a placeholder without contacting the advisor.
        On failure, the average size and the count of large transactions are
        computed locally.
        """
        if len(transactions) < MIN_PATTERN_TRANSACTIONS:
            return PatternInsight(frequent_days=(UNAVAILABLE,))

        payload = [transaction_summary(t) for t in transactions]
        try:
            return self._call("analyze_patterns", payload)
        except AdvisoryUnavailableError:
            amounts = [t.amount for t in transactions]
            average = sum(amounts, Decimal(0)) / len(amounts)
            return PatternInsight(
                frequent_days=(UNAVAILABLE,),
                average_transaction_size=average,
                large_transactions=sum(1 for a in amounts if a > average * LARGE_TRANSACTION_FACTOR),
            )

    def predict_limit(
        self,
        wallet: Wallet,
        transactions: Sequence[Transaction],
        now: Optional[datetime] = None,
    ) -> LimitForecast:
        """Forecast limit exhaustion, falling back to a two-week usage average."""
        payload = [
            {"date": t.date.isoformat(), "amount": _number(t.amount), "type": t.type.value}
            for t in transactions
        ]
        try:
            return self._call("predict_limit", wallet_summary(wallet), payload)
        except AdvisoryUnavailableError:
            outflow = sum((t.amount for t in transactions if t.type.is_outgoing), Decimal(0))
            daily_usage = outflow / USAGE_WINDOW_DAYS
            if daily_usage > 0:
                days = math.floor(wallet.remaining_limit / daily_usage)
            else:
                days = DEFAULT_FORECAST_DAYS
            now = now or utc_now()
            return LimitForecast(
                days_until_exhaustion=days,
                recommendation="Keep an eye on the daily usage of this wallet.",
                exhaustion_date=(
                    now + timedelta(days=days) if days < FORECAST_HORIZON_DAYS else None
                ),
                daily_usage=daily_usage,
                weekly_usage=daily_usage * 7,
                peak_days=(UNAVAILABLE,),
            )

    def smart_recommendations(
        self, wallets: Sequence[Wallet], transactions: Sequence[Transaction]
    ) -> list[Recommendation]:
        """Get advice for the wallet set; one generic tip when the advisor fails."""
        if not wallets:
            return []

        recent = {
            w.id: [
                transaction_summary(t)
                for t in _newest_first([t for t in transactions if t.wallet_id == w.id])[
                    :RECENT_WALLET_TRANSACTIONS
                ]
            ]
            for w in wallets
        }
        try:
            return self._call(
                "smart_recommendations",
                [wallet_summary(w) for w in wallets],
                recent,
            )
        except AdvisoryUnavailableError:
            return [
                Recommendation(
                    type="insight",
                    title="Monitor your usage",
                    description=(
                        "Track the daily usage of your wallets to manage their monthly limits better."
                    ),
                    priority="medium",
                    timestamp=utc_now().isoformat(),
                )
            ]

    def ask(
        self, question: str, wallets: Sequence[Wallet], transactions: Sequence[Transaction]
    ) -> str:
        """Answer a question about the wallets, or apologize when the advisor fails."""
        if not question or not question.strip():
            return "Please enter a question so I can help you."

        recent = [
            transaction_summary(t)
            for t in _newest_first(transactions)[:RECENT_ASSISTANT_TRANSACTIONS]
        ]
        try:
            return self._call(
                "ask",
                question.strip(),
                [wallet_summary(w) for w in wallets],
                recent,
            )
        except AdvisoryUnavailableError:
            return "Sorry, I could not process your question right now. Please try again later."
