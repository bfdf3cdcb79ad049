"""Transaction domain service: the posting half of the ledger."""

from dataclasses import replace
from datetime import date, datetime, time, UTC
from decimal import Decimal
from enum import Enum
from typing import Optional
import logging

from walletcycle.database.base import Database
from walletcycle.domain.entities import (
    Transaction,
    TransactionType,
    generate_id,
    utc_now,
)
from walletcycle.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    over_limit,
    transaction_not_found,
    wallet_not_found,
)
from walletcycle.domain.notification import NotificationService
from walletcycle.domain.validation import require_text, to_amount

logger = logging.getLogger(__name__)


class OverLimitPolicy(str, Enum):
    """What posting does when an outgoing amount exceeds the remaining limit.

    ALLOW keeps the reference behaviour and lets the remaining limit go
    negative. CLAMP stops it at zero. REJECT refuses the posting.
    """

    ALLOW = "allow"
    CLAMP = "clamp"
    REJECT = "reject"


def _as_datetime(value: date | datetime) -> datetime:
    # Plain dates and naive datetimes are on the local calendar
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    return value.astimezone(UTC)


class TransactionService:
    """Service for posting and managing wallet transactions."""

    def __init__(
        self,
        db: Database,
        notifications: Optional[NotificationService] = None,
        over_limit_policy: OverLimitPolicy = OverLimitPolicy.ALLOW,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            notifications: Service used to surface failures to the user
            over_limit_policy: Handling of outgoing amounts above the remaining limit
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)
        self.over_limit_policy = OverLimitPolicy(over_limit_policy)

    def post_transaction(
        self,
        wallet_id: str,
        type: TransactionType | str,
        amount,
        description: str,
        date: Optional[date | datetime] = None,
        reference: Optional[str] = None,
    ) -> Transaction:
        """Record a transaction and apply it to the wallet.

        A deposit adds to the balance. A withdrawal or transfer subtracts the
        amount from both the balance and the remaining monthly limit.

        Args:
            wallet_id: Owning wallet ID
            type: "deposit", "withdrawal" or "transfer"
            amount: Positive amount
            description: What the money was for
            date: Optional transaction date (defaults to now); a plain date is
                midnight local time
            reference: Optional provider reference

        Returns:
            The recorded transaction

        Raises:
            ValidationError: If input is malformed, or the amount is over the
                limit and the policy is REJECT
            NotFoundError: If wallet doesn't exist
            PersistenceError: If the store fails
        """
        try:
            txn_type = TransactionType(type)
        except ValueError:
            raise ValidationError(
                f"Unknown transaction type '{type}'. Use one of: "
                f"{', '.join(t.value for t in TransactionType)}"
            )
        amount = to_amount(amount, "Amount", positive=True)
        description = require_text(description, "Description")

        wallet = self.db.get_wallet(wallet_id)
        if wallet is None:
            raise NotFoundError(wallet_not_found(wallet_id))

        balance = wallet.balance
        remaining_limit = wallet.remaining_limit
        if txn_type is TransactionType.DEPOSIT:
            balance += amount
        else:
            if amount > remaining_limit and self.over_limit_policy is OverLimitPolicy.REJECT:
                raise ValidationError(over_limit(wallet.name, amount, remaining_limit))
            balance -= amount
            remaining_limit -= amount
            if self.over_limit_policy is OverLimitPolicy.CLAMP:
                remaining_limit = max(Decimal(0), remaining_limit)

        now = utc_now()
        transaction = Transaction(
            id=generate_id(),
            wallet_id=wallet.id,
            type=txn_type,
            amount=amount,
            description=description,
            date=_as_datetime(date) if date is not None else now,
            reference=reference or None,
        )

        try:
            self.db.add_transaction(transaction)
            self.db.put_wallet(
                replace(wallet, balance=balance, remaining_limit=remaining_limit, last_updated=now)
            )
        except PersistenceError as e:
            self.notifications.report_failure("record the transaction", e)
            raise

        if remaining_limit < 0:
            logger.warning(
                "Wallet %s is over its monthly limit by %s", wallet.id, -remaining_limit
            )
        logger.info("Posted %s of %s on wallet %s", txn_type.value, amount, wallet.id)
        return transaction

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: str) -> Transaction:
        """Get transaction by ID or raise NotFoundError."""
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        wallet_id: Optional[str] = None,
        type: Optional[TransactionType | str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        min_amount: Optional[Decimal] = None,
        max_amount: Optional[Decimal] = None,
    ) -> list[Transaction]:
        """List transactions with filters, newest first.

        Args:
            wallet_id: Optional wallet filter
            type: Optional transaction type filter
            start_date: Optional first local calendar day to include
            end_date: Optional last local calendar day to include (whole day)
            min_amount: Optional lower bound on the amount magnitude
            max_amount: Optional upper bound on the amount magnitude

        Returns:
            List of transaction entities
        """
        if wallet_id is not None:
            transactions = self.db.list_transactions_by_wallet(wallet_id)
        else:
            transactions = self.db.list_transactions()

        txn_type = TransactionType(type) if type is not None else None

        def matches(txn: Transaction) -> bool:
            if txn_type is not None and txn.type is not txn_type:
                return False
            day = txn.date.astimezone().date()
            if start_date is not None and day < start_date:
                return False
            if end_date is not None and day > end_date:
                return False
            if min_amount is not None and abs(txn.amount) < min_amount:
                return False
            if max_amount is not None and abs(txn.amount) > max_amount:
                return False
            return True

        return sorted(
            (txn for txn in transactions if matches(txn)),
            key=lambda txn: txn.date,
            reverse=True,
        )

    def update_transaction(
        self,
        transaction_id: str,
        description: Optional[str] = None,
        reference: Optional[str] = None,
    ) -> Transaction:
        """Edit descriptive transaction fields.

        The amount, type, wallet and date are fixed once posted, so an edit
        never touches the wallet balance or limit, nor the weekday history.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If description is blank
        """
        transaction = self.require_transaction(transaction_id)

        changes = {}
        if description is not None:
            changes["description"] = require_text(description, "Description")
        if reference is not None:
            changes["reference"] = reference or None

        if not changes:
            return transaction

        updated = replace(transaction, **changes)
        try:
            self.db.put_transaction(updated)
        except PersistenceError as e:
            self.notifications.report_failure("update the transaction", e)
            raise
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction record.

        The balance and limit change made when it was posted stay in place;
        correct the wallet balance separately if the entry was a mistake.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)

        try:
            self.db.delete_transaction(transaction_id)
        except PersistenceError as e:
            self.notifications.report_failure("delete the transaction", e)
            raise
        logger.info("Deleted transaction %s (wallet totals unchanged)", transaction_id)
