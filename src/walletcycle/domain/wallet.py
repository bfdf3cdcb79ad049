"""Wallet domain service: the wallet half of the ledger."""

from dataclasses import replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
import logging

from walletcycle.database.base import Database
from walletcycle.domain.entities import (
    DEFAULT_MONTHLY_LIMIT,
    NotificationType,
    Wallet,
    generate_id,
    utc_now,
)
from walletcycle.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    wallet_delete_incomplete,
    wallet_not_found,
)
from walletcycle.domain.notification import NotificationService
from walletcycle.domain.validation import (
    require_text,
    to_amount,
    validate_phone_number,
    validate_sim_slot,
    validate_wallet_type,
)

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("date", "created", "name", "balance-asc", "balance-desc", "remaining-limit")


def rescale_remaining_limit(
    remaining_limit: Decimal, old_monthly_limit: Decimal, new_monthly_limit: Decimal
) -> Decimal:
    """Carry the remaining share of a limit over to a new monthly limit.

    The used percentage is preserved rather than the absolute amount, rounded
    half-up to a whole unit and kept within [0, new_monthly_limit].
    """
    if old_monthly_limit == 0:
        return new_monthly_limit
    scaled = (new_monthly_limit * (remaining_limit / old_monthly_limit)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return min(new_monthly_limit, max(Decimal(0), scaled))


class WalletService:
    """Service for managing wallets and their balance/limit invariant."""

    def __init__(self, db: Database, notifications: Optional[NotificationService] = None):
        """Initialize wallet service.

        Args:
            db: Database instance
            notifications: Service used to surface side effects to the user
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def create_wallet(
        self,
        name: str,
        phone_number: str,
        balance=Decimal(0),
        monthly_limit=DEFAULT_MONTHLY_LIMIT,
        wallet_type: str = "vodafone-cash",
        sim_slot: int = 1,
        pin_code: Optional[str] = None,
    ) -> Wallet:
        """Create a new wallet with its full monthly limit available.

        Args:
            name: Display name (usually the phone it lives on)
            phone_number: 11-digit phone number
            balance: Opening balance
            monthly_limit: Monthly transfer cap
            wallet_type: Provider kind (e.g., "vodafone-cash")
            sim_slot: SIM slot holding the line (1 or 2)
            pin_code: Optional wallet PIN, kept for display only

        Returns:
            The created wallet

        Raises:
            ValidationError: If any field is missing or malformed
        """
        monthly_limit = to_amount(monthly_limit, "Monthly limit", positive=True)
        wallet = Wallet(
            id=generate_id(),
            name=require_text(name, "Wallet name"),
            wallet_type=validate_wallet_type(wallet_type),
            phone_number=validate_phone_number(phone_number),
            sim_slot=validate_sim_slot(sim_slot),
            pin_code=pin_code or None,
            balance=to_amount(balance, "Balance"),
            monthly_limit=monthly_limit,
            remaining_limit=monthly_limit,
            last_updated=utc_now(),
        )

        try:
            self.db.add_wallet(wallet)
        except PersistenceError as e:
            self.notifications.report_failure("create the wallet", e)
            raise

        logger.info("Created wallet %s (%s)", wallet.id, wallet.name)
        return wallet

    def get_wallet(self, wallet_id: str) -> Optional[Wallet]:
        """Get wallet by ID.

        Args:
            wallet_id: Wallet ID

        Returns:
            Wallet entity or None if not found
        """
        return self.db.get_wallet(wallet_id)

    def require_wallet(self, wallet_id: str) -> Wallet:
        """Get wallet by ID or raise NotFoundError."""
        wallet = self.db.get_wallet(wallet_id)
        if wallet is None:
            raise NotFoundError(wallet_not_found(wallet_id))
        return wallet

    def list_wallets(self, sort_by: str = "date", wallet_type: Optional[str] = None) -> list[Wallet]:
        """List wallets.

        Args:
            sort_by: One of "date" (most recently updated first), "created"
                (order the wallets were added), "name",
                "balance-asc", "balance-desc", "remaining-limit"
            wallet_type: Optional provider kind filter

        Returns:
            List of wallet entities
        """
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(f"Unknown sort option '{sort_by}'. Use one of: {', '.join(SORT_OPTIONS)}")

        wallets = self.db.list_wallets()
        if wallet_type is not None:
            wallets = [w for w in wallets if w.wallet_type == wallet_type]

        if sort_by == "created":
            return wallets
        if sort_by == "name":
            return sorted(wallets, key=lambda w: w.name.lower())
        if sort_by == "balance-asc":
            return sorted(wallets, key=lambda w: w.balance)
        if sort_by == "balance-desc":
            return sorted(wallets, key=lambda w: w.balance, reverse=True)
        if sort_by == "remaining-limit":
            return sorted(wallets, key=lambda w: w.remaining_limit, reverse=True)
        return sorted(wallets, key=lambda w: w.last_updated, reverse=True)

    def update_wallet_details(
        self,
        wallet_id: str,
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
        sim_slot: Optional[int] = None,
        pin_code: Optional[str] = None,
        wallet_type: Optional[str] = None,
    ) -> Wallet:
        """Edit descriptive wallet fields. Balance and limits are untouched.

        Raises:
            NotFoundError: If wallet doesn't exist
            ValidationError: If a provided field is malformed
        """
        wallet = self.require_wallet(wallet_id)

        changes = {}
        if name is not None:
            changes["name"] = require_text(name, "Wallet name")
        if phone_number is not None:
            changes["phone_number"] = validate_phone_number(phone_number)
        if sim_slot is not None:
            changes["sim_slot"] = validate_sim_slot(sim_slot)
        if pin_code is not None:
            changes["pin_code"] = pin_code or None
        if wallet_type is not None:
            changes["wallet_type"] = validate_wallet_type(wallet_type)

        if not changes:
            return wallet

        updated = replace(wallet, last_updated=utc_now(), **changes)
        self._save(updated, "update the wallet")
        return updated

    def edit_wallet_limits(self, wallet_id: str, new_monthly_limit) -> Wallet:
        """Change a wallet's monthly limit, rescaling what remains of it.

        A wallet that used half of a 200,000 limit and moves to a 100,000
        limit keeps 50,000 remaining.

        Args:
            wallet_id: Wallet ID
            new_monthly_limit: New monthly transfer cap

        Returns:
            Updated wallet (unchanged if the limit is the same)

        Raises:
            NotFoundError: If wallet doesn't exist
            ValidationError: If the new limit is not a positive amount
        """
        new_monthly_limit = to_amount(new_monthly_limit, "Monthly limit", positive=True)
        wallet = self.require_wallet(wallet_id)

        if new_monthly_limit == wallet.monthly_limit:
            return wallet

        updated = replace(
            wallet,
            monthly_limit=new_monthly_limit,
            remaining_limit=rescale_remaining_limit(
                wallet.remaining_limit, wallet.monthly_limit, new_monthly_limit
            ),
            last_updated=utc_now(),
        )
        self._save(updated, "change the monthly limit")
        logger.info(
            "Wallet %s limit %s -> %s, remaining %s -> %s",
            wallet.id,
            wallet.monthly_limit,
            updated.monthly_limit,
            wallet.remaining_limit,
            updated.remaining_limit,
        )
        return updated

    def correct_balance(self, wallet_id: str, new_balance) -> Wallet:
        """Set a wallet's balance to the value observed on the phone.

        A reduction is treated as money that left the wallet, so it is taken
        off the remaining limit as well (never below zero). An increase leaves
        the limit alone.

        Args:
            wallet_id: Wallet ID
            new_balance: Observed balance

        Returns:
            Updated wallet

        Raises:
            NotFoundError: If wallet doesn't exist
            ValidationError: If new_balance is negative
        """
        new_balance = to_amount(new_balance, "Balance")
        wallet = self.require_wallet(wallet_id)

        difference = new_balance - wallet.balance
        remaining_limit = wallet.remaining_limit
        if difference < 0:
            remaining_limit = max(Decimal(0), wallet.remaining_limit + difference)

        updated = replace(
            wallet,
            balance=new_balance,
            remaining_limit=remaining_limit,
            last_updated=utc_now(),
        )
        self._save(updated, "correct the balance")
        logger.info("Wallet %s balance corrected by %s", wallet.id, difference)

        self.notifications.announce(
            title="Balance updated",
            message=(
                f"Balance of wallet '{wallet.name}' changed from {wallet.balance} "
                f"to {new_balance} ({difference:+})."
            ),
            type=NotificationType.INFO,
        )
        return updated

    def delete_wallet(self, wallet_id: str) -> int:
        """Delete a wallet together with all of its transactions.

        Transactions go first. If the wallet row then fails to delete, the
        error says so and calling this again finishes the job.

        Args:
            wallet_id: Wallet ID to delete

        Returns:
            Number of transactions removed

        Raises:
            NotFoundError: If wallet doesn't exist
            PersistenceError: If the store fails part-way
        """
        wallet = self.require_wallet(wallet_id)

        removed = 0
        try:
            for transaction in self.db.list_transactions_by_wallet(wallet_id):
                self.db.delete_transaction(transaction.id)
                removed += 1
        except PersistenceError as e:
            self.notifications.report_failure("delete the wallet transactions", e)
            raise

        try:
            self.db.delete_wallet(wallet_id)
        except PersistenceError as e:
            self.notifications.report_failure("delete the wallet", e)
            raise PersistenceError(wallet_delete_incomplete(wallet_id, removed)) from e

        logger.info("Deleted wallet %s and %d transactions", wallet_id, removed)
        self.notifications.announce(
            title="Wallet deleted",
            message=f"Wallet '{wallet.name}' and its {removed} transactions were deleted.",
            type=NotificationType.SUCCESS,
        )
        return removed

    def _save(self, wallet: Wallet, operation: str) -> None:
        try:
            self.db.put_wallet(wallet)
        except PersistenceError as e:
            self.notifications.report_failure(operation, e)
            raise
