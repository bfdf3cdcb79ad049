"""JSON backup and restore of the whole record store.

The document layout is::

    {"wallets": [...], "transactions": [...], "notifications": [...], "settings": {...}}

with camelCase record keys. Restoring replaces each collection present in the
document and leaves absent ones untouched. Every record is checked before the
first collection is cleared, and all replacements are committed together,
so a malformed document or a failed write changes nothing. Wallet ids are
collected before anything is written: a transaction must belong to a wallet
that exists after the restore, and a wallets-only restore drops the stored
transactions of wallets it removes.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional
import json
import logging

from walletcycle.database.base import Database
from walletcycle.domain.entities import (
    ImportSummary,
    Notification,
    NotificationType,
    Transaction,
    TransactionType,
    Wallet,
    as_utc,
    generate_id,
    utc_now,
)
from walletcycle.domain.errors import PersistenceError, ValidationError
from walletcycle.domain.notification import NotificationService
from walletcycle.domain.validation import validate_sim_slot

logger = logging.getLogger(__name__)


def _money(value: Decimal) -> float | int:
    """Render a Decimal as a JSON number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def wallet_to_record(wallet: Wallet) -> dict[str, Any]:
    return {
        "id": wallet.id,
        "name": wallet.name,
        "type": wallet.wallet_type,
        "simNumber": str(wallet.sim_slot),
        "phoneNumber": wallet.phone_number,
        "pinCode": wallet.pin_code,
        "balance": _money(wallet.balance),
        "monthlyLimit": _money(wallet.monthly_limit),
        "remainingLimit": _money(wallet.remaining_limit),
        "lastUpdated": wallet.last_updated.isoformat(),
    }


def transaction_to_record(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "walletId": transaction.wallet_id,
        "type": transaction.type.value,
        "amount": _money(transaction.amount),
        "description": transaction.description,
        "date": transaction.date.isoformat(),
        "reference": transaction.reference,
    }


def notification_to_record(notification: Notification) -> dict[str, Any]:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "type": notification.type.value,
        "date": notification.date.isoformat(),
        "isRead": notification.is_read,
    }


def _field(record: dict, key: str, kind: str, index: int) -> Any:
    if key not in record or record[key] is None:
        raise ValidationError(f"{kind} #{index + 1} is missing '{key}'")
    return record[key]


def _decimal(record: dict, key: str, kind: str, index: int, allow_negative: bool = True) -> Decimal:
    value = _field(record, key, kind, index)
    if isinstance(value, bool):
        raise ValidationError(f"{kind} #{index + 1} has a non-numeric '{key}'")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{kind} #{index + 1} has a non-numeric '{key}': {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"{kind} #{index + 1} has a non-finite '{key}'")
    if not allow_negative and amount < 0:
        raise ValidationError(f"{kind} #{index + 1} has a negative '{key}'")
    return amount


def _timestamp(record: dict, key: str, kind: str, index: int, default: Optional[datetime] = None) -> datetime:
    value = record.get(key)
    if value is None and default is not None:
        return default
    if value is None:
        raise ValidationError(f"{kind} #{index + 1} is missing '{key}'")
    try:
        return as_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        raise ValidationError(f"{kind} #{index + 1} has an invalid '{key}': {value!r}")


def wallet_from_record(record: dict, index: int = 0) -> Wallet:
    """Build a Wallet from a backup record.

    The remaining limit is clamped into [0, monthlyLimit]; ledgers that let
    postings overdraw the limit export negative values.

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    kind = "Wallet"
    try:
        sim_slot = validate_sim_slot(record.get("simNumber", 1))
    except ValidationError as e:
        raise ValidationError(f"{kind} #{index + 1}: {e}")
    monthly_limit = _decimal(record, "monthlyLimit", kind, index)
    if monthly_limit <= 0:
        raise ValidationError(f"{kind} #{index + 1} has a non-positive 'monthlyLimit'")
    remaining_limit = _decimal(record, "remainingLimit", kind, index)
    clamped = min(max(remaining_limit, Decimal(0)), monthly_limit)
    if clamped != remaining_limit:
        logger.warning(
            "%s #%d: remaining limit %s clamped to %s", kind, index + 1, remaining_limit, clamped
        )
    return Wallet(
        id=str(_field(record, "id", kind, index)),
        name=str(_field(record, "name", kind, index)),
        wallet_type=str(record.get("type") or "vodafone-cash"),
        phone_number=str(_field(record, "phoneNumber", kind, index)),
        sim_slot=sim_slot,
        pin_code=record.get("pinCode") or None,
        balance=_decimal(record, "balance", kind, index, allow_negative=False),
        monthly_limit=monthly_limit,
        remaining_limit=clamped,
        last_updated=_timestamp(record, "lastUpdated", kind, index, default=utc_now()),
    )


def transaction_from_record(record: dict, index: int = 0) -> Transaction:
    """Build a Transaction from a backup record.

    Amounts keep their sign; older backups store withdrawals as negatives.

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    kind = "Transaction"
    try:
        txn_type = TransactionType(_field(record, "type", kind, index))
    except ValueError:
        raise ValidationError(f"{kind} #{index + 1} has an unknown type {record.get('type')!r}")
    return Transaction(
        id=str(_field(record, "id", kind, index)),
        wallet_id=str(_field(record, "walletId", kind, index)),
        type=txn_type,
        amount=_decimal(record, "amount", kind, index),
        description=str(record.get("description") or ""),
        date=_timestamp(record, "date", kind, index),
        reference=record.get("reference") or None,
    )


def notification_from_record(record: dict, index: int = 0) -> Notification:
    """Build a Notification from a backup record.

    Raises:
        ValidationError: If a required field is missing or malformed
    """
    kind = "Notification"
    try:
        notification_type = NotificationType(record.get("type") or NotificationType.INFO)
    except ValueError:
        raise ValidationError(f"{kind} #{index + 1} has an unknown type {record.get('type')!r}")
    is_read = record.get("isRead", False)
    if not isinstance(is_read, bool):
        raise ValidationError(f"{kind} #{index + 1} has a non-boolean 'isRead': {is_read!r}")
    return Notification(
        id=str(record.get("id") or generate_id()),
        title=str(_field(record, "title", kind, index)),
        message=str(_field(record, "message", kind, index)),
        type=notification_type,
        date=_timestamp(record, "date", kind, index, default=utc_now()),
        is_read=is_read,
    )


def _check_unique_ids(kind: str, records: list) -> None:
    seen = set()
    for index, record in enumerate(records):
        if record.id in seen:
            raise ValidationError(f"{kind} #{index + 1} repeats the id '{record.id}'")
        seen.add(record.id)


def _records(document: dict, key: str) -> list:
    records = document[key]
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValidationError(f"'{key}' must be a list of objects")
    return records


class BackupService:
    """Service for exporting and restoring all stored data."""

    def __init__(self, db: Database, notifications: Optional[NotificationService] = None):
        """Initialize backup service.

        Args:
            db: Database instance
            notifications: Service used to surface failures
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def export_data(self) -> dict[str, Any]:
        """Return every collection as a JSON-serializable document."""
        return {
            "wallets": [wallet_to_record(w) for w in self.db.list_wallets()],
            "transactions": [transaction_to_record(t) for t in self.db.list_transactions()],
            "notifications": [notification_to_record(n) for n in self.db.list_notifications()],
            "settings": self.db.list_settings(),
        }

    def export_to_file(self, path: str | Path) -> dict[str, Any]:
        """Write the backup document to a JSON file.

        Returns:
            The exported document
        """
        document = self.export_data()
        path = Path(path)
        path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info(
            "Exported %d wallets and %d transactions to %s",
            len(document["wallets"]),
            len(document["transactions"]),
            path,
        )
        return document

    def import_data(self, document: dict[str, Any]) -> ImportSummary:
        """Replace stored collections with those in a backup document.

        Args:
            document: Backup document; any subset of the four collections

        Returns:
            ImportSummary with a count for each collection that was present

        Raises:
            ValidationError: If the document or one of its records is malformed
            PersistenceError: If the store fails while writing
        """
        if not isinstance(document, dict):
            raise ValidationError("Backup document must be a JSON object")

        wallets = transactions = notifications = settings = None
        if "wallets" in document:
            wallets = [wallet_from_record(r, i) for i, r in enumerate(_records(document, "wallets"))]
        if "transactions" in document:
            transactions = [
                transaction_from_record(r, i)
                for i, r in enumerate(_records(document, "transactions"))
            ]
        if "notifications" in document:
            notifications = [
                notification_from_record(r, i)
                for i, r in enumerate(_records(document, "notifications"))
            ]
        if "settings" in document:
            settings = document["settings"]
            if not isinstance(settings, dict):
                raise ValidationError("'settings' must be an object")

        for kind, records in (
            ("Wallet", wallets),
            ("Transaction", transactions),
            ("Notification", notifications),
        ):
            if records is not None:
                _check_unique_ids(kind, records)

        if wallets is not None:
            wallet_ids = {w.id for w in wallets}
        else:
            wallet_ids = {w.id for w in self.db.list_wallets()}
        if transactions is not None:
            for index, transaction in enumerate(transactions):
                if transaction.wallet_id not in wallet_ids:
                    raise ValidationError(
                        f"Transaction #{index + 1} refers to unknown wallet '{transaction.wallet_id}'"
                    )
            written_transactions = transactions
        elif wallets is not None:
            stored = self.db.list_transactions()
            written_transactions = [t for t in stored if t.wallet_id in wallet_ids]
            if len(written_transactions) == len(stored):
                written_transactions = None
            else:
                logger.info(
                    "Dropping %d transactions of wallets not in the backup",
                    len(stored) - len(written_transactions),
                )
        else:
            written_transactions = None

        try:
            self.db.replace_collections(
                wallets=wallets,
                transactions=written_transactions,
                notifications=notifications,
                settings=settings,
            )
        except PersistenceError as e:
            self.notifications.report_failure("import the backup", e)
            raise

        summary = ImportSummary(
            wallets=len(wallets) if wallets is not None else None,
            transactions=len(transactions) if transactions is not None else None,
            notifications=len(notifications) if notifications is not None else None,
            settings=len(settings) if settings is not None else None,
        )
        logger.info("Imported backup: %s", summary.as_dict())
        return summary

    def import_from_file(self, path: str | Path) -> ImportSummary:
        """Restore a backup from a JSON file.

        Raises:
            ValidationError: If the file is not valid JSON or is malformed
        """
        path = Path(path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValidationError(f"{path} is not a valid backup file: {e}")
        return self.import_data(document)
