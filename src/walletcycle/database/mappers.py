"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain never sees ORM rows.
SQLite drops timezone information, so datetimes are stored as UTC and given
their UTC tzinfo back on the way out.
"""

from walletcycle.domain import entities as domain
from walletcycle.domain.entities import as_utc
from walletcycle.database.models import (
    Wallet as ORMWallet,
    Transaction as ORMTransaction,
    Notification as ORMNotification,
)


def wallet_to_domain(orm_wallet: ORMWallet) -> domain.Wallet:
    """Convert SQLAlchemy Wallet model to domain Wallet entity."""
    return domain.Wallet(
        id=orm_wallet.id,
        name=orm_wallet.name,
        wallet_type=orm_wallet.wallet_type,
        phone_number=orm_wallet.phone_number,
        sim_slot=orm_wallet.sim_slot,
        pin_code=orm_wallet.pin_code,
        balance=orm_wallet.balance,
        monthly_limit=orm_wallet.monthly_limit,
        remaining_limit=orm_wallet.remaining_limit,
        last_updated=as_utc(orm_wallet.last_updated),
    )


def apply_wallet(orm_wallet: ORMWallet, wallet: domain.Wallet) -> ORMWallet:
    """Copy domain Wallet fields onto a SQLAlchemy Wallet row."""
    orm_wallet.id = wallet.id
    orm_wallet.name = wallet.name
    orm_wallet.wallet_type = wallet.wallet_type
    orm_wallet.phone_number = wallet.phone_number
    orm_wallet.sim_slot = wallet.sim_slot
    orm_wallet.pin_code = wallet.pin_code
    orm_wallet.balance = wallet.balance
    orm_wallet.monthly_limit = wallet.monthly_limit
    orm_wallet.remaining_limit = wallet.remaining_limit
    orm_wallet.last_updated = as_utc(wallet.last_updated)
    return orm_wallet


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        wallet_id=orm_transaction.wallet_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        date=as_utc(orm_transaction.date),
        reference=orm_transaction.reference,
    )


def apply_transaction(
    orm_transaction: ORMTransaction, transaction: domain.Transaction
) -> ORMTransaction:
    """Copy domain Transaction fields onto a SQLAlchemy Transaction row."""
    orm_transaction.id = transaction.id
    orm_transaction.wallet_id = transaction.wallet_id
    orm_transaction.type = transaction.type.value
    orm_transaction.amount = transaction.amount
    orm_transaction.description = transaction.description
    orm_transaction.date = as_utc(transaction.date)
    orm_transaction.reference = transaction.reference
    return orm_transaction


def notification_to_domain(orm_notification: ORMNotification) -> domain.Notification:
    """Convert SQLAlchemy Notification model to domain Notification entity."""
    return domain.Notification(
        id=orm_notification.id,
        title=orm_notification.title,
        message=orm_notification.message,
        type=domain.NotificationType(orm_notification.type),
        date=as_utc(orm_notification.date),
        is_read=orm_notification.is_read,
    )


def apply_notification(
    orm_notification: ORMNotification, notification: domain.Notification
) -> ORMNotification:
    """Copy domain Notification fields onto a SQLAlchemy Notification row."""
    orm_notification.id = notification.id
    orm_notification.title = notification.title
    orm_notification.message = notification.message
    orm_notification.type = notification.type.value
    orm_notification.date = as_utc(notification.date)
    orm_notification.is_read = notification.is_read
    return orm_notification
