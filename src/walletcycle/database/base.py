"""Abstract record store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from walletcycle.domain.entities import Wallet, Transaction, Notification


class Database(ABC):
    """Abstract record store for walletcycle.

    Collections: wallets, transactions (indexed by wallet), notifications and
    settings. Every method either completes or raises PersistenceError.
    replace_collections is the only call that spans several collections; it
    commits all of them or none.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create the collections if they do not exist yet."""
        pass

    # Wallet operations
    @abstractmethod
    def add_wallet(self, wallet: Wallet) -> None:
        """Insert a new wallet."""
        pass

    @abstractmethod
    def put_wallet(self, wallet: Wallet) -> None:
        """Insert or replace a wallet."""
        pass

    @abstractmethod
    def get_wallet(self, wallet_id: str) -> Optional[Wallet]:
        """Get wallet by ID."""
        pass

    @abstractmethod
    def list_wallets(self) -> list[Wallet]:
        """List all wallets in insertion order."""
        pass

    @abstractmethod
    def delete_wallet(self, wallet_id: str) -> None:
        """Delete a wallet. Transactions are not touched."""
        pass

    # Transaction operations
    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> None:
        """Insert a new transaction."""
        pass

    @abstractmethod
    def put_transaction(self, transaction: Transaction) -> None:
        """Insert or replace a transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions."""
        pass

    @abstractmethod
    def list_transactions_by_wallet(self, wallet_id: str) -> list[Transaction]:
        """List transactions through the wallet index."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    # Notification operations
    @abstractmethod
    def add_notification(self, notification: Notification) -> None:
        """Insert a new notification."""
        pass

    @abstractmethod
    def put_notification(self, notification: Notification) -> None:
        """Insert or replace a notification."""
        pass

    @abstractmethod
    def get_notification(self, notification_id: str) -> Optional[Notification]:
        """Get notification by ID."""
        pass

    @abstractmethod
    def list_notifications(self) -> list[Notification]:
        """List all notifications."""
        pass

    @abstractmethod
    def delete_notification(self, notification_id: str) -> None:
        """Delete a notification."""
        pass

    @abstractmethod
    def clear_notifications(self) -> None:
        """Remove every notification."""
        pass

    # Settings operations
    @abstractmethod
    def get_setting(self, key: str) -> Optional[Any]:
        """Get a setting value, or None when unset."""
        pass

    @abstractmethod
    def set_setting(self, key: str, value: Any) -> None:
        """Insert or replace a setting value."""
        pass

    @abstractmethod
    def list_settings(self) -> dict[str, Any]:
        """Return all settings as a key -> value mapping."""
        pass

    # Bulk operations
    @abstractmethod
    def replace_collections(
        self,
        wallets: Optional[list[Wallet]] = None,
        transactions: Optional[list[Transaction]] = None,
        notifications: Optional[list[Notification]] = None,
        settings: Optional[dict[str, Any]] = None,
    ) -> None:
        """Replace the contents of every collection that is not None.

        All replacements are written in one store transaction; on failure
        nothing changes and PersistenceError is raised.
        """
        pass
