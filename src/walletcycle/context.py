"""Application context: one record store and the services built on it."""

from dataclasses import dataclass
from typing import Optional

from walletcycle.advisory.http_client import DEFAULT_TIMEOUT, HTTPAdvisoryClient
from walletcycle.database.base import Database
from walletcycle.domain.advisory import AdvisoryService
from walletcycle.domain.backup import BackupService
from walletcycle.domain.monthly_reset import MonthlyResetService
from walletcycle.domain.notification import NotificationService
from walletcycle.domain.transaction import OverLimitPolicy, TransactionService
from walletcycle.domain.wallet import WalletService


@dataclass
class AppContext:
    """Services sharing one store and one notification channel."""

    db: Database
    wallets: WalletService
    transactions: TransactionService
    notifications: NotificationService
    monthly_reset: MonthlyResetService
    backup: BackupService
    advisory: AdvisoryService

    @classmethod
    def create(
        cls,
        db: Database,
        advisor_url: Optional[str] = None,
        advisor_timeout: float = DEFAULT_TIMEOUT,
        over_limit_policy: OverLimitPolicy = OverLimitPolicy.ALLOW,
    ) -> "AppContext":
        """Wire the services around a connected store.

        Args:
            db: Record store with its schema initialized
            advisor_url: Advisor base URL; None disables the remote advisor
            advisor_timeout: Advisor request timeout in seconds
            over_limit_policy: Handling of outgoing amounts above the remaining limit
        """
        notifications = NotificationService(db)
        client = HTTPAdvisoryClient(advisor_url, timeout=advisor_timeout) if advisor_url else None
        return cls(
            db=db,
            wallets=WalletService(db, notifications),
            transactions=TransactionService(db, notifications, over_limit_policy),
            notifications=notifications,
            monthly_reset=MonthlyResetService(db, notifications),
            backup=BackupService(db, notifications),
            advisory=AdvisoryService(client),
        )
