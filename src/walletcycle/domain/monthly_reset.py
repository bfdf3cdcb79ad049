"""Monthly limit reset.

Every wallet gets its full monthly limit back on the first day of each
month. The date of the last reset is kept as a setting so the check can run
on every startup and still reset at most once per calendar month. Dates
are taken from the local calendar, so the first of the month is the user's
first, not UTC's.
"""

from dataclasses import replace
from datetime import date, datetime
from enum import Enum
from typing import Optional
import logging

from walletcycle.database.base import Database
from walletcycle.domain.entities import NotificationType, utc_now
from walletcycle.domain.errors import PersistenceError
from walletcycle.domain.notification import NotificationService

logger = logging.getLogger(__name__)

LAST_RESET_SETTING = "lastMonthlyLimitReset"
RESET_DAY = 1


class ResetState(str, Enum):
    """Whether this month's reset has been applied."""

    PENDING = "pending"
    DONE = "done"


class MonthlyResetService:
    """Service that restores wallet limits at the start of each month."""

    def __init__(self, db: Database, notifications: Optional[NotificationService] = None):
        """Initialize monthly reset service.

        Args:
            db: Database instance
            notifications: Service used to announce resets
        """
        self.db = db
        self.notifications = notifications or NotificationService(db)

    def last_reset_date(self) -> Optional[date]:
        """Return the date of the last applied reset, if any."""
        value = self.db.get_setting(LAST_RESET_SETTING)
        if not value:
            return None
        try:
            return datetime.fromisoformat(str(value)).date()
        except ValueError:
            logger.warning("Ignoring unreadable %s setting: %r", LAST_RESET_SETTING, value)
            return None

    def state(self, today: date) -> ResetState:
        """Return DONE when a reset already ran in today's month."""
        last = self.last_reset_date()
        if last is not None and (last.year, last.month) == (today.year, today.month):
            return ResetState.DONE
        return ResetState.PENDING

    def is_due(self, today: date) -> bool:
        """Return True on the first of the month when no reset ran yet this month."""
        return today.day == RESET_DAY and self.state(today) is ResetState.PENDING

    def reset_monthly_limits(self, now: Optional[datetime] = None) -> int:
        """Restore the full monthly limit of every wallet.

        This runs unconditionally and does not record the reset date; use
        run_if_due for the once-a-month startup check.

        Args:
            now: Timestamp written to each wallet (defaults to now)

        Returns:
            Number of wallets updated
        """
        now = now or utc_now()
        updated = 0
        try:
            for wallet in self.db.list_wallets():
                self.db.put_wallet(
                    replace(wallet, remaining_limit=wallet.monthly_limit, last_updated=now)
                )
                updated += 1
        except PersistenceError as e:
            self.notifications.report_failure("reset the monthly limits", e)
            raise

        if updated > 0:
            self.notifications.announce(
                title="Monthly limits reset",
                message=f"The remaining limit of {updated} wallet{'s' if updated != 1 else ''} was reset.",
                type=NotificationType.INFO,
            )
        logger.info("Reset monthly limits of %d wallets", updated)
        return updated

    def run_if_due(self, today: Optional[date] = None) -> Optional[int]:
        """Reset the limits if this month's reset is due.

        Safe to call on every startup.

        Args:
            today: Current date (defaults to the local calendar date)

        Returns:
            Number of wallets updated, or None when no reset was due
        """
        now = utc_now()
        today = today or now.astimezone().date()
        if not self.is_due(today):
            logger.debug("Monthly reset not due on %s", today)
            return None

        updated = self.reset_monthly_limits(now)
        self.db.set_setting(LAST_RESET_SETTING, today.isoformat())
        return updated

    def force_reset(self, today: Optional[date] = None) -> int:
        """Reset the limits now and record today as this month's reset.

        Returns:
            Number of wallets updated
        """
        now = utc_now()
        today = today or now.astimezone().date()
        updated = self.reset_monthly_limits(now)
        self.db.set_setting(LAST_RESET_SETTING, today.isoformat())
        return updated
