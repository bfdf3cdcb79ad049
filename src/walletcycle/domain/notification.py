"""Notification domain service."""

from dataclasses import replace
from typing import Optional
import logging

from walletcycle.database.base import Database
from walletcycle.domain.entities import (
    Notification,
    NotificationType,
    generate_id,
    utc_now,
)
from walletcycle.domain.errors import (
    NotFoundError,
    PersistenceError,
    ValidationError,
    notification_not_found,
)

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for recording and reading user notifications."""

    def __init__(self, db: Database):
        """Initialize notification service.

        Args:
            db: Database instance
        """
        self.db = db

    def notify(
        self, title: str, message: str, type: NotificationType = NotificationType.INFO
    ) -> Notification:
        """Record a new unread notification.

        Args:
            title: Short title
            message: Notification body
            type: Severity of the notification

        Returns:
            The stored notification

        Raises:
            ValidationError: If title or message is empty
        """
        if not title or not title.strip():
            raise ValidationError("Notification title is required")
        if not message or not message.strip():
            raise ValidationError("Notification message is required")

        notification = Notification(
            id=generate_id(),
            title=title.strip(),
            message=message.strip(),
            type=NotificationType(type),
            date=utc_now(),
            is_read=False,
        )
        self.db.add_notification(notification)
        return notification

    def announce(
        self, title: str, message: str, type: NotificationType = NotificationType.INFO
    ) -> Optional[Notification]:
        """Record a notice about an operation that already completed.

        A store failure here is logged and None is returned; the completed
        operation is not undone because its notice could not be written.
        """
        try:
            return self.notify(title, message, type)
        except PersistenceError:
            logger.exception("Could not record notification '%s'", title)
            return None

    def report_failure(self, operation: str, error: PersistenceError) -> None:
        """Log a store failure and tell the user the operation did not complete.

        The notification itself is best effort: when the store is down it
        cannot be written either, and the original error is what the caller
        sees.
        """
        logger.error("%s failed: %s", operation, error)
        try:
            self.notify(
                title="Operation failed",
                message=f"Could not {operation}. Please try again.",
                type=NotificationType.ERROR,
            )
        except PersistenceError:
            logger.exception("Could not record failure notification for %s", operation)

    def list_notifications(self, unread_only: bool = False) -> list[Notification]:
        """List notifications, newest first.

        Args:
            unread_only: If True, skip notifications already read

        Returns:
            List of notification entities
        """
        notifications = self.db.list_notifications()
        if unread_only:
            notifications = [n for n in notifications if not n.is_read]
        return sorted(notifications, key=lambda n: n.date, reverse=True)

    def unread_count(self) -> int:
        """Return the number of unread notifications."""
        return sum(1 for n in self.db.list_notifications() if not n.is_read)

    def mark_as_read(self, notification_id: str) -> Notification:
        """Flag a notification as read.

        Raises:
            NotFoundError: If notification doesn't exist
        """
        notification = self.db.get_notification(notification_id)
        if notification is None:
            raise NotFoundError(notification_not_found(notification_id))

        updated = replace(notification, is_read=True)
        self.db.put_notification(updated)
        return updated

    def mark_all_as_read(self) -> int:
        """Flag every unread notification as read. Returns how many changed."""
        changed = 0
        for notification in self.db.list_notifications():
            if not notification.is_read:
                self.db.put_notification(replace(notification, is_read=True))
                changed += 1
        return changed

    def delete_notification(self, notification_id: str) -> None:
        """Delete a notification.

        Raises:
            NotFoundError: If notification doesn't exist
        """
        if self.db.get_notification(notification_id) is None:
            raise NotFoundError(notification_not_found(notification_id))
        self.db.delete_notification(notification_id)

    def clear_notifications(self) -> int:
        """Delete every notification. Returns how many were removed."""
        count = len(self.db.list_notifications())
        self.db.clear_notifications()
        return count
