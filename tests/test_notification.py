"""Tests for NotificationService."""

import pytest

from walletcycle.domain.entities import NotificationType
from walletcycle.domain.errors import NotFoundError, PersistenceError, ValidationError


def test_notify_and_list(notification_service):
    """Notifications are stored unread and listed newest first."""
    first = notification_service.notify("First", "One")
    second = notification_service.notify("Second", "Two", NotificationType.WARNING)

    listed = notification_service.list_notifications()

    assert [n.id for n in listed] == [second.id, first.id]
    assert not listed[0].is_read
    assert listed[0].type is NotificationType.WARNING
    assert notification_service.unread_count() == 2


def test_notify_requires_text(notification_service):
    """Empty titles and messages are rejected."""
    with pytest.raises(ValidationError):
        notification_service.notify("", "Body")
    with pytest.raises(ValidationError):
        notification_service.notify("Title", "  ")


def test_mark_as_read(notification_service):
    """Reading one notification leaves the others unread."""
    first = notification_service.notify("First", "One")
    notification_service.notify("Second", "Two")

    notification_service.mark_as_read(first.id)

    assert notification_service.unread_count() == 1
    assert [n.title for n in notification_service.list_notifications(unread_only=True)] == ["Second"]


def test_mark_all_as_read(notification_service):
    """mark_all_as_read reports how many changed."""
    notification_service.notify("First", "One")
    notification_service.notify("Second", "Two")

    assert notification_service.mark_all_as_read() == 2
    assert notification_service.mark_all_as_read() == 0
    assert notification_service.unread_count() == 0


def test_delete_and_clear(notification_service):
    """Notifications can be removed one by one or all at once."""
    first = notification_service.notify("First", "One")
    notification_service.notify("Second", "Two")
    notification_service.notify("Third", "Three")

    notification_service.delete_notification(first.id)
    assert len(notification_service.list_notifications()) == 2

    assert notification_service.clear_notifications() == 2
    assert notification_service.list_notifications() == []


def test_missing_notification(notification_service):
    """Unknown IDs raise NotFoundError."""
    with pytest.raises(NotFoundError):
        notification_service.mark_as_read("missing")
    with pytest.raises(NotFoundError):
        notification_service.delete_notification("missing")


def test_announce_swallows_store_failure(notification_service, temp_db, monkeypatch):
    """A notice that cannot be stored does not fail the caller."""

    def failing_add(notification):
        raise PersistenceError("locked")

    monkeypatch.setattr(temp_db, "add_notification", failing_add)

    assert notification_service.announce("Title", "Body") is None


def test_report_failure_records_error(notification_service):
    """report_failure leaves an error notification naming the operation."""
    notification_service.report_failure("save the wallet", PersistenceError("locked"))

    [notification] = notification_service.list_notifications()
    assert notification.type is NotificationType.ERROR
    assert notification.title == "Operation failed"
    assert notification.message == "Could not save the wallet. Please try again."
