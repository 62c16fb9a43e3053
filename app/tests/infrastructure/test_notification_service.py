from datetime import datetime, timedelta, timezone

import pytest

from infrastructure.exceptions import NotificationNotFoundError
from infrastructure.notifications import (
    NotificationPriority,
    NotificationService,
    NotificationStatus,
    NotificationStore,
    NotificationType,
)
from infrastructure.notifications.models import utcnow
from tests.factories.notifications import make_notification_spec


@pytest.mark.unit
class TestCreateNotification:
    async def test_created_notification_is_dispatched(
        self, notification_service, notification_store, presenter
    ):
        notification = await notification_service.create_notification(
            make_notification_spec()
        )

        assert notification.status == NotificationStatus.PENDING
        assert (await notification_store.get(notification.id)).status == (
            NotificationStatus.SENT
        )
        assert [n.id for n, _ in presenter.presented] == [notification.id]

    async def test_subscribers_hear_creation_and_dispatch(self, notification_service):
        received = []
        notification_service.subscribe("nurse-1", received.append)

        notification = await notification_service.create_notification(
            make_notification_spec()
        )

        assert [n.id for n in received] == [notification.id, notification.id]
        assert [n.status for n in received] == [
            NotificationStatus.PENDING,
            NotificationStatus.SENT,
        ]

    async def test_empty_message_is_rejected(self, notification_service):
        with pytest.raises(ValueError):
            await notification_service.create_notification(
                make_notification_spec(message="  ")
            )

    async def test_naive_past_schedule_is_dispatched_now(
        self, notification_service, notification_store
    ):
        naive_past = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=1)

        notification = await notification_service.create_notification(
            make_notification_spec(scheduled_for=naive_past)
        )

        assert notification.scheduled_for.tzinfo is not None
        assert (await notification_store.get(notification.id)).status == (
            NotificationStatus.SENT
        )


@pytest.mark.unit
class TestReminders:
    async def test_reminders_for_buddy_and_nurse(self, notification_service):
        session_time = utcnow() + timedelta(hours=2)

        reminders = await notification_service.create_reminder(
            patient_id="P1",
            session_time=session_time,
            session_type="physiotherapy",
            assigned_buddy="B1",
            assigned_nurse="N7",
        )

        assert [r.recipient_id for r in reminders] == ["B1", "N7"]
        for reminder in reminders:
            assert reminder.type == NotificationType.REMINDER
            assert reminder.requires_acknowledgment is True
            assert reminder.scheduled_for == session_time - timedelta(minutes=10)
            assert reminder.metadata["sessionType"] == "physiotherapy"
        assert "You have a physiotherapy session" in reminders[0].message
        assert "Buddy has a physiotherapy session" in reminders[1].message

        pending = notification_service.dispatcher.delayed_tasks.pending()
        assert sorted(pending) == sorted(r.id for r in reminders)
        await notification_service.shutdown()

    async def test_missing_staff_are_skipped(self, notification_service):
        reminders = await notification_service.create_reminder(
            patient_id="P1",
            session_time=utcnow() + timedelta(hours=2),
            session_type="check-up",
            assigned_nurse="N7",
        )
        assert [r.recipient_id for r in reminders] == ["N7"]
        await notification_service.shutdown()


@pytest.mark.unit
class TestStatsAndCounts:
    async def test_stats(self, notification_service):
        emergency = await notification_service.create_notification(
            make_notification_spec(
                type=NotificationType.EMERGENCY,
                priority=NotificationPriority.CRITICAL,
                requires_acknowledgment=True,
            )
        )
        await notification_service.create_notification(make_notification_spec())
        await notification_service.mark_as_read(emergency.id, "nurse-1")

        stats = await notification_service.get_notification_stats("nurse-1")

        assert stats.total == 2
        assert stats.unread == 1
        assert stats.unacknowledged == 1
        assert stats.by_type == {"emergency": 1, "system_alert": 1}
        assert stats.by_priority == {"critical": 1, "medium": 1}

    async def test_counts(self, notification_service):
        await notification_service.create_notification(
            make_notification_spec(type=NotificationType.EMERGENCY)
        )
        await notification_service.create_notification(
            make_notification_spec(scheduled_for=utcnow() + timedelta(hours=1))
        )

        counts = await notification_service.get_notification_counts("nurse-1")

        assert counts.total == 2
        assert counts.unread == 2
        assert counts.pending == 1
        assert counts.emergency == 1
        await notification_service.shutdown()

    async def test_acknowledged_emergency_no_longer_counts_as_unacknowledged(
        self, notification_service
    ):
        notification = await notification_service.create_notification(
            make_notification_spec(requires_acknowledgment=True)
        )
        await notification_service.acknowledge_notification(notification.id, "nurse-1")

        stats = await notification_service.get_notification_stats("nurse-1")
        assert stats.unacknowledged == 0


@pytest.mark.unit
class TestHide:
    async def test_hidden_notification_is_kept_but_not_listed(
        self, notification_service, notification_store
    ):
        notification = await notification_service.create_notification(
            make_notification_spec()
        )

        await notification_service.delete_notification("nurse-1", notification.id)

        assert await notification_service.get_user_notifications("nurse-1") == []
        assert (await notification_store.get(notification.id)).id == notification.id

    async def test_cannot_hide_someone_elses_notification(self, notification_service):
        notification = await notification_service.create_notification(
            make_notification_spec(recipient_id="nurse-2")
        )
        with pytest.raises(NotificationNotFoundError):
            await notification_service.delete_notification("nurse-1", notification.id)


@pytest.mark.unit
class TestExpiry:
    async def test_expire_notifications(self, notification_service, notification_store):
        notification = await notification_service.create_notification(
            make_notification_spec(expires_at=utcnow() - timedelta(seconds=1))
        )

        assert await notification_service.expire_notifications() == 1
        assert (await notification_store.get(notification.id)).status == (
            NotificationStatus.EXPIRED
        )


@pytest.mark.unit
def test_from_settings_uses_notification_settings(settings, empty_store):
    service = NotificationService.from_settings(settings, NotificationStore(empty_store))
    assert service.reminder_lead_minutes == settings.notifications.reminder_lead_minutes
    assert service.dispatcher.prominent_duration_ms == (
        settings.notifications.prominent_duration_ms
    )
