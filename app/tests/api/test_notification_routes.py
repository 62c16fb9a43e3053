import pytest

from infrastructure.notifications import NotificationPriority, NotificationType
from tests.api.conftest import DOCTOR_TOKEN, NURSE_TOKEN, bearer
from tests.factories.notifications import make_notification_spec


@pytest.fixture
def nurse_notification(notification_service):
    async def _create(**overrides):
        overrides.setdefault("recipient_id", "N7")
        return await notification_service.create_notification(
            make_notification_spec(**overrides)
        )

    return _create


@pytest.mark.integration
class TestAuthentication:
    def test_missing_token(self, client):
        assert client.get("/api/v1/notifications").status_code == 401

    def test_unknown_token(self, client):
        response = client.get("/api/v1/notifications", headers=bearer("forged"))
        assert response.status_code == 401


@pytest.mark.integration
class TestListing:
    async def test_lists_only_callers_notifications(self, client, nurse_notification):
        await nurse_notification(title="for nurse")
        await nurse_notification(recipient_id="D1", title="for doctor")

        response = client.get("/api/v1/notifications", headers=bearer(NURSE_TOKEN))

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["for nurse"]
        assert response.json()[0]["recipientId"] == "N7"

    async def test_type_filter(self, client, nurse_notification):
        await nurse_notification(type=NotificationType.EMERGENCY)
        await nurse_notification()

        response = client.get(
            "/api/v1/notifications",
            params={"type": "emergency"},
            headers=bearer(NURSE_TOKEN),
        )
        assert [n["type"] for n in response.json()] == ["emergency"]

    async def test_stats_and_counts(self, client, nurse_notification):
        await nurse_notification(
            type=NotificationType.EMERGENCY,
            priority=NotificationPriority.CRITICAL,
            requires_acknowledgment=True,
        )

        stats = client.get("/api/v1/notifications/stats", headers=bearer(NURSE_TOKEN))
        counts = client.get("/api/v1/notifications/counts", headers=bearer(NURSE_TOKEN))

        assert stats.json()["total"] == 1
        assert stats.json()["unacknowledged"] == 1
        assert stats.json()["byType"] == {"emergency": 1}
        assert counts.json()["emergency"] == 1
        assert counts.json()["unread"] == 1


@pytest.mark.integration
class TestLifecycle:
    async def test_read_twice_is_idempotent(self, client, nurse_notification):
        notification = await nurse_notification()
        url = f"/api/v1/notifications/{notification.id}/read"

        client.post(url, headers=bearer(NURSE_TOKEN))
        response = client.post(url, headers=bearer(NURSE_TOKEN))

        assert response.status_code == 200
        assert response.json()["readBy"] == ["N7"]
        assert response.json()["status"] == "read"

    async def test_acknowledge(self, client, nurse_notification):
        notification = await nurse_notification(requires_acknowledgment=True)

        response = client.post(
            f"/api/v1/notifications/{notification.id}/acknowledge",
            headers=bearer(NURSE_TOKEN),
        )

        assert response.status_code == 200
        assert response.json()["acknowledgedBy"] == ["N7"]

    def test_unknown_notification(self, client):
        response = client.post(
            "/api/v1/notifications/missing/read", headers=bearer(NURSE_TOKEN)
        )
        assert response.status_code == 404

    async def test_hide(self, client, nurse_notification):
        notification = await nurse_notification()

        response = client.delete(
            f"/api/v1/notifications/{notification.id}", headers=bearer(NURSE_TOKEN)
        )

        assert response.status_code == 204
        listed = client.get("/api/v1/notifications", headers=bearer(NURSE_TOKEN))
        assert listed.json() == []

    async def test_cannot_hide_another_users_notification(
        self, client, nurse_notification
    ):
        notification = await nurse_notification()
        response = client.delete(
            f"/api/v1/notifications/{notification.id}", headers=bearer(DOCTOR_TOKEN)
        )
        assert response.status_code == 404
