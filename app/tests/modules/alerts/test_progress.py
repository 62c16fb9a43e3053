import pytest

from modules.alerts import NO_STAFF_ERROR
from tests.factories.care_team import DOCTOR_EMAIL, NURSE_EMAIL


@pytest.mark.integration
class TestProgressUpdate:
    async def test_staff_come_from_patient_record(
        self, progress_orchestrator, email_transport, document_store
    ):
        summary = await progress_orchestrator.send_progress_update(
            "P1", "Walked 50m unassisted", update_type="Mobility"
        )

        assert summary.success is True
        assert summary.total_staff == 2
        assert sorted(email_transport.recipients()) == sorted([DOCTOR_EMAIL, NURSE_EMAIL])
        message = email_transport.sent[0]
        assert message.subject == "📊 Progress Update - Pat Smith"
        assert "Walked 50m unassisted" in message.text
        assert message.priority == "normal"

        notifications = document_store.dump("notifications")
        assert {n["recipientId"] for n in notifications} == {"D1", "N7"}
        assert all(n["type"] == "progress_update" for n in notifications)
        assert all(n["requiresAcknowledgment"] is False for n in notifications)

    async def test_explicit_patient_name_wins(self, progress_orchestrator, email_transport):
        await progress_orchestrator.send_progress_update(
            "P1", "Stable", patient_name="Patricia Smith"
        )
        assert email_transport.sent[0].subject == "📊 Progress Update - Patricia Smith"

    async def test_unknown_patient(self, progress_orchestrator, email_transport):
        summary = await progress_orchestrator.send_progress_update("P404", "Stable")
        assert summary.success is False
        assert summary.error == NO_STAFF_ERROR
        assert email_transport.attempted == []

    async def test_patient_without_staff(self, progress_orchestrator):
        summary = await progress_orchestrator.send_progress_update("P3", "Stable")
        assert summary.success is False
