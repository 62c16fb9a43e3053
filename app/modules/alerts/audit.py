"""Email audit log.

One ``emailLogs`` document per email attempt made by an alert workflow.
Audit writes never fail the workflow that made them.
"""

from typing import Optional

from infrastructure.logging import get_module_logger
from infrastructure.notifications.models import utcnow
from infrastructure.persistence import DocumentStore
from modules.care_team import StaffIdentity

logger = get_module_logger()

EMAIL_LOGS_COLLECTION = "emailLogs"


class EmailAuditLog:
    """Writes email attempt records to the document store.

    Args:
        documents: Document store
        enabled: When False, ``record`` is a no-op
    """

    def __init__(self, documents: DocumentStore, enabled: bool = True):
        self.documents = documents
        self.enabled = enabled

    async def record(
        self,
        patient_id: str,
        staff: StaffIdentity,
        email_type: str,
        success: bool,
        provider: Optional[str] = None,
        message_id: Optional[str] = None,
        error: Optional[str] = None,
    ) -> Optional[str]:
        """Store one audit entry.

        Returns:
            The audit document id, or None when disabled or the write failed.
        """
        if not self.enabled:
            return None
        entry = {
            "patientId": patient_id,
            "staffId": staff.id,
            "role": staff.role.value,
            "emailType": email_type,
            "success": success,
            "provider": provider,
            "messageId": message_id,
            "error": error,
            "timestamp": utcnow(),
        }
        try:
            return await self.documents.create(EMAIL_LOGS_COLLECTION, entry)
        except Exception as e:
            logger.error(
                "email_audit_write_failed",
                patient_id=patient_id,
                staff_id=staff.id,
                email_type=email_type,
                error=str(e),
            )
            return None
