"""Staff resolution.

An assignment field on a patient record usually holds a staff record key,
but sometimes holds a display name typed in elsewhere. The resolver tries,
in order, stopping at the first contactable record:

1. the key in the role-specific collection (``doctors``, ``nurses``,
   ``medicalBuddies``)
2. the key in the ``users`` directory, if that user's role matches
3. the value as a display name: users with the role, then the role
   collection, matched by case-insensitive substring in either direction
4. a fresh scan of the users with the role, same name predicate

Lookup failures are logged and treated as misses; resolve never raises.
"""

from typing import Any, Dict, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from infrastructure.persistence import Document, DocumentStore, QueryFilter
from modules.care_team.models import (
    DEFAULT_STAFF_NAME,
    PatientRecord,
    ResolutionStrategy,
    StaffIdentity,
    StaffRole,
    compose_full_name,
    normalize_role,
)

logger = get_module_logger()

USERS_COLLECTION = "users"
PATIENTS_COLLECTION = "patients"


def names_overlap(candidate: str, reference: str) -> bool:
    """Symmetric case-insensitive substring test.

    Empty names never match.
    """
    candidate, reference = candidate.strip().lower(), reference.strip().lower()
    if not candidate or not reference:
        return False
    return candidate in reference or reference in candidate


class StaffResolver:
    """Maps assignment references to contactable staff identities.

    Args:
        documents: Document store holding ``users``, ``patients`` and the
            role collections
    """

    def __init__(self, documents: DocumentStore):
        self.documents = documents

    async def resolve(self, reference: Optional[str], role: Any) -> OperationResult:
        """Resolve one assignment reference for a role.

        Args:
            reference: Staff record key or display name
            role: StaffRole or any accepted spelling ("buddy", "medicalBuddy"...)

        Returns:
            OperationResult with a StaffIdentity in ``data``, or NOT_FOUND.
        """
        staff_role = normalize_role(role, strict=False)
        if staff_role is None:
            logger.warning("staff_resolution_unknown_role", role=role)
            return OperationResult.not_found(f"Unknown role: {role}", "UNKNOWN_ROLE")
        if not reference or not str(reference).strip():
            return OperationResult.not_found(
                f"No {staff_role.value} assigned", "NOT_ASSIGNED"
            )
        reference = str(reference).strip()

        identity = (
            await self._by_role_record(reference, staff_role)
            or await self._by_user_record(reference, staff_role)
            or await self._by_name(reference, staff_role)
            or await self._by_directory_rescan(reference, staff_role)
        )

        if identity is None:
            logger.warning(
                "staff_resolution_failed", role=staff_role.value, reference=reference
            )
            return OperationResult.not_found(
                f"No contactable {staff_role.value} for '{reference}'",
                "STAFF_NOT_FOUND",
            )

        logger.info(
            "staff_resolved",
            role=staff_role.value,
            staff_id=identity.id,
            resolved_by=identity.resolved_by.value,
        )
        return OperationResult.success(data=identity, message="Staff resolved")

    async def resolve_many(
        self, assignments: Dict[StaffRole, Optional[str]]
    ) -> List[StaffIdentity]:
        """Resolve every filled slot, in doctor, nurse, buddy order.

        Unresolvable slots are logged and left out.
        """
        recipients = []
        for role, reference in assignments.items():
            if not reference:
                continue
            result = await self.resolve(reference, role)
            if result.is_success:
                recipients.append(result.data)
            else:
                logger.warning(
                    "recipient_slot_skipped",
                    role=role.value,
                    reference=reference,
                    reason=result.message,
                )
        return recipients

    async def get_patient(self, patient_id: str) -> Optional[PatientRecord]:
        """Load a patient from ``patients``, falling back to ``users``."""
        for collection in (PATIENTS_COLLECTION, USERS_COLLECTION):
            document = await self._safe_read(collection, patient_id)
            if document is not None:
                return PatientRecord.model_validate(document)
        logger.warning("patient_not_found", patient_id=patient_id)
        return None

    async def resolve_patient_staff(self, patient_id: str) -> List[StaffIdentity]:
        """Resolve all staff assigned on a patient's record.

        A missing patient yields no recipients.
        """
        patient = await self.get_patient(patient_id)
        if patient is None:
            return []
        return await self.resolve_many(patient.assignments())

    async def _safe_read(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            return await self.documents.read(collection, doc_id)
        except Exception as e:
            logger.warning(
                "staff_lookup_read_failed",
                collection=collection,
                doc_id=doc_id,
                error=str(e),
            )
            return None

    async def _safe_query(
        self, collection: str, filters: Optional[List[QueryFilter]] = None
    ) -> Optional[List[Document]]:
        try:
            return await self.documents.query(collection, filters or [])
        except Exception as e:
            logger.warning(
                "staff_lookup_query_failed", collection=collection, error=str(e)
            )
            return None

    async def _by_role_record(
        self, reference: str, role: StaffRole
    ) -> Optional[StaffIdentity]:
        record = await self._safe_read(role.collection, reference)
        if record is None or not record.get("email"):
            return None
        name = record.get("name") or record.get("fullName") or compose_full_name(record)
        return self._identity(record, role, reference, ResolutionStrategy.ROLE_RECORD, name)

    async def _by_user_record(
        self, reference: str, role: StaffRole
    ) -> Optional[StaffIdentity]:
        record = await self._safe_read(USERS_COLLECTION, reference)
        if record is None or not record.get("email"):
            return None
        if not role.matches(record.get("role")):
            logger.debug(
                "staff_user_role_mismatch",
                reference=reference,
                expected=role.value,
                found=record.get("role"),
            )
            return None
        return self._identity(record, role, reference, ResolutionStrategy.USER_RECORD)

    async def _users_with_role(self, role: StaffRole) -> Optional[List[Document]]:
        return await self._safe_query(
            USERS_COLLECTION, [QueryFilter("role", "in", list(role.stored_values))]
        )

    async def _by_name(self, reference: str, role: StaffRole) -> Optional[StaffIdentity]:
        users = await self._users_with_role(role)
        match = self._first_name_match(users or [], reference, role)
        if match is not None:
            return self._identity(match, role, reference, ResolutionStrategy.NAME_MATCH)

        staff = await self._safe_query(role.collection)
        match = self._first_name_match(staff or [], reference, role)
        if match is not None:
            return self._identity(match, role, reference, ResolutionStrategy.NAME_MATCH)
        return None

    async def _by_directory_rescan(
        self, reference: str, role: StaffRole
    ) -> Optional[StaffIdentity]:
        users = await self._users_with_role(role)
        match = self._first_name_match(users or [], reference, role)
        if match is None:
            return None
        return self._identity(
            match, role, reference, ResolutionStrategy.DIRECTORY_RESCAN
        )

    def _first_name_match(
        self, records: Iterable[Document], reference: str, role: StaffRole
    ) -> Optional[Document]:
        candidates = [
            record
            for record in records
            if record.get("email") and names_overlap(compose_full_name(record), reference)
        ]
        if not candidates:
            return None
        if len(candidates) > 1:
            # First match in store order wins; the choice is logged for review.
            logger.warning(
                "staff_name_match_ambiguous",
                role=role.value,
                reference=reference,
                candidate_ids=[record.get("id") for record in candidates],
                chosen_id=candidates[0].get("id"),
            )
        return candidates[0]

    @staticmethod
    def _identity(
        record: Document,
        role: StaffRole,
        reference: str,
        strategy: ResolutionStrategy,
        name: Optional[str] = None,
    ) -> StaffIdentity:
        return StaffIdentity(
            id=record.get("id") or reference,
            name=name or compose_full_name(record) or DEFAULT_STAFF_NAME,
            email=record["email"],
            role=role,
            reference=reference,
            resolved_by=strategy,
        )
