# modules/care_team/models.py
"""Care team roles, staff identities and patient assignment records."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_STAFF_NAME = "Staff Member"


class StaffRole(str, Enum):
    """The three recipient slots a patient can have staff assigned to."""

    DOCTOR = "doctor"
    NURSE = "nurse"
    MEDICAL_BUDDY = "medicalBuddy"

    @property
    def collection(self) -> str:
        """Role-specific record set holding staff of this role."""
        return _ROLE_COLLECTIONS[self]

    @property
    def stored_values(self) -> tuple:
        """Every spelling of this role found in stored ``role`` fields."""
        return _ROLE_SPELLINGS[self]

    @property
    def patient_field(self) -> str:
        """Patient record field that holds the assignment for this role."""
        return _PATIENT_FIELDS[self]

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]

    def matches(self, stored_role: Any) -> bool:
        return normalize_role(stored_role, strict=False) is self


_ROLE_COLLECTIONS = {
    StaffRole.DOCTOR: "doctors",
    StaffRole.NURSE: "nurses",
    StaffRole.MEDICAL_BUDDY: "medicalBuddies",
}

_ROLE_SPELLINGS = {
    StaffRole.DOCTOR: ("doctor",),
    StaffRole.NURSE: ("nurse",),
    StaffRole.MEDICAL_BUDDY: ("medicalBuddy", "buddy"),
}

_PATIENT_FIELDS = {
    StaffRole.DOCTOR: "assignedDoctor",
    StaffRole.NURSE: "assignedNurse",
    StaffRole.MEDICAL_BUDDY: "assignedBuddy",
}

_ROLE_LABELS = {
    StaffRole.DOCTOR: "Doctor",
    StaffRole.NURSE: "Nurse",
    StaffRole.MEDICAL_BUDDY: "Medical Buddy",
}

_ROLE_ALIASES = {
    "doctor": StaffRole.DOCTOR,
    "nurse": StaffRole.NURSE,
    "medicalbuddy": StaffRole.MEDICAL_BUDDY,
    "medical_buddy": StaffRole.MEDICAL_BUDDY,
    "buddy": StaffRole.MEDICAL_BUDDY,
}


def normalize_role(value: Any, strict: bool = True) -> Optional[StaffRole]:
    """Map any accepted spelling of a role to its StaffRole.

    Args:
        value: Role string ("buddy", "medicalBuddy", "Doctor"...) or StaffRole
        strict: Raise on unknown values instead of returning None

    Returns:
        The StaffRole, or None for unknown values when not strict.

    Raises:
        ValueError: Unknown role and ``strict`` is set.
    """
    if isinstance(value, StaffRole):
        return value
    role = _ROLE_ALIASES.get(str(value or "").strip().lower())
    if role is None and strict:
        raise ValueError(f"Unknown staff role: {value!r}")
    return role


def compose_full_name(record: Dict[str, Any]) -> str:
    """Display name of a directory record.

    first + last name when both are present, else displayName, else name.
    """
    first, last = record.get("firstName"), record.get("lastName")
    if first and last:
        return f"{first} {last}"
    return record.get("displayName") or record.get("name") or ""


class ResolutionStrategy(str, Enum):
    ROLE_RECORD = "role_record"
    USER_RECORD = "user_record"
    NAME_MATCH = "name_match"
    DIRECTORY_RESCAN = "directory_rescan"


class StaffIdentity(BaseModel):
    """A contactable staff member.

    Attributes:
        id: Key of the record the identity was resolved from
        name: Display name
        email: Contact address
        role: Normalized role
        reference: The value the assignment field actually held
        resolved_by: Which lookup step found the record
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str = DEFAULT_STAFF_NAME
    email: str
    role: StaffRole
    reference: str
    resolved_by: ResolutionStrategy


class PatientRecord(BaseModel):
    """The parts of a patient document the alert workflows read."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    assigned_doctor: Optional[str] = None
    assigned_nurse: Optional[str] = None
    assigned_buddy: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.name or self.first_name or "Patient"

    def assignment(self, role: StaffRole) -> Optional[str]:
        return {
            StaffRole.DOCTOR: self.assigned_doctor,
            StaffRole.NURSE: self.assigned_nurse,
            StaffRole.MEDICAL_BUDDY: self.assigned_buddy,
        }[role]

    def assignments(self) -> Dict[StaffRole, Optional[str]]:
        return {role: self.assignment(role) for role in StaffRole}


class StaffAssignments(BaseModel):
    """Assignment references for the three recipient slots."""

    doctor: Optional[str] = Field(default=None)
    nurse: Optional[str] = Field(default=None)
    buddy: Optional[str] = Field(default=None)

    def as_mapping(self) -> Dict[StaffRole, Optional[str]]:
        return {
            StaffRole.DOCTOR: self.doctor,
            StaffRole.NURSE: self.nurse,
            StaffRole.MEDICAL_BUDDY: self.buddy,
        }
