"""Care team module.

Staff roles, staff identities and the resolver that maps a patient's
assignment fields (record keys or display names) to contactable staff.
"""

from modules.care_team.models import (
    PatientRecord,
    ResolutionStrategy,
    StaffAssignments,
    StaffIdentity,
    StaffRole,
    compose_full_name,
    normalize_role,
)
from modules.care_team.resolver import StaffResolver, names_overlap

__all__ = [
    "PatientRecord",
    "ResolutionStrategy",
    "StaffAssignments",
    "StaffIdentity",
    "StaffResolver",
    "StaffRole",
    "compose_full_name",
    "names_overlap",
    "normalize_role",
]
