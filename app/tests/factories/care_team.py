"""Care team directory factories.

``make_directory`` returns a seed for InMemoryDocumentStore with one staff
member per role stored the way real data is: the doctor in ``doctors``,
the nurse only in the ``users`` directory, the buddy in ``medicalBuddies``.
"""

from typing import Any, Dict, Optional

DOCTOR_EMAIL = "gregory.house@rehab-center.org"
NURSE_EMAIL = "jane.doe@rehab-center.org"
BUDDY_EMAIL = "sam.wise@rehab-center.org"


def make_staff_record(
    name: Optional[str] = None,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    role: Optional[str] = None,
    **extra: Any,
) -> Dict[str, Any]:
    record: Dict[str, Any] = dict(extra)
    if name is not None:
        record["name"] = name
    if email is not None:
        record["email"] = email
    if first_name is not None:
        record["firstName"] = first_name
    if last_name is not None:
        record["lastName"] = last_name
    if role is not None:
        record["role"] = role
    return record


def make_patient_record(
    first_name: str = "Pat",
    last_name: str = "Smith",
    assigned_doctor: Optional[str] = None,
    assigned_nurse: Optional[str] = None,
    assigned_buddy: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "firstName": first_name,
        "lastName": last_name,
        "role": "patient",
        "assignedDoctor": assigned_doctor,
        "assignedNurse": assigned_nurse,
        "assignedBuddy": assigned_buddy,
    }


def make_directory() -> Dict[str, Dict[str, Dict[str, Any]]]:
    return {
        "doctors": {
            "D1": make_staff_record(name="Dr. Gregory House", email=DOCTOR_EMAIL),
        },
        "medicalBuddies": {
            "B1": make_staff_record(
                first_name="Sam", last_name="Wise", email=BUDDY_EMAIL
            ),
        },
        "users": {
            "N7": make_staff_record(
                first_name="Jane",
                last_name="Doe",
                role="nurse",
                email=NURSE_EMAIL,
            ),
            "D1-user": make_staff_record(
                first_name="Gregory",
                last_name="House",
                role="doctor",
                email="house.directory@rehab-center.org",
            ),
        },
        "patients": {
            "P1": make_patient_record(
                assigned_doctor="D1",
                assigned_nurse="Nurse Jane Doe",
                assigned_buddy=None,
            ),
            "P2": make_patient_record(
                first_name="Alex",
                last_name="Rivera",
                assigned_doctor="D1",
                assigned_nurse="N7",
                assigned_buddy="B1",
            ),
            "P3": make_patient_record(first_name="Lee", last_name="Chan"),
        },
    }
