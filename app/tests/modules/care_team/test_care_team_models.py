import pytest

from modules.care_team import (
    PatientRecord,
    StaffAssignments,
    StaffRole,
    compose_full_name,
    normalize_role,
)


@pytest.mark.unit
class TestNormalizeRole:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("doctor", StaffRole.DOCTOR),
            ("Nurse", StaffRole.NURSE),
            ("buddy", StaffRole.MEDICAL_BUDDY),
            ("medicalBuddy", StaffRole.MEDICAL_BUDDY),
            ("medical_buddy", StaffRole.MEDICAL_BUDDY),
            (StaffRole.NURSE, StaffRole.NURSE),
        ],
    )
    def test_accepted_spellings(self, value, expected):
        assert normalize_role(value) is expected

    def test_unknown_raises_when_strict(self):
        with pytest.raises(ValueError):
            normalize_role("surgeon")

    def test_unknown_is_none_when_lenient(self):
        assert normalize_role("surgeon", strict=False) is None


@pytest.mark.unit
class TestStaffRole:
    def test_collections(self):
        assert StaffRole.DOCTOR.collection == "doctors"
        assert StaffRole.NURSE.collection == "nurses"
        assert StaffRole.MEDICAL_BUDDY.collection == "medicalBuddies"

    def test_labels(self):
        assert StaffRole.MEDICAL_BUDDY.label == "Medical Buddy"

    def test_matches_stored_alias(self):
        assert StaffRole.MEDICAL_BUDDY.matches("buddy")
        assert not StaffRole.NURSE.matches("doctor")


@pytest.mark.unit
class TestNames:
    def test_first_and_last(self):
        assert compose_full_name({"firstName": "Jane", "lastName": "Doe"}) == "Jane Doe"

    def test_display_name_fallback(self):
        assert compose_full_name({"firstName": "Jane", "displayName": "JD"}) == "JD"

    def test_name_fallback(self):
        assert compose_full_name({"name": "Dr. House"}) == "Dr. House"

    def test_patient_display_name(self):
        patient = PatientRecord.model_validate(
            {"id": "P1", "firstName": "Pat", "lastName": "Smith"}
        )
        assert patient.display_name == "Pat Smith"

    def test_patient_assignments(self):
        patient = PatientRecord.model_validate(
            {"id": "P1", "assignedDoctor": "D1", "assignedBuddy": "B1"}
        )
        assert patient.assignments() == {
            StaffRole.DOCTOR: "D1",
            StaffRole.NURSE: None,
            StaffRole.MEDICAL_BUDDY: "B1",
        }

    def test_staff_assignments_mapping(self):
        mapping = StaffAssignments(nurse="N7").as_mapping()
        assert mapping[StaffRole.NURSE] == "N7"
        assert mapping[StaffRole.DOCTOR] is None
