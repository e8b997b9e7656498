"""
Registry of the record collections.

Each collection has a stable storage key (the same keys the browser
front end used for its local store), the field or fields that identify
one of its records and the confirmation text shown after a successful
add.
"""
from __future__ import annotations

from dataclasses import dataclass

DEPARTMENTS = "departments"
ALL_DOCTORS = "all_doctors"
REGULAR_DOCTORS = "regular_doctors"
ON_CALL_DOCTORS = "on_call_doctors"
PATIENTS = "patients"
CHECKUPS = "checkups"
ADMISSIONS = "admissions"
REGULAR_VISITS = "regular_visits"
OPERATIONS = "operations"
DISCHARGES = "discharges"
ROOMS = "rooms"


class UnknownCollection(KeyError):
    """Raised when a caller names a collection that does not exist."""


@dataclass(frozen=True)
class Collection:
    kind: str
    key: str
    label: str
    identity: tuple[str, ...]
    success_text: str


COLLECTIONS: dict[str, Collection] = {
    c.kind: c
    for c in (
        Collection(DEPARTMENTS, "hm_departments", "Departments", ("dept_name",), "Department saved."),
        Collection(ALL_DOCTORS, "hm_allDoctors", "All Doctors", ("doctor_id",), "Doctor mapping saved."),
        Collection(REGULAR_DOCTORS, "hm_docReg", "Regular Doctors", ("doctor_id",), "Regular doctor saved."),
        Collection(ON_CALL_DOCTORS, "hm_docOnCall", "On-Call Doctors", ("doctor_id",), "On-call doctor saved."),
        Collection(PATIENTS, "hm_patients", "Patients", ("patient_id",), "Patient saved."),
        Collection(
            CHECKUPS, "hm_checkups", "Check-Ups", ("patient_id", "doctor_id", "checkup_date"), "Check-up saved."
        ),
        Collection(ADMISSIONS, "hm_admits", "Admissions", ("patient_id", "date_of_admission"), "Admission saved."),
        Collection(
            REGULAR_VISITS, "hm_regularVisits", "Regular Visits", ("patient_id", "visit_date"), "Regular visit saved."
        ),
        Collection(
            OPERATIONS, "hm_operations", "Operations", ("patient_id", "date_of_operation"), "Operation saved."
        ),
        Collection(DISCHARGES, "hm_discharges", "Discharges", ("patient_id", "discharge_date"), "Discharge saved."),
        Collection(ROOMS, "hm_rooms", "Rooms", ("room_no",), "Room saved."),
    )
}


def get_collection(kind: str) -> Collection:
    try:
        return COLLECTIONS[kind]
    except KeyError:
        raise UnknownCollection(kind) from None
