"""
Validation and referential-integrity rules for candidate records.

Each collection declares an ordered list of rules.  :func:`validate`
runs them in order against the candidate and a read-only snapshot of
every collection and stops at the first failure, so exactly one reason
is ever reported.  Nothing here mutates state or raises for a known
collection; a failure is returned as a :class:`ValidationResult`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .collections import (
    ADMISSIONS,
    ALL_DOCTORS,
    CHECKUPS,
    DEPARTMENTS,
    DISCHARGES,
    ON_CALL_DOCTORS,
    OPERATIONS,
    PATIENTS,
    REGULAR_DOCTORS,
    REGULAR_VISITS,
    ROOMS,
    get_collection,
)

FORMAT_ERROR = "format_error"
UNIQUENESS_ERROR = "uniqueness_error"
REFERENCE_ERROR = "reference_error"
CONDITIONAL_FIELD_ERROR = "conditional_field_error"

Candidate = Mapping[str, object]
Snapshot = Mapping[str, Sequence[Mapping[str, object]]]


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    reason: str = ""
    code: Optional[str] = None
    field: Optional[str] = None


ACCEPTED = ValidationResult(ok=True)


def _text(value: object) -> str:
    return "" if value is None else str(value)


class Rule:
    """A single predicate over a candidate; ``check`` returns True when it holds."""
    code = FORMAT_ERROR

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message

    def check(self, candidate: Candidate, snapshot: Snapshot) -> bool:
        raise NotImplementedError

    def __call__(self, candidate: Candidate, snapshot: Snapshot) -> Optional[ValidationResult]:
        if self.check(candidate, snapshot):
            return None
        return ValidationResult(ok=False, reason=self.message, code=self.code, field=self.field)


class Required(Rule):
    def check(self, candidate, snapshot):
        return bool(_text(candidate.get(self.field)).strip())


class Matches(Rule):
    """Value must match ``pattern`` at its start."""

    def __init__(self, field, pattern, message):
        super().__init__(field, message)
        self.pattern = re.compile(pattern)

    def check(self, candidate, snapshot):
        return self.pattern.match(_text(candidate.get(self.field))) is not None


class OneOf(Rule):
    def __init__(self, field, choices, message):
        super().__init__(field, message)
        self.choices = frozenset(choices)

    def check(self, candidate, snapshot):
        return _text(candidate.get(self.field)) in self.choices


class Exists(Rule):
    """Field must equal the identity of some record in ``target``."""
    code = REFERENCE_ERROR

    def __init__(self, field, target, message, target_field=None):
        super().__init__(field, message)
        self.target = target
        self.target_field = target_field or field

    def check(self, candidate, snapshot):
        value = _text(candidate.get(self.field))
        return any(_text(r.get(self.target_field)) == value for r in snapshot.get(self.target, ()))


class Unique(Rule):
    """No record in ``target`` may share all of ``fields`` with the candidate."""
    code = UNIQUENESS_ERROR

    def __init__(self, target, message, fields=None):
        self.fields = tuple(fields or get_collection(target).identity)
        super().__init__(self.fields[0], message)
        self.target = target

    def check(self, candidate, snapshot):
        key = tuple(_text(candidate.get(f)) for f in self.fields)
        return not any(
            tuple(_text(r.get(f)) for f in self.fields) == key for r in snapshot.get(self.target, ())
        )


class When(Rule):
    """Apply ``rule`` only when ``field`` equals ``equals``."""
    code = CONDITIONAL_FIELD_ERROR

    def __init__(self, field, equals, rule: Rule):
        super().__init__(rule.field, rule.message)
        self.condition_field = field
        self.equals = equals
        self.rule = rule

    def check(self, candidate, snapshot):
        if _text(candidate.get(self.condition_field)) != self.equals:
            return True
        return self.rule.check(candidate, snapshot)


DOCTOR_MUST_EXIST = "Doctor must exist."
PATIENT_MUST_EXIST = "Patient must exist."
MAPPING_MUST_EXIST = "Doctor must exist in ALL_DOCTORS list first."

RULES: dict[str, tuple[Rule, ...]] = {
    DEPARTMENTS: (
        Required("dept_name", "Department name is required."),
        Unique(DEPARTMENTS, "Department already exists."),
    ),
    ALL_DOCTORS: (
        Matches("doctor_id", r"^(DR|DC)", "Doctor ID must start with DR or DC"),
        Exists("dept_name", DEPARTMENTS, "Department does not exist."),
        Unique(ALL_DOCTORS, "Doctor already exists."),
    ),
    REGULAR_DOCTORS: (
        Matches("doctor_id", r"^DR", "Regular doctor ID must start with DR"),
        Exists("doctor_id", ALL_DOCTORS, MAPPING_MUST_EXIST),
        Unique(REGULAR_DOCTORS, "Regular doctor already exists."),
    ),
    ON_CALL_DOCTORS: (
        Matches("doctor_id", r"^DC", "On-call doctor ID must start with DC"),
        Exists("doctor_id", ALL_DOCTORS, MAPPING_MUST_EXIST),
        Unique(ON_CALL_DOCTORS, "On-call doctor already exists."),
    ),
    PATIENTS: (
        Matches("patient_id", r"^PT", "Patient ID must start with PT"),
        OneOf("sex", ("M", "F", "O"), "Sex must be M, F, or O"),
        Exists("dept_name", DEPARTMENTS, "Department must exist."),
        Unique(PATIENTS, "Patient already exists."),
    ),
    CHECKUPS: (
        OneOf("status", ("Admitted", "Operation", "Regular"), "Status must be Admitted, Operation, or Regular"),
        Exists("patient_id", PATIENTS, PATIENT_MUST_EXIST),
        Exists("doctor_id", ALL_DOCTORS, DOCTOR_MUST_EXIST),
        Unique(CHECKUPS, "Check-up already recorded."),
    ),
    ADMISSIONS: (
        Exists("patient_id", PATIENTS, PATIENT_MUST_EXIST),
        Exists("dept_name", DEPARTMENTS, "Department must exist."),
        Exists("doctor_id", ALL_DOCTORS, DOCTOR_MUST_EXIST),
        Exists("room_no", ROOMS, "Room must exist."),
        Unique(ADMISSIONS, "Admission already recorded."),
    ),
    REGULAR_VISITS: (
        Exists("patient_id", PATIENTS, PATIENT_MUST_EXIST),
        Unique(REGULAR_VISITS, "Regular visit already recorded."),
    ),
    OPERATIONS: (
        Exists("patient_id", PATIENTS, PATIENT_MUST_EXIST),
        Exists("doctor_id", ALL_DOCTORS, DOCTOR_MUST_EXIST),
        Unique(OPERATIONS, "Operation already recorded."),
    ),
    DISCHARGES: (
        Exists("patient_id", PATIENTS, PATIENT_MUST_EXIST),
        Unique(DISCHARGES, "Discharge already recorded."),
    ),
    ROOMS: (
        Required("room_no", "Room number is required."),
        OneOf("room_type", ("G", "P"), "Room type must be G or P"),
        OneOf("status", ("Y", "N"), "Room status must be Y or N"),
        When("status", "Y", Matches("patient_id", r"^PT", "When occupied, provide valid PT... patient id.")),
        Unique(ROOMS, "Room already exists."),
    ),
}


def validate(kind: str, candidate: Candidate, snapshot: Snapshot) -> ValidationResult:
    """Decide whether ``candidate`` may be appended to ``kind``.

    Raises :class:`records.collections.UnknownCollection` for an unknown
    kind; every other outcome is a returned result.
    """
    get_collection(kind)
    for rule in RULES[kind]:
        failure = rule(candidate, snapshot)
        if failure is not None:
            return failure
    return ACCEPTED
