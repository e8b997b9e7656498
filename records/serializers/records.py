import html

import bleach
from django.utils import timezone
from rest_framework import serializers

from ..collections import (
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


def today() -> str:
    return timezone.localdate().isoformat()


def clean_text(value) -> str:
    """Drop markup but keep characters like ``&`` and ``<`` as typed."""
    return html.unescape(bleach.clean(value or '', tags=set(), strip=True)).strip()


def text(default=''):
    return serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255, trim_whitespace=True, default=default
    )


class RecordSerializer(serializers.Serializer):
    """Shapes a form submission into a flat record.

    Only declared fields survive; omitted fields take their defaults and
    free text is stripped of markup.  Business rules live in
    :mod:`records.validation`, not here.
    """

    def validate(self, attrs):
        return {k: clean_text(v) for k, v in attrs.items()}


class DepartmentSerializer(RecordSerializer):
    dept_name = text()
    dept_location = text()
    facilities = text()


class DoctorMappingSerializer(RecordSerializer):
    doctor_id = text()
    dept_name = text()

    def validate_doctor_id(self, v):
        return (v or '').upper()


class RegularDoctorSerializer(RecordSerializer):
    doctor_id = text()
    name = text()
    qualification = text()
    address = text()
    phone = text()
    salary = text()
    date_of_joining = text()


class OnCallDoctorSerializer(RecordSerializer):
    doctor_id = text()
    name = text()
    qualification = text()
    fees_per_call = text()
    payment_due = text()
    address = text()
    phone = text()


class PatientSerializer(RecordSerializer):
    patient_id = text()
    name = text()
    age = text()
    sex = text('M')
    address = text()
    city = text()
    phone = text()
    entry_date = text(today)
    doctor_name = text()
    diagnosis = text()
    dept_name = text()


class CheckupSerializer(RecordSerializer):
    patient_id = text()
    doctor_id = text()
    checkup_date = text(today)
    diagnosis = text()
    treatment = text()
    status = text('Regular')


class AdmissionSerializer(RecordSerializer):
    patient_id = text()
    advance_payment = text()
    mode_of_payment = text()
    room_no = text()
    dept_name = text()
    date_of_admission = text(today)
    initial_condition = text()
    diagnosis = text()
    treatment = text()
    doctor_id = text()
    attendant_name = text()


class RegularVisitSerializer(RecordSerializer):
    patient_id = text()
    visit_date = text(today)
    diagnosis = text()
    treatment = text()
    medicine = text()
    treatment_status = text()


class OperationSerializer(RecordSerializer):
    patient_id = text()
    date_of_admission = text()
    date_of_operation = text(today)
    doctor_id = text()
    operation_theater_no = text()
    operation_type = text()
    condition_before = text()
    condition_after = text()
    treatment_advice = text()


class DischargeSerializer(RecordSerializer):
    patient_id = text()
    treatment_given = text()
    treatment_advice = text()
    payment_made = text()
    mode_of_payment = text()
    discharge_date = text(today)


class RoomSerializer(RecordSerializer):
    room_no = text()
    room_type = text('G')
    status = text('N')
    patient_id = text()
    patient_name = text()
    charges_per_day = text()


SERIALIZERS = {
    DEPARTMENTS: DepartmentSerializer,
    ALL_DOCTORS: DoctorMappingSerializer,
    REGULAR_DOCTORS: RegularDoctorSerializer,
    ON_CALL_DOCTORS: OnCallDoctorSerializer,
    PATIENTS: PatientSerializer,
    CHECKUPS: CheckupSerializer,
    ADMISSIONS: AdmissionSerializer,
    REGULAR_VISITS: RegularVisitSerializer,
    OPERATIONS: OperationSerializer,
    DISCHARGES: DischargeSerializer,
    ROOMS: RoomSerializer,
}


def serializer_for(kind: str):
    get_collection(kind)
    return SERIALIZERS[kind]


def first_error(errors) -> tuple:
    """Return ``(field, message)`` for the first serializer error."""
    field, messages = next(iter(errors.items()))
    if isinstance(messages, (list, tuple)) and messages:
        messages = messages[0]
    if field == 'non_field_errors':
        field = None
    return field, str(messages)
