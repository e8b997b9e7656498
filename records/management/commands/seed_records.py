"""
Management command to populate the record store with demo data.

Every record goes through the same serializer and validation path as an
API submission, so running the command twice only yields rejections.
"""
from django.core.management.base import BaseCommand

from records.collections import (
    ADMISSIONS, ALL_DOCTORS, CHECKUPS, DEPARTMENTS, DISCHARGES, ON_CALL_DOCTORS,
    OPERATIONS, PATIENTS, REGULAR_DOCTORS, REGULAR_VISITS, ROOMS,
)
from records.serializers.records import first_error, serializer_for
from records.services.submissions import submit

# Ordered so every reference resolves to a record seeded before it.
DEMO_RECORDS = [
    (DEPARTMENTS, {'dept_name': 'Cardiology', 'dept_location': 'Block A, Floor 2', 'facilities': 'ECG, Cath lab'}),
    (DEPARTMENTS, {'dept_name': 'Neurology', 'dept_location': 'Block B, Floor 1', 'facilities': 'EEG, MRI'}),
    (DEPARTMENTS, {'dept_name': 'Orthopaedics', 'dept_location': 'Block C, Floor 3', 'facilities': 'X-Ray'}),
    (ALL_DOCTORS, {'doctor_id': 'DR001', 'dept_name': 'Cardiology'}),
    (ALL_DOCTORS, {'doctor_id': 'DR002', 'dept_name': 'Orthopaedics'}),
    (ALL_DOCTORS, {'doctor_id': 'DC001', 'dept_name': 'Neurology'}),
    (REGULAR_DOCTORS, {
        'doctor_id': 'DR001', 'name': 'Asha Menon', 'qualification': 'MD Cardiology',
        'address': '12 Lake Road', 'phone': '9000000001', 'salary': '180000', 'date_of_joining': '2019-06-01',
    }),
    (REGULAR_DOCTORS, {
        'doctor_id': 'DR002', 'name': 'Ravi Kumar', 'qualification': 'MS Ortho',
        'address': '4 Hill Street', 'phone': '9000000002', 'salary': '165000', 'date_of_joining': '2021-01-15',
    }),
    (ON_CALL_DOCTORS, {
        'doctor_id': 'DC001', 'name': 'Leena Das', 'qualification': 'DM Neurology',
        'fees_per_call': '5000', 'payment_due': '0', 'address': '9 Park Lane', 'phone': '9000000003',
    }),
    (ROOMS, {'room_no': '101', 'room_type': 'G', 'status': 'N', 'charges_per_day': '1500'}),
    (ROOMS, {'room_no': '201', 'room_type': 'P', 'status': 'Y', 'patient_id': 'PT002',
             'patient_name': 'Meera Shah', 'charges_per_day': '4000'}),
    (PATIENTS, {
        'patient_id': 'PT001', 'name': 'Arjun Rao', 'age': '54', 'sex': 'M', 'city': 'Chennai',
        'phone': '9100000001', 'entry_date': '2024-03-01', 'doctor_name': 'Asha Menon',
        'diagnosis': 'Angina', 'dept_name': 'Cardiology',
    }),
    (PATIENTS, {
        'patient_id': 'PT002', 'name': 'Meera Shah', 'age': '37', 'sex': 'F', 'city': 'Pune',
        'phone': '9100000002', 'entry_date': '2024-03-02', 'doctor_name': 'Ravi Kumar',
        'diagnosis': 'Fractured femur', 'dept_name': 'Orthopaedics',
    }),
    (CHECKUPS, {'patient_id': 'PT001', 'doctor_id': 'DR001', 'checkup_date': '2024-03-01',
                'diagnosis': 'Stable angina', 'treatment': 'Nitrates', 'status': 'Regular'}),
    (CHECKUPS, {'patient_id': 'PT002', 'doctor_id': 'DR002', 'checkup_date': '2024-03-02',
                'diagnosis': 'Femur fracture', 'treatment': 'Fixation', 'status': 'Operation'}),
    (ADMISSIONS, {'patient_id': 'PT002', 'advance_payment': '20000', 'mode_of_payment': 'Card',
                  'room_no': '201', 'dept_name': 'Orthopaedics', 'date_of_admission': '2024-03-02',
                  'initial_condition': 'Stable', 'doctor_id': 'DR002', 'attendant_name': 'Nikhil Shah'}),
    (OPERATIONS, {'patient_id': 'PT002', 'date_of_admission': '2024-03-02', 'date_of_operation': '2024-03-03',
                  'doctor_id': 'DR002', 'operation_theater_no': 'OT-2', 'operation_type': 'ORIF',
                  'condition_before': 'Stable', 'condition_after': 'Good', 'treatment_advice': 'Physiotherapy'}),
    (REGULAR_VISITS, {'patient_id': 'PT001', 'visit_date': '2024-03-15', 'diagnosis': 'Angina under control',
                      'treatment': 'Continue medication', 'medicine': 'Nitroglycerin', 'treatment_status': 'Ongoing'}),
    (DISCHARGES, {'patient_id': 'PT002', 'treatment_given': 'ORIF', 'treatment_advice': 'Rest for 6 weeks',
                  'payment_made': '85000', 'mode_of_payment': 'Card', 'discharge_date': '2024-03-10'}),
]


class Command(BaseCommand):
    help = 'Populate the record store with demo data'

    def handle(self, *args, **options):
        accepted = rejected = 0
        for kind, data in DEMO_RECORDS:
            serializer = serializer_for(kind)(data=data)
            if not serializer.is_valid():
                _, message = first_error(serializer.errors)
                self.stdout.write(self.style.WARNING(f'{kind}: {message}'))
                rejected += 1
                continue
            submission = submit(kind, serializer.validated_data)
            if submission.ok:
                accepted += 1
            else:
                rejected += 1
                self.stdout.write(self.style.WARNING(f'{kind}: {submission.flash.text}'))
        self.stdout.write(self.style.SUCCESS(f'Seeded {accepted} records, {rejected} rejected'))
