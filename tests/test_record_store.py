"""Tests for the in-memory record store."""

import pytest

from clinic_records.core.enums import AppointmentStatus, CancelOutcome, RecordType
from clinic_records.core.exceptions import AppointmentNotFoundError, PatientNotFoundError
from clinic_records.core.models import Patient
from clinic_records.repository import RecordStore, leading_id, next_id

TIMESTAMP = "2024-01-05 10:12:00"


def test_next_id_helper():
    assert next_id([]) == 1
    assert next_id([3, 1, 2]) == 4


class TestIdAllocation:
    def test_sequential_adds_get_consecutive_ids(self, store):
        ids = [store.add_patient(f"P{i}", 20 + i, "Flu").id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_deleting_max_id_lets_it_be_reissued(self, store):
        for name in ("Ann", "Ben", "Cal"):
            store.add_patient(name, 30, "Flu")
        assert store.delete_patient_cascade(3) is not None

        assert store.add_patient("Dee", 40, "Cold").id == 3

    def test_gap_below_max_is_not_filled(self, store):
        for name in ("Ann", "Ben", "Cal"):
            store.add_patient(name, 30, "Flu")
        store.delete_patient_cascade(2)
        assert store.add_patient("Dee", 40, "Cold").id == 4

    def test_allocation_uses_loaded_records(self):
        store = RecordStore(patients=[Patient(10, "Ann", 30, "Flu"), Patient(4, "Ben", 31, "Flu")])
        assert store.next_patient_id() == 11

    def test_each_record_type_counts_separately(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        appointment = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
        bill = store.add_bill(patient.id, 50.0, "Visit", TIMESTAMP)
        assert (appointment.appointment_id, bill.bill_id) == (1, 1)


class TestCreation:
    def test_new_appointment_is_booked(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        appointment = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
        assert appointment.status == AppointmentStatus.BOOKED

    def test_appointment_requires_existing_patient(self, store):
        with pytest.raises(PatientNotFoundError) as exc_info:
            store.add_appointment(99, "Dr. Rao", "2024-01-05", "09:30")
        assert exc_info.value.record_id == 99
        assert store.appointment_count == 0

    def test_bill_requires_existing_patient(self, store):
        with pytest.raises(PatientNotFoundError):
            store.add_bill(1, 10.0, "Visit", TIMESTAMP)
        assert store.bill_count == 0

    def test_insertion_order_is_kept(self, store):
        for name in ("Zed", "Amy", "Max"):
            store.add_patient(name, 30, "Flu")
        assert [p.name for p in store.patients] == ["Zed", "Amy", "Max"]


class TestSearch:
    def test_name_search_is_case_insensitive_substring(self, store):
        store.add_patient("Alice Smith", 34, "Asthma")
        store.add_patient("Bob Brown", 50, "Gout")
        store.add_patient("alicia Jones", 28, "Migraine")

        matches = store.find_patients_by_name("alic")
        assert [p.name for p in matches] == ["Alice Smith", "alicia Jones"]

    def test_name_search_without_match_is_empty(self, store):
        store.add_patient("Alice Smith", 34, "Asthma")
        assert store.find_patients_by_name("zzz") == []

    def test_date_search_is_exact(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        first = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
        store.add_appointment(patient.id, "Dr. Rao", "2024-01-15", "10:00")

        assert store.find_appointments_by_date("2024-01-05") == [first]
        assert store.find_appointments_by_date("2024-01-0") == []

    def test_bills_for_patient(self, store):
        ann = store.add_patient("Ann", 30, "Flu")
        ben = store.add_patient("Ben", 31, "Cold")
        store.add_bill(ann.id, 10.0, "a", TIMESTAMP)
        store.add_bill(ben.id, 20.0, "b", TIMESTAMP)
        store.add_bill(ann.id, 30.0, "c", TIMESTAMP)

        assert [b.details for b in store.bills_for_patient(ann.id)] == ["a", "c"]

    def test_get_patient_or_raise(self, store):
        with pytest.raises(PatientNotFoundError):
            store.get_patient_or_raise(1)


class TestLookup:
    def test_get_appointment_or_raise(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        booked = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")

        assert store.get_appointment_or_raise(booked.appointment_id) is booked
        with pytest.raises(AppointmentNotFoundError) as exc_info:
            store.get_appointment_or_raise(42)
        assert exc_info.value.record_type == "appointment"
        assert exc_info.value.record_id == 42

    def test_get_bill(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        bill = store.add_bill(patient.id, 20.0, "Visit", TIMESTAMP)
        assert store.get_bill(bill.bill_id) == bill
        assert store.get_bill(2) is None


class TestUnreadableLines:
    def test_leading_id(self):
        assert leading_id("7|Ben|x|Gout") == 7
        assert leading_id("broken") is None
        assert leading_id("") is None

    def test_unreadable_ids_count_for_allocation(self, store):
        store.add_patient("Ann", 30, "Flu")
        store.replace_unreadable_lines(RecordType.PATIENT, ["5|Ben|x|Gout", "garbage"])
        store.replace_unreadable_lines(RecordType.BILL, ["9|1|abc|Visit|now"])

        assert store.next_patient_id() == 6
        assert store.next_appointment_id() == 1
        assert store.next_bill_id() == 10

    def test_kept_per_record_type(self, store):
        store.replace_unreadable_lines(RecordType.APPOINTMENT, ["1|1|Dr. Rao"])
        assert store.unreadable_lines(RecordType.APPOINTMENT) == ("1|1|Dr. Rao",)
        assert store.unreadable_lines(RecordType.PATIENT) == ()


class TestUpdate:
    def test_blank_and_zero_keep_current_values(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        store.update_patient(patient.id, name="", age=0, disease="Bronchitis")
        assert store.get_patient(patient.id) == Patient(1, "Ann", 30, "Bronchitis")

    def test_negative_age_keeps_current_value(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        store.update_patient(patient.id, age=-4)
        assert patient.age == 30

    def test_all_fields_replaced(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        updated = store.update_patient(patient.id, name="Anne", age=31, disease="Cold")
        assert updated is patient
        assert patient == Patient(1, "Anne", 31, "Cold")

    def test_unknown_id_is_a_no_op(self, store):
        store.add_patient("Ann", 30, "Flu")
        assert store.update_patient(5, name="X") is None
        assert store.patients[0].name == "Ann"


class TestCancel:
    def test_cancel_booked(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        appointment = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
        assert store.cancel_appointment(appointment.appointment_id) == CancelOutcome.CANCELLED
        assert appointment.status == AppointmentStatus.CANCELLED

    def test_cancel_twice_reports_already_cancelled(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        appointment = store.add_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
        store.cancel_appointment(appointment.appointment_id)

        outcome = store.cancel_appointment(appointment.appointment_id)
        assert outcome == CancelOutcome.ALREADY_CANCELLED
        assert appointment.status == AppointmentStatus.CANCELLED

    def test_cancel_unknown(self, store):
        assert store.cancel_appointment(1) == CancelOutcome.NOT_FOUND


class TestCascadeDelete:
    def test_removes_only_related_records(self, store):
        p1 = store.add_patient("Ann", 30, "Flu")
        p2 = store.add_patient("Ben", 31, "Cold")
        store.add_appointment(p1.id, "Dr. Rao", "2024-01-05", "09:30")
        a2 = store.add_appointment(p2.id, "Dr. Rao", "2024-01-06", "10:30")
        store.add_bill(p1.id, 10.0, "Ann visit", TIMESTAMP)
        b2 = store.add_bill(p2.id, 20.0, "Ben visit", TIMESTAMP)

        result = store.delete_patient_cascade(p1.id)

        assert result.patient == p1
        assert (result.appointments_removed, result.bills_removed) == (1, 1)
        assert store.patients == (p2,)
        assert store.appointments == (a2,)
        assert store.bills == (b2,)

    def test_unknown_patient_changes_nothing(self, store):
        patient = store.add_patient("Ann", 30, "Flu")
        store.add_bill(patient.id, 10.0, "Visit", TIMESTAMP)

        assert store.delete_patient_cascade(42) is None
        assert store.patient_count == 1
        assert store.bill_count == 1


def test_collections_are_read_only_views(store):
    store.add_patient("Ann", 30, "Flu")
    assert isinstance(store.patients, tuple)
