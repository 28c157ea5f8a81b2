"""
Record Store - In-Memory Repository

This module holds the three ordered record collections (patients,
appointments, bills) for the running session and implements every
lookup and mutation over them. It performs no file I/O: the service
layer flushes the collections through the persistence layer after each
mutation.

Layer Position:
    Config → Persistence ⇄ [Record Store] → Service → CLI
                            ^^^^^^^^^^^^^^
                            You are here

ID Allocation:
    Each record type allocates ``max(current IDs) + 1`` (or 1 when empty),
    recomputed on every add. Only IDs currently present are considered, so
    deleting the highest-ID patient lets the next patient reuse that ID.
    The leading ID of an unreadable line counts as present.

Unreadable Lines:
    Lines the loader could not decode are kept verbatim per record type and
    written back on save, so a bad line is never silently lost.

Usage:
    from clinic_records.repository import RecordStore

    store = RecordStore()
    alice = store.add_patient("Alice Smith", 34, "Asthma")
    store.add_appointment(alice.id, "Dr. Rao", "2024-01-05", "09:30")
    store.find_patients_by_name("alic")
"""

from itertools import chain
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from clinic_records.core.constants import FIELD_DELIMITER
from clinic_records.core.enums import AppointmentStatus, CancelOutcome, RecordType
from clinic_records.core.exceptions import AppointmentNotFoundError, PatientNotFoundError
from clinic_records.core.models import (
    Appointment,
    Bill,
    CascadeDeleteResult,
    Patient,
)


# =============================================================================
# STAGE 1: ID ALLOCATION
# =============================================================================


def next_id(existing_ids: Iterable[int]) -> int:
    """
    Return ``1 + max(existing_ids)``, or 1 if there are none.

    Example:
        >>> next_id([])
        1
        >>> next_id([1, 4, 2])
        5
    """
    return max(existing_ids, default=0) + 1


def leading_id(line: str) -> Optional[int]:
    """
    Return the first field of ``line`` as an integer, or None.

    Example:
        >>> leading_id("2|Ben|x|Gout")
        2
        >>> leading_id("broken") is None
        True
    """
    try:
        return int(line.split(FIELD_DELIMITER, 1)[0])
    except ValueError:
        return None


# =============================================================================
# STAGE 2: RECORD STORE
# =============================================================================


class RecordStore:
    """
    In-memory owner of all patients, appointments and bills.

    What it does:
        Keeps each record type in an insertion-ordered list and exposes
        ID allocation, lookup, search, in-place update, cancellation and
        the patient cascade delete.

    Performance:
        All lookups are linear scans; the clinic holds hundreds of
        records, not millions.

    Example:
        >>> store = RecordStore()
        >>> store.add_patient("Ann", 30, "Flu").id
        1
    """

    def __init__(
        self,
        patients: Optional[Iterable[Patient]] = None,
        appointments: Optional[Iterable[Appointment]] = None,
        bills: Optional[Iterable[Bill]] = None,
    ):
        self._patients: List[Patient] = list(patients or [])
        self._appointments: List[Appointment] = list(appointments or [])
        self._bills: List[Bill] = list(bills or [])
        self._unreadable: Dict[RecordType, List[str]] = {t: [] for t in RecordType}

    # =========================================================================
    # STAGE 3: COLLECTION ACCESS
    # =========================================================================

    @property
    def patients(self) -> Tuple[Patient, ...]:
        return tuple(self._patients)

    @property
    def appointments(self) -> Tuple[Appointment, ...]:
        return tuple(self._appointments)

    @property
    def bills(self) -> Tuple[Bill, ...]:
        return tuple(self._bills)

    def replace_patients(self, patients: Iterable[Patient]) -> None:
        """Swap the whole patient collection (used by the loader)."""
        self._patients = list(patients)

    def replace_appointments(self, appointments: Iterable[Appointment]) -> None:
        self._appointments = list(appointments)

    def replace_bills(self, bills: Iterable[Bill]) -> None:
        self._bills = list(bills)

    def unreadable_lines(self, record_type: RecordType) -> Tuple[str, ...]:
        """Raw lines of ``record_type`` that could not be decoded on load."""
        return tuple(self._unreadable[record_type])

    def replace_unreadable_lines(self, record_type: RecordType, lines: Iterable[str]) -> None:
        """Swap the kept unreadable lines of one record type (used by the loader)."""
        self._unreadable[record_type] = list(lines)

    # =========================================================================
    # STAGE 4: ID ALLOCATION
    # =========================================================================

    def _unreadable_ids(self, record_type: RecordType) -> List[int]:
        ids = (leading_id(line) for line in self._unreadable[record_type])
        return [i for i in ids if i is not None]

    def next_patient_id(self) -> int:
        return next_id(
            chain((p.id for p in self._patients), self._unreadable_ids(RecordType.PATIENT))
        )

    def next_appointment_id(self) -> int:
        return next_id(
            chain(
                (a.appointment_id for a in self._appointments),
                self._unreadable_ids(RecordType.APPOINTMENT),
            )
        )

    def next_bill_id(self) -> int:
        return next_id(
            chain((b.bill_id for b in self._bills), self._unreadable_ids(RecordType.BILL))
        )

    # =========================================================================
    # STAGE 5: CREATION
    # =========================================================================

    def add_patient(self, name: str, age: int, disease: str) -> Patient:
        """Register a patient under the next free ID and return it."""
        patient = Patient(id=self.next_patient_id(), name=name, age=age, disease=disease)
        self._patients.append(patient)
        logger.debug(f"Patient added | id={patient.id}")
        return patient

    def add_appointment(self, patient_id: int, doctor: str, date: str, time: str) -> Appointment:
        """
        Book an appointment for an existing patient.

        The new appointment always starts in BOOKED status.

        Raises:
            PatientNotFoundError: If ``patient_id`` does not exist
        """
        self.get_patient_or_raise(patient_id)
        appointment = Appointment(
            appointment_id=self.next_appointment_id(),
            patient_id=patient_id,
            doctor=doctor,
            date=date,
            time=time,
            status=AppointmentStatus.BOOKED,
        )
        self._appointments.append(appointment)
        logger.debug(
            f"Appointment booked | id={appointment.appointment_id} | patient={patient_id}"
        )
        return appointment

    def add_bill(self, patient_id: int, amount: float, details: str, datetime: str) -> Bill:
        """
        Raise a bill against an existing patient.

        Raises:
            PatientNotFoundError: If ``patient_id`` does not exist
        """
        self.get_patient_or_raise(patient_id)
        bill = Bill(
            bill_id=self.next_bill_id(),
            patient_id=patient_id,
            amount=float(amount),
            details=details,
            datetime=datetime,
        )
        self._bills.append(bill)
        logger.debug(f"Bill generated | id={bill.bill_id} | patient={patient_id}")
        return bill

    # =========================================================================
    # STAGE 6: LOOKUP
    # =========================================================================

    def get_patient(self, patient_id: int) -> Optional[Patient]:
        """Return the patient with ``patient_id``, or None."""
        for patient in self._patients:
            if patient.id == patient_id:
                return patient
        return None

    def get_patient_or_raise(self, patient_id: int) -> Patient:
        """
        Return the patient with ``patient_id``.

        Raises:
            PatientNotFoundError: If it doesn't exist
        """
        patient = self.get_patient(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        for appointment in self._appointments:
            if appointment.appointment_id == appointment_id:
                return appointment
        return None

    def get_appointment_or_raise(self, appointment_id: int) -> Appointment:
        """
        Return the appointment with ``appointment_id``.

        Raises:
            AppointmentNotFoundError: If it doesn't exist
        """
        appointment = self.get_appointment(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    def get_bill(self, bill_id: int) -> Optional[Bill]:
        for bill in self._bills:
            if bill.bill_id == bill_id:
                return bill
        return None

    # =========================================================================
    # STAGE 7: SEARCH
    # =========================================================================

    def find_patients_by_name(self, query: str) -> List[Patient]:
        """
        Case-insensitive substring search over patient names.

        Returns matches in insertion order; an empty list if none match.
        """
        query_lower = query.lower()
        return [p for p in self._patients if query_lower in p.name.lower()]

    def find_appointments_by_date(self, date: str) -> List[Appointment]:
        """Appointments whose date text equals ``date`` exactly."""
        return [a for a in self._appointments if a.date == date]

    def bills_for_patient(self, patient_id: int) -> List[Bill]:
        return [b for b in self._bills if b.patient_id == patient_id]

    # =========================================================================
    # STAGE 8: MUTATION
    # =========================================================================

    def update_patient(
        self, patient_id: int, name: str = "", age: int = 0, disease: str = ""
    ) -> Optional[Patient]:
        """
        Edit a patient in place.

        Blank ``name``/``disease`` and a non-positive ``age`` keep the
        current value.

        Returns:
            The updated patient, or None (no-op) if the ID is unknown
        """
        patient = self.get_patient(patient_id)
        if patient is None:
            return None

        if name:
            patient.name = name
        if age > 0:
            patient.age = age
        if disease:
            patient.disease = disease

        logger.debug(f"Patient updated | id={patient_id}")
        return patient

    def cancel_appointment(self, appointment_id: int) -> CancelOutcome:
        """
        Move an appointment from BOOKED to CANCELLED.

        Returns:
            CANCELLED on success, ALREADY_CANCELLED if it was cancelled
            before (nothing changes), NOT_FOUND for an unknown ID
        """
        appointment = self.get_appointment(appointment_id)
        if appointment is None:
            return CancelOutcome.NOT_FOUND
        if appointment.is_cancelled:
            return CancelOutcome.ALREADY_CANCELLED

        appointment.status = AppointmentStatus.CANCELLED
        logger.debug(f"Appointment cancelled | id={appointment_id}")
        return CancelOutcome.CANCELLED

    def delete_patient_cascade(self, patient_id: int) -> Optional[CascadeDeleteResult]:
        """
        Remove a patient together with all their appointments and bills.

        Returns:
            A CascadeDeleteResult with the removed counts, or None (no-op)
            if the ID is unknown
        """
        patient = self.get_patient(patient_id)
        if patient is None:
            return None

        kept_appointments = [a for a in self._appointments if a.patient_id != patient_id]
        kept_bills = [b for b in self._bills if b.patient_id != patient_id]
        result = CascadeDeleteResult(
            patient=patient,
            appointments_removed=len(self._appointments) - len(kept_appointments),
            bills_removed=len(self._bills) - len(kept_bills),
        )

        self._appointments = kept_appointments
        self._bills = kept_bills
        self._patients = [p for p in self._patients if p.id != patient_id]

        logger.info(
            f"Patient deleted | id={patient_id} | "
            f"appointments removed: {result.appointments_removed} | "
            f"bills removed: {result.bills_removed}"
        )
        return result

    # =========================================================================
    # STAGE 9: PROPERTIES
    # =========================================================================

    @property
    def patient_count(self) -> int:
        return len(self._patients)

    @property
    def appointment_count(self) -> int:
        return len(self._appointments)

    @property
    def bill_count(self) -> int:
        return len(self._bills)
