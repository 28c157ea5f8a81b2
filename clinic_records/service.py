"""
Clinic Record Service - Main Orchestrator

This is the public entry point for the record management layer. It
coordinates the record store, the flat-file storage and the CSV export
behind one object whose methods line up with the CLI menu.

Architecture Diagram:
    ┌───────────────────────────────────────────────────────────────┐
    │                     ClinicRecordService                       │
    ├───────────────────────────────────────────────────────────────┤
    │   ┌──────────────┐    ┌──────────────┐    ┌──────────────┐    │
    │   │ FlatFile     │ ⇄  │ RecordStore  │ →  │ CSV Export   │    │
    │   │ Storage      │    │ (in memory)  │    │              │    │
    │   └──────────────┘    └──────────────┘    └──────────────┘    │
    └───────────────────────────────────────────────────────────────┘

Write Discipline:
    Every mutating method changes the store first and then rewrites the
    affected file(s) before returning. A StorageWriteError raised by that
    save leaves the in-memory change in place; the next successful save
    brings the file back in line.

Usage:
    from clinic_records import ClinicRecordService

    service = ClinicRecordService.from_environment()
    service.load()
    patient = service.add_patient("Alice Smith", 34, "Asthma")
    service.book_appointment(patient.id, "Dr. Rao", "2024-01-05", "09:30")
"""

from typing import List, Optional

from loguru import logger

from clinic_records.clock import Clock, now_timestamp
from clinic_records.core.config import ClinicConfiguration
from clinic_records.core.enums import CancelOutcome
from clinic_records.core.models import (
    Appointment,
    Bill,
    CascadeDeleteResult,
    ExportSummary,
    LoadReport,
    Patient,
)
from clinic_records.persistence import FlatFileStorage
from clinic_records.reporting import export_bills_csv
from clinic_records.repository import RecordStore


# =============================================================================
# STAGE 1: SERVICE CLASS
# =============================================================================


class ClinicRecordService:
    """
    Facade over store, storage and reporting.

    What it does:
        Offers one method per menu operation and keeps disk in step with
        memory after every mutation.

    How it works:
        STAGE 1: Build store/storage from configuration (or use overrides)
        STAGE 2: load() replaces the store contents from disk
        STAGE 3: Each mutation → store call → save of affected file(s)
        STAGE 4: save_all() on exit

    Example:
        >>> service = ClinicRecordService(ClinicConfiguration(data_directory="/tmp/c"))
        >>> service.load()
        >>> service.add_patient("Ann", 30, "Flu").id
        1
    """

    def __init__(
        self,
        config: ClinicConfiguration,
        store: Optional[RecordStore] = None,
        storage: Optional[FlatFileStorage] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize with configuration and optional component overrides.

        Args:
            config: Clinic configuration
            store: Optional record store override (for testing)
            storage: Optional storage override (for testing)
            clock: Optional timestamp source for new bills
        """
        self._config = config
        self._store = store if store is not None else RecordStore()
        self._storage = storage if storage is not None else FlatFileStorage.from_config(config)
        self._clock = clock or now_timestamp

        logger.debug(f"ClinicRecordService initialized | data: {config.data_directory}")

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None) -> "ClinicRecordService":
        """Create a service from CLINIC_* environment variables / .env."""
        return cls(ClinicConfiguration.from_environment(env_file=env_file))

    # =========================================================================
    # STAGE 2: SESSION BOUNDARIES
    # =========================================================================

    def load(self) -> LoadReport:
        """Replace in-memory records with the contents of the data files."""
        return self._storage.load_all(self._store)

    def save_all(self) -> None:
        """Rewrite all three data files."""
        self._storage.save_all(self._store)

    # =========================================================================
    # STAGE 3: PATIENTS
    # =========================================================================

    def add_patient(self, name: str, age: int, disease: str) -> Patient:
        patient = self._store.add_patient(name, age, disease)
        self._storage.save_patients(self._store)
        logger.info(f"Patient added with ID: {patient.id}")
        return patient

    def list_patients(self) -> List[Patient]:
        return list(self._store.patients)

    def get_patient(self, patient_id: int) -> Optional[Patient]:
        return self._store.get_patient(patient_id)

    def search_patients_by_name(self, query: str) -> List[Patient]:
        return self._store.find_patients_by_name(query)

    def update_patient(
        self, patient_id: int, name: str = "", age: int = 0, disease: str = ""
    ) -> Optional[Patient]:
        """
        Edit a patient; blank text / non-positive age keep current values.

        Returns:
            The updated patient, or None if the ID is unknown (nothing saved)
        """
        patient = self._store.update_patient(patient_id, name=name, age=age, disease=disease)
        if patient is not None:
            self._storage.save_patients(self._store)
        return patient

    def delete_patient(self, patient_id: int) -> Optional[CascadeDeleteResult]:
        """
        Delete a patient with their appointments and bills, then rewrite
        all three files.

        Returns:
            What was removed, or None if the ID is unknown (nothing saved)
        """
        result = self._store.delete_patient_cascade(patient_id)
        if result is not None:
            self._storage.save_all(self._store)
        return result

    # =========================================================================
    # STAGE 4: APPOINTMENTS
    # =========================================================================

    def book_appointment(self, patient_id: int, doctor: str, date: str, time: str) -> Appointment:
        """
        Book an appointment for an existing patient.

        Raises:
            PatientNotFoundError: If the patient does not exist
        """
        appointment = self._store.add_appointment(patient_id, doctor, date, time)
        self._storage.save_appointments(self._store)
        logger.info(f"Appointment booked with ID: {appointment.appointment_id}")
        return appointment

    def list_appointments(self) -> List[Appointment]:
        return list(self._store.appointments)

    def cancel_appointment(self, appointment_id: int) -> CancelOutcome:
        """Cancel an appointment; only a real status change is saved."""
        outcome = self._store.cancel_appointment(appointment_id)
        if outcome == CancelOutcome.CANCELLED:
            self._storage.save_appointments(self._store)
        return outcome

    def search_appointments_by_date(self, date: str) -> List[Appointment]:
        return self._store.find_appointments_by_date(date)

    # =========================================================================
    # STAGE 5: BILLS
    # =========================================================================

    def generate_bill(self, patient_id: int, amount: float, details: str) -> Bill:
        """
        Raise a bill stamped with the current time.

        Raises:
            PatientNotFoundError: If the patient does not exist
        """
        bill = self._store.add_bill(patient_id, amount, details, self._clock())
        self._storage.save_bills(self._store)
        logger.info(f"Bill generated with ID: {bill.bill_id}")
        return bill

    def bills_for_patient(self, patient_id: int) -> List[Bill]:
        return self._store.bills_for_patient(patient_id)

    def list_bills(self) -> List[Bill]:
        return list(self._store.bills)

    def export_bills(self, output_file_path: Optional[str] = None) -> ExportSummary:
        """Export all bills to CSV (defaults to the configured export path)."""
        path = output_file_path or str(self._config.export_path)
        return export_bills_csv(self._store.bills, path)

    # =========================================================================
    # STAGE 6: PROPERTIES
    # =========================================================================

    @property
    def config(self) -> ClinicConfiguration:
        return self._config

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def storage(self) -> FlatFileStorage:
        return self._storage
