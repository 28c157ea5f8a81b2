"""
Enumerations for Clinic Records

This module defines the enumeration types used across the record
management layer.

Enumeration Categories:
    AppointmentStatus → Lifecycle state of an appointment
    RecordType        → The three persisted record kinds
    CancelOutcome     → Result of a cancellation request
    MenuChoice        → Numbered operations offered by the CLI menu
"""

from enum import Enum, IntEnum


# =============================================================================
# STAGE 1: APPOINTMENT STATUS
# =============================================================================


class AppointmentStatus(str, Enum):
    """
    Status of an appointment.

    Transitions:
        BOOKED → CANCELLED (one way; a cancelled appointment is never rebooked)

    The value is the exact text written to ``appointments.txt``.
    """

    BOOKED = "Booked"
    CANCELLED = "Cancelled"


# =============================================================================
# STAGE 2: RECORD TYPE
# =============================================================================


class RecordType(str, Enum):
    """Kinds of records held by the store, used in logs and load reports."""

    PATIENT = "patient"
    APPOINTMENT = "appointment"
    BILL = "bill"


# =============================================================================
# STAGE 3: OPERATION OUTCOMES
# =============================================================================


class CancelOutcome(str, Enum):
    """
    Result of ``cancel_appointment``.

    ALREADY_CANCELLED is informational, not an error: nothing changes and
    nothing is saved.
    """

    CANCELLED = "CANCELLED"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    NOT_FOUND = "NOT_FOUND"


# =============================================================================
# STAGE 4: MENU CHOICES
# =============================================================================


class MenuChoice(IntEnum):
    """Numbered entries of the interactive main menu."""

    ADD_PATIENT = 1
    VIEW_PATIENTS = 2
    SEARCH_PATIENT = 3
    UPDATE_PATIENT = 4
    DELETE_PATIENT = 5
    BOOK_APPOINTMENT = 6
    VIEW_APPOINTMENTS = 7
    CANCEL_APPOINTMENT = 8
    SEARCH_APPOINTMENTS_BY_DATE = 9
    GENERATE_BILL = 10
    VIEW_PATIENT_BILLS = 11
    VIEW_ALL_BILLS = 12
    EXPORT_BILLS_CSV = 13
    SAVE_AND_EXIT = 14

    @property
    def label(self) -> str:
        """Menu text, e.g. ``"Add Patient"``."""
        return MENU_LABELS[self]


MENU_LABELS = {
    MenuChoice.ADD_PATIENT: "Add Patient",
    MenuChoice.VIEW_PATIENTS: "View Patients",
    MenuChoice.SEARCH_PATIENT: "Search Patient",
    MenuChoice.UPDATE_PATIENT: "Update Patient",
    MenuChoice.DELETE_PATIENT: "Delete Patient",
    MenuChoice.BOOK_APPOINTMENT: "Book Appointment",
    MenuChoice.VIEW_APPOINTMENTS: "View Appointments",
    MenuChoice.CANCEL_APPOINTMENT: "Cancel Appointment",
    MenuChoice.SEARCH_APPOINTMENTS_BY_DATE: "Search Appointments by Date",
    MenuChoice.GENERATE_BILL: "Generate Bill",
    MenuChoice.VIEW_PATIENT_BILLS: "View Patient Bills",
    MenuChoice.VIEW_ALL_BILLS: "View All Bills",
    MenuChoice.EXPORT_BILLS_CSV: "Export Bills to CSV",
    MenuChoice.SAVE_AND_EXIT: "Save & Exit",
}
