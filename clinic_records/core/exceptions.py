"""
Domain Exceptions for Clinic Records

This module defines all custom exceptions raised by the clinic record
management layer. Well-defined exceptions enable:
    1. Clear error categorization for the menu front-end
    2. Specific catch blocks for lookup, parsing and file failures
    3. Rich error context for troubleshooting

Exception Hierarchy:
    ClinicRecordsError (base)
    ├── ConfigurationError          → Invalid configuration
    ├── RecordError                 → Record-related errors
    │   ├── RecordNotFoundError
    │   │   ├── PatientNotFoundError
    │   │   └── AppointmentNotFoundError
    │   └── MalformedRecordError    → Persisted line cannot be parsed
    └── PersistenceError            → Flat file access failures
        ├── StorageReadError
        └── StorageWriteError

Usage:
    from clinic_records.core.exceptions import PatientNotFoundError

    try:
        service.book_appointment(patient_id=42, doctor="Dr. Rao", ...)
    except PatientNotFoundError as e:
        print(f"Patient not found: {e.record_id}")
"""

from typing import Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================


class ClinicRecordsError(Exception):
    """
    Base exception for all clinic record errors.

    What it does:
        Provides a common base class for all domain-specific exceptions,
        enabling catch-all handling in the CLI loop while preserving
        specific error types.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """
        Initialize with message and optional context.

        Args:
            message: Human-readable error description
            context: Additional debugging context (record id, file path)
        """
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(ClinicRecordsError):
    """
    Error in clinic configuration.

    When raised:
        - Data directory path points at a regular file
        - A data file name is empty
        - Admin credentials are blank

    Example:
        >>> raise ConfigurationError(
        ...     "Admin password must not be empty",
        ...     context={"setting": "CLINIC_ADMIN_PASSWORD"}
        ... )
    """

    pass


# =============================================================================
# STAGE 3: RECORD ERRORS
# =============================================================================


class RecordError(ClinicRecordsError):
    """Base exception for errors about individual records."""

    pass


class RecordNotFoundError(RecordError):
    """
    A record with the requested ID does not exist.

    Attributes:
        record_type: Kind of record that was looked up ("patient", ...)
        record_id: The ID that was not found
    """

    def __init__(self, record_type: str, record_id: int, message: Optional[str] = None):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(
            message or f"{record_type.capitalize()} not found: {record_id}",
            context={"record_type": record_type, "record_id": record_id},
        )


class PatientNotFoundError(RecordNotFoundError):
    """
    Patient does not exist.

    When raised:
        - Booking an appointment for an unknown patient
        - Generating a bill for an unknown patient
        - Strict lookups via ``get_patient_or_raise``
    """

    def __init__(self, patient_id: int, message: Optional[str] = None):
        super().__init__("patient", patient_id, message)


class AppointmentNotFoundError(RecordNotFoundError):
    """
    Appointment does not exist.

    When raised:
        - Strict lookups via ``get_appointment_or_raise``
    """

    def __init__(self, appointment_id: int, message: Optional[str] = None):
        super().__init__("appointment", appointment_id, message)


class MalformedRecordError(RecordError):
    """
    A persisted line could not be decoded into a record.

    What it does:
        Signals that a line in one of the flat files has too few fields,
        a non-numeric value in a numeric field, or an unknown status.
        The loader catches it and reports the line instead of crashing.

    Attributes:
        record_type: Kind of record being decoded
        raw_line: The offending line, verbatim
        reason: Why decoding failed
    """

    def __init__(self, record_type: str, raw_line: str, reason: str):
        self.record_type = record_type
        self.raw_line = raw_line
        self.reason = reason
        super().__init__(
            f"Malformed {record_type} record: {reason}",
            context={"record_type": record_type, "line": raw_line},
        )


# =============================================================================
# STAGE 4: PERSISTENCE ERRORS
# =============================================================================


class PersistenceError(ClinicRecordsError):
    """
    Error accessing the flat files.

    What it does:
        Indicates a problem with the underlying file system. Always
        recoverable from the caller's point of view: in-memory state is
        kept and the next successful save brings disk back in line.
    """

    pass


class StorageReadError(PersistenceError):
    """
    A data file exists but could not be read.

    Attributes:
        file_path: Path to the data file
        reason: Underlying OS error text
    """

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(
            f"Failed to read {file_path}: {reason}",
            context={"file_path": file_path},
        )


class StorageWriteError(PersistenceError):
    """
    A data or export file could not be written.

    Attributes:
        file_path: Path to the target file
        reason: Underlying OS error text
    """

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(
            f"Failed to write {file_path}: {reason}",
            context={"file_path": file_path},
        )
