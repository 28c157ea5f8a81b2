"""
Core Layer - Record Types, Enums, Configuration and Exceptions

This layer contains the side-effect-free building blocks of the clinic
record tool.

Submodules:
    models.py     → Record types (Patient, Appointment, Bill) and result objects
    enums.py      → Enumerations (AppointmentStatus, CancelOutcome, MenuChoice)
    constants.py  → Delimiter, file names, CSV header, timestamp format
    config.py     → Configuration dataclass
    exceptions.py → Domain-specific exceptions

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.
"""

from clinic_records.core.models import (
    Patient,
    Appointment,
    Bill,
    ParsedLine,
    CascadeDeleteResult,
    LoadReport,
    ExportSummary,
    format_amount,
    parse_line,
)
from clinic_records.core.enums import (
    AppointmentStatus,
    RecordType,
    CancelOutcome,
    MenuChoice,
)
from clinic_records.core.config import ClinicConfiguration
from clinic_records.core.exceptions import (
    ClinicRecordsError,
    ConfigurationError,
    RecordError,
    RecordNotFoundError,
    PatientNotFoundError,
    AppointmentNotFoundError,
    MalformedRecordError,
    PersistenceError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Models
    "Patient",
    "Appointment",
    "Bill",
    "ParsedLine",
    "CascadeDeleteResult",
    "LoadReport",
    "ExportSummary",
    "format_amount",
    "parse_line",
    # Enums
    "AppointmentStatus",
    "RecordType",
    "CancelOutcome",
    "MenuChoice",
    # Configuration
    "ClinicConfiguration",
    # Exceptions
    "ClinicRecordsError",
    "ConfigurationError",
    "RecordError",
    "RecordNotFoundError",
    "PatientNotFoundError",
    "AppointmentNotFoundError",
    "MalformedRecordError",
    "PersistenceError",
    "StorageReadError",
    "StorageWriteError",
]
