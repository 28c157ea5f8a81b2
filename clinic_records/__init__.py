"""
Clinic Records

Single-operator record management for a small clinic: patients,
appointments and bills kept in local pipe-delimited text files, with
name/date search, cascade delete and CSV export of bills.

Architecture Overview:
    clinic_records/
    ├── core/          → Record types, enums, configuration (Layer 0 - Pure)
    ├── repository/    → In-memory record store (Layer 1)
    ├── persistence/   → Flat file load/save (Layer 2 - Infrastructure)
    ├── reporting/     → CSV export (Layer 3)
    ├── service.py     → Main orchestrator (Layer 4 - Public API)
    └── cli.py         → Menu-driven front end (Layer 5)

Quick Start:
    from clinic_records import ClinicRecordService

    service = ClinicRecordService.from_environment()
    service.load()
    patient = service.add_patient("Alice Smith", 34, "Asthma")
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from clinic_records.service import ClinicRecordService

# Core Models
from clinic_records.core.models import (
    Patient,
    Appointment,
    Bill,
    ParsedLine,
    CascadeDeleteResult,
    LoadReport,
    ExportSummary,
)

# Enums
from clinic_records.core.enums import (
    AppointmentStatus,
    CancelOutcome,
    RecordType,
)

# Configuration
from clinic_records.core.config import ClinicConfiguration

__all__ = [
    # Main Entry Point (use this!)
    "ClinicRecordService",
    # Core Models
    "Patient",
    "Appointment",
    "Bill",
    "ParsedLine",
    "CascadeDeleteResult",
    "LoadReport",
    "ExportSummary",
    # Enums
    "AppointmentStatus",
    "CancelOutcome",
    "RecordType",
    # Configuration
    "ClinicConfiguration",
]
