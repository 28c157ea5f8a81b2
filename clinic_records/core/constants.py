"""
Constants for Clinic Records

Constant Categories:
    FILE FORMAT    → Delimiter and per-record field counts
    FILE NAMES     → Default names of the data and export files
    CSV EXPORT     → Header row of the bills export
    TIMESTAMPS     → Format of bill creation timestamps
"""

from typing import Dict


# =============================================================================
# STAGE 1: FLAT FILE FORMAT
# =============================================================================

FIELD_DELIMITER: str = "|"

# Minimum number of fields a line must carry to be decoded.
# Extra trailing fields are ignored.
FIELD_COUNTS: Dict[str, int] = {
    "patient": 4,
    "appointment": 6,
    "bill": 5,
}


# =============================================================================
# STAGE 2: FILE NAMES
# =============================================================================

PATIENTS_FILE_NAME: str = "patients.txt"
APPOINTMENTS_FILE_NAME: str = "appointments.txt"
BILLS_FILE_NAME: str = "bills.txt"
EXPORT_FILE_NAME: str = "export_bills.csv"


# =============================================================================
# STAGE 3: CSV EXPORT
# =============================================================================

CSV_HEADER: str = "BillID,PatientID,Amount,Details,Datetime"


# =============================================================================
# STAGE 4: TIMESTAMPS
# =============================================================================

TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"
