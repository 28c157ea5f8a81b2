"""
Bills CSV Export

This module writes every bill to a CSV file for use in a spreadsheet:

    BillID,PatientID,Amount,Details,Datetime
    1,2,150.0,"flu shot, 2 doses",2024-01-05 10:12:00

Row Rules:
    - ``details`` is wrapped in double quotes so commas survive
    - Line breaks (``\\n``, ``\\r``) inside ``details`` become spaces first
    - Double quotes inside ``details`` are written as-is (not doubled)
    - ``amount`` uses the default float-to-text conversion

Rows are assembled by hand rather than through :mod:`csv` so the output
matches the rules above byte for byte.
"""

from pathlib import Path
from typing import Iterable, List

from loguru import logger

from clinic_records.core.constants import CSV_HEADER
from clinic_records.core.exceptions import StorageWriteError
from clinic_records.core.models import Bill, ExportSummary


def flatten_details(details: str) -> str:
    """Replace carriage returns and newlines with single spaces."""
    return details.replace("\r", " ").replace("\n", " ")


def bill_to_csv_row(bill: Bill) -> str:
    """
    Render one bill as a CSV row (without line terminator).

    Example:
        >>> bill_to_csv_row(Bill(1, 2, 150.0, "flu\\nshot, 2 doses", "2024-01-05 10:12:00"))
        '1,2,150.0,"flu shot, 2 doses",2024-01-05 10:12:00'
    """
    return (
        f"{bill.bill_id},{bill.patient_id},{bill.formatted_amount},"
        f"\"{flatten_details(bill.details)}\",{bill.datetime}"
    )


def render_bills_csv(bills: Iterable[Bill]) -> List[str]:
    """Header row followed by one row per bill, in the given order."""
    return [CSV_HEADER] + [bill_to_csv_row(bill) for bill in bills]


def export_bills_csv(bills: Iterable[Bill], output_file_path: str) -> ExportSummary:
    """
    Write bills to a CSV file, replacing any previous export.

    Step 1: Create output directory if it doesn't exist
    Step 2: Render header and rows
    Step 3: Write the file
    Step 4: Log and return summary

    Args:
        bills: Bills to export, in display order
        output_file_path: Destination path

    Returns:
        ExportSummary with the absolute path and number of bill rows

    Raises:
        StorageWriteError: If the file cannot be written
    """
    output_path = Path(output_file_path)
    rows = render_bills_csv(bills)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8", newline="\n") as file:
            for row in rows:
                file.write(row + "\n")
    except OSError as error:
        logger.error(f"Error exporting bills to {output_path}: {error}")
        raise StorageWriteError(str(output_path), str(error))

    summary = ExportSummary(file_path=str(output_path.absolute()), rows_written=len(rows) - 1)
    logger.info(f"Exported {summary.rows_written} bills to: {summary.file_path}")
    return summary
