"""
Reporting Layer - Exports

Submodules:
    csv_export.py → Bills CSV export

Dependency Rule:
    This layer depends on: core
    This layer is used by: service
"""

from clinic_records.reporting.csv_export import (
    bill_to_csv_row,
    export_bills_csv,
    flatten_details,
    render_bills_csv,
)

__all__ = [
    "bill_to_csv_row",
    "export_bills_csv",
    "flatten_details",
    "render_bills_csv",
]
