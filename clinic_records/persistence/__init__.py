"""
Persistence Layer - Flat File Storage

Submodules:
    flat_file_storage.py → FlatFileStorage + line read/write helpers

Dependency Rule:
    This layer depends on: core, repository
    This layer is used by: service
"""

from clinic_records.persistence.flat_file_storage import (
    FlatFileStorage,
    read_lines,
    write_lines,
)

__all__ = [
    "FlatFileStorage",
    "read_lines",
    "write_lines",
]
