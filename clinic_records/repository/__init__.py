"""
Repository Layer - In-Memory Record Store

Submodules:
    record_store.py → RecordStore + ID allocation helpers

Dependency Rule:
    This layer depends on: core (models, enums, exceptions)
    This layer is used by: persistence, reporting, service
"""

from clinic_records.repository.record_store import RecordStore, leading_id, next_id

__all__ = [
    "RecordStore",
    "leading_id",
    "next_id",
]
