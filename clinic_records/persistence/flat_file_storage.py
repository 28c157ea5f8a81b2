"""
Flat File Storage - Persistence Layer

This module translates the record store's collections to and from the
three line-oriented text files:

    patients.txt      id|name|age|disease
    appointments.txt  appointmentID|patientID|doctor|date|time|status
    bills.txt         billID|patientID|amount|details|datetime

Behavior:
    Load  → A missing file means an empty collection. Empty lines are
            skipped. Lines that fail to decode are collected into the
            LoadReport and logged; they are never loaded as records,
            but the store keeps them verbatim.
    Save  → The whole file is rewritten from the current collection, one
            line per record in collection order, followed by any kept
            unreadable lines unchanged. With atomic writes the
            content goes to a temp sibling first and is renamed over the
            target, so a crash mid-save leaves the previous file intact.

Every file handle is opened, used and closed inside a single call.

Usage:
    from clinic_records.persistence import FlatFileStorage
    from clinic_records.repository import RecordStore

    storage = FlatFileStorage("data/")
    store = RecordStore()
    report = storage.load_all(store)
    storage.save_patients(store)
"""

import os
import stat
import tempfile
from itertools import chain
from pathlib import Path
from typing import Iterable, List, Tuple, Type

from loguru import logger

from clinic_records.core.constants import (
    APPOINTMENTS_FILE_NAME,
    BILLS_FILE_NAME,
    PATIENTS_FILE_NAME,
)
from clinic_records.core.enums import RecordType
from clinic_records.core.exceptions import StorageReadError, StorageWriteError
from clinic_records.core.models import (
    Appointment,
    Bill,
    LoadReport,
    ParsedLine,
    Patient,
    Record,
    RecordT,
    parse_line,
)
from clinic_records.repository.record_store import RecordStore


# =============================================================================
# STAGE 1: LOW-LEVEL FILE HELPERS
# =============================================================================


def _new_file_mode() -> int:
    """Mode a freshly created file gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_lines(file_path: Path, lines: Iterable[str], atomic: bool = True) -> int:
    """
    Overwrite ``file_path`` with ``lines``, each terminated by ``\\n``.

    Step 1: Create the parent directory if needed
    Step 2: Write to a temp sibling (atomic) or straight to the target
    Step 3: Give the temp file the target's permissions (atomic)
    Step 4: Rename the temp file over the target (atomic)

    Returns:
        Number of lines written

    Raises:
        StorageWriteError: If the file cannot be written
    """
    file_path = Path(file_path)
    count = 0
    try:
        # Step 1
        file_path.parent.mkdir(parents=True, exist_ok=True)

        if not atomic:
            # Step 2 (direct)
            with open(file_path, "w", encoding="utf-8", newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
                    count += 1
            return count

        # Step 2 (temp sibling)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{file_path.name}.", suffix=".tmp", dir=str(file_path.parent)
        )
        try:
            try:
                f = os.fdopen(fd, "w", encoding="utf-8", newline="\n")
            except BaseException:
                os.close(fd)
                raise
            with f:
                for line in lines:
                    f.write(line + "\n")
                    count += 1
                f.flush()
                os.fsync(f.fileno())

            # Step 3: mkstemp always creates 0600
            if file_path.exists():
                mode = stat.S_IMODE(os.stat(file_path).st_mode)
            else:
                mode = _new_file_mode()
            os.chmod(tmp_name, mode)

            # Step 4
            os.replace(tmp_name, file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return count

    except OSError as error:
        logger.error(f"Error writing {file_path}: {error}")
        raise StorageWriteError(str(file_path), str(error))


def read_lines(file_path: Path) -> List[str]:
    """
    Read ``file_path`` and return its lines without line terminators.

    Raises:
        StorageReadError: If the file exists but cannot be read
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f]
    except (OSError, UnicodeDecodeError) as error:
        logger.error(f"Error reading {file_path}: {error}")
        raise StorageReadError(str(file_path), str(error))


# =============================================================================
# STAGE 2: FLAT FILE STORAGE
# =============================================================================


class FlatFileStorage:
    """
    Loads and saves the record store as three pipe-delimited text files.

    What it does:
        Full-collection replacement in both directions: loading replaces
        whatever the store held, saving rewrites the whole file.

    Example:
        >>> storage = FlatFileStorage("/tmp/clinic")
        >>> storage.patients_path.name
        'patients.txt'
    """

    def __init__(
        self,
        data_directory: str = ".",
        patients_file: str = PATIENTS_FILE_NAME,
        appointments_file: str = APPOINTMENTS_FILE_NAME,
        bills_file: str = BILLS_FILE_NAME,
        atomic_writes: bool = True,
    ):
        self._data_directory = Path(data_directory)
        self._patients_path = self._data_directory / patients_file
        self._appointments_path = self._data_directory / appointments_file
        self._bills_path = self._data_directory / bills_file
        self._atomic_writes = atomic_writes

    @classmethod
    def from_config(cls, config) -> "FlatFileStorage":
        """Build storage from a ClinicConfiguration."""
        return cls(
            data_directory=config.data_directory,
            patients_file=config.patients_file,
            appointments_file=config.appointments_file,
            bills_file=config.bills_file,
            atomic_writes=config.atomic_writes,
        )

    # =========================================================================
    # STAGE 3: LOADING
    # =========================================================================

    def _load_file(
        self, file_path: Path, record_cls: Type[RecordT]
    ) -> Tuple[List[RecordT], List[ParsedLine], bool]:
        """
        Decode every non-empty line of ``file_path``.

        Returns:
            (records, malformed lines, whether the file existed)
        """
        if not file_path.exists():
            logger.debug(f"Data file not found, starting empty: {file_path}")
            return [], [], False

        records: List[RecordT] = []
        malformed: List[ParsedLine] = []
        for line_number, line in enumerate(read_lines(file_path), 1):
            if not line:
                continue
            parsed = parse_line(record_cls, line, line_number=line_number)
            if parsed.is_ok:
                records.append(parsed.record)
            else:
                logger.warning(
                    f"Skipping malformed line {line_number} in {file_path.name}: "
                    f"{parsed.reason}"
                )
                malformed.append(parsed)
        return records, malformed, True

    def load_all(self, store: RecordStore) -> LoadReport:
        """
        Replace the store's three collections with the file contents.

        Returns:
            LoadReport with per-type counts, malformed lines and missing files

        Raises:
            StorageReadError: If an existing file cannot be read
        """
        report = LoadReport()
        sources = [
            (RecordType.PATIENT, self._patients_path, Patient, store.replace_patients),
            (
                RecordType.APPOINTMENT,
                self._appointments_path,
                Appointment,
                store.replace_appointments,
            ),
            (RecordType.BILL, self._bills_path, Bill, store.replace_bills),
        ]

        for record_type, path, record_cls, replace in sources:
            records, malformed, existed = self._load_file(path, record_cls)
            replace(records)
            store.replace_unreadable_lines(record_type, (p.raw_line for p in malformed))
            report.loaded[record_type] = len(records)
            if malformed:
                report.malformed[record_type] = malformed
            if not existed:
                report.missing_files.append(str(path))

        logger.info(
            f"Loaded records | patients: {report.loaded[RecordType.PATIENT]} | "
            f"appointments: {report.loaded[RecordType.APPOINTMENT]} | "
            f"bills: {report.loaded[RecordType.BILL]} | "
            f"malformed: {report.malformed_count}"
        )
        return report

    # =========================================================================
    # STAGE 4: SAVING
    # =========================================================================

    def _save(self, file_path: Path, records: Iterable[Record], unreadable: Iterable[str]) -> int:
        """Write serialized records, then kept unreadable lines, to ``file_path``."""
        lines = chain((r.serialize() for r in records), unreadable)
        return write_lines(file_path, lines, self._atomic_writes)

    def save_patients(self, store: RecordStore) -> None:
        count = self._save(
            self._patients_path,
            store.patients,
            store.unreadable_lines(RecordType.PATIENT),
        )
        logger.debug(f"Saved {count} patient lines to {self._patients_path}")

    def save_appointments(self, store: RecordStore) -> None:
        count = self._save(
            self._appointments_path,
            store.appointments,
            store.unreadable_lines(RecordType.APPOINTMENT),
        )
        logger.debug(f"Saved {count} appointment lines to {self._appointments_path}")

    def save_bills(self, store: RecordStore) -> None:
        count = self._save(
            self._bills_path, store.bills, store.unreadable_lines(RecordType.BILL)
        )
        logger.debug(f"Saved {count} bill lines to {self._bills_path}")

    def save_all(self, store: RecordStore) -> None:
        """Rewrite all three files."""
        self.save_patients(store)
        self.save_appointments(store)
        self.save_bills(store)
        logger.info(f"All records saved to {self._data_directory}")

    # =========================================================================
    # STAGE 5: PROPERTIES
    # =========================================================================

    @property
    def data_directory(self) -> Path:
        return self._data_directory

    @property
    def patients_path(self) -> Path:
        return self._patients_path

    @property
    def appointments_path(self) -> Path:
        return self._appointments_path

    @property
    def bills_path(self) -> Path:
        return self._bills_path
