"""
Domain Models for Clinic Records

This module defines the record types persisted by the clinic tool and the
small result objects returned by store, persistence and reporting
operations.

Model Hierarchy:
    Patient            → A registered patient
    Appointment        → A booked (or cancelled) visit for a patient
    Bill               → A charge raised against a patient
    ParsedLine         → Outcome of decoding one persisted line
    CascadeDeleteResult→ What a patient delete removed
    LoadReport         → Summary of a load-all pass
    ExportSummary      → Summary of a CSV export

Line Format:
    Each record serializes to a single line with its fields joined by ``|``
    in declared order. Fields are written verbatim: a value containing
    ``|`` or a line break cannot be read back correctly.

Usage:
    from clinic_records.core.models import Patient

    patient = Patient(id=1, name="Alice Smith", age=34, disease="Asthma")
    line = patient.serialize()          # "1|Alice Smith|34|Asthma"
    assert Patient.deserialize(line) == patient
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from clinic_records.core.constants import FIELD_COUNTS, FIELD_DELIMITER
from clinic_records.core.enums import AppointmentStatus, RecordType
from clinic_records.core.exceptions import MalformedRecordError


# =============================================================================
# STAGE 1: FIELD HELPERS
# =============================================================================


def format_amount(amount: float) -> str:
    """
    Render a bill amount as text.

    Uses the default float-to-text conversion, so ``150`` becomes
    ``"150.0"`` and ``12.5`` stays ``"12.5"``. No fixed number of decimal
    places is enforced.
    """
    return str(float(amount))


def _split_fields(line: str, record_type: RecordType) -> List[str]:
    """Split a line and check it carries at least the required field count."""
    parts = line.split(FIELD_DELIMITER)
    required = FIELD_COUNTS[record_type.value]
    if len(parts) < required:
        raise MalformedRecordError(
            record_type.value, line, f"expected {required} fields, found {len(parts)}"
        )
    return parts


def _parse_int(value: str, field_name: str, line: str, record_type: RecordType) -> int:
    try:
        return int(value)
    except ValueError:
        raise MalformedRecordError(
            record_type.value, line, f"{field_name} is not an integer: {value!r}"
        )


def _parse_float(value: str, field_name: str, line: str, record_type: RecordType) -> float:
    try:
        return float(value)
    except ValueError:
        raise MalformedRecordError(
            record_type.value, line, f"{field_name} is not a number: {value!r}"
        )


# =============================================================================
# STAGE 2: PATIENT MODEL
# =============================================================================


@dataclass
class Patient:
    """
    A registered patient.

    Mutable: ``update_patient`` edits name, age and disease in place.

    Attributes:
        id: Unique positive identifier
        name: Full name as entered
        age: Age in years
        disease: Condition or reason for registration
    """

    id: int
    name: str
    age: int
    disease: str

    record_type = RecordType.PATIENT

    def serialize(self) -> str:
        """Encode as ``id|name|age|disease``."""
        return FIELD_DELIMITER.join([str(self.id), self.name, str(self.age), self.disease])

    @classmethod
    def deserialize(cls, line: str) -> "Patient":
        """
        Decode a line written by :meth:`serialize`.

        Raises:
            MalformedRecordError: Too few fields or non-numeric id/age
        """
        parts = _split_fields(line, RecordType.PATIENT)
        return cls(
            id=_parse_int(parts[0], "id", line, RecordType.PATIENT),
            name=parts[1],
            age=_parse_int(parts[2], "age", line, RecordType.PATIENT),
            disease=parts[3],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display and logging."""
        return {"id": self.id, "name": self.name, "age": self.age, "disease": self.disease}


# =============================================================================
# STAGE 3: APPOINTMENT MODEL
# =============================================================================


@dataclass
class Appointment:
    """
    A visit booked for a patient with a doctor.

    ``date`` (``YYYY-MM-DD``) and ``time`` (``HH:MM``) are kept as text and
    are not checked against the calendar.

    Attributes:
        appointment_id: Unique positive identifier
        patient_id: ID of the patient the visit belongs to
        doctor: Doctor's name
        date: Visit date text
        time: Visit time text
        status: BOOKED on creation, CANCELLED once cancelled
    """

    appointment_id: int
    patient_id: int
    doctor: str
    date: str
    time: str
    status: AppointmentStatus = AppointmentStatus.BOOKED

    record_type = RecordType.APPOINTMENT

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED

    def serialize(self) -> str:
        """Encode as ``appointmentID|patientID|doctor|date|time|status``."""
        return FIELD_DELIMITER.join(
            [
                str(self.appointment_id),
                str(self.patient_id),
                self.doctor,
                self.date,
                self.time,
                self.status.value,
            ]
        )

    @classmethod
    def deserialize(cls, line: str) -> "Appointment":
        """
        Decode a line written by :meth:`serialize`.

        Raises:
            MalformedRecordError: Too few fields, non-numeric ids or an
                unknown status value
        """
        parts = _split_fields(line, RecordType.APPOINTMENT)
        try:
            status = AppointmentStatus(parts[5])
        except ValueError:
            raise MalformedRecordError(
                RecordType.APPOINTMENT.value, line, f"unknown status: {parts[5]!r}"
            )
        return cls(
            appointment_id=_parse_int(parts[0], "appointment_id", line, RecordType.APPOINTMENT),
            patient_id=_parse_int(parts[1], "patient_id", line, RecordType.APPOINTMENT),
            doctor=parts[2],
            date=parts[3],
            time=parts[4],
            status=status,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display and logging."""
        return {
            "appointment_id": self.appointment_id,
            "patient_id": self.patient_id,
            "doctor": self.doctor,
            "date": self.date,
            "time": self.time,
            "status": self.status.value,
        }


# =============================================================================
# STAGE 4: BILL MODEL
# =============================================================================


@dataclass(frozen=True)
class Bill:
    """
    A charge raised against a patient.

    Immutable once generated; bills only disappear through a patient
    cascade delete.

    Attributes:
        bill_id: Unique positive identifier
        patient_id: ID of the billed patient
        amount: Charged amount
        details: Free-text description
        datetime: Creation timestamp text (``YYYY-MM-DD HH:MM:SS``)
    """

    bill_id: int
    patient_id: int
    amount: float
    details: str
    datetime: str

    record_type = RecordType.BILL

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.amount)

    def serialize(self) -> str:
        """Encode as ``billID|patientID|amount|details|datetime``."""
        return FIELD_DELIMITER.join(
            [
                str(self.bill_id),
                str(self.patient_id),
                self.formatted_amount,
                self.details,
                self.datetime,
            ]
        )

    @classmethod
    def deserialize(cls, line: str) -> "Bill":
        """
        Decode a line written by :meth:`serialize`.

        Raises:
            MalformedRecordError: Too few fields or non-numeric ids/amount
        """
        parts = _split_fields(line, RecordType.BILL)
        return cls(
            bill_id=_parse_int(parts[0], "bill_id", line, RecordType.BILL),
            patient_id=_parse_int(parts[1], "patient_id", line, RecordType.BILL),
            amount=_parse_float(parts[2], "amount", line, RecordType.BILL),
            details=parts[3],
            datetime=parts[4],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for display and logging."""
        return {
            "bill_id": self.bill_id,
            "patient_id": self.patient_id,
            "amount": self.amount,
            "details": self.details,
            "datetime": self.datetime,
        }


Record = Union[Patient, Appointment, Bill]
RecordT = TypeVar("RecordT", Patient, Appointment, Bill)


# =============================================================================
# STAGE 5: DECODING OUTCOME
# =============================================================================


@dataclass(frozen=True)
class ParsedLine:
    """
    Outcome of decoding one persisted line.

    Either ``record`` is set (the line decoded cleanly) or ``reason`` is
    set and ``raw_line`` holds the text that could not be decoded. A
    malformed line is never turned into a zero-valued record.
    """

    raw_line: str
    record: Optional[Record] = None
    reason: Optional[str] = None
    line_number: Optional[int] = None

    @property
    def is_ok(self) -> bool:
        return self.record is not None


def parse_line(
    record_cls: Type[RecordT], line: str, line_number: Optional[int] = None
) -> ParsedLine:
    """
    Decode ``line`` as ``record_cls`` without raising on bad input.

    Example:
        >>> parse_line(Patient, "1|Ann|30|Flu").is_ok
        True
        >>> parse_line(Patient, "1|Ann").reason
        'expected 4 fields, found 2'
    """
    try:
        record = record_cls.deserialize(line)
    except MalformedRecordError as e:
        return ParsedLine(raw_line=line, reason=e.reason, line_number=line_number)
    return ParsedLine(raw_line=line, record=record, line_number=line_number)


# =============================================================================
# STAGE 6: OPERATION RESULTS
# =============================================================================


@dataclass(frozen=True)
class CascadeDeleteResult:
    """What a patient delete removed from the store."""

    patient: Patient
    appointments_removed: int
    bills_removed: int


@dataclass
class LoadReport:
    """
    Summary of a load-all pass over the three data files.

    Attributes:
        loaded: Record count per record type
        malformed: Lines that could not be decoded, per record type
        missing_files: Data files that did not exist (treated as empty)
    """

    loaded: Dict[RecordType, int] = field(default_factory=dict)
    malformed: Dict[RecordType, List[ParsedLine]] = field(default_factory=dict)
    missing_files: List[str] = field(default_factory=list)

    @property
    def malformed_count(self) -> int:
        return sum(len(lines) for lines in self.malformed.values())

    @property
    def has_malformed(self) -> bool:
        return self.malformed_count > 0


@dataclass(frozen=True)
class ExportSummary:
    """Where the CSV export went and how many bill rows it holds."""

    file_path: str
    rows_written: int
