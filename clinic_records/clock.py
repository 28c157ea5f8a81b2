"""Timestamp source used to stamp new bills."""

from datetime import datetime
from typing import Callable

from clinic_records.core.constants import TIMESTAMP_FORMAT

Clock = Callable[[], str]


def now_timestamp() -> str:
    """Current local time as ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def fixed_clock(timestamp: str) -> Clock:
    """Return a clock that always reports ``timestamp``."""
    return lambda: timestamp
