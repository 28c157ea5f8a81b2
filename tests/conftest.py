"""Shared fixtures for clinic_records tests."""

import os

import pytest

from clinic_records.clock import fixed_clock
from clinic_records.core.config import ClinicConfiguration
from clinic_records.repository import RecordStore
from clinic_records.service import ClinicRecordService

FIXED_TIMESTAMP = "2024-01-05 10:12:00"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep CLINIC_* variables and stray .env files out of every test."""
    for name in list(os.environ):
        if name.startswith("CLINIC_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def store():
    return RecordStore()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def config(data_dir):
    return ClinicConfiguration(data_directory=str(data_dir))


@pytest.fixture
def service(config):
    svc = ClinicRecordService(config, clock=fixed_clock(FIXED_TIMESTAMP))
    svc.load()
    return svc
