"""Tests for configuration loading and validation."""

import pytest

from clinic_records.core.config import ClinicConfiguration
from clinic_records.core.exceptions import ConfigurationError


def test_default_file_names_and_credentials():
    config = ClinicConfiguration()
    assert config.patients_path.name == "patients.txt"
    assert config.appointments_path.name == "appointments.txt"
    assert config.bills_path.name == "bills.txt"
    assert config.export_path.name == "export_bills.csv"
    assert (config.admin_username, config.admin_password) == ("admin", "admin123")


def test_from_environment_reads_clinic_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("CLINIC_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CLINIC_BILLS_FILE", "charges.txt")
    monkeypatch.setenv("CLINIC_ATOMIC_WRITES", "false")
    monkeypatch.setenv("CLINIC_LOG_LEVEL", "debug")

    config = ClinicConfiguration.from_environment()

    assert config.data_directory == str(tmp_path)
    assert config.bills_path == tmp_path / "charges.txt"
    assert config.atomic_writes is False
    assert config.log_level == "DEBUG"


def test_from_environment_reads_env_file(tmp_path):
    env_file = tmp_path / "clinic.env"
    env_file.write_text("CLINIC_ADMIN_USERNAME=frontdesk\nCLINIC_ADMIN_PASSWORD=s3cret\n")

    config = ClinicConfiguration.from_environment(env_file=str(env_file))

    assert config.admin_username == "frontdesk"
    assert config.admin_password == "s3cret"


def test_missing_env_file_is_an_error(tmp_path):
    with pytest.raises(ConfigurationError):
        ClinicConfiguration.from_environment(env_file=str(tmp_path / "nope.env"))


def test_data_directory_must_not_be_a_file(tmp_path):
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    with pytest.raises(ConfigurationError):
        ClinicConfiguration(data_directory=str(not_a_dir)).validate()


def test_file_names_must_be_distinct():
    with pytest.raises(ConfigurationError):
        ClinicConfiguration(bills_file="patients.txt").validate()


def test_blank_password_rejected():
    with pytest.raises(ConfigurationError):
        ClinicConfiguration(admin_password="").validate()


def test_unknown_log_level_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        ClinicConfiguration(log_level="LOUD").validate()
    assert "CLINIC_LOG_LEVEL" in str(exc_info.value)


def test_to_dict_masks_password():
    assert ClinicConfiguration().to_dict()["admin_password"] == "***"
