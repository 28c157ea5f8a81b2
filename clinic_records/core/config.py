"""
Configuration for Clinic Records

This module defines the configuration dataclass used to initialize the
record service and the CLI. Configuration is:
    1. Loaded from environment variables (with .env support)
    2. Validated at startup to fail fast on misconfiguration

Configuration Hierarchy:
    ClinicConfiguration
    ├── Storage Settings (data directory, file names, atomic writes)
    ├── Export Settings (CSV file name)
    ├── Admin Settings (single shared credential)
    └── Logging Settings (log level)

Environment Variables:
    CLINIC_DATA_DIR, CLINIC_PATIENTS_FILE, CLINIC_APPOINTMENTS_FILE,
    CLINIC_BILLS_FILE, CLINIC_EXPORT_FILE, CLINIC_ATOMIC_WRITES,
    CLINIC_ADMIN_USERNAME, CLINIC_ADMIN_PASSWORD, CLINIC_LOG_LEVEL

Usage:
    from clinic_records.core.config import ClinicConfiguration

    config = ClinicConfiguration.from_environment()

    # Or configure programmatically (tests)
    config = ClinicConfiguration(data_directory=str(tmp_path))
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from clinic_records.core.constants import (
    APPOINTMENTS_FILE_NAME,
    BILLS_FILE_NAME,
    EXPORT_FILE_NAME,
    PATIENTS_FILE_NAME,
)
from clinic_records.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class ConfigDefaults:
    """Default configuration values."""

    # -------------------------------------------------------------------------
    # 1.1 Storage Defaults
    # -------------------------------------------------------------------------
    DEFAULT_DATA_DIR = "."
    DEFAULT_ATOMIC_WRITES = True

    # -------------------------------------------------------------------------
    # 1.2 Admin Defaults
    # -------------------------------------------------------------------------
    DEFAULT_ADMIN_USERNAME = "admin"
    DEFAULT_ADMIN_PASSWORD = "admin123"

    # -------------------------------------------------------------------------
    # 1.3 Logging Defaults
    # -------------------------------------------------------------------------
    DEFAULT_LOG_LEVEL = "WARNING"


VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# STAGE 2: CONFIGURATION DATACLASS
# =============================================================================


@dataclass
class ClinicConfiguration:
    """
    Configuration for the clinic record service.

    What it does:
        Encapsulates where the three data files and the CSV export live,
        which credential opens the admin gate and how chatty logging is.

    Example:
        >>> config = ClinicConfiguration.from_environment()
        >>> config.patients_path.name
        'patients.txt'
    """

    # -------------------------------------------------------------------------
    # 2.1 Storage Configuration
    # -------------------------------------------------------------------------
    data_directory: str = ConfigDefaults.DEFAULT_DATA_DIR
    """Directory holding the data files and the CSV export."""

    patients_file: str = PATIENTS_FILE_NAME
    appointments_file: str = APPOINTMENTS_FILE_NAME
    bills_file: str = BILLS_FILE_NAME

    atomic_writes: bool = ConfigDefaults.DEFAULT_ATOMIC_WRITES
    """Write each file to a temp sibling and rename it into place."""

    # -------------------------------------------------------------------------
    # 2.2 Export Configuration
    # -------------------------------------------------------------------------
    export_file: str = EXPORT_FILE_NAME

    # -------------------------------------------------------------------------
    # 2.3 Admin Configuration
    # -------------------------------------------------------------------------
    admin_username: str = ConfigDefaults.DEFAULT_ADMIN_USERNAME
    admin_password: str = ConfigDefaults.DEFAULT_ADMIN_PASSWORD

    # -------------------------------------------------------------------------
    # 2.4 Logging Configuration
    # -------------------------------------------------------------------------
    log_level: str = ConfigDefaults.DEFAULT_LOG_LEVEL

    # -------------------------------------------------------------------------
    # 2.5 Derived Paths
    # -------------------------------------------------------------------------

    @property
    def data_path(self) -> Path:
        return Path(self.data_directory)

    @property
    def patients_path(self) -> Path:
        return self.data_path / self.patients_file

    @property
    def appointments_path(self) -> Path:
        return self.data_path / self.appointments_file

    @property
    def bills_path(self) -> Path:
        return self.data_path / self.bills_file

    @property
    def export_path(self) -> Path:
        return self.data_path / self.export_file

    # -------------------------------------------------------------------------
    # 2.6 Validation Methods
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Checks:
            1. Data directory is not an existing regular file
            2. File names are non-empty and distinct
            3. Admin credentials are non-empty
            4. Log level is one loguru understands

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.data_path.exists() and not self.data_path.is_dir():
            raise ConfigurationError(
                f"Data directory is not a directory: {self.data_directory}",
                context={"setting": "CLINIC_DATA_DIR", "path": self.data_directory},
            )

        file_names = {
            "CLINIC_PATIENTS_FILE": self.patients_file,
            "CLINIC_APPOINTMENTS_FILE": self.appointments_file,
            "CLINIC_BILLS_FILE": self.bills_file,
            "CLINIC_EXPORT_FILE": self.export_file,
        }
        for setting, name in file_names.items():
            if not name or not name.strip():
                raise ConfigurationError(
                    "Data file name must not be empty", context={"setting": setting}
                )
        if len(set(file_names.values())) != len(file_names):
            raise ConfigurationError(
                "Data and export file names must be distinct",
                context={k: v for k, v in file_names.items()},
            )

        if not self.admin_username or not self.admin_password:
            raise ConfigurationError(
                "Admin username and password must not be empty",
                context={"setting": "CLINIC_ADMIN_USERNAME/CLINIC_ADMIN_PASSWORD"},
            )

        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level: {self.log_level}",
                context={"setting": "CLINIC_LOG_LEVEL", "allowed": ",".join(VALID_LOG_LEVELS)},
            )

    # -------------------------------------------------------------------------
    # 2.7 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, validate_on_load: bool = True
    ) -> "ClinicConfiguration":
        """
        Load configuration from environment variables.

        STAGE 1: Load .env file (if specified or found in the working directory)
        STAGE 2: Read CLINIC_* environment variables
        STAGE 3: Validate configuration (optional)

        Args:
            env_file: Path to .env file (optional)
            validate_on_load: Whether to validate after loading

        Raises:
            ConfigurationError: If settings are invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            if not Path(env_file).exists():
                raise ConfigurationError(
                    f"Environment file not found: {env_file}", context={"path": env_file}
                )
            load_dotenv(env_file)
        else:
            local_env = Path.cwd() / ".env"
            if local_env.exists():
                load_dotenv(local_env)

        # STAGE 2: Read environment variables
        config = cls(
            data_directory=os.getenv("CLINIC_DATA_DIR", ConfigDefaults.DEFAULT_DATA_DIR),
            patients_file=os.getenv("CLINIC_PATIENTS_FILE", PATIENTS_FILE_NAME),
            appointments_file=os.getenv("CLINIC_APPOINTMENTS_FILE", APPOINTMENTS_FILE_NAME),
            bills_file=os.getenv("CLINIC_BILLS_FILE", BILLS_FILE_NAME),
            export_file=os.getenv("CLINIC_EXPORT_FILE", EXPORT_FILE_NAME),
            atomic_writes=_env_flag("CLINIC_ATOMIC_WRITES", ConfigDefaults.DEFAULT_ATOMIC_WRITES),
            admin_username=os.getenv("CLINIC_ADMIN_USERNAME", ConfigDefaults.DEFAULT_ADMIN_USERNAME),
            admin_password=os.getenv("CLINIC_ADMIN_PASSWORD", ConfigDefaults.DEFAULT_ADMIN_PASSWORD),
            log_level=os.getenv("CLINIC_LOG_LEVEL", ConfigDefaults.DEFAULT_LOG_LEVEL).upper(),
        )

        # STAGE 3: Validate
        if validate_on_load:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (for logging/debugging)."""
        return {
            "data_directory": self.data_directory,
            "patients_file": self.patients_file,
            "appointments_file": self.appointments_file,
            "bills_file": self.bills_file,
            "export_file": self.export_file,
            "atomic_writes": self.atomic_writes,
            "admin_username": self.admin_username,
            "admin_password": "***" if self.admin_password else None,
            "log_level": self.log_level,
        }
