"""
Clinic Records CLI

Menu-driven front end for the clinic record service. After an admin
login it loops over the numbered main menu until "Save & Exit" (or end of
input), delegating every operation to ClinicRecordService.

Usage:
    clinic-records
    clinic-records --data-dir ./clinic_data --log-level INFO
    python -m clinic_records --env-file .env
"""

import argparse
import getpass
import sys
from typing import Callable, List, Optional

from loguru import logger

from clinic_records.auth import AdminGate
from clinic_records.core.config import ClinicConfiguration
from clinic_records.core.enums import CancelOutcome, MenuChoice
from clinic_records.core.exceptions import ClinicRecordsError, ConfigurationError
from clinic_records.core.models import Appointment, Bill, Patient
from clinic_records.service import ClinicRecordService

SEPARATOR = "----------------------"


class InvalidInput(ValueError):
    """Raised when a prompt receives text that is not the expected number."""


# =============================================================================
# STAGE 1: RENDERING HELPERS
# =============================================================================


def format_patient(patient: Patient) -> str:
    return (
        f"Patient ID: {patient.id}\n"
        f"Name: {patient.name}\n"
        f"Age: {patient.age}\n"
        f"Disease: {patient.disease}"
    )


def format_appointment(appointment: Appointment) -> str:
    return (
        f"Appointment ID: {appointment.appointment_id}\n"
        f"Patient ID: {appointment.patient_id}\n"
        f"Doctor: {appointment.doctor}\n"
        f"Date: {appointment.date} Time: {appointment.time}\n"
        f"Status: {appointment.status.value}"
    )


def format_appointment_line(appointment: Appointment) -> str:
    return (
        f"Appointment ID: {appointment.appointment_id} | Patient ID: {appointment.patient_id}"
        f" | Doctor: {appointment.doctor} | Time: {appointment.time}"
        f" | Status: {appointment.status.value}"
    )


def format_bill(bill: Bill) -> str:
    return (
        f"Bill ID: {bill.bill_id}\n"
        f"Amount: {bill.formatted_amount}\n"
        f"Details: {bill.details}\n"
        f"Datetime: {bill.datetime}"
    )


def format_bill_summary(bill: Bill) -> str:
    return (
        f"Bill ID: {bill.bill_id} | Patient ID: {bill.patient_id}"
        f" | Amount: {bill.formatted_amount} | {bill.datetime}\n"
        f"Details: {bill.details}"
    )


def render_menu() -> str:
    lines = ["", "===== Hospital Management System ====="]
    lines.extend(f"{choice.value}. {choice.label}" for choice in MenuChoice)
    return "\n".join(lines)


# =============================================================================
# STAGE 2: INTERACTIVE MENU
# =============================================================================


class ClinicMenu:
    """
    Interactive menu loop bound to one service instance.

    Input and output callables are injectable so the loop can be driven
    from tests.
    """

    def __init__(
        self,
        service: ClinicRecordService,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self._service = service
        self._input = input_fn
        self._output = output_fn

    # -------------------------------------------------------------------------
    # 2.1 Prompt helpers
    # -------------------------------------------------------------------------

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_int(self, prompt: str, blank: Optional[int] = None) -> int:
        text = self._ask(prompt)
        if not text and blank is not None:
            return blank
        try:
            return int(text)
        except ValueError:
            raise InvalidInput(f"Expected a whole number, got {text!r}")

    def _ask_float(self, prompt: str) -> float:
        text = self._ask(prompt)
        try:
            return float(text)
        except ValueError:
            raise InvalidInput(f"Expected an amount, got {text!r}")

    def _show_list(self, items: List[str], empty_message: str) -> None:
        if not items:
            self._output(empty_message)
            return
        for item in items:
            self._output(item)
            self._output(SEPARATOR)

    # -------------------------------------------------------------------------
    # 2.2 Patient operations
    # -------------------------------------------------------------------------

    def add_patient(self) -> None:
        self._output("\n--- Add New Patient ---")
        name = self._ask("Enter name: ")
        age = self._ask_int("Enter age: ")
        disease = self._ask("Enter disease/condition: ")
        patient = self._service.add_patient(name, age, disease)
        self._output(f"Patient added with ID: {patient.id}")

    def view_patients(self) -> None:
        self._output("\n--- All Patients ---")
        patients = self._service.list_patients()
        self._show_list([format_patient(p) for p in patients], "No patients found.")

    def search_patient(self) -> None:
        self._output("\n--- Search Patient ---")
        mode = self._ask_int("Search by: 1) ID  2) Name\nChoice: ")
        if mode == 1:
            patient = self._service.get_patient(self._ask_int("Enter Patient ID: "))
            self._output(format_patient(patient) if patient else "Patient not found.")
        elif mode == 2:
            matches = self._service.search_patients_by_name(
                self._ask("Enter full or partial name: ")
            )
            self._show_list([format_patient(p) for p in matches], "No matching patients.")
        else:
            self._output("Invalid choice.")

    def update_patient(self) -> None:
        self._output("\n--- Update Patient ---")
        patient_id = self._ask_int("Enter Patient ID to update: ")
        patient = self._service.get_patient(patient_id)
        if patient is None:
            self._output("Patient not found.")
            return

        self._output("Current details:")
        self._output(format_patient(patient))
        name = self._ask("Enter new name (leave blank to keep): ")
        age = self._ask_int("Enter new age (0 to keep): ", blank=0)
        disease = self._ask("Enter new disease (leave blank to keep): ")
        self._service.update_patient(patient_id, name=name, age=age, disease=disease)
        self._output("Patient updated.")

    def delete_patient(self) -> None:
        self._output("\n--- Delete Patient ---")
        result = self._service.delete_patient(self._ask_int("Enter Patient ID to delete: "))
        if result is None:
            self._output("Patient not found.")
            return
        self._output(
            f"Patient and related data deleted "
            f"({result.appointments_removed} appointments, {result.bills_removed} bills)."
        )

    # -------------------------------------------------------------------------
    # 2.3 Appointment operations
    # -------------------------------------------------------------------------

    def book_appointment(self) -> None:
        self._output("\n--- Book Appointment ---")
        patient_id = self._ask_int("Enter Patient ID: ")
        if self._service.get_patient(patient_id) is None:
            self._output("Patient not found. Add patient first.")
            return
        doctor = self._ask("Doctor name: ")
        date = self._ask("Date (YYYY-MM-DD): ")
        time = self._ask("Time (HH:MM): ")
        appointment = self._service.book_appointment(patient_id, doctor, date, time)
        self._output(f"Appointment booked with ID: {appointment.appointment_id}")

    def view_appointments(self) -> None:
        self._output("\n--- All Appointments ---")
        appointments = self._service.list_appointments()
        self._show_list(
            [format_appointment(a) for a in appointments], "No appointments found."
        )

    def cancel_appointment(self) -> None:
        self._output("\n--- Cancel Appointment ---")
        outcome = self._service.cancel_appointment(self._ask_int("Enter Appointment ID: "))
        messages = {
            CancelOutcome.CANCELLED: "Appointment cancelled.",
            CancelOutcome.ALREADY_CANCELLED: "Already cancelled.",
            CancelOutcome.NOT_FOUND: "Appointment not found.",
        }
        self._output(messages[outcome])

    def search_appointments_by_date(self) -> None:
        self._output("\n--- Search Appointments by Date ---")
        date = self._ask("Enter date (YYYY-MM-DD): ")
        matches = self._service.search_appointments_by_date(date)
        if not matches:
            self._output(f"No appointments on {date}")
            return
        for appointment in matches:
            self._output(format_appointment_line(appointment))

    # -------------------------------------------------------------------------
    # 2.4 Billing operations
    # -------------------------------------------------------------------------

    def generate_bill(self) -> None:
        self._output("\n--- Generate Bill ---")
        patient_id = self._ask_int("Enter Patient ID: ")
        if self._service.get_patient(patient_id) is None:
            self._output("Patient not found.")
            return
        details = self._ask("Enter bill details/description: ")
        amount = self._ask_float("Enter amount: ")
        bill = self._service.generate_bill(patient_id, amount, details)
        self._output(f"Bill generated with ID: {bill.bill_id}")

    def view_patient_bills(self) -> None:
        self._output("\n--- View Bills for Patient ---")
        bills = self._service.bills_for_patient(self._ask_int("Enter Patient ID: "))
        self._show_list([format_bill(b) for b in bills], "No bills found for this patient.")

    def view_all_bills(self) -> None:
        self._output("\n--- All Bills ---")
        bills = self._service.list_bills()
        self._show_list([format_bill_summary(b) for b in bills], "No bills found.")

    def export_bills(self) -> None:
        self._output("\n--- Export Bills to CSV ---")
        summary = self._service.export_bills()
        self._output(f"{summary.rows_written} bills exported to {summary.file_path}")

    # -------------------------------------------------------------------------
    # 2.5 Main loop
    # -------------------------------------------------------------------------

    def dispatch(self, choice: MenuChoice) -> bool:
        """
        Run one menu operation.

        Returns:
            False when the loop should stop (Save & Exit), True otherwise
        """
        if choice == MenuChoice.SAVE_AND_EXIT:
            self._service.save_all()
            self._output("Data saved. Exiting...")
            return False

        handlers = {
            MenuChoice.ADD_PATIENT: self.add_patient,
            MenuChoice.VIEW_PATIENTS: self.view_patients,
            MenuChoice.SEARCH_PATIENT: self.search_patient,
            MenuChoice.UPDATE_PATIENT: self.update_patient,
            MenuChoice.DELETE_PATIENT: self.delete_patient,
            MenuChoice.BOOK_APPOINTMENT: self.book_appointment,
            MenuChoice.VIEW_APPOINTMENTS: self.view_appointments,
            MenuChoice.CANCEL_APPOINTMENT: self.cancel_appointment,
            MenuChoice.SEARCH_APPOINTMENTS_BY_DATE: self.search_appointments_by_date,
            MenuChoice.GENERATE_BILL: self.generate_bill,
            MenuChoice.VIEW_PATIENT_BILLS: self.view_patient_bills,
            MenuChoice.VIEW_ALL_BILLS: self.view_all_bills,
            MenuChoice.EXPORT_BILLS_CSV: self.export_bills,
        }
        handlers[choice]()
        return True

    def run(self) -> None:
        """Loop until Save & Exit; end of input also saves and exits."""
        while True:
            self._output(render_menu())
            try:
                text = self._ask("Choice: ")
            except EOFError:
                self._service.save_all()
                self._output("\nData saved. Exiting...")
                return

            try:
                choice = MenuChoice(int(text))
            except ValueError:
                self._output("Invalid choice. Try again.")
                continue

            try:
                if not self.dispatch(choice):
                    return
            except InvalidInput as error:
                self._output(f"Invalid input: {error}")
            except ClinicRecordsError as error:
                logger.error(f"Operation failed: {error}")
                self._output(f"Error: {error.message}")
            except EOFError:
                self._service.save_all()
                self._output("\nData saved. Exiting...")
                return


# =============================================================================
# STAGE 3: ADMIN LOGIN
# =============================================================================


def admin_login(
    gate: AdminGate,
    input_fn: Callable[[str], str] = input,
    password_fn: Callable[[str], str] = getpass.getpass,
    output_fn: Callable[[str], None] = print,
) -> bool:
    output_fn("=== Admin Login Required ===")
    try:
        username = input_fn("Username: ").strip()
        password = password_fn("Password: ")
    except EOFError:
        output_fn("Invalid credentials.")
        return False

    if gate.check(username, password):
        output_fn("Login successful.")
        return True
    output_fn("Invalid credentials.")
    return False


# =============================================================================
# STAGE 4: ENTRY POINT
# =============================================================================


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Command-line values override the corresponding CLINIC_* settings.
    """
    parser = argparse.ArgumentParser(
        prog="clinic-records",
        description="Menu-driven patient, appointment and billing records for a small clinic",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Use data files in the current directory:
    clinic-records

  Keep data in a dedicated folder with verbose logs:
    clinic-records --data-dir ./clinic_data --log-level INFO

Data files: patients.txt, appointments.txt, bills.txt
Export file: export_bills.csv
        """,
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory holding the data files (default: CLINIC_DATA_DIR or .)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Path to a .env file with CLINIC_* settings",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level for stderr output (default: CLINIC_LOG_LEVEL or WARNING)",
    )
    return parser


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def main(
    argv: Optional[List[str]] = None,
    input_fn: Callable[[str], str] = input,
    password_fn: Callable[[str], str] = getpass.getpass,
    output_fn: Callable[[str], None] = print,
) -> int:
    """
    Run the clinic records CLI.

    Step 1: Parse command-line arguments
    Step 2: Load and validate configuration
    Step 3: Load data files
    Step 4: Admin login
    Step 5: Menu loop

    Returns:
        Process exit code
    """
    # Step 1
    args = create_argument_parser().parse_args(argv)

    # Step 2
    try:
        config = ClinicConfiguration.from_environment(
            env_file=args.env_file, validate_on_load=False
        )
        if args.data_dir:
            config.data_directory = args.data_dir
        if args.log_level:
            config.log_level = args.log_level.upper()
        config.validate()
    except ConfigurationError as error:
        output_fn(f"Configuration error: {error}")
        return 2

    configure_logging(config.log_level)
    logger.debug(f"Configuration: {config.to_dict()}")

    # Step 3
    service = ClinicRecordService(config)
    try:
        report = service.load()
    except ClinicRecordsError as error:
        logger.error(f"Failed to load data: {error}")
        output_fn(f"Error: {error.message}")
        return 1

    output_fn("Welcome to Hospital Management System")
    output_fn(
        f"Data files: {config.patients_file}, {config.appointments_file}, {config.bills_file}"
    )
    if report.has_malformed:
        output_fn(f"Warning: skipped {report.malformed_count} unreadable line(s) in data files.")

    # Step 4
    if not admin_login(AdminGate.from_config(config), input_fn, password_fn, output_fn):
        output_fn("Exiting program (admin login failed).")
        return 0

    # Step 5
    try:
        ClinicMenu(service, input_fn, output_fn).run()
    except ClinicRecordsError as error:
        logger.error(f"Failed to save on exit: {error}")
        output_fn(f"Error: {error.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
