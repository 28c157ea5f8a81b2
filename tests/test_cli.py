"""Tests for the menu-driven CLI, driven with scripted input."""

import pytest

from clinic_records.auth import AdminGate
from clinic_records.cli import ClinicMenu, admin_login, main, render_menu
from clinic_records.core.exceptions import StorageWriteError


class ScriptedInput:
    """Feeds answers to prompts in order; raises EOFError when exhausted."""

    def __init__(self, answers):
        self._answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if not self._answers:
            raise EOFError
        return self._answers.pop(0)


def run_menu(service, answers, output):
    ClinicMenu(service, ScriptedInput(answers), output.append).run()


class _Output(list):
    def text(self):
        return "\n".join(self)


@pytest.fixture(name="output")
def output_fixture():
    return _Output()


def test_menu_lists_fourteen_entries():
    menu = render_menu()
    assert "1. Add Patient" in menu
    assert "13. Export Bills to CSV" in menu
    assert "14. Save & Exit" in menu


def test_add_and_view_patient(service, output):
    run_menu(service, ["1", "Alice Smith", "34", "Asthma", "2", "14"], output)

    assert "Patient added with ID: 1" in output
    assert "Patient ID: 1\nName: Alice Smith\nAge: 34\nDisease: Asthma" in output
    assert output[-1] == "Data saved. Exiting..."


def test_invalid_choice_keeps_looping(service, output):
    run_menu(service, ["abc", "99", "14"], output)
    assert output.count("Invalid choice. Try again.") == 2


def test_non_numeric_age_is_reported_without_change(service, output):
    run_menu(service, ["1", "Ann", "thirty", "14"], output)
    assert any(line.startswith("Invalid input:") for line in output)
    assert service.list_patients() == []


def test_search_by_name(service, output):
    service.add_patient("Alice Smith", 34, "Asthma")
    service.add_patient("alicia Jones", 28, "Migraine")
    run_menu(service, ["3", "2", "alic", "14"], output)
    assert "Name: Alice Smith" in output.text()
    assert "Name: alicia Jones" in output.text()


def test_search_by_unknown_id(service, output):
    run_menu(service, ["3", "1", "5", "14"], output)
    assert "Patient not found." in output


def test_update_keeps_blank_fields(service, output):
    service.add_patient("Ann", 30, "Flu")
    run_menu(service, ["4", "1", "", "", "Cold", "14"], output)
    assert "Patient updated." in output
    assert service.get_patient(1).disease == "Cold"
    assert service.get_patient(1).age == 30


def test_book_for_unknown_patient(service, output):
    run_menu(service, ["6", "3", "14"], output)
    assert "Patient not found. Add patient first." in output


def test_book_cancel_and_cancel_again(service, output):
    service.add_patient("Ann", 30, "Flu")
    run_menu(
        service,
        ["6", "1", "Dr. Rao", "2024-01-05", "09:30", "8", "1", "8", "1", "8", "9", "14"],
        output,
    )
    assert "Appointment booked with ID: 1" in output
    assert "Appointment cancelled." in output
    assert "Already cancelled." in output
    assert "Appointment not found." in output


def test_search_appointments_by_date(service, output):
    service.add_patient("Ann", 30, "Flu")
    service.book_appointment(1, "Dr. Rao", "2024-01-05", "09:30")
    run_menu(service, ["9", "2024-01-05", "9", "2024-01-15", "14"], output)
    assert any(line.startswith("Appointment ID: 1 | Patient ID: 1") for line in output)
    assert "No appointments on 2024-01-15" in output


def test_generate_view_and_export_bills(service, config, output):
    service.add_patient("Ann", 30, "Flu")
    run_menu(service, ["10", "1", "Consultation", "150", "11", "1", "12", "13", "14"], output)

    assert "Bill generated with ID: 1" in output
    assert "Amount: 150.0" in output.text()
    assert config.export_path.exists()
    assert any("1 bills exported to" in line for line in output)


def test_delete_reports_removed_counts(service, output):
    service.add_patient("Ann", 30, "Flu")
    service.generate_bill(1, 5.0, "Visit")
    run_menu(service, ["5", "1", "5", "1", "14"], output)
    assert "Patient and related data deleted (0 appointments, 1 bills)." in output
    assert "Patient not found." in output


def test_end_of_input_saves_and_exits(service, config, output):
    run_menu(service, [], output)
    assert output[-1] == "\nData saved. Exiting..."
    assert config.patients_path.exists()


def test_storage_error_is_reported_and_loop_continues(service, config, output):
    config.patients_path.mkdir()
    # The save attempted at end of input fails too and is left to the caller.
    with pytest.raises(StorageWriteError):
        run_menu(service, ["1", "Ann", "30", "Flu", "2"], output)
    assert any(line.startswith("Error: Failed to write") for line in output)
    assert "No patients found." not in output


class TestAdminLogin:
    def test_accepts_configured_credential(self, output):
        ok = admin_login(
            AdminGate("admin", "admin123"),
            ScriptedInput(["admin"]),
            ScriptedInput(["admin123"]),
            output.append,
        )
        assert ok
        assert "Login successful." in output

    def test_rejects_wrong_password(self, output):
        ok = admin_login(
            AdminGate("admin", "admin123"),
            ScriptedInput(["admin"]),
            ScriptedInput(["nope"]),
            output.append,
        )
        assert not ok
        assert "Invalid credentials." in output


class TestMain:
    def test_failed_login_exits_cleanly(self, data_dir, output):
        code = main(
            ["--data-dir", str(data_dir)],
            input_fn=ScriptedInput(["admin"]),
            password_fn=ScriptedInput(["wrong"]),
            output_fn=output.append,
        )
        assert code == 0
        assert "Exiting program (admin login failed)." in output

    def test_full_session_persists_data(self, data_dir, output):
        code = main(
            ["--data-dir", str(data_dir)],
            input_fn=ScriptedInput(["admin", "1", "Ann", "30", "Flu", "14"]),
            password_fn=ScriptedInput(["admin123"]),
            output_fn=output.append,
        )
        assert code == 0
        assert (data_dir / "patients.txt").read_text() == "1|Ann|30|Flu\n"

    def test_reports_malformed_lines_on_start(self, data_dir, output):
        (data_dir / "patients.txt").write_text("1|Ann|30|Flu\nbroken\n")
        main(
            ["--data-dir", str(data_dir)],
            input_fn=ScriptedInput(["admin", "14"]),
            password_fn=ScriptedInput(["admin123"]),
            output_fn=output.append,
        )
        assert "Warning: skipped 1 unreadable line(s) in data files." in output

    def test_bad_log_level_is_a_configuration_error(self, data_dir, output):
        code = main(
            ["--data-dir", str(data_dir), "--log-level", "chatty"],
            output_fn=output.append,
        )
        assert code == 2
        assert output[0].startswith("Configuration error:")
