"""Shared test fixtures for hmsrecords tests."""

import pytest

from hmsrecords.config import StoreConfig
from hmsrecords.models import (
    Diagnosis,
    MedicalRecord,
    Prescription,
    PrescriptionStatus,
    Role,
    Treatment,
    User,
)
from hmsrecords.store import RecordStore

SAMPLE_RECORD_LINES = [
    "P1001,Alice Brown,1980-05-14,Female,A+,91234567,alice@example.com,"
    "Hypertension|2023-11-02;Flu|2024-01-01,"
    "Lifestyle counselling|2023-11-02|low salt diet,"
    "Amlodipine|30|1;Paracetamol|2|0",
    "P1002,Bob Stone,1975-02-20,Male,O-,98765432,bob@example.com,,,",
]

SAMPLE_USER_LINES = [
    "ID,Name,Date of Birth,Gender,Phone Number,Email Address,Password,Role",
    "P1001,Alice Brown,1980-05-14,Female,91234567,alice@example.com,password,Patient",
    "D001,John Smith,1970-01-01,Male,90000001,john.smith@hospital.com,password,Doctor",
    "PH001,Mark Lee,1985-07-07,Male,90000002,mark.lee@hospital.com,password,Pharmacist",
    "A001,Sarah Lim,1979-03-03,Female,90000003,sarah.lim@hospital.com,password,Administrator",
]


def write_lines(path, lines):
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


@pytest.fixture
def write_file():
    """Return a helper that writes lines (newline-terminated) to a path."""
    return write_lines


@pytest.fixture
def sample_record():
    """A record with every sub-record kind populated."""
    return MedicalRecord(
        patient_id="P1001",
        name="Alice Brown",
        date_of_birth="1980-05-14",
        gender="Female",
        blood_type="A+",
        phone_number="91234567",
        email_address="alice@example.com",
        diagnoses=[
            Diagnosis("Hypertension", "2023-11-02"),
            Diagnosis("Flu", "2024-01-01"),
        ],
        treatments=[Treatment("Lifestyle counselling", "2023-11-02", "low salt diet")],
        prescriptions=[
            Prescription("Amlodipine", 30, PrescriptionStatus.DISPENSED),
            Prescription("Paracetamol", 2, PrescriptionStatus.PENDING),
        ],
    )


@pytest.fixture
def sample_doctor():
    return User(
        id="D002",
        name="Grace Tan",
        date_of_birth="1982-09-09",
        gender="Female",
        phone_number="90000009",
        email_address="grace.tan@hospital.com",
        password="password",
        role=Role.DOCTOR,
    )


@pytest.fixture
def data_files(tmp_path):
    """Record and user files populated with the sample lines."""
    records_path = write_lines(tmp_path / "Medical_Record.csv", SAMPLE_RECORD_LINES)
    users_path = write_lines(tmp_path / "User_List.csv", SAMPLE_USER_LINES)
    return StoreConfig(records_path=str(records_path), users_path=str(users_path))


@pytest.fixture
def loaded_store(data_files):
    """A RecordStore with both sample files loaded."""
    store = RecordStore(data_files)
    store.load_all()
    return store
