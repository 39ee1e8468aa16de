"""Data model for hospital records.

A MedicalRecord owns three ordered sub-record collections (diagnoses,
treatments, prescriptions). Users live in a separate flat file. Every string
field is checked against the format's reserved characters on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum, IntEnum

from hmsrecords.grammar import check_reserved


class PrescriptionStatus(IntEnum):
    """Dispensing state of a prescription, stored as its integer code."""

    PENDING = 0
    DISPENSED = 1
    CANCELLED = 2


class Role(str, Enum):
    """User role tag as written in the user list."""

    PATIENT = "Patient"
    DOCTOR = "Doctor"
    PHARMACIST = "Pharmacist"
    ADMINISTRATOR = "Administrator"


def _check_strings(obj, owner: str) -> None:
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, str):
            check_reserved(owner, f.name, value)


@dataclass
class Diagnosis:
    """A diagnosed condition."""

    condition: str
    diagnosed_on: str = ""  # ISO YYYY-MM-DD

    def __post_init__(self):
        _check_strings(self, "diagnosis")


@dataclass
class Treatment:
    """A treatment given to the patient."""

    name: str
    treated_on: str = ""  # ISO YYYY-MM-DD
    notes: str = ""

    def __post_init__(self):
        _check_strings(self, "treatment")


@dataclass
class Prescription:
    """A prescribed medication and its dispensing status."""

    medication_name: str
    quantity: int = 1
    status: PrescriptionStatus = PrescriptionStatus.PENDING

    def __post_init__(self):
        _check_strings(self, "prescription")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise TypeError(f"prescription.quantity must be an int, got {self.quantity!r}")
        if self.quantity < 0:
            raise ValueError(f"prescription.quantity must be >= 0, got {self.quantity}")
        self.status = PrescriptionStatus(self.status)


SCALAR_FIELDS = (
    "patient_id",
    "name",
    "date_of_birth",
    "gender",
    "blood_type",
    "phone_number",
    "email_address",
)


@dataclass
class MedicalRecord:
    """One patient's demographics plus visit history."""

    patient_id: str
    name: str = ""
    date_of_birth: str = ""  # ISO YYYY-MM-DD
    gender: str = ""
    blood_type: str = ""
    phone_number: str = ""
    email_address: str = ""
    diagnoses: list[Diagnosis] = field(default_factory=list)
    treatments: list[Treatment] = field(default_factory=list)
    prescriptions: list[Prescription] = field(default_factory=list)

    def __post_init__(self):
        if not self.patient_id:
            raise ValueError("patient_id must be non-empty")
        _check_strings(self, "record")

    def scalars(self) -> tuple[str, ...]:
        """The seven scalar fields in file order."""
        return tuple(getattr(self, name) for name in SCALAR_FIELDS)

    def add_diagnosis(self, diagnosis: Diagnosis | None) -> None:
        if diagnosis is not None:
            self.diagnoses.append(diagnosis)

    def remove_diagnosis(self, diagnosis: Diagnosis) -> bool:
        return _remove(self.diagnoses, diagnosis)

    def add_treatment(self, treatment: Treatment | None) -> None:
        if treatment is not None:
            self.treatments.append(treatment)

    def remove_treatment(self, treatment: Treatment) -> bool:
        return _remove(self.treatments, treatment)

    def add_prescription(self, prescription: Prescription | None) -> None:
        if prescription is not None:
            self.prescriptions.append(prescription)

    def remove_prescription(self, prescription: Prescription) -> bool:
        return _remove(self.prescriptions, prescription)

    def update_contact_info(self, phone_number: str = "", email_address: str = "") -> None:
        """Replace phone/email; empty arguments leave the current value."""
        if phone_number:
            check_reserved("record", "phone_number", phone_number)
            self.phone_number = phone_number
        if email_address:
            check_reserved("record", "email_address", email_address)
            self.email_address = email_address


def _remove(items: list, item) -> bool:
    """Remove the first element equal to item. Returns False if absent."""
    try:
        items.remove(item)
    except ValueError:
        return False
    return True


@dataclass
class User:
    """A login account: patient or staff member."""

    id: str
    name: str = ""
    date_of_birth: str = ""
    gender: str = ""
    phone_number: str = ""
    email_address: str = ""
    password: str = ""
    role: Role = Role.PATIENT

    def __post_init__(self):
        if not self.id:
            raise ValueError("user id must be non-empty")
        _check_strings(self, "user")
        self.role = Role(self.role)

    @property
    def is_staff(self) -> bool:
        return self.role is not Role.PATIENT
