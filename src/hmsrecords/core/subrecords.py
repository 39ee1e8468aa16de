"""Field-level codecs for diagnoses, treatments and prescriptions.

Each sub-record encodes to its field values joined by ``|``:

    Diagnosis     condition|diagnosed_on
    Treatment     name|treated_on|notes
    Prescription  medication_name|quantity|status_code
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from hmsrecords.exceptions import InvalidStatus, MalformedSubRecord
from hmsrecords.grammar import SUBFIELD_SEP, check_reserved
from hmsrecords.models import Diagnosis, Prescription, PrescriptionStatus, Treatment

T = TypeVar("T")

_INT_RE = re.compile(r"-?[0-9]+")


def _split(text: str, kind: str, arity: int) -> list[str]:
    tokens = text.split(SUBFIELD_SEP)
    if len(tokens) != arity:
        raise MalformedSubRecord(
            f"expected {arity} fields, got {len(tokens)} in {text!r}", kind=kind
        )
    return tokens


def _join(kind: str, names: tuple[str, ...], values: tuple[str, ...]) -> str:
    # Write-time check: fields may have been reassigned since construction.
    for name, value in zip(names, values):
        check_reserved(kind, name, value)
    return SUBFIELD_SEP.join(values)


def _parse_int(token: str, kind: str, field_name: str) -> int:
    # ASCII digits only; int() would also take "+2", " 2", "2_0".
    if not _INT_RE.fullmatch(token):
        raise MalformedSubRecord(f"{field_name} is not an integer: {token!r}", kind=kind)
    return int(token)


# --- Diagnosis ---

def encode_diagnosis(diagnosis: Diagnosis) -> str:
    return _join(
        "diagnosis",
        ("condition", "diagnosed_on"),
        (diagnosis.condition, diagnosis.diagnosed_on),
    )


def decode_diagnosis(text: str) -> Diagnosis:
    condition, diagnosed_on = _split(text, "diagnosis", 2)
    return Diagnosis(condition=condition, diagnosed_on=diagnosed_on)


# --- Treatment ---

def encode_treatment(treatment: Treatment) -> str:
    return _join(
        "treatment",
        ("name", "treated_on", "notes"),
        (treatment.name, treatment.treated_on, treatment.notes),
    )


def decode_treatment(text: str) -> Treatment:
    name, treated_on, notes = _split(text, "treatment", 3)
    return Treatment(name=name, treated_on=treated_on, notes=notes)


# --- Prescription ---

def encode_prescription(prescription: Prescription) -> str:
    """Encode ``name|quantity|status``.

    Applies the same quantity rules as decode_prescription, so a saved line
    always loads back. Raises TypeError for a non-int quantity and ValueError
    for a negative one or an unknown status.
    """
    check_reserved("prescription", "medication_name", prescription.medication_name)
    quantity = prescription.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise TypeError(f"prescription.quantity must be an int, got {quantity!r}")
    if quantity < 0:
        raise ValueError(f"prescription.quantity must be >= 0, got {quantity}")
    return SUBFIELD_SEP.join(
        (
            prescription.medication_name,
            str(quantity),
            str(int(PrescriptionStatus(prescription.status))),
        )
    )


def decode_prescription(text: str) -> Prescription:
    """Decode ``name|quantity|status``.

    Raises MalformedSubRecord for a wrong field count or non-integer
    quantity/status, InvalidStatus for an unknown status code.
    """
    name, quantity_token, status_token = _split(text, "prescription", 3)
    quantity = _parse_int(quantity_token, "prescription", "quantity")
    if quantity < 0:
        raise MalformedSubRecord(f"quantity must be >= 0, got {quantity}", kind="prescription")
    code = _parse_int(status_token, "prescription", "status")
    try:
        status = PrescriptionStatus(code)
    except ValueError:
        valid = ", ".join(f"{s.value}={s.name}" for s in PrescriptionStatus)
        raise InvalidStatus(
            f"unknown status code {code} (expected one of {valid})", kind="prescription"
        ) from None
    return Prescription(medication_name=name, quantity=quantity, status=status)


@dataclass(frozen=True)
class SubRecordCodec(Generic[T]):
    """Encode/decode pair for one sub-record kind."""

    kind: str
    encode: Callable[[T], str]
    decode: Callable[[str], T]


DIAGNOSIS_CODEC: SubRecordCodec[Diagnosis] = SubRecordCodec(
    "diagnosis", encode_diagnosis, decode_diagnosis
)
TREATMENT_CODEC: SubRecordCodec[Treatment] = SubRecordCodec(
    "treatment", encode_treatment, decode_treatment
)
PRESCRIPTION_CODEC: SubRecordCodec[Prescription] = SubRecordCodec(
    "prescription", encode_prescription, decode_prescription
)
