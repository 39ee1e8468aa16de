"""Line codec for MedicalRecord.

One record per line, ten comma-separated top-level fields:

    patient_id,name,date_of_birth,gender,blood_type,phone_number,email_address,
    diagnoses,treatments,prescriptions

The last three are ``;``-joined sub-record lists (empty when the list is
empty). A plain split on ``,`` is safe because no value may contain a
separator; that rule is enforced when entities are built and when they are
written, not here.
"""

from __future__ import annotations

from hmsrecords.core.collection import decode_list, encode_list
from hmsrecords.core.subrecords import (
    DIAGNOSIS_CODEC,
    PRESCRIPTION_CODEC,
    TREATMENT_CODEC,
    SubRecordCodec,
)
from hmsrecords.exceptions import MalformedRecord, MalformedSubRecord
from hmsrecords.grammar import FIELD_SEP, check_reserved, strip_line_ending
from hmsrecords.models import SCALAR_FIELDS, MedicalRecord

RECORD_FIELD_COUNT = 10

# (attribute on MedicalRecord, codec) in file order
_COLLECTIONS: list[tuple[str, SubRecordCodec]] = [
    ("diagnoses", DIAGNOSIS_CODEC),
    ("treatments", TREATMENT_CODEC),
    ("prescriptions", PRESCRIPTION_CODEC),
]


def encode_record(record: MedicalRecord) -> str:
    """Serialize a record to one line (no trailing newline)."""
    for name, value in zip(SCALAR_FIELDS, record.scalars()):
        check_reserved("record", name, value)
    tokens = list(record.scalars())
    for attr, codec in _COLLECTIONS:
        tokens.append(encode_list(getattr(record, attr), codec.encode))
    return FIELD_SEP.join(tokens)


def decode_record(line: str) -> MedicalRecord:
    """Parse one line into a MedicalRecord.

    Raises MalformedRecord when the line does not have exactly ten top-level
    fields, the patient id is empty, or a sub-record list fails to decode. In
    the last case ``field`` names the list and the sub-record error is the
    ``__cause__``.
    """
    tokens = strip_line_ending(line).split(FIELD_SEP)
    if len(tokens) != RECORD_FIELD_COUNT:
        raise MalformedRecord(
            f"expected {RECORD_FIELD_COUNT} fields, got {len(tokens)}"
        )

    scalars = tokens[: len(SCALAR_FIELDS)]
    if not scalars[0]:
        raise MalformedRecord("empty patient id", field="patient_id")

    collections = {}
    for (attr, codec), token in zip(_COLLECTIONS, tokens[len(SCALAR_FIELDS):]):
        try:
            collections[attr] = decode_list(token, codec.decode)
        except (MalformedSubRecord, ValueError) as e:
            raise MalformedRecord(str(e), field=attr) from e

    try:
        return MedicalRecord(**dict(zip(SCALAR_FIELDS, scalars)), **collections)
    except ValueError as e:
        raise MalformedRecord(str(e)) from e
