"""Tests for the sub-record, collection and user codecs in hmsrecords.core."""

import pytest

from hmsrecords.core import (
    DIAGNOSIS_CODEC,
    PRESCRIPTION_CODEC,
    TREATMENT_CODEC,
    USER_HEADER,
    decode_diagnosis,
    decode_list,
    decode_prescription,
    decode_treatment,
    decode_user,
    encode_diagnosis,
    encode_list,
    encode_prescription,
    encode_treatment,
    encode_user,
)
from hmsrecords.exceptions import (
    InvalidStatus,
    MalformedRecord,
    MalformedSubRecord,
    ReservedCharacterError,
    UnknownRole,
)
from hmsrecords.models import Diagnosis, Prescription, PrescriptionStatus, Role, Treatment, User


class TestDiagnosisCodec:
    def test_encode(self):
        assert encode_diagnosis(Diagnosis("Flu", "2024-01-01")) == "Flu|2024-01-01"

    def test_decode(self):
        assert decode_diagnosis("Flu|2024-01-01") == Diagnosis("Flu", "2024-01-01")

    def test_decode_wrong_arity(self):
        with pytest.raises(MalformedSubRecord) as exc:
            decode_diagnosis("Flu")
        assert exc.value.kind == "diagnosis"

    def test_decode_too_many_fields(self):
        with pytest.raises(MalformedSubRecord):
            decode_diagnosis("Flu|2024-01-01|extra")

    def test_encode_rechecks_mutated_field(self):
        d = Diagnosis("Flu", "2024-01-01")
        d.condition = "Flu;Cold"
        with pytest.raises(ReservedCharacterError):
            encode_diagnosis(d)


class TestTreatmentCodec:
    def test_encode_with_empty_notes(self):
        assert encode_treatment(Treatment("Rest", "2024-01-02")) == "Rest|2024-01-02|"

    def test_decode(self):
        t = decode_treatment("Physiotherapy|2024-02-01|twice weekly")
        assert t == Treatment("Physiotherapy", "2024-02-01", "twice weekly")

    def test_decode_wrong_arity(self):
        with pytest.raises(MalformedSubRecord):
            decode_treatment("Physiotherapy|2024-02-01")


class TestPrescriptionCodec:
    def test_encode_uses_integer_codes(self):
        p = Prescription("Paracetamol", 2, PrescriptionStatus.PENDING)
        assert encode_prescription(p) == "Paracetamol|2|0"

    def test_decode(self):
        p = decode_prescription("Amlodipine|30|1")
        assert p.medication_name == "Amlodipine"
        assert p.quantity == 30
        assert p.status is PrescriptionStatus.DISPENSED

    def test_decode_non_integer_quantity(self):
        with pytest.raises(MalformedSubRecord) as exc:
            decode_prescription("Paracetamol|two|0")
        assert not isinstance(exc.value, InvalidStatus)

    def test_decode_non_integer_status(self):
        with pytest.raises(MalformedSubRecord):
            decode_prescription("Paracetamol|2|pending")

    def test_decode_negative_quantity(self):
        with pytest.raises(MalformedSubRecord):
            decode_prescription("Paracetamol|-2|0")

    def test_decode_unknown_status(self):
        with pytest.raises(InvalidStatus):
            decode_prescription("Paracetamol|2|9")

    def test_invalid_status_is_malformed_subrecord(self):
        assert issubclass(InvalidStatus, MalformedSubRecord)

    def test_decode_wrong_arity(self):
        with pytest.raises(MalformedSubRecord):
            decode_prescription("Paracetamol|2")

    @pytest.mark.parametrize("quantity", ["2_0", " 2", "2 ", "+2", "٢", ""])
    def test_decode_only_plain_ascii_integers(self, quantity):
        with pytest.raises(MalformedSubRecord):
            decode_prescription(f"Paracetamol|{quantity}|0")

    def test_encode_rejects_negative_quantity_set_later(self):
        p = Prescription("Paracetamol", 2)
        p.quantity = -3
        with pytest.raises(ValueError):
            encode_prescription(p)

    def test_encode_rejects_non_int_quantity_set_later(self):
        p = Prescription("Paracetamol", 2)
        p.quantity = "2"
        with pytest.raises(TypeError):
            encode_prescription(p)
        p.quantity = True
        with pytest.raises(TypeError):
            encode_prescription(p)


class TestCollectionCodec:
    def test_empty_list_encodes_to_empty_string(self):
        assert encode_list([], DIAGNOSIS_CODEC.encode) == ""

    def test_encode_joins_with_semicolon(self):
        items = [Diagnosis("Flu", "2024-01-01"), Diagnosis("Asthma", "2020-03-03")]
        assert encode_list(items, encode_diagnosis) == "Flu|2024-01-01;Asthma|2020-03-03"

    def test_empty_string_never_calls_decoder(self):
        def boom(token):
            raise AssertionError("decoder called")

        assert decode_list("", boom) == []

    def test_decode_preserves_order(self):
        items = decode_list("A||;B||;C||", TREATMENT_CODEC.decode)
        assert [t.name for t in items] == ["A", "B", "C"]

    def test_fail_fast_on_bad_item(self):
        calls = []

        def decoder(token):
            calls.append(token)
            return decode_prescription(token)

        with pytest.raises(MalformedSubRecord) as exc:
            decode_list("Paracetamol|2|0;Broken;Ibuprofen|1|0", decoder)
        assert exc.value.index == 1
        assert calls == ["Paracetamol|2|0", "Broken"]

    def test_invalid_status_propagates(self):
        with pytest.raises(InvalidStatus) as exc:
            decode_list("Paracetamol|2|0;Ibuprofen|1|5", PRESCRIPTION_CODEC.decode)
        assert exc.value.index == 1

    def test_trailing_separator_is_an_empty_bad_item(self):
        with pytest.raises(MalformedSubRecord):
            decode_list("Flu|2024-01-01;", DIAGNOSIS_CODEC.decode)


class TestUserCodec:
    def test_header_has_eight_columns(self):
        assert len(USER_HEADER.split(",")) == 8

    def test_decode_doctor(self):
        u = decode_user("D001,John Smith,1970-01-01,Male,9000,john@h.com,secret,Doctor")
        assert u.id == "D001"
        assert u.email_address == "john@h.com"
        assert u.password == "secret"
        assert u.role is Role.DOCTOR

    def test_encode(self):
        u = User("A001", "Sarah Lim", "1979-03-03", "Female", "9000", "s@h.com", "pw",
                 Role.ADMINISTRATOR)
        assert encode_user(u) == "A001,Sarah Lim,1979-03-03,Female,9000,s@h.com,pw,Administrator"

    def test_decode_wrong_field_count(self):
        with pytest.raises(MalformedRecord):
            decode_user("D001,John Smith,1970-01-01,Male,9000")

    def test_decode_unknown_role(self):
        with pytest.raises(UnknownRole) as exc:
            decode_user("J001,Jo,1990-01-01,Male,9000,j@h.com,pw,Janitor")
        assert exc.value.field == "role"

    def test_decode_strips_windows_line_ending(self):
        u = decode_user("P001,Ann,1990-01-01,Female,9000,a@h.com,pw,Patient\r\n")
        assert u.role is Role.PATIENT
