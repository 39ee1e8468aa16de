"""Text codecs for the record store's flat files."""

from hmsrecords.core.collection import decode_list, encode_list
from hmsrecords.core.record import RECORD_FIELD_COUNT, decode_record, encode_record
from hmsrecords.core.subrecords import (
    DIAGNOSIS_CODEC,
    PRESCRIPTION_CODEC,
    TREATMENT_CODEC,
    SubRecordCodec,
    decode_diagnosis,
    decode_prescription,
    decode_treatment,
    encode_diagnosis,
    encode_prescription,
    encode_treatment,
)
from hmsrecords.core.users import USER_HEADER, decode_user, encode_user
