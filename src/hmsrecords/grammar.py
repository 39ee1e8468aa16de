"""Separators and reserved-character rules of the flat-file format.

Grammar of one medical-record line::

    line         := scalar{7} "," collection "," collection "," collection
    collection   := "" | item (";" item)*
    item         := value ("|" value)*

Values are never quoted or escaped, so no value may contain a separator or a
line break. The check runs when entities are constructed and again when they
are written.
"""

from __future__ import annotations

from hmsrecords.exceptions import ReservedCharacterError

FIELD_SEP = ","
ITEM_SEP = ";"
SUBFIELD_SEP = "|"

RESERVED_CHARS = (FIELD_SEP, ITEM_SEP, SUBFIELD_SEP, "\n", "\r")


def find_reserved(value: str) -> str | None:
    """Return the first reserved character found in value, or None."""
    for ch in RESERVED_CHARS:
        if ch in value:
            return ch
    return None


def check_reserved(owner: str, field_name: str, value: str) -> None:
    """Raise ReservedCharacterError if value contains a separator.

    Args:
        owner: Entity kind, used in the error message (e.g. "diagnosis").
        field_name: Attribute name of the offending value.
        value: The string to check.
    """
    if not isinstance(value, str):
        raise ReservedCharacterError(
            f"{owner}.{field_name} must be a string, got {type(value).__name__}"
        )
    ch = find_reserved(value)
    if ch is not None:
        raise ReservedCharacterError(
            f"{owner}.{field_name} contains reserved character {ch!r}: {value!r}"
        )


def strip_line_ending(line: str) -> str:
    """Strip one trailing line ending (\\n or \\r\\n) from a file line."""
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line
