"""
Exception hierarchy for the record store and its text codecs.
"""

from __future__ import annotations


class RecordStoreError(Exception):
    """
    Base class for every error raised by hmsrecords.
    """


class MalformedRecord(RecordStoreError):
    """
    A top-level line (medical record or user) could not be decoded.

    Args:
        message: Human-readable description
        field: Name of the offending top-level field, when known
        line_number: 1-based line in the backing file, when known
    """

    def __init__(self, message: str, field: str | None = None, line_number: int | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.line_number = line_number

    def __str__(self) -> str:
        parts = []
        if self.line_number is not None:
            parts.append(f"line {self.line_number}")
        if self.field:
            parts.append(f"field '{self.field}'")
        if parts:
            return f"{', '.join(parts)}: {self.message}"
        return self.message


class UnknownRole(MalformedRecord):
    """A user line names a role that is not a recognized Role."""


class MalformedSubRecord(RecordStoreError):
    """
    A diagnosis, treatment or prescription token could not be decoded.

    Args:
        message: Human-readable description
        kind: Sub-record kind ("diagnosis", "treatment", "prescription")
        index: 0-based position of the token inside its collection
    """

    def __init__(self, message: str, kind: str | None = None, index: int | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.index = index

    def __str__(self) -> str:
        if self.index is not None:
            return f"{self.kind or 'item'} #{self.index}: {self.message}"
        return self.message


class InvalidStatus(MalformedSubRecord):
    """A prescription status code outside PrescriptionStatus."""


class ReservedCharacterError(RecordStoreError, ValueError):
    """A field value contains one of the format's separator characters."""


class DuplicateRecord(RecordStoreError):
    """An entity with the same identity key is already in the store."""

    def __init__(self, message: str, key: str, line_number: int | None = None):
        super().__init__(message)
        self.key = key
        self.line_number = line_number


class IOFailure(RecordStoreError):
    """The backing file could not be read or written."""

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
