"""Flat-file record store for hmsrecords.

RecordStore holds the process's medical records and users in memory:
- Strict medical-record loading (any bad line aborts the load)
- Permissive user loading (bad lines are logged and skipped)
- Whole-file rewrite on save via a temp file and os.replace
- Lookup and mutation helpers; nothing is saved until save_* is called
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from hmsrecords.config import StoreConfig
from hmsrecords.core.record import decode_record, encode_record
from hmsrecords.core.users import USER_HEADER, decode_user, encode_user
from hmsrecords.exceptions import (
    DuplicateRecord,
    IOFailure,
    MalformedRecord,
)
from hmsrecords.grammar import check_reserved, strip_line_ending
from hmsrecords.models import MedicalRecord, Prescription, PrescriptionStatus, Role, User

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of loading one backing file."""

    path: str
    loaded: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def _read_lines(path: str) -> list[bytes]:
    # Raw bytes: each line is decoded on its own so one bad byte costs one line.
    try:
        with open(path, "rb") as f:
            return f.readlines()
    except OSError as e:
        raise IOFailure(f"cannot read {path}: {e}", path) from e


def _decode_line(raw: bytes) -> str:
    """Decode one raw line as UTF-8. Raises MalformedRecord on invalid bytes."""
    try:
        return strip_line_ending(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MalformedRecord(f"invalid UTF-8 at byte {e.start}: {raw[e.start:e.end]!r}") from e


def _write_lines(path: str, lines: Iterable[str]) -> None:
    """Replace path with lines, never leaving a partially written file.

    The content is written to a sibling temp file and moved over path with
    os.replace, so readers see either the old file or the new one.
    """
    content = "".join(f"{line}\n" for line in lines)
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        raise IOFailure(f"cannot write {path}: {e}", str(path)) from e


class RecordStore:
    """In-memory medical records and users backed by two text files.

    Build one per process and hand it to whoever needs it.
    """

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig()
        self._records: list[MedicalRecord] = []
        self._users: list[User] = []

    # --- loading ---

    def load_all(self) -> dict[str, LoadResult]:
        """Load users then medical records from the configured paths."""
        return {
            "users": self.load_users(self.config.users_path),
            "records": self.load_records(self.config.records_path),
        }

    def load_records(self, path: str | None = None) -> LoadResult:
        """Strictly load medical records, replacing the in-memory collection.

        Any malformed line (including invalid UTF-8) or repeated patient id
        aborts the load with
        MalformedRecord / DuplicateRecord carrying the 1-based line number.
        On failure the current collection is left untouched.
        """
        path = path or self.config.records_path
        records: list[MedicalRecord] = []
        seen: set[str] = set()

        for line_number, raw in enumerate(_read_lines(path), start=1):
            if not raw.strip():
                continue
            try:
                record = decode_record(_decode_line(raw))
            except MalformedRecord as e:
                e.line_number = line_number
                logger.error("Aborting load of %s: %s", path, e)
                raise
            if record.patient_id in seen:
                logger.error("Aborting load of %s: duplicate patient id %s", path, record.patient_id)
                raise DuplicateRecord(
                    f"line {line_number}: duplicate patient id {record.patient_id}",
                    key=record.patient_id,
                    line_number=line_number,
                )
            seen.add(record.patient_id)
            records.append(record)

        self._records = records
        logger.info("Loaded %d medical records from %s", len(records), path)
        return LoadResult(path=str(path), loaded=len(records))

    def load_users(self, path: str | None = None) -> LoadResult:
        """Permissively load the user list, replacing the in-memory users.

        The first line is a header. Lines that are not valid UTF-8, have the
        wrong field count, an unknown role or an already-seen id are logged,
        recorded in LoadResult.warnings and skipped.
        """
        path = path or self.config.users_path
        result = LoadResult(path=str(path))
        users: list[User] = []
        seen: set[str] = set()

        lines = _read_lines(path)
        for line_number, raw in enumerate(lines[1:], start=2):
            if not raw.strip():
                continue
            try:
                user = decode_user(_decode_line(raw))
            except MalformedRecord as e:
                e.line_number = line_number
                self._warn(result, f"{e} in {strip_line_ending(raw.decode('utf-8', 'replace'))!r}")
                continue
            if user.id in seen:
                self._warn(result, f"line {line_number}: duplicate user id {user.id}")
                continue
            seen.add(user.id)
            users.append(user)

        self._users = users
        result.loaded = len(users)
        logger.info(
            "Loaded %d users from %s (%d lines skipped)", len(users), path, len(result.warnings)
        )
        return result

    @staticmethod
    def _warn(result: LoadResult, message: str) -> None:
        logger.warning("Skipping user line: %s", message)
        result.warnings.append(message)

    # --- saving ---

    def save_all(self) -> None:
        self.save_users()
        self.save_records()

    def save_records(self, path: str | None = None) -> str:
        """Rewrite the medical-record file. Returns the path written."""
        path = path or self.config.records_path
        _write_lines(path, [encode_record(r) for r in self._records])
        logger.info("Saved %d medical records to %s", len(self._records), path)
        return str(path)

    def save_users(self, path: str | None = None) -> str:
        """Rewrite the user list (header first). Returns the path written."""
        path = path or self.config.users_path
        _write_lines(path, [USER_HEADER] + [encode_user(u) for u in self._users])
        logger.info("Saved %d users to %s", len(self._users), path)
        return str(path)

    # --- medical records ---

    def all(self) -> list[MedicalRecord]:
        return list(self._records)

    def find_by_id(self, patient_id: str) -> MedicalRecord | None:
        for record in self._records:
            if record.patient_id == patient_id:
                return record
        return None

    def add(self, record: MedicalRecord) -> None:
        """Append a record. Raises DuplicateRecord if the id is taken."""
        if self.find_by_id(record.patient_id) is not None:
            raise DuplicateRecord(
                f"patient id {record.patient_id} already exists", key=record.patient_id
            )
        self._records.append(record)

    def replace(self, record: MedicalRecord) -> MedicalRecord | None:
        """Insert or swap in place by patient id. Returns the record replaced."""
        for i, existing in enumerate(self._records):
            if existing.patient_id == record.patient_id:
                self._records[i] = record
                return existing
        self._records.append(record)
        return None

    def remove(self, patient_id: str) -> MedicalRecord | None:
        """Drop a record and its sub-records. Returns it, or None if absent."""
        record = self.find_by_id(patient_id)
        if record is not None:
            self._records.remove(record)
        return record

    def update_prescription_status(
        self, patient_id: str, medication_name: str, status: PrescriptionStatus | int
    ) -> Prescription | None:
        """Set the status of the first matching prescription on a record."""
        status = PrescriptionStatus(status)
        record = self.find_by_id(patient_id)
        if record is None:
            return None
        for prescription in record.prescriptions:
            if prescription.medication_name == medication_name:
                prescription.status = status
                logger.info(
                    "Prescription %s for %s set to %s", medication_name, patient_id, status.name
                )
                return prescription
        return None

    # --- users ---

    def users(self) -> list[User]:
        return list(self._users)

    def find_user(self, user_id: str) -> User | None:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def staff(self, role: Role | str | None = None) -> list[User]:
        """Non-patient users, optionally restricted to one role."""
        if role is None:
            return [u for u in self._users if u.is_staff]
        wanted = Role(role)
        return [u for u in self._users if u.role is wanted]

    def add_user(self, user: User) -> None:
        if self.find_user(user.id) is not None:
            raise DuplicateRecord(f"user id {user.id} already exists", key=user.id)
        self._users.append(user)

    def remove_user(self, user_id: str) -> User | None:
        user = self.find_user(user_id)
        if user is not None:
            self._users.remove(user)
        return user

    def change_password(self, user_id: str, new_password: str) -> bool:
        user = self.find_user(user_id)
        if user is None or not new_password:
            return False
        check_reserved("user", "password", new_password)
        user.password = new_password
        return True

    # --- reporting ---

    def summary(self) -> dict[str, int]:
        """Entity counts: records, each sub-record kind, and users per role."""
        counts = {
            "medical_records": len(self._records),
            "diagnoses": sum(len(r.diagnoses) for r in self._records),
            "treatments": sum(len(r.treatments) for r in self._records),
            "prescriptions": sum(len(r.prescriptions) for r in self._records),
            "users": len(self._users),
        }
        by_role = Counter(u.role for u in self._users)
        for role in Role:
            counts[f"users_{role.name.lower()}"] = by_role.get(role, 0)
        return counts
