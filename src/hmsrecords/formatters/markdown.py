"""Markdown export of the record store."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from hmsrecords.models import MedicalRecord
from hmsrecords.store import RecordStore

EMPTY_CELL = "-"
NONE_RECORDED = "*None recorded.*"


def _cell(value: object) -> str:
    if isinstance(value, Enum):
        return value.name
    # Optional fields (dates, notes) are stored as "" and would collapse the column.
    return str(value) or EMPTY_CELL


class MarkdownWriter:
    """Accumulates markdown blocks, each followed by one blank line."""

    def __init__(self):
        self._lines: list[str] = []

    def _block(self, *lines: str) -> None:
        self._lines.extend(lines)
        self._lines.append("")

    def heading(self, text: str, level: int = 2) -> None:
        self._block(f"{'#' * level} {text}")

    def paragraph(self, text: str) -> None:
        self._block(text)

    def rule(self) -> None:
        self._block("---")

    def table(self, headers: Sequence[str], rows: Iterable[Sequence[object]]) -> None:
        """Pipe table. Enum cells render by name, empty strings as EMPTY_CELL."""
        self._block(
            "| " + " | ".join(headers) + " |",
            "|" + "|".join("---" for _ in headers) + "|",
            *("| " + " | ".join(_cell(c) for c in row) + " |" for row in rows),
        )

    def collection(self, title: str, headers: Sequence[str], rows: list[Sequence[object]]) -> None:
        """Level-3 section for one sub-record list; a note instead of an empty table."""
        self.heading(title, level=3)
        if rows:
            self.table(headers, rows)
        else:
            self.paragraph(NONE_RECORDED)

    def text(self) -> str:
        return "\n".join(self._lines)


def _write_record(md: MarkdownWriter, record: MedicalRecord) -> None:
    md.rule()
    md.heading(f"{record.patient_id} — {record.name}")
    md.table(
        ["Date of Birth", "Gender", "Blood Type", "Phone", "Email"],
        [[record.date_of_birth, record.gender, record.blood_type,
          record.phone_number, record.email_address]],
    )
    md.collection(
        "Diagnoses",
        ["Condition", "Date"],
        [[d.condition, d.diagnosed_on] for d in record.diagnoses],
    )
    md.collection(
        "Treatments",
        ["Treatment", "Date", "Notes"],
        [[t.name, t.treated_on, t.notes] for t in record.treatments],
    )
    md.collection(
        "Prescriptions",
        ["Medication", "Quantity", "Status"],
        [[p.medication_name, p.quantity, p.status] for p in record.prescriptions],
    )


def format_store_markdown(store: RecordStore) -> str:
    """Format every medical record and the staff list as markdown."""
    md = MarkdownWriter()
    md.heading("Hospital Records", level=1)

    counts = store.summary()
    md.paragraph(f"*{counts['medical_records']} medical records, {counts['users']} users.*")

    staff = store.staff()
    if staff:
        md.rule()
        md.heading("Staff")
        md.table(
            ["ID", "Name", "Role", "Phone", "Email"],
            [[u.id, u.name, u.role.value, u.phone_number, u.email_address] for u in staff],
        )

    for record in store.all():
        _write_record(md, record)

    return md.text()


def export_markdown(store: RecordStore, output_path: str = "hmsrecords_export.md") -> str:
    """Write format_store_markdown() to output_path. Returns the path."""
    md_text = format_store_markdown(store)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(md_text)
    return output_path
