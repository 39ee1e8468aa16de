"""Tests for the display renderers and markdown export."""

from hmsrecords.formatters.markdown import MarkdownWriter, export_markdown, format_store_markdown
from hmsrecords.formatters.text import describe_record, describe_user
from hmsrecords.models import MedicalRecord, PrescriptionStatus


class TestDescribeRecord:
    def test_header_fields(self, sample_record):
        text = describe_record(sample_record)
        assert text.startswith("Patient ID: P1001\nName: Alice Brown\n")
        assert "Blood Type: A+" in text
        assert "Email Address: alice@example.com" in text

    def test_sections_in_order(self, sample_record):
        text = describe_record(sample_record)
        assert text.index("-----Diagnoses-----") < text.index("-----Treatments-----")
        assert text.index("-----Treatments-----") < text.index("-----Prescriptions-----")

    def test_subrecord_details(self, sample_record):
        text = describe_record(sample_record)
        assert "Diagnosis: Hypertension" in text
        assert "Notes: low salt diet" in text
        assert "Medication: Amlodipine\nQuantity: 30\nStatus: DISPENSED" in text

    def test_empty_sections(self):
        text = describe_record(MedicalRecord("P002"))
        assert "No diagnoses available." in text
        assert "No treatments available." in text
        assert "No prescriptions available." in text

    def test_describe_user_omits_password(self, sample_doctor):
        line = describe_user(sample_doctor)
        assert line == "ID: D002, Name: Grace Tan, Role: Doctor"
        assert "password" not in line


class TestMarkdownWriter:
    def test_table(self):
        md = MarkdownWriter()
        md.table(["A", "B"], [["1", 2]])
        assert md.text() == "| A | B |\n|---|---|\n| 1 | 2 |\n"

    def test_heading(self):
        md = MarkdownWriter()
        md.heading("Title", level=1)
        assert md.text() == "# Title\n"

    def test_blank_cells_and_status_names(self):
        md = MarkdownWriter()
        md.table(["Medication", "Date", "Status"], [["Salbutamol", "", PrescriptionStatus.CANCELLED]])
        assert "| Salbutamol | - | CANCELLED |" in md.text()

    def test_empty_collection_gets_note(self):
        md = MarkdownWriter()
        md.collection("Diagnoses", ["Condition", "Date"], [])
        assert md.text() == "### Diagnoses\n\n*None recorded.*\n"

    def test_collection_with_rows(self):
        md = MarkdownWriter()
        md.collection("Diagnoses", ["Condition", "Date"], [["Flu", "2024-01-01"]])
        assert md.text().startswith("### Diagnoses\n\n| Condition | Date |")
        assert "*None recorded.*" not in md.text()


class TestExport:
    def test_contains_records_and_staff(self, loaded_store):
        text = format_store_markdown(loaded_store)
        assert "# Hospital Records" in text
        assert "*2 medical records, 4 users.*" in text
        assert "## Staff" in text
        assert "| D001 | John Smith | Doctor |" in text
        assert "| Amlodipine | 30 | DISPENSED |" in text
        assert "*None recorded.*" in text

    def test_export_writes_file(self, loaded_store, tmp_path):
        out = tmp_path / "export.md"
        path = export_markdown(loaded_store, output_path=str(out))
        assert path == str(out)
        assert out.read_text(encoding="utf-8").startswith("# Hospital Records")
