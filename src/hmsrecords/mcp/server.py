"""MCP server for hmsrecords — tool access to the hospital record store.

Run with: python -m hmsrecords.mcp.server
Configure env: HMSRECORDS_CONFIG=/path/to/hmsrecords.toml
"""

from __future__ import annotations

import os
from dataclasses import asdict

from mcp.server.fastmcp import FastMCP

from hmsrecords.config import DEFAULT_CONFIG_PATH, load_config, store_config
from hmsrecords.exceptions import RecordStoreError
from hmsrecords.formatters.text import describe_record
from hmsrecords.models import Diagnosis, Prescription, PrescriptionStatus, Treatment
from hmsrecords.store import RecordStore

CONFIG_PATH = os.environ.get("HMSRECORDS_CONFIG", DEFAULT_CONFIG_PATH)

mcp = FastMCP(
    "hmsrecords",
    instructions=(
        "Hospital record store: patient medical records (diagnoses, treatments, "
        "prescriptions) and the staff/patient user list.\n\n"
        "Key capabilities:\n"
        "- get_store_summary: Record, sub-record and user counts\n"
        "- list_records / get_record / describe_record_tool: Read medical records\n"
        "- list_staff: Doctors, pharmacists and administrators\n"
        "- add_diagnosis / add_treatment / add_prescription: Append to a record (saved immediately)\n"
        "- update_prescription_status_tool: Mark a prescription PENDING, DISPENSED or CANCELLED\n\n"
        "Field values must not contain ',', ';', '|' or line breaks."
    ),
)


def _get_store() -> RecordStore:
    config = load_config(os.environ.get("HMSRECORDS_CONFIG", CONFIG_PATH))
    store = RecordStore(store_config(config))
    store.load_all()
    return store


def _record_dict(record) -> dict:
    data = asdict(record)
    for p in data["prescriptions"]:
        p["status"] = PrescriptionStatus(p["status"]).name
    return data


@mcp.tool()
def get_store_summary() -> dict | str:
    """Counts of medical records, diagnoses, treatments, prescriptions and users per role."""
    try:
        return _get_store().summary()
    except RecordStoreError as e:
        return f"Error: {e}"


@mcp.tool()
def list_records() -> list[dict] | str:
    """List patient id, name and sub-record counts for every medical record."""
    try:
        store = _get_store()
    except RecordStoreError as e:
        return f"Error: {e}"
    return [
        {
            "patient_id": r.patient_id,
            "name": r.name,
            "diagnoses": len(r.diagnoses),
            "treatments": len(r.treatments),
            "prescriptions": len(r.prescriptions),
        }
        for r in store.all()
    ]


@mcp.tool()
def get_record(patient_id: str) -> dict | str:
    """Get one medical record with all sub-records as structured data.

    Args:
        patient_id: Exact patient id, e.g. "P1001".
    """
    try:
        record = _get_store().find_by_id(patient_id)
    except RecordStoreError as e:
        return f"Error: {e}"
    if record is None:
        return f"Patient {patient_id} not found."
    return _record_dict(record)


@mcp.tool()
def describe_record_tool(patient_id: str) -> str:
    """Get one medical record as a human-readable report."""
    try:
        record = _get_store().find_by_id(patient_id)
    except RecordStoreError as e:
        return f"Error: {e}"
    if record is None:
        return f"Patient {patient_id} not found."
    return describe_record(record)


@mcp.tool()
def list_staff(role: str = "") -> list[dict] | str:
    """List staff members (passwords omitted).

    Args:
        role: Optional filter: Doctor, Pharmacist or Administrator.
    """
    try:
        staff = _get_store().staff(role or None)
    except (RecordStoreError, ValueError) as e:
        return f"Error: {e}"
    return [
        {"id": u.id, "name": u.name, "role": u.role.value, "phone_number": u.phone_number,
         "email_address": u.email_address}
        for u in staff
    ]


def _append(patient_id: str, attr: str, build) -> dict | str:
    try:
        store = _get_store()
        record = store.find_by_id(patient_id)
        if record is None:
            return f"Patient {patient_id} not found."
        item = build()
        getattr(record, f"add_{attr}")(item)
        store.save_records()
    except (RecordStoreError, ValueError, TypeError) as e:
        return f"Error: {e}"
    return _record_dict(record)


@mcp.tool()
def add_diagnosis(patient_id: str, condition: str, diagnosed_on: str = "") -> dict | str:
    """Append a diagnosis to a patient's record and save.

    Args:
        patient_id: Exact patient id.
        condition: Diagnosed condition, e.g. "Influenza".
        diagnosed_on: ISO date, e.g. "2024-01-01".
    """
    return _append(patient_id, "diagnosis", lambda: Diagnosis(condition, diagnosed_on))


@mcp.tool()
def add_treatment(patient_id: str, name: str, treated_on: str = "", notes: str = "") -> dict | str:
    """Append a treatment to a patient's record and save."""
    return _append(patient_id, "treatment", lambda: Treatment(name, treated_on, notes))


@mcp.tool()
def add_prescription(patient_id: str, medication_name: str, quantity: int = 1) -> dict | str:
    """Append a PENDING prescription to a patient's record and save."""
    return _append(patient_id, "prescription", lambda: Prescription(medication_name, quantity))


@mcp.tool()
def update_prescription_status_tool(patient_id: str, medication_name: str, status: str) -> dict | str:
    """Change the status of a patient's prescription and save.

    Args:
        patient_id: Exact patient id.
        medication_name: Exact medication name on the prescription.
        status: PENDING, DISPENSED or CANCELLED.
    """
    try:
        new_status = PrescriptionStatus[status.strip().upper()]
    except KeyError:
        return f"Error: unknown status {status!r}."
    try:
        store = _get_store()
        prescription = store.update_prescription_status(patient_id, medication_name, new_status)
        if prescription is None:
            return f"No prescription for {medication_name} on patient {patient_id}."
        store.save_records()
    except RecordStoreError as e:
        return f"Error: {e}"
    return {
        "patient_id": patient_id,
        "medication_name": prescription.medication_name,
        "quantity": prescription.quantity,
        "status": prescription.status.name,
    }


def main():
    mcp.run()


if __name__ == "__main__":
    main()
