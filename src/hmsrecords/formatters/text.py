"""Plain-text descriptions for the console. Never used for persistence."""

from hmsrecords.models import Diagnosis, MedicalRecord, Prescription, Treatment, User


def describe_diagnosis(diagnosis: Diagnosis) -> str:
    return f"Diagnosis: {diagnosis.condition}\nDate: {diagnosis.diagnosed_on or 'unknown'}"


def describe_treatment(treatment: Treatment) -> str:
    lines = [f"Treatment: {treatment.name}", f"Date: {treatment.treated_on or 'unknown'}"]
    if treatment.notes:
        lines.append(f"Notes: {treatment.notes}")
    return "\n".join(lines)


def describe_prescription(prescription: Prescription) -> str:
    return (
        f"Medication: {prescription.medication_name}\n"
        f"Quantity: {prescription.quantity}\n"
        f"Status: {prescription.status.name}"
    )


def describe_record(record: MedicalRecord) -> str:
    """Render a full medical record as a multi-line report."""
    out = [
        f"Patient ID: {record.patient_id}",
        f"Name: {record.name}",
        f"Date of Birth: {record.date_of_birth}",
        f"Gender: {record.gender}",
        f"Blood Type: {record.blood_type}",
        f"Phone Number: {record.phone_number}",
        f"Email Address: {record.email_address}",
        "",
    ]

    sections = [
        ("Diagnoses", "diagnoses", record.diagnoses, describe_diagnosis),
        ("Treatments", "treatments", record.treatments, describe_treatment),
        ("Prescriptions", "prescriptions", record.prescriptions, describe_prescription),
    ]
    for title, noun, items, render in sections:
        out.append(f"-----{title}-----")
        if not items:
            out.append(f"No {noun} available.")
            continue
        for item in items:
            out.append(render(item))
            out.append("")

    return "\n".join(out) + "\n"


def describe_user(user: User) -> str:
    """One-line staff listing entry (password omitted)."""
    return f"ID: {user.id}, Name: {user.name}, Role: {user.role.value}"
