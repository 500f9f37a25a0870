# app/utils/pdf_documents.py
"""
Printable documents generated with reportlab: pharmacy bill, lab report,
discharge summary and surgical case sheet.

Every document starts with the hospital letterhead from HospitalSettings.
Renderers return a BytesIO positioned at 0.
"""

from datetime import date, datetime
from io import BytesIO
from typing import Any, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.models.discharge_summary import DischargeSummary
from app.models.hospital_settings import HospitalSettings
from app.models.lab_test import LabTest, LabTestDefinition
from app.models.prescription import Prescription
from app.models.surgical_case_sheet import SurgicalCaseSheet
from app.schemas.surgical_case_sheet import Investigations, OnExamination
from app.utils.datetime_utils import utc_now

_FIELD_TABLE_STYLE = TableStyle(
    [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
    ]
)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "DocTitle",
            parent=base["Heading1"],
            fontSize=20,
            alignment=1,
            spaceAfter=4,
            fontName="Helvetica-Bold",
        ),
        "subtitle": ParagraphStyle(
            "DocSubtitle",
            parent=base["Normal"],
            fontSize=9,
            alignment=1,
            spaceAfter=2,
        ),
        "heading": ParagraphStyle(
            "DocHeading",
            parent=base["Heading2"],
            fontSize=13,
            spaceBefore=6,
            spaceAfter=4,
            fontName="Helvetica-Bold",
        ),
        "normal": ParagraphStyle(
            "DocNormal",
            parent=base["Normal"],
            fontSize=10,
            spaceAfter=4,
        ),
    }


def _text(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return escape(str(value))


def _new_document(buffer: BytesIO) -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=18 * mm,
        leftMargin=18 * mm,
        topMargin=15 * mm,
        bottomMargin=12 * mm,
    )


def _letterhead(elements: list, letterhead: HospitalSettings, styles: dict[str, ParagraphStyle], title: str) -> None:
    elements.append(Paragraph(escape(letterhead.hospital_name), styles["title"]))
    for line in (letterhead.hospital_subtitle, letterhead.accreditation, letterhead.address):
        if line:
            elements.append(Paragraph(escape(line), styles["subtitle"]))

    contact = " • ".join(escape(part) for part in (letterhead.phone, letterhead.email) if part)
    if contact:
        elements.append(Paragraph(contact, styles["subtitle"]))

    elements.append(Spacer(1, 4 * mm))
    elements.append(Paragraph(title, styles["heading"]))


def _field_table(rows: list[tuple[str, Any]], col_widths=(55 * mm, 119 * mm)) -> Table:
    table = Table([[label, Paragraph(_text(value))] for label, value in rows], colWidths=list(col_widths))
    table.setStyle(_FIELD_TABLE_STYLE)
    return table


def _section(elements: list, heading: str, body: Optional[str], styles: dict[str, ParagraphStyle]) -> None:
    if not body:
        return
    elements.append(Paragraph(heading, styles["heading"]))
    elements.append(Paragraph(escape(body).replace("\n", "<br/>"), styles["normal"]))


def _finish(doc: SimpleDocTemplate, elements: list, buffer: BytesIO) -> BytesIO:
    doc.build(elements)
    buffer.seek(0)
    return buffer


def generate_pharmacy_bill_pdf(prescription: Prescription, letterhead: HospitalSettings) -> BytesIO:
    """
    Pharmacy bill: patient block, one row per line item, totals.
    """
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = _styles()
    elements: list = []

    _letterhead(elements, letterhead, styles, "Pharmacy Bill")

    patient = prescription.patient
    elements.append(
        _field_table(
            [
                ("Bill Number:", prescription.bill_number),
                ("Date:", prescription.created_at),
                ("Patient Name:", patient.name if patient else None),
                ("Patient ID:", patient.patient_code if patient else None),
                ("Age / Gender:", f"{patient.age} / {patient.gender}" if patient else None),
            ]
        )
    )
    elements.append(Spacer(1, 5 * mm))

    rows = [["#", "Medicine", "Dosage", "Qty", "Price", "Amount"]]
    for index, item in enumerate(prescription.items, start=1):
        rows.append(
            [
                str(index),
                Paragraph(_text(item.name)),
                Paragraph(_text(item.dosage)),
                str(item.quantity),
                f"{item.price:.2f}",
                f"{item.total:.2f}",
            ]
        )
    rows.append(["", "", "", "", "Subtotal", f"{prescription.subtotal:.2f}"])
    rows.append(["", "", "", "", "Tax", f"{prescription.tax:.2f}"])
    rows.append(["", "", "", "", "Total", f"{prescription.total:.2f}"])

    table = Table(rows, colWidths=[10 * mm, 62 * mm, 38 * mm, 14 * mm, 24 * mm, 26 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -4), 0.5, colors.black),
                ("ALIGN", (3, 1), (-1, -1), "RIGHT"),
                ("FONTNAME", (4, -3), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (4, -1), (-1, -1), 1, colors.black),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    elements.append(table)
    elements.append(Spacer(1, 12 * mm))
    elements.append(Paragraph("Pharmacist Signature: _________________", styles["normal"]))

    return _finish(doc, elements, buffer)


def generate_discharge_summary_pdf(summary: DischargeSummary, letterhead: HospitalSettings) -> BytesIO:
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = _styles()
    elements: list = []

    _letterhead(elements, letterhead, styles, "Discharge Summary")

    patient = summary.patient
    elements.append(
        _field_table(
            [
                ("Patient Name:", patient.name if patient else None),
                ("Patient ID:", patient.patient_code if patient else None),
                ("Age / Gender:", f"{patient.age} / {patient.gender}" if patient else None),
                ("Admission Date:", summary.admission_date),
                ("Discharge Date:", summary.discharge_date),
                ("Attending Physician:", summary.attending_physician),
            ]
        )
    )

    _section(elements, "Primary Diagnosis", summary.primary_diagnosis, styles)
    _section(elements, "Secondary Diagnosis", summary.secondary_diagnosis, styles)
    _section(elements, "Treatment Summary", summary.treatment_summary, styles)
    _section(elements, "Medications", summary.medications, styles)
    _section(elements, "Follow-up Instructions", summary.followup_instructions, styles)

    elements.append(Spacer(1, 12 * mm))
    elements.append(Paragraph("Signature: _________________", styles["normal"]))
    elements.append(Paragraph(escape(summary.attending_physician), styles["normal"]))

    return _finish(doc, elements, buffer)


def _labelled(model_cls, values: Optional[dict]) -> list[tuple[str, Any]]:
    """Rows for a JSON findings block, labelled from the schema field names."""
    values = values or {}
    return [
        (f"{name.replace('_', ' ').title()}:", values.get(name))
        for name in model_cls.model_fields
    ]


def generate_case_sheet_pdf(sheet: SurgicalCaseSheet, letterhead: HospitalSettings) -> BytesIO:
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = _styles()
    elements: list = []

    _letterhead(elements, letterhead, styles, "Surgical Case Sheet")

    elements.append(
        _field_table(
            [
                ("Case Number:", sheet.case_number),
                ("Patient Name:", sheet.patient_name),
                ("Husband / Father Name:", sheet.husband_father_name),
                ("Age / Sex:", f"{sheet.age or '-'} / {sheet.sex or '-'}"),
                ("Religion / Nationality:", f"{sheet.religion or '-'} / {sheet.nationality or '-'}"),
                ("Address:", sheet.address),
                ("Village / District:", f"{sheet.village or '-'} / {sheet.district or '-'}"),
                ("Date of Admission:", sheet.date_of_admission),
                ("Date of Operation:", sheet.date_of_operation),
                ("Date of Discharge:", sheet.date_of_discharge),
                ("Diagnosis:", sheet.diagnosis),
                ("Nature of Operation:", sheet.nature_of_operation),
                ("LP No:", sheet.lp_no),
                ("EDD:", sheet.edd),
            ]
        )
    )

    _section(elements, "Complaints and Duration", sheet.complaints_and_duration, styles)
    _section(elements, "History of Present Illness", sheet.history_of_present_illness, styles)

    elements.append(Paragraph("Investigations", styles["heading"]))
    elements.append(_field_table(_labelled(Investigations, sheet.investigations)))

    elements.append(Paragraph("On Examination", styles["heading"]))
    elements.append(_field_table(_labelled(OnExamination, sheet.examination)))

    elements.append(Spacer(1, 12 * mm))
    elements.append(Paragraph("Surgeon Signature: _________________", styles["normal"]))

    return _finish(doc, elements, buffer)


def _lab_result_row(name: str, result: Any, definition: Optional[LabTestDefinition]) -> list:
    """
    One results-table row. A result is either a plain value or a mapping with
    `value` and optionally `unit` / `normalRange`; missing unit and range come
    from the catalogue.
    """
    if isinstance(result, dict):
        value = result.get("value")
        unit = result.get("unit") or (definition.units if definition else None)
        normal_range = result.get("normalRange") or result.get("normal_range")
    else:
        value = result
        unit = definition.units if definition else None
        normal_range = None
    if not normal_range and definition:
        normal_range = definition.normal_range

    # "male|female" ranges print on two lines
    range_text = "<br/>".join(_text(part.strip()) for part in normal_range.split("|")) if normal_range else "-"
    return [
        Paragraph(_text(name)),
        Paragraph(f"<b>{_text(value)}</b>"),
        Paragraph(_text(unit)),
        Paragraph(range_text),
    ]


def generate_lab_report_pdf(
    lab_test: LabTest,
    letterhead: HospitalSettings,
    definitions: Optional[dict[str, LabTestDefinition]] = None,
) -> BytesIO:
    """
    Laboratory investigation report: patient and test block, one row per
    result with unit and reference range, clinical remarks, signatory.
    """
    definitions = definitions or {}
    buffer = BytesIO()
    doc = _new_document(buffer)
    styles = _styles()
    elements: list = []

    _letterhead(elements, letterhead, styles, "Laboratory Investigation Report")

    patient = lab_test.patient
    elements.append(
        _field_table(
            [
                ("Lab No:", lab_report_number(lab_test)),
                ("Patient Name:", patient.name if patient else None),
                ("Patient ID:", patient.patient_code if patient else None),
                ("Age / Gender:", f"{patient.age} Years / {patient.gender}" if patient else None),
                ("Contact:", patient.contact if patient else None),
                ("Collection Date:", lab_test.created_at),
                ("Report Date:", utc_now().date()),
                ("Tests Ordered:", ", ".join(lab_test.test_types or [])),
            ]
        )
    )
    elements.append(Spacer(1, 5 * mm))

    results = lab_test.results or {}
    elements.append(Paragraph("Results", styles["heading"]))
    if results:
        rows = [["Investigation", "Value", "Unit", "Reference Range"]]
        rows.extend(_lab_result_row(name, result, definitions.get(name)) for name, result in results.items())
        table = Table(rows, colWidths=[62 * mm, 34 * mm, 28 * mm, 50 * mm], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        elements.append(table)
    else:
        elements.append(Paragraph("Results pending.", styles["normal"]))

    _section(elements, "Clinical Interpretation & Remarks", lab_test.doctor_notes, styles)

    elements.append(Spacer(1, 6 * mm))
    elements.append(
        Paragraph(
            "<i>All tests performed using calibrated instruments and quality controlled reagents. "
            "Reference ranges are age and gender specific; please correlate with clinical findings.</i>",
            styles["normal"],
        )
    )
    elements.append(Spacer(1, 12 * mm))
    elements.append(Paragraph("Authorized Signatory: _________________", styles["normal"]))
    elements.append(Paragraph(f"Lab Technician, {escape(letterhead.hospital_name)}", styles["normal"]))

    return _finish(doc, elements, buffer)


def lab_report_number(lab_test: LabTest) -> str:
    return f"LAB-{lab_test.id.hex[:8].upper()}"
