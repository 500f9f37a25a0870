from uuid import uuid4

from app.services import lab_test_service


def test_lab_test_order_then_results(client, staff_headers, patient, staff_user):
    created = client.post(
        "/api/lab-tests",
        json={
            "patientId": str(patient.id),
            "testTypes": ["Complete Blood Count", "Blood Sugar Fasting"],
            "totalCost": "450.00",
            "doctorNotes": "Fasting sample",
        },
        headers=staff_headers,
    )

    assert created.status_code == 201, created.text
    data = created.json()
    assert data["status"] == "pending"
    assert data["results"] is None
    assert data["totalCost"] == 450.0
    assert data["createdBy"] == str(staff_user.id)
    assert data["patient"]["name"] == patient.name

    updated = client.put(
        f"/api/lab-tests/{data['id']}",
        json={"status": "completed", "results": {"Hemoglobin": "13.5 g/dL", "FBS": "96 mg/dL"}},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "completed"
    assert updated.json()["results"]["Hemoglobin"] == "13.5 g/dL"
    assert updated.json()["doctorNotes"] == "Fasting sample"

    fetched = client.get(f"/api/lab-tests/{data['id']}", headers=staff_headers).json()
    assert fetched["results"] == {"Hemoglobin": "13.5 g/dL", "FBS": "96 mg/dL"}


def test_lab_report_pdf_download(client, staff_headers, patient):
    client.post(
        "/api/lab-test-definitions",
        json={"testName": "Hemoglobin", "price": "150", "units": "gms%", "normalRange": "13-17 (M)|12-15 (F)"},
        headers=staff_headers,
    )
    order = client.post(
        "/api/lab-tests",
        json={"patientId": str(patient.id), "testTypes": ["Hemoglobin", "FBS"], "totalCost": "250"},
        headers=staff_headers,
    ).json()

    pending = client.get(f"/api/lab-tests/{order['id']}/pdf", headers=staff_headers)
    assert pending.status_code == 200
    assert pending.content.startswith(b"%PDF")

    client.put(
        f"/api/lab-tests/{order['id']}",
        json={
            "status": "completed",
            "results": {"Hemoglobin": "13.5", "FBS": {"value": "96", "unit": "mg/dL", "normalRange": "70-110"}},
            "doctorNotes": "Within normal limits",
        },
        headers=staff_headers,
    )
    response = client.get(f"/api/lab-tests/{order['id']}/pdf", headers=staff_headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert f"LAB-{order['id'].replace('-', '')[:8].upper()}" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
    assert client.get(f"/api/lab-tests/{uuid4()}/pdf", headers=staff_headers).status_code == 404


def test_report_reference_ranges_come_from_the_catalogue(db, client, staff_headers):
    client.post(
        "/api/lab-test-definitions",
        json={"testName": "Hemoglobin", "price": "150", "units": "gms%", "normalRange": "13-17"},
        headers=staff_headers,
    )

    found = lab_test_service.definitions_by_name(db, ["Hemoglobin", "Unlisted Test"])
    db.rollback()

    assert set(found) == {"Hemoglobin"}
    assert found["Hemoglobin"].units == "gms%"
    assert lab_test_service.definitions_by_name(db, []) == {}


def test_lab_test_lists(client, staff_headers, patient, make_patient):
    other = make_patient("Sita Devi")
    for owner, tests in ((patient, ["Lipid Profile"]), (other, ["Thyroid Profile"]), (patient, ["HbA1c"])):
        client.post(
            "/api/lab-tests",
            json={"patientId": str(owner.id), "testTypes": tests, "totalCost": 100},
            headers=staff_headers,
        )

    recent = client.get("/api/lab-tests/recent", headers=staff_headers).json()
    assert [t["testTypes"] for t in recent] == [["HbA1c"], ["Thyroid Profile"], ["Lipid Profile"]]

    mine = client.get(f"/api/lab-tests/patient/{patient.id}", headers=staff_headers).json()
    assert [t["testTypes"] for t in mine] == [["HbA1c"], ["Lipid Profile"]]


def test_lab_test_validation_and_missing_records(client, staff_headers, patient):
    unknown_patient = client.post(
        "/api/lab-tests",
        json={"patientId": str(uuid4()), "testTypes": ["ESR"], "totalCost": 80},
        headers=staff_headers,
    )
    no_tests = client.post(
        "/api/lab-tests",
        json={"patientId": str(patient.id), "testTypes": [], "totalCost": 0},
        headers=staff_headers,
    )

    assert unknown_patient.status_code == 404
    assert no_tests.status_code == 422
    assert client.get(f"/api/lab-tests/{uuid4()}", headers=staff_headers).status_code == 404
    assert client.put(f"/api/lab-tests/{uuid4()}", json={}, headers=staff_headers).status_code == 404


def test_lab_test_definitions_catalogue(client, staff_headers, admin_headers):
    cbc = client.post(
        "/api/lab-test-definitions",
        json={"testName": "Complete Blood Count", "category": "Hematology", "price": "300", "units": "cells/uL"},
        headers=staff_headers,
    )
    assert cbc.status_code == 201, cbc.text
    assert cbc.json()["price"] == 300.0

    duplicate = client.post(
        "/api/lab-test-definitions",
        json={"testName": "Complete Blood Count", "price": "250"},
        headers=staff_headers,
    )
    assert duplicate.status_code == 409

    esr = client.post(
        "/api/lab-test-definitions",
        json={"testName": "ESR", "category": "Hematology", "price": "80"},
        headers=staff_headers,
    ).json()
    retired = client.put(
        f"/api/lab-test-definitions/{esr['id']}",
        json={"isActive": False, "price": "90"},
        headers=staff_headers,
    )
    assert retired.status_code == 200
    assert retired.json()["price"] == 90.0

    every = [d["testName"] for d in client.get("/api/lab-test-definitions", headers=staff_headers).json()]
    active = [d["testName"] for d in client.get("/api/lab-test-definitions/active", headers=staff_headers).json()]
    assert every == ["Complete Blood Count", "ESR"]
    assert active == ["Complete Blood Count"]

    staff_delete = client.delete(f"/api/lab-test-definitions/{esr['id']}", headers=staff_headers)
    assert staff_delete.status_code == 403

    admin_delete = client.delete(f"/api/lab-test-definitions/{esr['id']}", headers=admin_headers)
    assert admin_delete.status_code == 200
    missing = client.delete(f"/api/lab-test-definitions/{esr['id']}", headers=admin_headers)
    assert missing.status_code == 404


def _discharge_body(patient, **overrides):
    body = {
        "patientId": str(patient.id),
        "primaryDiagnosis": "Acute appendicitis",
        "treatmentSummary": "Laparoscopic appendectomy, uneventful recovery",
        "medications": "Cefixime 200mg BD x 5 days",
        "followupInstructions": "Review after 7 days",
        "admissionDate": "2025-03-10T09:00:00",
        "dischargeDate": "2025-03-13T11:30:00",
        "attendingPhysician": "Dr. Menon",
    }
    body.update(overrides)
    return body


def test_discharge_summary_create_get_and_pdf(client, staff_headers, patient):
    created = client.post("/api/discharge-summaries", json=_discharge_body(patient), headers=staff_headers)

    assert created.status_code == 201, created.text
    summary = created.json()
    assert summary["patient"]["patientId"] == patient.patient_code
    assert summary["primaryDiagnosis"] == "Acute appendicitis"

    fetched = client.get(f"/api/discharge-summaries/{summary['id']}", headers=staff_headers)
    assert fetched.json()["attendingPhysician"] == "Dr. Menon"

    recent = client.get("/api/discharge-summaries/recent", headers=staff_headers).json()
    assert [s["id"] for s in recent] == [summary["id"]]

    pdf = client.get(f"/api/discharge-summaries/{summary['id']}/pdf", headers=staff_headers)
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


def test_discharge_summary_needs_diagnosis_and_known_patient(client, staff_headers, patient):
    blank = client.post(
        "/api/discharge-summaries", json=_discharge_body(patient, primaryDiagnosis="  "), headers=staff_headers
    )
    stranger = client.post(
        "/api/discharge-summaries",
        json=_discharge_body(patient, patientId=str(uuid4())),
        headers=staff_headers,
    )

    assert blank.status_code == 422
    assert stranger.status_code == 404
    assert client.get(f"/api/discharge-summaries/{uuid4()}", headers=staff_headers).status_code == 404


def test_medical_history_entries(client, staff_headers, patient):
    created = client.post(
        "/api/medical-history",
        json={
            "patientId": str(patient.id),
            "type": "allergy",
            "title": "Penicillin allergy",
            "description": "Rash within an hour of the first dose",
            "severity": "moderate",
        },
        headers=staff_headers,
    )
    assert created.status_code == 201, created.text
    entry = created.json()
    assert entry["type"] == "allergy"
    assert entry["status"] == "active"

    updated = client.put(
        f"/api/medical-history/{entry['id']}",
        json={"status": "resolved", "notes": "Desensitised in 2024"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "resolved"
    assert updated.json()["type"] == "allergy"

    history = client.get(f"/api/medical-history/{patient.id}", headers=staff_headers).json()
    assert [h["title"] for h in history] == ["Penicillin allergy"]

    deleted = client.delete(f"/api/medical-history/{entry['id']}", headers=staff_headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/medical-history/{patient.id}", headers=staff_headers).json() == []
    assert client.delete(f"/api/medical-history/{entry['id']}", headers=staff_headers).status_code == 404


def test_medical_history_rejects_unknown_entry_type(client, staff_headers, patient):
    response = client.post(
        "/api/medical-history",
        json={"patientId": str(patient.id), "type": "rumour", "title": "X", "description": "Y"},
        headers=staff_headers,
    )

    assert response.status_code == 422


def test_consultation_lifecycle(client, staff_headers, patient):
    created = client.post(
        "/api/consultations",
        json={
            "patientId": str(patient.id),
            "doctorName": "Dr. Menon",
            "consultationDate": "2025-03-14T10:00:00",
            "chiefComplaint": "Fever for three days",
            "diagnosis": "Viral fever",
            "prescription": [
                {"medicine": "Paracetamol 500mg", "dosage": "1 tab", "frequency": "TDS", "duration": "3 days"}
            ],
            "consultationType": "follow-up",
        },
        headers=staff_headers,
    )
    assert created.status_code == 201, created.text
    consultation = created.json()
    assert consultation["status"] == "completed"
    assert consultation["consultationType"] == "follow-up"
    assert consultation["prescription"][0]["frequency"] == "TDS"
    assert consultation["patient"]["name"] == patient.name

    updated = client.put(
        f"/api/consultations/{consultation['id']}",
        json={"diagnosis": "Dengue fever", "followUpDate": "2025-03-17T10:00:00"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["diagnosis"] == "Dengue fever"
    assert updated.json()["chiefComplaint"] == "Fever for three days"

    for_patient = client.get(f"/api/consultations/patient/{patient.id}", headers=staff_headers).json()
    recent = client.get("/api/consultations/recent", headers=staff_headers).json()
    assert [c["id"] for c in for_patient] == [consultation["id"]]
    assert [c["id"] for c in recent] == [consultation["id"]]

    assert client.delete(f"/api/consultations/{consultation['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/api/consultations/{consultation['id']}", headers=staff_headers).status_code == 404


def test_case_sheet_numbers_are_derived_from_the_patient(client, staff_headers, patient, make_patient):
    prefix = f"SCS{patient.id.hex[-4:].upper()}"
    body = {
        "patientId": str(patient.id),
        "patientName": patient.name,
        "diagnosis": "Inguinal hernia",
        "natureOfOperation": "Hernioplasty",
        "dateOfAdmission": "2025-03-10T08:00:00",
        "investigations": {"hb": "12.8", "bloodGrouping": "O", "rhFactor": "+ve"},
        "examination": {"pulse": "78/min", "bloodPressure": "124/80"},
    }

    first = client.post("/api/surgical-case-sheets", json=body, headers=staff_headers)
    second = client.post("/api/surgical-case-sheets", json=body, headers=staff_headers)

    assert first.status_code == 201, first.text
    assert first.json()["caseNumber"] == f"{prefix}-001"
    assert second.json()["caseNumber"] == f"{prefix}-002"
    assert first.json()["investigations"]["rhFactor"] == "+ve"
    assert first.json()["examination"]["bloodPressure"] == "124/80"

    other = make_patient("Sita Devi")
    elsewhere = client.post(
        "/api/surgical-case-sheets",
        json={"patientId": str(other.id), "patientName": other.name},
        headers=staff_headers,
    )
    assert elsewhere.json()["caseNumber"].startswith(f"SCS{other.id.hex[-4:].upper()}-")


def test_case_sheet_update_lists_and_pdf(client, staff_headers, patient):
    sheet = client.post(
        "/api/surgical-case-sheets",
        json={"patientId": str(patient.id), "patientName": patient.name, "diagnosis": "Cholelithiasis"},
        headers=staff_headers,
    ).json()

    updated = client.put(
        f"/api/surgical-case-sheets/{sheet['id']}",
        json={"natureOfOperation": "Laparoscopic cholecystectomy", "dateOfOperation": "2025-03-12T07:30:00"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["caseNumber"] == sheet["caseNumber"]
    assert updated.json()["diagnosis"] == "Cholelithiasis"
    assert updated.json()["natureOfOperation"] == "Laparoscopic cholecystectomy"

    listed = client.get("/api/surgical-case-sheets", headers=staff_headers).json()
    for_patient = client.get(f"/api/surgical-case-sheets/patient/{patient.id}", headers=staff_headers).json()
    assert [s["id"] for s in listed] == [sheet["id"]]
    assert [s["id"] for s in for_patient] == [sheet["id"]]

    pdf = client.get(f"/api/surgical-case-sheets/{sheet['id']}/pdf", headers=staff_headers)
    assert pdf.status_code == 200
    assert sheet["caseNumber"] in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")


def test_case_sheet_for_unknown_patient_is_404(client, staff_headers):
    response = client.post(
        "/api/surgical-case-sheets",
        json={"patientId": str(uuid4()), "patientName": "Nobody"},
        headers=staff_headers,
    )

    assert response.status_code == 404
    assert client.get(f"/api/surgical-case-sheets/{uuid4()}", headers=staff_headers).status_code == 404
