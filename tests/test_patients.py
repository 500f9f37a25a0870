import re
from datetime import datetime, timezone
from uuid import uuid4

CURRENT_YEAR = datetime.now(timezone.utc).year


def _registration_body(**overrides):
    body = {
        "salutation": "Mrs.",
        "fullName": "Lakshmi Narayanan",
        "age": 54,
        "ageUnit": "years",
        "gender": "Female",
        "contactPhone": "98400-12345",
        "email": "",
        "address": "12 Temple Street, Madurai",
        "bloodGroup": "B+",
        "referringDoctor": "Dr. Menon",
    }
    body.update(overrides)
    return body


def test_create_patient_assigns_a_code_and_cleans_the_phone(client, staff_headers):
    response = client.post(
        "/api/patients",
        json={"name": "  Ravi Kumar ", "age": 42, "gender": "Male", "contact": "(+91) 98480-22338"},
        headers=staff_headers,
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert re.fullmatch(rf"HMS-{CURRENT_YEAR}-\d{{3}}", data["patientId"])
    assert data["name"] == "Ravi Kumar"
    assert data["contact"] == "+919848022338"


def test_blank_contact_is_stored_as_null(client, staff_headers):
    response = client.post(
        "/api/patients",
        json={"name": "Asha", "age": 7, "gender": "Female", "contact": "   "},
        headers=staff_headers,
    )

    assert response.status_code == 201
    assert response.json()["contact"] is None


def test_patient_validation(client, staff_headers):
    too_old = client.post(
        "/api/patients", json={"name": "X", "age": 151, "gender": "Male"}, headers=staff_headers
    )
    no_name = client.post("/api/patients", json={"name": " ", "age": 20, "gender": "Male"}, headers=staff_headers)

    assert too_old.status_code == 422
    assert no_name.status_code == 422


def test_list_search_and_get_patients(client, staff_headers):
    for name, contact in (("Meena Iyer", "9000000001"), ("Arjun Rao", "9000000002")):
        client.post(
            "/api/patients",
            json={"name": name, "age": 30, "gender": "Other", "contact": contact},
            headers=staff_headers,
        )

    everyone = client.get("/api/patients", headers=staff_headers).json()
    assert [p["name"] for p in everyone] == ["Arjun Rao", "Meena Iyer"]

    by_name = client.get("/api/patients/search", params={"q": "meena"}, headers=staff_headers).json()
    assert [p["name"] for p in by_name] == ["Meena Iyer"]

    by_phone = client.get("/api/patients/search", params={"q": "0002"}, headers=staff_headers).json()
    assert [p["name"] for p in by_phone] == ["Arjun Rao"]

    code = everyone[0]["patientId"]
    by_code = client.get("/api/patients/search", params={"q": code}, headers=staff_headers).json()
    assert [p["patientId"] for p in by_code] == [code]

    fetched = client.get(f"/api/patients/{everyone[0]['id']}", headers=staff_headers)
    assert fetched.json()["patientId"] == code


def test_search_wildcards_are_matched_literally(client, staff_headers, make_patient):
    make_patient("Meena Iyer", contact="9000000001")
    make_patient("Arjun_Rao", contact="9000000002")

    def names(q):
        response = client.get("/api/patients/search", params={"q": q}, headers=staff_headers)
        return [p["name"] for p in response.json()]

    assert names("%") == []
    assert names("_") == ["Arjun_Rao"]
    assert names("Meena_Iyer") == []


def test_unknown_patient_is_404(client, staff_headers):
    response = client.get(f"/api/patients/{uuid4()}", headers=staff_headers)

    assert response.status_code == 404


def test_patient_profile_is_null_until_saved_then_updated_in_place(client, staff_headers, patient):
    empty = client.get(f"/api/patient-profile/{patient.id}", headers=staff_headers)
    assert empty.status_code == 200
    assert empty.json() is None

    created = client.post(
        "/api/patient-profile",
        json={
            "patientId": str(patient.id),
            "bloodType": "O+",
            "height": 172.5,
            "knownAllergies": ["Penicillin"],
            "chronicConditions": ["Type 2 diabetes"],
        },
        headers=staff_headers,
    )
    assert created.status_code == 200, created.text

    updated = client.post(
        "/api/patient-profile",
        json={"patientId": str(patient.id), "weight": 80, "knownAllergies": ["Penicillin", "Sulfa"]},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["id"] == created.json()["id"]

    profile = client.get(f"/api/patient-profile/{patient.id}", headers=staff_headers).json()
    assert profile["bloodType"] == "O+"
    assert profile["height"] == 172.5
    assert profile["weight"] == 80.0
    assert profile["knownAllergies"] == ["Penicillin", "Sulfa"]
    assert profile["chronicConditions"] == ["Type 2 diabetes"]


def test_profile_for_unknown_patient_is_404(client, staff_headers):
    assert client.get(f"/api/patient-profile/{uuid4()}", headers=staff_headers).status_code == 404
    response = client.post(
        "/api/patient-profile", json={"patientId": str(uuid4()), "bloodType": "A+"}, headers=staff_headers
    )
    assert response.status_code == 404


def test_registration_gets_the_previewed_mru_number(client, staff_headers, staff_user):
    preview = client.get("/api/patients-registration/next-mru", headers=staff_headers)
    assert preview.json() == {"mruNumber": f"MRU-{CURRENT_YEAR}-001"}

    created = client.post("/api/patients-registration", json=_registration_body(), headers=staff_headers)

    assert created.status_code == 201, created.text
    data = created.json()
    assert data["mruNumber"] == f"MRU-{CURRENT_YEAR}-001"
    assert data["contactPhone"] == "9840012345"
    assert data["email"] is None
    assert data["createdBy"] == str(staff_user.id)

    after = client.get("/api/patients-registration/next-mru", headers=staff_headers)
    assert after.json()["mruNumber"] == f"MRU-{CURRENT_YEAR}-002"


def test_client_cannot_choose_the_mru_number(client, staff_headers):
    created = client.post(
        "/api/patients-registration",
        json=_registration_body(mruNumber="MRU-1999-999"),
        headers=staff_headers,
    )

    assert created.json()["mruNumber"] == f"MRU-{CURRENT_YEAR}-001"


def test_registration_rejects_unknown_age_unit(client, staff_headers):
    response = client.post(
        "/api/patients-registration", json=_registration_body(ageUnit="weeks"), headers=staff_headers
    )

    assert response.status_code == 422


def test_registration_lookup_and_update(client, staff_headers):
    first = client.post("/api/patients-registration", json=_registration_body(), headers=staff_headers).json()
    client.post(
        "/api/patients-registration",
        json=_registration_body(fullName="Baby Priya", age=8, ageUnit="months", contactPhone="9123456780"),
        headers=staff_headers,
    )

    recent = client.get("/api/patients-registration/recent", headers=staff_headers).json()
    assert [r["fullName"] for r in recent] == ["Baby Priya", "Lakshmi Narayanan"]
    assert len(client.get("/api/patients-registration", headers=staff_headers).json()) == 2

    found = client.get("/api/patients-registration/search/priya", headers=staff_headers).json()
    assert [r["ageUnit"] for r in found] == ["months"]
    by_mru = client.get(f"/api/patients-registration/search/{first['mruNumber']}", headers=staff_headers).json()
    assert [r["id"] for r in by_mru] == [first["id"]]

    updated = client.put(
        f"/api/patients-registration/{first['id']}",
        json={"address": "4 Lake View Road, Chennai", "bloodGroup": "AB+"},
        headers=staff_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["address"] == "4 Lake View Road, Chennai"
    assert updated.json()["fullName"] == "Lakshmi Narayanan"
    assert updated.json()["mruNumber"] == first["mruNumber"]

    fetched = client.get(f"/api/patients-registration/{first['id']}", headers=staff_headers)
    assert fetched.json()["bloodGroup"] == "AB+"


def test_unknown_registration_is_404(client, staff_headers):
    missing = uuid4()

    assert client.get(f"/api/patients-registration/{missing}", headers=staff_headers).status_code == 404
    response = client.put(f"/api/patients-registration/{missing}", json={"age": 3}, headers=staff_headers)
    assert response.status_code == 404
