from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

from app.core.database import SessionLocal
from app.models.lab_test import LabTest
from app.models.user import RoleName, User
from app.services import stats_service
from tests.helpers import line, persist


def test_dashboard_counts_todays_work(client, staff_headers, patient, make_medicine):
    medicine = make_medicine("Paracetamol 500mg", 20)
    client.post(
        "/api/prescriptions",
        json={"patientId": str(patient.id), "medicines": [line(medicine, 2)]},
        headers=staff_headers,
    )
    client.post(
        "/api/lab-tests",
        json={"patientId": str(patient.id), "testTypes": ["ESR"], "totalCost": 80},
        headers=staff_headers,
    )
    client.post(
        "/api/surgical-case-sheets",
        json={"patientId": str(patient.id), "patientName": patient.name},
        headers=staff_headers,
    )

    response = client.get("/api/stats", headers=staff_headers)

    assert response.status_code == 200
    assert response.json() == {
        "totalPatients": 1,
        "labTestsToday": 1,
        "prescriptionsToday": 1,
        "dischargesToday": 0,
        "surgicalCasesToday": 1,
    }


def test_historical_stats_windows(db, staff_user, patient):
    now = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)
    for days_ago in (1, 3, 20, 45):
        persist(
            LabTest(
                patient_id=patient.id,
                test_types=["CBC"],
                total_cost=Decimal("100"),
                created_by=staff_user.id,
                created_at=now - timedelta(days=days_ago),
            )
        )

    stats = stats_service.get_historical_stats(db, now=now)
    db.rollback()

    assert stats.yesterday.lab_tests == 1
    assert stats.last_week.lab_tests == 2
    assert stats.last_month.lab_tests == 3
    assert stats.last_month.prescriptions == 0


def test_historical_stats_shape(client, staff_headers):
    response = client.get("/api/stats/historical", headers=staff_headers)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"yesterday", "lastWeek", "lastMonth"}
    assert set(body["lastWeek"]) == {"patientsRegistered", "labTests", "prescriptions", "discharges", "surgicalCases"}


def test_recent_activity_feed(client, staff_headers, staff_user):
    client.post("/api/patients", json={"name": "Asha", "age": 30, "gender": "Female"}, headers=staff_headers)
    client.post("/api/patients", json={"name": "Meena", "age": 25, "gender": "Female"}, headers=staff_headers)

    feed = client.get("/api/activities/recent", params={"limit": 1}, headers=staff_headers)

    assert feed.status_code == 200
    [latest] = feed.json()
    assert latest["type"] == "patient_registered"
    assert "Meena" in latest["description"]
    assert latest["entityType"] == "patient"
    assert latest["userId"] == str(staff_user.id)


def test_activity_limit_is_bounded(client, staff_headers):
    response = client.get("/api/activities/recent", params={"limit": 500}, headers=staff_headers)

    assert response.status_code == 422


def test_hospital_settings_default_then_admin_update(client, staff_headers, admin_headers):
    default = client.get("/api/hospital-settings", headers=staff_headers)
    assert default.status_code == 200
    assert default.json()["hospitalName"] == "Nakshatra Hospital"

    updated = client.put(
        "/api/hospital-settings",
        json={"hospitalSubtitle": "Multi-speciality Hospital", "phone": "0452-2345678"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["hospitalName"] == "Nakshatra Hospital"
    assert updated.json()["hospitalSubtitle"] == "Multi-speciality Hospital"

    again = client.get("/api/hospital-settings", headers=staff_headers).json()
    assert again["phone"] == "0452-2345678"


def test_staff_cannot_change_hospital_settings(client, staff_headers):
    response = client.put("/api/hospital-settings", json={"hospitalName": "Elsewhere"}, headers=staff_headers)

    assert response.status_code == 403


def test_doctor_roster(client, staff_headers, admin_headers, make_user):
    make_user("dr.rao", RoleName.DOCTOR, name="Dr. Rao")

    created = client.post(
        "/api/doctors",
        json={"name": "Dr. Anitha Menon", "specialization": "Obstetrics"},
        headers=admin_headers,
    )
    assert created.status_code == 201, created.text
    assert created.json()["role"] == "doctor"

    roster = client.get("/api/doctors", headers=staff_headers).json()
    assert [d["name"] for d in roster] == ["Dr. Anitha Menon", "Dr. Rao"]

    removed = client.delete(f"/api/doctors/{created.json()['id']}", headers=admin_headers)
    assert removed.status_code == 200
    assert [d["name"] for d in client.get("/api/doctors", headers=staff_headers).json()] == ["Dr. Rao"]


def test_doctor_roster_is_admin_managed(client, staff_headers, admin_headers, staff_user):
    forbidden = client.post("/api/doctors", json={"name": "Dr. Nobody"}, headers=staff_headers)
    not_a_doctor = client.delete(f"/api/doctors/{staff_user.id}", headers=admin_headers)
    missing = client.delete(f"/api/doctors/{uuid4()}", headers=admin_headers)

    assert forbidden.status_code == 403
    assert not_a_doctor.status_code == 404
    assert missing.status_code == 404

    with SessionLocal() as session:
        assert session.get(User, staff_user.id).is_active is True


def test_only_one_doctor_is_on_duty(client, staff_headers, make_user):
    rao = make_user("dr.rao", RoleName.DOCTOR, name="Dr. Rao")
    menon = make_user("dr.menon", RoleName.DOCTOR, name="Dr. Menon")

    nobody = client.get("/api/current-doctor", headers=staff_headers)
    assert nobody.status_code == 200
    assert nobody.json() is None

    first = client.patch(f"/api/doctors/{rao.id}/current", headers=staff_headers)
    assert first.status_code == 200, first.text
    assert first.json()["isCurrent"] is True
    assert client.get("/api/current-doctor", headers=staff_headers).json()["id"] == str(rao.id)

    client.patch(f"/api/doctors/{menon.id}/current", headers=staff_headers)

    on_duty = client.get("/api/current-doctor", headers=staff_headers).json()
    assert on_duty["id"] == str(menon.id)
    flags = {d["name"]: d["isCurrent"] for d in client.get("/api/doctors", headers=staff_headers).json()}
    assert flags == {"Dr. Menon": True, "Dr. Rao": False}


def test_only_active_doctors_can_go_on_duty(client, staff_headers, staff_user, make_user):
    retired = make_user("dr.old", RoleName.DOCTOR, name="Dr. Old", is_active=False)

    assert client.patch(f"/api/doctors/{retired.id}/current", headers=staff_headers).status_code == 404
    assert client.patch(f"/api/doctors/{staff_user.id}/current", headers=staff_headers).status_code == 404
    assert client.patch(f"/api/doctors/{uuid4()}/current", headers=staff_headers).status_code == 404
    assert client.get("/api/current-doctor", headers=staff_headers).json() is None


def test_removed_doctor_is_no_longer_on_duty(client, staff_headers, admin_headers, make_user):
    rao = make_user("dr.rao", RoleName.DOCTOR, name="Dr. Rao")
    client.patch(f"/api/doctors/{rao.id}/current", headers=staff_headers)

    removed = client.delete(f"/api/doctors/{rao.id}", headers=admin_headers)

    assert removed.status_code == 200
    assert client.get("/api/current-doctor", headers=staff_headers).json() is None


def test_hospital_owner_cannot_be_removed(client, staff_headers, admin_headers):
    created = client.post(
        "/api/doctors",
        json={"name": "Dr. Lakshmi Nair", "specialization": "General Surgery", "isOwner": True},
        headers=admin_headers,
    )
    assert created.status_code == 201, created.text
    owner_id = created.json()["id"]
    assert created.json()["isOwner"] is True

    refused = client.delete(f"/api/doctors/{owner_id}", headers=admin_headers)

    assert refused.status_code == 400
    assert refused.json()["detail"] == "Cannot delete hospital owner"
    assert [d["id"] for d in client.get("/api/doctors", headers=staff_headers).json()] == [owner_id]

    cleared = client.patch(f"/api/doctors/{owner_id}/owner", json={"isOwner": False}, headers=admin_headers)
    assert cleared.status_code == 200
    assert cleared.json()["isOwner"] is False

    assert client.delete(f"/api/doctors/{owner_id}", headers=admin_headers).status_code == 200


def test_owner_flag_is_admin_managed(client, staff_headers, admin_headers, make_user):
    rao = make_user("dr.rao", RoleName.DOCTOR, name="Dr. Rao")

    forbidden = client.patch(f"/api/doctors/{rao.id}/owner", json={"isOwner": True}, headers=staff_headers)
    missing = client.patch(f"/api/doctors/{uuid4()}/owner", json={"isOwner": True}, headers=admin_headers)
    granted = client.patch(f"/api/doctors/{rao.id}/owner", json={"isOwner": True}, headers=admin_headers)

    assert forbidden.status_code == 403
    assert missing.status_code == 404
    assert granted.status_code == 200
    with SessionLocal() as session:
        assert session.get(User, rao.id).is_owner is True
