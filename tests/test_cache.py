import json

from app.core.cache import (
    INVALIDATION_RULES,
    CacheEvent,
    CacheKey,
    cache_get,
    cache_set,
    invalidate_for,
)
from tests.helpers import line


def test_every_event_has_an_invalidation_rule():
    assert set(INVALIDATION_RULES) == set(CacheEvent)


def test_prescription_invalidates_stock_and_stats_keys(fake_redis):
    for key in CacheKey:
        cache_set(key, {"cached": key.value})

    targeted = invalidate_for(CacheEvent.PRESCRIPTION_CREATED)

    assert targeted == {
        CacheKey.RECENT_PRESCRIPTIONS,
        CacheKey.ACTIVE_MEDICINES,
        CacheKey.MEDICINE_LIST,
        CacheKey.STATS,
        CacheKey.HISTORICAL_STATS,
    }
    assert set(fake_redis.store) == {"hms:lab-tests:recent"}
    assert all(key.startswith("hms:") for key in fake_redis.deleted)


def test_values_round_trip_as_json(fake_redis):
    cache_set(CacheKey.STATS, {"totalPatients": 3}, ttl=5)

    assert json.loads(fake_redis.store["hms:stats"]) == {"totalPatients": 3}
    assert cache_get(CacheKey.STATS) == {"totalPatients": 3}


def test_without_redis_everything_misses():
    assert cache_set(CacheKey.STATS, {"totalPatients": 3}) is False
    assert cache_get(CacheKey.STATS) is None
    assert invalidate_for(CacheEvent.MEDICINE_CHANGED) == INVALIDATION_RULES[CacheEvent.MEDICINE_CHANGED]


def test_medicine_list_is_cached_until_inventory_changes(client, staff_headers, fake_redis, make_medicine):
    make_medicine("Amlodipine 5mg", 30)

    first = client.get("/api/medicines/active", headers=staff_headers).json()
    assert "hms:medicines:active" in fake_redis.store

    make_medicine("Bypassed The Api", 10)
    cached = client.get("/api/medicines/active", headers=staff_headers).json()
    assert cached == first

    created = client.post(
        "/api/medicines",
        json={
            "medicineName": "Cetirizine 10mg",
            "batchNumber": "CTZ-1",
            "quantity": 5,
            "mrp": "1.00",
            "expiryDate": "2028-01-01",
        },
        headers=staff_headers,
    )
    assert created.status_code == 201
    assert "hms:medicines:active" not in fake_redis.store

    fresh = client.get("/api/medicines/active", headers=staff_headers).json()
    assert {m["medicineName"] for m in fresh} == {"Amlodipine 5mg", "Bypassed The Api", "Cetirizine 10mg"}


def test_new_prescription_clears_stock_and_stats_caches(client, staff_headers, fake_redis, patient, make_medicine):
    medicine = make_medicine("Paracetamol 500mg", 10)
    client.get("/api/medicines", headers=staff_headers)
    client.get("/api/stats", headers=staff_headers)
    client.get("/api/prescriptions/recent", headers=staff_headers)
    assert {"hms:medicines:all", "hms:stats", "hms:prescriptions:recent"} <= set(fake_redis.store)

    response = client.post(
        "/api/prescriptions",
        json={"patientId": str(patient.id), "medicines": [line(medicine, 3)]},
        headers=staff_headers,
    )

    assert response.status_code == 201
    assert not {"hms:medicines:all", "hms:stats", "hms:prescriptions:recent"} & set(fake_redis.store)
    stock = client.get("/api/medicines", headers=staff_headers).json()
    assert stock[0]["quantity"] == 7
    recent = client.get("/api/prescriptions/recent", headers=staff_headers).json()
    assert [p["billNumber"] for p in recent] == [response.json()["billNumber"]]


def test_failed_prescription_leaves_the_cache_alone(client, staff_headers, fake_redis, patient, make_medicine):
    medicine = make_medicine("Paracetamol 500mg", 1)
    client.get("/api/medicines", headers=staff_headers)

    response = client.post(
        "/api/prescriptions",
        json={"patientId": str(patient.id), "medicines": [line(medicine, 3)]},
        headers=staff_headers,
    )

    assert response.status_code == 409
    assert "hms:medicines:all" in fake_redis.store
