# app/services/stats_service.py
"""
Dashboard counters. Both payloads are cached for `cache_ttl_seconds` and
dropped by the invalidation rules whenever a counted record is written.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.cache import CacheKey, cache_get, cache_set
from app.models.discharge_summary import DischargeSummary
from app.models.lab_test import LabTest
from app.models.patient import Patient
from app.models.patient_registration import PatientRegistration
from app.models.prescription import Prescription
from app.models.surgical_case_sheet import SurgicalCaseSheet
from app.schemas.dashboard import DashboardStats, HistoricalStats, PeriodStats
from app.utils.datetime_utils import day_bounds, trailing_window, utc_now


def _count(db: Session, model, start: datetime | None = None, end: datetime | None = None) -> int:
    query = db.query(func.count(model.id))
    if start is not None:
        query = query.filter(model.created_at >= start, model.created_at < end)
    return query.scalar() or 0


def _period(db: Session, start: datetime, end: datetime) -> PeriodStats:
    return PeriodStats(
        patients_registered=_count(db, Patient, start, end) + _count(db, PatientRegistration, start, end),
        lab_tests=_count(db, LabTest, start, end),
        prescriptions=_count(db, Prescription, start, end),
        discharges=_count(db, DischargeSummary, start, end),
        surgical_cases=_count(db, SurgicalCaseSheet, start, end),
    )


def get_dashboard_stats(db: Session, *, now: datetime | None = None) -> DashboardStats:
    cached = cache_get(CacheKey.STATS)
    if cached is not None:
        return DashboardStats.model_validate(cached)

    start, end = day_bounds((now or utc_now()).date())
    stats = DashboardStats(
        total_patients=_count(db, Patient),
        lab_tests_today=_count(db, LabTest, start, end),
        prescriptions_today=_count(db, Prescription, start, end),
        discharges_today=_count(db, DischargeSummary, start, end),
        surgical_cases_today=_count(db, SurgicalCaseSheet, start, end),
    )
    cache_set(CacheKey.STATS, stats.model_dump(mode="json"))
    return stats


def get_historical_stats(db: Session, *, now: datetime | None = None) -> HistoricalStats:
    """
    Aggregates for yesterday, the last 7 days and the last 30 days (today included
    in the two trailing windows).
    """
    cached = cache_get(CacheKey.HISTORICAL_STATS)
    if cached is not None:
        return HistoricalStats.model_validate(cached)

    now = now or utc_now()
    stats = HistoricalStats(
        yesterday=_period(db, *day_bounds(now.date() - timedelta(days=1))),
        last_week=_period(db, *trailing_window(7, now=now)),
        last_month=_period(db, *trailing_window(30, now=now)),
    )
    cache_set(CacheKey.HISTORICAL_STATS, stats.model_dump(mode="json"))
    return stats
