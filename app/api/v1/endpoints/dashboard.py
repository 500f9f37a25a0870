# app/api/v1/endpoints/dashboard.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.dependencies.authz import require_admin
from app.models.user import User
from app.schemas.dashboard import (
    ActivityResponse,
    DashboardStats,
    HistoricalStats,
    HospitalSettingsResponse,
    HospitalSettingsUpdate,
)
from app.services import activity_service, settings_service, stats_service

stats_router = APIRouter()
activities_router = APIRouter()
settings_router = APIRouter()
logger = logging.getLogger(__name__)


@stats_router.get("", response_model=DashboardStats, tags=["stats"])
def dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DashboardStats:
    """
    Today's counters for the dashboard cards. Cached for a short TTL.
    """
    return stats_service.get_dashboard_stats(db)


@stats_router.get("/historical", response_model=HistoricalStats, tags=["stats"])
def historical_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> HistoricalStats:
    return stats_service.get_historical_stats(db)


@activities_router.get("/recent", response_model=list[ActivityResponse], tags=["activities"])
def recent_activities(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ActivityResponse]:
    return [
        ActivityResponse.model_validate(a)
        for a in activity_service.list_recent_activities(db, limit=limit)
    ]


@settings_router.get("", response_model=HospitalSettingsResponse, tags=["hospital-settings"])
def get_hospital_settings(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> HospitalSettingsResponse:
    return HospitalSettingsResponse.model_validate(settings_service.get_hospital_settings(db))


@settings_router.put("", response_model=HospitalSettingsResponse, tags=["hospital-settings"])
def update_hospital_settings(
    payload: HospitalSettingsUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> HospitalSettingsResponse:
    """
    Letterhead used on printed bills, discharge summaries and case sheets.
    """
    row = settings_service.update_hospital_settings(db, payload=payload)
    logger.info("Hospital settings updated by %s", current_user.username)
    return HospitalSettingsResponse.model_validate(row)
