from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.schemas.common import CamelModel


class DashboardStats(CamelModel):
    total_patients: int
    lab_tests_today: int
    prescriptions_today: int
    discharges_today: int
    surgical_cases_today: int


class PeriodStats(CamelModel):
    patients_registered: int
    lab_tests: int
    prescriptions: int
    discharges: int
    surgical_cases: int


class HistoricalStats(CamelModel):
    yesterday: PeriodStats
    last_week: PeriodStats
    last_month: PeriodStats


class ActivityResponse(CamelModel):
    id: UUID
    type: str
    title: str
    description: str
    entity_id: UUID | None = None
    entity_type: str | None = None
    user_id: UUID | None = None
    created_at: datetime


class HospitalSettingsResponse(CamelModel):
    hospital_name: str
    hospital_subtitle: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    accreditation: str | None = None
    updated_at: datetime | None = None


class HospitalSettingsUpdate(CamelModel):
    hospital_name: str | None = Field(default=None, min_length=1, max_length=255)
    hospital_subtitle: str | None = Field(default=None, max_length=255)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None
    accreditation: str | None = Field(default=None, max_length=255)
