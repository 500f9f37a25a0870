from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from app.models.lab_test import LabTestStatus
from app.schemas.common import CamelModel, Money, MoneyAmount, NameStr
from app.schemas.patient import PatientResponse


class LabTestCreate(CamelModel):
    patient_id: UUID
    test_types: list[str] = Field(min_length=1)
    total_cost: MoneyAmount
    doctor_notes: str | None = None


class LabTestUpdate(CamelModel):
    """Result entry by the lab."""

    results: dict[str, Any] | None = None
    doctor_notes: str | None = None
    status: LabTestStatus | None = None


class LabTestResponse(CamelModel):
    id: UUID
    patient_id: UUID
    test_types: list[str]
    results: dict[str, Any] | None = None
    doctor_notes: str | None = None
    total_cost: Money
    status: LabTestStatus
    created_by: UUID
    created_at: datetime
    patient: PatientResponse | None = None


class LabTestDefinitionCreate(CamelModel):
    test_name: NameStr
    category: str | None = Field(default=None, max_length=100)
    price: MoneyAmount
    normal_range: str | None = Field(default=None, max_length=200)
    units: str | None = Field(default=None, max_length=50)
    description: str | None = None
    is_active: bool = True


class LabTestDefinitionUpdate(CamelModel):
    test_name: NameStr | None = None
    category: str | None = Field(default=None, max_length=100)
    price: MoneyAmount | None = None
    normal_range: str | None = Field(default=None, max_length=200)
    units: str | None = Field(default=None, max_length=50)
    description: str | None = None
    is_active: bool | None = None


class LabTestDefinitionResponse(CamelModel):
    id: UUID
    test_name: str
    category: str | None = None
    price: Money
    normal_range: str | None = None
    units: str | None = None
    description: str | None = None
    is_active: bool
    created_at: datetime
