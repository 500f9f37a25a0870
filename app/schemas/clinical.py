"""
Discharge summaries, medical history entries and consultations.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.consultation import ConsultationStatus, ConsultationType
from app.models.medical_history import HistoryEntryType, HistoryStatus
from app.schemas.common import CamelModel, NameStr, RequiredText
from app.schemas.patient import PatientResponse


# ---------- Discharge summaries ----------


class DischargeSummaryCreate(CamelModel):
    patient_id: UUID
    primary_diagnosis: RequiredText
    secondary_diagnosis: str | None = None
    treatment_summary: RequiredText
    medications: str | None = None
    followup_instructions: str | None = None
    admission_date: datetime | None = None
    discharge_date: datetime
    attending_physician: NameStr


class DischargeSummaryResponse(DischargeSummaryCreate):
    id: UUID
    created_by: UUID
    created_at: datetime
    patient: PatientResponse | None = None


# ---------- Medical history ----------


class MedicalHistoryCreate(CamelModel):
    patient_id: UUID
    entry_type: HistoryEntryType = Field(alias="type")
    title: NameStr
    description: RequiredText
    category: str | None = Field(default=None, max_length=50)
    severity: str | None = Field(default=None, max_length=20)
    status: HistoryStatus = HistoryStatus.ACTIVE
    start_date: datetime | None = None
    end_date: datetime | None = None
    provider_name: str | None = None
    notes: str | None = None


class MedicalHistoryUpdate(CamelModel):
    entry_type: HistoryEntryType | None = Field(default=None, alias="type")
    title: NameStr | None = None
    description: RequiredText | None = None
    category: str | None = Field(default=None, max_length=50)
    severity: str | None = Field(default=None, max_length=20)
    status: HistoryStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    provider_name: str | None = None
    notes: str | None = None


class MedicalHistoryResponse(MedicalHistoryCreate):
    id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime


# ---------- Consultations ----------


class PrescribedMedicine(CamelModel):
    """A line of advice on the consultation card. Not tied to pharmacy stock."""

    medicine: str
    dosage: str | None = None
    frequency: str | None = None
    duration: str | None = None
    instructions: str | None = None


class ConsultationCreate(CamelModel):
    patient_id: UUID
    doctor_name: NameStr
    consultation_date: datetime
    chief_complaint: RequiredText
    present_illness_history: str | None = None
    past_medical_history: str | None = None
    examination: str | None = None
    diagnosis: RequiredText
    treatment: str | None = None
    prescription: list[PrescribedMedicine] | None = None
    follow_up_date: datetime | None = None
    notes: str | None = None
    consultation_type: ConsultationType = ConsultationType.GENERAL
    status: ConsultationStatus = ConsultationStatus.COMPLETED


class ConsultationUpdate(CamelModel):
    doctor_name: NameStr | None = None
    consultation_date: datetime | None = None
    chief_complaint: RequiredText | None = None
    present_illness_history: str | None = None
    past_medical_history: str | None = None
    examination: str | None = None
    diagnosis: RequiredText | None = None
    treatment: str | None = None
    prescription: list[PrescribedMedicine] | None = None
    follow_up_date: datetime | None = None
    notes: str | None = None
    consultation_type: ConsultationType | None = None
    status: ConsultationStatus | None = None


class ConsultationResponse(ConsultationCreate):
    id: UUID
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    patient: PatientResponse | None = None
