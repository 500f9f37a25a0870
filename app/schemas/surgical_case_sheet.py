from __future__ import annotations

from datetime import datetime
from uuid import UUID

from app.schemas.common import CamelModel, NameStr
from app.schemas.patient import PatientResponse


class Investigations(CamelModel):
    hb: str | None = None
    bsa: str | None = None
    ct: str | None = None
    bt: str | None = None
    blood_grouping: str | None = None
    rh_factor: str | None = None
    prl: str | None = None
    rbs: str | None = None
    urine_sugar: str | None = None
    xray: str | None = None
    ecg: str | None = None
    blood_urea: str | None = None
    serum_creatinine: str | None = None
    serum_bilirubin: str | None = None
    hbsag: str | None = None


class OnExamination(CamelModel):
    general_condition: str | None = None
    temperature: str | None = None
    pulse: str | None = None
    blood_pressure: str | None = None
    respiratory_rate: str | None = None
    heart: str | None = None
    lungs: str | None = None
    abdomen: str | None = None
    cns: str | None = None


class CaseSheetFields(CamelModel):
    husband_father_name: str | None = None
    religion: str | None = None
    nationality: str | None = None
    address: str | None = None
    village: str | None = None
    district: str | None = None
    age: str | None = None
    sex: str | None = None
    diagnosis: str | None = None
    nature_of_operation: str | None = None
    date_of_admission: datetime | None = None
    date_of_operation: datetime | None = None
    date_of_discharge: datetime | None = None
    complaints_and_duration: str | None = None
    history_of_present_illness: str | None = None
    investigations: Investigations | None = None
    examination: OnExamination | None = None
    lp_no: str | None = None
    edd: datetime | None = None


class CaseSheetCreate(CaseSheetFields):
    """The case number is always generated server-side."""

    patient_id: UUID
    patient_name: NameStr


class CaseSheetUpdate(CaseSheetFields):
    patient_name: NameStr | None = None


class CaseSheetResponse(CaseSheetCreate):
    id: UUID
    case_number: str
    created_by: UUID
    created_at: datetime
    updated_at: datetime
    patient: PatientResponse | None = None
