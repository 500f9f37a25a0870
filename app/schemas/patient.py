# app/schemas/patient.py
import re
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, NameStr, empty_str_to_none


def normalize_phone(phone: str) -> str:
    """Normalize phone number: remove spaces, dashes, parentheses, keep + and digits."""
    if not phone:
        return ""
    return re.sub(r"[\s\-\(\)]", "", phone)


class PatientCreate(CamelModel):
    """Lab / pharmacy registration. The patient code is generated server-side."""

    name: NameStr
    age: int = Field(ge=0, le=150)
    gender: str = Field(min_length=1, max_length=20)
    contact: Optional[str] = None

    @field_validator("contact", mode="before")
    @classmethod
    def clean_contact(cls, v):
        v = empty_str_to_none(v)
        return normalize_phone(v) if isinstance(v, str) else v


class PatientResponse(CamelModel):
    id: UUID
    patient_id: str = Field(validation_alias="patient_code")
    name: str
    age: int
    gender: str
    contact: Optional[str] = None
    created_at: datetime


class PatientProfileUpsert(CamelModel):
    """
    Create-or-update body for the extended profile. Omitted fields are left
    unchanged on update.
    """

    patient_id: UUID
    date_of_birth: Optional[datetime] = None
    blood_type: Optional[str] = Field(default=None, max_length=10)
    # Numeric(5, 2) columns
    height: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    weight: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relation: Optional[str] = None
    address: Optional[str] = None
    insurance: Optional[str] = None
    primary_physician: Optional[str] = None
    known_allergies: Optional[list[str]] = None
    current_medications: Optional[list[str]] = None
    chronic_conditions: Optional[list[str]] = None


class PatientProfileResponse(CamelModel):
    id: UUID
    patient_id: UUID
    date_of_birth: Optional[datetime] = None
    blood_type: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    emergency_contact_relation: Optional[str] = None
    address: Optional[str] = None
    insurance: Optional[str] = None
    primary_physician: Optional[str] = None
    known_allergies: Optional[list[str]] = None
    current_medications: Optional[list[str]] = None
    chronic_conditions: Optional[list[str]] = None
    created_at: datetime
    updated_at: datetime
