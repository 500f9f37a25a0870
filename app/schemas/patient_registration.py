from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import CamelModel, NameStr, empty_str_to_none
from app.schemas.patient import normalize_phone

AgeUnit = Literal["years", "months", "days"]

_OPTIONAL_TEXT = (
    "salutation",
    "email",
    "address",
    "blood_group",
    "emergency_contact_name",
    "emergency_contact",
    "referring_doctor",
)


class RegistrationBase(CamelModel):
    salutation: str | None = Field(default=None, max_length=20)
    full_name: NameStr
    age: int = Field(ge=0, le=150)
    age_unit: AgeUnit = "years"
    gender: str = Field(min_length=1, max_length=20)
    contact_phone: str = Field(min_length=1, max_length=50)
    email: EmailStr | None = None
    address: str | None = None
    blood_group: str | None = Field(default=None, max_length=10)
    emergency_contact_name: str | None = None
    emergency_contact: str | None = None
    referring_doctor: str | None = None

    @field_validator(*_OPTIONAL_TEXT, mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("contact_phone")
    @classmethod
    def clean_phone(cls, v: str) -> str:
        return normalize_phone(v)


class RegistrationCreate(RegistrationBase):
    """The MRU number is always generated server-side."""


class RegistrationUpdate(CamelModel):
    salutation: str | None = Field(default=None, max_length=20)
    full_name: NameStr | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    age_unit: AgeUnit | None = None
    gender: str | None = Field(default=None, min_length=1, max_length=20)
    contact_phone: str | None = Field(default=None, min_length=1, max_length=50)
    email: EmailStr | None = None
    address: str | None = None
    blood_group: str | None = Field(default=None, max_length=10)
    emergency_contact_name: str | None = None
    emergency_contact: str | None = None
    referring_doctor: str | None = None


class RegistrationResponse(RegistrationBase):
    id: UUID
    mru_number: str
    email: str | None = None
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class NextMruResponse(CamelModel):
    mru_number: str
