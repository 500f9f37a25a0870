# schemas/medicine.py
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import Field, StringConstraints, field_validator, model_validator

from app.schemas.common import INT32_MAX, CamelModel, MoneyAmount, empty_str_to_none

MedicineNameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=255),
]

BatchStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=100),
]

OptStr255 = (
    Annotated[
        str,
        StringConstraints(strip_whitespace=True, max_length=255),
    ]
    | None
)

OptStr50 = (
    Annotated[
        str,
        StringConstraints(strip_whitespace=True, max_length=50),
    ]
    | None
)


class MedicineBase(CamelModel):
    """
    Shared fields for create/response.

    - Optional strings accept None and are limited in length when present.
    - Empty strings from UI are normalized to None.
    """

    medicine_name: MedicineNameStr
    batch_number: BatchStr
    quantity: int = Field(default=0, ge=0, le=INT32_MAX)
    units: str = Field(default="tablets", min_length=1, max_length=50)
    mrp: MoneyAmount

    manufacture_date: date | None = None
    expiry_date: date
    manufacturer: OptStr255 = None
    category: str = Field(default="tablets", min_length=1, max_length=50)
    description: str | None = None
    is_active: bool = True

    @field_validator("manufacturer", "description", "manufacture_date", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: Any) -> Any:
        return empty_str_to_none(v)


class MedicineCreate(MedicineBase):
    @model_validator(mode="after")
    def validate_dates(self) -> "MedicineCreate":
        if self.manufacture_date and self.manufacture_date > self.expiry_date:
            raise ValueError("Manufacture date must be on or before expiry date")
        return self


class MedicineUpdate(CamelModel):
    """
    All fields optional. `quantity` here sets the on-hand count outright
    (stock correction); dispensing never goes through this path.
    """

    medicine_name: MedicineNameStr | None = None
    batch_number: BatchStr | None = None
    quantity: int | None = Field(default=None, ge=0, le=INT32_MAX)
    units: OptStr50 = None
    mrp: MoneyAmount | None = None
    manufacture_date: date | None = None
    expiry_date: date | None = None
    manufacturer: OptStr255 = None
    category: OptStr50 = None
    description: str | None = None
    is_active: bool | None = None


class MedicineResponse(MedicineBase):
    id: UUID
    created_by: UUID | None = None
    created_at: datetime
    updated_at: datetime


class MedicineReturnRequest(CamelModel):
    medicine_id: UUID
    quantity_returned: int = Field(gt=0, le=INT32_MAX)
    notes: str | None = None


class MedicineReturnResponse(CamelModel):
    message: str
    medicine: MedicineResponse
    quantity_added: int
    new_quantity: int


class ImportRowError(CamelModel):
    row: int
    field: str
    message: str


class MedicineImportResult(CamelModel):
    total_rows: int
    imported: int = 0
    duplicates: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
