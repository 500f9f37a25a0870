# app/schemas/prescription.py
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import Field, model_validator

from app.schemas.common import INT32_MAX, MONEY_MAX, CamelModel, Money, MoneyAmount
from app.schemas.patient import PatientResponse


class PrescriptionItemCreate(CamelModel):
    medicine_id: UUID
    name: str = Field(min_length=1, max_length=255)
    dosage: str | None = Field(default=None, max_length=100)
    quantity: int = Field(gt=0, le=INT32_MAX)
    price: MoneyAmount
    total: Decimal | None = None  # recomputed as quantity * price


class PrescriptionCreate(CamelModel):
    patient_id: UUID
    medicines: list[PrescriptionItemCreate] = Field(min_length=1)
    # Accepted for compatibility with the billing form; amounts are recomputed.
    subtotal: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None

    @model_validator(mode="after")
    def validate_amounts(self) -> "PrescriptionCreate":
        subtotal = Decimal("0")
        for position, line in enumerate(self.medicines, start=1):
            line_total = line.price * line.quantity
            if line_total > MONEY_MAX:
                raise ValueError(f"Line {position} ({line.name}) total exceeds {MONEY_MAX}")
            subtotal += line_total
        if subtotal > MONEY_MAX:
            raise ValueError(f"Bill total exceeds {MONEY_MAX}")
        return self


class PrescriptionItemResponse(CamelModel):
    id: UUID
    medicine_id: UUID | None = None
    name: str
    dosage: str | None = None
    quantity: int
    price: Money
    total: Money


class PrescriptionResponse(CamelModel):
    id: UUID
    bill_number: str
    patient_id: UUID
    medicines: list[PrescriptionItemResponse] = Field(validation_alias="items")
    subtotal: Money
    tax: Money
    total: Money
    created_by: UUID
    created_at: datetime
    patient: PatientResponse | None = None


class InsufficientStockItem(CamelModel):
    medicine_id: UUID
    name: str
    requested_quantity: int
    available_quantity: int


class InsufficientStockDetail(CamelModel):
    """Body of `detail` in a 409 returned when a bill cannot be filled."""

    code: Literal["INSUFFICIENT_STOCK"] = "INSUFFICIENT_STOCK"
    message: str
    insufficient_stock: list[InsufficientStockItem]


class InsufficientStockResponse(CamelModel):
    detail: InsufficientStockDetail
