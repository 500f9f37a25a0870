# app/core/errors.py
"""
Typed errors raised by the service layer.

Endpoints translate these into HTTP responses; services never raise
HTTPException themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


class NotFoundError(Exception):
    entity = "Record"

    def __init__(self, message: str | None = None):
        super().__init__(message or f"{self.entity} not found")


class PatientNotFoundError(NotFoundError):
    entity = "Patient"


class MedicineNotFoundError(NotFoundError):
    entity = "Medicine"

    def __init__(self, medicine_ids: list[UUID] | None = None):
        self.medicine_ids = medicine_ids or []
        if self.medicine_ids:
            ids = ", ".join(str(m) for m in self.medicine_ids)
            super().__init__(f"Medicine not found: {ids}")
        else:
            super().__init__()


class PrescriptionNotFoundError(NotFoundError):
    entity = "Prescription"


class DuplicateError(Exception):
    pass


class IdentifierConflictError(Exception):
    """A generated business identifier collided twice in a row."""


@dataclass
class StockShortfall:
    medicine_id: UUID
    name: str
    requested_quantity: int
    available_quantity: int


class InsufficientStockError(Exception):
    """
    Raised when one or more prescription lines ask for more than is on hand.

    Always lists every short medicine, never just the first one found.
    """

    def __init__(self, shortfalls: list[StockShortfall]):
        self.shortfalls = shortfalls
        super().__init__(self.message)

    @property
    def message(self) -> str:
        names = ", ".join(s.name for s in self.shortfalls)
        return f"Insufficient stock for the following medicines: {names}"

