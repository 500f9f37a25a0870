# app/services/prescription_service.py
"""
Pharmacy billing.

Creating a prescription is the one write in the system that must keep two
tables consistent: the bill (prescription + line items) and the medicine
inventory. Either both change or neither does.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import (
    IdentifierConflictError,
    InsufficientStockError,
    MedicineNotFoundError,
    PatientNotFoundError,
    PrescriptionNotFoundError,
    StockShortfall,
)
from app.models.medicine import Medicine
from app.models.patient import Patient
from app.models.prescription import Prescription, PrescriptionItem
from app.schemas.prescription import PrescriptionCreate, PrescriptionItemCreate
from app.services.activity_service import record_activity
from app.services.medicine_service import current_quantities, decrement_stock
from app.utils.id_generators import generate_bill_number, with_identifier_retry
from app.utils.text_search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
TAX_RATE = Decimal("0")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _requested_quantities(lines: list[PrescriptionItemCreate]) -> dict[UUID, int]:
    """Total units asked for per medicine; a medicine may appear on several lines."""
    requested: dict[UUID, int] = defaultdict(int)
    for line in lines:
        requested[line.medicine_id] += line.quantity
    return dict(requested)


def _collect_shortfalls(
    requested: dict[UUID, int],
    available: dict[UUID, int],
    names: dict[UUID, str],
) -> list[StockShortfall]:
    return [
        StockShortfall(
            medicine_id=medicine_id,
            name=names[medicine_id],
            requested_quantity=quantity,
            available_quantity=available.get(medicine_id, 0),
        )
        for medicine_id, quantity in requested.items()
        if available.get(medicine_id, 0) < quantity
    ]


def _build_prescription(
    bill_number: str,
    *,
    payload: PrescriptionCreate,
    created_by_id: UUID,
    created_at: datetime | None,
) -> Prescription:
    items = [
        PrescriptionItem(
            medicine_id=line.medicine_id,
            position=position,
            name=line.name,
            dosage=line.dosage,
            quantity=line.quantity,
            price=_money(line.price),
            total=_money(line.price * line.quantity),
        )
        for position, line in enumerate(payload.medicines)
    ]
    subtotal = _money(sum((item.total for item in items), Decimal("0")))
    tax = _money(subtotal * TAX_RATE)

    prescription = Prescription(
        bill_number=bill_number,
        patient_id=payload.patient_id,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        created_by=created_by_id,
        items=items,
    )
    if created_at is not None:
        prescription.created_at = created_at
    return prescription


def create_prescription(
    db: Session,
    *,
    payload: PrescriptionCreate,
    created_by_id: UUID,
    now: datetime | None = None,
) -> Prescription:
    """
    Create a pharmacy bill and take its medicines off the shelf, atomically.

    1. Patient and every referenced medicine must exist.
    2. Stock is checked for every line before anything is written; all short
       medicines are reported together.
    3. In one transaction: bill number from the yearly counter, prescription
       and items inserted, then one conditional decrement per medicine in
       ascending id order.
    4. A decrement that matches no row means another request took the stock
       after step 2. Everything is rolled back, quantities are re-read and the
       shortfall is reported the same way as in step 2.

    Client-side subtotal/tax/total are ignored; amounts come from the lines.
    Resubmitting the same payload creates a second bill.
    """
    patient = db.query(Patient).filter(Patient.id == payload.patient_id).first()
    if not patient:
        raise PatientNotFoundError()

    requested = _requested_quantities(payload.medicines)
    medicines = {m.id: m for m in db.query(Medicine).filter(Medicine.id.in_(list(requested))).all()}

    missing = [medicine_id for medicine_id in requested if medicine_id not in medicines]
    if missing:
        db.rollback()
        raise MedicineNotFoundError(missing)

    names = {medicine_id: m.medicine_name for medicine_id, m in medicines.items()}
    shortfalls = _collect_shortfalls(requested, {mid: m.quantity for mid, m in medicines.items()}, names)
    if shortfalls:
        db.rollback()
        logger.warning(
            "Prescription for patient %s rejected: insufficient stock for %s",
            patient.patient_code,
            ", ".join(s.name for s in shortfalls),
        )
        raise InsufficientStockError(shortfalls)

    try:
        prescription = with_identifier_retry(
            db,
            generate=lambda: generate_bill_number(db, now=now),
            build=lambda bill_number: _build_prescription(
                bill_number,
                payload=payload,
                created_by_id=created_by_id,
                created_at=now,
            ),
            column=Prescription.bill_number,
        )

        failed_id: UUID | None = None
        for medicine_id in sorted(requested):
            if not decrement_stock(db, medicine_id, requested[medicine_id]):
                failed_id = medicine_id
                break

        if failed_id is not None:
            db.rollback()
            available = current_quantities(db, list(requested))
            shortfalls = _collect_shortfalls(requested, available, names) or [
                StockShortfall(
                    medicine_id=failed_id,
                    name=names[failed_id],
                    requested_quantity=requested[failed_id],
                    available_quantity=available.get(failed_id, 0),
                )
            ]
            db.rollback()
            logger.warning(
                "Prescription for patient %s lost a stock race on %s; rolled back",
                patient.patient_code,
                names[failed_id],
            )
            raise InsufficientStockError(shortfalls)

        db.commit()
    except IdentifierConflictError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to create prescription for patient %s", payload.patient_id)
        raise

    prescription_id = prescription.id
    prescription = get_prescription(db, prescription_id)
    logger.info(
        "Created prescription %s for patient %s with %d line(s), total %s",
        prescription.bill_number,
        patient.patient_code,
        len(prescription.items),
        prescription.total,
    )

    record_activity(
        db,
        type="prescription_created",
        title="Prescription Created",
        description=f"Bill {prescription.bill_number} for {patient.name}",
        entity_id=prescription_id,
        entity_type="prescription",
        user_id=created_by_id,
    )
    invalidate_for(CacheEvent.PRESCRIPTION_CREATED)
    return prescription


def _with_details(db: Session):
    return db.query(Prescription).options(
        joinedload(Prescription.patient),
        selectinload(Prescription.items),
    )


def get_prescription(db: Session, prescription_id: UUID) -> Prescription:
    prescription = _with_details(db).filter(Prescription.id == prescription_id).first()
    if not prescription:
        raise PrescriptionNotFoundError()
    return prescription


def list_recent_prescriptions(db: Session, *, limit: int = 10) -> list[Prescription]:
    return _with_details(db).order_by(Prescription.created_at.desc()).limit(limit).all()


def search_by_bill_number(db: Session, bill_number: str) -> list[Prescription]:
    term = contains_pattern(bill_number)
    return (
        _with_details(db)
        .filter(Prescription.bill_number.ilike(term, escape=LIKE_ESCAPE))
        .order_by(Prescription.created_at.desc())
        .all()
    )


def list_prescriptions_for_patient(db: Session, patient_id: UUID) -> list[Prescription]:
    return (
        _with_details(db)
        .filter(Prescription.patient_id == patient_id)
        .order_by(Prescription.created_at.desc())
        .all()
    )
