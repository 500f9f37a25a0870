# app/services/medical_history_service.py
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.models.medical_history import MedicalHistory
from app.schemas.clinical import MedicalHistoryCreate, MedicalHistoryUpdate
from app.services.patient_service import get_patient


class MedicalHistoryNotFoundError(NotFoundError):
    entity = "Medical history entry"


def list_history_for_patient(db: Session, patient_id: UUID) -> list[MedicalHistory]:
    return (
        db.query(MedicalHistory)
        .filter(MedicalHistory.patient_id == patient_id)
        .order_by(MedicalHistory.created_at.desc())
        .all()
    )


def get_history_entry(db: Session, entry_id: UUID) -> MedicalHistory:
    entry = db.query(MedicalHistory).filter(MedicalHistory.id == entry_id).first()
    if not entry:
        raise MedicalHistoryNotFoundError()
    return entry


def create_history_entry(db: Session, *, payload: MedicalHistoryCreate, created_by_id: UUID) -> MedicalHistory:
    get_patient(db, payload.patient_id)

    entry = MedicalHistory(**payload.model_dump(), created_by=created_by_id)
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(entry)
    return entry


def update_history_entry(db: Session, entry_id: UUID, *, payload: MedicalHistoryUpdate) -> MedicalHistory:
    entry = get_history_entry(db, entry_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(entry, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(entry)
    return entry


def delete_history_entry(db: Session, entry_id: UUID) -> None:
    entry = get_history_entry(db, entry_id)
    try:
        db.delete(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
