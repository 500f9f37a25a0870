# app/services/consultation_service.py
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import NotFoundError
from app.models.consultation import Consultation
from app.schemas.clinical import ConsultationCreate, ConsultationUpdate
from app.services.patient_service import get_patient


class ConsultationNotFoundError(NotFoundError):
    entity = "Consultation"


def create_consultation(db: Session, *, payload: ConsultationCreate, created_by_id: UUID) -> Consultation:
    get_patient(db, payload.patient_id)

    consultation = Consultation(**payload.model_dump(), created_by=created_by_id)
    try:
        db.add(consultation)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return get_consultation(db, consultation.id)


def get_consultation(db: Session, consultation_id: UUID) -> Consultation:
    consultation = (
        db.query(Consultation)
        .options(joinedload(Consultation.patient))
        .filter(Consultation.id == consultation_id)
        .first()
    )
    if not consultation:
        raise ConsultationNotFoundError()
    return consultation


def list_consultations_for_patient(db: Session, patient_id: UUID) -> list[Consultation]:
    return (
        db.query(Consultation)
        .options(joinedload(Consultation.patient))
        .filter(Consultation.patient_id == patient_id)
        .order_by(Consultation.consultation_date.desc())
        .all()
    )


def list_recent_consultations(db: Session, *, limit: int = 10) -> list[Consultation]:
    return (
        db.query(Consultation)
        .options(joinedload(Consultation.patient))
        .order_by(Consultation.created_at.desc())
        .limit(limit)
        .all()
    )


def update_consultation(db: Session, consultation_id: UUID, *, payload: ConsultationUpdate) -> Consultation:
    consultation = get_consultation(db, consultation_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(consultation, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return get_consultation(db, consultation_id)


def delete_consultation(db: Session, consultation_id: UUID) -> None:
    consultation = get_consultation(db, consultation_id)
    try:
        db.delete(consultation)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
