# app/services/patient_service.py
import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import IdentifierConflictError, PatientNotFoundError
from app.models.patient import Patient, PatientProfile
from app.schemas.patient import PatientCreate, PatientProfileUpsert
from app.services.activity_service import record_activity
from app.utils.id_generators import generate_patient_code, with_identifier_retry
from app.utils.text_search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


def create_patient(db: Session, *, payload: PatientCreate, created_by_id: UUID) -> Patient:
    """
    Register a lab / pharmacy patient. The HMS code is generated inside the
    insert transaction.
    """
    try:
        patient = with_identifier_retry(
            db,
            generate=lambda: generate_patient_code(db),
            build=lambda code: Patient(
                patient_code=code,
                name=payload.name,
                age=payload.age,
                gender=payload.gender,
                contact=payload.contact,
            ),
            column=Patient.patient_code,
        )
        db.commit()
    except (SQLAlchemyError, IdentifierConflictError):
        db.rollback()
        raise

    db.refresh(patient)
    logger.info("Registered patient %s (%s)", patient.patient_code, patient.id)

    record_activity(
        db,
        type="patient_registered",
        title="New Patient Registered",
        description=f"{patient.name} ({patient.patient_code}) registered",
        entity_id=patient.id,
        entity_type="patient",
        user_id=created_by_id,
    )
    invalidate_for(CacheEvent.PATIENT_REGISTERED)
    return patient


def list_patients(db: Session) -> list[Patient]:
    return db.query(Patient).order_by(Patient.created_at.desc()).all()


def search_patients(db: Session, query: str, *, limit: int = 20) -> list[Patient]:
    """Case-insensitive match on name, patient code or contact number."""
    term = contains_pattern(query)
    return (
        db.query(Patient)
        .filter(
            or_(
                Patient.name.ilike(term, escape=LIKE_ESCAPE),
                Patient.patient_code.ilike(term, escape=LIKE_ESCAPE),
                Patient.contact.ilike(term, escape=LIKE_ESCAPE),
            )
        )
        .order_by(Patient.created_at.desc())
        .limit(limit)
        .all()
    )


def get_patient(db: Session, patient_id: UUID) -> Patient:
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise PatientNotFoundError()
    return patient


def get_profile(db: Session, patient_id: UUID) -> PatientProfile | None:
    return db.query(PatientProfile).filter(PatientProfile.patient_id == patient_id).first()


def upsert_profile(db: Session, *, payload: PatientProfileUpsert) -> PatientProfile:
    """
    Create the extended profile, or update the fields present in the payload
    if one already exists.
    """
    get_patient(db, payload.patient_id)

    profile = get_profile(db, payload.patient_id)
    if profile is None:
        profile = PatientProfile(patient_id=payload.patient_id)
        db.add(profile)

    for field in payload.model_fields_set - {"patient_id"}:
        setattr(profile, field, getattr(payload, field))

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(profile)
    return profile
