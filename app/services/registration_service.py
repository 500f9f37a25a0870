# app/services/registration_service.py
import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import IdentifierConflictError, NotFoundError
from app.models.patient_registration import PatientRegistration
from app.schemas.patient_registration import RegistrationCreate, RegistrationUpdate
from app.services.activity_service import record_activity
from app.utils.id_generators import generate_mru_number, peek_mru_number, with_identifier_retry
from app.utils.text_search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)


class RegistrationNotFoundError(NotFoundError):
    entity = "Patient registration"


def create_registration(
    db: Session,
    *,
    payload: RegistrationCreate,
    created_by_id: UUID,
) -> PatientRegistration:
    data = payload.model_dump()
    try:
        registration = with_identifier_retry(
            db,
            generate=lambda: generate_mru_number(db),
            build=lambda mru: PatientRegistration(mru_number=mru, created_by=created_by_id, **data),
            column=PatientRegistration.mru_number,
        )
        db.commit()
    except (SQLAlchemyError, IdentifierConflictError):
        db.rollback()
        raise

    db.refresh(registration)
    logger.info("Created registration %s (%s)", registration.mru_number, registration.id)

    record_activity(
        db,
        type="patient_registered",
        title="Patient Registration",
        description=f"{registration.full_name} registered with {registration.mru_number}",
        entity_id=registration.id,
        entity_type="patient_registration",
        user_id=created_by_id,
    )
    invalidate_for(CacheEvent.PATIENT_REGISTERED)
    return registration


def next_mru_number(db: Session) -> str:
    """Preview only; the number is not reserved."""
    return peek_mru_number(db)


def list_registrations(db: Session) -> list[PatientRegistration]:
    return db.query(PatientRegistration).order_by(PatientRegistration.created_at.desc()).all()


def list_recent_registrations(db: Session, *, limit: int = 10) -> list[PatientRegistration]:
    return (
        db.query(PatientRegistration)
        .order_by(PatientRegistration.created_at.desc())
        .limit(limit)
        .all()
    )


def search_registrations(db: Session, query: str, *, limit: int = 20) -> list[PatientRegistration]:
    term = contains_pattern(query)
    return (
        db.query(PatientRegistration)
        .filter(
            or_(
                PatientRegistration.full_name.ilike(term, escape=LIKE_ESCAPE),
                PatientRegistration.mru_number.ilike(term, escape=LIKE_ESCAPE),
                PatientRegistration.contact_phone.ilike(term, escape=LIKE_ESCAPE),
            )
        )
        .order_by(PatientRegistration.created_at.desc())
        .limit(limit)
        .all()
    )


def get_registration(db: Session, registration_id: UUID) -> PatientRegistration:
    registration = db.query(PatientRegistration).filter(PatientRegistration.id == registration_id).first()
    if not registration:
        raise RegistrationNotFoundError()
    return registration


def update_registration(
    db: Session,
    registration_id: UUID,
    *,
    payload: RegistrationUpdate,
) -> PatientRegistration:
    """The MRU number is immutable; every other field present in the payload is applied."""
    registration = get_registration(db, registration_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(registration, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(registration)
    return registration
