# app/services/settings_service.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.hospital_settings import HOSPITAL_SETTINGS_ID, HospitalSettings
from app.schemas.dashboard import HospitalSettingsUpdate


def get_hospital_settings(db: Session) -> HospitalSettings:
    """
    Return the letterhead row, creating it from configuration on first use.
    """
    row = db.get(HospitalSettings, HOSPITAL_SETTINGS_ID)
    if row is not None:
        return row

    settings = get_settings()
    row = HospitalSettings(
        id=HOSPITAL_SETTINGS_ID,
        hospital_name=settings.hospital_name,
        email=settings.hospital_email,
    )
    try:
        db.add(row)
        db.commit()
    except IntegrityError:
        # Created by a concurrent request.
        db.rollback()
        return db.get(HospitalSettings, HOSPITAL_SETTINGS_ID)
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def update_hospital_settings(db: Session, *, payload: HospitalSettingsUpdate) -> HospitalSettings:
    row = get_hospital_settings(db)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if field == "hospital_name" and not value:
            continue
        setattr(row, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row
