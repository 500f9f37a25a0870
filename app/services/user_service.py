# app/services/user_service.py
import logging
import re
import secrets
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.security import get_password_hash
from app.models.user import RoleName, User
from app.schemas.user import DoctorCreate

logger = logging.getLogger(__name__)


class DoctorNotFoundError(NotFoundError):
    entity = "Doctor"


class OwnerRemovalError(Exception):
    """The hospital owner cannot be taken off the roster."""

    def __init__(self, message: str = "Cannot delete hospital owner") -> None:
        super().__init__(message)


def list_doctors(db: Session) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == RoleName.DOCTOR.value, User.is_active.is_(True))
        .order_by(User.name.asc())
        .all()
    )


def _get_doctor(db: Session, doctor_id: UUID, *, active_only: bool = False) -> User:
    query = db.query(User).filter(User.id == doctor_id, User.role == RoleName.DOCTOR.value)
    if active_only:
        query = query.filter(User.is_active.is_(True))
    doctor = query.first()
    if not doctor:
        raise DoctorNotFoundError()
    return doctor


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def create_doctor(db: Session, payload: DoctorCreate) -> User:
    """
    Add a doctor to the roster shown on consultation and discharge forms.

    Roster entries are not login accounts: the username is generated and the
    password hash is of a random secret nobody is told. Doctors who need to
    sign in register through /auth/register instead.
    """
    slug = re.sub(r"\W+", "_", payload.name.strip().lower()).strip("_")
    doctor = User(
        username=f"doctor_{slug}_{secrets.token_hex(4)}",
        hashed_password=get_password_hash(secrets.token_urlsafe(32)),
        role=RoleName.DOCTOR.value,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        specialization=payload.specialization,
        is_owner=payload.is_owner,
    )
    db.add(doctor)
    _commit(db)
    db.refresh(doctor)
    return doctor


def set_current_doctor(db: Session, doctor_id: UUID) -> User:
    """Mark one active doctor as on duty and clear the flag on everyone else."""
    doctor = _get_doctor(db, doctor_id, active_only=True)

    db.query(User).filter(User.is_current.is_(True), User.id != doctor.id).update(
        {User.is_current: False}, synchronize_session=False
    )
    doctor.is_current = True
    _commit(db)
    db.refresh(doctor)
    logger.info("Doctor %s is now on duty", doctor.id)
    return doctor


def get_current_doctor(db: Session) -> User | None:
    return (
        db.query(User)
        .filter(
            User.role == RoleName.DOCTOR.value,
            User.is_active.is_(True),
            User.is_current.is_(True),
        )
        .first()
    )


def set_owner_status(db: Session, doctor_id: UUID, is_owner: bool) -> User:
    doctor = _get_doctor(db, doctor_id, active_only=True)
    doctor.is_owner = is_owner
    _commit(db)
    db.refresh(doctor)
    return doctor


def deactivate_doctor(db: Session, doctor_id: UUID) -> None:
    doctor = _get_doctor(db, doctor_id)
    if doctor.is_owner:
        raise OwnerRemovalError()

    doctor.is_active = False
    doctor.is_current = False
    _commit(db)
