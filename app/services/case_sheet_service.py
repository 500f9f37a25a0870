# app/services/case_sheet_service.py
import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import IdentifierConflictError, NotFoundError
from app.models.surgical_case_sheet import SurgicalCaseSheet
from app.schemas.surgical_case_sheet import CaseSheetCreate, CaseSheetUpdate
from app.services.patient_service import get_patient
from app.utils.id_generators import generate_case_number, with_identifier_retry

logger = logging.getLogger(__name__)


class CaseSheetNotFoundError(NotFoundError):
    entity = "Surgical case sheet"


def create_case_sheet(db: Session, *, payload: CaseSheetCreate, created_by_id: UUID) -> SurgicalCaseSheet:
    """
    Create a surgical case sheet. The case number is generated from the
    owning patient's id inside the insert transaction.
    """
    get_patient(db, payload.patient_id)

    data = payload.model_dump()
    try:
        sheet = with_identifier_retry(
            db,
            generate=lambda: generate_case_number(db, patient_id=payload.patient_id),
            build=lambda case_number: SurgicalCaseSheet(case_number=case_number, created_by=created_by_id, **data),
            column=SurgicalCaseSheet.case_number,
        )
        db.commit()
    except (SQLAlchemyError, IdentifierConflictError):
        db.rollback()
        raise

    logger.info("Created surgical case sheet %s for patient %s", sheet.case_number, payload.patient_id)
    invalidate_for(CacheEvent.CASE_SHEET_CREATED)
    return get_case_sheet(db, sheet.id)


def get_case_sheet(db: Session, sheet_id: UUID) -> SurgicalCaseSheet:
    sheet = (
        db.query(SurgicalCaseSheet)
        .options(joinedload(SurgicalCaseSheet.patient))
        .filter(SurgicalCaseSheet.id == sheet_id)
        .first()
    )
    if not sheet:
        raise CaseSheetNotFoundError()
    return sheet


def list_recent_case_sheets(db: Session, *, limit: int = 20) -> list[SurgicalCaseSheet]:
    return (
        db.query(SurgicalCaseSheet)
        .options(joinedload(SurgicalCaseSheet.patient))
        .order_by(SurgicalCaseSheet.created_at.desc())
        .limit(limit)
        .all()
    )


def list_case_sheets_for_patient(db: Session, patient_id: UUID) -> list[SurgicalCaseSheet]:
    return (
        db.query(SurgicalCaseSheet)
        .options(joinedload(SurgicalCaseSheet.patient))
        .filter(SurgicalCaseSheet.patient_id == patient_id)
        .order_by(SurgicalCaseSheet.created_at.desc())
        .all()
    )


def update_case_sheet(db: Session, sheet_id: UUID, *, payload: CaseSheetUpdate) -> SurgicalCaseSheet:
    """The case number and owning patient never change."""
    sheet = get_case_sheet(db, sheet_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(sheet, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return get_case_sheet(db, sheet_id)
