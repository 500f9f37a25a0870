# app/services/discharge_service.py
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import NotFoundError
from app.models.discharge_summary import DischargeSummary
from app.schemas.clinical import DischargeSummaryCreate
from app.services.patient_service import get_patient


class DischargeSummaryNotFoundError(NotFoundError):
    entity = "Discharge summary"


def create_discharge_summary(
    db: Session,
    *,
    payload: DischargeSummaryCreate,
    created_by_id: UUID,
) -> DischargeSummary:
    get_patient(db, payload.patient_id)

    summary = DischargeSummary(**payload.model_dump(), created_by=created_by_id)
    try:
        db.add(summary)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    invalidate_for(CacheEvent.DISCHARGE_CREATED)
    return get_discharge_summary(db, summary.id)


def get_discharge_summary(db: Session, summary_id: UUID) -> DischargeSummary:
    summary = (
        db.query(DischargeSummary)
        .options(joinedload(DischargeSummary.patient))
        .filter(DischargeSummary.id == summary_id)
        .first()
    )
    if not summary:
        raise DischargeSummaryNotFoundError()
    return summary


def list_recent_discharge_summaries(db: Session, *, limit: int = 10) -> list[DischargeSummary]:
    return (
        db.query(DischargeSummary)
        .options(joinedload(DischargeSummary.patient))
        .order_by(DischargeSummary.created_at.desc())
        .limit(limit)
        .all()
    )
