# app/services/activity_service.py
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.activity import Activity

logger = logging.getLogger(__name__)


def record_activity(
    db: Session,
    *,
    type: str,
    title: str,
    description: str,
    entity_id: UUID | None = None,
    entity_type: str | None = None,
    user_id: UUID | None = None,
) -> None:
    """
    Append an entry to the dashboard activity feed.

    Best effort: runs after the business write has committed, and a failure
    here is logged and rolled back without affecting the caller.
    """
    try:
        db.add(
            Activity(
                type=type,
                title=title,
                description=description,
                entity_id=entity_id,
                entity_type=entity_type,
                user_id=user_id,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Failed to record activity %s for %s (non-critical): %s", type, entity_id, e)


def list_recent_activities(db: Session, *, limit: int = 10) -> list[Activity]:
    return db.query(Activity).order_by(Activity.created_at.desc()).limit(limit).all()
