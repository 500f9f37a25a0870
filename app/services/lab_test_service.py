# app/services/lab_test_service.py
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import DuplicateError, NotFoundError
from app.models.lab_test import LabTest, LabTestDefinition
from app.schemas.lab_test import (
    LabTestCreate,
    LabTestDefinitionCreate,
    LabTestDefinitionUpdate,
    LabTestUpdate,
)
from app.services.patient_service import get_patient

logger = logging.getLogger(__name__)


class LabTestNotFoundError(NotFoundError):
    entity = "Lab test"


class LabTestDefinitionNotFoundError(NotFoundError):
    entity = "Lab test definition"


# ---------- Orders ----------


def create_lab_test(db: Session, *, payload: LabTestCreate, created_by_id: UUID) -> LabTest:
    get_patient(db, payload.patient_id)

    lab_test = LabTest(
        patient_id=payload.patient_id,
        test_types=payload.test_types,
        total_cost=payload.total_cost,
        doctor_notes=payload.doctor_notes,
        created_by=created_by_id,
    )
    try:
        db.add(lab_test)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    invalidate_for(CacheEvent.LAB_TEST_CHANGED)
    return get_lab_test(db, lab_test.id)


def update_lab_test(db: Session, lab_test_id: UUID, *, payload: LabTestUpdate) -> LabTest:
    lab_test = get_lab_test(db, lab_test_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(lab_test, field, value)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    invalidate_for(CacheEvent.LAB_TEST_CHANGED)
    return get_lab_test(db, lab_test_id)


def get_lab_test(db: Session, lab_test_id: UUID) -> LabTest:
    lab_test = (
        db.query(LabTest)
        .options(joinedload(LabTest.patient))
        .filter(LabTest.id == lab_test_id)
        .first()
    )
    if not lab_test:
        raise LabTestNotFoundError()
    return lab_test


def list_recent_lab_tests(db: Session, *, limit: int = 10) -> list[LabTest]:
    return (
        db.query(LabTest)
        .options(joinedload(LabTest.patient))
        .order_by(LabTest.created_at.desc())
        .limit(limit)
        .all()
    )


def list_lab_tests_for_patient(db: Session, patient_id: UUID) -> list[LabTest]:
    return (
        db.query(LabTest)
        .options(joinedload(LabTest.patient))
        .filter(LabTest.patient_id == patient_id)
        .order_by(LabTest.created_at.desc())
        .all()
    )


# ---------- Catalogue ----------


def list_definitions(db: Session, *, active_only: bool = False) -> list[LabTestDefinition]:
    query = db.query(LabTestDefinition)
    if active_only:
        query = query.filter(LabTestDefinition.is_active.is_(True))
    return query.order_by(LabTestDefinition.category.asc(), LabTestDefinition.test_name.asc()).all()


def definitions_by_name(db: Session, names: list[str]) -> dict[str, LabTestDefinition]:
    """Catalogue entries for the given test names, for units and reference ranges on reports."""
    if not names:
        return {}
    rows = db.query(LabTestDefinition).filter(LabTestDefinition.test_name.in_(names)).all()
    return {row.test_name: row for row in rows}


def get_definition(db: Session, definition_id: UUID) -> LabTestDefinition:
    definition = db.query(LabTestDefinition).filter(LabTestDefinition.id == definition_id).first()
    if not definition:
        raise LabTestDefinitionNotFoundError()
    return definition


def create_definition(
    db: Session,
    *,
    payload: LabTestDefinitionCreate,
    created_by_id: UUID | None,
) -> LabTestDefinition:
    definition = LabTestDefinition(**payload.model_dump(), created_by=created_by_id)
    try:
        db.add(definition)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Lab test '{payload.test_name}' already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(definition)
    return definition


def update_definition(
    db: Session,
    definition_id: UUID,
    *,
    payload: LabTestDefinitionUpdate,
) -> LabTestDefinition:
    definition = get_definition(db, definition_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(definition, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Lab test '{payload.test_name}' already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(definition)
    return definition


def delete_definition(db: Session, definition_id: UUID) -> None:
    definition = get_definition(db, definition_id)
    name = definition.test_name
    try:
        db.delete(definition)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Deleted lab test definition %s (%s)", definition_id, name)
