# app/utils/id_generators.py
"""
Human-readable business identifiers.

Formats:
- Patient code:  HMS-{year}-{seq:03d}       e.g. HMS-2025-001
- Bill number:   PH-{year}-{seq:03d}        e.g. PH-2025-001
- MRU number:    MRU-{year}-{seq:03d}       e.g. MRU-2025-001
- Case number:   SCS{XXXX}-{seq:03d}        XXXX = last 4 hex chars of the patient id

Sequences come from the `identifier_counters` table, one row per prefix. The
increment is a single `UPDATE ... SET value = value + 1` executed inside the
caller's transaction, so the counter row stays locked until the caller commits
or rolls back. Two concurrent creations therefore cannot read the same value,
and a rolled-back creation gives its number back.

Every identifier column is also UNIQUE. `with_identifier_retry` uses
that as a backstop: on a collision it draws a fresh identifier and retries once.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, TypeVar
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute, Session

from app.core.errors import IdentifierConflictError
from app.models.identifier_counter import IdentifierCounter
from app.models.patient import Patient
from app.models.patient_registration import PatientRegistration
from app.models.prescription import Prescription
from app.models.surgical_case_sheet import SurgicalCaseSheet
from app.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEQUENCE_WIDTH = 3


def _max_existing_sequence(db: Session, column: InstrumentedAttribute, prefix: str) -> int:
    """
    Highest sequence already used for `prefix` in the target table.

    Used once per prefix to seed a missing counter row, so identifiers created
    before the counter existed (imports, older deployments) are never reissued.
    """
    existing_codes = db.execute(select(column).where(column.like(f"{prefix}%"))).scalars().all()

    max_seq = 0
    for code in existing_codes:
        if code and code.startswith(prefix):
            try:
                max_seq = max(max_seq, int(code[len(prefix) :]))
            except ValueError:
                continue
    return max_seq


def next_sequence(db: Session, key: str, *, column: InstrumentedAttribute, prefix: str) -> int:
    """
    Reserve and return the next sequence number for `key`.

    Must be called inside the transaction that inserts the row carrying the
    identifier. Does not commit.
    """
    bump = (
        update(IdentifierCounter)
        .where(IdentifierCounter.key == key)
        .values(value=IdentifierCounter.value + 1)
        .execution_options(synchronize_session=False)
    )

    if db.execute(bump).rowcount == 0:
        seed = _max_existing_sequence(db, column, prefix)
        try:
            with db.begin_nested():
                db.add(IdentifierCounter(key=key, value=seed + 1))
            return seed + 1
        except IntegrityError:
            # Another transaction created the row first; its insert is now visible.
            logger.info("Identifier counter %s created concurrently; incrementing instead", key)
            db.execute(bump)

    return db.execute(select(IdentifierCounter.value).where(IdentifierCounter.key == key)).scalar_one()


def peek_next_sequence(db: Session, key: str, *, column: InstrumentedAttribute, prefix: str) -> int:
    """
    Next sequence number for `key` without reserving it. Advisory only.
    """
    current = db.execute(select(IdentifierCounter.value).where(IdentifierCounter.key == key)).scalar_one_or_none()
    if current is None:
        current = _max_existing_sequence(db, column, prefix)
    return current + 1


def _format(prefix: str, seq: int) -> str:
    return f"{prefix}{seq:0{SEQUENCE_WIDTH}d}"


def _year(now: datetime | None) -> int:
    return (now or utc_now()).year


def generate_patient_code(db: Session, *, now: datetime | None = None) -> str:
    key = f"HMS-{_year(now)}"
    prefix = f"{key}-"
    return _format(prefix, next_sequence(db, key, column=Patient.patient_code, prefix=prefix))


def generate_bill_number(db: Session, *, now: datetime | None = None) -> str:
    """
    Generate the next pharmacy bill number: PH-{year}-{seq}.

    The sequence restarts at 001 every calendar year and is shared by all patients.
    """
    key = f"PH-{_year(now)}"
    prefix = f"{key}-"
    return _format(prefix, next_sequence(db, key, column=Prescription.bill_number, prefix=prefix))


def _mru_key(now: datetime | None) -> tuple[str, str]:
    key = f"MRU-{_year(now)}"
    return key, f"{key}-"


def generate_mru_number(db: Session, *, now: datetime | None = None) -> str:
    key, prefix = _mru_key(now)
    return _format(prefix, next_sequence(db, key, column=PatientRegistration.mru_number, prefix=prefix))


def peek_mru_number(db: Session, *, now: datetime | None = None) -> str:
    key, prefix = _mru_key(now)
    return _format(prefix, peek_next_sequence(db, key, column=PatientRegistration.mru_number, prefix=prefix))


def case_number_prefix(patient_id: UUID) -> str:
    return f"SCS{patient_id.hex[-4:].upper()}"


def generate_case_number(db: Session, *, patient_id: UUID) -> str:
    """
    Generate a surgical case number scoped to the owning patient:
    SCS{last 4 hex of patient id}-{seq}.

    The counter is keyed by the printed prefix, so two patients whose ids end
    in the same 4 hex characters share one sequence and still never collide.
    """
    key = case_number_prefix(patient_id)
    prefix = f"{key}-"
    return _format(prefix, next_sequence(db, key, column=SurgicalCaseSheet.case_number, prefix=prefix))


def with_identifier_retry(
    db: Session,
    *,
    generate: Callable[[], str],
    build: Callable[[str], T],
    column: InstrumentedAttribute,
) -> T:
    """
    Insert the object produced by `build(identifier)` inside a SAVEPOINT.

    If the insert violates the identifier's UNIQUE constraint, a new identifier
    is generated and the insert is retried once. A second collision raises
    IdentifierConflictError. Integrity errors unrelated to the identifier are
    re-raised untouched.

    Does not commit.
    """
    for attempt in (1, 2):
        identifier = generate()
        try:
            with db.begin_nested():
                obj = build(identifier)
                db.add(obj)
            return obj
        except IntegrityError:
            taken = db.execute(select(column).where(column == identifier)).first() is not None
            if not taken:
                raise
            if attempt == 2:
                logger.error("Identifier %s collided again after retry", identifier)
                raise IdentifierConflictError(
                    f"Could not allocate a unique identifier (last tried {identifier})"
                ) from None
            logger.warning("Identifier %s already in use; regenerating", identifier)

    raise AssertionError("unreachable")
