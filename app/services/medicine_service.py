# app/services/medicine_service.py
"""
Pharmacy inventory.

Stock only moves through two atomic statements:
- `decrement_stock`: conditional UPDATE used when dispensing a prescription
- `return_medicine`: unconditional increment for patient returns

Neither reads the quantity into Python and writes it back, so concurrent
requests cannot lose each other's updates.
"""

from __future__ import annotations

import csv
import logging
from datetime import date, datetime
from io import BytesIO, StringIO
from uuid import UUID
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError
from pydantic.alias_generators import to_camel
from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import CacheEvent, invalidate_for
from app.core.errors import DuplicateError, MedicineNotFoundError
from app.models.medicine import Medicine
from app.schemas.medicine import (
    ImportRowError,
    MedicineCreate,
    MedicineImportResult,
    MedicineUpdate,
)
from app.utils.datetime_utils import utc_now
from app.utils.text_search import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

# Spreadsheet column header -> MedicineCreate field
IMPORT_COLUMNS: dict[str, str] = {
    "Medicine Name": "medicine_name",
    "Batch Number": "batch_number",
    "Quantity": "quantity",
    "Units": "units",
    "MRP": "mrp",
    "Manufacture Date": "manufacture_date",
    "Expiry Date": "expiry_date",
    "Manufacturer": "manufacturer",
    "Category": "category",
    "Description": "description",
}
REQUIRED_COLUMNS = ("Medicine Name", "Batch Number", "Expiry Date")

_DATE_FIELDS = ("manufacture_date", "expiry_date")
_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%m/%d/%Y")


def list_medicines(db: Session) -> list[Medicine]:
    return db.query(Medicine).order_by(Medicine.medicine_name.asc(), Medicine.expiry_date.asc()).all()


def list_active_medicines(db: Session) -> list[Medicine]:
    """Active batches with stock on hand, as offered on the billing form."""
    return (
        db.query(Medicine)
        .filter(Medicine.is_active.is_(True), Medicine.quantity > 0)
        .order_by(Medicine.medicine_name.asc(), Medicine.expiry_date.asc())
        .all()
    )


def search_medicines(db: Session, query: str, *, limit: int = 20) -> list[Medicine]:
    term = contains_pattern(query)
    return (
        db.query(Medicine)
        .filter(
            Medicine.is_active.is_(True),
            or_(
                Medicine.medicine_name.ilike(term, escape=LIKE_ESCAPE),
                Medicine.batch_number.ilike(term, escape=LIKE_ESCAPE),
                Medicine.manufacturer.ilike(term, escape=LIKE_ESCAPE),
            ),
        )
        .order_by(Medicine.medicine_name.asc())
        .limit(limit)
        .all()
    )


def get_medicine(db: Session, medicine_id: UUID) -> Medicine:
    medicine = db.query(Medicine).filter(Medicine.id == medicine_id).first()
    if not medicine:
        raise MedicineNotFoundError([medicine_id])
    return medicine


def _batch_exists(db: Session, medicine_name: str, batch_number: str, *, exclude_id: UUID | None = None) -> bool:
    query = db.query(Medicine.id).filter(
        Medicine.medicine_name == medicine_name,
        Medicine.batch_number == batch_number,
    )
    if exclude_id is not None:
        query = query.filter(Medicine.id != exclude_id)
    return query.first() is not None


def create_medicine(db: Session, *, payload: MedicineCreate, created_by_id: UUID | None) -> Medicine:
    if _batch_exists(db, payload.medicine_name, payload.batch_number):
        raise DuplicateError(f"Batch {payload.batch_number} of {payload.medicine_name} already exists")

    medicine = Medicine(**payload.model_dump(), created_by=created_by_id)
    try:
        db.add(medicine)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Batch {payload.batch_number} of {payload.medicine_name} already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(medicine)
    invalidate_for(CacheEvent.MEDICINE_CHANGED)
    return medicine


def update_medicine(db: Session, medicine_id: UUID, *, payload: MedicineUpdate) -> Medicine:
    medicine = get_medicine(db, medicine_id)
    changes = payload.model_dump(exclude_unset=True)

    name = changes.get("medicine_name", medicine.medicine_name)
    batch = changes.get("batch_number", medicine.batch_number)
    if ("medicine_name" in changes or "batch_number" in changes) and _batch_exists(
        db, name, batch, exclude_id=medicine.id
    ):
        raise DuplicateError(f"Batch {batch} of {name} already exists")

    for field, value in changes.items():
        setattr(medicine, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Batch {batch} of {name} already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(medicine)
    invalidate_for(CacheEvent.MEDICINE_CHANGED)
    return medicine


def delete_medicine(db: Session, medicine_id: UUID) -> None:
    """
    Hard delete. Past bills keep their line items; the item's medicine
    reference is cleared by the foreign key.
    """
    medicine = get_medicine(db, medicine_id)
    name = medicine.medicine_name
    try:
        db.delete(medicine)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Deleted medicine %s (%s)", medicine_id, name)
    invalidate_for(CacheEvent.MEDICINE_CHANGED)


def decrement_stock(db: Session, medicine_id: UUID, quantity: int) -> bool:
    """
    Take `quantity` units off the shelf if, and only if, that many are on hand.

    Returns False when the row was not updated (stock too low or row gone).
    Runs inside the caller's transaction and does not commit.
    """
    result = db.execute(
        update(Medicine)
        .where(Medicine.id == medicine_id, Medicine.quantity >= quantity)
        .values(quantity=Medicine.quantity - quantity, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def current_quantities(db: Session, medicine_ids: list[UUID]) -> dict[UUID, int]:
    rows = db.execute(select(Medicine.id, Medicine.quantity).where(Medicine.id.in_(medicine_ids))).all()
    return {row.id: row.quantity for row in rows}


def return_medicine(db: Session, medicine_id: UUID, quantity: int, *, notes: str | None = None) -> Medicine:
    """Put returned units back on the shelf."""
    result = db.execute(
        update(Medicine)
        .where(Medicine.id == medicine_id)
        .values(quantity=Medicine.quantity + quantity, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise MedicineNotFoundError([medicine_id])

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    medicine = get_medicine(db, medicine_id)
    logger.info(
        "Returned %d x %s (%s); on hand now %d. %s",
        quantity,
        medicine.medicine_name,
        medicine_id,
        medicine.quantity,
        notes or "",
    )
    invalidate_for(CacheEvent.MEDICINE_CHANGED)
    return medicine


# ---------- bulk import (CSV / Excel) ----------

_TEMPLATE_EXAMPLE = [
    "Paracetamol 500mg",
    "PCM2025A",
    "100",
    "tablets",
    "2.50",
    "2025-01-15",
    "2027-01-14",
    "Acme Pharma",
    "tablets",
    "Analgesic / antipyretic",
]


def import_template_csv() -> str:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(list(IMPORT_COLUMNS))
    writer.writerow(_TEMPLATE_EXAMPLE)
    return output.getvalue()


def import_template_xlsx() -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Medicine Template"
    ws.append(list(IMPORT_COLUMNS))
    ws.append(_TEMPLATE_EXAMPLE)
    for column in ws.columns:
        ws.column_dimensions[column[0].column_letter].width = 20

    output = BytesIO()
    wb.save(output)
    wb.close()
    return output.getvalue()


def _parse_date(value: str) -> date | str:
    """Accept the spreadsheet date formats people actually type; leave anything else for validation."""
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return value


def _cell_text(value: object) -> str:
    """Spreadsheet cell as the text a CSV export of it would hold."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _row_to_fields(row: dict[str, str | None]) -> dict[str, object]:
    fields: dict[str, object] = {}
    for header, field in IMPORT_COLUMNS.items():
        raw = (row.get(header) or "").strip()
        if not raw:
            continue
        fields[field] = _parse_date(raw) if field in _DATE_FIELDS else raw
    return fields


def _field_label(field: str) -> str:
    # validation errors may be located by attribute name or by its camelCase alias
    for header, name in IMPORT_COLUMNS.items():
        if field in (name, to_camel(name)):
            return header
    return "General"


def _check_columns(headers: list[str]) -> None:
    missing = [h for h in REQUIRED_COLUMNS if h not in headers]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")


def _read_xlsx_rows(content: bytes) -> tuple[list[str], list[dict[str, str]]]:
    """Header row and data rows of the first worksheet; blank rows are dropped."""
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError) as e:
        raise ValueError("File is not a valid .xlsx workbook") from e

    try:
        rows = wb.worksheets[0].iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return [], []
        headers = [_cell_text(cell).strip() for cell in header_row]
        records = []
        for values in rows:
            texts = [_cell_text(cell) for cell in values]
            if not any(text.strip() for text in texts):
                continue
            records.append({header: text for header, text in zip(headers, texts) if header})
        return headers, records
    finally:
        wb.close()


def import_medicines_csv(db: Session, content: str, *, created_by_id: UUID | None) -> MedicineImportResult:
    """Bulk-create medicines from a CSV export of the inventory spreadsheet."""
    reader = csv.DictReader(StringIO(content.lstrip("\ufeff")))
    _check_columns(list(reader.fieldnames or []))
    return _import_rows(db, list(reader), created_by_id=created_by_id)


def import_medicines_xlsx(db: Session, content: bytes, *, created_by_id: UUID | None) -> MedicineImportResult:
    """Bulk-create medicines from the first sheet of an .xlsx workbook."""
    headers, rows = _read_xlsx_rows(content)
    _check_columns(headers)
    return _import_rows(db, rows, created_by_id=created_by_id)


def _import_rows(
    db: Session,
    rows: list[dict[str, str | None]],
    *,
    created_by_id: UUID | None,
) -> MedicineImportResult:
    """
    Rows are validated independently; invalid rows are reported and skipped.
    A row whose (name, batch) already exists, in the database or earlier in
    the file, is counted as a duplicate and skipped. Valid rows are inserted
    in one transaction. Rows are numbered from 2, the header being row 1;
    blank rows are not counted.
    """
    result = MedicineImportResult(total_rows=len(rows))
    seen: set[tuple[str, str]] = set()
    to_create: list[Medicine] = []

    for index, row in enumerate(rows, start=2):
        fields = _row_to_fields(row)
        try:
            payload = MedicineCreate(**fields)
        except ValidationError as e:
            first = e.errors()[0]
            loc = str(first["loc"][0]) if first.get("loc") else ""
            result.errors.append(ImportRowError(row=index, field=_field_label(loc), message=first["msg"]))
            continue

        if payload.quantity <= 0:
            result.errors.append(ImportRowError(row=index, field="Quantity", message="Valid quantity is required"))
            continue

        key = (payload.medicine_name, payload.batch_number)
        if key in seen or _batch_exists(db, *key):
            result.duplicates += 1
            continue

        seen.add(key)
        to_create.append(Medicine(**payload.model_dump(), created_by=created_by_id))

    if to_create:
        try:
            db.add_all(to_create)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Medicine import failed while saving %d rows", len(to_create))
            raise
        result.imported = len(to_create)
        invalidate_for(CacheEvent.MEDICINE_CHANGED)

    logger.info(
        "Medicine import: %d rows, %d imported, %d duplicates, %d errors",
        result.total_rows,
        result.imported,
        result.duplicates,
        len(result.errors),
    )
    return result
