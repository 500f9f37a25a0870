# app/api/v1/endpoints/medicines.py
from __future__ import annotations

import logging
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.cache import CacheKey, cache_get, cache_set
from app.core.database import get_db
from app.core.errors import DuplicateError, NotFoundError
from app.dependencies.authz import require_admin
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.medicine import (
    MedicineCreate,
    MedicineImportResult,
    MedicineResponse,
    MedicineReturnRequest,
    MedicineReturnResponse,
    MedicineUpdate,
)
from app.services import medicine_service

router = APIRouter()
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
ZIP_SIGNATURE = b"PK\x03\x04"


def _cached_list(key: CacheKey, load) -> list[MedicineResponse]:
    cached = cache_get(key)
    if cached is not None:
        return [MedicineResponse.model_validate(item) for item in cached]

    items = [MedicineResponse.model_validate(m) for m in load()]
    cache_set(key, [item.model_dump(mode="json") for item in items])
    return items


@router.get("", response_model=list[MedicineResponse], tags=["medicines"])
def list_medicines(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MedicineResponse]:
    """
    Full inventory, including inactive and out-of-stock batches.
    """
    return _cached_list(CacheKey.MEDICINE_LIST, lambda: medicine_service.list_medicines(db))


@router.get("/active", response_model=list[MedicineResponse], tags=["medicines"])
def list_active_medicines(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MedicineResponse]:
    return _cached_list(CacheKey.ACTIVE_MEDICINES, lambda: medicine_service.list_active_medicines(db))


@router.get("/search", response_model=list[MedicineResponse], tags=["medicines"])
def search_medicines(
    q: str = Query(..., min_length=1, description="Name, batch or manufacturer fragment"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MedicineResponse]:
    return [MedicineResponse.model_validate(m) for m in medicine_service.search_medicines(db, q)]


@router.get("/import-template", tags=["medicines"])
def download_import_template(
    file_format: Literal["xlsx", "csv"] = Query("xlsx", alias="format"),
    current_user: User = Depends(get_current_user),
) -> Response:
    """
    Bulk import template with one example row, as an Excel workbook or CSV.
    """
    if file_format == "csv":
        return Response(
            content=medicine_service.import_template_csv(),
            media_type="text/csv",
            headers={"Content-Disposition": 'attachment; filename="medicine_import_template.csv"'},
        )
    return Response(
        content=medicine_service.import_template_xlsx(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="medicine_import_template.xlsx"'},
    )


@router.post("/import", response_model=MedicineImportResult, tags=["medicines"])
def import_medicines(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicineImportResult:
    """
    Bulk import from an .xlsx workbook (first sheet) or a CSV file. Invalid
    rows are reported per row; existing (name, batch) pairs are counted as
    duplicates and skipped.
    """
    raw = file.file.read()
    if not raw:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    filename = (file.filename or "").lower()
    try:
        if filename.endswith(".xlsx") or raw.startswith(ZIP_SIGNATURE):
            return medicine_service.import_medicines_xlsx(db, raw, created_by_id=current_user.id)
        if filename.endswith(".xls"):
            raise ValueError("Legacy .xls workbooks are not supported; save the sheet as .xlsx or CSV")

        try:
            content = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ValueError("File must be an .xlsx workbook or a UTF-8 encoded CSV") from exc
        return medicine_service.import_medicines_csv(db, content, created_by_id=current_user.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/return", response_model=MedicineReturnResponse, tags=["medicines"])
def return_medicine(
    payload: MedicineReturnRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicineReturnResponse:
    """
    Patient returns units to the pharmacy; on-hand quantity is incremented atomically.
    """
    try:
        medicine = medicine_service.return_medicine(
            db, payload.medicine_id, payload.quantity_returned, notes=payload.notes
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return MedicineReturnResponse(
        message="Medicine returned successfully",
        medicine=MedicineResponse.model_validate(medicine),
        quantity_added=payload.quantity_returned,
        new_quantity=medicine.quantity,
    )


@router.get("/{medicine_id}", response_model=MedicineResponse, tags=["medicines"])
def get_medicine(
    medicine_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicineResponse:
    try:
        medicine = medicine_service.get_medicine(db, medicine_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MedicineResponse.model_validate(medicine)


@router.post(
    "",
    response_model=MedicineResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["medicines"],
)
def create_medicine(
    payload: MedicineCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicineResponse:
    try:
        medicine = medicine_service.create_medicine(db, payload=payload, created_by_id=current_user.id)
    except DuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return MedicineResponse.model_validate(medicine)


@router.put("/{medicine_id}", response_model=MedicineResponse, tags=["medicines"])
def update_medicine(
    medicine_id: UUID,
    payload: MedicineUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicineResponse:
    try:
        medicine = medicine_service.update_medicine(db, medicine_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return MedicineResponse.model_validate(medicine)


@router.delete("/{medicine_id}", response_model=MessageResponse, tags=["medicines"])
def delete_medicine(
    medicine_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    try:
        medicine_service.delete_medicine(db, medicine_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Medicine deleted successfully")
