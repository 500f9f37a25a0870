# app/api/v1/endpoints/prescriptions.py
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.cache import CacheKey, cache_get, cache_set
from app.core.database import get_db
from app.core.errors import (
    IdentifierConflictError,
    InsufficientStockError,
    NotFoundError,
)
from app.models.user import User
from app.schemas.prescription import (
    InsufficientStockDetail,
    InsufficientStockItem,
    InsufficientStockResponse,
    PrescriptionCreate,
    PrescriptionResponse,
)
from app.services import prescription_service
from app.services.settings_service import get_hospital_settings
from app.utils.pdf_documents import generate_pharmacy_bill_pdf

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": InsufficientStockResponse}},
    tags=["prescriptions"],
)
def create_prescription(
    payload: PrescriptionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PrescriptionResponse:
    """
    Create a pharmacy bill and deduct stock for every line, all or nothing.

    - 404 when the patient or any medicine id is unknown
    - 409 INSUFFICIENT_STOCK listing every short medicine (requested vs available)
    """
    try:
        prescription = prescription_service.create_prescription(
            db,
            payload=payload,
            created_by_id=current_user.id,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except InsufficientStockError as exc:
        detail = InsufficientStockDetail(
            message=exc.message,
            insufficient_stock=[InsufficientStockItem.model_validate(s) for s in exc.shortfalls],
        )
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail.model_dump(mode="json", by_alias=True),
        ) from exc
    except IdentifierConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return PrescriptionResponse.model_validate(prescription)


@router.get("/recent", response_model=list[PrescriptionResponse], tags=["prescriptions"])
def recent_prescriptions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PrescriptionResponse]:
    cached = cache_get(CacheKey.RECENT_PRESCRIPTIONS)
    if cached is not None:
        return [PrescriptionResponse.model_validate(item) for item in cached]

    items = [PrescriptionResponse.model_validate(p) for p in prescription_service.list_recent_prescriptions(db)]
    cache_set(CacheKey.RECENT_PRESCRIPTIONS, [item.model_dump(mode="json") for item in items])
    return items


@router.get("/search", response_model=list[PrescriptionResponse], tags=["prescriptions"])
def search_prescriptions(
    bill_number: str = Query(..., alias="billNumber", min_length=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PrescriptionResponse]:
    return [
        PrescriptionResponse.model_validate(p)
        for p in prescription_service.search_by_bill_number(db, bill_number)
    ]


@router.get("/patient/{patient_id}", response_model=list[PrescriptionResponse], tags=["prescriptions"])
def prescriptions_for_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PrescriptionResponse]:
    return [
        PrescriptionResponse.model_validate(p)
        for p in prescription_service.list_prescriptions_for_patient(db, patient_id)
    ]


@router.get("/{prescription_id}", response_model=PrescriptionResponse, tags=["prescriptions"])
def get_prescription(
    prescription_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PrescriptionResponse:
    try:
        prescription = prescription_service.get_prescription(db, prescription_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PrescriptionResponse.model_validate(prescription)


@router.get("/{prescription_id}/pdf", tags=["prescriptions"])
def download_prescription_pdf(
    prescription_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Download the pharmacy bill as a PDF.
    """
    try:
        prescription = prescription_service.get_prescription(db, prescription_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    pdf_buffer = generate_pharmacy_bill_pdf(prescription, get_hospital_settings(db))
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="bill_{prescription.bill_number}.pdf"'},
    )
