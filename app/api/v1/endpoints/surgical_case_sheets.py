# app/api/v1/endpoints/surgical_case_sheets.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import IdentifierConflictError, NotFoundError
from app.models.user import User
from app.schemas.surgical_case_sheet import CaseSheetCreate, CaseSheetResponse, CaseSheetUpdate
from app.services import case_sheet_service
from app.services.settings_service import get_hospital_settings
from app.utils.pdf_documents import generate_case_sheet_pdf

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[CaseSheetResponse], tags=["surgical-case-sheets"])
def recent_case_sheets(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[CaseSheetResponse]:
    """
    The 20 most recently created case sheets.
    """
    return [CaseSheetResponse.model_validate(s) for s in case_sheet_service.list_recent_case_sheets(db)]


@router.get("/patient/{patient_id}", response_model=list[CaseSheetResponse], tags=["surgical-case-sheets"])
def case_sheets_for_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[CaseSheetResponse]:
    return [
        CaseSheetResponse.model_validate(s)
        for s in case_sheet_service.list_case_sheets_for_patient(db, patient_id)
    ]


@router.get("/{sheet_id}", response_model=CaseSheetResponse, tags=["surgical-case-sheets"])
def get_case_sheet(
    sheet_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CaseSheetResponse:
    try:
        sheet = case_sheet_service.get_case_sheet(db, sheet_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CaseSheetResponse.model_validate(sheet)


@router.post(
    "",
    response_model=CaseSheetResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["surgical-case-sheets"],
)
def create_case_sheet(
    payload: CaseSheetCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CaseSheetResponse:
    try:
        sheet = case_sheet_service.create_case_sheet(db, payload=payload, created_by_id=current_user.id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except IdentifierConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return CaseSheetResponse.model_validate(sheet)


@router.put("/{sheet_id}", response_model=CaseSheetResponse, tags=["surgical-case-sheets"])
def update_case_sheet(
    sheet_id: UUID,
    payload: CaseSheetUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CaseSheetResponse:
    try:
        sheet = case_sheet_service.update_case_sheet(db, sheet_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return CaseSheetResponse.model_validate(sheet)


@router.get("/{sheet_id}/pdf", tags=["surgical-case-sheets"])
def download_case_sheet_pdf(
    sheet_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        sheet = case_sheet_service.get_case_sheet(db, sheet_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    pdf_buffer = generate_case_sheet_pdf(sheet, get_hospital_settings(db))
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="case_sheet_{sheet.case_number}.pdf"'},
    )
