# app/api/v1/endpoints/discharge_summaries.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models.user import User
from app.schemas.clinical import DischargeSummaryCreate, DischargeSummaryResponse
from app.services import discharge_service
from app.services.settings_service import get_hospital_settings
from app.utils.pdf_documents import generate_discharge_summary_pdf

router = APIRouter()


@router.post(
    "",
    response_model=DischargeSummaryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["discharge-summaries"],
)
def create_discharge_summary(
    payload: DischargeSummaryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DischargeSummaryResponse:
    try:
        summary = discharge_service.create_discharge_summary(
            db, payload=payload, created_by_id=current_user.id
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return DischargeSummaryResponse.model_validate(summary)


@router.get("/recent", response_model=list[DischargeSummaryResponse], tags=["discharge-summaries"])
def recent_discharge_summaries(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[DischargeSummaryResponse]:
    return [
        DischargeSummaryResponse.model_validate(s)
        for s in discharge_service.list_recent_discharge_summaries(db)
    ]


@router.get("/{summary_id}", response_model=DischargeSummaryResponse, tags=["discharge-summaries"])
def get_discharge_summary(
    summary_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> DischargeSummaryResponse:
    try:
        summary = discharge_service.get_discharge_summary(db, summary_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return DischargeSummaryResponse.model_validate(summary)


@router.get("/{summary_id}/pdf", tags=["discharge-summaries"])
def download_discharge_summary_pdf(
    summary_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        summary = discharge_service.get_discharge_summary(db, summary_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    pdf_buffer = generate_discharge_summary_pdf(summary, get_hospital_settings(db))
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="discharge_summary_{summary.id}.pdf"'},
    )
