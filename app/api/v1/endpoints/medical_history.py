# app/api/v1/endpoints/medical_history.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models.user import User
from app.schemas.clinical import (
    MedicalHistoryCreate,
    MedicalHistoryResponse,
    MedicalHistoryUpdate,
)
from app.schemas.common import MessageResponse
from app.services import medical_history_service

router = APIRouter()


@router.get("/{patient_id}", response_model=list[MedicalHistoryResponse], tags=["medical-history"])
def history_for_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[MedicalHistoryResponse]:
    return [
        MedicalHistoryResponse.model_validate(e)
        for e in medical_history_service.list_history_for_patient(db, patient_id)
    ]


@router.post(
    "",
    response_model=MedicalHistoryResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["medical-history"],
)
def create_history_entry(
    payload: MedicalHistoryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicalHistoryResponse:
    try:
        entry = medical_history_service.create_history_entry(
            db, payload=payload, created_by_id=current_user.id
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MedicalHistoryResponse.model_validate(entry)


@router.put("/{entry_id}", response_model=MedicalHistoryResponse, tags=["medical-history"])
def update_history_entry(
    entry_id: UUID,
    payload: MedicalHistoryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MedicalHistoryResponse:
    try:
        entry = medical_history_service.update_history_entry(db, entry_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MedicalHistoryResponse.model_validate(entry)


@router.delete("/{entry_id}", response_model=MessageResponse, tags=["medical-history"])
def delete_history_entry(
    entry_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    try:
        medical_history_service.delete_history_entry(db, entry_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Medical history entry deleted successfully")
