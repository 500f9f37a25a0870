# app/api/v1/endpoints/consultations.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models.user import User
from app.schemas.clinical import ConsultationCreate, ConsultationResponse, ConsultationUpdate
from app.schemas.common import MessageResponse
from app.services import consultation_service

router = APIRouter()


@router.get("/patient/{patient_id}", response_model=list[ConsultationResponse], tags=["consultations"])
def consultations_for_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ConsultationResponse]:
    return [
        ConsultationResponse.model_validate(c)
        for c in consultation_service.list_consultations_for_patient(db, patient_id)
    ]


@router.post(
    "",
    response_model=ConsultationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["consultations"],
)
def create_consultation(
    payload: ConsultationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConsultationResponse:
    try:
        consultation = consultation_service.create_consultation(
            db, payload=payload, created_by_id=current_user.id
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ConsultationResponse.model_validate(consultation)


@router.get("/recent", response_model=list[ConsultationResponse], tags=["consultations"])
def recent_consultations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[ConsultationResponse]:
    return [
        ConsultationResponse.model_validate(c)
        for c in consultation_service.list_recent_consultations(db)
    ]


@router.get("/{consultation_id}", response_model=ConsultationResponse, tags=["consultations"])
def get_consultation(
    consultation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConsultationResponse:
    try:
        consultation = consultation_service.get_consultation(db, consultation_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ConsultationResponse.model_validate(consultation)


@router.put("/{consultation_id}", response_model=ConsultationResponse, tags=["consultations"])
def update_consultation(
    consultation_id: UUID,
    payload: ConsultationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ConsultationResponse:
    try:
        consultation = consultation_service.update_consultation(db, consultation_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ConsultationResponse.model_validate(consultation)


@router.delete("/{consultation_id}", response_model=MessageResponse, tags=["consultations"])
def delete_consultation(
    consultation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    try:
        consultation_service.delete_consultation(db, consultation_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Consultation deleted successfully")
