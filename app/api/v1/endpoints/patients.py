# app/api/v1/endpoints/patients.py
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import IdentifierConflictError, NotFoundError
from app.models.user import User
from app.schemas.patient import (
    PatientCreate,
    PatientProfileResponse,
    PatientProfileUpsert,
    PatientResponse,
)
from app.services import patient_service

router = APIRouter()
profile_router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[PatientResponse], tags=["patients"])
def list_patients(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PatientResponse]:
    return [PatientResponse.model_validate(p) for p in patient_service.list_patients(db)]


@router.post(
    "",
    response_model=PatientResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["patients"],
)
def create_patient(
    payload: PatientCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PatientResponse:
    """
    Register a patient. The HMS-<year>-<seq> code is assigned by the server.
    """
    try:
        patient = patient_service.create_patient(db, payload=payload, created_by_id=current_user.id)
    except IdentifierConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return PatientResponse.model_validate(patient)


@router.get("/search", response_model=list[PatientResponse], tags=["patients"])
def search_patients(
    q: str = Query(..., min_length=1, description="Name, patient code or phone fragment"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[PatientResponse]:
    return [PatientResponse.model_validate(p) for p in patient_service.search_patients(db, q)]


@router.get("/{patient_id}", response_model=PatientResponse, tags=["patients"])
def get_patient(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PatientResponse:
    try:
        patient = patient_service.get_patient(db, patient_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PatientResponse.model_validate(patient)


# ---------- Extended profile (/patient-profile) ----------


@profile_router.get("/{patient_id}", response_model=PatientProfileResponse | None, tags=["patient-profile"])
def get_patient_profile(
    patient_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PatientProfileResponse | None:
    """
    Returns null when the patient exists but has no extended profile yet.
    """
    try:
        patient_service.get_patient(db, patient_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    profile = patient_service.get_profile(db, patient_id)
    return PatientProfileResponse.model_validate(profile) if profile else None


@profile_router.post("", response_model=PatientProfileResponse, tags=["patient-profile"])
def upsert_patient_profile(
    payload: PatientProfileUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> PatientProfileResponse:
    try:
        profile = patient_service.upsert_profile(db, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PatientProfileResponse.model_validate(profile)
