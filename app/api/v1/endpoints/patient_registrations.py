# app/api/v1/endpoints/patient_registrations.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import IdentifierConflictError, NotFoundError
from app.models.user import User
from app.schemas.patient_registration import (
    NextMruResponse,
    RegistrationCreate,
    RegistrationResponse,
    RegistrationUpdate,
)
from app.services import registration_service

router = APIRouter()


@router.post(
    "",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["patients-registration"],
)
def create_registration(
    payload: RegistrationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RegistrationResponse:
    try:
        registration = registration_service.create_registration(
            db, payload=payload, created_by_id=current_user.id
        )
    except IdentifierConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return RegistrationResponse.model_validate(registration)


@router.get("", response_model=list[RegistrationResponse], tags=["patients-registration"])
def list_registrations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RegistrationResponse]:
    return [RegistrationResponse.model_validate(r) for r in registration_service.list_registrations(db)]


@router.get("/next-mru", response_model=NextMruResponse, tags=["patients-registration"])
def next_mru(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NextMruResponse:
    """
    Preview of the MRU number the next registration will most likely receive.
    Not reserved: the number is assigned for real on POST.
    """
    return NextMruResponse(mru_number=registration_service.next_mru_number(db))


@router.get("/recent", response_model=list[RegistrationResponse], tags=["patients-registration"])
def recent_registrations(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RegistrationResponse]:
    return [
        RegistrationResponse.model_validate(r)
        for r in registration_service.list_recent_registrations(db)
    ]


@router.get("/search/{query}", response_model=list[RegistrationResponse], tags=["patients-registration"])
def search_registrations(
    query: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[RegistrationResponse]:
    return [
        RegistrationResponse.model_validate(r)
        for r in registration_service.search_registrations(db, query)
    ]


@router.get("/{registration_id}", response_model=RegistrationResponse, tags=["patients-registration"])
def get_registration(
    registration_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RegistrationResponse:
    try:
        registration = registration_service.get_registration(db, registration_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return RegistrationResponse.model_validate(registration)


@router.put("/{registration_id}", response_model=RegistrationResponse, tags=["patients-registration"])
def update_registration(
    registration_id: UUID,
    payload: RegistrationUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> RegistrationResponse:
    try:
        registration = registration_service.update_registration(db, registration_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return RegistrationResponse.model_validate(registration)
