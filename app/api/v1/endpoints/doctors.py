# app/api/v1/endpoints/doctors.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.dependencies.authz import require_admin
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.user import DoctorCreate, DoctorOwnerUpdate, UserResponse
from app.services import user_service

router = APIRouter()
current_router = APIRouter()


@router.get("", response_model=list[UserResponse], tags=["doctors"])
def list_doctors(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[UserResponse]:
    """
    Active doctors, for the attending-physician pickers.
    """
    return [UserResponse.model_validate(d) for d in user_service.list_doctors(db)]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["doctors"],
)
def create_doctor(
    payload: DoctorCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserResponse:
    return UserResponse.model_validate(user_service.create_doctor(db, payload))


@router.patch("/{doctor_id}/current", response_model=UserResponse, tags=["doctors"])
def set_current_doctor(
    doctor_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Put this doctor on duty. Whoever was on duty before is cleared.
    """
    try:
        doctor = user_service.set_current_doctor(db, doctor_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return UserResponse.model_validate(doctor)


@router.patch("/{doctor_id}/owner", response_model=UserResponse, tags=["doctors"])
def update_owner_status(
    doctor_id: UUID,
    payload: DoctorOwnerUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> UserResponse:
    try:
        doctor = user_service.set_owner_status(db, doctor_id, payload.is_owner)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return UserResponse.model_validate(doctor)


@router.delete("/{doctor_id}", response_model=MessageResponse, tags=["doctors"])
def delete_doctor(
    doctor_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """
    Deactivates the doctor; their past records keep pointing at the row.
    The hospital owner cannot be removed.
    """
    try:
        user_service.deactivate_doctor(db, doctor_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except user_service.OwnerRemovalError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MessageResponse(message="Doctor deactivated successfully")


@current_router.get("", response_model=UserResponse | None, tags=["doctors"])
def get_current_doctor(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse | None:
    """
    The doctor on duty, or null when nobody has been picked.
    """
    doctor = user_service.get_current_doctor(db)
    return UserResponse.model_validate(doctor) if doctor else None
