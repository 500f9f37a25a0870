# app/api/v1/endpoints/lab_test_definitions.py
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.endpoints.auth import get_current_user
from app.core.database import get_db
from app.core.errors import DuplicateError, NotFoundError
from app.dependencies.authz import require_admin
from app.models.user import User
from app.schemas.common import MessageResponse
from app.schemas.lab_test import (
    LabTestDefinitionCreate,
    LabTestDefinitionResponse,
    LabTestDefinitionUpdate,
)
from app.services import lab_test_service

router = APIRouter()


@router.get("", response_model=list[LabTestDefinitionResponse], tags=["lab-test-definitions"])
def list_definitions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[LabTestDefinitionResponse]:
    return [LabTestDefinitionResponse.model_validate(d) for d in lab_test_service.list_definitions(db)]


@router.get("/active", response_model=list[LabTestDefinitionResponse], tags=["lab-test-definitions"])
def list_active_definitions(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[LabTestDefinitionResponse]:
    return [
        LabTestDefinitionResponse.model_validate(d)
        for d in lab_test_service.list_definitions(db, active_only=True)
    ]


@router.post(
    "",
    response_model=LabTestDefinitionResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["lab-test-definitions"],
)
def create_definition(
    payload: LabTestDefinitionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabTestDefinitionResponse:
    try:
        definition = lab_test_service.create_definition(db, payload=payload, created_by_id=current_user.id)
    except DuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return LabTestDefinitionResponse.model_validate(definition)


@router.put("/{definition_id}", response_model=LabTestDefinitionResponse, tags=["lab-test-definitions"])
def update_definition(
    definition_id: UUID,
    payload: LabTestDefinitionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> LabTestDefinitionResponse:
    try:
        definition = lab_test_service.update_definition(db, definition_id, payload=payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except DuplicateError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return LabTestDefinitionResponse.model_validate(definition)


@router.delete("/{definition_id}", response_model=MessageResponse, tags=["lab-test-definitions"])
def delete_definition(
    definition_id: UUID,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> MessageResponse:
    try:
        lab_test_service.delete_definition(db, definition_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return MessageResponse(message="Lab test definition deleted successfully")
