from uuid import UUID
from datetime import datetime

from pydantic import EmailStr

from app.models.user import RoleName
from app.schemas.common import CamelModel, NameStr


class UserSummary(CamelModel):
    """Embedded in the login response."""

    id: UUID
    username: str
    role: RoleName
    name: str


class UserResponse(UserSummary):
    email: str | None = None
    phone: str | None = None
    specialization: str | None = None
    is_active: bool
    is_owner: bool = False
    is_current: bool = False
    created_at: datetime


class DoctorCreate(CamelModel):
    name: NameStr
    email: EmailStr | None = None
    phone: str | None = None
    specialization: str | None = None
    is_owner: bool = False


class DoctorOwnerUpdate(CamelModel):
    is_owner: bool
