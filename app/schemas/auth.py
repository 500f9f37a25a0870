from __future__ import annotations

from typing import Annotated

from pydantic import EmailStr, Field, StringConstraints

from app.models.user import RoleName
from app.schemas.common import CamelModel, NameStr
from app.schemas.user import UserSummary

UsernameStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=3, max_length=100),
]


class LoginRequest(CamelModel):
    username: str
    password: str
    role: RoleName | None = None  # when given, must match the account's role


class TokenResponse(CamelModel):
    token: str
    token_type: str = "bearer"
    user: UserSummary


class RegisterRequest(CamelModel):
    username: UsernameStr
    password: str = Field(min_length=6)
    name: NameStr
    role: RoleName = RoleName.STAFF
    email: EmailStr | None = None
    phone: str | None = None
    specialization: str | None = None


class ProfileUpdateRequest(CamelModel):
    name: NameStr
    username: UsernameStr | None = None
    phone: str | None = None
