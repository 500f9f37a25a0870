from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.user import User
from app.schemas.auth import LoginRequest, ProfileUpdateRequest, RegisterRequest


class AuthenticationError(Exception):
    pass


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def authenticate_user(db: Session, login_data: LoginRequest) -> User:
    """
    Authenticate by username and password. When the login form names a role,
    it must be the account's role.
    """
    user = get_user_by_username(db, login_data.username)
    if not user or not verify_password(login_data.password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        raise AuthenticationError("Account is disabled")

    if login_data.role is not None and user.role != login_data.role:
        raise AuthenticationError("Invalid role")

    return user


def issue_access_token_for_user(user: User) -> str:
    return create_access_token(
        subject=str(user.id),
        username=user.username,
        role=user.role,
        name=user.name,
    )


def register_user(db: Session, payload: RegisterRequest) -> User:
    if get_user_by_username(db, payload.username):
        raise DuplicateError("Username already exists")

    user = User(
        username=payload.username,
        hashed_password=get_password_hash(payload.password),
        role=payload.role,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        specialization=payload.specialization,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Username already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user


def update_profile(db: Session, user: User, payload: ProfileUpdateRequest) -> User:
    if payload.username and payload.username != user.username:
        existing = get_user_by_username(db, payload.username)
        if existing and existing.id != user.id:
            raise DuplicateError("Username already exists")
        user.username = payload.username

    user.name = payload.name
    if "phone" in payload.model_fields_set:
        user.phone = payload.phone.strip() if payload.phone and payload.phone.strip() else None

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError("Username already exists") from None
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(user)
    return user
