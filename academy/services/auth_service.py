from urllib.parse import quote

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.config import get_settings
from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import create_access_token, hash_password, verify_password
from academy.models import User
from academy.schemas.auth import AuthResponse, RegisterRequest
from academy.schemas.users import UserOut

settings = get_settings()


def default_avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random"


def user_out(user: User) -> UserOut:
    return UserOut(
        id=str(user.id),
        name=user.name,
        email=user.email,
        role=user.role,
        avatar_url=user.avatar_url,
        phone=user.phone,
        city=user.city,
        state=user.state,
        assigned_course_ids=list(user.assigned_course_ids or []),
    )


def register_student(db: Session, payload: RegisterRequest) -> User:
    email = payload.email.lower().strip()
    exists = db.execute(select(User).where(User.email == email)).scalars().first()
    if exists:
        raise ApiError(status_code=400, code=ErrorCode.EMAIL_ALREADY_REGISTERED, message="Email already registered")

    name = payload.name.strip()
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(payload.password),
        role="STUDENT",
        avatar_url=payload.avatar_url or default_avatar_url(name),
        phone=payload.phone,
        city=payload.city,
        state=payload.state,
        assigned_course_ids=[],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.execute(select(User).where(User.email == email.lower().strip())).scalars().first()
    # Same error for unknown email and wrong password.
    if not user or not verify_password(password, user.password_hash):
        raise ApiError(status_code=401, code=ErrorCode.INVALID_CREDENTIALS, message="Invalid credentials")
    return user


def issue_auth_response(user: User) -> AuthResponse:
    access_token = create_access_token(str(user.id), user.role, extra={"email": user.email})
    return AuthResponse(
        user=user_out(user),
        access_token=access_token,
        access_token_expires_in=settings.access_token_expire_seconds,
    )
