from dataclasses import dataclass
from typing import Annotated

import jwt
from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from academy.api.admin_auth import is_admin_key
from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import decode_access_token
from academy.db.session import get_db
from academy.models import User
from academy.services.lookup import parse_uuid

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Viewer:
    """Who is making the request: an admin (key or CREATOR user) or a student."""

    user: User | None
    is_admin: bool

    def can_access(self, user_id: str) -> bool:
        if self.is_admin:
            return True
        return self.user is not None and str(self.user.id) == str(parse_uuid(user_id) or user_id)

    def require_access(self, user_id: str) -> None:
        if not self.can_access(user_id):
            raise ApiError(status_code=403, code=ErrorCode.FORBIDDEN, message="Not allowed for this user")

    def require_admin(self) -> None:
        if not self.is_admin:
            raise ApiError(status_code=403, code=ErrorCode.FORBIDDEN, message="Admin access required")


def _user_from_token(db: Session, token: str) -> User:
    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
        if payload.get("type") != "access" or not user_id:
            raise ApiError(status_code=401, code=ErrorCode.INVALID_TOKEN, message="Invalid token")
    except jwt.PyJWTError as exc:
        raise ApiError(status_code=401, code=ErrorCode.INVALID_TOKEN, message="Invalid or expired token") from exc

    parsed = parse_uuid(user_id)
    user = db.get(User, parsed) if parsed else None
    if not user:
        raise ApiError(status_code=401, code=ErrorCode.INVALID_USER, message="User not found")
    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise ApiError(status_code=401, code=ErrorCode.UNAUTHORIZED, message="Missing authorization token")
    return _user_from_token(db, credentials.credentials)


def get_viewer(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    x_admin_key: str | None = Header(default=None, alias="X-Admin-Key"),
    db: Session = Depends(get_db),
) -> Viewer:
    if is_admin_key(x_admin_key):
        return Viewer(user=None, is_admin=True)
    if credentials is None:
        raise ApiError(status_code=401, code=ErrorCode.UNAUTHORIZED, message="Missing authorization token")
    user = _user_from_token(db, credentials.credentials)
    return Viewer(user=user, is_admin=user.role == "CREATOR")


def require_admin(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    viewer.require_admin()
    return viewer


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentViewer = Annotated[Viewer, Depends(get_viewer)]
AdminViewer = Annotated[Viewer, Depends(require_admin)]
