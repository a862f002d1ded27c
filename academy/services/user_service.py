from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import hash_password
from academy.models import Certificate, LessonProgress, SupportTicket, User
from academy.schemas.users import UserUpdateRequest
from academy.services.lookup import get_user_or_404


def list_users(db: Session) -> list[User]:
    return list(db.execute(select(User).order_by(User.created_at.asc())).scalars().all())


def update_user(db: Session, user_id: str, payload: UserUpdateRequest) -> User:
    user = get_user_or_404(db, user_id)
    for field in ["name", "avatar_url", "phone", "city", "state", "role"]:
        value = getattr(payload, field)
        if value is not None:
            setattr(user, field, value.strip())
    if payload.email is not None:
        user.email = payload.email.lower().strip()
    if payload.password:
        user.password_hash = hash_password(payload.password)
    if payload.assigned_course_ids is not None:
        user.assigned_course_ids = list(payload.assigned_course_ids)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ApiError(status_code=400, code=ErrorCode.EMAIL_ALREADY_REGISTERED, message="Email already registered") from exc
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> None:
    """Hard-delete a user together with their progress, certificates and tickets."""
    user = get_user_or_404(db, user_id)
    db.execute(sql_delete(LessonProgress).where(LessonProgress.user_id == user.id))
    db.execute(sql_delete(Certificate).where(Certificate.student_id == user.id))
    db.execute(sql_delete(SupportTicket).where(SupportTicket.student_id == user.id))
    db.delete(user)
    db.commit()
