import uuid

from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.models import Course, User


def parse_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def get_user_or_404(db: Session, user_id: str) -> User:
    parsed = parse_uuid(user_id)
    user = db.get(User, parsed) if parsed else None
    if not user:
        raise ApiError(status_code=404, code=ErrorCode.USER_NOT_FOUND, message="User not found")
    return user


def get_course_or_404(db: Session, course_id: str) -> Course:
    parsed = parse_uuid(course_id)
    course = db.get(Course, parsed) if parsed else None
    if not course:
        raise ApiError(status_code=404, code=ErrorCode.COURSE_NOT_FOUND, message="Course not found")
    return course
