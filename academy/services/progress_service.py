import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import now_utc
from academy.models import LessonProgress
from academy.schemas.progress import GlobalProgressData, StudentProgress
from academy.schemas.users import normalize_id_list
from academy.services.course_service import to_summary
from academy.services.lookup import get_course_or_404, get_user_or_404

logger = logging.getLogger(__name__)


def global_progress(db: Session, user_id: uuid.UUID | None = None) -> GlobalProgressData:
    stmt = select(LessonProgress)
    if user_id is not None:
        stmt = stmt.where(LessonProgress.user_id == user_id)
    result: GlobalProgressData = {}
    for row in db.execute(stmt).scalars().all():
        result.setdefault(str(row.user_id), {})[str(row.course_id)] = list(row.completed_lessons or [])
    return result


def student_progress(db: Session, user_id: str) -> StudentProgress:
    user = get_user_or_404(db, user_id)
    return global_progress(db, user.id).get(str(user.id), {})


def _check_known_lessons(lessons: list[str], course_lesson_ids: list[str]) -> None:
    known = set(course_lesson_ids)
    unknown = [lesson_id for lesson_id in lessons if lesson_id not in known]
    if unknown:
        raise ApiError(
            status_code=422,
            code=ErrorCode.UNKNOWN_LESSON_ID,
            message="Completed lessons must belong to the course",
            details={"lesson_ids": unknown},
        )


def save_progress(db: Session, user_id: str, course_id: str, completed_lessons: list[str]) -> LessonProgress:
    """Upsert the completed-lesson set for (user, course). Last write wins."""
    user = get_user_or_404(db, user_id)
    course = get_course_or_404(db, course_id)
    lessons = normalize_id_list(completed_lessons)
    _check_known_lessons(lessons, to_summary(course).lesson_ids)

    row = _find_row(db, user.id, course.id)
    if row is None:
        row = LessonProgress(user_id=user.id, course_id=course.id, completed_lessons=lessons, updated_at=now_utc())
        db.add(row)
        try:
            db.commit()
        except IntegrityError:
            # Lost an insert race for the same pair; fall through to the update path.
            db.rollback()
            row = _find_row(db, user.id, course.id)
            if row is None:
                raise
            row.completed_lessons = lessons
            row.updated_at = now_utc()
            db.commit()
    else:
        row.completed_lessons = lessons
        row.updated_at = now_utc()
        db.commit()

    logger.debug("Progress saved user=%s course=%s lessons=%d", user.id, course.id, len(lessons))
    return row


def _find_row(db: Session, user_id: uuid.UUID, course_id: uuid.UUID) -> LessonProgress | None:
    return db.execute(
        select(LessonProgress).where(LessonProgress.user_id == user_id, LessonProgress.course_id == course_id)
    ).scalars().first()
