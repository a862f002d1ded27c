from __future__ import annotations

import logging
import uuid
from collections import Counter

from sqlalchemy import delete as sql_delete
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import now_utc
from academy.models import Course, LessonProgress, User
from academy.schemas.courses import Course as CourseOut
from academy.schemas.courses import CourseDocument, CourseSummary
from academy.services.lookup import get_course_or_404, parse_uuid

logger = logging.getLogger(__name__)


def _check_unique_lesson_ids(document: CourseDocument) -> None:
    counts = Counter(document.iter_lesson_ids())
    duplicates = sorted(lesson_id for lesson_id, count in counts.items() if count > 1)
    if duplicates:
        raise ApiError(
            status_code=422,
            code=ErrorCode.DUPLICATE_LESSON_ID,
            message="Lesson ids must be unique within a course",
            details={"lesson_ids": duplicates},
        )


def _document_data(document: CourseDocument, course_id: uuid.UUID) -> dict:
    data = document.model_dump(mode="json")
    data["id"] = str(course_id)
    return data


def to_full(course: Course) -> CourseOut:
    return CourseOut.model_validate({**course.data, "id": str(course.id)})


def to_summary(course: Course) -> CourseSummary:
    data = course.data or {}
    modules = data.get("modules") or []
    lesson_ids = [
        str(lesson.get("id"))
        for module in modules
        for lesson in (module.get("lessons") or [])
        if lesson.get("id")
    ]
    return CourseSummary(
        id=str(course.id),
        type=data.get("type") or "course",
        title=data.get("title") or "Untitled Course",
        headline=data.get("headline") or "",
        description=data.get("description") or "",
        status=data.get("status") or "DRAFT",
        has_cover=bool(data.get("ecover_url")),
        module_count=len(modules),
        lesson_ids=lesson_ids,
        created_at=course.created_at.isoformat() if course.created_at else None,
        updated_at=course.updated_at.isoformat() if course.updated_at else None,
    )


def list_course_summaries(db: Session) -> list[CourseSummary]:
    """Return the lightweight projection of every course, newest first."""
    courses = db.execute(select(Course).order_by(Course.created_at.desc())).scalars().all()
    return [to_summary(course) for course in courses]


def create_course(db: Session, document: CourseDocument) -> Course:
    _check_unique_lesson_ids(document)
    # Keep a client-chosen id only when it is already a UUID.
    course_id = parse_uuid(document.id) if document.id else None
    course_id = course_id or uuid.uuid4()

    now = now_utc()
    course = Course(id=course_id, data=_document_data(document, course_id), created_at=now, updated_at=now)
    db.add(course)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ApiError(status_code=409, code=ErrorCode.COURSE_CONFLICT, message="Course already exists") from exc
    db.refresh(course)
    logger.info("Course created: %s (%s)", course.id, document.title)
    return course


def update_course(db: Session, course_id: str, document: CourseDocument) -> Course:
    course = get_course_or_404(db, course_id)
    _check_unique_lesson_ids(document)
    course.data = _document_data(document, course.id)
    course.updated_at = now_utc()
    db.commit()
    db.refresh(course)
    return course


def get_cover(db: Session, course_id: str) -> str:
    course = get_course_or_404(db, course_id)
    cover = (course.data or {}).get("ecover_url") or ""
    if not cover:
        raise ApiError(status_code=404, code=ErrorCode.COVER_NOT_FOUND, message="No cover image")
    return cover


def delete_course(db: Session, course_id: str) -> None:
    """Hard-delete a course and its progress rows, and unassign it from every student.

    Certificates are kept: they are issued records, not course content.
    """
    course = get_course_or_404(db, course_id)
    course_key = str(course.id)

    for user in db.execute(select(User)).scalars().all():
        assigned = list(user.assigned_course_ids or [])
        if course_key in assigned:
            user.assigned_course_ids = [value for value in assigned if value != course_key]

    db.execute(sql_delete(LessonProgress).where(LessonProgress.course_id == course.id))
    db.delete(course)
    db.commit()
    logger.info("Course deleted: %s", course_key)
