import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import now_utc
from academy.models import Certificate
from academy.schemas.certificates import Certificate as CertificateOut
from academy.schemas.certificates import CertificateCreateRequest
from academy.services.lookup import get_user_or_404, parse_uuid

logger = logging.getLogger(__name__)


def _already_claimed() -> ApiError:
    return ApiError(
        status_code=409,
        code=ErrorCode.CERTIFICATE_ALREADY_CLAIMED,
        message="Certificate already issued for this course",
    )


def to_schema(row: Certificate) -> CertificateOut:
    return CertificateOut(
        id=str(row.id),
        student_id=str(row.student_id),
        student_name=row.student_name,
        course_id=str(row.course_id),
        course_title=row.course_title,
        course_image=row.course_image,
        issue_date=row.issue_date,
    )


def list_certificates(db: Session, student_id: uuid.UUID | None = None) -> list[Certificate]:
    stmt = select(Certificate).order_by(Certificate.issue_date.asc())
    if student_id is not None:
        stmt = stmt.where(Certificate.student_id == student_id)
    return list(db.execute(stmt).scalars().all())


def issue_certificate(db: Session, payload: CertificateCreateRequest) -> Certificate:
    """Record a certificate; at most one per (student, course).

    The pre-check gives the common case a clean answer, the unique constraint
    settles concurrent claims.
    """
    student = get_user_or_404(db, payload.student_id)
    course_id = parse_uuid(payload.course_id)
    if course_id is None:
        raise ApiError(status_code=400, code=ErrorCode.VALIDATION_ERROR, message="Invalid course id")

    existing = db.execute(
        select(Certificate.id).where(Certificate.student_id == student.id, Certificate.course_id == course_id)
    ).scalar_one_or_none()
    if existing:
        raise _already_claimed()

    row = Certificate(
        student_id=student.id,
        student_name=payload.student_name.strip() or student.name,
        course_id=course_id,
        course_title=payload.course_title.strip(),
        course_image=payload.course_image,
        issue_date=now_utc(),
    )
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _already_claimed() from exc
    db.refresh(row)
    logger.info("Certificate issued student=%s course=%s", student.id, course_id)
    return row
