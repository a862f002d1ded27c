import logging
from collections.abc import Awaitable
from typing import Protocol

from academy.core.error_codes import ErrorCode
from academy.portal.completion import CourseView
from academy.portal.errors import AlreadyClaimedError, PortalApiError
from academy.schemas.certificates import Certificate, CertificateCreateRequest
from academy.schemas.courses import Course
from academy.schemas.users import UserOut

logger = logging.getLogger(__name__)


class CertificateRemote(Protocol):
    def create(self, payload: CertificateCreateRequest) -> Awaitable[Certificate]: ...


class CoverRemote(Protocol):
    def get_cover(self, course_id: str) -> Awaitable[str | None]: ...


class CertificateIssuer:
    def __init__(self, remote: CertificateRemote, covers: CoverRemote | None = None):
        self._remote = remote
        self._covers = covers

    async def _course_image(self, course: CourseView) -> str:
        if isinstance(course, Course):
            return course.ecover_url
        # Summaries only carry has_cover; the image itself lives behind /cover.
        if self._covers is None or not course.has_cover:
            return ""
        return await self._covers.get_cover(course.id) or ""

    async def claim(self, student: UserOut, course: CourseView, existing: list[Certificate]) -> Certificate:
        """Issue one certificate for (student, course) and append it to ``existing``.

        Raises AlreadyClaimedError when ``existing`` already holds one or the
        server reports a conflict. Other API failures propagate and leave
        ``existing`` untouched.
        """
        if any(cert.student_id == student.id and cert.course_id == course.id for cert in existing):
            raise AlreadyClaimedError(student.id, course.id)

        payload = CertificateCreateRequest(
            student_id=student.id,
            student_name=student.name,
            course_id=course.id,
            course_title=course.title,
            course_image=await self._course_image(course),
        )
        try:
            certificate = await self._remote.create(payload)
        except PortalApiError as exc:
            if exc.status_code == 409 and exc.code == ErrorCode.CERTIFICATE_ALREADY_CLAIMED:
                raise AlreadyClaimedError(student.id, course.id) from exc
            logger.error("Certificate creation failed student=%s course=%s: %s", student.id, course.id, exc)
            raise

        existing.append(certificate)
        return certificate
