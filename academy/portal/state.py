import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from academy.portal.access import resolve_visible_courses
from academy.portal.certificates import CertificateIssuer
from academy.portal.client import ApiClient
from academy.portal.completion import CompletionStatus, CourseView, classify, dashboard_stats, percent
from academy.portal.config import PortalSettings, get_portal_settings
from academy.portal.course_cache import CourseCache
from academy.portal.errors import PortalApiError, PortalError
from academy.portal.progress_store import ProgressStore
from academy.portal.retry import linear_backoff, retry_async
from academy.portal.session_store import Session, SessionStore
from academy.portal.storage import LocalStorage
from academy.schemas.certificates import Certificate
from academy.schemas.courses import Course, CourseSummary
from academy.schemas.tickets import SupportTicket, TicketCreateRequest
from academy.schemas.users import UserOut

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CourseProgress:
    course: CourseSummary
    completed_lessons: list[str]
    percent: int
    status: CompletionStatus


@dataclass
class Dashboard:
    courses: list[CourseProgress] = field(default_factory=list)
    completed_count: int = 0
    in_progress_count: int = 0
    certificates: list[Certificate] = field(default_factory=list)


class PortalState:
    """Student-side state for one signed-in session."""

    def __init__(
        self,
        client: ApiClient,
        storage: LocalStorage,
        settings: PortalSettings | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.settings = settings or get_portal_settings()
        self.client = client
        self.sessions = SessionStore(storage)
        self.course_cache = CourseCache(storage)
        self.progress = ProgressStore(client.progress)
        self.certificate_issuer = CertificateIssuer(client.certificates, client.courses)
        self._sleep = sleep

        self.session: Session | None = None
        self.courses: list[CourseSummary] = []
        self.users: list[UserOut] = []
        self.tickets: list[SupportTicket] = []
        self.certificates: list[Certificate] = []
        self.is_loading = False

    @classmethod
    def from_settings(cls, settings: PortalSettings | None = None) -> "PortalState":
        settings = settings or get_portal_settings()
        storage = LocalStorage(settings.state_dir, quota_bytes=settings.storage_quota_bytes)
        return cls(ApiClient.from_settings(settings), storage, settings)

    @property
    def current_user(self) -> UserOut | None:
        return self.session.user if self.session else None

    def _require_user(self) -> UserOut:
        if self.session is None:
            raise PortalError("Not signed in")
        return self.session.user

    def _use_session(self, session: Session | None) -> None:
        self.session = session
        self.client.set_access_token(session.access_token if session else None)

    async def _load_or_default(self, fetch: Callable[[], Awaitable[T]], default: T, label: str) -> T:
        try:
            return await fetch()
        except PortalApiError as exc:
            logger.warning("Could not load %s: %s", label, exc)
            return default

    async def bootstrap(self) -> None:
        """Restore the session, paint from cache, then refresh everything from the API."""
        self.is_loading = True
        try:
            self._use_session(self.sessions.load())
            self.courses = self.course_cache.load()

            loaded = await retry_async(
                self.client.courses.get_all,
                attempts=self.settings.load_retry_attempts,
                delay=linear_backoff(self.settings.load_retry_delay_seconds),
                sleep=self._sleep,
                label="course list",
            )
            if loaded:
                self.courses = loaded
                self.course_cache.save(loaded)
            else:
                logger.info("Keeping %d cached courses", len(self.courses))

            tickets, users, progress, certificates = await asyncio.gather(
                self._load_or_default(self.client.tickets.get_all, [], "tickets"),
                self._load_or_default(self.client.users.get_all, [], "users"),
                self._load_or_default(self.client.progress.get_all, {}, "progress"),
                self._load_or_default(self.client.certificates.get_all, [], "certificates"),
            )
            self.tickets = tickets
            self.users = users
            self.progress.replace_all(progress)
            self.certificates = certificates
        finally:
            self.is_loading = False

    async def login(self, email: str, password: str) -> UserOut | None:
        session = await self.client.auth.login(email, password)
        if session is None:
            return None
        self._use_session(session)
        self.sessions.save(session)

        courses, progress, certificates = await asyncio.gather(
            self._load_or_default(self.client.courses.get_all, [], "course list"),
            self._load_or_default(self.client.progress.get_all, {}, "progress"),
            self._load_or_default(self.client.certificates.get_all, [], "certificates"),
        )
        if courses:
            self.courses = courses
            self.course_cache.save(courses)
        self.progress.replace_all(progress)
        self.certificates = certificates
        return session.user

    def logout(self) -> None:
        self._use_session(None)
        self.sessions.clear()
        self.progress.replace_all({})
        self.certificates = []
        self.tickets = []

    def visible_courses(self) -> list[CourseSummary]:
        user = self.current_user
        if user is None:
            return []
        return resolve_visible_courses(user.assigned_course_ids, self.courses)

    def dashboard(self) -> Dashboard:
        user = self.current_user
        if user is None:
            return Dashboard()

        visible = self.visible_courses()
        progress = self.progress.for_student(user.id)
        stats = dashboard_stats(visible, progress)
        rows = []
        for course in visible:
            completed = progress.get(course.id, [])
            rows.append(
                CourseProgress(
                    course=course,
                    completed_lessons=completed,
                    percent=percent(course, completed),
                    status=classify(course, completed),
                )
            )
        return Dashboard(
            courses=rows,
            completed_count=stats.completed_count,
            in_progress_count=stats.in_progress_count,
            certificates=[cert for cert in self.certificates if cert.student_id == user.id],
        )

    async def open_course(self, course_id: str) -> Course:
        return await self.client.courses.get(course_id)

    def toggle_lesson(self, course_id: str, lesson_id: str) -> list[str]:
        user = self._require_user()
        return self.progress.toggle_lesson(user.id, course_id, lesson_id)

    async def claim_certificate(self, course: CourseView) -> Certificate:
        user = self._require_user()
        return await self.certificate_issuer.claim(user, course, self.certificates)

    async def submit_ticket(
        self,
        ticket_type: str,
        message: str,
        subject: str | None = None,
        priority: str | None = None,
    ) -> SupportTicket:
        self._require_user()
        ticket = await self.client.tickets.create(
            TicketCreateRequest(type=ticket_type, subject=subject, message=message, priority=priority)
        )
        self.tickets.insert(0, ticket)
        return ticket

    async def aclose(self) -> None:
        try:
            await self.progress.drain()
        finally:
            await self.client.aclose()
