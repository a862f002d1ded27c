import logging
from typing import Any

import httpx
from pydantic import TypeAdapter

from academy.portal.config import PortalSettings, get_portal_settings
from academy.portal.errors import NETWORK_ERROR, PortalApiError
from academy.portal.session_store import Session
from academy.schemas.auth import AuthResponse, RegisterRequest
from academy.schemas.certificates import Certificate, CertificateCreateRequest
from academy.schemas.courses import Course, CourseDocument, CourseSummary
from academy.schemas.progress import GlobalProgressData, ProgressUpdateResponse, StudentProgress
from academy.schemas.tickets import SupportTicket, TicketCreateRequest
from academy.schemas.users import UserOut, UserUpdateRequest

logger = logging.getLogger(__name__)

_users = TypeAdapter(list[UserOut])
_summaries = TypeAdapter(list[CourseSummary])
_certificates = TypeAdapter(list[Certificate])
_tickets = TypeAdapter(list[SupportTicket])
_global_progress = TypeAdapter(GlobalProgressData)
_student_progress = TypeAdapter(StudentProgress)


def _error_from_response(response: httpx.Response) -> PortalApiError:
    try:
        error = response.json()["error"]
        return PortalApiError(response.status_code, error["code"], error["message"])
    except (ValueError, KeyError, TypeError):
        return PortalApiError(response.status_code, "HTTP_ERROR", response.text or response.reason_phrase)


def _body(model) -> dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


class _AuthEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def login(self, email: str, password: str) -> Session | None:
        """Return the signed-in session, or ``None`` when login failed for any reason."""
        try:
            data = await self._client.request("POST", "/v1/auth/login", json={"email": email, "password": password})
        except PortalApiError as exc:
            logger.info("Login failed for %s: %s", email, exc)
            return None
        auth = AuthResponse.model_validate(data)
        return Session(user=auth.user, access_token=auth.access_token)

    async def register(self, payload: RegisterRequest) -> Session:
        data = await self._client.request("POST", "/v1/auth/register", json=_body(payload))
        auth = AuthResponse.model_validate(data)
        return Session(user=auth.user, access_token=auth.access_token)


class _UserEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def get_all(self) -> list[UserOut]:
        return _users.validate_python(await self._client.request("GET", "/v1/users"))

    async def get(self, user_id: str) -> UserOut:
        return UserOut.model_validate(await self._client.request("GET", f"/v1/users/{user_id}"))

    async def update(self, user_id: str, payload: UserUpdateRequest) -> UserOut:
        data = await self._client.request("PUT", f"/v1/users/{user_id}", json=_body(payload))
        return UserOut.model_validate(data)

    async def delete(self, user_id: str) -> None:
        await self._client.request("DELETE", f"/v1/users/{user_id}")


class _CourseEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def get_all(self) -> list[CourseSummary]:
        return _summaries.validate_python(await self._client.request("GET", "/v1/courses"))

    async def get(self, course_id: str) -> Course:
        return Course.model_validate(await self._client.request("GET", f"/v1/courses/{course_id}"))

    async def get_cover(self, course_id: str) -> str | None:
        try:
            data = await self._client.request("GET", f"/v1/courses/{course_id}/cover")
        except PortalApiError as exc:
            logger.debug("No cover for course %s: %s", course_id, exc)
            return None
        return data.get("ecover_url") or None

    async def create(self, document: CourseDocument) -> Course:
        return Course.model_validate(await self._client.request("POST", "/v1/courses", json=_body(document)))

    async def update(self, course_id: str, document: CourseDocument) -> Course:
        data = await self._client.request("PUT", f"/v1/courses/{course_id}", json=_body(document))
        return Course.model_validate(data)

    async def delete(self, course_id: str) -> None:
        await self._client.request("DELETE", f"/v1/courses/{course_id}")


class _ProgressEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def get_all(self) -> GlobalProgressData:
        return _global_progress.validate_python(await self._client.request("GET", "/v1/progress"))

    async def get_for_user(self, user_id: str) -> StudentProgress:
        return _student_progress.validate_python(await self._client.request("GET", f"/v1/progress/{user_id}"))

    async def update(self, user_id: str, course_id: str, lesson_ids: list[str]) -> ProgressUpdateResponse:
        data = await self._client.request(
            "PUT",
            f"/v1/progress/{user_id}/{course_id}",
            json={"completed_lessons": list(lesson_ids)},
        )
        return ProgressUpdateResponse.model_validate(data)


class _CertificateEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def get_all(self) -> list[Certificate]:
        return _certificates.validate_python(await self._client.request("GET", "/v1/certificates"))

    async def create(self, payload: CertificateCreateRequest) -> Certificate:
        return Certificate.model_validate(await self._client.request("POST", "/v1/certificates", json=_body(payload)))


class _TicketEndpoints:
    def __init__(self, client: "ApiClient"):
        self._client = client

    async def get_all(self) -> list[SupportTicket]:
        return _tickets.validate_python(await self._client.request("GET", "/v1/tickets"))

    async def create(self, payload: TicketCreateRequest) -> SupportTicket:
        return SupportTicket.model_validate(await self._client.request("POST", "/v1/tickets", json=_body(payload)))

    async def update_status(self, ticket_id: str, status: str) -> SupportTicket:
        data = await self._client.request("PUT", f"/v1/tickets/{ticket_id}/status", json={"status": status})
        return SupportTicket.model_validate(data)


class ApiClient:
    """Async client for the academy API, grouped by resource."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
        access_token: str | None = None,
        admin_key: str | None = None,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)
        self._access_token = access_token
        self._admin_key = admin_key

        self.auth = _AuthEndpoints(self)
        self.users = _UserEndpoints(self)
        self.courses = _CourseEndpoints(self)
        self.progress = _ProgressEndpoints(self)
        self.certificates = _CertificateEndpoints(self)
        self.tickets = _TicketEndpoints(self)

    @classmethod
    def from_settings(cls, settings: PortalSettings | None = None, **kwargs: Any) -> "ApiClient":
        settings = settings or get_portal_settings()
        return cls(settings.api_base_url, timeout=settings.request_timeout_seconds, **kwargs)

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        if self._admin_key:
            headers["X-Admin-Key"] = self._admin_key
        return headers

    async def request(self, method: str, path: str, *, json: Any = None) -> Any:
        try:
            response = await self._http.request(method, path, json=json, headers=self._headers())
        except httpx.HTTPError as exc:
            raise PortalApiError(0, NETWORK_ERROR, str(exc) or exc.__class__.__name__) from exc

        if response.status_code >= 400:
            raise _error_from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @property
    def is_closed(self) -> bool:
        return self._http.is_closed

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
