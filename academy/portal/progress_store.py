import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, Protocol

from pydantic import ValidationError

from academy.portal.errors import PortalApiError
from academy.schemas.progress import GlobalProgressData, StudentProgress

logger = logging.getLogger(__name__)


class ProgressRemote(Protocol):
    def update(self, user_id: str, course_id: str, lesson_ids: list[str]) -> Awaitable[Any]: ...


class ProgressStore:
    """Completed lessons per (student, course), updated optimistically.

    Every toggle is visible immediately and pushed to the API in the
    background. A failed push is logged and the local value is kept; there is
    no ordering between pushes, so the server keeps whichever lands last.
    """

    def __init__(self, remote: ProgressRemote, data: GlobalProgressData | None = None):
        self._remote = remote
        self._data: GlobalProgressData = {}
        self._pending: set[asyncio.Task] = set()
        if data:
            self.replace_all(data)

    def replace_all(self, data: GlobalProgressData) -> None:
        self._data = {
            student_id: {course_id: list(lessons) for course_id, lessons in courses.items()}
            for student_id, courses in data.items()
        }

    def completed(self, student_id: str, course_id: str) -> list[str]:
        return list(self._data.get(student_id, {}).get(course_id, []))

    def for_student(self, student_id: str) -> StudentProgress:
        return {course_id: list(lessons) for course_id, lessons in self._data.get(student_id, {}).items()}

    def toggle_lesson(self, student_id: str, course_id: str, lesson_id: str) -> list[str]:
        """Flip one lesson and return the new completed list for the course.

        Must be called from a running event loop; the remote save is scheduled on it.
        """
        loop = asyncio.get_running_loop()
        lessons = self.completed(student_id, course_id)
        if lesson_id in lessons:
            lessons.remove(lesson_id)
        else:
            lessons.append(lesson_id)

        self._data.setdefault(student_id, {})[course_id] = lessons
        self._schedule_save(loop, student_id, course_id, list(lessons))
        return list(lessons)

    def _schedule_save(self, loop: asyncio.AbstractEventLoop, student_id: str, course_id: str, lessons: list[str]) -> None:
        task = loop.create_task(self._save(student_id, course_id, lessons))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, student_id: str, course_id: str, lessons: list[str]) -> None:
        try:
            await self._remote.update(student_id, course_id, lessons)
        except (PortalApiError, ValidationError) as exc:
            logger.error("Failed to save progress student=%s course=%s: %s", student_id, course_id, exc)

    @property
    def pending_saves(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every background save scheduled so far."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
