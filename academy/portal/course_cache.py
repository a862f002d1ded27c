import logging

from pydantic import TypeAdapter, ValidationError

from academy.portal.errors import StorageQuotaError
from academy.portal.storage import LocalStorage
from academy.schemas.courses import CourseSummary

logger = logging.getLogger(__name__)

CACHE_KEY = "courses_cache"

_summaries = TypeAdapter(list[CourseSummary])


class CourseCache:
    """Last successfully fetched course list, used for the first paint."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def load(self) -> list[CourseSummary]:
        raw = self.storage.get(CACHE_KEY)
        if raw is None:
            return []
        try:
            courses = _summaries.validate_python(raw)
        except ValidationError:
            logger.warning("Discarding corrupt course cache")
            return []
        logger.info("Loaded %d courses from cache", len(courses))
        return courses

    def save(self, courses: list[CourseSummary]) -> bool:
        try:
            self.storage.set(CACHE_KEY, _summaries.dump_python(courses, mode="json"))
        except StorageQuotaError as exc:
            # Never leave a stale list behind a failed write.
            logger.warning("Course cache quota exceeded, dropping cache: %s", exc)
            self.storage.remove(CACHE_KEY)
            return False
        return True
