from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar


class _HasId(Protocol):
    id: str


CourseT = TypeVar("CourseT", bound=_HasId)


def resolve_visible_courses(assigned_course_ids: Sequence[str] | None, catalog: Iterable[CourseT]) -> list[CourseT]:
    """Courses a student may see, in assignment order.

    Ids missing from the catalog are skipped. No assignment means no courses.
    """
    if not assigned_course_ids:
        return []

    by_id = {course.id: course for course in catalog}
    visible: list[CourseT] = []
    seen: set[str] = set()
    for course_id in assigned_course_ids:
        course = by_id.get(course_id)
        if course is None or course_id in seen:
            continue
        seen.add(course_id)
        visible.append(course)
    return visible
