import re
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import NamedTuple

from academy.schemas.courses import Course, CourseSummary, Lesson

CourseView = Course | CourseSummary

_CLOCK_PATTERN = re.compile(r"^\d+(:\d{1,2}){0,2}$")


class CompletionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class DashboardStats(NamedTuple):
    completed_count: int
    in_progress_count: int


def total_lessons(course: CourseView) -> int:
    return sum(1 for _ in course.iter_lesson_ids())


def completed_in_course(course: CourseView, completed: Iterable[str]) -> set[str]:
    """Completed ids that are actual lessons of ``course``; stale ids are ignored."""
    return set(completed) & set(course.iter_lesson_ids())


def percent(course: CourseView, completed: Iterable[str]) -> int:
    total = total_lessons(course)
    if total == 0:
        return 0
    done = len(completed_in_course(course, completed))
    # Integer round-half-up of 100 * done / total.
    return (200 * done + total) // (2 * total)


def classify(course: CourseView, completed: Iterable[str]) -> CompletionStatus:
    completed = list(completed)
    if total_lessons(course) == 0:
        return CompletionStatus.NOT_STARTED
    if percent(course, completed) == 100:
        return CompletionStatus.COMPLETED
    if completed_in_course(course, completed):
        return CompletionStatus.IN_PROGRESS
    return CompletionStatus.NOT_STARTED


def dashboard_stats(courses: Iterable[CourseView], progress: Mapping[str, list[str]]) -> DashboardStats:
    completed_count = 0
    in_progress_count = 0
    for course in courses:
        status = classify(course, progress.get(course.id, []))
        if status is CompletionStatus.COMPLETED:
            completed_count += 1
        elif status is CompletionStatus.IN_PROGRESS:
            in_progress_count += 1
    return DashboardStats(completed_count, in_progress_count)


def certificate_lessons(course: Course) -> list[Lesson]:
    """Lessons that must be completed to earn the certificate.

    Once any lesson sets ``awards_certificate`` (true or false) only the
    lessons flagged true count; a course with no flags at all counts every lesson.
    """
    lessons = list(course.iter_lessons())
    if any(lesson.awards_certificate is not None for lesson in lessons):
        return [lesson for lesson in lessons if lesson.awards_certificate is True]
    return lessons


def is_certificate_eligible(course: Course, completed: Iterable[str]) -> bool:
    required = certificate_lessons(course)
    done = set(completed)
    return bool(required) and all(lesson.id in done for lesson in required)


def resume_position(course: Course, completed: Iterable[str]) -> tuple[int, int]:
    """(module index, lesson index) of the first unfinished lesson, else (0, 0)."""
    done = set(completed)
    for module_index, module in enumerate(course.modules):
        for lesson_index, lesson in enumerate(module.lessons):
            if lesson.id not in done:
                return module_index, lesson_index
    return 0, 0


def lesson_duration_seconds(lesson: Lesson) -> int:
    if lesson.duration_seconds is not None:
        return max(lesson.duration_seconds, 0)
    value = lesson.duration.strip()
    if not _CLOCK_PATTERN.match(value):
        return 0
    seconds = 0
    for part in value.split(":"):
        seconds = seconds * 60 + int(part)
    return seconds


def course_duration_seconds(course: Course) -> int:
    return sum(lesson_duration_seconds(lesson) for lesson in course.iter_lessons())
