import pytest

from academy.portal.completion import (
    CompletionStatus,
    certificate_lessons,
    classify,
    course_duration_seconds,
    dashboard_stats,
    is_certificate_eligible,
    lesson_duration_seconds,
    percent,
    resume_position,
    total_lessons,
)
from academy.schemas.courses import Course, Lesson, Module

from conftest import make_course, make_summary


def test_three_of_five_lessons_is_sixty_percent_in_progress():
    course = make_course("c1", (3, 2))

    assert total_lessons(course) == 5
    assert percent(course, ["l1", "l2", "l3"]) == 60
    assert classify(course, ["l1", "l2", "l3"]) is CompletionStatus.IN_PROGRESS


def test_empty_course_is_zero_and_not_started_whatever_is_stored():
    course = make_course("c1", ())

    assert percent(course, ["l1", "l2"]) == 0
    assert classify(course, ["l1", "l2"]) is CompletionStatus.NOT_STARTED


@pytest.mark.parametrize("done,expected", [(0, 0), (1, 17), (3, 50), (5, 83), (6, 100)])
def test_percent_rounds_to_nearest(done, expected):
    course = make_course("c1", (6,))

    assert percent(course, [f"l{i}" for i in range(1, done + 1)]) == expected


def test_percent_rounds_half_up():
    # 1/8 = 12.5%
    course = make_course("c1", (8,))

    assert percent(course, ["l1"]) == 13


def test_completed_exactly_when_percent_is_100():
    course = make_course("c1", (2, 1))

    for completed in ([], ["l1"], ["l1", "l2"], ["l1", "l2", "l3"]):
        status = classify(course, completed)
        assert (status is CompletionStatus.COMPLETED) == (percent(course, completed) == 100)


def test_ids_from_other_courses_do_not_count():
    course = make_course("c1", (2,))

    assert percent(course, ["l1", "stale", "other-course-lesson"]) == 50
    assert classify(course, ["stale"]) is CompletionStatus.NOT_STARTED


def test_summary_projection_gives_same_numbers_as_full_course():
    full = make_course("c1", (3, 2))
    summary = make_summary("c1", ["l1", "l2", "l3", "l4", "l5"])

    assert total_lessons(summary) == total_lessons(full)
    assert percent(summary, ["l1", "l4"]) == percent(full, ["l1", "l4"]) == 40


def test_dashboard_stats_tallies_classifications():
    courses = [make_summary("a", ["x1", "x2"]), make_summary("b", ["y1"]), make_summary("c", ["z1"]), make_summary("d")]
    progress = {"a": ["x1"], "b": ["y1"], "d": ["anything"]}

    stats = dashboard_stats(courses, progress)

    assert stats.completed_count == 1
    assert stats.in_progress_count == 1


def test_certificate_lessons_default_to_every_lesson():
    course = make_course("c1", (2, 1))

    assert [lesson.id for lesson in certificate_lessons(course)] == ["l1", "l2", "l3"]
    assert not is_certificate_eligible(course, ["l1", "l2"])
    assert is_certificate_eligible(course, ["l1", "l2", "l3"])


def test_flagged_lessons_define_certificate_requirement():
    course = make_course("c1", (2, 1), l3=True, l1=False)

    assert [lesson.id for lesson in certificate_lessons(course)] == ["l3"]
    assert is_certificate_eligible(course, ["l3"])


def test_course_with_only_false_flags_awards_no_certificate():
    course = make_course("c1", (2,), l1=False)

    assert certificate_lessons(course) == []
    assert not is_certificate_eligible(course, ["l1", "l2"])


def test_resume_position_is_first_unfinished_lesson():
    course = make_course("c1", (2, 2))

    assert resume_position(course, []) == (0, 0)
    assert resume_position(course, ["l1", "l2"]) == (1, 0)
    assert resume_position(course, ["l1", "l2", "l3"]) == (1, 1)
    assert resume_position(course, ["l1", "l2", "l3", "l4"]) == (0, 0)


def test_durations_use_seconds_then_clock_text():
    assert lesson_duration_seconds(Lesson(id="a", duration_seconds=90, duration="10:00")) == 90
    assert lesson_duration_seconds(Lesson(id="b", duration="12:15")) == 735
    assert lesson_duration_seconds(Lesson(id="c", duration="1:02:03")) == 3723
    assert lesson_duration_seconds(Lesson(id="d", duration="about ten minutes")) == 0

    course = Course(
        id="c1",
        title="Timing",
        modules=[Module(id="m1", lessons=[Lesson(id="a", duration="1:00"), Lesson(id="b", duration_seconds=30), Lesson(id="c")])],
    )
    assert course_duration_seconds(course) == 90
