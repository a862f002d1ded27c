from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict, Field


class Lesson(BaseModel):
    # Lessons carry authoring/media fields (visuals, audio, captions) that are stored as-is.
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    module_id: str = ""
    title: str = ""
    duration: str = ""
    duration_seconds: int | None = None
    status: str = "DRAFT"
    awards_certificate: bool | None = None


class Module(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    title: str = ""
    lessons: list[Lesson] = Field(default_factory=list)


class CourseDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str = Field(default="course", pattern="^(course|video)$")
    title: str = Field(min_length=1, max_length=500)
    headline: str = ""
    description: str = ""
    ecover_url: str = ""
    status: str = Field(default="DRAFT", pattern="^(DRAFT|PROCESSING|PUBLISHED)$")
    modules: list[Module] = Field(default_factory=list)
    total_students: int = 0
    rating: float = 0

    def iter_lessons(self) -> Iterator[Lesson]:
        for module in self.modules:
            yield from module.lessons

    def iter_lesson_ids(self) -> Iterator[str]:
        for lesson in self.iter_lessons():
            yield lesson.id


class Course(CourseDocument):
    """Full projection: every module, lesson and the cover image."""

    id: str


class CourseSummary(BaseModel):
    """Lightweight projection served by the catalog listing.

    Lesson bodies and the cover image are left out; lesson ids stay so that
    completion can be computed without fetching the full course.
    """

    id: str
    type: str = "course"
    title: str
    headline: str = ""
    description: str = ""
    status: str = "DRAFT"
    has_cover: bool = False
    module_count: int = 0
    lesson_ids: list[str] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    def iter_lesson_ids(self) -> Iterator[str]:
        yield from self.lesson_ids


class CoverResponse(BaseModel):
    ecover_url: str
