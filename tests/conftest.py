import os
from collections.abc import Callable
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from httpx import Client
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from academy.core.config import get_settings
from academy.db.base import Base
from academy.db.session import get_db
from academy.main import app
from academy.schemas.courses import Course, CourseSummary, Lesson, Module


RUN_INTEGRATION = os.getenv("RUN_INTEGRATION") == "1"
BASE_URL = os.getenv("BASE_URL", "http://localhost:10723")

TEST_ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"X-Admin-Key": TEST_ADMIN_KEY}


@pytest.fixture(scope="session")
def base_url() -> str:
    return BASE_URL


@pytest.fixture(scope="session")
def client(base_url: str):
    with Client(base_url=base_url, timeout=20.0) as c:
        yield c


@pytest.fixture(scope="session")
def integration_enabled() -> bool:
    return RUN_INTEGRATION


@pytest.fixture()
def session_factory(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'academy.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture()
def app_client(session_factory, monkeypatch):
    """TestClient on the real app backed by a throwaway SQLite database (no startup seeding)."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(get_settings(), "admin_api_key", TEST_ADMIN_KEY)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def register(app_client) -> Callable[..., tuple[dict, dict[str, str]]]:
    """Register a student; returns (user, auth headers)."""

    def _register(name: str = "Student", email: str | None = None, password: str = "Secret-pass-1"):
        email = email or f"student_{uuid4().hex[:8]}@example.com"
        resp = app_client.post("/v1/auth/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], {"Authorization": f"Bearer {body['access_token']}"}

    return _register


def course_payload(title: str = "Interview Skills", lesson_counts: tuple[int, ...] = (3, 2), **extra) -> dict:
    """Course document with lesson ids l1..lN numbered across modules."""
    modules = []
    next_lesson = 1
    for module_index, count in enumerate(lesson_counts, start=1):
        lessons = []
        for _ in range(count):
            lessons.append({"id": f"l{next_lesson}", "module_id": f"m{module_index}", "title": f"Lesson {next_lesson}"})
            next_lesson += 1
        modules.append({"id": f"m{module_index}", "title": f"Module {module_index}", "lessons": lessons})
    return {"title": title, "status": "PUBLISHED", "modules": modules, **extra}


@pytest.fixture()
def create_course(app_client) -> Callable[..., dict]:
    def _create(title: str = "Interview Skills", lesson_counts: tuple[int, ...] = (3, 2), **extra) -> dict:
        resp = app_client.post("/v1/courses", headers=ADMIN_HEADERS, json=course_payload(title, lesson_counts, **extra))
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


def make_course(course_id: str, lesson_counts: tuple[int, ...] = (3, 2), title: str = "Course", **lesson_flags) -> Course:
    """Full course with lesson ids l1..lN; ``lesson_flags`` maps lesson id -> awards_certificate."""
    modules = []
    next_lesson = 1
    for module_index, count in enumerate(lesson_counts, start=1):
        lessons = []
        for _ in range(count):
            lesson_id = f"l{next_lesson}"
            lessons.append(Lesson(id=lesson_id, awards_certificate=lesson_flags.get(lesson_id)))
            next_lesson += 1
        modules.append(Module(id=f"m{module_index}", lessons=lessons))
    return Course(id=course_id, title=title, modules=modules)


def make_summary(course_id: str, lesson_ids: list[str] | None = None, title: str = "Course") -> CourseSummary:
    return CourseSummary(id=course_id, title=title, lesson_ids=lesson_ids or [])
