import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.security import hash_password, now_utc
from academy.models import Course, User

logger = logging.getLogger(__name__)

DEMO_CREATOR_EMAIL = "creator@example.com"


def _demo_course_data() -> dict:
    return {
        "type": "course",
        "title": "Job Search Foundations",
        "headline": "From resume to first offer",
        "description": "A short starter course covering resumes, interviews and negotiation.",
        "ecover_url": "",
        "status": "PUBLISHED",
        "total_students": 0,
        "rating": 0,
        "modules": [
            {
                "id": "m1",
                "title": "Getting Ready",
                "lessons": [
                    {"id": "m1-l1", "module_id": "m1", "title": "Writing Your Resume", "duration": "8:00", "status": "PUBLISHED"},
                    {"id": "m1-l2", "module_id": "m1", "title": "Your Online Profile", "duration": "6:30", "status": "PUBLISHED"},
                ],
            },
            {
                "id": "m2",
                "title": "Landing the Job",
                "lessons": [
                    {"id": "m2-l1", "module_id": "m2", "title": "Interview Basics", "duration": "12:15", "status": "PUBLISHED"},
                    {
                        "id": "m2-l2",
                        "module_id": "m2",
                        "title": "Negotiating Your Offer",
                        "duration": "10:00",
                        "status": "PUBLISHED",
                        "awards_certificate": True,
                    },
                ],
            },
        ],
    }


def seed_if_needed(db: Session) -> None:
    """Create a demo creator and course when the catalog is empty."""
    existing_course = db.execute(select(Course.id).limit(1)).scalars().first()
    if existing_course:
        return

    now = now_utc()
    course = Course(data=_demo_course_data(), created_at=now, updated_at=now)
    db.add(course)
    db.flush()
    course.data = {**course.data, "id": str(course.id)}

    creator = db.execute(select(User).where(User.email == DEMO_CREATOR_EMAIL)).scalars().first()
    if not creator:
        db.add(
            User(
                name="Academy Creator",
                email=DEMO_CREATOR_EMAIL,
                password_hash=hash_password("change-me-now"),
                role="CREATOR",
                avatar_url="",
                assigned_course_ids=[],
            )
        )

    db.commit()
    logger.info("Seeded demo course %s", course.id)
