from pydantic import BaseModel, EmailStr, Field, field_validator


def normalize_id_list(ids: list[str]) -> list[str]:
    """Drop blanks and repeats, keeping first-occurrence order."""
    seen: set[str] = set()
    result: list[str] = []
    for raw in ids:
        value = raw.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


class UserOut(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: str
    avatar_url: str = ""
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    assigned_course_ids: list[str] = Field(default_factory=list)


class UserUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)
    role: str | None = Field(default=None, pattern="^(CREATOR|STUDENT)$")
    avatar_url: str | None = None
    phone: str | None = None
    city: str | None = None
    state: str | None = None
    assigned_course_ids: list[str] | None = None

    @field_validator("assigned_course_ids")
    @classmethod
    def _dedupe_course_ids(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return normalize_id_list(value)
