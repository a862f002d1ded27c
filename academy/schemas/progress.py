from datetime import datetime

from pydantic import BaseModel

# course_id -> completed lesson ids
StudentProgress = dict[str, list[str]]
# user_id -> StudentProgress
GlobalProgressData = dict[str, StudentProgress]


class ProgressUpdateRequest(BaseModel):
    completed_lessons: list[str]


class ProgressUpdateResponse(BaseModel):
    accepted: bool
    server_time: datetime
