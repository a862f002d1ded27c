from datetime import datetime

from pydantic import BaseModel, Field


class CertificateCreateRequest(BaseModel):
    student_id: str = Field(min_length=1)
    student_name: str = ""
    course_id: str = Field(min_length=1)
    course_title: str = ""
    course_image: str = ""


class Certificate(BaseModel):
    id: str
    student_id: str
    student_name: str
    course_id: str
    course_title: str
    course_image: str = ""
    issue_date: datetime
