from datetime import datetime

from pydantic import BaseModel, Field


class TicketCreateRequest(BaseModel):
    type: str = Field(pattern="^(question|bug|help_chat)$")
    subject: str | None = Field(default=None, max_length=500)
    message: str = Field(min_length=1)
    priority: str | None = Field(default=None, pattern="^(low|medium|high)$")


class TicketStatusUpdateRequest(BaseModel):
    status: str = Field(pattern="^(open|resolved)$")


class SupportTicket(BaseModel):
    id: str
    type: str
    student_id: str
    student_name: str
    student_email: str
    subject: str
    message: str
    status: str
    priority: str | None = None
    timestamp: datetime
