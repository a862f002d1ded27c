import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.core.security import now_utc
from academy.models import SupportTicket, User
from academy.schemas.tickets import SupportTicket as TicketOut
from academy.schemas.tickets import TicketCreateRequest
from academy.services.lookup import parse_uuid


def default_subject(ticket_type: str) -> str:
    return "Bug Report" if ticket_type == "bug" else "General Inquiry"


def default_priority(ticket_type: str) -> str:
    return "high" if ticket_type == "bug" else "medium"


def to_schema(row: SupportTicket) -> TicketOut:
    return TicketOut(
        id=str(row.id),
        type=row.type,
        student_id=str(row.student_id),
        student_name=row.student_name,
        student_email=row.student_email,
        subject=row.subject,
        message=row.message,
        status=row.status,
        priority=row.priority,
        timestamp=row.timestamp,
    )


def list_tickets(db: Session, student_id: uuid.UUID | None = None) -> list[SupportTicket]:
    stmt = select(SupportTicket).order_by(SupportTicket.timestamp.desc())
    if student_id is not None:
        stmt = stmt.where(SupportTicket.student_id == student_id)
    return list(db.execute(stmt).scalars().all())


def create_ticket(db: Session, student: User, payload: TicketCreateRequest) -> SupportTicket:
    subject = (payload.subject or "").strip() or default_subject(payload.type)
    row = SupportTicket(
        type=payload.type,
        student_id=student.id,
        student_name=student.name,
        student_email=student.email,
        subject=subject,
        message=payload.message,
        status="open",
        priority=payload.priority or default_priority(payload.type),
        timestamp=now_utc(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def update_ticket_status(db: Session, ticket_id: str, status: str) -> SupportTicket:
    parsed = parse_uuid(ticket_id)
    row = db.get(SupportTicket, parsed) if parsed else None
    if not row:
        raise ApiError(status_code=404, code=ErrorCode.TICKET_NOT_FOUND, message="Ticket not found")
    row.status = status
    db.commit()
    db.refresh(row)
    return row
