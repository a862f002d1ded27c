from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.api.deps import AdminViewer, CurrentUser, CurrentViewer
from academy.db.session import get_db
from academy.schemas.tickets import SupportTicket, TicketCreateRequest, TicketStatusUpdateRequest
from academy.services.ticket_service import create_ticket, list_tickets, to_schema, update_ticket_status

router = APIRouter(prefix="/v1/tickets", tags=["tickets"])


@router.get("", response_model=list[SupportTicket])
def list_tickets_endpoint(viewer: CurrentViewer, db: Session = Depends(get_db)) -> list[SupportTicket]:
    student_id = None if viewer.is_admin else viewer.user.id
    return [to_schema(row) for row in list_tickets(db, student_id)]


@router.post("", response_model=SupportTicket, status_code=status.HTTP_201_CREATED)
def create_ticket_endpoint(
    payload: TicketCreateRequest,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
) -> SupportTicket:
    return to_schema(create_ticket(db, current_user, payload))


@router.put("/{ticket_id}/status", response_model=SupportTicket)
def update_ticket_status_endpoint(
    ticket_id: str,
    payload: TicketStatusUpdateRequest,
    _: AdminViewer,
    db: Session = Depends(get_db),
) -> SupportTicket:
    return to_schema(update_ticket_status(db, ticket_id, payload.status))
