from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.api.deps import CurrentViewer
from academy.db.session import get_db
from academy.schemas.certificates import Certificate, CertificateCreateRequest
from academy.services.certificate_service import issue_certificate, list_certificates, to_schema

router = APIRouter(prefix="/v1/certificates", tags=["certificates"])


@router.get("", response_model=list[Certificate])
def list_certificates_endpoint(viewer: CurrentViewer, db: Session = Depends(get_db)) -> list[Certificate]:
    student_id = None if viewer.is_admin else viewer.user.id
    return [to_schema(row) for row in list_certificates(db, student_id)]


@router.post("", response_model=Certificate, status_code=status.HTTP_201_CREATED)
def create_certificate(
    payload: CertificateCreateRequest,
    viewer: CurrentViewer,
    db: Session = Depends(get_db),
) -> Certificate:
    viewer.require_access(payload.student_id)
    return to_schema(issue_certificate(db, payload))
