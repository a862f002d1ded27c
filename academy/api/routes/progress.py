from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academy.api.deps import CurrentViewer
from academy.core.security import now_utc
from academy.db.session import get_db
from academy.schemas.progress import (
    GlobalProgressData,
    ProgressUpdateRequest,
    ProgressUpdateResponse,
    StudentProgress,
)
from academy.services.progress_service import global_progress, save_progress, student_progress

router = APIRouter(prefix="/v1/progress", tags=["progress"])


@router.get("", response_model=GlobalProgressData)
def get_all_progress(viewer: CurrentViewer, db: Session = Depends(get_db)) -> GlobalProgressData:
    if viewer.is_admin:
        return global_progress(db)
    return global_progress(db, viewer.user.id)


@router.get("/{user_id}", response_model=StudentProgress)
def get_user_progress(user_id: str, viewer: CurrentViewer, db: Session = Depends(get_db)) -> StudentProgress:
    viewer.require_access(user_id)
    return student_progress(db, user_id)


@router.put("/{user_id}/{course_id}", response_model=ProgressUpdateResponse)
def update_progress(
    user_id: str,
    course_id: str,
    payload: ProgressUpdateRequest,
    viewer: CurrentViewer,
    db: Session = Depends(get_db),
) -> ProgressUpdateResponse:
    viewer.require_access(user_id)
    save_progress(db, user_id, course_id, payload.completed_lessons)
    return ProgressUpdateResponse(accepted=True, server_time=now_utc())
