from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from academy.api.deps import AdminViewer, CurrentViewer
from academy.core.error_codes import ErrorCode
from academy.core.errors import ApiError
from academy.db.session import get_db
from academy.schemas.users import UserOut, UserUpdateRequest
from academy.services.auth_service import user_out
from academy.services.lookup import get_user_or_404
from academy.services.user_service import delete_user, list_users, update_user

router = APIRouter(prefix="/v1/users", tags=["users"])


@router.get("", response_model=list[UserOut])
def list_users_endpoint(viewer: CurrentViewer, db: Session = Depends(get_db)) -> list[UserOut]:
    if not viewer.is_admin:
        return [user_out(viewer.user)]
    return [user_out(user) for user in list_users(db)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, viewer: CurrentViewer, db: Session = Depends(get_db)) -> UserOut:
    viewer.require_access(user_id)
    return user_out(get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserOut)
def update_user_endpoint(
    user_id: str,
    payload: UserUpdateRequest,
    viewer: CurrentViewer,
    db: Session = Depends(get_db),
) -> UserOut:
    viewer.require_access(user_id)
    # Course assignment and role are granted by creators, never self-served.
    if not viewer.is_admin and (payload.assigned_course_ids is not None or payload.role is not None):
        raise ApiError(status_code=403, code=ErrorCode.FORBIDDEN, message="Only creators can change assignments or roles")
    return user_out(update_user(db, user_id, payload))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user_endpoint(user_id: str, _: AdminViewer, db: Session = Depends(get_db)) -> Response:
    delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
