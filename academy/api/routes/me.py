from fastapi import APIRouter

from academy.api.deps import CurrentUser
from academy.schemas.users import UserOut
from academy.services.auth_service import user_out

router = APIRouter(prefix="/v1", tags=["users"])


@router.get("/me", response_model=UserOut)
def me(current_user: CurrentUser) -> UserOut:
    return user_out(current_user)
