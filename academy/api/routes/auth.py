from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from academy.db.session import get_db
from academy.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from academy.services.auth_service import authenticate, issue_auth_response, register_student

router = APIRouter(prefix="/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user = register_student(db, payload)
    return issue_auth_response(user)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    user = authenticate(db, email=payload.email, password=payload.password)
    return issue_auth_response(user)
