# File: app/api/v1/routes_auth.py

"""
Auth API routes: register, login and the current-user lookup.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_auth_context, get_db
from app.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from app.services import auth_service
from app.services.auth_service import AuthContext

router = APIRouter()


@router.post("/register", response_model=AuthResponse, summary="Register a new user")
def register(payload: UserCreate, db: Session = Depends(get_db)):
    token, user = auth_service.register_user(db, email=payload.email, password=payload.password)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.post("/login", response_model=AuthResponse, summary="Log in with email and password")
def login(payload: UserLogin, db: Session = Depends(get_db)):
    token, user = auth_service.login_user(db, email=payload.email, password=payload.password)
    return AuthResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead, summary="Current user")
def me(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """
    Re-reads the user row, so a token for a deleted account gets a 404 here
    even though it still passes signature checks.
    """
    return auth_service.get_current_user(db, auth)
