# File: app/api/deps.py

from collections.abc import Generator
from typing import Optional

from fastapi import Header
from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.auth_service import AuthContext, authenticate_request


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_auth_context(
    authorization: Optional[str] = Header(None, alias="Authorization"),
) -> AuthContext:
    """
    FastAPI dependency for protected routes.

    Usage in route functions:
        auth: AuthContext = Depends(get_auth_context)
    """
    return authenticate_request(authorization)
