# File: app/services/auth_service.py

"""
Authentication service.

Contains:
  - registration and login (credential checks + token issuance)
  - per-request authentication of a raw ``Authorization`` header
  - the "who am I" lookup that re-reads the user row

Sessions are stateless: nothing is stored server-side at login, and a token
stays valid until it expires.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AlreadyExists, Internal, InvalidArgument, NotFound, Unauthenticated
from app.core.security import (
    BCRYPT_MAX_PASSWORD_BYTES,
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
BEARER_PREFIX = "Bearer "

# One message for every credential failure, so callers can't probe for emails
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_TOKEN = "Invalid or expired token"


@dataclass(frozen=True)
class AuthContext:
    user_id: str
    email: str


def _require_credentials(email: str, password: str) -> None:
    if not email or not password:
        raise InvalidArgument("Email and password are required")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == email)).first()


def register_user(db: Session, *, email: str, password: str) -> Tuple[str, User]:
    """
    Create a user and issue its first token.

    Raises InvalidArgument for missing fields or a short password,
    AlreadyExists when the email is taken.
    """
    _require_credentials(email, password)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidArgument(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise InvalidArgument(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")

    if get_user_by_email(db, email) is not None:
        raise AlreadyExists("Email is already registered")

    try:
        password_hash = hash_password(password)
    except ValueError as exc:
        logger.exception("Password hashing failed")
        raise Internal() from exc

    user = User(email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # lost a race with a concurrent registration of the same email
        db.rollback()
        raise AlreadyExists("Email is already registered") from exc
    db.refresh(user)

    token = create_access_token(user.id, user.email)
    logger.info("Registered user %s", user.id)
    return token, user


def authenticate_user(db: Session, *, email: str, password: str) -> User:
    """
    Look up a user by email and verify the password.

    Unknown email and wrong password raise the same Unauthenticated error.
    """
    _require_credentials(email, password)

    user = get_user_by_email(db, email)
    if user is None:
        logger.info("Login failed: unknown email")
        raise Unauthenticated(INVALID_CREDENTIALS)
    if not verify_password(password, user.password_hash):
        logger.info("Login failed: bad password for user %s", user.id)
        raise Unauthenticated(INVALID_CREDENTIALS)
    return user


def login_user(db: Session, *, email: str, password: str) -> Tuple[str, User]:
    user = authenticate_user(db, email=email, password=password)
    token = create_access_token(user.id, user.email)
    logger.info("Login: user %s", user.id)
    return token, user


def authenticate_request(authorization: Optional[str]) -> AuthContext:
    """
    Turn a raw ``Authorization`` header into an AuthContext.

    Only ``"Bearer <token>"`` (exact, case-sensitive prefix) is accepted.
    Claims are trusted as-is; the user row is not re-read.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("Authorization token required")

    token = authorization[len(BEARER_PREFIX):]
    try:
        claims = decode_access_token(token)
    except TokenError as exc:
        logger.info("Token rejected: %s", exc)
        raise Unauthenticated(INVALID_TOKEN) from exc

    return AuthContext(user_id=claims.user_id, email=claims.email)


def get_current_user(db: Session, auth: AuthContext) -> User:
    """Re-read the caller's user row. NotFound if it was deleted."""
    user = db.get(User, auth.user_id)
    if user is None:
        logger.warning("Valid token for missing user %s", auth.user_id)
        raise NotFound("User not found")
    return user
