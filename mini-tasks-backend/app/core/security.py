# File: app/core/security.py

"""
Security helpers for the Mini Tasks API.

Two primitives live here:
  - password hashing (bcrypt, fixed cost factor)
  - signed, expiring access tokens (JWT via PyJWT)

Issuer / audience handling goes through ``TokenSettings`` only. Both
``create_access_token`` and ``decode_access_token`` read the same object,
so a token is never checked against a constraint it was not issued with.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from app.core.config import Settings, settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

REQUIRED_CLAIMS = ["exp", "iat", "user_id", "email"]


# -----------------------------
# Passwords
# -----------------------------

def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt (fresh salt every call)."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time check of ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        # malformed hash or over-long password
        return False


# -----------------------------
# Tokens
# -----------------------------

class TokenError(Exception):
    """Token could not be verified. The message says why (for logs only)."""


@dataclass(frozen=True)
class TokenSettings:
    secret_key: str
    algorithm: str
    lifetime: timedelta
    issuer: Optional[str] = None
    audience: Optional[str] = None

    @classmethod
    def from_settings(cls, s: Settings) -> "TokenSettings":
        return cls(
            secret_key=s.secret_key,
            algorithm=s.algorithm,
            lifetime=timedelta(minutes=s.access_token_expire_minutes),
            issuer=s.jwt_issuer,
            audience=s.jwt_audience,
        )


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


def get_token_settings() -> TokenSettings:
    return TokenSettings.from_settings(settings)


def create_access_token(
    user_id: str,
    email: str,
    token_settings: Optional[TokenSettings] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Issue a signed access token for ``user_id``.

    ``now`` is the issuance time; it defaults to the current UTC time.
    A random ``jti`` keeps two tokens issued in the same second distinct.
    """
    ts = token_settings or get_token_settings()
    issued_at = now or datetime.now(timezone.utc)

    payload = {
        "user_id": str(user_id),
        "email": email,
        "iat": issued_at,
        "exp": issued_at + ts.lifetime,
        "jti": uuid.uuid4().hex,
    }
    if ts.issuer:
        payload["iss"] = ts.issuer
    if ts.audience:
        payload["aud"] = ts.audience

    return jwt.encode(payload, ts.secret_key, algorithm=ts.algorithm)


def decode_access_token(token: str, token_settings: Optional[TokenSettings] = None) -> SessionClaims:
    """
    Verify signature, expiry, issuer and audience of ``token``.

    Raises ``TokenError`` on any failure.
    """
    ts = token_settings or get_token_settings()

    required = list(REQUIRED_CLAIMS)
    if ts.issuer:
        required.append("iss")
    if ts.audience:
        required.append("aud")

    try:
        payload = jwt.decode(
            token,
            ts.secret_key,
            algorithms=[ts.algorithm],
            issuer=ts.issuer,
            audience=ts.audience,
            options={"require": required},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenError("token expired") from exc
    except jwt.InvalidIssuerError as exc:
        raise TokenError("issuer mismatch") from exc
    except jwt.InvalidAudienceError as exc:
        raise TokenError("audience mismatch") from exc
    except jwt.MissingRequiredClaimError as exc:
        raise TokenError(f"missing claim: {exc.claim}") from exc
    except jwt.InvalidSignatureError as exc:
        raise TokenError("bad signature") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenError(f"malformed token: {exc}") from exc

    user_id = payload["user_id"]
    email = payload["email"]
    if not isinstance(user_id, str) or not isinstance(email, str):
        raise TokenError("malformed identity claims")

    return SessionClaims(
        user_id=user_id,
        email=email,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
