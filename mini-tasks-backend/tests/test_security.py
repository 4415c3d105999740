# File: tests/test_security.py

from datetime import datetime, timedelta, timezone

import pytest

from app.core.security import (
    TokenError,
    TokenSettings,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-key-that-is-long-enough"


@pytest.fixture
def token_settings():
    return TokenSettings(
        secret_key=SECRET,
        algorithm="HS256",
        lifetime=timedelta(hours=24),
        issuer="mini-tasks-app",
        audience="mini-tasks-users",
    )


# -----------------------------
# Tokens
# -----------------------------

def test_token_round_trip(token_settings):
    token = create_access_token("user-1", "a@x.com", token_settings)
    claims = decode_access_token(token, token_settings)

    assert claims.user_id == "user-1"
    assert claims.email == "a@x.com"
    assert claims.expires_at - claims.issued_at == timedelta(hours=24)


def test_token_valid_just_before_expiry(token_settings):
    issued = datetime.now(timezone.utc) - token_settings.lifetime + timedelta(seconds=5)
    token = create_access_token("user-1", "a@x.com", token_settings, now=issued)

    assert decode_access_token(token, token_settings).user_id == "user-1"


def test_token_rejected_just_after_expiry(token_settings):
    issued = datetime.now(timezone.utc) - token_settings.lifetime - timedelta(seconds=5)
    token = create_access_token("user-1", "a@x.com", token_settings, now=issued)

    with pytest.raises(TokenError, match="expired"):
        decode_access_token(token, token_settings)


def test_tokens_issued_together_differ(token_settings):
    now = datetime.now(timezone.utc)
    first = create_access_token("user-1", "a@x.com", token_settings, now=now)
    second = create_access_token("user-1", "a@x.com", token_settings, now=now)
    assert first != second


def test_wrong_secret_rejected(token_settings):
    forged_settings = TokenSettings(
        secret_key="some-other-secret-key-of-decent-length",
        algorithm="HS256",
        lifetime=token_settings.lifetime,
        issuer=token_settings.issuer,
        audience=token_settings.audience,
    )
    token = create_access_token("user-1", "a@x.com", forged_settings)

    with pytest.raises(TokenError, match="signature"):
        decode_access_token(token, token_settings)


@pytest.mark.parametrize("garbage", ["", "not-a-token", "a.b.c"])
def test_malformed_token_rejected(token_settings, garbage):
    with pytest.raises(TokenError):
        decode_access_token(garbage, token_settings)


def test_audience_mismatch_rejected(token_settings):
    other = TokenSettings(SECRET, "HS256", timedelta(hours=24), "mini-tasks-app", "someone-else")
    token = create_access_token("user-1", "a@x.com", other)

    with pytest.raises(TokenError, match="audience"):
        decode_access_token(token, token_settings)


def test_issuer_mismatch_rejected(token_settings):
    other = TokenSettings(SECRET, "HS256", timedelta(hours=24), "another-app", "mini-tasks-users")
    token = create_access_token("user-1", "a@x.com", other)

    with pytest.raises(TokenError, match="issuer"):
        decode_access_token(token, token_settings)


def test_verifier_requires_issuer_it_expects(token_settings):
    bare = TokenSettings(SECRET, "HS256", timedelta(hours=24))
    token = create_access_token("user-1", "a@x.com", bare)

    with pytest.raises(TokenError):
        decode_access_token(token, token_settings)


def test_no_issuer_or_audience_configured():
    bare = TokenSettings(SECRET, "HS256", timedelta(hours=24))
    token = create_access_token("user-1", "a@x.com", bare)

    assert decode_access_token(token, bare).email == "a@x.com"


# -----------------------------
# Passwords
# -----------------------------

@pytest.mark.parametrize("password", ["secret1", "P@ss w0rd!", "~~~~~~", "a" * 40])
def test_password_hash_verifies(password):
    hashed = hash_password(password, rounds=4)

    assert hashed != password
    assert verify_password(password, hashed)
    assert not verify_password(password + "x", hashed)


def test_password_hash_is_salted():
    assert hash_password("secret1", rounds=4) != hash_password("secret1", rounds=4)


def test_verify_against_malformed_hash_is_false():
    assert verify_password("secret1", "not-a-bcrypt-hash") is False
