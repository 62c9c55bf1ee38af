import os
import time

import pytest
from jose import jwt

from eventreg.auth import create_access_token, decode_access_token, require_admin, verify_token
from eventreg.errors import AuthError
from eventreg.ratelimit import FixedWindowRateLimiter


def test_token_carries_uid_and_expiry(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRE_MINUTES", "30")

    claims = decode_access_token(create_access_token("u1"))

    assert claims["uid"] == "u1"
    assert 29 * 60 <= claims["exp"] - int(time.time()) <= 30 * 60
    assert set(claims) == {"uid", "iat", "exp"}


def test_token_signed_with_other_secret_is_rejected():
    forged = jwt.encode({"uid": "u1", "exp": int(time.time()) + 60}, "not-the-secret", algorithm="HS256")

    with pytest.raises(AuthError):
        decode_access_token(forged)


def test_token_without_expiry_is_rejected():
    unbounded = jwt.encode({"uid": "u1"}, os.environ["JWT_SECRET"], algorithm="HS256")

    with pytest.raises(AuthError):
        decode_access_token(unbounded)


def test_verify_token_parses_bearer_header():
    assert verify_token(f"Bearer {create_access_token('u7')}") == "u7"
    assert verify_token(f"bearer {create_access_token('u7')}") == "u7"

    with pytest.raises(AuthError):
        verify_token(None)
    with pytest.raises(AuthError):
        verify_token("Token abc")


def test_missing_jwt_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "")

    with pytest.raises(RuntimeError):
        create_access_token("u1")


def test_require_admin(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "letmein")

    require_admin("Bearer letmein")
    with pytest.raises(AuthError):
        require_admin("Bearer nope")


def test_require_admin_disabled_without_token(monkeypatch):
    monkeypatch.setenv("ADMIN_TOKEN", "")

    with pytest.raises(AuthError):
        require_admin("Bearer ")
    with pytest.raises(AuthError):
        require_admin("Bearer anything")


def test_rate_limiter_fixed_window():
    limiter = FixedWindowRateLimiter(max_requests=2, window_s=60)

    assert limiter.allow("1.2.3.4", now=0)
    assert limiter.allow("1.2.3.4", now=1)
    assert not limiter.allow("1.2.3.4", now=2)
    assert limiter.allow("5.6.7.8", now=2)
    assert limiter.allow("1.2.3.4", now=61)
