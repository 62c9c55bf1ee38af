import hmac
import time
from typing import Optional

from fastapi import Header
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from eventreg.config import get_settings
from eventreg.errors import AuthError

ALGORITHM = "HS256"


def _secret() -> str:
    secret = get_settings().jwt_secret
    if not secret:
        raise RuntimeError("JWT_SECRET is not set. Check your .env file.")
    return secret


def create_access_token(uid: str, expires_minutes: Optional[int] = None) -> str:
    """Sign a session token carrying only the user id, with an explicit expiry."""
    minutes = expires_minutes if expires_minutes is not None else get_settings().jwt_expire_minutes
    now = int(time.time())
    claims = {"uid": uid, "iat": now, "exp": now + minutes * 60}
    return jwt.encode(claims, _secret(), algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        claims = jwt.decode(token, _secret(), algorithms=[ALGORITHM], options={"require_exp": True})
    except ExpiredSignatureError:
        raise AuthError("Token has expired")
    except JWTError:
        raise AuthError("Unauthorized")
    if not claims.get("uid"):
        raise AuthError("Unauthorized")
    return claims


def _bearer(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthError("ID Token is required")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("ID Token is required")
    return parts[1]


def verify_token(authorization: Optional[str] = Header(None)) -> str:
    """Dependency returning the caller's uid from a ``Bearer`` token."""
    return decode_access_token(_bearer(authorization))["uid"]


def require_admin(authorization: Optional[str] = Header(None)) -> None:
    admin_token = get_settings().admin_token
    token = _bearer(authorization)
    if not admin_token or not hmac.compare_digest(token.encode("utf-8"), admin_token.encode("utf-8")):
        raise AuthError("Admin access required")
