"""
Access control helpers - admin session cookie and read-only review mode
"""
import hashlib
import hmac
from typing import Optional

from fastapi import Cookie, Header, HTTPException, status

from .config import settings

ADMIN_COOKIE = "pt_admin"
READ_ONLY_COOKIE = "pt_mode"
READ_ONLY_VALUE = "review"


def hash_value(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_admin_cookie_value() -> str:
    if not settings.ADMIN_PASSWORD:
        return ""
    return hash_value(settings.ADMIN_PASSWORD)


def verify_admin_credentials(username: str, password: str) -> bool:
    if not settings.ADMIN_PASSWORD:
        return False
    user_ok = hmac.compare_digest(username.encode("utf-8"), settings.ADMIN_USER.encode("utf-8"))
    pass_ok = hmac.compare_digest(password.encode("utf-8"), settings.ADMIN_PASSWORD.encode("utf-8"))
    return user_ok and pass_ok


def verify_admin_session(cookie_value: Optional[str]) -> bool:
    expected = build_admin_cookie_value()
    if not expected or not cookie_value:
        return False
    return hmac.compare_digest(cookie_value, expected)


def require_admin(
    pt_admin: Optional[str] = Cookie(None),
    x_admin_key: Optional[str] = Header(None),
):
    """FastAPI dependency: admin cookie or X-Admin-Key header (the plain password)"""
    if verify_admin_session(pt_admin):
        return True
    if x_admin_key and verify_admin_session(hash_value(x_admin_key)):
        return True
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def block_if_read_only(pt_mode: Optional[str] = Cookie(None)):
    """FastAPI dependency: reject writes from review-mode sessions"""
    if pt_mode == READ_ONLY_VALUE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Read-only access")
    return True
