"""
Admin API - panel login
"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core import settings
from app.core.security import ADMIN_COOKIE, build_admin_cookie_value, verify_admin_credentials

router = APIRouter(prefix="/admin", tags=["Admin"])


class AdminLoginRequest(BaseModel):
    username: str
    password: str


@router.post("/login")
def admin_login(data: AdminLoginRequest):
    if not settings.ADMIN_PASSWORD:
        raise HTTPException(status_code=500, detail="Missing password")
    if not verify_admin_credentials(data.username, data.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    
    response = JSONResponse({"ok": True})
    response.set_cookie(
        ADMIN_COOKIE,
        build_admin_cookie_value(),
        httponly=True,
        samesite="lax",
        secure=not settings.DEBUG,
        max_age=60 * 60 * 24
    )
    return response

@router.post("/logout")
def admin_logout():
    response = JSONResponse({"ok": True})
    response.delete_cookie(ADMIN_COOKIE)
    return response
