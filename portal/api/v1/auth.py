"""
Authentication endpoints for the portal.
Password login, logout and password reset.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from portal.core.config import settings
from portal.core.database import get_db
from portal.core.dependencies import (
    clear_session_cookie,
    client_ip,
    session_cookie,
    set_session_cookie,
    user_agent,
)
from portal.schemas.session import ForgotPasswordRequest, LoginRequest, ResetPasswordRequest
from portal.services.auth_service import AuthService
from portal.services.session_service import SessionService

logger = logging.getLogger(__name__)
router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Password login.

    Registers a new active session for the user, which signs out any other
    browser, and sets the session cookie.

    Raises:
        UnauthorizedError: If credentials are invalid
    """
    result = AuthService(db).login(
        credentials.email,
        credentials.password,
        browser_id=credentials.browser_id,
        user_agent=user_agent(request),
        ip_address=client_ip(request),
    )
    user = result["user"]
    set_session_cookie(response, result["session_id"])

    return {
        "success": True,
        "sessionId": result["session_id"],
        "user": {
            "email": user.registered_email,
            "clientId": str(user.client_id) if user.client_id else None,
        },
    }


@router.post("/logout")
async def logout(request: Request, response: Response, db: Session = Depends(get_db)):
    """Drop the cookie's session and clear the cookie"""
    session_id = session_cookie(request)
    if session_id:
        service = SessionService(db)
        row = service.find_by_session_id(session_id)
        if row is not None:
            user_id = row.user_id
            service.delete(user_id)
            logger.info(f"User {user_id} logged out")
    clear_session_cookie(response)
    return {"success": True}


@router.post("/forgot-password")
async def forgot_password(body: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Issue a password reset token.

    The answer does not reveal whether the email is registered. The reset
    link is only returned in debug mode; delivery is out of band.
    """
    token = AuthService(db).request_password_reset(body.email)
    payload = {
        "success": True,
        "message": "If the email is registered, a reset link has been sent",
    }
    if token and settings.DEBUG:
        payload["resetLink"] = f"{settings.PORTAL_BASE_URL.rstrip('/')}/reset-password?token={token}"
    return payload


@router.post("/reset-password")
async def reset_password(body: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Set a new password; every session of the user is revoked"""
    AuthService(db).reset_password(body.token, body.password)
    return {"success": True}
