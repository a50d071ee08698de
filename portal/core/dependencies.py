"""
Request helpers shared by the API routers: id parsing, client info, session cookie
"""
from typing import Optional
from uuid import UUID

from fastapi import Request, Response

from portal.core.config import settings
from portal.core.exceptions import BadRequestError


def parse_business_id(value: Optional[str], message: str = "Business ID is required") -> UUID:
    """
    Validate a business id parameter.

    Raises:
        BadRequestError: If missing or not a UUID
    """
    if not value:
        raise BadRequestError(message)
    try:
        return UUID(value)
    except ValueError:
        raise BadRequestError("Invalid business ID format")


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip
    return request.client.host if request.client else ""


def user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")


def session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, session_id: str) -> None:
    """httpOnly, strict same-site, effectively permanent"""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="strict",
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="strict",
    )
