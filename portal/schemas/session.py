"""
Pydantic schemas for session and auth endpoints
"""
from pydantic import BaseModel
from typing import Optional


class SessionRequest(BaseModel):
    email: Optional[str] = None
    action: Optional[str] = None
    sessionId: Optional[str] = None
    browser_id: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str
    browser_id: Optional[str] = None


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    password: str
