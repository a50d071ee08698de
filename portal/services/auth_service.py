"""
Auth Service - password login and password reset for client users
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from portal.core.exceptions import BadRequestError, UnauthorizedError
from portal.core.security import (
    create_password_reset_token,
    decode_password_reset_token,
    get_password_hash,
    verify_password,
)
from portal.models.client import ClientUser
from portal.services.session_service import SessionService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.sessions = SessionService(db)

    def login(
        self,
        email: str,
        password: str,
        browser_id: Optional[str] = None,
        user_agent: str = "",
        ip_address: str = "",
    ) -> Dict[str, Any]:
        """
        Verify credentials and register the user's single active session.

        Raises:
            UnauthorizedError: On unknown email or wrong password
        """
        user = self.sessions.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for email: {email}")
            raise UnauthorizedError("Incorrect email or password")

        session_id = self.sessions.register(user.id, browser_id, user_agent, ip_address)
        logger.info(f"User {user.id} logged in")
        return {"user": user, "session_id": session_id}

    def request_password_reset(self, email: str) -> Optional[str]:
        """Reset token for a known email, None otherwise"""
        user = self.sessions.get_user_by_email(email)
        if not user:
            logger.info("Password reset requested for unknown email")
            return None
        return create_password_reset_token(user.registered_email)

    def reset_password(self, token: str, new_password: str) -> ClientUser:
        """
        Store a new password and revoke every session of the user.

        Raises:
            BadRequestError: On an invalid token or a too short password
        """
        email = decode_password_reset_token(token)
        if not email:
            raise BadRequestError("Invalid or expired reset token")

        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = self.sessions.get_user_by_email(email)
        if not user:
            raise BadRequestError("Invalid or expired reset token")

        user.password_hash = get_password_hash(new_password)
        self.db.commit()
        self.sessions.delete(user.id)
        logger.info(f"Password reset for user {user.id}")
        return user
