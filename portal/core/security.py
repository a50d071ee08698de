"""
Security utilities: password hashing, password reset tokens, Metabase embed tokens
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import logging

from portal.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PASSWORD_RESET_PURPOSE = "password_reset"


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash is not a recognised format")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def create_password_reset_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed, short-lived password reset token for an email"""
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    )
    to_encode = {"sub": email, "purpose": PASSWORD_RESET_PURPOSE, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_password_reset_token(token: str) -> Optional[str]:
    """
    Decode a password reset token.

    Returns:
        The email the token was issued for, or None if it is invalid,
        expired or not a reset token.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if payload.get("purpose") != PASSWORD_RESET_PURPOSE:
        logger.warning("Token with unexpected purpose used for password reset")
        return None
    return payload.get("sub")


def create_metabase_token(dashboard_id: int, params: Optional[Dict[str, Any]] = None) -> str:
    """
    Sign a Metabase embedding token for a dashboard.

    Raises:
        RuntimeError: If Metabase is not configured
    """
    if not settings.METABASE_SITE_URL or not settings.METABASE_SECRET_KEY:
        raise RuntimeError(
            "Metabase configuration is missing. Set METABASE_SITE_URL and METABASE_SECRET_KEY"
        )

    expire = datetime.utcnow() + timedelta(minutes=settings.METABASE_TOKEN_EXPIRE_MINUTES)
    payload = {
        "resource": {"dashboard": dashboard_id},
        "params": params or {},
        "exp": expire,
    }
    return jwt.encode(payload, settings.METABASE_SECRET_KEY, algorithm="HS256")


def get_metabase_embed_url(dashboard_id: int, params: Optional[Dict[str, Any]] = None) -> str:
    """Build the iframe URL for an embedded Metabase dashboard"""
    token = create_metabase_token(dashboard_id, params)
    site_url = settings.METABASE_SITE_URL.rstrip("/")
    return f"{site_url}/embed/dashboard/{token}#bordered=true&titled=true"
