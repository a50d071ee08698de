"""
Portal API errors.

Handlers and services raise PortalError; the application renders it as
{"error": ..., "details": ...} with the carried status code.
"""
from typing import Optional


class PortalError(Exception):
    """Error with an HTTP status and a client-facing message"""

    status_code = 500

    def __init__(self, error: str, status_code: Optional[int] = None, details: Optional[str] = None):
        super().__init__(error)
        self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.details:
            body["details"] = self.details
        return body


class BadRequestError(PortalError):
    status_code = 400


class NotFoundError(PortalError):
    status_code = 404


class UnauthorizedError(PortalError):
    status_code = 401


def require_params(**params) -> None:
    """Raise 400 naming every missing parameter"""
    missing = [name for name, value in params.items() if value in (None, "")]
    if missing:
        raise BadRequestError(f"Missing required parameters: {', '.join(missing)}")
