"""Pydantic models for login-related API requests, responses and identity payloads."""

from pydantic import BaseModel
from typing import List, Optional
from login_gateway.models.settings import DisplaySettings


class LoginRequest(BaseModel):
    """Login request model. Fields are checked by the validation pipeline, not here."""

    email: str = ""
    password: str = ""


class Notification(BaseModel):
    """A message queued for the notification surface."""

    level: str  # "success" or "error"
    message: str


class LoginResponse(BaseModel):
    """Login response model"""

    state: str
    in_flight: bool
    redirect: Optional[str] = None
    notifications: List[Notification] = []


class SurfaceResponse(BaseModel):
    """State of the login surface after bootstrap."""

    session_id: str
    interactive: bool
    redirect: Optional[str] = None
    settings: DisplaySettings
    notifications: List[Notification] = []


class AuthSession(BaseModel):
    """Session issued by the identity service. Treated as opaque by the gateway."""

    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None


INVALID_CREDENTIALS_CODE = "invalid_credentials"
INVALID_CREDENTIALS_TEXT = "Invalid login credentials"


class ServiceError(BaseModel):
    """Structured error reported by the identity service."""

    message: str
    code: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def is_invalid_credentials(self) -> bool:
        """True when the service rejected the email/password pair."""
        if self.code == INVALID_CREDENTIALS_CODE:
            return True
        # Older services only say so in the message text
        return INVALID_CREDENTIALS_TEXT in self.message


class AuthResult(BaseModel):
    """Outcome of a password sign-in: exactly one of session or error is set."""

    session: Optional[AuthSession] = None
    error: Optional[ServiceError] = None
