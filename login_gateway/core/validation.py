"""Local checks run on credential input before anything goes over the network."""

from typing import Protocol
from pydantic import EmailStr, TypeAdapter, ValidationError

INVALID_EMAIL_MESSAGE = "Invalid email address"
SHORT_PASSWORD_MESSAGE = "Password must be at least 6 characters"
MIN_PASSWORD_LENGTH = 6

_email_adapter = TypeAdapter(EmailStr)


class Notifier(Protocol):
    def notify_error(self, message: str) -> None: ...


def is_valid_email(email: str) -> bool:
    """Well-formed address check (syntax only, no DNS)."""
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def validate_credentials(email: str, password: str, notifier: Notifier) -> bool:
    """
    Run the email rule, then the password rule.

    Stops at the first failing rule and sends its message to ``notifier``.
    Returns True when both pass.
    """
    if not is_valid_email(email):
        notifier.notify_error(INVALID_EMAIL_MESSAGE)
        return False

    if len(password) < MIN_PASSWORD_LENGTH:
        notifier.notify_error(SHORT_PASSWORD_MESSAGE)
        return False

    return True
