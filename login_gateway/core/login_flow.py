"""Credential submission: validate, sign in once, report the outcome."""

import logging
from enum import Enum
from typing import Optional
from login_gateway.core.validation import validate_credentials
from login_gateway.models.auth import ServiceError

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome back!"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


class SubmissionState(str, Enum):
    """States of one credential submission"""

    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    RECOVERABLE_FAILED = "recoverable_failed"
    UNEXPECTED_FAILED = "unexpected_failed"


class CredentialSubmissionFlow:
    """Owns the form's credential input and the in-flight guard."""

    def __init__(self, surface, identity, landing_path: str = "/"):
        self.surface = surface
        self.identity = identity
        self.landing_path = landing_path
        self.email = ""
        self.password = ""
        self.in_flight = False
        self.state = SubmissionState.IDLE

    def update_credentials(self, email: str, password: str):
        """Replace the current form input"""
        self.email = email
        self.password = password

    async def submit(self) -> Optional[SubmissionState]:
        """
        Handle one explicit submit action.

        Returns the state the submission settled in, IDLE when validation
        stopped it, or None when it was ignored: another submission is in
        flight, the form is not interactive yet, or the surface is gone.
        """
        if (
            self.in_flight
            or not self.surface.is_active
            or not self.surface.interactive
        ):
            logger.debug(f"Submit ignored on surface {self.surface.surface_id}")
            return None

        self.state = SubmissionState.VALIDATING
        if not validate_credentials(self.email, self.password, self.surface):
            self.state = SubmissionState.IDLE
            return SubmissionState.IDLE

        self.state = SubmissionState.SUBMITTING
        self.in_flight = True
        try:
            result = await self.identity.sign_in_with_password(
                self.email, self.password
            )
            if result.error is not None:
                self._report_service_error(result.error)
                settled = SubmissionState.RECOVERABLE_FAILED
            else:
                self.surface.notify_success(WELCOME_MESSAGE)
                self.surface.redirect_to(self.landing_path)
                settled = SubmissionState.SUCCEEDED
        except Exception as e:
            # Type only: exception text may echo the response payload
            logger.error(f"Unexpected error during sign-in: {type(e).__name__}")
            self.surface.notify_error(UNEXPECTED_ERROR_MESSAGE)
            settled = SubmissionState.UNEXPECTED_FAILED
        finally:
            self.in_flight = False

        self.state = (
            SubmissionState.SUCCEEDED
            if settled is SubmissionState.SUCCEEDED
            else SubmissionState.IDLE
        )
        return settled

    def _report_service_error(self, error: ServiceError):
        if error.is_invalid_credentials:
            self.surface.notify_error(INVALID_CREDENTIALS_MESSAGE)
        else:
            self.surface.notify_error(error.message)
