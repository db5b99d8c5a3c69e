"""Client for the identity service (GoTrue-compatible password auth)."""

import logging
from typing import Any, Dict, Optional
import httpx
from login_gateway.models.auth import AuthResult, AuthSession, ServiceError

logger = logging.getLogger(__name__)


class IdentityClient:
    """
    Talks to the identity service on behalf of one browser.

    The session issued on sign-in is held in memory on this object; nothing
    about it is persisted or inspected beyond presence.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str, api_key: str):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._session: Optional[AuthSession] = None

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.api_key}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def get_current_session(self) -> Optional[AuthSession]:
        """
        Return the held session if the service still accepts it.

        Raises httpx errors on transport failures or unexpected statuses;
        callers decide how to degrade.
        """
        if self._session is None:
            return None

        response = await self.http.get(
            f"{self.base_url}/auth/v1/user",
            headers=self._headers(self._session.access_token),
        )
        if response.status_code in (401, 403):
            logger.info("Held session was rejected by the identity service")
            self._session = None
            return None
        response.raise_for_status()
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """
        Exchange an email/password pair for a session. One request per call.

        Structured service errors come back in the result; transport errors
        and unparseable responses raise.
        """
        response = await self.http.post(
            f"{self.base_url}/auth/v1/token",
            params={"grant_type": "password"},
            headers=self._headers(),
            json={"email": email, "password": password},
        )

        if response.is_success:
            session = self._parse_session(response.json())
            self._session = session
            logger.info("Password sign-in succeeded")
            return AuthResult(session=session)

        error = self._parse_error(response)
        if error is None:
            response.raise_for_status()
        logger.warning(
            f"Password sign-in rejected: status={error.status_code} code={error.code}"
        )
        return AuthResult(error=error)

    def sign_out(self):
        """Forget the held session"""
        self._session = None

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def _parse_session(self, payload: Dict[str, Any]) -> AuthSession:
        user = payload.get("user") or {}
        return AuthSession(
            access_token=payload["access_token"],
            token_type=payload.get("token_type", "bearer"),
            expires_in=payload.get("expires_in"),
            refresh_token=payload.get("refresh_token"),
            user_id=user.get("id"),
            email=user.get("email"),
        )

    def _parse_error(self, response: httpx.Response) -> Optional[ServiceError]:
        """Read a GoTrue error body, old or new format. None if it isn't one."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None

        message = (
            body.get("msg")
            or body.get("error_description")
            or body.get("message")
            or body.get("error")
        )
        if not message:
            return None
        return ServiceError(
            message=str(message),
            code=body.get("error_code"),
            status_code=response.status_code,
        )
