"""Browser session ids: one login surface and identity client per id."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Optional
import uuid
from login_gateway.config import settings

SESSION_HEADER = "X-Session-ID"


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Resolves the session id that keys the caller's login surface.

    Browsers carry it in an httponly cookie issued on their first request.
    API clients that keep no cookie jar send it in the ``X-Session-ID``
    header instead; every response echoes the resolved id in that header so
    such a client can learn the id minted for it and send it back.
    """

    def __init__(self, app, session_cookie_name: Optional[str] = None):
        super().__init__(app)
        self.session_cookie_name = session_cookie_name or settings.session_cookie_name

    async def dispatch(self, request: Request, call_next):
        session_id = self._get_session_id(request)
        new_session = session_id is None
        if new_session:
            session_id = str(uuid.uuid4())

        request.state.session_id = session_id

        response = await call_next(request)

        response.headers[SESSION_HEADER] = session_id
        if new_session and response.status_code < 400:
            response.set_cookie(
                key=self.session_cookie_name,
                value=session_id,
                max_age=3600 * 24 * 7,  # 7 days
                httponly=True,
                samesite="lax",
            )

        return response

    def _get_session_id(self, request: Request) -> Optional[str]:
        """Cookie first, then the API header; blank values count as absent"""
        session_id = request.cookies.get(self.session_cookie_name)
        if session_id:
            return session_id

        return request.headers.get(SESSION_HEADER, "").strip() or None
