"""Shared fakes for the identity service and settings store."""

import asyncio
import json
import httpx
import pytest
from fastapi.testclient import TestClient
from login_gateway.api.auth import get_surface_manager
from login_gateway.core.identity_client import IdentityClient
from login_gateway.core.settings_store import SettingsStore
from login_gateway.core.surface import LoginSurface
from login_gateway.core.surface_manager import SurfaceManager
from login_gateway.main import app
from login_gateway.models.auth import AuthResult, AuthSession

IDENTITY_URL = "http://identity.test"
VALID_PASSWORD = "secret1"
ACCESS_TOKEN = "token-123"


class FakeIdentity:
    """In-memory stand-in for IdentityClient."""

    def __init__(self, session=None, session_error=None, result=None, error=None):
        self.session = session
        self.session_error = session_error
        self.result = result or AuthResult(session=AuthSession(access_token="t"))
        self.error = error
        self.sign_in_calls = []
        self.session_checks = 0
        self.on_sign_in = None

    async def get_current_session(self):
        self.session_checks += 1
        await asyncio.sleep(0)
        if self.session_error:
            raise self.session_error
        return self.session

    async def sign_in_with_password(self, email, password):
        self.sign_in_calls.append((email, password))
        if self.on_sign_in:
            self.on_sign_in()
        await asyncio.sleep(0)
        if self.error:
            raise self.error
        return self.result


class FakeSettingsStore:
    """In-memory stand-in for SettingsStore."""

    def __init__(self, rows=None, error=None, delay=0.0):
        self.rows = rows or []
        self.error = error
        self.delay = delay
        self.calls = 0

    async def list_settings(self):
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return list(self.rows)


class FakeIdentityService:
    """httpx MockTransport handler speaking the GoTrue/PostgREST subset we use."""

    def __init__(self, settings_rows=None, settings_status=200):
        self.requests = []
        self.settings_rows = (
            settings_rows
            if settings_rows is not None
            else [
                {"setting_key": "site_name", "setting_value": "Acme Login"},
                {"setting_key": "unknown_key", "setting_value": "ignored"},
            ]
        )
        self.settings_status = settings_status
        self.token_error = None

    def token_requests(self):
        return [r for r in self.requests if r.url.path == "/auth/v1/token"]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/token":
            if self.token_error:
                raise self.token_error
            body = json.loads(request.content)
            if body["password"] == VALID_PASSWORD:
                return httpx.Response(
                    200,
                    json={
                        "access_token": ACCESS_TOKEN,
                        "token_type": "bearer",
                        "expires_in": 3600,
                        "refresh_token": "refresh-123",
                        "user": {"id": "user-1", "email": body["email"]},
                    },
                )
            return httpx.Response(
                400,
                json={
                    "code": 400,
                    "error_code": "invalid_credentials",
                    "msg": "Invalid login credentials",
                },
            )

        if path == "/auth/v1/user":
            if request.headers.get("Authorization") == f"Bearer {ACCESS_TOKEN}":
                return httpx.Response(200, json={"id": "user-1"})
            return httpx.Response(401, json={"msg": "invalid JWT"})

        if path == "/rest/v1/site_settings":
            if self.settings_status != 200:
                return httpx.Response(self.settings_status, json={"message": "boom"})
            return httpx.Response(200, json=self.settings_rows)

        return httpx.Response(404)


@pytest.fixture
def fake_identity():
    return FakeIdentity()


@pytest.fixture
def fake_store():
    return FakeSettingsStore()


@pytest.fixture
def surface(fake_identity, fake_store):
    return LoginSurface("surface-1", fake_identity, fake_store, landing_path="/")


@pytest.fixture
def identity_service():
    return FakeIdentityService()


@pytest.fixture
def mock_http(identity_service):
    return httpx.AsyncClient(transport=httpx.MockTransport(identity_service))


@pytest.fixture
def api_client(mock_http):
    """TestClient whose surfaces talk to the mock identity service."""
    manager = SurfaceManager(
        identity_factory=lambda: IdentityClient(mock_http, IDENTITY_URL, "anon-key"),
        settings_store_factory=lambda: SettingsStore(
            mock_http, IDENTITY_URL, "anon-key"
        ),
        landing_path="/",
    )
    app.dependency_overrides[get_surface_manager] = lambda: manager
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def fake_manager():
    return SurfaceManager(
        identity_factory=FakeIdentity,
        settings_store_factory=FakeSettingsStore,
        landing_path="/dashboard",
    )
