"""Tests for the identity service and settings store HTTP clients."""

import asyncio
import httpx
import pytest
from login_gateway.core.http_client import HttpClientManager, http_client_manager
from login_gateway.core.identity_client import IdentityClient
from login_gateway.core.settings_store import SettingsStore

IDENTITY_URL = "http://identity.test"


def test_sign_in_success_holds_session(mock_http, identity_service):
    """Test a good password returns and keeps the session."""
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")

    async def run():
        result = await client.sign_in_with_password("user@example.com", "secret1")
        current = await client.get_current_session()
        return result, current

    result, current = asyncio.run(run())

    assert result.error is None
    assert result.session.access_token == "token-123"
    assert result.session.email == "user@example.com"
    assert current == result.session

    token_request = identity_service.token_requests()[0]
    assert token_request.method == "POST"
    assert token_request.url.params["grant_type"] == "password"
    assert token_request.headers["apikey"] == "anon-key"


def test_sign_in_invalid_credentials(mock_http, identity_service):
    """Test a rejected password comes back as a structured error."""
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")
    result = asyncio.run(client.sign_in_with_password("user@example.com", "wrong!"))

    assert result.session is None
    assert result.error.code == "invalid_credentials"
    assert result.error.status_code == 400
    assert result.error.is_invalid_credentials
    assert len(identity_service.token_requests()) == 1
    assert not client.has_session


def test_sign_in_legacy_error_body():
    """Test the older error/error_description body shape is understood."""

    def handler(request):
        return httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Email not confirmed"}
        )

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = IdentityClient(http, IDENTITY_URL, "anon-key")
    result = asyncio.run(client.sign_in_with_password("user@example.com", "secret1"))

    assert result.error.message == "Email not confirmed"
    assert result.error.code is None
    assert not result.error.is_invalid_credentials


def test_sign_in_unstructured_error_raises():
    """Test a non-JSON error page is treated as a transport failure."""

    def handler(request):
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = IdentityClient(http, IDENTITY_URL, "anon-key")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.sign_in_with_password("user@example.com", "secret1"))


def test_sign_in_transport_error_propagates(mock_http, identity_service):
    """Test network failures are raised to the caller."""
    identity_service.token_error = httpx.ConnectError("connection refused")
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")

    with pytest.raises(httpx.ConnectError):
        asyncio.run(client.sign_in_with_password("user@example.com", "secret1"))


def test_no_session_skips_network(mock_http, identity_service):
    """Test the presence check without a held session makes no request."""
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")
    assert asyncio.run(client.get_current_session()) is None
    assert identity_service.requests == []


def test_rejected_session_is_dropped(mock_http):
    """Test a session the service no longer accepts is forgotten."""
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")

    async def run():
        await client.sign_in_with_password("user@example.com", "secret1")
        client._session = client._session.model_copy(update={"access_token": "stale"})
        return await client.get_current_session()

    assert asyncio.run(run()) is None
    assert not client.has_session


def test_sign_out(mock_http):
    """Test sign_out forgets the held session."""
    client = IdentityClient(mock_http, IDENTITY_URL, "anon-key")
    asyncio.run(client.sign_in_with_password("user@example.com", "secret1"))
    client.sign_out()
    assert asyncio.run(client.get_current_session()) is None


def test_list_settings(mock_http, identity_service):
    """Test settings rows are returned as key/value pairs."""
    identity_service.settings_rows.append({"setting_key": "footer_text"})
    store = SettingsStore(mock_http, IDENTITY_URL, "anon-key")

    rows = asyncio.run(store.list_settings())

    assert rows == [("site_name", "Acme Login"), ("unknown_key", "ignored")]
    request = identity_service.requests[0]
    assert request.url.path == "/rest/v1/site_settings"
    assert request.url.params["select"] == "setting_key,setting_value"


def test_list_settings_error_status(mock_http, identity_service):
    """Test an error status raises for the caller to handle."""
    identity_service.settings_status = 500
    store = SettingsStore(mock_http, IDENTITY_URL, "anon-key")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(store.list_settings())


def test_http_client_manager_lifecycle():
    """Test the shared client starts on a given transport and closes on stop."""
    manager = HttpClientManager()
    assert manager is http_client_manager
    asyncio.run(manager.stop())

    async def run():
        await manager.start(
            transport=httpx.MockTransport(lambda request: httpx.Response(204))
        )
        running = manager.is_running
        response = await manager.client.get(f"{IDENTITY_URL}/ping")
        await manager.stop()
        return running, response.status_code

    try:
        assert asyncio.run(run()) == (True, 204)
        assert manager.is_running is False
    finally:
        manager._transport = None
