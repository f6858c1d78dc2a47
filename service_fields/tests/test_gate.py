"""
Unit tests for the identity gate.
"""

import json
from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi import Request

from shared.errors import AuthenticationError, InvalidEmailError
from service_fields.app.gate import UserEmailGate, current_user_email, requires_identity


class TestRequiresIdentity:
    """Test cases for the route classification predicate."""

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/users/me"),
        ("GET", "/api/fields"),
        ("GET", "/api/fields/7"),
        ("POST", "/api/fields"),
        ("PUT", "/api/devices/3"),
        ("DELETE", "/api/devices/3"),
        ("GET", "/api/users"),
        ("GET", "/api"),
    ])
    def test_api_routes_are_gated(self, method, path):
        assert requires_identity(method, path) is True

    @pytest.mark.parametrize("method,path", [
        ("POST", "/api/users"),
        ("post", "/api/users"),
        ("POST", "/api/users/"),
    ])
    def test_user_creation_is_exempt(self, method, path):
        assert requires_identity(method, path) is False

    @pytest.mark.parametrize("path", ["/", "/health", "/metrics", "/docs", "/apix"])
    def test_non_api_routes_are_not_gated(self, path):
        assert requires_identity("GET", path) is False


class TestUserEmailGate:
    """Test cases for UserEmailGate."""

    @pytest.fixture
    def gate(self):
        """Create gate instance."""
        return UserEmailGate(metrics=MagicMock())

    @pytest.fixture
    def mock_request(self):
        """Create mock request."""
        request = MagicMock(spec=Request)
        request.headers = {}
        request.method = "GET"
        request.url.path = "/api/fields"
        request.state = SimpleNamespace()
        return request

    def test_resolve_normalizes_header(self, gate, mock_request):
        mock_request.headers = {"X-User-Email": "  Test_1@Example.COM "}
        assert gate.resolve(mock_request) == "test_1@example.com"

    def test_resolve_missing_header(self, gate, mock_request):
        with pytest.raises(AuthenticationError) as exc_info:
            gate.resolve(mock_request)
        assert exc_info.value.message == "Missing X-User-Email header. Access denied."

    @pytest.mark.parametrize("value", ["", "   "])
    def test_resolve_blank_header(self, gate, mock_request, value):
        mock_request.headers = {"X-User-Email": value}
        with pytest.raises(AuthenticationError):
            gate.resolve(mock_request)

    def test_resolve_malformed_header(self, gate, mock_request):
        mock_request.headers = {"X-User-Email": "invalid-email-format"}
        with pytest.raises(InvalidEmailError) as exc_info:
            gate.resolve(mock_request)
        assert exc_info.value.message == "Invalid email format."

    @pytest.mark.asyncio
    async def test_dispatch_missing_header_short_circuits(self, gate, mock_request):
        call_next = AsyncMock()

        response = await gate.dispatch(mock_request, call_next)

        assert response.status_code == 401
        assert json.loads(response.body) == {"error": "Missing X-User-Email header. Access denied."}
        call_next.assert_not_called()
        gate.metrics.record_identity_rejection.assert_called_once_with("UNAUTHENTICATED")

    @pytest.mark.asyncio
    async def test_dispatch_malformed_header_short_circuits(self, gate, mock_request):
        mock_request.headers = {"X-User-Email": "invalid-email-format"}
        call_next = AsyncMock()

        response = await gate.dispatch(mock_request, call_next)

        assert response.status_code == 400
        assert json.loads(response.body) == {"error": "Invalid email format."}
        call_next.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatch_attaches_normalized_email(self, gate, mock_request):
        mock_request.headers = {"X-User-Email": "Owner@Example.com"}
        downstream = MagicMock()
        call_next = AsyncMock(return_value=downstream)

        response = await gate.dispatch(mock_request, call_next)

        assert response is downstream
        assert mock_request.state.user_email == "owner@example.com"
        call_next.assert_awaited_once_with(mock_request)

    @pytest.mark.asyncio
    async def test_dispatch_skips_exempt_route(self, gate, mock_request):
        mock_request.method = "POST"
        mock_request.url.path = "/api/users"
        downstream = MagicMock()
        call_next = AsyncMock(return_value=downstream)

        response = await gate.dispatch(mock_request, call_next)

        assert response is downstream
        assert not hasattr(mock_request.state, "user_email")

    def test_current_user_email_reads_request_state(self, mock_request):
        mock_request.state.user_email = "owner@example.com"
        assert current_user_email(mock_request) == "owner@example.com"

    def test_current_user_email_without_gate(self, mock_request):
        with pytest.raises(AuthenticationError):
            current_user_email(mock_request)
