"""
Tests for session lifecycle: login, endpoint discovery, logout.
"""

import json
import logging

import httpx
import pytest

from ucentral.api.session import SessionManager, SessionState
from ucentral.exceptions import (
    AuthError,
    DiscoveryError,
    EndpointsIncompleteError,
    LogoutError,
    NotAuthenticatedError,
)
from ucentral.models import Credentials

from .conftest import (
    FMS_HOST,
    GW_HOST,
    SEC_HOST,
    TOKEN,
    endpoints_payload,
    token_payload,
)


class TestAuthenticate:
    """Tests for SessionManager.authenticate()."""

    def test_success(self, settings, transport, fake):
        """Login stores the token and posts credentials without a bearer."""
        session = SessionManager(settings, transport=transport)
        session.authenticate()

        assert session.state == SessionState.AUTHENTICATED
        assert session.access_token == TOKEN
        assert session.token.idle_timeout == 7200
        (login,) = fake.calls("POST", "oauth2")
        assert json.loads(login.content) == {"userId": "tip@ucentral.com", "password": "openwifi"}
        assert "Authorization" not in login.headers

    @pytest.mark.parametrize("user_id,password", [("", "openwifi"), ("tip@ucentral.com", "")])
    def test_missing_credentials_no_network(self, settings, transport, fake, user_id, password):
        """Empty credentials fail before any request."""
        session = SessionManager(
            settings, transport=transport,
            credentials=Credentials(user_id=user_id, password=password),
        )
        with pytest.raises(AuthError, match="credentials"):
            session.authenticate()
        assert fake.requests == []
        assert session.state == SessionState.UNAUTHENTICATED

    def test_missing_security_host_no_network(self, settings, transport, fake):
        """A missing security host fails before any request."""
        settings = settings.model_copy(update={"security_endpoint": ""})
        session = SessionManager(settings, transport=transport)
        with pytest.raises(AuthError, match="security endpoint"):
            session.authenticate()
        assert fake.requests == []

    def test_refused(self, settings, transport, fake):
        """A refused login raises AuthError without retry."""
        fake.route("POST", SEC_HOST, "oauth2", status=403, json={"ErrorCode": 3})
        session = SessionManager(settings, transport=transport)
        with pytest.raises(AuthError):
            session.authenticate()
        assert session.token is None
        assert len(fake.calls("POST", "oauth2")) == 1

    def test_empty_token(self, settings, transport, fake):
        """A response without a token raises AuthError."""
        fake.route("POST", SEC_HOST, "oauth2", json=token_payload(access_token="", errorCode=7))
        session = SessionManager(settings, transport=transport)
        with pytest.raises(AuthError, match="7"):
            session.authenticate()

    def test_network_failure(self, settings):
        """Connection failures surface as AuthError."""
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        from ucentral.api.transport import Transport

        transport = Transport(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(AuthError):
            SessionManager(settings, transport=transport).authenticate()


class TestDiscoverEndpoints:
    """Tests for SessionManager.discover_endpoints()."""

    def _authenticated(self, settings, transport):
        session = SessionManager(settings, transport=transport)
        session.authenticate()
        return session

    def test_resolves_hosts(self, settings, transport, fake):
        """Discovery resolves gateway and firmware hosts."""
        session = self._authenticated(settings, transport)
        session.discover_endpoints()

        assert session.gateway_host == GW_HOST
        assert session.firmware_host == FMS_HOST
        assert session.state == SessionState.ENDPOINTS_RESOLVED
        (request,) = fake.calls("GET", "systemEndpoints")
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"

    def test_order_independent(self, settings, transport, fake):
        """Endpoint order does not matter."""
        fake.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload(
            ("owfms", "https://fms.other:1"),
            ("owgw", "https://gw.other:2"),
        ))
        session = self._authenticated(settings, transport)
        session.discover_endpoints()

        assert session.gateway_host == "gw.other:2"
        assert session.firmware_host == "fms.other:1"

    def test_first_match_wins(self, settings, transport, fake):
        """The first endpoint per role wins."""
        fake.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload(
            ("owgw", "https://gw.first:1"),
            ("owfms", "https://fms.first:2"),
            ("owgw-backup", "https://gw.second:3"),
        ))
        session = self._authenticated(settings, transport)
        session.discover_endpoints()

        assert session.gateway_host == "gw.first:1"

    def test_unknown_types_are_informational(self, settings, transport, fake):
        """Unknown endpoint types are kept for display."""
        fake.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload(
            ("owprov", "https://prov:1"),
            ("owgw", "https://gw:2"),
            ("owfms", "https://fms:3"),
        ))
        session = self._authenticated(settings, transport)
        session.discover_endpoints()

        assert session.describe_endpoints()[0] == "[owprov] https://prov:1"

    def test_endpoints_logged_at_debug(self, settings, transport, fake, caplog):
        """Every declared endpoint is listed in the debug log."""
        session = self._authenticated(settings, transport)

        with caplog.at_level(logging.DEBUG, logger="ucentral"):
            session.discover_endpoints()

        assert f"[owgw] https://{GW_HOST}" in caplog.text
        assert f"[owfms] https://{FMS_HOST}" in caplog.text

    @pytest.mark.parametrize("entries,missing", [
        ((("owgw", "https://gw:2"),), ["fms"]),
        ((("owfms", "https://fms:3"),), ["gw"]),
        ((("owsec", "https://sec:1"),), ["gw", "fms"]),
    ])
    def test_incomplete(self, settings, transport, fake, entries, missing):
        """A missing role raises EndpointsIncompleteError."""
        fake.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload(*entries))
        session = self._authenticated(settings, transport)

        with pytest.raises(EndpointsIncompleteError) as exc:
            session.discover_endpoints()

        assert exc.value.missing == missing
        assert session.gateway_host == ""
        assert session.state == SessionState.AUTHENTICATED

    def test_requires_token(self, settings, transport, fake):
        """Discovery needs a token."""
        session = SessionManager(settings, transport=transport)
        with pytest.raises(NotAuthenticatedError):
            session.discover_endpoints()
        assert fake.requests == []

    def test_transport_failure(self, settings, transport, fake):
        """A failed discovery request raises DiscoveryError."""
        fake.route("GET", SEC_HOST, "systemEndpoints", status=500)
        session = self._authenticated(settings, transport)
        with pytest.raises(DiscoveryError):
            session.discover_endpoints()


class TestTerminate:
    """Tests for SessionManager.terminate()."""

    def test_logout(self, session, fake):
        """Logout deletes the token with the bearer header."""
        session.terminate()

        (logout,) = fake.calls("DELETE", f"oauth2/{TOKEN}")
        assert logout.headers["Authorization"] == f"Bearer {TOKEN}"
        assert session.state == SessionState.LOGGED_OUT
        assert session.token_present is False

    def test_logout_once(self, session, fake):
        """Logout talks to the service only once."""
        session.terminate()
        session.terminate()

        assert len(fake.calls("DELETE", f"oauth2/{TOKEN}")) == 1

    def test_logout_accepts_ok(self, session, fake):
        """Logout accepts HTTP 200 as well as 204."""
        fake.route("DELETE", SEC_HOST, f"oauth2/{TOKEN}", status=200)
        session.terminate()
        assert session.state == SessionState.LOGGED_OUT

    def test_logout_failure(self, session, fake):
        """A failed logout raises LogoutError and still ends the session."""
        fake.route("DELETE", SEC_HOST, f"oauth2/{TOKEN}", status=500)
        with pytest.raises(LogoutError):
            session.terminate()
        assert session.state == SessionState.LOGGED_OUT

    def test_token_not_logged(self, session, caplog):
        """The token in the logout path never reaches the log."""
        with caplog.at_level(logging.DEBUG, logger="ucentral"):
            session.terminate()

        assert "DELETE" in caplog.text
        assert "oauth2/***" in caplog.text
        assert TOKEN not in caplog.text

    def test_token_not_in_logout_error(self, session, fake):
        """A failed logout does not echo the token."""
        fake.route("DELETE", SEC_HOST, f"oauth2/{TOKEN}", status=500)
        with pytest.raises(LogoutError) as exc:
            session.terminate()
        assert TOKEN not in str(exc.value)

    def test_without_login_no_network(self, settings, transport, fake):
        """Logout without a token sends nothing."""
        SessionManager(settings, transport=transport).terminate()
        assert fake.requests == []

    def test_preconditions_after_logout(self, session):
        """Host accessors fail after logout."""
        session.terminate()
        with pytest.raises(NotAuthenticatedError):
            session.require_gateway()
        with pytest.raises(NotAuthenticatedError):
            session.require_firmware()


class TestContextManager:
    """Tests for the scoped session."""

    def test_brackets_block(self, settings, transport, fake):
        """The context manager logs in on entry and out on exit."""
        with SessionManager(settings, transport=transport) as session:
            assert session.state == SessionState.ENDPOINTS_RESOLVED
            assert fake.calls("DELETE", f"oauth2/{TOKEN}") == []

        assert len(fake.calls("DELETE", f"oauth2/{TOKEN}")) == 1

    def test_logout_on_exception(self, settings, transport, fake):
        """An exception in the block still logs out."""
        with pytest.raises(RuntimeError):
            with SessionManager(settings, transport=transport):
                raise RuntimeError("boom")

        assert len(fake.calls("DELETE", f"oauth2/{TOKEN}")) == 1

    def test_logout_when_discovery_fails(self, settings, transport, fake):
        """Failed discovery still logs out."""
        fake.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload(("owgw", "https://gw:2")))

        with pytest.raises(EndpointsIncompleteError):
            with SessionManager(settings, transport=transport):
                pass

        assert len(fake.calls("DELETE", f"oauth2/{TOKEN}")) == 1

    def test_no_logout_when_login_fails(self, settings, transport, fake):
        """Failed login skips logout."""
        fake.route("POST", SEC_HOST, "oauth2", status=401, json={"ErrorCode": 1})

        with pytest.raises(AuthError):
            with SessionManager(settings, transport=transport):
                pass

        assert fake.calls("DELETE", f"oauth2/{TOKEN}") == []

    def test_logout_failure_does_not_mask(self, settings, transport, fake):
        """A logout failure does not replace the block's exception."""
        fake.route("DELETE", SEC_HOST, f"oauth2/{TOKEN}", status=500)

        with pytest.raises(RuntimeError):
            with SessionManager(settings, transport=transport):
                raise RuntimeError("boom")

    def test_repr(self, settings, transport):
        """repr shows the state."""
        session = SessionManager(settings, transport=transport)
        assert "SessionManager" in repr(session)
        assert "unauthenticated" in repr(session)
