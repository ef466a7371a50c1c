"""
Authenticated session with the uCentral security service.

The session acquires a token, resolves the gateway and firmware hosts, and
releases the token when it is closed. Used as a context manager it brackets a
whole command chain:

    >>> with SessionManager(settings) as session:
    ...     devices = DeviceClient(session).list_devices()
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ucentral.api.transport import (
    STATUS_NO_CONTENT,
    STATUS_OK,
    Transport,
    decode,
    expect_status,
)
from ucentral.config import UCentralSettings, get_settings
from ucentral.exceptions import (
    AuthError,
    DiscoveryError,
    EndpointsIncompleteError,
    LogoutError,
    NotAuthenticatedError,
    RemoteError,
)
from ucentral.logging import get_logger
from ucentral.models.auth import Credentials, Endpoint, EndpointList, OAuth2Token

logger = get_logger(__name__)

GATEWAY_TYPE = "gw"
FIRMWARE_TYPE = "fms"


class SessionState(str, Enum):
    """Session lifecycle."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"
    ENDPOINTS_RESOLVED = "endpoints_resolved"
    LOGGED_OUT = "logged_out"


class SessionManager:
    """
    Owns the bearer token and the discovered service hosts.

    Only this class mutates session state. Device operations check
    ``require_gateway`` / ``require_firmware`` before touching the network.
    """

    def __init__(
        self,
        settings: UCentralSettings | None = None,
        transport: Transport | None = None,
        credentials: Credentials | None = None,
    ) -> None:
        """
        Initialize session.

        Args:
            settings: Session settings (process settings when omitted)
            transport: HTTP transport (built from settings when omitted)
            credentials: Login credentials (taken from settings when omitted)
        """
        self._settings = settings or get_settings()
        self._owns_transport = transport is None
        self.transport = transport or Transport(self._settings)
        self.credentials = credentials or Credentials(
            user_id=self._settings.username,
            password=self._settings.password,
        )
        self.security_host = self._settings.security_endpoint
        self.gateway_host = ""
        self.firmware_host = ""
        self.token: OAuth2Token | None = None
        self.endpoints: list[Endpoint] = []
        self._state = SessionState.UNAUTHENTICATED

    @property
    def settings(self) -> UCentralSettings:
        return self._settings

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def access_token(self) -> str:
        return self.token.access_token if self.token else ""

    @property
    def token_present(self) -> bool:
        return bool(self.access_token) and self._state != SessionState.LOGGED_OUT

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def authenticate(self) -> None:
        """
        Obtain a token from the security service.

        Raises:
            AuthError: Missing credentials or host, refused login, or any
                transport/decode failure
        """
        if not self.credentials.complete:
            raise AuthError("Missing credentials")
        if not self.security_host:
            raise AuthError("Missing security endpoint")

        try:
            response = self.transport.post(
                self.security_host,
                "oauth2",
                json=self.credentials.model_dump(by_alias=True),
            )
            token = decode(response, OAuth2Token)
        except RemoteError as e:
            raise AuthError(f"Login failed: {e}", cause=e) from e

        if not token.access_token:
            raise AuthError(f"Login refused (error code {token.error_code})")

        self.token = token
        self._state = SessionState.AUTHENTICATED
        logger.info("Logged in to uCentral")

    def discover_endpoints(self) -> None:
        """
        Resolve gateway and firmware hosts from ``systemEndpoints``.

        The first endpoint whose type contains ``gw`` (resp. ``fms``) wins.

        Raises:
            NotAuthenticatedError: No token yet
            DiscoveryError: Transport or decode failure
            EndpointsIncompleteError: A role was never declared
        """
        if not self.security_host or not self.token_present:
            raise NotAuthenticatedError()

        try:
            response = self.transport.get(
                self.security_host, "systemEndpoints", token=self.access_token
            )
            declared = decode(response, EndpointList)
        except RemoteError as e:
            raise DiscoveryError(f"Endpoint discovery failed: {e}", cause=e) from e

        self.endpoints = declared.endpoints
        for line in self.describe_endpoints():
            logger.debug(line)

        gateway = firmware = ""
        for endpoint in declared.endpoints:
            if GATEWAY_TYPE in endpoint.type:
                gateway = gateway or endpoint.host
            elif FIRMWARE_TYPE in endpoint.type:
                firmware = firmware or endpoint.host
            else:
                logger.info(f"{endpoint.type} :: {endpoint.uri}")

        missing = []
        if not gateway:
            missing.append(GATEWAY_TYPE)
        if not firmware:
            missing.append(FIRMWARE_TYPE)
        if missing:
            raise EndpointsIncompleteError(missing)

        self.gateway_host = gateway
        self.firmware_host = firmware
        self._state = SessionState.ENDPOINTS_RESOLVED
        logger.debug(f"Gateway: {gateway}, Firmware: {firmware}")

    def terminate(self) -> None:
        """
        Release the token.

        Safe to call more than once; only the first call with a live token
        talks to the service.

        Raises:
            LogoutError: Service did not confirm the deletion
        """
        if not self.token_present:
            self._state = SessionState.LOGGED_OUT
            return

        token = self.access_token
        self._state = SessionState.LOGGED_OUT
        try:
            response = self.transport.delete(
                self.security_host, f"oauth2/{token}", token=token
            )
            expect_status(response, STATUS_NO_CONTENT, STATUS_OK)
        except RemoteError as e:
            raise LogoutError(f"Logout failed: {e}", cause=e) from e
        logger.info("Logged out of uCentral")

    def open(self) -> SessionManager:
        """Authenticate and resolve endpoints."""
        self.authenticate()
        self.discover_endpoints()
        return self

    def close(self) -> None:
        """Release the token, then the transport."""
        try:
            self.terminate()
        finally:
            if self._owns_transport:
                self.transport.close()

    # =========================================================================
    # Preconditions
    # =========================================================================

    def require_gateway(self) -> str:
        """Return the gateway host or raise if the session is not ready."""
        if not self.token_present or not self.gateway_host:
            raise NotAuthenticatedError()
        return self.gateway_host

    def require_firmware(self) -> str:
        """Return the firmware host or raise if the session is not ready."""
        if not self.token_present or not self.firmware_host:
            raise NotAuthenticatedError()
        return self.firmware_host

    def describe_endpoints(self) -> list[str]:
        """``[type] uri`` for every declared endpoint."""
        return [endpoint.describe() for endpoint in self.endpoints]

    # =========================================================================
    # Context manager
    # =========================================================================

    def _close_quietly(self) -> None:
        try:
            self.close()
        except LogoutError as e:
            logger.error(str(e))

    def __enter__(self) -> SessionManager:
        try:
            return self.open()
        except BaseException:
            self._close_quietly()
            raise

    def __exit__(self, *args: Any) -> None:
        self._close_quietly()

    def __repr__(self) -> str:
        return (
            f"<SessionManager security={self.security_host!r} "
            f"state={self._state.value!r}>"
        )


__all__ = ["SessionManager", "SessionState", "GATEWAY_TYPE", "FIRMWARE_TYPE"]
