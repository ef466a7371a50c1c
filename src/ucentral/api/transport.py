"""
HTTP transport for uCentral services.

Every service is addressed as ``https://{host}/api/v1/{path}``. The host is
passed per request because the security, gateway and firmware services live
on different hosts that are only known after endpoint discovery.
"""

from __future__ import annotations

import re
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ucentral.config import UCentralSettings, get_settings
from ucentral.exceptions import DecodeError, TransportError, UnexpectedStatusError
from ucentral.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

API_PREFIX = "api/v1"

# Documented success codes
STATUS_OK = 200
STATUS_NO_CONTENT = 204

# Logout addresses the token itself: oauth2/{token}
_TOKEN_SEGMENT = re.compile(r"(/oauth2/)[^/?#]+")


def redact_url(url: Any) -> str:
    """URL text with any bearer token in the path masked."""
    return _TOKEN_SEGMENT.sub(r"\1***", str(url))


class Transport:
    """
    Thin synchronous wrapper around ``httpx.Client``.

    Example:
        >>> with Transport(settings) as transport:
        ...     resp = transport.get("gw.example.com:16002", "devices", token="abc")
    """

    def __init__(
        self,
        settings: UCentralSettings | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize transport.

        Args:
            settings: Session settings (process settings when omitted)
            client: Pre-built httpx client; the transport does not close it
        """
        self._settings = settings or get_settings()
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self._settings.request_timeout,
            verify=self._settings.verify_tls,
        )

    @staticmethod
    def build_url(host: str, path: str) -> str:
        return f"https://{host}/{API_PREFIX}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        host: str,
        path: str,
        *,
        token: str | None = None,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Issue one request.

        Args:
            method: HTTP method
            host: ``host:port`` of the target service
            path: Path relative to ``/api/v1/``
            token: Bearer token; omitted for the login request
            json: JSON body
            params: Query parameters

        Returns:
            The raw response, whatever its status

        Raises:
            TransportError: Connection, TLS or protocol failure
        """
        url = self.build_url(host, path)
        shown = redact_url(url)
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"{method} {shown}")
        try:
            response = self._client.request(
                method, url, headers=headers, json=json, params=params
            )
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {shown} failed: {e}", cause=e) from e
        logger.debug(f"{response.status_code} {response.reason_phrase}")
        return response

    def get(self, host: str, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", host, path, **kwargs)

    def post(self, host: str, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", host, path, **kwargs)

    def put(self, host: str, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", host, path, **kwargs)

    def delete(self, host: str, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", host, path, **kwargs)

    def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def expect_status(response: httpx.Response, *codes: int) -> None:
    """Raise ``UnexpectedStatusError`` unless the status is one of ``codes``."""
    if response.status_code not in codes:
        raise UnexpectedStatusError(
            response.status_code,
            url=redact_url(response.request.url),
            body=response.text,
        )


def decode(response: httpx.Response, model: type[T]) -> T:
    """
    Decode a successful JSON response into ``model``.

    Args:
        response: Response from ``Transport.request``
        model: Pydantic model class or any other type ``TypeAdapter`` accepts

    Raises:
        UnexpectedStatusError: Non-2xx response
        DecodeError: Body is not JSON or does not match ``model``
    """
    if not response.is_success:
        raise UnexpectedStatusError(
            response.status_code,
            url=redact_url(response.request.url),
            body=response.text,
        )
    try:
        data = response.json()
    except ValueError as e:
        raise DecodeError(
            f"Invalid JSON from {redact_url(response.request.url)}", cause=e
        ) from e
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as e:
        raise DecodeError(
            f"Unexpected payload from {redact_url(response.request.url)}: {e}", cause=e
        ) from e


__all__ = [
    "Transport",
    "expect_status",
    "decode",
    "redact_url",
    "STATUS_OK",
    "STATUS_NO_CONTENT",
]
