"""
Pytest configuration and fixtures for uCentral client tests.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
import pytest

from ucentral.api.devices import DeviceClient
from ucentral.api.session import SessionManager
from ucentral.api.transport import Transport
from ucentral.config import UCentralSettings

SEC_HOST = "sec.test:16001"
GW_HOST = "gw.test:16002"
FMS_HOST = "fms.test:16004"
TOKEN = "tok-0123456789abcdef"
NOW = 1_700_000_000


# ============================================================================
# Fake uCentral services
# ============================================================================


class FakeUCentral:
    """
    In-memory security, gateway and firmware services.

    Routes are keyed by ``(method, host, path)`` where ``path`` is relative to
    ``/api/v1/`` and includes the query string. Unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str, str], Callable[[httpx.Request], httpx.Response]] = {}

        self.route("POST", SEC_HOST, "oauth2", json=token_payload())
        self.route("GET", SEC_HOST, "systemEndpoints", json=endpoints_payload())
        self.route("DELETE", SEC_HOST, f"oauth2/{TOKEN}", status=204)

    def route(
        self,
        method: str,
        host: str,
        path: str,
        status: int = 200,
        json: Any = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if json is None:
                    return httpx.Response(status)
                return httpx.Response(status, json=json)

        self.routes[(method, host, path)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = f"{request.url.host}:{request.url.port}"
        path = request.url.raw_path.decode().removeprefix("/api/v1/")
        handler = self.routes.get((request.method, host, path))
        if handler is None:
            return httpx.Response(404, json={"ErrorCode": 404})
        return handler(request)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method
            and r.url.raw_path.decode().removeprefix("/api/v1/") == path
        ]

    def device_requests(self) -> list[httpx.Request]:
        """Requests sent after login/discovery, logout excluded."""
        return [
            r for r in self.requests
            if f"{r.url.host}:{r.url.port}" != SEC_HOST
        ]

    def mutating_requests(self) -> list[httpx.Request]:
        return [r for r in self.device_requests() if r.method in ("POST", "PUT", "DELETE")]


# ============================================================================
# Payload builders
# ============================================================================


def token_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "access_token": TOKEN,
        "refresh_token": "refresh-xyz",
        "token_type": "Bearer",
        "expires_in": 2_592_000,
        "idle_timeout": 7200,
        "created": NOW,
        "username": "tip@ucentral.com",
        "errorCode": 0,
        "userMustChangePassword": False,
        "aclTemplate": {"Read": True, "ReadWrite": True},
    }
    payload.update(overrides)
    return payload


def endpoints_payload(*entries: tuple[str, str]) -> dict[str, Any]:
    if not entries:
        entries = (
            ("owsec", f"https://{SEC_HOST}"),
            ("owgw", f"https://{GW_HOST}"),
            ("owfms", f"https://{FMS_HOST}"),
        )
    return {
        "endpoints": [
            {"type": t, "uri": uri, "id": i, "vendor": "OpenWiFi", "authenticationType": "internal"}
            for i, (t, uri) in enumerate(entries)
        ]
    }


def device_payload(serial: str, **overrides: Any) -> dict[str, Any]:
    payload = {
        "serialNumber": serial,
        "deviceType": "edgecore_eap101",
        "UUID": 1650000000,
        "manufacturer": "Edgecore",
        "macAddress": "90:3c:b3:00:00:01",
        "firmware": "TIP-v2.5.0",
        "notes": [],
        "configuration": {
            "unit": {"name": "lab-ap", "location": "Rack 4", "timezone": "UTC"},
            "radios": [{"band": "2G"}, {"band": "5G"}],
            "interfaces": [
                {
                    "name": "WAN",
                    "role": "upstream",
                    "ipv4": {"addressing": "dynamic"},
                    "ssids": [],
                },
                {
                    "name": "LAN",
                    "role": "downstream",
                    "ipv4": {"addressing": "static"},
                    "ipv6": {"addressing": "dynamic"},
                    "ssids": [{"name": "Guest"}, {"name": "Staff"}],
                },
            ],
        },
    }
    payload.update(overrides)
    return payload


def firmware_device_payload(serial: str, revision: str = "TIP-v2.5.0", status: str = "connected") -> dict[str, Any]:
    return {
        "serialNumber": serial,
        "deviceType": "edgecore_eap101",
        "revision": revision,
        "status": status,
        "endPoint": "10.0.0.5",
        "lastUpdate": NOW,
    }


def firmware_payload(revision: str, uri: str = "https://fw.test/eap101-latest.bin") -> dict[str, Any]:
    return {
        "id": f"fw-{revision}",
        "release": "main",
        "revision": revision,
        "uri": uri,
        "imageDate": NOW,
        "created": NOW,
        "deviceType": "edgecore_eap101",
        "latest": True,
    }


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_ucentral_state():
    """Reset settings singleton and logger handlers around each test."""
    from ucentral.config import reset_settings

    reset_settings()
    yield
    reset_settings()
    logger = logging.getLogger("ucentral")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def settings() -> UCentralSettings:
    """Settings pointing at the fake security service."""
    return UCentralSettings(
        username="tip@ucentral.com",
        password="openwifi",
        security_endpoint=SEC_HOST,
        note_author="field-tech",
    )


@pytest.fixture
def fake() -> FakeUCentral:
    return FakeUCentral()


@pytest.fixture
def http_client(fake):
    client = httpx.Client(transport=httpx.MockTransport(fake.handle))
    yield client
    client.close()


@pytest.fixture
def transport(settings, http_client) -> Transport:
    return Transport(settings, client=http_client)


@pytest.fixture
def session(settings, transport) -> SessionManager:
    """Session that has logged in and resolved endpoints."""
    return SessionManager(settings, transport=transport).open()


@pytest.fixture
def client(session) -> DeviceClient:
    return DeviceClient(session, clock=lambda: float(NOW))
