"""
uCentral HTTP API.

Usage:
    >>> from ucentral.api import SessionManager, DeviceClient
    >>>
    >>> with SessionManager(settings) as session:
    ...     devices = DeviceClient(session).list_devices()
"""

from __future__ import annotations

from ucentral.api.devices import DeviceClient
from ucentral.api.session import SessionManager, SessionState
from ucentral.api.transport import Transport

__all__ = [
    "DeviceClient",
    "SessionManager",
    "SessionState",
    "Transport",
]
