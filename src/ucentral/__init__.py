"""
uCentral command-chain client.

Usage:
    >>> from ucentral import SessionManager, DeviceClient, CommandDispatcher
    >>>
    >>> with SessionManager() as session:
    ...     CommandDispatcher(DeviceClient(session)).run(["listdevices"])
"""

from __future__ import annotations

from ucentral.api import DeviceClient, SessionManager, SessionState, Transport
from ucentral.cache import SessionCache
from ucentral.config import (
    UCentralSettings,
    configure_settings,
    get_settings,
    reset_settings,
)
from ucentral.dispatch import (
    Command,
    CommandDispatcher,
    CommandFrame,
    TokenCursor,
    parse_chain,
)

__version__ = "0.3.0"

__all__ = [
    # Session and operations
    "SessionManager",
    "SessionState",
    "DeviceClient",
    "Transport",
    # Chain
    "Command",
    "CommandDispatcher",
    "CommandFrame",
    "TokenCursor",
    "parse_chain",
    "SessionCache",
    # Settings
    "UCentralSettings",
    "configure_settings",
    "get_settings",
    "reset_settings",
    "__version__",
]
