"""
uCentral client exceptions.

Two families matter to the command chain:

- ``FatalError`` subclasses mean the user's input is unusable. The chain is
  aborted (session teardown still runs).
- ``RemoteError`` subclasses mean a single remote operation failed. The
  failure is reported and the chain moves on to the next command.
"""

from __future__ import annotations


class UCentralError(Exception):
    """Base exception for all uCentral client errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self._original_cause = cause

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Input / precondition errors
# =============================================================================


class FatalError(UCentralError):
    """Error that aborts the whole command chain."""


class CommandInputError(FatalError):
    """Malformed command chain (missing argument, bad serial, unknown type)."""

    def __init__(self, command: str, message: str) -> None:
        self.command = command
        super().__init__(f"{command}: {message}")


class NotAuthenticatedError(UCentralError):
    """Operation attempted before the session reached the required state."""

    def __init__(self, message: str = "Must authenticate first") -> None:
        super().__init__(message)


# =============================================================================
# Session lifecycle errors
# =============================================================================


class AuthError(UCentralError):
    """Login failed or was refused locally."""


class DiscoveryError(UCentralError):
    """Endpoint discovery failed."""


class EndpointsIncompleteError(DiscoveryError):
    """Discovery finished without resolving both gateway and firmware hosts."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Did not find desired endpoints: {', '.join(missing)}")


class LogoutError(UCentralError):
    """Token release failed."""


# =============================================================================
# Remote / runtime errors (recoverable at chain level)
# =============================================================================


class RemoteError(UCentralError):
    """A single remote operation failed."""


class TransportError(RemoteError):
    """Network-level failure talking to an endpoint."""


class DecodeError(RemoteError):
    """Response body could not be decoded into the expected payload."""


class UnexpectedStatusError(RemoteError):
    """Service answered with a status other than the documented success code."""

    def __init__(self, status_code: int, url: str = "", body: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self.body = body
        message = f"Unexpected status {status_code}"
        if url:
            message += f" from {url}"
        if body:
            message += f": {body[:200]}"
        super().__init__(message)


class NotFoundError(RemoteError):
    """Requested record does not exist."""


class SerialNotFoundError(NotFoundError):
    """Serial number is not tracked by the firmware service."""

    def __init__(self, serial: str) -> None:
        self.serial = serial
        super().__init__(f"SN not found: {serial}")


class AlreadyCurrentError(RemoteError):
    """Device already runs the latest firmware revision."""

    def __init__(self, serial: str, revision: str) -> None:
        self.serial = serial
        self.revision = revision
        super().__init__(
            f"{serial}: latest revision same as current version ({revision})"
        )


__all__ = [
    "UCentralError",
    "FatalError",
    "CommandInputError",
    "NotAuthenticatedError",
    "AuthError",
    "DiscoveryError",
    "EndpointsIncompleteError",
    "LogoutError",
    "RemoteError",
    "TransportError",
    "DecodeError",
    "UnexpectedStatusError",
    "NotFoundError",
    "SerialNotFoundError",
    "AlreadyCurrentError",
]
