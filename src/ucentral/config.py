"""
uCentral client settings.

Values come from (highest priority first) explicit overrides, ``UCENTRAL_*``
environment variables, then the defaults below.

Example:
    >>> settings = get_settings()
    >>> settings.security_endpoint
    ''
    >>> configure_settings(security_endpoint="sec.example.com:16001", debug=True)
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UCentralSettings(BaseSettings):
    """Settings for one uCentral session."""

    model_config = SettingsConfigDict(
        env_prefix="UCENTRAL_",
        extra="ignore",
    )

    # Credentials
    username: str = "tip@ucentral.com"
    password: str = "openwifi"
    security_endpoint: str = Field(
        default="",
        description="host:port of the security (uc.SEC) service",
    )

    # HTTP
    request_timeout: float | None = Field(default=None, ge=1.0, le=300.0)
    verify_tls: bool = True

    # Notes
    note_author: str = Field(default="ucentral-cli", min_length=1)

    # Logging
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level


_settings: UCentralSettings | None = None


def get_settings() -> UCentralSettings:
    """Get the process-wide settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = UCentralSettings()
    return _settings


def configure_settings(**overrides: Any) -> UCentralSettings:
    """Replace the process-wide settings with explicit overrides applied."""
    global _settings
    _settings = UCentralSettings(**overrides)
    return _settings


def reset_settings() -> None:
    """Drop the process-wide settings."""
    global _settings
    _settings = None


__all__ = [
    "UCentralSettings",
    "get_settings",
    "configure_settings",
    "reset_settings",
]
