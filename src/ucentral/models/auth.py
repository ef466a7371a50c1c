"""
Authentication and endpoint-discovery models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Credentials posted to the security service to obtain a token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(alias="userId")
    password: str

    @property
    def complete(self) -> bool:
        """True when both fields are non-empty."""
        return bool(self.user_id) and bool(self.password)


class AclTemplate(BaseModel):
    """Permissions attached to a token."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    delete: bool = Field(default=False, alias="Delete")
    portal_login: bool = Field(default=False, alias="PortalLogin")
    read: bool = Field(default=False, alias="Read")
    read_write: bool = Field(default=False, alias="ReadWrite")
    read_write_create: bool = Field(default=False, alias="ReadWriteCreate")


class OAuth2Token(BaseModel):
    """
    Token returned by the security service.

    ``access_token`` is sent as the bearer credential on every later request.
    ``expires_in`` and ``idle_timeout`` are kept for display only; the client
    never refreshes or expires a token on its own.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = ""
    refresh_token: str = ""
    token_type: str = ""
    expires_in: int = 0
    idle_timeout: int = 0
    created: int = 0
    username: str = ""
    error_code: int = Field(default=0, alias="errorCode")
    user_must_change_password: bool = Field(
        default=False, alias="userMustChangePassword"
    )
    acl_template: AclTemplate = Field(default_factory=AclTemplate, alias="aclTemplate")

    def __repr__(self) -> str:
        # Never print the secret itself.
        return f"<OAuth2Token username={self.username!r} expires_in={self.expires_in}>"


class Endpoint(BaseModel):
    """One service endpoint declared by the security service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = ""
    uri: str = ""
    id: int = 0
    vendor: str = ""
    authentication_type: str = Field(default="", alias="authenticationType")

    @property
    def host(self) -> str:
        """Bare ``host:port`` taken from the right of the scheme separator."""
        _, sep, rest = self.uri.partition("//")
        return rest if sep else self.uri

    def describe(self) -> str:
        return f"[{self.type}] {self.uri}"


class EndpointList(BaseModel):
    """Response of ``systemEndpoints``."""

    model_config = ConfigDict(extra="ignore")

    endpoints: list[Endpoint] = Field(default_factory=list)


__all__ = [
    "Credentials",
    "AclTemplate",
    "OAuth2Token",
    "Endpoint",
    "EndpointList",
]
