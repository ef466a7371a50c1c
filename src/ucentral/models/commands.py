"""
Request payloads for gateway device commands.

All payloads are serialised with ``model_dump(by_alias=True)`` so the wire
names stay camelCase.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ucentral.models.devices import Note


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    serial_number: str = Field(alias="serialNumber")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class UpgradeRequest(_Payload):
    uri: str


class RebootRequest(_Payload):
    pass


class FactoryRequest(_Payload):
    keep_redirector: bool = Field(default=True, alias="keepRedirector")


class NotesUpdate(_Payload):
    notes: list[Note] = Field(default_factory=list)


__all__ = [
    "UpgradeRequest",
    "RebootRequest",
    "FactoryRequest",
    "NotesUpdate",
]
