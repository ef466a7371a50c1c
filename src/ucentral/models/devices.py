"""
Gateway device models.

The device ``configuration`` is an opaque mapping; only a handful of keys are
read to build the human-readable reports.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Qualifiers accepted after ``listdevices`` / ``getdevice``.
DEVICE_INFO: tuple[str, ...] = (
    "configuration",
    "interfaces",
    "capabilities",
    "status",
    "stats",
    "logs",
    "health",
)

SERIAL_LENGTH = 12


class Note(BaseModel):
    """A note attached to a device."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    created: int = 0
    created_by: str = Field(default="", alias="createdBy")
    note: str = ""


class Device(BaseModel):
    """Gateway ``Device`` record, configuration included."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    serial_number: str = Field(default="", alias="serialNumber")
    device_type: str = Field(default="", alias="deviceType")
    uuid: int = Field(default=0, alias="UUID")
    compatible: str = ""
    manufacturer: str = ""
    mac_address: str = Field(default="", alias="macAddress")
    firmware: str = ""
    fw_update_policy: str = Field(default="", alias="fwUpdatePolicy")
    location: str = ""
    owner: str = ""
    venue: str = ""
    created_timestamp: int = Field(default=0, alias="createdTimestamp")
    last_configuration_change: int = Field(default=0, alias="lastConfigurationChange")
    last_configuration_download: int = Field(
        default=0, alias="lastConfigurationDownload"
    )
    last_fw_update: int = Field(default=0, alias="lastFWUpdate")
    notes: list[Note] = Field(default_factory=list)
    configuration: dict[str, Any] = Field(default_factory=dict)

    def list_info(self, info: str = "") -> list[str]:
        """
        Build the report lines for one info qualifier.

        An empty qualifier gives the generic description. Qualifiers without
        a report yet give an empty list.
        """
        if info == "interfaces":
            return self.generate_interface_report()
        if info == "configuration":
            return self.generate_config_report()
        if info in DEVICE_INFO:
            return []
        return self.generate_description()

    def generate_description(self) -> list[str]:
        desc = f"Manufacturer: {self.manufacturer}, "
        desc += f"Type: {self.device_type}, "
        desc += f"MAC Address: {self.mac_address}, "
        desc += f"Firmware: {self.firmware}, "
        desc += f"UUID: {self.uuid}"
        return [desc]

    def generate_config_report(self) -> list[str]:
        unit = self.configuration.get("unit") or {}
        desc = f"Name: {unit.get('name', '')}, "
        desc += f"Location: {unit.get('location', '')}, "
        desc += f"Timezone: {unit.get('timezone', '')}, "
        desc += f"Radios: {len(self.configuration.get('radios') or [])}, "
        desc += f"Interfaces: {len(self.configuration.get('interfaces') or [])}"
        return [desc]

    def generate_interface_report(self) -> list[str]:
        lines = []
        for iface in self.configuration.get("interfaces") or []:
            ipv4 = iface.get("ipv4") or {}
            ipv6 = iface.get("ipv6") or {}
            ssids = [s.get("name", "") for s in iface.get("ssids") or []]
            desc = f"Name: {iface.get('name', '')}, "
            desc += f"Role: {iface.get('role', '')}, "
            desc += f"IPv4 Addressing: {ipv4.get('addressing', '')}, "
            desc += f"IPv6 Addressing: {ipv6.get('addressing', '')}, "
            desc += f"SSIDs: {' '.join(ssids)}"
            lines.append(desc)
        return lines


class DeviceList(BaseModel):
    """Response of the gateway ``devices`` collection."""

    model_config = ConfigDict(extra="ignore")

    devices: list[Device] = Field(default_factory=list)

    def serial_numbers(self) -> list[str]:
        return [d.serial_number for d in self.devices]

    def find(self, serial: str) -> Device | None:
        for device in self.devices:
            if device.serial_number == serial:
                return device
        return None

    def info_by_serial(self, serial: str, info: str = "") -> list[str]:
        device = self.find(serial)
        return device.list_info(info) if device else []


__all__ = [
    "DEVICE_INFO",
    "SERIAL_LENGTH",
    "Note",
    "Device",
    "DeviceList",
]
