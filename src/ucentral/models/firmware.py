"""
Firmware-service models.

``FirmwareDevice`` is the firmware service's own view of a device (status and
running revision). It is a different record from the gateway ``Device`` and is
correlated with it by serial number only.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Device types known to the firmware service (``firmwares?deviceSet=true``).
# Used for a local check before asking the service.
DEVICE_TYPES: tuple[str, ...] = (
    "cig_wf160d",
    "cig_wf188",
    "cig_wf194c",
    "edgecore_eap101",
    "edgecore_eap102",
    "edgecore_ecs4100-12ph",
    "edgecore_ecw5211",
    "edgecore_ecw5410",
    "edgecore_oap100",
    "edgecore_spw2ac1200",
    "edgecore_ssw2ac2600",
    "hfcl_ion4.yml",
    "indio_um-305ac",
    "linksys_e8450-ubi",
    "linksys_ea6350",
    "linksys_ea8300",
    "mikrotik_nand",
    "mikrotik_nand-large",
    "tplink_cpe210_v3",
    "tplink_cpe510_v3",
    "tplink_eap225_outdoor_v1",
    "tplink_ec420",
    "tplink_ex227",
    "tplink_ex228",
    "tplink_ex447",
    "wallys_dr40x9",
)


class Firmware(BaseModel):
    """One firmware image with its download URI."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    release: str = ""
    revision: str = ""
    uri: str = ""
    image: str = ""
    image_date: int = Field(default=0, alias="imageDate")
    created: int = 0
    description: str = ""
    device_type: str = Field(default="", alias="deviceType")
    digest: str = ""
    download_count: int = Field(default=0, alias="downloadCount")
    firmware_hash: str = Field(default="", alias="firmwareHash")
    latest: bool = False
    location: str = ""
    notes: list[Any] = Field(default_factory=list)
    owner: str = ""
    size: int = 0
    uploader: str = ""

    def generate_description(self) -> str:
        desc = f"ID: {self.id}, "
        desc += f"Release: {self.release}, "
        desc += f"Revision: {self.revision}, "
        desc += f"Image Date: {self.image_date}, Created: {self.created}, "
        desc += f"URI: {self.uri}"
        return desc


class FirmwareList(BaseModel):
    """Firmware images for one device type."""

    model_config = ConfigDict(extra="ignore")

    firmwares: list[Firmware] = Field(default_factory=list)

    def generate_list(self) -> list[str]:
        return [fw.generate_description() for fw in self.firmwares]


class FirmwareDevice(BaseModel):
    """Firmware-tracking record used for status and upgrades."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    serial_number: str = Field(default="", alias="serialNumber")
    device_type: str = Field(default="", alias="deviceType")
    revision: str = ""
    status: str = ""
    end_point: str = Field(default="", alias="endPoint")
    last_update: int = Field(default=0, alias="lastUpdate")


class FirmwareDeviceList(BaseModel):
    """Response of the firmware service ``connectedDevices`` collection."""

    model_config = ConfigDict(extra="ignore")

    devices: list[FirmwareDevice] = Field(default_factory=list)

    def find(self, serial: str) -> FirmwareDevice | None:
        for record in self.devices:
            if record.serial_number == serial:
                return record
        return None


__all__ = [
    "DEVICE_TYPES",
    "Firmware",
    "FirmwareList",
    "FirmwareDevice",
    "FirmwareDeviceList",
]
