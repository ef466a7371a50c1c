"""uCentral data models."""

from ucentral.models.auth import (
    AclTemplate,
    Credentials,
    Endpoint,
    EndpointList,
    OAuth2Token,
)
from ucentral.models.commands import (
    FactoryRequest,
    NotesUpdate,
    RebootRequest,
    UpgradeRequest,
)
from ucentral.models.devices import (
    DEVICE_INFO,
    SERIAL_LENGTH,
    Device,
    DeviceList,
    Note,
)
from ucentral.models.firmware import (
    DEVICE_TYPES,
    Firmware,
    FirmwareDevice,
    FirmwareDeviceList,
    FirmwareList,
)

__all__ = [
    # Auth
    "AclTemplate",
    "Credentials",
    "Endpoint",
    "EndpointList",
    "OAuth2Token",
    # Commands
    "FactoryRequest",
    "NotesUpdate",
    "RebootRequest",
    "UpgradeRequest",
    # Devices
    "DEVICE_INFO",
    "SERIAL_LENGTH",
    "Device",
    "DeviceList",
    "Note",
    # Firmware
    "DEVICE_TYPES",
    "Firmware",
    "FirmwareDevice",
    "FirmwareDeviceList",
    "FirmwareList",
]
