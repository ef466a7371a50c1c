"""
Device operations on the gateway and firmware services.

Each method wraps a single HTTP call and raises a ``RemoteError`` subclass on
failure. Nothing is retried.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Callable

from ucentral.api.transport import STATUS_OK, decode, expect_status
from ucentral.exceptions import AlreadyCurrentError, SerialNotFoundError
from ucentral.logging import get_logger
from ucentral.models.commands import (
    FactoryRequest,
    NotesUpdate,
    RebootRequest,
    UpgradeRequest,
)
from ucentral.models.devices import Device, DeviceList, Note
from ucentral.models.firmware import (
    Firmware,
    FirmwareDevice,
    FirmwareDeviceList,
    FirmwareList,
)

if TYPE_CHECKING:
    import httpx

    from ucentral.api.session import SessionManager

logger = get_logger(__name__)


class DeviceClient:
    """
    Remote device operations.

    Example:
        >>> with SessionManager(settings) as session:
        ...     client = DeviceClient(session)
        ...     record = client.get_firmware_device("aabbccddeeff")
        ...     client.upgrade_device_to_latest(record)
    """

    def __init__(
        self,
        session: SessionManager,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize client.

        Args:
            session: Session with resolved endpoints
            clock: Source of the note timestamps
        """
        self._session = session
        self._transport = session.transport
        self._clock = clock

    def _gateway(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        host = self._session.require_gateway()
        return self._transport.request(
            method, host, path, token=self._session.access_token, **kwargs
        )

    def _firmware(self, path: str, **kwargs: Any) -> httpx.Response:
        host = self._session.require_firmware()
        return self._transport.request(
            "GET", host, path, token=self._session.access_token, **kwargs
        )

    # =========================================================================
    # Gateway reads
    # =========================================================================

    def list_devices(self) -> DeviceList:
        """All devices configured on the gateway."""
        return decode(self._gateway("GET", "devices"), DeviceList)

    def get_device(self, serial: str) -> Device:
        """One gateway device, configuration included."""
        return decode(self._gateway("GET", f"device/{serial}"), Device)

    # =========================================================================
    # Firmware service reads
    # =========================================================================

    def list_firmware_device_types(self) -> list[str]:
        """Device types the firmware service has images for."""
        response = self._firmware("firmwares", params={"deviceSet": "true"})
        return decode(response, list[str])

    def get_firmware_list_by_device(self, device_type: str) -> FirmwareList:
        """All firmware images for a device type."""
        response = self._firmware("firmwares", params={"deviceType": device_type})
        return decode(response, FirmwareList)

    def get_latest_firmware_by_device(self, device_type: str) -> Firmware:
        """Latest firmware image for a device type."""
        response = self._firmware(
            "firmwares",
            params={"latestOnly": "true", "deviceType": device_type},
        )
        return decode(response, Firmware)

    def get_all_firmware_devices(self) -> FirmwareDeviceList:
        """Every device tracked by the firmware service."""
        return decode(self._firmware("connectedDevices"), FirmwareDeviceList)

    def get_firmware_device(self, serial: str) -> FirmwareDevice:
        """
        Firmware-tracking record for one serial.

        The collection has no by-serial endpoint, so the whole list is
        fetched and scanned.

        Raises:
            SerialNotFoundError: Serial is not tracked
        """
        record = self.get_all_firmware_devices().find(serial)
        if record is None:
            raise SerialNotFoundError(serial)
        return record

    # =========================================================================
    # Gateway commands
    # =========================================================================

    def upgrade_device_to_latest(self, record: FirmwareDevice) -> Firmware:
        """
        Upgrade a device to the latest image for its type.

        Returns:
            The image the device was told to install

        Raises:
            AlreadyCurrentError: Device already runs the latest revision; no
                upgrade request is sent
        """
        latest = self.get_latest_firmware_by_device(record.device_type)
        if record.revision == latest.revision:
            raise AlreadyCurrentError(record.serial_number, record.revision)
        logger.info(f"{record.serial_number} -> {latest.uri}")
        self.upgrade_device_firmware(record.serial_number, latest.uri)
        return latest

    def upgrade_device_firmware(self, serial: str, uri: str) -> None:
        """Tell a device to install the image at ``uri``."""
        payload = UpgradeRequest(serial_number=serial, uri=uri)
        response = self._gateway(
            "POST", f"device/{serial}/upgrade", json=payload.to_json()
        )
        expect_status(response, STATUS_OK)

    def reboot_device(self, serial: str) -> None:
        payload = RebootRequest(serial_number=serial)
        response = self._gateway(
            "POST", f"device/{serial}/reboot", json=payload.to_json()
        )
        expect_status(response, STATUS_OK)

    def factory_reset_device(self, serial: str, keep_redirector: bool = True) -> None:
        """
        Factory reset a device.

        Args:
            serial: Device serial number
            keep_redirector: Keep the redirector that points the device back
                at this controller
        """
        payload = FactoryRequest(serial_number=serial, keep_redirector=keep_redirector)
        response = self._gateway(
            "POST", f"device/{serial}/factory", json=payload.to_json()
        )
        expect_status(response, STATUS_OK)

    def add_notes_to_device(self, serial: str, notes: list[str]) -> NotesUpdate:
        """
        Append notes to a device.

        All notes share one timestamp and the configured author.

        Returns:
            The payload that was sent
        """
        created = int(self._clock())
        author = self._session.settings.note_author
        payload = NotesUpdate(
            serial_number=serial,
            notes=[Note(created=created, created_by=author, note=n) for n in notes],
        )
        response = self._gateway("PUT", f"device/{serial}", json=payload.to_json())
        expect_status(response, STATUS_OK)
        return payload


__all__ = ["DeviceClient"]
