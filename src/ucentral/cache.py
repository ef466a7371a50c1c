"""
Per-chain response cache.

Holds one device-list snapshot and one device detail. A slot answers only for
the exact key it was filled with; putting a new key replaces the old entry.
Nothing is invalidated by device commands (reboot, upgrade, ...) within a
chain.
"""

from __future__ import annotations

from typing import Generic, Hashable, TypeVar

from ucentral.models.devices import Device, DeviceList

V = TypeVar("V")

# Key for the single device-list snapshot.
ALL_DEVICES = "*"


class CacheSlot(Generic[V]):
    """A single keyed entry."""

    def __init__(self) -> None:
        self._key: Hashable | None = None
        self._value: V | None = None

    def get(self, key: Hashable) -> V | None:
        if self._value is not None and self._key == key:
            return self._value
        return None

    def put(self, key: Hashable, value: V) -> None:
        self._key = key
        self._value = value


class SessionCache:
    """Device-list and device-detail slots for one session chain."""

    def __init__(self) -> None:
        self.device_list: CacheSlot[DeviceList] = CacheSlot()
        self.device: CacheSlot[Device] = CacheSlot()

    def get_device_list(self) -> DeviceList | None:
        return self.device_list.get(ALL_DEVICES)

    def put_device_list(self, devices: DeviceList) -> None:
        self.device_list.put(ALL_DEVICES, devices)

    def get_device(self, serial: str) -> Device | None:
        return self.device.get(serial)

    def put_device(self, serial: str, device: Device) -> None:
        self.device.put(serial, device)


__all__ = ["CacheSlot", "SessionCache", "ALL_DEVICES"]
