# selector.py
from __future__ import annotations

import logging
from typing import List, Optional

from catalog import DeviceCatalog, is_eligible
from models import Device, Direction, NoDevices, Resolved, Selection, Singleton

logger = logging.getLogger(__name__)


def walk(devices: List[Device], start: int, direction: Direction) -> List[Device]:
    """
    Devices in circular order after position `start`, excluding it.
    """
    n = len(devices)
    step = direction.value
    return [devices[(start + step * k) % n] for k in range(1, n)]


class DeviceSelector:
    def __init__(self, catalog: DeviceCatalog) -> None:
        self.catalog = catalog

    def resolve_current(self, persisted: Optional[int]) -> Optional[Device]:
        """
        Device named by the persisted index, monitors included. None when the
        index is unset or no longer present in the catalog.
        """
        if persisted is None:
            logger.debug("No previous state stored")
            return None

        dev = self.catalog.by_index(persisted)
        if dev is None:
            logger.warning("Device with index #%d not found - figuring out new default device", persisted)
            return None

        logger.debug("Device with index #%d found: %s", persisted, dev.name)
        return dev

    def fallback(self, server_default: Optional[Device] = None) -> Selection:
        """
        Baseline for fresh or stale state: the server's default when it is a
        live eligible device, else the first eligible device.
        """
        if server_default is not None:
            live = self.catalog.by_index(server_default.index)
            if live is not None and is_eligible(live):
                logger.debug("Using server default #%d as baseline", live.index)
                return Resolved(live)

        first = self.catalog.first_eligible()
        if first is None:
            return NoDevices()
        return Resolved(first)

    def cycle(self, current: Device, direction: Direction) -> Selection:
        eligible = list(self.catalog.eligible())
        logger.debug("Eligible devices: %s", [d.index for d in eligible])

        if not eligible:
            return NoDevices()
        if len(eligible) == 1:
            return Singleton(eligible[0])

        devices = self.catalog.devices
        pos = self.catalog.position(current.index)
        if pos is None:
            return Resolved(eligible[0])

        for d in walk(devices, pos, direction):
            if d.index == current.index:
                break
            if is_eligible(d):
                return Resolved(d)

        return Singleton(current)
