# applier.py
from __future__ import annotations

import logging
from typing import Any, Optional

from catalog import DeviceCatalog
from errors import DefaultNotSet, DeviceNotFound, PctrlError
from models import Action, Device, DeviceClass, NoDevices, Singleton, StatusField
from selector import DeviceSelector

logger = logging.getLogger(__name__)


def format_status(dev: Device, field: StatusField) -> str:
    if field is StatusField.MUTED:
        return "true" if dev.mute else "false"
    if field is StatusField.VOLUME:
        return f"{dev.volume:.2f}"
    if field is StatusField.NAME:
        return dev.name or ""
    return dev.description or ""


class DefaultDeviceApplier:
    def __init__(self, service: Any, store: Any, device_class: DeviceClass, move_streams: bool = True) -> None:
        self.service = service
        self.store = store
        self.device_class = device_class
        self.move_streams = move_streams

    def apply(self, target: Device) -> int:
        """
        Make `target` the default, move running streams onto it and persist
        its index. Returns the number of streams that could not be moved.
        """
        logger.info("Setting default device to: %s", target.label())
        self.service.set_default_device(target)

        failed = 0
        if self.move_streams:
            failed = self._move_streams(target)

        self.store.write(self.device_class, target.index)
        return failed

    def _move_streams(self, target: Device) -> int:
        try:
            streams = self.service.list_running_streams_for_class()
        except PctrlError as e:
            logger.warning("Could not list running streams, none moved: %s", e)
            return 0

        failed = 0
        for s in streams:
            try:
                self.service.move_stream_to_device(s.id, target.index)
                logger.debug("Moved stream #%d (%s) to #%d", s.id, s.app_name or "?", target.index)
            except PctrlError as e:
                failed += 1
                logger.warning("Could not move stream #%d (%s): %s", s.id, s.app_name or "?", e)
        return failed

    def toggle_mute(self, dev: Device) -> bool:
        mute = not dev.mute
        self.service.set_mute(dev.index, mute)
        logger.info("%s %s", "Muted" if mute else "Unmuted", dev.label())
        return mute

    def adjust_volume(self, dev: Device, delta: float) -> float:
        vol = self.service.adjust_volume(dev.index, delta)
        logger.info("Volume of %s is now %d%%", dev.label(), round(vol * 100))
        return vol


def run_action(
    service: Any,
    store: Any,
    device_class: DeviceClass,
    action: Action,
    volume_delta: float = 0.05,
    prefer_server_default: bool = False,
    move_streams: bool = True,
    prev: Optional[int] = None,
) -> Optional[Device]:
    """
    One invocation: snapshot the catalog, resolve the current device and
    dispatch `action`. Returns the device acted on, or None when there is
    nothing to act on.
    """
    catalog = DeviceCatalog.from_devices(service.list_devices())
    if catalog.is_empty():
        logger.error("No devices found")
        return None
    for d in catalog:
        logger.debug("Found device #%d: %s", d.index, d.name)

    selector = DeviceSelector(catalog)
    applier = DefaultDeviceApplier(service, store, device_class, move_streams=move_streams)

    persisted = prev if prev is not None else store.read(device_class)
    current = selector.resolve_current(persisted)

    if current is None:
        server_default = None
        if prefer_server_default:
            try:
                server_default = service.get_default_device()
            except (DefaultNotSet, DeviceNotFound) as e:
                logger.debug("No usable server default: %s", e)

        baseline = selector.fallback(server_default)
        if isinstance(baseline, NoDevices):
            logger.error("No eligible devices found")
            return None

        current = baseline.device
        applier.apply(current)
        if action.cycles:
            return current

    if action.cycles:
        sel = selector.cycle(current, action.direction)
        if isinstance(sel, NoDevices):
            logger.error("No eligible devices found")
            return None
        if isinstance(sel, Singleton):
            logger.info("Only one eligible device (%s), nothing to cycle to", sel.device.label())
            return sel.device
        applier.apply(sel.device)
        return sel.device

    if action is Action.MUTE:
        applier.toggle_mute(current)
    elif action is Action.INC:
        applier.adjust_volume(current, volume_delta)
    elif action is Action.DEC:
        applier.adjust_volume(current, -volume_delta)
    return current


def query_status(
    service: Any,
    store: Any,
    device_class: DeviceClass,
    field: StatusField,
    prev: Optional[int] = None,
) -> str:
    idx = prev if prev is not None else store.read(device_class)
    if idx is None:
        dev = service.get_default_device()
    else:
        dev = service.get_device_by_index(idx)
    return format_status(dev, field)
