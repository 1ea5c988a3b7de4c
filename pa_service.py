# pa_service.py
from __future__ import annotations

import logging
from typing import Any, List, Optional

import pulsectl

from errors import DefaultNotSet, DeviceNotFound, PctrlError, ServiceUnavailable
from models import Device, DeviceClass, Stream

logger = logging.getLogger(__name__)


def _clamp(v: float) -> float:
    return max(0.0, min(1.0, v))


def device_from_pulse(obj: Any) -> Device:
    vol = getattr(obj, "volume", None)
    try:
        flat = float(vol.value_flat) if vol is not None else 0.0
    except (AttributeError, TypeError, ValueError):
        flat = 0.0
    return Device(
        index=int(obj.index),
        name=getattr(obj, "name", None),
        description=getattr(obj, "description", None),
        mute=bool(getattr(obj, "mute", False)),
        volume=flat,
    )


class PulseDeviceService:
    """
    Devices of one class on a PulseAudio (or pipewire-pulse) server.
    Subclasses bind the sink or source flavour of each pulsectl call.
    """

    device_class: DeviceClass

    def __init__(self, pulse_client_name: str = "pctrl", pulse: Optional[pulsectl.Pulse] = None) -> None:
        self._pulse_client_name = pulse_client_name
        self._pulse = pulse
        self._pulse_connect()

    def _pulse_connect(self) -> pulsectl.Pulse:
        if self._pulse is None:
            try:
                self._pulse = pulsectl.Pulse(self._pulse_client_name)
            except pulsectl.PulseError as e:
                raise ServiceUnavailable(f"Failed to connect to audio server: {e}") from e
        return self._pulse

    def close(self) -> None:
        if self._pulse is not None:
            try:
                self._pulse.close()
            except Exception:
                pass
        self._pulse = None

    def __enter__(self) -> "PulseDeviceService":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # flavour hooks

    def _raw_list(self) -> List[Any]:
        raise NotImplementedError

    def _raw_info(self, idx: int) -> Any:
        raise NotImplementedError

    def _default_name(self) -> str:
        raise NotImplementedError

    def _raw_streams(self) -> List[Any]:
        raise NotImplementedError

    def _stream_device_index(self, s: Any) -> int:
        raise NotImplementedError

    def _raw_move(self, stream_id: int, target_idx: int) -> None:
        raise NotImplementedError

    # DeviceService

    def _info(self, idx: int) -> Any:
        try:
            return self._raw_info(idx)
        except pulsectl.PulseIndexError as e:
            raise DeviceNotFound(idx) from e
        except pulsectl.PulseError as e:
            raise PctrlError(f"Looking up device #{idx} failed: {e}") from e

    def _list(self) -> List[Any]:
        try:
            return self._raw_list()
        except pulsectl.PulseError as e:
            raise PctrlError(f"Listing {self.device_class.value} devices failed: {e}") from e

    def list_devices(self) -> List[Device]:
        return [device_from_pulse(d) for d in self._list()]

    def get_device_by_index(self, idx: int) -> Device:
        return device_from_pulse(self._info(idx))

    def get_default_device(self) -> Device:
        try:
            name = (self._default_name() or "").strip()
        except pulsectl.PulseError as e:
            raise PctrlError(f"Querying server info failed: {e}") from e
        if not name:
            raise DefaultNotSet(f"No default {self.device_class.value} device set")
        for d in self._list():
            if d.name == name:
                return device_from_pulse(d)
        raise DefaultNotSet(f"Default {self.device_class.value} device {name!r} is not listed")

    def set_default_device(self, target: Device) -> None:
        obj = self._info(target.index)
        try:
            self._pulse_connect().default_set(obj)
        except pulsectl.PulseError as e:
            raise PctrlError(f"Setting default device #{target.index} failed: {e}") from e

    def set_mute(self, idx: int, mute: bool) -> None:
        obj = self._info(idx)
        try:
            self._pulse_connect().mute(obj, mute)
        except pulsectl.PulseError as e:
            raise PctrlError(f"Setting mute on #{idx} failed: {e}") from e

    def adjust_volume(self, idx: int, delta: float) -> float:
        pulse = self._pulse_connect()
        obj = self._info(idx)
        try:
            vol = _clamp(pulse.volume_get_all_chans(obj) + delta)
            pulse.volume_set_all_chans(obj, vol)
        except pulsectl.PulseError as e:
            raise PctrlError(f"Changing volume on #{idx} failed: {e}") from e
        return vol

    def list_running_streams_for_class(self) -> List[Stream]:
        try:
            raw = self._raw_streams()
        except pulsectl.PulseError as e:
            raise PctrlError(f"Listing {self.device_class.value} streams failed: {e}") from e

        out: List[Stream] = []
        for s in raw:
            props = getattr(s, "proplist", None) or {}
            app = props.get("application.name") or props.get("application.process.binary") or ""
            out.append(Stream(id=int(s.index), device_index=self._stream_device_index(s), app_name=app))
        return out

    def move_stream_to_device(self, stream_id: int, target_idx: int) -> None:
        try:
            self._raw_move(stream_id, target_idx)
        except pulsectl.PulseError as e:
            raise PctrlError(f"Moving stream #{stream_id} to #{target_idx} failed: {e}") from e


class SinkService(PulseDeviceService):
    device_class = DeviceClass.OUTPUT

    def _raw_list(self) -> List[Any]:
        return self._pulse_connect().sink_list()

    def _raw_info(self, idx: int) -> Any:
        return self._pulse_connect().sink_info(idx)

    def _default_name(self) -> str:
        return self._pulse_connect().server_info().default_sink_name

    def _raw_streams(self) -> List[Any]:
        return self._pulse_connect().sink_input_list()

    def _stream_device_index(self, s: Any) -> int:
        return int(s.sink)

    def _raw_move(self, stream_id: int, target_idx: int) -> None:
        self._pulse_connect().sink_input_move(stream_id, target_idx)


class SourceService(PulseDeviceService):
    device_class = DeviceClass.INPUT

    def _raw_list(self) -> List[Any]:
        return self._pulse_connect().source_list()

    def _raw_info(self, idx: int) -> Any:
        return self._pulse_connect().source_info(idx)

    def _default_name(self) -> str:
        return self._pulse_connect().server_info().default_source_name

    def _raw_streams(self) -> List[Any]:
        return self._pulse_connect().source_output_list()

    def _stream_device_index(self, s: Any) -> int:
        return int(s.source)

    def _raw_move(self, stream_id: int, target_idx: int) -> None:
        self._pulse_connect().source_output_move(stream_id, target_idx)


def service_for(device_class: DeviceClass, pulse_client_name: str = "pctrl") -> PulseDeviceService:
    if device_class is DeviceClass.INPUT:
        return SourceService(pulse_client_name)
    return SinkService(pulse_client_name)
