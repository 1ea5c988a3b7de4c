"""Pytest fixtures and config."""

import pytest

from errors import DefaultNotSet, DeviceNotFound, PctrlError
from models import Device, Stream
from store_state import MemoryIndexStore


class FakeDeviceService:
    """In-memory DeviceService that records every mutating call."""

    def __init__(self, devices=None, default_index=None, streams=None, fail_moves=(), fail_stream_listing=False):
        self.devices = list(devices or [])
        self.default_index = default_index
        self.streams = list(streams or [])
        self.fail_moves = set(fail_moves)
        self.fail_stream_listing = fail_stream_listing
        self.calls = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def list_devices(self):
        return list(self.devices)

    def get_device_by_index(self, idx):
        for d in self.devices:
            if d.index == idx:
                return d
        raise DeviceNotFound(idx)

    def get_default_device(self):
        if self.default_index is None:
            raise DefaultNotSet("No default device set")
        return self.get_device_by_index(self.default_index)

    def set_default_device(self, target):
        self.calls.append(("set_default_device", target.index))
        self.default_index = target.index

    def set_mute(self, idx, mute):
        self.calls.append(("set_mute", idx, mute))

    def adjust_volume(self, idx, delta):
        self.calls.append(("adjust_volume", idx, delta))
        dev = self.get_device_by_index(idx)
        return max(0.0, min(1.0, dev.volume + delta))

    def list_running_streams_for_class(self):
        if self.fail_stream_listing:
            raise PctrlError("Listing streams failed")
        return list(self.streams)

    def move_stream_to_device(self, stream_id, target_idx):
        self.calls.append(("move_stream_to_device", stream_id, target_idx))
        if stream_id in self.fail_moves:
            raise PctrlError(f"Moving stream #{stream_id} failed")


def _make_devices(*names, start=10):
    """Devices with consecutive indices; a name containing 'monitor' makes a monitor."""
    return [Device(index=start + i, name=n, description=n.upper()) for i, n in enumerate(names)]


@pytest.fixture
def fake_service():
    """Factory for FakeDeviceService."""
    return FakeDeviceService


@pytest.fixture
def memory_store():
    return MemoryIndexStore()


@pytest.fixture
def sample_devices():
    """A (eligible), B (monitor), C (eligible)."""
    return [
        Device(index=1, name="alsa_output.pci.analog-stereo", description="Speakers", volume=0.5),
        Device(index=2, name="alsa_output.pci.analog-stereo.monitor", description="Monitor of Speakers"),
        Device(index=3, name="bluez_output.headset", description="Headset", mute=True, volume=0.3),
    ]


@pytest.fixture
def sample_streams():
    return [
        Stream(id=100, device_index=1, app_name="Firefox"),
        Stream(id=101, device_index=1, app_name="mpv"),
    ]


@pytest.fixture
def state_dir(tmp_path):
    """Temporary storage root for persisted indices."""
    return tmp_path / "state"


@pytest.fixture
def make_devices():
    """Factory: make_devices("a", "b.monitor", "c") -> devices #10, #11, #12."""
    return _make_devices
