# catalog.py
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from models import Device


def is_eligible(d: Device) -> bool:
    return not d.is_monitor


class DeviceCatalog:
    """Snapshot of the server's device list, in server order."""

    def __init__(self, devices: Iterable[Device]) -> None:
        self._devices: List[Device] = list(devices)

    @classmethod
    def from_devices(cls, devices: Iterable[Device]) -> "DeviceCatalog":
        return cls(devices)

    @property
    def devices(self) -> List[Device]:
        return list(self._devices)

    def __iter__(self) -> Iterator[Device]:
        return iter(self._devices)

    def is_empty(self) -> bool:
        return not self._devices

    def eligible(self) -> Iterator[Device]:
        return (d for d in self._devices if is_eligible(d))

    def first_eligible(self) -> Optional[Device]:
        return next(self.eligible(), None)

    def by_index(self, idx: Optional[int]) -> Optional[Device]:
        if idx is None:
            return None
        return next((d for d in self._devices if d.index == idx), None)

    def position(self, idx: int) -> Optional[int]:
        for i, d in enumerate(self._devices):
            if d.index == idx:
                return i
        return None
