# errors.py
from __future__ import annotations


class PctrlError(RuntimeError):
    pass


class ServiceUnavailable(PctrlError):
    pass


class DeviceNotFound(PctrlError):
    def __init__(self, index: int, what: str = "Device") -> None:
        super().__init__(f"{what} with index #{index} not found")
        self.index = index


class DefaultNotSet(PctrlError):
    pass


class StoreError(PctrlError):
    pass
