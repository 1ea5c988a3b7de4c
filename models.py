# models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class DeviceClass(str, Enum):
    INPUT = "input"    # pulse "source"
    OUTPUT = "output"  # pulse "sink"


class Direction(Enum):
    FORWARD = 1
    BACKWARD = -1


class Action(str, Enum):
    NEXT = "next"
    PREV = "prev"
    MUTE = "mute"
    INC = "inc"
    DEC = "dec"

    @property
    def cycles(self) -> bool:
        return self in (Action.NEXT, Action.PREV)

    @property
    def direction(self) -> Direction:
        return Direction.BACKWARD if self is Action.PREV else Direction.FORWARD


class StatusField(str, Enum):
    MUTED = "muted"
    VOLUME = "volume"
    NAME = "name"
    DESC = "desc"


@dataclass(frozen=True)
class Device:
    index: int
    name: Optional[str] = None
    description: Optional[str] = None
    mute: bool = False
    volume: float = 0.0  # 0.0 .. 1.0

    @property
    def is_monitor(self) -> bool:
        return "monitor" in (self.name or "").lower()

    def label(self) -> str:
        desc = self.description or self.name or "?"
        return f"{desc}  [#{self.index}]"


@dataclass(frozen=True)
class Stream:
    id: int
    device_index: int
    app_name: str = ""


@dataclass(frozen=True)
class NoDevices:
    pass


@dataclass(frozen=True)
class Singleton:
    device: Device


@dataclass(frozen=True)
class Resolved:
    device: Device


Selection = Union[NoDevices, Singleton, Resolved]
