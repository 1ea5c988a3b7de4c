# store_state.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from errors import StoreError
from models import DeviceClass

logger = logging.getLogger(__name__)


def _parse_index(text: str) -> Optional[int]:
    s = (text or "").strip()
    if not s.isdigit():
        return None
    try:
        v = int(s)
    except ValueError:
        return None
    if v > 0xFFFFFFFF:
        return None
    return v


class PersistedIndexStore:
    """
    One unsigned integer per device class, one file per class under `root`.

    No locking: concurrent invocations are last-writer-wins.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def slot_path(self, device_class: DeviceClass) -> Path:
        return self.root / device_class.value

    def read(self, device_class: DeviceClass) -> Optional[int]:
        p = self.slot_path(device_class)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if not p.exists():
                p.touch()
                return None
            text = p.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("Reading %s failed, treating as unset: %s", p, e)
            return None

        idx = _parse_index(text)
        if idx is None and text.strip():
            logger.debug("Ignoring unparsable content in %s: %r", p, text[:32])
        return idx

    def write(self, device_class: DeviceClass, index: int) -> None:
        if index < 0 or index > 0xFFFFFFFF:
            raise StoreError(f"Index out of range: {index}")

        p = self.slot_path(device_class)
        tmp = p.with_name(f".{p.name}.tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(str(index), encoding="utf-8")
            os.replace(tmp, p)
        except OSError as e:
            raise StoreError(f"Failed to write {p}: {e}") from e


class MemoryIndexStore:
    def __init__(self, initial: Optional[Dict[DeviceClass, int]] = None) -> None:
        self.slots: Dict[DeviceClass, int] = dict(initial or {})
        self.writes = 0

    def read(self, device_class: DeviceClass) -> Optional[int]:
        return self.slots.get(device_class)

    def write(self, device_class: DeviceClass, index: int) -> None:
        if index < 0 or index > 0xFFFFFFFF:
            raise StoreError(f"Index out of range: {index}")
        self.slots[device_class] = index
        self.writes += 1
