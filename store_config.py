# store_config.py
from __future__ import annotations

import configparser
import logging
import os
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

APP_NAME = "pctrl"
SECTION = "Pctrl"
STATE_DIR_ENV = "PCTRL_STATE_DIR"

DEFAULT_VOLUME_STEP = 5

DEFAULT_CONFIG_TEXT = """\
[Pctrl]
state_dir =
volume_step = 5
prefer_server_default = no
move_streams = yes
"""


def _linux_xdg_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def _linux_xdg_state_dir() -> Path:
    xdg = os.environ.get("XDG_STATE_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "state"


def user_config_dir(app_name: str = APP_NAME) -> Path:
    sysname = (platform.system() or "").lower()
    if sysname.startswith("linux"):
        return _linux_xdg_config_dir() / app_name
    return Path.home() / ".config" / app_name


def user_state_dir(app_name: str = APP_NAME) -> Path:
    sysname = (platform.system() or "").lower()
    if sysname.startswith("linux"):
        return _linux_xdg_state_dir() / app_name
    return Path.home() / ".local" / "state" / app_name


@dataclass(frozen=True)
class Settings:
    state_dir: Path
    volume_step: int = DEFAULT_VOLUME_STEP
    prefer_server_default: bool = False
    move_streams: bool = True

    @property
    def volume_delta(self) -> float:
        return self.volume_step / 100.0


def _get_bool(cfg: configparser.ConfigParser, key: str, default: bool) -> bool:
    try:
        return cfg.getboolean(SECTION, key, fallback=default)
    except ValueError:
        logger.warning("Config %s is not a boolean, using %s", key, default)
        return default


def _get_step(cfg: configparser.ConfigParser) -> int:
    try:
        step = cfg.getint(SECTION, "volume_step", fallback=DEFAULT_VOLUME_STEP)
    except ValueError:
        logger.warning("Config volume_step is not an integer, using %d", DEFAULT_VOLUME_STEP)
        return DEFAULT_VOLUME_STEP
    return max(1, min(100, step))


@dataclass(frozen=True)
class ConfigStore:
    app_name: str = APP_NAME
    filename: str = "pctrl.cfg"
    path_override: Optional[Path] = None

    @property
    def file_path(self) -> Path:
        if self.path_override is not None:
            return Path(self.path_override).expanduser()
        return user_config_dir(self.app_name) / self.filename

    def ensure_exists(self) -> None:
        p = self.file_path
        p.parent.mkdir(parents=True, exist_ok=True)
        if not p.exists():
            p.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")

    def load(self) -> configparser.ConfigParser:
        cfg = configparser.ConfigParser()
        try:
            self.ensure_exists()
            cfg.read(self.file_path, encoding="utf-8")
        except (OSError, configparser.Error) as e:
            logger.warning("Config %s unreadable, using defaults: %s", self.file_path, e)
            cfg = configparser.ConfigParser()

        if not cfg.has_section(SECTION):
            cfg.add_section(SECTION)
        return cfg

    def settings(self) -> Settings:
        """
        Resolve effective settings: PCTRL_STATE_DIR, then [Pctrl]/state_dir,
        then the XDG state directory.
        """
        cfg = self.load()

        state_dir = os.environ.get(STATE_DIR_ENV, "").strip()
        if not state_dir:
            state_dir = cfg.get(SECTION, "state_dir", fallback="").strip()
        root = Path(state_dir).expanduser() if state_dir else user_state_dir(self.app_name)

        return Settings(
            state_dir=root,
            volume_step=_get_step(cfg),
            prefer_server_default=_get_bool(cfg, "prefer_server_default", False),
            move_streams=_get_bool(cfg, "move_streams", True),
        )
