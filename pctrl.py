#!/usr/bin/env python3
"""pctrl - cycle, mute and adjust the default PulseAudio/PipeWire input or output."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from applier import query_status, run_action
from errors import PctrlError
from logging_config import setup_logging
from models import Action, DeviceClass, StatusField
from pa_service import service_for
from store_config import ConfigStore
from store_state import PersistedIndexStore

logger = logging.getLogger(__name__)


def _index(value: str) -> int:
    try:
        v = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an index: {value!r}")
    if v < 0 or v > 0xFFFFFFFF:
        raise argparse.ArgumentTypeError(f"index out of range: {v}")
    return v


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pctrl",
        description="Cycle, mute and adjust the default audio input/output device",
    )
    parser.add_argument(
        "--target",
        required=True,
        choices=[c.value for c in DeviceClass],
        help="Device class to operate on",
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--action",
        choices=[a.value for a in Action],
        help="next/prev cycle the default device; mute toggles mute; inc/dec change volume",
    )
    group.add_argument(
        "--status",
        choices=[f.value for f in StatusField],
        help="Print one attribute of the current device (no trailing newline)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--prev",
        type=_index,
        metavar="INDEX",
        default=None,
        help="Use INDEX instead of the remembered device index",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        default=None,
        help="Alternative config file",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    settings = ConfigStore(path_override=args.config).settings()
    store = PersistedIndexStore(settings.state_dir)
    device_class = DeviceClass(args.target)

    try:
        with service_for(device_class) as service:
            if args.status:
                out = query_status(service, store, device_class, StatusField(args.status), prev=args.prev)
                sys.stdout.write(out)
                sys.stdout.flush()
                return 0

            run_action(
                service,
                store,
                device_class,
                Action(args.action),
                volume_delta=settings.volume_delta,
                prefer_server_default=settings.prefer_server_default,
                move_streams=settings.move_streams,
                prev=args.prev,
            )
    except PctrlError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
