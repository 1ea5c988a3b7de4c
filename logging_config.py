"""Logging configuration for pctrl."""

import logging
import sys


def log_level(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def setup_logging(verbose: bool = False) -> None:
    """Configure root logger on stderr; stdout is reserved for --status output."""
    logging.basicConfig(
        level=log_level(verbose),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
