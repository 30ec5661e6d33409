#!/usr/bin/env python3
"""Operator-facing status output (colored level tags, banners)."""

from __future__ import annotations

import logging

# Color codes for output
BLUE = '\033[0;34m'
GREEN = '\033[0;32m'
YELLOW = '\033[1;33m'
RED = '\033[0;31m'
RESET = '\033[0m'

BANNER_WIDTH = 40

logger = logging.getLogger(__name__)


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure the logging module for diagnostic tracing.

    Status lines below always print; logging carries the command-level detail
    that is only interesting with DEBUG enabled.
    """
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR
    }

    level = level_map.get(str(log_level).upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='[%(levelname)s] %(message)s',
        force=True  # Reconfigure if already configured
    )

    logger.debug(f"Logging configured: {str(log_level).upper()}")


def info(msg: str) -> None:
    print(f"{BLUE}[INFO]{RESET} {msg}", flush=True)


def success(msg: str) -> None:
    print(f"{GREEN}[SUCCESS]{RESET} {msg}", flush=True)


def warn(msg: str) -> None:
    print(f"{YELLOW}[WARN]{RESET} {msg}", flush=True)


def error(msg: str) -> None:
    """Print an error line. Termination is the caller's decision."""
    print(f"{RED}[ERROR]{RESET} {msg}", flush=True)


def banner(title: str, color: str = BLUE) -> None:
    print(f"{color}{'=' * BANNER_WIDTH}{RESET}", flush=True)
    print(f"{color}  {title}{RESET}", flush=True)
    print(f"{color}{'=' * BANNER_WIDTH}{RESET}", flush=True)


def blank() -> None:
    print("", flush=True)


def highlight(value: object) -> str:
    return f"{BLUE}{value}{RESET}"
