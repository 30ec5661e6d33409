#!/usr/bin/env python3
"""Optional front-end asset build (npm install + Tailwind CSS build)."""

from __future__ import annotations

import logging

from . import config_constants as const
from .console import info, success, warn
from .context import InstallContext, Prerequisites
from .errors import InstallError

logger = logging.getLogger(__name__)


def _npm(ctx: InstallContext, *args: str) -> None:
    cmd = ['npm', *args]
    try:
        returncode = ctx.runner.stream(cmd, env=ctx.env, cwd=ctx.working_dir, prefix='[NPM] ')
    except FileNotFoundError as e:
        raise InstallError(f"npm not found while running: {' '.join(cmd)}") from e
    except OSError as e:
        raise InstallError(f"Failed to run {' '.join(cmd)}: {e}") from e
    if returncode != 0:
        raise InstallError(f"Command failed with exit code {returncode}: {' '.join(cmd)}")


def build_assets(ctx: InstallContext, prereqs: Prerequisites) -> bool:
    """
    Install npm dependencies and build the stylesheet bundle.

    Returns False when skipped because node/npm are unavailable. Once started,
    any failure is fatal; there is no fallback to pre-built CSS.
    """
    if not prereqs.node_available:
        warn("Skipping CSS build (Node.js/npm not available). Using pre-built CSS from Docker image.")
        return False

    info("Installing npm dependencies...")
    _npm(ctx, 'install')
    success("npm dependencies installed")

    info("Building CSS with Tailwind...")
    _npm(ctx, 'run', const.NPM_BUILD_SCRIPT)
    success("CSS built successfully")
    return True
