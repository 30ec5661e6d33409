#!/usr/bin/env python3
"""
Docker Compose driver: pull, start, and confirm the HomeHub container runs.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import List, Tuple

from . import config_constants as const
from .console import info, success
from .context import InstallContext
from .errors import InstallError

logger = logging.getLogger(__name__)

LOGS_HINT = "Check logs with: docker compose logs"


def _compose_cmd(ctx: InstallContext, docker: str, *args: str) -> List[str]:
    return [docker, 'compose', '-f', ctx.settings.compose_file, *args]


def _stream_compose(ctx: InstallContext, docker: str, *args: str) -> None:
    cmd = _compose_cmd(ctx, docker, *args)
    try:
        returncode = ctx.runner.stream(cmd, env=ctx.env, cwd=ctx.working_dir, prefix='[COMPOSE] ')
    except FileNotFoundError as e:
        raise InstallError(f"Command not found: {docker}") from e
    except OSError as e:
        raise InstallError(f"Failed to run {' '.join(cmd)}: {e}") from e
    if returncode != 0:
        raise InstallError(f"Docker compose failed with exit code {returncode}: {' '.join(cmd)}")


def verify_compose_file(ctx: InstallContext) -> None:
    compose_path = ctx.path(ctx.settings.compose_file)
    if not compose_path.is_file():
        raise InstallError(f"{ctx.settings.compose_file} not found in current directory")
    logger.debug(f"Using compose file {compose_path}")


def pull_images(ctx: InstallContext, docker: str) -> None:
    info("Pulling latest HomeHub Docker image...")
    _stream_compose(ctx, docker, 'pull')
    success("Docker image pulled successfully")


def start_service(ctx: InstallContext, docker: str) -> None:
    info("Starting HomeHub container...")
    _stream_compose(ctx, docker, 'up', '-d')
    success("HomeHub container started successfully")


def parse_ps_output(output: str) -> List[Tuple[str, str]]:
    """
    Parse ``docker compose ps --format json`` into (service, state) pairs.

    Newer compose releases print one JSON object per line, older ones a single
    JSON array. Raises ValueError when the output is not JSON at all.
    """
    text = output.strip()
    if not text:
        return []

    if text.startswith('['):
        entries = json.loads(text)
    else:
        entries = [json.loads(line) for line in text.splitlines() if line.strip()]

    containers = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get('Service') or entry.get('Name') or 'unknown'
        state = str(entry.get('State', 'unknown'))
        containers.append((name, state))
    return containers


def _any_running(output: str) -> bool:
    try:
        containers = parse_ps_output(output)
    except ValueError:
        # Plain table output: status column reads "Up 3 seconds"
        logger.debug("compose ps output is not JSON, matching status text")
        return 'Up' in output

    for name, state in containers:
        logger.debug(f"  {name}: {state}")
    return any(state.lower() == 'running' for _, state in containers)


def verify_running(ctx: InstallContext, docker: str) -> None:
    """Wait briefly, then require at least one running container."""
    ctx.sleep(ctx.settings.startup_wait_seconds)

    cmd = _compose_cmd(ctx, docker, 'ps', '--format', 'json')
    try:
        result = ctx.runner.run(cmd, env=ctx.env, cwd=ctx.working_dir, timeout=const.COMMAND_TIMEOUT_SECONDS)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise InstallError(f"Failed to query container status: {e}", hint=LOGS_HINT) from e

    if result.returncode != 0 or not _any_running(result.stdout or ''):
        raise InstallError("Container failed to start.", hint=LOGS_HINT)

    success("HomeHub is running!")
