#!/usr/bin/env python3
"""
Host prerequisite checks.

Order matters: operating system, docker, docker compose, node/npm (optional),
python3 (informational), service port. Fatal checks raise InstallError;
optional ones print a warning and return False.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from . import config_constants as const
from .console import info, success, warn
from .context import InstallContext, Prerequisites
from .errors import InstallError
from .runner import lsof_port_probe

logger = logging.getLogger(__name__)


def _version_output(ctx: InstallContext, cmd: list) -> Optional[str]:
    """Return stripped stdout of a version query, or None when it fails."""
    try:
        result = ctx.runner.run(cmd, env=ctx.env, timeout=const.COMMAND_TIMEOUT_SECONDS)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug(f"{' '.join(cmd)} failed: {e}")
        return None
    if result.returncode != 0:
        logger.debug(f"{' '.join(cmd)} exited {result.returncode}: {result.stderr}")
        return None
    return (result.stdout or '').strip()


def check_operating_system(ctx: InstallContext) -> None:
    info("Checking operating system...")
    if not any(ctx.platform.startswith(p) for p in ctx.settings.supported_platforms):
        raise InstallError(f"This installer is designed for macOS only. Detected: {ctx.platform}")
    success("Running on macOS")


def locate_docker(ctx: InstallContext) -> str:
    """
    Find the docker CLI and prepare ctx.env for Docker Desktop.

    Looks on PATH first, then in the well-known install locations. A bundle
    location that is not on PATH gets its directory prepended to
    ctx.env['PATH']. When the Docker Desktop socket exists under the home
    directory, ctx.env['DOCKER_HOST'] points at it.
    """
    info("Checking for Docker installation...")
    docker: Optional[str] = None

    if ctx.runner.which('docker', ctx.env):
        docker = 'docker'
    else:
        for candidate in const.DOCKER_FALLBACK_PATHS:
            if ctx.file_exists(Path(candidate)):
                docker = candidate
                if candidate in const.DOCKER_PATH_EXPORT_LOCATIONS:
                    bin_dir = str(Path(candidate).parent)
                    current = ctx.env.get('PATH', '')
                    ctx.env['PATH'] = f"{bin_dir}{os.pathsep}{current}" if current else bin_dir
                    logger.debug(f"Added {bin_dir} to PATH")
                break

    socket_path = Path(ctx.home) / const.DOCKER_DESKTOP_SOCKET
    if ctx.socket_exists(socket_path):
        ctx.env['DOCKER_HOST'] = f"unix://{socket_path}"
        logger.debug(f"DOCKER_HOST set to {ctx.env['DOCKER_HOST']}")

    if docker is None:
        raise InstallError(
            f"Docker is not installed. Please install Docker Desktop from {const.DOCKER_DESKTOP_URL}"
        )

    version = _version_output(ctx, [docker, '--version'])
    success(f"Docker is installed ({version or 'version unknown'})")
    return docker


def check_compose(ctx: InstallContext, docker: str) -> str:
    info("Checking for Docker Compose...")
    version = _version_output(ctx, [docker, 'compose', 'version'])
    if version is None:
        raise InstallError(
            "Docker Compose is not available. Please ensure Docker Desktop includes Compose V2."
        )
    success(f"Docker Compose is installed ({version})")
    return version


def check_node_toolchain(ctx: InstallContext) -> bool:
    """Return True when both node and npm are usable for the asset build."""
    info("Checking for Node.js and npm...")
    if not ctx.runner.which('node', ctx.env):
        warn("Node.js is not installed. CSS building will be skipped.")
        warn(f"Install Node.js from {const.NODEJS_URL} if you need to rebuild CSS.")
        return False
    success(f"Node.js is installed ({_version_output(ctx, ['node', '--version']) or 'version unknown'})")

    if not ctx.runner.which('npm', ctx.env):
        warn("npm is not installed. CSS building will be skipped.")
        return False
    success(f"npm is installed ({_version_output(ctx, ['npm', '--version']) or 'version unknown'})")
    return True


def check_python(ctx: InstallContext) -> bool:
    info("Checking for Python...")
    if not ctx.runner.which('python3', ctx.env):
        warn("Python 3 is not installed. Only Docker-based deployment will be available.")
        return False
    success(f"Python 3 is installed ({_version_output(ctx, ['python3', '--version']) or 'version unknown'})")
    return True


def check_port(ctx: InstallContext) -> None:
    port = ctx.settings.port
    info(f"Checking if port {port} is available...")
    probe = ctx.port_probe or lsof_port_probe(ctx.runner, ctx.env)
    if probe(port):
        raise InstallError(
            f"Port {port} is already in use. Please stop the service using this port "
            f"or modify the port in {ctx.settings.compose_file}",
            hint=f"You can find what's using port {port} with: lsof -i :{port}",
        )
    success(f"Port {port} is available")


def check_prerequisites(ctx: InstallContext) -> Prerequisites:
    check_operating_system(ctx)
    docker = locate_docker(ctx)
    prereqs = Prerequisites(docker=docker)
    prereqs.compose_version = check_compose(ctx, docker)
    prereqs.node_available = check_node_toolchain(ctx)
    prereqs.python_available = check_python(ctx)
    check_port(ctx)
    return prereqs
