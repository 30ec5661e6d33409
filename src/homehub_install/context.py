#!/usr/bin/env python3
"""
Install settings and the explicit context passed to every step.

Settings come from ``config_constants`` and may be overridden per directory
through an optional ``homehub-install.toml``:

    [install]
    port = 5003
    compose_file = "compose.yml"
    startup_wait_seconds = 5

The context carries the working directory, a private copy of the process
environment (PATH/DOCKER_HOST changes never leak into os.environ), and the
host capabilities the steps use: process runner, port probe, secret source,
sleep and filesystem probes.
"""

from __future__ import annotations

import enum
import os
import secrets
import stat
import sys
import time
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from . import config_constants as const
from .errors import InstallError
from .runner import ProcessRunner


class InstallState(str, enum.Enum):
    CHECKING_PREREQS = 'CheckingPrereqs'
    WRITING_CONFIG = 'WritingConfig'
    GENERATING_SECRET = 'GeneratingSecret'
    PROVISIONING_DIRS = 'ProvisioningDirs'
    BUILDING_ASSETS = 'BuildingAssets'
    PULLING_IMAGE = 'PullingImage'
    STARTING_SERVICE = 'StartingService'
    VERIFYING_RUNNING = 'VerifyingRunning'
    DONE = 'Done'
    FAILED = 'Failed'


@dataclass
class InstallerSettings:
    port: int = const.SERVICE_PORT
    compose_file: str = const.COMPOSE_FILE
    config_file: str = const.CONFIG_FILE
    backup_suffix: str = const.CONFIG_BACKUP_SUFFIX
    env_file: str = const.ENV_FILE
    data_dirs: tuple = const.DATA_DIRS
    startup_wait_seconds: float = const.STARTUP_WAIT_SECONDS
    supported_platforms: tuple = const.SUPPORTED_PLATFORMS
    log_level: str = const.DEFAULT_LOG_LEVEL

    @property
    def backup_file(self) -> str:
        return f"{self.config_file}{self.backup_suffix}"


# Keys an overrides file may set, with the value types each accepts
OVERRIDABLE_SETTINGS = {
    'port': (int,),
    'compose_file': (str,),
    'startup_wait_seconds': (int, float),
}


def _check_override(key: str, value: Any, source: Path) -> Any:
    expected = OVERRIDABLE_SETTINGS[key]
    # bool is an int subclass; "port = true" is still a mistake
    if isinstance(value, bool) or not isinstance(value, expected):
        names = ' or '.join(t.__name__ for t in expected)
        raise InstallError(
            f"Setting '{key}' in {source} must be {names}, got {type(value).__name__}: {value!r}"
        )
    if key == 'port' and not 1 <= value <= 65535:
        raise InstallError(f"Setting 'port' in {source} must be between 1 and 65535, got {value}")
    if key == 'startup_wait_seconds' and value < 0:
        raise InstallError(f"Setting 'startup_wait_seconds' in {source} must not be negative, got {value}")
    if key == 'compose_file' and not value.strip():
        raise InstallError(f"Setting 'compose_file' in {source} must not be empty")
    return value


def load_settings(working_dir: Path, environ: Optional[Dict[str, str]] = None) -> InstallerSettings:
    """
    Build settings from defaults, the optional overrides file and environment.

    Raises InstallError for unreadable TOML, keys outside
    OVERRIDABLE_SETTINGS and values of the wrong type.
    """
    settings = InstallerSettings()
    overrides_path = Path(working_dir) / const.SETTINGS_OVERRIDES

    if overrides_path.exists():
        try:
            with open(overrides_path, 'rb') as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise InstallError(f"Failed to read {overrides_path}: {e}") from e

        section = data.get(const.SETTINGS_SECTION, {})
        if not isinstance(section, dict):
            raise InstallError(f"[{const.SETTINGS_SECTION}] in {overrides_path} must be a table")

        for key, value in section.items():
            if key not in OVERRIDABLE_SETTINGS:
                raise InstallError(
                    f"Unknown setting '{key}' in {overrides_path}",
                    hint=f"Valid keys: {', '.join(sorted(OVERRIDABLE_SETTINGS))}",
                )
            setattr(settings, key, _check_override(key, value, overrides_path))

    environ = os.environ if environ is None else environ
    level = environ.get(const.LOG_LEVEL_ENV)
    if level:
        settings.log_level = level

    return settings


def _is_socket(path: Path) -> bool:
    try:
        return stat.S_ISSOCK(path.stat().st_mode)
    except OSError:
        return False


@dataclass
class InstallContext:
    working_dir: Path
    settings: InstallerSettings = field(default_factory=InstallerSettings)
    env: Dict[str, str] = field(default_factory=lambda: dict(os.environ))
    runner: ProcessRunner = field(default_factory=ProcessRunner)
    # port -> True when something already listens; None selects the lsof probe
    port_probe: Optional[Callable[[int], bool]] = None
    token_source: Callable[[int], str] = secrets.token_hex
    sleep: Callable[[float], Any] = time.sleep
    platform: str = sys.platform
    home: Optional[Path] = None
    file_exists: Callable[[Path], bool] = Path.is_file
    socket_exists: Callable[[Path], bool] = _is_socket
    state: InstallState = InstallState.CHECKING_PREREQS

    def __post_init__(self) -> None:
        self.working_dir = Path(self.working_dir)
        if self.home is None:
            home = self.env.get('HOME')
            self.home = Path(home) if home else Path.home()

    def path(self, name: str) -> Path:
        return self.working_dir / name


@dataclass
class Prerequisites:
    docker: str
    compose_version: str = ''
    node_available: bool = False
    python_available: bool = False
