#!/usr/bin/env python3
"""
HomeHub installer engine.

Runs the install as a fixed sequence of states:

    CheckingPrereqs -> WritingConfig -> GeneratingSecret -> ProvisioningDirs
    -> [BuildingAssets] -> PullingImage -> StartingService -> VerifyingRunning
    -> Done

Each step raises InstallError on a fatal condition. The first failure moves
the run to Failed; completed steps are not rolled back and nothing is
retried. Configuration and secret are always on disk before docker compose is
asked to start anything.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from . import config_constants as const
from .assets import build_assets
from .console import GREEN, banner, blank, error, highlight, info, success, warn
from .context import InstallContext, InstallState
from .errors import InstallError
from .launcher import pull_images, start_service, verify_compose_file, verify_running
from .materialize import create_data_dirs, write_config_file, write_env_file
from .prereqs import check_prerequisites

logger = logging.getLogger(__name__)


def _enter(ctx: InstallContext, state: InstallState) -> None:
    logger.debug(f"State: {ctx.state.value} -> {state.value}")
    ctx.state = state


def print_summary(ctx: InstallContext, document: Dict[str, Any]) -> None:
    """Print the completion banner with access details and follow-up commands."""
    blank()
    banner("Installation Complete!", color=GREEN)
    blank()
    print(f"HomeHub is now running at: {highlight(f'http://localhost:{ctx.settings.port}')}")
    print(f"Instance Name: {highlight(document.get('instance_name', ''))}")
    print(f"Family Members: {highlight(', '.join(document.get('family_members') or []))}")
    print(f"Password: {highlight(document.get('password', ''))}")
    blank()
    print("Useful commands:")
    for label, command in const.USEFUL_COMMANDS:
        print(f"  - {label + ':':<18}{command}")
    blank()
    success("Enjoy your HomeHub!")


def main_execution(ctx: InstallContext) -> Dict[str, Any]:
    """
    Run the full install against ``ctx``.

    Returns a result dict with ``status`` ('success' or 'error'), the final
    ``state`` and a ``message``.
    """
    result: Dict[str, Any] = {
        'status': 'success',
        'state': InstallState.DONE.value,
        'message': '',
    }

    banner("HomeHub Installation Script")
    blank()

    try:
        _enter(ctx, InstallState.CHECKING_PREREQS)
        prereqs = check_prerequisites(ctx)
        blank()
        info("All prerequisites checked successfully!")
        blank()

        _enter(ctx, InstallState.WRITING_CONFIG)
        document = write_config_file(ctx)

        _enter(ctx, InstallState.GENERATING_SECRET)
        write_env_file(ctx)

        _enter(ctx, InstallState.PROVISIONING_DIRS)
        create_data_dirs(ctx)

        if prereqs.node_available:
            _enter(ctx, InstallState.BUILDING_ASSETS)
        build_assets(ctx, prereqs)

        _enter(ctx, InstallState.PULLING_IMAGE)
        verify_compose_file(ctx)
        pull_images(ctx, prereqs.docker)

        _enter(ctx, InstallState.STARTING_SERVICE)
        start_service(ctx, prereqs.docker)

        _enter(ctx, InstallState.VERIFYING_RUNNING)
        verify_running(ctx, prereqs.docker)

        _enter(ctx, InstallState.DONE)
        print_summary(ctx, document)

    except InstallError as e:
        result.update(status='error', state=ctx.state.value, message=e.message)
        _enter(ctx, InstallState.FAILED)
        error(e.message)
        if e.hint:
            info(e.hint)
    except OSError as e:
        message = f"{ctx.state.value} failed: {e}"
        result.update(status='error', state=ctx.state.value, message=message)
        _enter(ctx, InstallState.FAILED)
        error(message)
    except KeyboardInterrupt:
        result.update(status='error', state=ctx.state.value, message='Interrupted by user')
        _enter(ctx, InstallState.FAILED)
        blank()
        warn("Installation interrupted by user")

    return result

