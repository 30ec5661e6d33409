#!/usr/bin/env python3
"""
homehub-install entry point.

Installs HomeHub into the current directory. The run takes no options; the
only accepted flags are --version and --help.
"""

from __future__ import annotations

import argparse
import os
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional

from . import __version__
from .console import configure_logging, error, info
from .context import InstallContext, load_settings
from .engine import main_execution
from .errors import InstallError


def installed_version() -> str:
    """
    Version reported by --version.

    A HOMEHUB_INSTALL_BUILD_VERSION override wins; otherwise the installed
    distribution's metadata, falling back to the package constant when
    running from an uninstalled source tree.
    """
    if os.getenv('HOMEHUB_INSTALL_BUILD_VERSION'):
        return __version__
    try:
        return package_version('homehub-install')
    except PackageNotFoundError:
        return __version__


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='homehub-install',
        description='Install and start HomeHub with Docker Compose in the current directory',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Run from the directory that holds compose.yml:
  %(prog)s

Optional per-directory overrides are read from homehub-install.toml ([install] table).
        '''
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {installed_version()}',
    )
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    parse_arguments(argv)
    working_dir = Path.cwd()

    try:
        settings = load_settings(working_dir)
    except InstallError as e:
        error(e.message)
        if e.hint:
            info(e.hint)
        return 1

    configure_logging(settings.log_level)
    ctx = InstallContext(working_dir=working_dir, settings=settings)
    result = main_execution(ctx)

    if result.get('status') == 'success':
        return 0
    return 1


if __name__ == '__main__':
    raise SystemExit(main())
