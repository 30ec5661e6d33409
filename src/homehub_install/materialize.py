#!/usr/bin/env python3
"""
On-disk artifacts: config.yml, .env and the data directories.

config.yml is rendered from the packaged Jinja2 template using the fixed seed
data in ``config_constants.DEFAULT_HUB_CONFIG``. It is never merged with an
existing file; the previous file is copied to a single backup slot first.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from . import config_constants as const
from .console import info, success, warn
from .context import InstallContext
from .errors import InstallError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / 'templates'


def _quote(value: Any) -> str:
    # JSON strings are valid YAML double-quoted scalars
    return json.dumps(str(value), ensure_ascii=False)


def _yaml_bool(value: Any) -> str:
    return 'true' if value else 'false'


def build_template_env(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters['quote'] = _quote
    env.filters['yaml_bool'] = _yaml_bool
    return env


def render_config(seed: Optional[Dict[str, Any]] = None, templates_dir: Path = TEMPLATES_DIR) -> str:
    """
    Render config.yml text and verify it parses as YAML.

    Raises InstallError when rendering fails or the output is not valid YAML.
    """
    seed = const.DEFAULT_HUB_CONFIG if seed is None else seed
    try:
        template = build_template_env(templates_dir).get_template(const.CONFIG_TEMPLATE)
        rendered = template.render(**seed)
    except TemplateError as e:
        raise InstallError(f"Failed to render {const.CONFIG_TEMPLATE}: {e}") from e

    try:
        yaml.safe_load(rendered)
    except yaml.YAMLError as e:
        raise InstallError(f"Rendered {const.CONFIG_TEMPLATE} is not valid YAML: {e}") from e

    return rendered


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file, then move it over ``path``."""
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def write_config_file(ctx: InstallContext) -> Dict[str, Any]:
    """Back up any existing config.yml, write the template, return it parsed."""
    info("Setting up configuration file...")
    settings = ctx.settings
    config_path = ctx.path(settings.config_file)
    backup_path = ctx.path(settings.backup_file)

    rendered = render_config()

    try:
        if config_path.exists():
            warn(f"{settings.config_file} already exists. Creating backup as {settings.backup_file}")
            shutil.copy2(config_path, backup_path)
        atomic_write_text(config_path, rendered)
    except OSError as e:
        raise InstallError(f"Failed to write {config_path}: {e}") from e

    document = yaml.safe_load(rendered)
    members = ' and '.join(document.get('family_members') or [])
    success(f"{settings.config_file} created with {members} as family members")
    return document


def generate_secret_key(ctx: InstallContext) -> str:
    return ctx.token_source(const.SECRET_KEY_BYTES)


def write_env_file(ctx: InstallContext) -> str:
    """
    Write a fresh SECRET_KEY to the env file and return it.

    The previous value is overwritten; sessions signed with it stop validating.
    """
    env_file = ctx.settings.env_file
    info(f"Generating {const.SECRET_KEY_NAME} for {env_file} file...")
    secret_key = generate_secret_key(ctx)
    env_path = ctx.path(env_file)
    try:
        atomic_write_text(env_path, f"{const.SECRET_KEY_NAME}={secret_key}\n")
    except OSError as e:
        raise InstallError(f"Failed to write {env_path}: {e}") from e
    success(f"{env_file} file created with generated {const.SECRET_KEY_NAME}")
    return secret_key


def create_data_dirs(ctx: InstallContext) -> list:
    """Ensure every data directory exists; existing ones count as success."""
    info("Creating necessary directories...")
    names = list(ctx.settings.data_dirs)
    for name in names:
        path_obj = ctx.path(name)
        if path_obj.exists() and not path_obj.is_dir():
            raise InstallError(f"Path exists and is not a directory: {path_obj}")
        try:
            path_obj.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"Failed to create {path_obj}: {e}") from e
        logger.debug(f"  ensured {path_obj}")
    success(f"Directories created: {', '.join(names)}")
    return [ctx.path(name) for name in names]
