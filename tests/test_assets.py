#!/usr/bin/env python3
"""
Asset build tests.
"""

import pytest

from homehub_install.assets import build_assets
from homehub_install.context import Prerequisites
from homehub_install.errors import InstallError


def test_skipped_without_node(ctx, runner, capsys):
    assert build_assets(ctx, Prerequisites(docker="docker", node_available=False)) is False
    assert runner.stream_calls == []
    assert "pre-built CSS" in capsys.readouterr().out


def test_runs_install_then_build(ctx, runner, tmp_path):
    assert build_assets(ctx, Prerequisites(docker="docker", node_available=True)) is True
    assert runner.stream_calls == [["npm", "install"], ["npm", "run", "build:css"]]


def test_install_failure_is_fatal(ctx, runner):
    runner.stream_results[("npm", "install")] = 1

    with pytest.raises(InstallError, match="npm install"):
        build_assets(ctx, Prerequisites(docker="docker", node_available=True))

    assert runner.stream_calls == [["npm", "install"]]


def test_build_failure_is_fatal(ctx, runner):
    runner.stream_results[("npm", "run", "build:css")] = 2

    with pytest.raises(InstallError, match="exit code 2"):
        build_assets(ctx, Prerequisites(docker="docker", node_available=True))


def test_vanished_npm_is_fatal(ctx, runner):
    runner.missing.add("npm")

    with pytest.raises(InstallError, match="npm not found"):
        build_assets(ctx, Prerequisites(docker="docker", node_available=True))


def test_unlaunchable_npm_is_fatal(ctx, runner):
    runner.errors["npm"] = PermissionError(13, "Permission denied", "npm")

    with pytest.raises(InstallError, match="Failed to run npm install"):
        build_assets(ctx, Prerequisites(docker="docker", node_available=True))
