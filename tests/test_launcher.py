#!/usr/bin/env python3
"""
Docker Compose launcher tests.
"""

import json

import pytest

from homehub_install.errors import InstallError
from homehub_install.launcher import (
    LOGS_HINT,
    parse_ps_output,
    pull_images,
    start_service,
    verify_compose_file,
    verify_running,
)

PS_CMD = ["docker", "compose", "-f", "compose.yml", "ps", "--format", "json"]


class TestComposeFile:
    def test_missing_compose_file_is_fatal(self, ctx):
        with pytest.raises(InstallError, match="compose.yml not found"):
            verify_compose_file(ctx)

    def test_present_compose_file_passes(self, ctx, compose_file):
        verify_compose_file(ctx)


class TestPullAndStart:
    def test_pull_runs_compose_pull(self, ctx, runner):
        pull_images(ctx, "docker")
        assert runner.stream_calls == [["docker", "compose", "-f", "compose.yml", "pull"]]

    def test_start_runs_detached(self, ctx, runner):
        start_service(ctx, "docker")
        assert runner.stream_calls == [["docker", "compose", "-f", "compose.yml", "up", "-d"]]

    def test_pull_failure_is_fatal(self, ctx, runner):
        runner.stream_results[("docker", "compose", "-f", "compose.yml", "pull")] = 18
        with pytest.raises(InstallError, match="exit code 18"):
            pull_images(ctx, "docker")

    def test_start_failure_is_fatal(self, ctx, runner):
        runner.stream_results[("docker", "compose", "-f", "compose.yml", "up", "-d")] = 1
        with pytest.raises(InstallError, match="Docker compose failed"):
            start_service(ctx, "docker")

    def test_uses_resolved_docker_path(self, ctx, runner):
        pull_images(ctx, "/usr/local/bin/docker")
        assert runner.stream_calls[0][0] == "/usr/local/bin/docker"

    def test_unlaunchable_docker_is_fatal(self, ctx, runner):
        runner.errors["docker"] = PermissionError(13, "Permission denied", "docker")
        with pytest.raises(InstallError, match="Failed to run docker compose"):
            pull_images(ctx, "docker")


class TestParsePsOutput:
    def test_line_delimited_json(self):
        output = "\n".join([
            json.dumps({"Service": "homehub", "State": "running"}),
            json.dumps({"Service": "worker", "State": "exited"}),
        ])
        assert parse_ps_output(output) == [("homehub", "running"), ("worker", "exited")]

    def test_json_array(self):
        output = json.dumps([{"Name": "homehub-1", "State": "running"}])
        assert parse_ps_output(output) == [("homehub-1", "running")]

    def test_empty_output(self):
        assert parse_ps_output("  \n") == []

    def test_table_output_is_rejected(self):
        with pytest.raises(ValueError):
            parse_ps_output("NAME   STATUS\nhomehub   Up 3 seconds")


class TestVerifyRunning:
    def test_waits_then_confirms_running(self, ctx, sleeps, capsys):
        verify_running(ctx, "docker")

        assert sleeps == [3]
        assert "HomeHub is running!" in capsys.readouterr().out

    def test_exited_container_fails_with_logs_hint(self, ctx, runner):
        runner.set_result(PS_CMD, stdout=json.dumps({"Service": "homehub", "State": "exited"}))

        with pytest.raises(InstallError) as exc_info:
            verify_running(ctx, "docker")

        assert exc_info.value.hint == LOGS_HINT

    def test_no_containers_fails(self, ctx, runner):
        runner.set_result(PS_CMD, stdout="")
        with pytest.raises(InstallError, match="Container failed to start"):
            verify_running(ctx, "docker")

    def test_status_query_failure_fails(self, ctx, runner):
        runner.set_result(PS_CMD, returncode=1, stderr="no configuration file provided")
        with pytest.raises(InstallError, match="Container failed to start"):
            verify_running(ctx, "docker")

    def test_table_output_with_up_status_passes(self, ctx, runner):
        runner.set_result(PS_CMD, stdout="NAME      STATUS\nhomehub   Up 3 seconds\n")
        verify_running(ctx, "docker")

    def test_honours_configured_wait(self, ctx, sleeps):
        ctx.settings.startup_wait_seconds = 7
        verify_running(ctx, "docker")
        assert sleeps == [7]

    def test_unlaunchable_status_query_fails_with_logs_hint(self, ctx, runner):
        runner.errors["docker"] = PermissionError(13, "Permission denied", "docker")

        with pytest.raises(InstallError, match="Failed to query container status") as exc_info:
            verify_running(ctx, "docker")

        assert exc_info.value.hint == LOGS_HINT
