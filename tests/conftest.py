"""
Shared fixtures: a fake process runner and a fully-provisioned install context.
"""

import json
import subprocess
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
from homehub_install.context import InstallContext  # noqa: E402

RUNNING_PS = json.dumps({"Service": "homehub", "State": "running", "Status": "Up 3 seconds"})


class FakeRunner:
    """Records commands; answers from canned results instead of spawning."""

    def __init__(self, available=("docker", "node", "npm", "python3")):
        self.available = set(available)
        self.missing = set()
        # program name -> exception raised when it is launched
        self.errors = {}
        self.results = {}
        self.stream_results = {}
        self.calls = []
        self.stream_calls = []

    def which(self, name, env=None):
        return f"/usr/bin/{name}" if name in self.available else None

    def set_result(self, cmd, returncode=0, stdout="", stderr=""):
        self.results[tuple(cmd)] = (returncode, stdout, stderr)

    def run(self, cmd, env=None, cwd=None, timeout=None):
        cmd = list(cmd)
        self.calls.append(cmd)
        if cmd[0] in self.missing:
            raise FileNotFoundError(cmd[0])
        if cmd[0] in self.errors:
            raise self.errors[cmd[0]]
        returncode, stdout, stderr = self.results.get(tuple(cmd), (0, f"{cmd[0]} 1.0.0", ""))
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    def stream(self, cmd, env=None, cwd=None, prefix=""):
        cmd = list(cmd)
        self.stream_calls.append(cmd)
        if cmd[0] in self.missing:
            raise FileNotFoundError(cmd[0])
        if cmd[0] in self.errors:
            raise self.errors[cmd[0]]
        return self.stream_results.get(tuple(cmd), 0)


@pytest.fixture
def runner():
    fake = FakeRunner()
    fake.set_result(["docker", "compose", "-f", "compose.yml", "ps", "--format", "json"], stdout=RUNNING_PS)
    return fake


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_ctx(tmp_path, runner, sleeps):
    def _make(**overrides):
        kwargs = dict(
            working_dir=tmp_path,
            env={"PATH": "/usr/bin", "HOME": str(tmp_path / "home")},
            runner=runner,
            port_probe=lambda port: False,
            sleep=sleeps.append,
            platform="darwin",
            file_exists=lambda path: False,
            socket_exists=lambda path: False,
        )
        kwargs.update(overrides)
        return InstallContext(**kwargs)

    return _make


@pytest.fixture
def ctx(make_ctx):
    return make_ctx()


@pytest.fixture
def compose_file(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text("services:\n  homehub:\n    image: homehub:latest\n")
    return path
