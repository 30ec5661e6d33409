#!/usr/bin/env python3
"""
External process access for the installer.

Every step reaches the host through a ``ProcessRunner`` held on the install
context, so tests can substitute a fake that never spawns anything.
"""

from __future__ import annotations

import logging
import shutil
import socket
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class ProcessRunner:
    """Thin wrapper around subprocess with the installer's conventions."""

    def which(self, name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
        """Resolve ``name`` on the PATH carried by ``env``."""
        search_path = env.get('PATH') if env is not None else None
        return shutil.which(name, path=search_path)

    def run(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        """
        Run a command to completion and capture its output.

        Raises FileNotFoundError when the executable does not exist and
        subprocess.TimeoutExpired when ``timeout`` elapses; callers decide
        whether either is fatal.
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        result = subprocess.run(
            list(cmd),
            capture_output=True,
            text=True,
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd is not None else None,
            timeout=timeout,
        )
        logger.debug(f"  exit {result.returncode}: {' '.join(cmd)}")
        return result

    def stream(
        self,
        cmd: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
        prefix: str = '',
    ) -> int:
        """
        Run a long command, echoing its combined output line by line.

        Returns the exit status. Interrupts terminate the child and propagate.
        """
        logger.debug(f"Streaming: {' '.join(cmd)}")
        proc = subprocess.Popen(
            list(cmd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            env=dict(env) if env is not None else None,
            cwd=str(cwd) if cwd is not None else None,
        )

        try:
            for line in proc.stdout or ():
                print(f"  {prefix}{line.rstrip()}", flush=True)
            proc.wait()
        except KeyboardInterrupt:
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
            raise

        logger.debug(f"  exit {proc.returncode}: {' '.join(cmd)}")
        return proc.returncode


def port_accepts_bind(port: int, host: str = '') -> bool:
    """
    Return True when a bind on ``port`` succeeds.

    Binds the wildcard address without SO_REUSEADDR so a listener on any
    local interface makes the bind fail.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((host, port))
            return True
    except OSError:
        return False


def lsof_port_probe(runner: ProcessRunner, env: Optional[Mapping[str, str]] = None):
    """
    Build a port probe returning True when something listens on the port.

    Uses ``lsof`` when installed and falls back to a bind attempt otherwise.
    """

    def _probe(port: int) -> bool:
        if runner.which('lsof', env) is None:
            logger.debug("lsof not found, probing port with a local bind")
            return not port_accepts_bind(port)
        try:
            result = runner.run(
                ['lsof', '-Pi', f':{port}', '-sTCP:LISTEN', '-t'],
                env=env,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"lsof probe failed ({e}), probing port with a local bind")
            return not port_accepts_bind(port)
        return result.returncode == 0 and bool(result.stdout.strip())

    return _probe
