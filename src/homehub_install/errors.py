#!/usr/bin/env python3
"""Installer exception types."""

from __future__ import annotations

from typing import Optional


class InstallError(Exception):
    """Fatal installer failure.

    ``hint`` is an optional follow-up line shown to the operator, usually a
    command that helps diagnose the problem.
    """

    def __init__(self, message: str, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint
