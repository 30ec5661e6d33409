"""HomeHub installer package."""

from __future__ import annotations

import os

from .errors import InstallError

__all__ = ["InstallError", "__version__"]


def _release_version() -> str:
	override = os.getenv("HOMEHUB_INSTALL_BUILD_VERSION")
	if override:
		return override
	return "1.0.0"


__version__ = _release_version()
