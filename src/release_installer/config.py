"""Environment-driven settings."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import appdirs

from release_installer.constants import APP_NAME, GITHUB_API_BASE


@dataclass(frozen=True)
class Settings:
    """Installer settings"""
    cache_dir: Path
    github_token: Optional[str] = None
    api_base: str = GITHUB_API_BASE
    log_level: str = "INFO"


def default_cache_dir(environ: Mapping[str, str]) -> Path:
    """Get the tool cache root.

    RELEASE_INSTALLER_CACHE wins, then the CI runner's RUNNER_TOOL_CACHE,
    then the per-user cache directory.
    """
    for var in ("RELEASE_INSTALLER_CACHE", "RUNNER_TOOL_CACHE"):
        if environ.get(var):
            return Path(environ[var]).expanduser()
    return Path(appdirs.user_cache_dir(APP_NAME)) / "tools"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables."""
    if environ is None:
        environ = os.environ

    return Settings(
        cache_dir=default_cache_dir(environ),
        github_token=environ.get("GITHUB_TOKEN") or None,
        api_base=(environ.get("GITHUB_API_URL") or GITHUB_API_BASE).rstrip("/"),
        log_level=(environ.get("RELEASE_INSTALLER_LOG_LEVEL") or "INFO").upper(),
    )
