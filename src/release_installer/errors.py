"""Error types for release installation."""
from typing import Any, Dict, Optional

from release_installer.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
) -> None:
    """Log an error with context."""
    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, InstallerError):
        error_info["details"] = error.details

    logger.error("install_failed", **error_info)


class InstallerError(Exception):
    """Base error class for release installation."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class UnsupportedPlatform(InstallerError):
    """No release target is known for this architecture/OS pair."""

    def __init__(self, arch: str, os_name: str):
        super().__init__(
            f"Failed to determine any valid targets: arch={arch}, platform={os_name}",
            details={"arch": arch, "os": os_name},
        )
        self.arch = arch
        self.os_name = os_name


class NoMatchingRelease(InstallerError):
    """No release carries an asset for this platform within the version constraint."""

    def __init__(self, owner: str, name: str, version_spec: Optional[str]):
        super().__init__(
            f"No releases for {owner}/{name} matching version specifier {version_spec or '*'}",
            details={"owner": owner, "name": name, "version_spec": version_spec},
        )


class ReleaseListingFailed(InstallerError):
    """Release listing request failed."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        message = f"Failed to list releases from {url}"
        if status is not None:
            message += f" (status {status})"
        if reason:
            message += f": {reason}"
        super().__init__(message, details={"url": url, "status": status})


class DownloadFailed(InstallerError):
    """Asset download failed."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Failed to download {url}: {reason}",
            details={"url": url, "reason": reason},
        )


class ExtractionFailed(InstallerError):
    """Downloaded archive could not be extracted."""

    def __init__(self, archive: str, reason: str):
        super().__init__(
            f"Failed to extract {archive}: {reason}",
            details={"archive": archive, "reason": reason},
        )


class PermissionFixFailed(InstallerError):
    """Binary permissions could not be checked or set."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to make {path} executable: {reason}",
            details={"path": path, "reason": reason},
        )


class CacheError(InstallerError):
    """Tool cache read or write failed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)


class InvalidVersionSpec(InstallerError):
    """Version constraint is not a valid semver range."""

    def __init__(self, version_spec: str, reason: str = ""):
        super().__init__(
            f"Invalid version specifier {version_spec!r}" + (f": {reason}" if reason else ""),
            details={"version_spec": version_spec},
        )
