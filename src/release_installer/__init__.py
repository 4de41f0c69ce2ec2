"""Install prebuilt binaries from GitHub releases into a local tool cache."""
from release_installer.cache import DirectoryToolCache, ToolCache
from release_installer.errors import (
    InstallerError,
    UnsupportedPlatform,
    NoMatchingRelease,
    ReleaseListingFailed,
    DownloadFailed,
    ExtractionFailed,
    PermissionFixFailed,
    CacheError,
    InvalidVersionSpec,
)
from release_installer.installer import ensure_installed
from release_installer.platforms import get_targets
from release_installer.releases import resolve_release, normalize_version
from release_installer.types import PackageRequest, InstalledPackage, ReleaseCandidate

__version__ = "0.1.0"

__all__ = [
    "ensure_installed",
    "resolve_release",
    "normalize_version",
    "get_targets",
    "ToolCache",
    "DirectoryToolCache",
    "PackageRequest",
    "InstalledPackage",
    "ReleaseCandidate",
    "InstallerError",
    "UnsupportedPlatform",
    "NoMatchingRelease",
    "ReleaseListingFailed",
    "DownloadFailed",
    "ExtractionFailed",
    "PermissionFixFailed",
    "CacheError",
    "InvalidVersionSpec",
]
