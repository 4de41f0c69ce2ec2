"""Executable permission fix-up for extracted binaries.

Zip transport drops unix mode bits, so a binary packed on one platform can
arrive without its execute bit.
"""
import os
from pathlib import Path
from typing import Optional

from release_installer.errors import PermissionFixFailed
from release_installer.logging import get_logger
from release_installer.platforms import detect_os
from release_installer.types import BinaryLocation, BinarySource, OperatingSystem

logger = get_logger(__name__)

EXECUTABLE_MODE = 0o755


def locate_binary(
    extracted_dir: Path, package_name: str, bin: Optional[str] = None
) -> BinaryLocation:
    """Decide which file is the package binary.

    An explicit bin is taken relative to extracted_dir, even when it is
    absolute, and must stay inside it.
    """
    if bin:
        root = extracted_dir.resolve()
        path = (root / bin.lstrip("/\\")).resolve()
        if not path.is_relative_to(root):
            logger.error("binary_outside_package", bin=bin, path=str(path))
            raise PermissionFixFailed(str(path), "binary path escapes the package directory")
        return BinaryLocation(path=path, source=BinarySource.EXPLICIT)

    wanted = package_name.lower()
    try:
        entries = sorted(extracted_dir.iterdir())
    except OSError as e:
        raise PermissionFixFailed(str(extracted_dir), str(e)) from e

    for entry in entries:
        if entry.name.lower() == wanted:
            return BinaryLocation(path=entry, source=BinarySource.DISCOVERED)

    return BinaryLocation(path=extracted_dir / package_name, source=BinarySource.ASSUMED)


def ensure_executable(
    extracted_dir: Path,
    package_name: str,
    bin: Optional[str] = None,
    system: Optional[OperatingSystem] = None,
) -> Optional[BinaryLocation]:
    """Make the package binary executable. Does nothing on Windows.

    Returns the binary location that was checked, or None on Windows.
    """
    if system is None:
        system = detect_os()
    if system == OperatingSystem.WINDOWS:
        return None

    location = locate_binary(extracted_dir, package_name, bin)

    try:
        if not os.access(location.path, os.X_OK):
            os.chmod(location.path, EXECUTABLE_MODE)
            logger.debug(
                "permissions_fixed",
                path=str(location.path),
                mode=oct(EXECUTABLE_MODE),
                source=location.source.name,
            )
    except OSError as e:
        logger.error("permissions_fix_failed", path=str(location.path), error=str(e))
        raise PermissionFixFailed(str(location.path), str(e)) from e

    return location
