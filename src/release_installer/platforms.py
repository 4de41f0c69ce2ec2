"""Platform detection and release target mapping."""
import platform
from typing import Dict, List, Optional, Tuple

from release_installer.errors import UnsupportedPlatform
from release_installer.types import Arch, OperatingSystem

# platform.machine() spellings
ARCH_ALIASES: Dict[str, Arch] = {
    "x86_64": Arch.X64,
    "amd64": Arch.X64,
    "x64": Arch.X64,
    "aarch64": Arch.ARM64,
    "arm64": Arch.ARM64,
}

# platform.system() spellings
OS_ALIASES: Dict[str, OperatingSystem] = {
    "linux": OperatingSystem.LINUX,
    "darwin": OperatingSystem.MACOS,
    "windows": OperatingSystem.WINDOWS,
}

# Most preferred first
TARGET_MAPPINGS: Dict[Tuple[Arch, OperatingSystem], Tuple[str, ...]] = {
    (Arch.X64, OperatingSystem.LINUX): (
        "x86_64-unknown-linux-musl",
        "x86_64-unknown-linux-gnu",
    ),
    (Arch.X64, OperatingSystem.MACOS): ("x86_64-apple-darwin",),
    (Arch.X64, OperatingSystem.WINDOWS): ("x86_64-pc-windows-msvc",),
    (Arch.ARM64, OperatingSystem.LINUX): (
        "aarch64-unknown-linux-musl",
        "aarch64-unknown-linux-gnu",
    ),
    (Arch.ARM64, OperatingSystem.MACOS): ("aarch64-apple-darwin",),
}


def detect_arch() -> Arch:
    """Get the current machine architecture."""
    machine = platform.machine().lower()
    if machine not in ARCH_ALIASES:
        raise UnsupportedPlatform(machine, platform.system().lower())
    return ARCH_ALIASES[machine]


def detect_os() -> OperatingSystem:
    """Get the current operating system."""
    system = platform.system().lower()
    if system not in OS_ALIASES:
        raise UnsupportedPlatform(platform.machine().lower(), system)
    return OS_ALIASES[system]


def get_targets(
    arch: Optional[Arch] = None, os_name: Optional[OperatingSystem] = None
) -> List[str]:
    """Get acceptable release targets for a platform, most preferred first.

    Defaults to the current machine when arch or os_name are omitted.
    """
    if arch is None:
        arch = detect_arch()
    if os_name is None:
        os_name = detect_os()

    targets = TARGET_MAPPINGS.get((arch, os_name))
    if not targets:
        raise UnsupportedPlatform(
            getattr(arch, "value", str(arch)), getattr(os_name, "value", str(os_name))
        )
    return list(targets)


def is_platform_supported() -> bool:
    """Check if current platform is supported."""
    try:
        get_targets()
        return True
    except UnsupportedPlatform:
        return False
