"""Core type definitions"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class Arch(Enum):
    X64 = "x64"
    ARM64 = "arm64"


class OperatingSystem(Enum):
    LINUX = "linux"
    MACOS = "darwin"
    WINDOWS = "windows"


BinarySource = Enum("BinarySource", ["EXPLICIT", "DISCOVERED", "ASSUMED"])


@dataclass(frozen=True)
class PackageRequest:
    """What to install and, optionally, where its executable lives"""
    owner: str
    name: str
    version_spec: Optional[str] = None
    bin: Optional[str] = None


@dataclass(frozen=True)
class ReleaseCandidate:
    """Release qualifying for the current platform and constraint"""
    version: str
    download_url: str


@dataclass(frozen=True)
class InstalledPackage:
    """Package installed in the tool cache"""
    owner: str
    name: str
    version: str
    directory: Path
    bin: Optional[str] = None


@dataclass(frozen=True)
class BinaryLocation:
    """Where the package binary was found and how"""
    path: Path
    source: BinarySource
