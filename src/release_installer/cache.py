"""Tool cache management."""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import semantic_version

from release_installer.constants import ANY_VERSION
from release_installer.errors import CacheError
from release_installer.logging import get_logger
from release_installer.platforms import detect_arch
from release_installer.releases import normalize_version, parse_version_spec

logger = get_logger(__name__)

COMPLETE_SUFFIX = ".complete"


class ToolCache(Protocol):
    """Store of installed packages keyed by name and version."""

    def find(self, name: str, version_spec: str = ANY_VERSION) -> Optional[Path]:
        ...

    def commit(self, source_dir: Path, name: str, version: str) -> Path:
        ...


def version_from_path(directory: Path) -> str:
    """Version encoded in a cache entry path: <root>/<name>/<version>/<arch>."""
    return Path(directory).parent.name


def is_explicit_version(version_spec: str) -> bool:
    try:
        semantic_version.Version(normalize_version(version_spec))
        return True
    except ValueError:
        return False


class DirectoryToolCache:
    """Filesystem tool cache laid out as <root>/<name>/<version>/<arch>.

    An entry is visible only once its "<arch>.complete" marker exists, and
    the marker is written after the entry directory is in place.
    """

    def __init__(self, root: Path, arch: Optional[str] = None):
        self.root = Path(root)
        self.arch = arch or detect_arch().value

    def entry_path(self, name: str, version: str) -> Path:
        return self.root / name / version / self.arch

    def marker_path(self, name: str, version: str) -> Path:
        return self.root / name / version / f"{self.arch}{COMPLETE_SUFFIX}"

    def is_complete(self, name: str, version: str) -> bool:
        return (
            self.marker_path(name, version).is_file()
            and self.entry_path(name, version).is_dir()
        )

    def _complete_entries(self, name: str) -> List[str]:
        tool_dir = self.root / name
        if not tool_dir.is_dir():
            return []
        return [
            child.name
            for child in tool_dir.iterdir()
            if not child.name.startswith(".") and self.is_complete(name, child.name)
        ]

    def _semver_entries(self, name: str) -> Dict[semantic_version.Version, str]:
        entries = {}
        for version in self._complete_entries(name):
            try:
                entries[semantic_version.Version(version)] = version
            except ValueError:
                continue
        return entries

    def versions(self, name: str) -> List[semantic_version.Version]:
        """Complete cached semver versions of a package, lowest first."""
        return sorted(self._semver_entries(name))

    def _latest(self, name: str) -> Optional[str]:
        """Highest semver entry, prereleases included; failing that the
        most recently committed entry that is not semver."""
        semver = self._semver_entries(name)
        if semver:
            return semver[max(semver)]

        others = [v for v in self._complete_entries(name) if v not in semver.values()]
        if not others:
            return None
        return max(others, key=lambda v: self.marker_path(name, v).stat().st_mtime_ns)

    def find(self, name: str, version_spec: str = ANY_VERSION) -> Optional[Path]:
        """Get the cached entry satisfying version_spec, highest version first.

        The wildcard matches every complete entry, including prereleases and
        versions that are not semver, like an unconstrained release lookup.
        Ranges only see semver entries.
        """
        if not name:
            raise CacheError("Tool name is required to search the cache")

        version_spec = (version_spec or ANY_VERSION).strip()

        if version_spec == ANY_VERSION:
            match = self._latest(name)
        elif is_explicit_version(version_spec):
            version = normalize_version(version_spec)
            match = version if self.is_complete(name, version) else None
        else:
            spec = parse_version_spec(version_spec)
            semver = self._semver_entries(name)
            selected = spec.select(semver) if spec is not None else None
            match = semver[selected] if selected is not None else None

        if match is None:
            logger.debug("cache_miss", name=name, version_spec=version_spec)
            return None

        path = self.entry_path(name, match)
        logger.debug("cache_hit", name=name, version_spec=version_spec, path=str(path))
        return path

    def commit(self, source_dir: Path, name: str, version: str) -> Path:
        """Copy source_dir into the cache and mark it complete.

        Re-committing an existing version replaces it.
        """
        version_dir = self.root / name / version
        entry = self.entry_path(name, version)
        marker = self.marker_path(name, version)
        staging: Optional[Path] = None

        try:
            version_dir.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{self.arch}-", dir=version_dir))
            staging.chmod(0o755)
            shutil.copytree(source_dir, staging, symlinks=True, dirs_exist_ok=True)

            marker.unlink(missing_ok=True)
            if entry.exists():
                shutil.rmtree(entry)
            os.replace(staging, entry)
            staging = None
            marker.write_text("")
        except OSError as e:
            logger.error(
                "cache_commit_failed", name=name, version=version, error=str(e)
            )
            raise CacheError(
                f"Failed to cache {name} {version}",
                details={"name": name, "version": version, "error": str(e)},
            ) from e
        finally:
            if staging is not None:
                shutil.rmtree(staging, ignore_errors=True)

        logger.info("cache_committed", name=name, version=version, path=str(entry))
        return entry
