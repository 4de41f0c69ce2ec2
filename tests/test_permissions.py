import stat

import pytest

from release_installer.errors import PermissionFixFailed
from release_installer.permissions import ensure_executable, locate_binary
from release_installer.types import BinarySource, OperatingSystem


def mode(path):
    return stat.S_IMODE(path.stat().st_mode)


def test_locate_binary_explicit(tmp_path):
    location = locate_binary(tmp_path, "toolx", "bin/toolx")
    assert location.source == BinarySource.EXPLICIT
    assert location.path == tmp_path.resolve() / "bin" / "toolx"


def test_locate_binary_absolute_bin_stays_inside(tmp_path):
    location = locate_binary(tmp_path, "toolx", "/usr/bin/env")
    assert location.path == tmp_path.resolve() / "usr" / "bin" / "env"


@pytest.mark.parametrize("bin", ["../outside", "bin/../../outside"])
def test_locate_binary_rejects_escaping_bin(tmp_path, bin):
    extracted = tmp_path / "extracted"
    extracted.mkdir()
    (tmp_path / "outside").write_text("not ours")

    with pytest.raises(PermissionFixFailed, match="escapes the package directory"):
        locate_binary(extracted, "toolx", bin)


def test_ensure_executable_leaves_outside_files_alone(tmp_path):
    extracted = tmp_path / "extracted"
    extracted.mkdir()
    outside = tmp_path / "outside"
    outside.write_text("not ours")
    outside.chmod(0o644)

    with pytest.raises(PermissionFixFailed):
        ensure_executable(extracted, "toolx", "../outside", system=OperatingSystem.LINUX)
    assert mode(outside) == 0o644


def test_locate_binary_discovered_case_insensitive(tmp_path):
    (tmp_path / "README.md").write_text("readme")
    (tmp_path / "ToolX").write_text("bin")

    location = locate_binary(tmp_path, "toolx")
    assert location.source == BinarySource.DISCOVERED
    assert location.path == tmp_path / "ToolX"


def test_locate_binary_assumed(tmp_path):
    (tmp_path / "README.md").write_text("readme")

    location = locate_binary(tmp_path, "toolx")
    assert location.source == BinarySource.ASSUMED
    assert location.path == tmp_path / "toolx"


def test_ensure_executable_sets_0755(tmp_path):
    binary = tmp_path / "toolx"
    binary.write_text("bin")
    binary.chmod(0o644)

    location = ensure_executable(tmp_path, "toolx", system=OperatingSystem.LINUX)

    assert location.source == BinarySource.DISCOVERED
    assert mode(binary) == 0o755


def test_ensure_executable_leaves_executable_alone(tmp_path):
    binary = tmp_path / "toolx"
    binary.write_text("bin")
    binary.chmod(0o700)

    ensure_executable(tmp_path, "toolx", system=OperatingSystem.MACOS)

    assert mode(binary) == 0o700


def test_ensure_executable_explicit_path(tmp_path):
    (tmp_path / "bin").mkdir()
    binary = tmp_path / "bin" / "tx"
    binary.write_text("bin")
    binary.chmod(0o600)

    location = ensure_executable(tmp_path, "toolx", "bin/tx", system=OperatingSystem.LINUX)

    assert location.source == BinarySource.EXPLICIT
    assert mode(binary) == 0o755


def test_ensure_executable_noop_on_windows(tmp_path):
    binary = tmp_path / "toolx"
    binary.write_text("bin")
    binary.chmod(0o644)

    assert ensure_executable(tmp_path, "toolx", system=OperatingSystem.WINDOWS) is None
    assert mode(binary) == 0o644


def test_ensure_executable_missing_binary(tmp_path):
    """The assumed default name must exist to be fixed"""
    with pytest.raises(PermissionFixFailed) as exc_info:
        ensure_executable(tmp_path, "toolx", system=OperatingSystem.LINUX)
    assert exc_info.value.details["path"] == str(tmp_path / "toolx")
