import json
import logging

from release_installer.errors import DownloadFailed, InstallerError
from release_installer.logging import (
    CompactJSONRenderer,
    add_timestamp,
    configure_logging,
    get_logger,
)


def test_compact_json_renderer():
    """Known keys are lifted, the rest goes under data"""
    renderer = CompactJSONRenderer()
    output = renderer(None, "info", {
        "timestamp": "2024-01-01T00:00:00",
        "level": "info",
        "event": "cache_hit",
        "logger": "release_installer.cache",
        "name": "toolx",
    })

    data = json.loads(output)
    assert data == {
        "ts": "2024-01-01T00:00:00",
        "lvl": "info",
        "msg": "cache_hit",
        "logger": "release_installer.cache",
        "data": {"name": "toolx"},
    }


def test_compact_json_renderer_without_data():
    output = CompactJSONRenderer()(None, "info", {"level": "debug", "event": "ping"})
    data = json.loads(output)
    assert "data" not in data
    assert data["msg"] == "ping"


def test_add_timestamp():
    event = add_timestamp(None, None, {"event": "x"})
    assert "timestamp" in event

    kept = add_timestamp(None, None, {"event": "x", "timestamp": "fixed"})
    assert kept["timestamp"] == "fixed"


def test_get_logger():
    configure_logging("DEBUG")
    logger = get_logger("release_installer.test")
    logger.debug("test_event", key="value")


def test_error_details():
    error = DownloadFailed("https://example.com/toolx.tar.gz", "status 500")

    assert isinstance(error, InstallerError)
    assert error.details == {"url": "https://example.com/toolx.tar.gz", "reason": "status 500"}
    assert "status 500" in str(error)


def test_configure_logging_unknown_level_falls_back_to_info():
    configure_logging("verbose")
    assert logging.getLogger().level == logging.INFO


def test_configure_logging_quiets_library_loggers():
    configure_logging("DEBUG")
    assert logging.getLogger().level == logging.DEBUG
    for name in ("aiohttp", "asyncio"):
        assert logging.getLogger(name).level == logging.WARNING

    configure_logging("error")
    assert logging.getLogger("aiohttp").level == logging.ERROR
