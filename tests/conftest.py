import io
import tarfile
import zipfile
from pathlib import Path

import pytest

from release_installer.cache import DirectoryToolCache
from release_installer.config import Settings

API = "https://api.github.com"


class FakeContent:
    def __init__(self, body: bytes):
        self._body = body

    async def iter_chunked(self, size: int):
        for start in range(0, len(self._body), size):
            yield self._body[start:start + size]


class FakeResponse:
    """Stand-in for aiohttp.ClientResponse used as an async context manager"""

    def __init__(self, status=200, json_data=None, body=b"", links=None, reason="OK", error=None, json_error=None):
        self.status = status
        self.reason = reason
        self.links = links or {}
        self.content = FakeContent(body)
        self._json = json_data
        self._error = error
        self._json_error = json_error

    async def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._json

    async def __aenter__(self):
        if self._error is not None:
            raise self._error
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Routes GET requests by URL and records every call"""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def get(self, url, params=None, headers=None, **kwargs):
        self.calls.append({"url": url, "params": params, "headers": headers or {}})
        return self.routes.get(url, FakeResponse(status=404, reason="Not Found"))

    @property
    def urls(self):
        return [call["url"] for call in self.calls]


def releases_url(owner: str, repo: str) -> str:
    return f"{API}/repos/{owner}/{repo}/releases"


def make_release(owner: str, repo: str, tag: str, assets, draft: bool = False) -> dict:
    return {
        "tag_name": tag,
        "draft": draft,
        "assets": [
            {
                "name": name,
                "browser_download_url": f"https://github.com/{owner}/{repo}/releases/download/{tag}/{name}",
            }
            for name in assets
        ],
    }


def page_response(releases, next_url=None) -> FakeResponse:
    links = {"next": {"url": next_url}} if next_url else {}
    return FakeResponse(json_data=releases, links=links)


def tar_gz_bytes(files, mode: int = 0o644) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tf.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def zip_bytes(files) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def fake_session():
    """Factory for fake aiohttp sessions"""
    return FakeSession


@pytest.fixture
def cache(tmp_path: Path) -> DirectoryToolCache:
    return DirectoryToolCache(tmp_path / "toolcache", arch="x64")


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(cache_dir=tmp_path / "toolcache", api_base=API)
