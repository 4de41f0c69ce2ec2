"""Release asset download and extraction."""
import asyncio
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp

from release_installer.constants import DOWNLOAD_CHUNK_SIZE
from release_installer.errors import DownloadFailed, ExtractionFailed
from release_installer.github import client_session
from release_installer.logging import get_logger

logger = get_logger(__name__)


def archive_name(download_url: str) -> str:
    """File name of the asset, taken from the URL path."""
    return Path(urlparse(download_url).path).name or "artifact"


def is_zip_url(download_url: str) -> bool:
    return urlparse(download_url).path.endswith(".zip")


async def download_file(
    url: str,
    dest: Path,
    session: Optional[aiohttp.ClientSession] = None,
    headers: Optional[Dict[str, str]] = None,
) -> int:
    """Stream a file to dest and return the number of bytes written."""
    logger.info("download_started", url=url, destination=str(dest))
    downloaded = 0

    try:
        async with client_session(session) as s:
            async with s.get(url, headers=headers) as response:
                if response.status != 200:
                    logger.error(
                        "download_request_failed",
                        url=url,
                        status=response.status,
                        reason=response.reason,
                    )
                    raise DownloadFailed(url, f"status {response.status}")

                with open(dest, "wb") as f:
                    async for chunk in response.content.iter_chunked(DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
                        downloaded += len(chunk)

    except DownloadFailed:
        dest.unlink(missing_ok=True)
        raise
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        dest.unlink(missing_ok=True)
        raise DownloadFailed(url, str(e) or e.__class__.__name__) from e

    logger.info("download_complete", url=url, size=downloaded)
    return downloaded


def extract_archive(archive_path: Path, dest_dir: Path, download_url: str) -> Path:
    """Extract a zip or tar archive into dest_dir.

    The format is chosen by the download URL: ".zip" means zip, anything else
    is opened as a tar with transparent decompression.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    use_zip = is_zip_url(download_url)
    logger.debug(
        "extract_archive",
        archive=str(archive_path),
        dest=str(dest_dir),
        format="zip" if use_zip else "tar",
    )

    try:
        if use_zip:
            with zipfile.ZipFile(archive_path) as archive:
                archive.extractall(dest_dir)
        else:
            with tarfile.open(archive_path) as archive:
                archive.extractall(dest_dir, filter="data")
    except (zipfile.BadZipFile, tarfile.TarError, EOFError, OSError) as e:
        logger.error(
            "extract_archive_failed", archive=str(archive_path), error=str(e)
        )
        raise ExtractionFailed(archive_path.name, str(e)) from e

    logger.info("archive_extracted", archive=str(archive_path), extracted_to=str(dest_dir))
    return dest_dir


def collapse_wrapper_dir(root: Path) -> Path:
    """Step into a lone top-level directory, the usual "tool-1.2.3/" wrapper."""
    entries = list(root.iterdir())
    if len(entries) == 1:
        only = entries[0]
        if only.is_dir() and not only.is_symlink():
            return only
    return root


async def fetch_artifact(
    download_url: str,
    work_dir: Path,
    session: Optional[aiohttp.ClientSession] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Path:
    """Download and extract a release asset under work_dir.

    Returns the root of the extracted tree.
    """
    archive_path = work_dir / archive_name(download_url)
    size = await download_file(download_url, archive_path, session=session, headers=headers)
    if size == 0:
        archive_path.unlink(missing_ok=True)
        raise DownloadFailed(download_url, "archive is empty")

    extracted = extract_archive(archive_path, work_dir / "extracted", download_url)
    root = collapse_wrapper_dir(extracted)
    archive_path.unlink(missing_ok=True)

    logger.debug("artifact_ready", url=download_url, root=str(root))
    return root
