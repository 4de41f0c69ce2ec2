"""Install orchestration: cache lookup, release resolution, fetch and commit."""
import tempfile
from pathlib import Path
from typing import Optional, Sequence

import aiohttp

from release_installer.cache import DirectoryToolCache, ToolCache, version_from_path
from release_installer.config import Settings, load_settings
from release_installer.constants import ANY_VERSION, APP_NAME
from release_installer.fetcher import fetch_artifact
from release_installer.github import client_session
from release_installer.logging import get_logger
from release_installer.permissions import ensure_executable
from release_installer.releases import resolve_release
from release_installer.types import InstalledPackage, PackageRequest

logger = get_logger(__name__)


async def ensure_installed(
    request: PackageRequest,
    auth_token: Optional[str] = None,
    *,
    cache: Optional[ToolCache] = None,
    targets: Optional[Sequence[str]] = None,
    session: Optional[aiohttp.ClientSession] = None,
    settings: Optional[Settings] = None,
) -> InstalledPackage:
    """Return the cached install of a package, installing it first if needed.

    A cache entry satisfying the request's version constraint short-circuits
    everything else; no network or extraction work is done in that case.
    """
    if settings is None:
        settings = load_settings()
    if cache is None:
        cache = DirectoryToolCache(settings.cache_dir)

    version_spec = (request.version_spec or "").strip() or None
    directory = cache.find(request.name, version_spec or ANY_VERSION)

    if directory is not None:
        logger.info(
            "using_cached_package",
            name=request.name,
            version_spec=version_spec,
            path=str(directory),
        )
    else:
        async with client_session(session) as s:
            candidate = await resolve_release(
                request.owner,
                request.name,
                version_spec,
                auth_token,
                targets=targets,
                session=s,
                api_base=settings.api_base,
            )

            with tempfile.TemporaryDirectory(prefix=f"{APP_NAME}-") as tmpdir:
                extracted = await fetch_artifact(candidate.download_url, Path(tmpdir), session=s)
                logger.debug(
                    "package_extracted",
                    name=request.name,
                    version=candidate.version,
                    path=str(extracted),
                )
                ensure_executable(extracted, request.name, request.bin)
                directory = cache.commit(extracted, request.name, candidate.version)

    version = version_from_path(directory)
    logger.info("package_installed", name=request.name, version=version, path=str(directory))

    return InstalledPackage(
        owner=request.owner,
        name=request.name,
        version=version,
        directory=directory,
        bin=request.bin,
    )
