"""Release selection for the current platform and version constraint."""
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import aiohttp
import semantic_version

from release_installer.constants import GITHUB_API_BASE
from release_installer.errors import InvalidVersionSpec, NoMatchingRelease
from release_installer.github import client_session, iter_release_pages
from release_installer.logging import get_logger
from release_installer.platforms import get_targets
from release_installer.types import ReleaseCandidate

logger = get_logger(__name__)


def normalize_version(tag: str) -> str:
    """Strip one leading "v" from a release tag."""
    return tag[1:] if tag.startswith("v") else tag


def parse_version_spec(version_spec: Optional[str]) -> Optional[semantic_version.NpmSpec]:
    """Parse an npm-style semver range. Empty or missing means no constraint."""
    if version_spec is None or not version_spec.strip():
        return None
    try:
        return semantic_version.NpmSpec(version_spec.strip())
    except ValueError as e:
        raise InvalidVersionSpec(version_spec, str(e)) from e


def satisfies(version: str, spec: Optional[semantic_version.NpmSpec]) -> bool:
    """Check a normalized version against a parsed range."""
    if spec is None:
        return True
    try:
        return spec.match(semantic_version.Version(version))
    except ValueError:
        return False


def match_asset(release: Dict[str, Any], targets: Sequence[str]) -> Optional[Dict[str, Any]]:
    """Find the release asset built for the most preferred target."""
    assets = release.get("assets") or []
    for target in targets:
        for asset in assets:
            if target in asset.get("name", ""):
                return asset
    return None


def release_candidate(
    release: Dict[str, Any],
    targets: Sequence[str],
    spec: Optional[semantic_version.NpmSpec] = None,
) -> Optional[ReleaseCandidate]:
    """Turn a release into a candidate if it qualifies, else None."""
    if release.get("draft"):
        return None

    asset = match_asset(release, targets)
    if asset is None:
        return None

    version = normalize_version(release.get("tag_name", ""))
    if not satisfies(version, spec):
        return None

    return ReleaseCandidate(version=version, download_url=asset["browser_download_url"])


async def select_release(
    pages: AsyncIterator[List[Dict[str, Any]]],
    targets: Sequence[str],
    version_spec: Optional[str] = None,
) -> Optional[ReleaseCandidate]:
    """Pick the first qualifying release in listing order.

    Stops pulling pages as soon as one page has a qualifying release.
    """
    spec = parse_version_spec(version_spec)

    async for page in pages:
        candidates = [
            candidate
            for candidate in (release_candidate(r, targets, spec) for r in page)
            if candidate is not None
        ]
        if candidates:
            return candidates[0]

    return None


async def resolve_release(
    owner: str,
    name: str,
    version_spec: Optional[str] = None,
    auth_token: Optional[str] = None,
    *,
    targets: Optional[Sequence[str]] = None,
    session: Optional[aiohttp.ClientSession] = None,
    api_base: str = GITHUB_API_BASE,
) -> ReleaseCandidate:
    """Find the release of owner/name to install on this platform."""
    if targets is None:
        targets = get_targets()

    async with client_session(session) as s:
        async with aclosing(
            iter_release_pages(s, owner, name, auth_token, api_base)
        ) as pages:
            candidate = await select_release(pages, targets, version_spec)

    if candidate is None:
        logger.error(
            "no_matching_release",
            owner=owner,
            name=name,
            version_spec=version_spec,
            targets=list(targets),
        )
        raise NoMatchingRelease(owner, name, version_spec)

    logger.info(
        "release_selected",
        owner=owner,
        name=name,
        version=candidate.version,
        url=candidate.download_url,
    )
    return candidate
