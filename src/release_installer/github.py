"""GitHub release listing."""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import aiohttp

from release_installer.constants import (
    GITHUB_API_ACCEPT,
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    GITHUB_REPOS_PATH,
    RELEASES_PATH,
    RELEASES_PER_PAGE,
    USER_AGENT,
)
from release_installer.errors import ReleaseListingFailed
from release_installer.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def client_session(
    session: Optional[aiohttp.ClientSession] = None,
) -> AsyncIterator[aiohttp.ClientSession]:
    """Yield the given session, or a new one closed on exit."""
    if session is not None:
        yield session
        return

    async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as owned:
        yield owned


def api_headers(auth_token: Optional[str] = None) -> Dict[str, str]:
    """Headers for GitHub REST calls, bearer-authenticated when a token is given."""
    headers = {
        "Accept": GITHUB_API_ACCEPT,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
    }
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


def releases_url(owner: str, repo: str, api_base: str = GITHUB_API_BASE) -> str:
    return f"{api_base}/{GITHUB_REPOS_PATH}/{owner}/{repo}/{RELEASES_PATH}"


async def fetch_release_page(
    session: aiohttp.ClientSession,
    url: str,
    auth_token: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Fetch one page of releases.

    Returns the releases on the page and the URL of the next page, if any.
    """
    try:
        async with session.get(
            url, params=params, headers=api_headers(auth_token)
        ) as response:
            if response.status != 200:
                logger.error(
                    "release_listing_failed",
                    url=url,
                    status=response.status,
                    reason=response.reason,
                )
                raise ReleaseListingFailed(url, response.status, response.reason or "")

            releases = await response.json()
            next_link = response.links.get("next")
    except (aiohttp.ClientError, ValueError) as e:
        raise ReleaseListingFailed(url, reason=str(e)) from e

    if not isinstance(releases, list):
        raise ReleaseListingFailed(url, reason="unexpected response body")

    next_url = str(next_link["url"]) if next_link and next_link.get("url") else None
    return releases, next_url


async def iter_release_pages(
    session: aiohttp.ClientSession,
    owner: str,
    repo: str,
    auth_token: Optional[str] = None,
    api_base: str = GITHUB_API_BASE,
    per_page: int = RELEASES_PER_PAGE,
) -> AsyncIterator[List[Dict[str, Any]]]:
    """Lazily yield release pages, newest releases first.

    A page is requested only when the consumer asks for it, so a consumer
    that stops iterating stops the requests too.
    """
    url: Optional[str] = releases_url(owner, repo, api_base)
    params: Optional[Dict[str, Any]] = {"per_page": per_page}
    page = 0

    while url:
        releases, next_url = await fetch_release_page(session, url, auth_token, params)
        page += 1
        logger.debug(
            "release_page_fetched",
            owner=owner,
            repo=repo,
            page=page,
            releases=len(releases),
            authenticated=bool(auth_token),
        )
        yield releases
        # next link already carries the query string
        url, params = next_url, None
