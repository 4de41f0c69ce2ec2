"""GitHub API and tool cache constants."""

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"
GITHUB_API_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
RELEASES_PER_PAGE = 100

USER_AGENT = "release-installer"
APP_NAME = "release-installer"

DOWNLOAD_CHUNK_SIZE = 8192

# Matches any cached version
ANY_VERSION = "*"
