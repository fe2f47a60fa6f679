import logging
from typing import List
from urllib.parse import quote

import requests

from statcard.core.config import settings
from statcard.core.errors import DataSourceError, NotFoundError, RateLimitError
from statcard.core.models import RawRepo, RawUser

log = logging.getLogger(__name__)

HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "statcard",
}

def gh_get(path: str, params: dict | None = None):
    url = f"{settings.GITHUB_API}{path}"
    log.debug("GET %s params=%s", url, params)
    try:
        r = requests.get(url, headers=HEADERS, params=params or {}, timeout=settings.GITHUB_TIMEOUT)
    except requests.RequestException as e:
        log.warning("GitHub request failed for %s: %s", path, e)
        raise DataSourceError(f"GitHub unreachable: {e}") from e
    if r.status_code == 404: raise NotFoundError(f"Not found on GitHub: {path}")
    if r.status_code in (403, 429): raise RateLimitError("GitHub rate limit reached")
    if r.status_code >= 400:
        log.warning("GitHub answered %s for %s", r.status_code, path)
        raise DataSourceError(f"GitHub error {r.status_code}: {r.text[:200]}")
    try:
        return r.json()
    except ValueError as e:
        log.warning("GitHub sent a non-JSON body for %s", path)
        raise DataSourceError(f"Invalid JSON from GitHub: {e}") from e


class GitHubSource:
    """Public, unauthenticated reads of a user's profile and repositories."""

    def fetch_user(self, login: str) -> RawUser:
        return gh_get(f"/users/{quote(login, safe='')}")

    def fetch_repositories(self, login: str, per_page: int = 100) -> List[RawRepo]:
        repos = gh_get(
            f"/users/{quote(login, safe='')}/repos",
            {"sort": "updated", "direction": "desc", "per_page": max(1, min(per_page, 100))},
        )
        if not isinstance(repos, list):
            raise DataSourceError("Unexpected repository payload from GitHub")
        return repos
