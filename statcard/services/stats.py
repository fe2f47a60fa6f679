from collections.abc import Mapping
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Dict, List, Optional

from statcard.core.errors import InvalidInputError
from statcard.core.models import RawRepo, RawUser, RepoSummary, UserStats
from statcard.utils.time import try_parse_iso_dt

# heuristic placeholder, not a measured value
COMMITS_PER_REPO = 15
PEAK_FACTOR = Decimal("2.5")
RECENT_REPOS = 5


def round_half_up(value) -> int:
    """Round like JavaScript's Math.round for non-negative values (12.5 -> 13)."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _count(value) -> int:
    return int(value or 0)


def _summarize(repo: RawRepo) -> RepoSummary:
    return RepoSummary(
        name=repo.get("name"),
        stars=_count(repo.get("stargazers_count")),
        forks=_count(repo.get("forks_count")),
        language=repo.get("language") or None,
        updated_at=try_parse_iso_dt(repo.get("updated_at")),
    )


def aggregate(raw_user: Optional[RawUser], raw_repos: List[RawRepo]) -> UserStats:
    if not isinstance(raw_user, Mapping) or not raw_user.get("login"):
        raise InvalidInputError("GitHub user payload is missing 'login'")

    repos = list(raw_repos or [])
    if not all(isinstance(r, Mapping) for r in repos):
        raise InvalidInputError("GitHub repository list contains non-object entries")
    languages: Dict[str, int] = {}
    total_stars = total_forks = 0
    for r in repos:
        total_stars += _count(r.get("stargazers_count"))
        total_forks += _count(r.get("forks_count"))
        lang = r.get("language")
        if lang:
            languages[lang] = languages.get(lang, 0) + 1

    public_repos = _count(raw_user.get("public_repos"))
    total_commits = public_repos * COMMITS_PER_REPO
    avg = round_half_up(Decimal(total_commits) / 12)

    return UserStats(
        username=raw_user["login"],
        display_name=raw_user.get("name") or raw_user["login"],
        followers=_count(raw_user.get("followers")),
        following=_count(raw_user.get("following")),
        public_repo_count=public_repos,
        total_stars=total_stars,
        total_forks=total_forks,
        language_histogram=MappingProxyType(languages),
        recent_repos=tuple(_summarize(r) for r in repos[:RECENT_REPOS]),
        estimated_total_commits=total_commits,
        estimated_avg_commits_per_month=avg,
        estimated_peak_month_commits=round_half_up(avg * PEAK_FACTOR),
    )
