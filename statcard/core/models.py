from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, TypedDict


class RawUser(TypedDict, total=False):
    login: str
    name: Optional[str]
    followers: int
    following: int
    public_repos: int


class RawRepo(TypedDict, total=False):
    name: str
    stargazers_count: int
    forks_count: int
    language: Optional[str]
    updated_at: str


@dataclass(frozen=True)
class RepoSummary:
    name: Optional[str]
    stars: int
    forks: int
    language: Optional[str]
    updated_at: Optional[datetime]


@dataclass(frozen=True)
class UserStats:
    username: str
    display_name: str
    followers: int
    following: int
    public_repo_count: int
    total_stars: int
    total_forks: int
    # read-only view, excluded from hash
    language_histogram: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    recent_repos: Tuple[RepoSummary, ...] = ()
    estimated_total_commits: int = 0
    estimated_avg_commits_per_month: int = 0
    estimated_peak_month_commits: int = 0


@dataclass(frozen=True)
class MonthlySample:
    month: str
    commits: int
