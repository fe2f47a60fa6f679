import logging
import random
from typing import Optional, Protocol, List

from statcard.core.models import RawRepo, RawUser
from statcard.services.layout import build_error_layout, build_layout
from statcard.services.render import CardRenderer
from statcard.services.stats import aggregate
from statcard.utils.synthetic import generate_heatmap_intensities, generate_monthly_samples

log = logging.getLogger(__name__)


class UserSource(Protocol):
    def fetch_user(self, login: str) -> RawUser: ...

    def fetch_repositories(self, login: str, per_page: int = 100) -> List[RawRepo]: ...


class StatsCardService:
    """
    Request-scoped pipeline: fetch user, fetch repos, aggregate, lay out, render.
    Every step runs sequentially; any error propagates to the caller untouched.
    """

    def __init__(self, source: UserSource, renderer: CardRenderer, rng: Optional[random.Random] = None):
        self.source = source
        self.renderer = renderer
        self.rng = rng or random.Random()

    def build_card(self, username: str, theme: str = "dark", variant: str = "bars") -> bytes:
        user = self.source.fetch_user(username)
        login = user.get("login") if isinstance(user, dict) else None
        repos = self.source.fetch_repositories(login or username)
        stats = aggregate(user, repos)
        log.info("Aggregated %d repos for %s (%d stars)", len(repos), stats.username, stats.total_stars)

        monthly = generate_monthly_samples(self.rng)
        heatmap = generate_heatmap_intensities(self.rng) if variant == "area" else None
        layout = build_layout(stats, monthly, theme=theme, variant=variant, heatmap=heatmap)
        return self.renderer.render(layout)

    def build_error_card(self, message: str = "Error: User not found") -> bytes:
        return self.renderer.render(build_error_layout(message))
