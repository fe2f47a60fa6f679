# statcard/routers/stats.py
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from statcard.core.config import settings
from statcard.core.errors import RenderError, StatCardError
from statcard.services.card import StatsCardService
from statcard.services.github import GitHubSource
from statcard.services.render import PillowRenderer

log = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "User not found or API limit reached"
RENDER_FAILED = "Failed to render stats card"


def get_card_service() -> StatsCardService:
    return StatsCardService(GitHubSource(), PillowRenderer())


def _png(body: bytes, status_code: int = 200) -> Response:
    headers = {"Access-Control-Allow-Origin": "*"}
    if status_code == 200:
        headers["Cache-Control"] = f"public, max-age={settings.CACHE_MAX_AGE}"
    return Response(content=body, status_code=status_code, media_type="image/png", headers=headers)


def _not_found(service: StatsCardService, detail: str) -> Response:
    if settings.ERROR_IMAGE:
        try:
            return _png(service.build_error_card(), status_code=404)
        except RenderError:
            log.warning("Error card could not be rendered, falling back to JSON")
    raise HTTPException(status_code=404, detail=detail)


@router.get("/stats/{username}")
def stats_card(
    username: str,
    theme: str = Query("dark", description="dark | light | neon (accepted, currently no visual effect)"),
    variant: Literal["cards", "bars", "area"] = Query("bars", description="Card layout"),
    service: StatsCardService = Depends(get_card_service),
):
    try:
        body = service.build_card(username, theme=theme, variant=variant)
    except RenderError:
        log.exception("Render failed for %s", username)
        return _not_found(service, RENDER_FAILED)
    except StatCardError as e:
        log.warning("No card for %s: %s", username, e)
        return _not_found(service, NOT_FOUND)
    return _png(body)
