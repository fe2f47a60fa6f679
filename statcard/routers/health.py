from fastapi import APIRouter, Response

from statcard.services.layout import THEMES, VARIANTS

router = APIRouter()

@router.get("/")
def index():
    return {
        "message": "GitHub Stats Generator API",
        "usage": "/stats/{username}?theme=dark&variant=bars",
        "themes": list(THEMES),
        "variants": list(VARIANTS),
    }

@router.get("/health")
def health():
    return {"ok": True}

@router.get("/favicon.ico", include_in_schema=False)
def favicon():
    return Response(status_code=204)
