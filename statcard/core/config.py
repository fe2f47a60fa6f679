import os
from typing import List


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    PORT: int = int(os.getenv("PORT", "3000"))
    CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")]
    GITHUB_API: str = os.getenv("GITHUB_API", "https://api.github.com")
    GITHUB_TIMEOUT: float = float(os.getenv("GITHUB_TIMEOUT", "20"))
    CACHE_MAX_AGE: int = int(os.getenv("CACHE_MAX_AGE", "3600"))
    # serve an 800x400 PNG instead of a JSON body on 404
    ERROR_IMAGE: bool = _flag("ERROR_IMAGE")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
