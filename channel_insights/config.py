import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    youtube_api_key: Optional[str]
    db_path: Path
    log_level: str
    http_timeout: int
    rate_limit_interval: float
    recent_video_limit: int
    cors_origins: List[str]


def load_settings() -> Settings:
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        youtube_api_key=os.getenv("YT_API_KEY") or None,
        db_path=Path(os.getenv("DB_PATH", "./data")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        http_timeout=_env_int("HTTP_TIMEOUT", 10),
        rate_limit_interval=_env_float("RATE_LIMIT_INTERVAL", 0.35),
        recent_video_limit=_env_int("RECENT_VIDEO_LIMIT", 10),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
    )


settings = load_settings()
