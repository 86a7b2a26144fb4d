"""Client for the YouTube Data API v3 plus channel reference helpers."""
from __future__ import annotations

import datetime as dt
import logging
import re
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from .config import settings
from .services.durations import parse_iso_duration
from .snapshots import ChannelSeed, ChannelSnapshot, VideoSample

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
)

SESSION = requests.Session()
SESSION.headers.update(
    {
        "User-Agent": USER_AGENT,
        "Accept-Language": "en-US,en;q=0.9",
    }
)

API_BASE = "https://www.googleapis.com/youtube/v3"
CHANNEL_ID_PATTERN = re.compile(r"(UC[\w-]{22})")
HANDLE_PATTERN = re.compile(r"@?([A-Za-z0-9._-]{3,})")


class RateLimiter:
    """Simple thread-safe rate limiter based on a minimum interval."""

    def __init__(self, min_interval: float):
        self.min_interval = min_interval
        self._lock = threading.Lock()
        self._last_time = 0.0

    def wait(self) -> None:
        with self._lock:
            now = time.monotonic()
            wait_time = self.min_interval - (now - self._last_time)
            if wait_time > 0:
                time.sleep(wait_time)
            self._last_time = time.monotonic()


RATE_LIMITER = RateLimiter(min_interval=settings.rate_limit_interval)


def extract_channel_id(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    match = CHANNEL_ID_PATTERN.search(value.strip())
    return match.group(1) if match else None


def normalize_handle(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    candidate = value.strip().split("/", 1)[0]
    match = HANDLE_PATTERN.fullmatch(candidate)
    if not match:
        return None
    return match.group(1)


def about_page_url(seed: ChannelSeed) -> Optional[str]:
    if seed.url:
        base = seed.url.split("?")[0].rstrip("/")
        if base.endswith("/about"):
            return base
        return f"{base}/about"
    if seed.channel_id:
        return f"https://www.youtube.com/channel/{seed.channel_id}/about"
    handle = normalize_handle(seed.handle)
    if handle:
        return f"https://www.youtube.com/@{handle}/about"
    return None


def _parse_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    return parsed if parsed >= 0 else None


def _parse_timestamp(value: Optional[str]) -> Optional[dt.datetime]:
    if not value:
        return None
    candidate = value.strip()
    if candidate.endswith("Z"):
        candidate = f"{candidate[:-1]}+00:00"
    try:
        parsed = dt.datetime.fromisoformat(candidate)
    except ValueError:
        logger.debug("Unparseable publish date %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def video_from_item(item: Dict[str, Any]) -> VideoSample:
    snippet = item.get("snippet") or {}
    stats = item.get("statistics") or {}
    details = item.get("contentDetails") or {}
    video_id = item.get("id")
    if isinstance(video_id, dict):
        video_id = video_id.get("videoId")
    return VideoSample(
        id=str(video_id or ""),
        title=snippet.get("title") or "Unknown Title",
        published_at=_parse_timestamp(snippet.get("publishedAt")),
        views=_parse_optional_int(stats.get("viewCount")),
        likes=_parse_optional_int(stats.get("likeCount")) or 0,
        comments=_parse_optional_int(stats.get("commentCount")) or 0,
        duration_seconds=parse_iso_duration(details.get("duration")),
    )


def _newest_first(video: VideoSample) -> float:
    return -video.published_at.timestamp() if video.published_at else float("inf")


def snapshot_from_items(
    details: Dict[str, Any], video_items: List[Dict[str, Any]], seed: ChannelSeed
) -> ChannelSnapshot:
    snippet = details.get("snippet") or {}
    stats = details.get("statistics") or {}
    thumbnails = snippet.get("thumbnails") or {}
    avatar = (thumbnails.get("high") or thumbnails.get("default") or {}).get("url")
    channel_id = details.get("id") or seed.channel_id
    videos = sorted((video_from_item(item) for item in video_items), key=_newest_first)
    return ChannelSnapshot(
        name=snippet.get("title") or seed.display_name,
        channel_id=channel_id,
        handle=seed.handle or normalize_handle(snippet.get("customUrl")),
        avatar_url=avatar or seed.avatar_url,
        description=snippet.get("description") or seed.description or "",
        url=seed.url or f"https://www.youtube.com/channel/{channel_id}",
        subscriber_count=_parse_optional_int(stats.get("subscriberCount")) or 0,
        video_count=_parse_optional_int(stats.get("videoCount")) or 0,
        view_count=_parse_optional_int(stats.get("viewCount")) or 0,
        default_language=snippet.get("defaultLanguage"),
        recent_videos=tuple(videos),
    )


class YouTubeClient:
    """Fetches channel statistics and recent uploads from the Data API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: int = settings.http_timeout,
        video_limit: int = settings.recent_video_limit,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.youtube_api_key
        self.session = session or SESSION
        self.timeout = timeout
        self.video_limit = video_limit

    def _get(self, resource: str, **params: Any) -> Dict[str, Any]:
        RATE_LIMITER.wait()
        response = self.session.get(
            f"{API_BASE}/{resource}",
            params={**params, "key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        data = response.json()
        return data if isinstance(data, dict) else {}

    def resolve_channel_id(self, seed: ChannelSeed) -> Optional[str]:
        channel_id = extract_channel_id(seed.channel_id) or extract_channel_id(seed.url)
        if channel_id:
            return channel_id
        handle = normalize_handle(seed.handle)
        if not handle:
            return None
        data = self._get("search", q=handle, type="channel", part="snippet", maxResults=1)
        items = data.get("items") or []
        if not items:
            return None
        return (items[0].get("id") or {}).get("channelId")

    def fetch_channel_details(self, channel_id: str) -> Optional[Dict[str, Any]]:
        data = self._get(
            "channels",
            id=channel_id,
            part="snippet,statistics,contentDetails,brandingSettings",
        )
        items = data.get("items") or []
        return items[0] if items else None

    def fetch_recent_videos(self, channel_id: str) -> List[Dict[str, Any]]:
        search = self._get(
            "search",
            channelId=channel_id,
            type="video",
            part="snippet",
            order="date",
            maxResults=self.video_limit,
        )
        video_ids = [
            (item.get("id") or {}).get("videoId") for item in search.get("items") or []
        ]
        video_ids = [video_id for video_id in video_ids if video_id]
        if not video_ids:
            return []
        data = self._get("videos", id=",".join(video_ids), part="statistics,contentDetails,snippet")
        return data.get("items") or []

    def fetch_snapshot(self, seed: ChannelSeed) -> Optional[ChannelSnapshot]:
        """Return a live snapshot, or ``None`` when the API cannot supply one."""

        if not self.api_key:
            logger.warning("YouTube API key not configured")
            return None
        try:
            channel_id = self.resolve_channel_id(seed)
            if not channel_id:
                logger.warning("Could not determine channel ID for %s", seed.display_name)
                return None
            details = self.fetch_channel_details(channel_id)
            if not details:
                logger.warning("Channel %s not found", channel_id)
                return None
            videos = self.fetch_recent_videos(channel_id)
        except requests.RequestException as exc:
            logger.warning("YouTube API request failed for %s: %s", seed.display_name, exc)
            return None
        return snapshot_from_items(details, videos, seed)
