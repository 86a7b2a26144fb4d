"""Plain data records shared by the analysis pipeline and its collaborators."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .services.numbers import parse_count


DATA_SOURCE_API = "youtube_api"
DATA_SOURCE_SYNTHESIZED = "synthesized"


class InvalidChannelInput(ValueError):
    """Raised when a request payload cannot describe a channel at all."""


@dataclass(frozen=True)
class ChannelSeed:
    """Channel hints supplied by a caller; any field may be absent."""

    channel_id: Optional[str] = None
    handle: Optional[str] = None
    name: Optional[str] = None
    subscriber_count: Optional[int] = None
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    country: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.handle or self.channel_id or "Unknown Channel"


@dataclass(frozen=True)
class VideoSample:
    id: str
    title: str = ""
    published_at: Optional[dt.datetime] = None
    views: Optional[int] = None
    likes: int = 0
    comments: int = 0
    duration_seconds: int = 0


@dataclass(frozen=True)
class ChannelSnapshot:
    """Immutable record produced by a single analysis pass."""

    name: str
    channel_id: Optional[str] = None
    handle: Optional[str] = None
    avatar_url: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    subscriber_count: int = 0
    video_count: int = 0
    view_count: int = 0
    default_language: Optional[str] = None
    recent_videos: Tuple[VideoSample, ...] = ()

    def __post_init__(self) -> None:
        if not (self.channel_id or self.handle):
            raise ValueError("ChannelSnapshot requires a channel_id or a handle")
        if self.subscriber_count < 0:
            raise ValueError("subscriber_count must be non-negative")


@dataclass(frozen=True)
class EngagementEstimate:
    engagement_rate_percent: float = 0.0
    engagement_trend_percent: float = 0.0
    average_views: int = 0
    upload_frequency_per_week: float = 0.0
    last_upload_date: Optional[dt.datetime] = None


@dataclass(frozen=True)
class MetricsResult:
    engagement_rate_percent: float
    engagement_trend_percent: float
    average_views: int
    upload_frequency_per_week: float
    quality_score: int
    last_upload_date: Optional[dt.datetime] = None

    @classmethod
    def from_estimate(cls, estimate: EngagementEstimate, quality_score: int) -> "MetricsResult":
        return cls(
            engagement_rate_percent=estimate.engagement_rate_percent,
            engagement_trend_percent=estimate.engagement_trend_percent,
            average_views=estimate.average_views,
            upload_frequency_per_week=estimate.upload_frequency_per_week,
            quality_score=quality_score,
            last_upload_date=estimate.last_upload_date,
        )


@dataclass(frozen=True)
class EmailCandidate:
    address: str
    is_business_like: bool = False
    confidence: float = 0.0


@dataclass(frozen=True)
class EmailLookup:
    email: Optional[str]
    business_email: Optional[str]
    confidence: float
    source: str
    alternative_emails: List[str]
    last_checked: dt.datetime


@dataclass(frozen=True)
class GrowthEstimate:
    subscriber_growth_percent: float
    views_growth_percent: float


@dataclass(frozen=True)
class Collaboration:
    has_collaborations: bool
    collaboration_frequency_percent: int


@dataclass(frozen=True)
class ContentProfile:
    categories: List[str]
    tags: List[str]
    language: str
    average_video_length_seconds: int
    upload_schedule: str
    content_types: List[str]
    collaboration: Collaboration


@dataclass(frozen=True)
class Demographics:
    primary_age_group: str
    gender_split: str
    top_location: str
    fake_follower_percent: float


@dataclass(frozen=True)
class SimilarChannel:
    channel_id: str
    name: str
    subscriber_count: int
    subscribers_display: str
    similarity_percent: float
    category: str


@dataclass(frozen=True)
class AnalysisResult:
    """Output of one analysis, real or synthesized; both share this shape."""

    channel: ChannelSnapshot
    metrics: MetricsResult
    growth: GrowthEstimate
    content: ContentProfile
    demographics: Demographics
    data_source: str
    analyzed_at: dt.datetime


_SEED_KEYS = {
    "channel_id": ("channelId", "channel_id"),
    "handle": ("channelHandle", "handle", "channel_handle"),
    "name": ("channelName", "name", "channel_name", "title"),
    "description": ("description",),
    "avatar_url": ("avatarUrl", "avatar_url", "avatar"),
    "url": ("url", "channelUrl", "channel_url"),
    "category": ("category",),
    "country": ("country",),
}


def _first_text(payload: Mapping[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        cleaned = str(value).strip()
        if cleaned:
            return cleaned
    return None


def seed_from_payload(payload: Any) -> ChannelSeed:
    """Build a :class:`ChannelSeed` from extension (camelCase) or API (snake_case) data."""

    if not isinstance(payload, Mapping):
        raise InvalidChannelInput("Channel payload must be an object")

    values: Dict[str, Optional[str]] = {
        attr: _first_text(payload, keys) for attr, keys in _SEED_KEYS.items()
    }
    handle = values["handle"]
    if handle:
        handle = handle.lstrip("@") or None

    raw_subscribers = None
    for key in ("subscriberCount", "subscriber_count", "subscribers"):
        if payload.get(key) not in (None, ""):
            raw_subscribers = payload.get(key)
            break
    subscriber_count = parse_count(raw_subscribers) if raw_subscribers is not None else None

    return ChannelSeed(
        channel_id=values["channel_id"],
        handle=handle,
        name=values["name"],
        subscriber_count=subscriber_count,
        description=values["description"],
        avatar_url=values["avatar_url"],
        url=values["url"],
        category=values["category"],
        country=values["country"],
    )
