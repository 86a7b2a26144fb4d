"""Engagement rate, trend and upload cadence derived from recent video samples."""
from __future__ import annotations

import datetime as dt
import math
from typing import List, Optional, Sequence

from ..snapshots import EngagementEstimate, VideoSample

MAX_ENGAGEMENT_RATE = 15.0
MIN_UPLOADS_PER_WEEK = 0.1
MAX_UPLOADS_PER_WEEK = 10.0
# Used when there is no older half to compare the recent half against.
TREND_FALLBACK_PERCENT = 0.5
SECONDS_PER_DAY = 86_400

UPLOAD_SCHEDULES = [
    (2, "daily"),
    (4, "every-few-days"),
    (8, "weekly"),
    (16, "bi-weekly"),
    (32, "monthly"),
]


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _interactions(video: VideoSample) -> int:
    return max(0, video.likes) + max(0, video.comments)


def _average_views(videos: Sequence[VideoSample]) -> int:
    known = [video.views for video in videos if video.views is not None]
    if not known:
        return 0
    return int(math.floor(_mean(known) + 0.5))


def _engagement_rate(videos: Sequence[VideoSample]) -> float:
    rates = [
        _interactions(video) / video.views * 100
        for video in videos
        if video.views is not None and video.views > 0
    ]
    return round(_clamp(_mean(rates), 0.0, MAX_ENGAGEMENT_RATE), 2)


def _engagement_trend(videos: Sequence[VideoSample]) -> float:
    split = (len(videos) + 1) // 2
    recent, older = videos[:split], videos[split:]
    older_mean = _mean([_interactions(video) for video in older])
    if not older or older_mean == 0:
        return TREND_FALLBACK_PERCENT
    recent_mean = _mean([_interactions(video) for video in recent])
    return round((recent_mean - older_mean) / older_mean * 100, 2)


def _aware(value: dt.datetime) -> dt.datetime:
    # Naive timestamps are taken as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=dt.timezone.utc)


def _publish_dates(videos: Sequence[VideoSample]) -> List[dt.datetime]:
    return sorted(
        (_aware(video.published_at) for video in videos if video.published_at is not None),
        reverse=True,
    )


def _last_upload(videos: Sequence[VideoSample]) -> Optional[dt.datetime]:
    dates = _publish_dates(videos)
    return dates[0] if dates else None


def _gap_days(videos: Sequence[VideoSample]) -> List[float]:
    dates = _publish_dates(videos)
    return [
        (newer - older).total_seconds() / SECONDS_PER_DAY
        for newer, older in zip(dates, dates[1:])
    ]


def _upload_frequency(videos: Sequence[VideoSample]) -> float:
    gaps = _gap_days(videos)
    if not gaps:
        return MIN_UPLOADS_PER_WEEK
    average_gap = _mean(gaps)
    if average_gap <= 0:
        return MAX_UPLOADS_PER_WEEK
    per_week = _clamp(7 / average_gap, MIN_UPLOADS_PER_WEEK, MAX_UPLOADS_PER_WEEK)
    return round(per_week, 1)


def estimate(videos: Sequence[VideoSample]) -> EngagementEstimate:
    """Summarise ``videos`` (newest first) into engagement metrics.

    An empty sample is a valid input and produces an all-zero estimate.
    """

    videos = list(videos)
    if not videos:
        return EngagementEstimate()
    return EngagementEstimate(
        engagement_rate_percent=_engagement_rate(videos),
        engagement_trend_percent=_engagement_trend(videos),
        average_views=_average_views(videos),
        upload_frequency_per_week=_upload_frequency(videos),
        last_upload_date=_last_upload(videos),
    )


def average_video_length(videos: Sequence[VideoSample]) -> int:
    durations = [video.duration_seconds for video in videos if video.duration_seconds > 0]
    if not durations:
        return 0
    return int(math.floor(_mean(durations) + 0.5))


def detect_upload_schedule(videos: Sequence[VideoSample]) -> str:
    gaps = _gap_days(videos)
    if len(gaps) < 2:
        return "irregular"
    average_gap = _mean(gaps)
    for limit, label in UPLOAD_SCHEDULES:
        if average_gap <= limit:
            return label
    return "irregular"
