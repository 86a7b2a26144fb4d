"""Randomised stand-in results used when no upstream channel data is available.

Synthetic videos are pushed through the same estimator and scorer as real
data, so every clamp and unit on a synthesized result matches a real one.
"""
from __future__ import annotations

import datetime as dt
import logging
import random
import re
from typing import Callable, List, Optional

from ..snapshots import (
    DATA_SOURCE_SYNTHESIZED,
    AnalysisResult,
    ChannelSeed,
    ChannelSnapshot,
    Demographics,
    EmailLookup,
    GrowthEstimate,
    MetricsResult,
    VideoSample,
)
from . import engagement, quality
from .content import profile_content

logger = logging.getLogger(__name__)

Clock = Callable[[], dt.datetime]

PLACEHOLDER_AVATAR = "https://via.placeholder.com/200x200/6366f1/ffffff?text=YT"
MOCK_VIDEO_TITLES = [
    "Amazing New Discovery!",
    "Day in My Life Vlog",
    "Tutorial: How to Get Started",
    "Reacting to Viral Videos",
    "Q&A Session with Viewers",
]
AGE_GROUPS = ["18-34 (65%)", "25-44 (58%)", "18-24 (72%)", "35-54 (45%)", "13-24 (68%)"]
GENDER_SPLITS = [
    "60% M / 40% F",
    "45% M / 55% F",
    "70% M / 30% F",
    "52% M / 48% F",
    "38% M / 62% F",
]
TOP_LOCATIONS = ["United States", "United Kingdom", "Canada", "Australia", "Germany", "India"]
FAKE_FOLLOWER_PERCENTS = [1.2, 2.3, 3.1, 0.8, 4.2, 1.7]
FALLBACK_EMAIL_DOMAINS = ["gmail.com", "business.email", "contact.me", "studio.com"]
FALLBACK_EMAIL_RATE = 0.6
FALLBACK_EMAIL_CONFIDENCE = 0.3


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


def estimate_growth(subscribers: int, average_views: int, rng: random.Random) -> GrowthEstimate:
    """Band monthly growth by how many subscribers actually watch."""
    ratio = average_views / subscribers if subscribers > 0 else 0.0
    if ratio > 0.1:
        subscriber_growth = rng.uniform(5, 20)
        views_growth = rng.uniform(10, 30)
    elif ratio > 0.05:
        subscriber_growth = rng.uniform(2, 12)
        views_growth = rng.uniform(5, 20)
    else:
        subscriber_growth = rng.uniform(0, 5)
        views_growth = rng.uniform(0, 10)
    return GrowthEstimate(
        subscriber_growth_percent=round(subscriber_growth, 2),
        views_growth_percent=round(views_growth, 2),
    )


def synthesize_demographics(rng: random.Random) -> Demographics:
    return Demographics(
        primary_age_group=rng.choice(AGE_GROUPS),
        gender_split=rng.choice(GENDER_SPLITS),
        top_location=rng.choice(TOP_LOCATIONS),
        fake_follower_percent=rng.choice(FAKE_FOLLOWER_PERCENTS),
    )


def fallback_email(name: Optional[str], rng: random.Random, clock: Clock = utcnow) -> EmailLookup:
    clean_name = re.sub(r"[^a-z0-9]", "", (name or "").lower()) or "channel"
    domain = rng.choice(FALLBACK_EMAIL_DOMAINS)
    address = f"{clean_name}@{domain}" if rng.random() < FALLBACK_EMAIL_RATE else None
    return EmailLookup(
        email=address,
        business_email=None,
        confidence=FALLBACK_EMAIL_CONFIDENCE if address else 0.0,
        source="fallback",
        alternative_emails=[],
        last_checked=clock(),
    )


class MockChannelSynthesizer:
    def __init__(self, rng: Optional[random.Random] = None, clock: Clock = utcnow) -> None:
        self.rng = rng or random.Random()
        self.clock = clock

    def _videos(self, now: dt.datetime) -> List[VideoSample]:
        videos = []
        for index, title in enumerate(MOCK_VIDEO_TITLES):
            minutes = self.rng.randint(5, 24)
            seconds = self.rng.randint(0, 59)
            videos.append(
                VideoSample(
                    id=f"mock_video_{index + 1}",
                    title=title,
                    published_at=now - dt.timedelta(seconds=self.rng.uniform(0, 30 * 86_400)),
                    views=self.rng.randint(10_000, 1_009_999),
                    likes=self.rng.randint(1_000, 50_999),
                    comments=self.rng.randint(100, 5_099),
                    duration_seconds=minutes * 60 + seconds,
                )
            )
        videos.sort(key=lambda video: video.published_at, reverse=True)
        return videos

    def synthesize(
        self, seed: ChannelSeed, growth_consistency_percent: Optional[float] = None
    ) -> AnalysisResult:
        logger.info("Generating synthesized analysis for %s", seed.display_name)
        now = self.clock()
        subscribers = seed.subscriber_count
        if subscribers is None:
            subscribers = self.rng.randint(100_000, 2_099_999)

        videos = self._videos(now)
        channel = ChannelSnapshot(
            name=seed.name or "Sample Channel",
            channel_id=seed.channel_id or f"mock_{int(now.timestamp() * 1000)}",
            handle=seed.handle or "samplechannel",
            avatar_url=seed.avatar_url or PLACEHOLDER_AVATAR,
            description=seed.description or "Sample channel description",
            url=seed.url or "https://youtube.com/@samplechannel",
            subscriber_count=subscribers,
            video_count=self.rng.randint(50, 549),
            view_count=int(subscribers * self.rng.uniform(10, 60)),
            default_language="en",
            recent_videos=tuple(videos),
        )

        estimate = engagement.estimate(videos)
        demographics = synthesize_demographics(self.rng)
        score = quality.score(
            estimate.engagement_rate_percent,
            demographics.fake_follower_percent,
            growth_consistency_percent,
        )
        return AnalysisResult(
            channel=channel,
            metrics=MetricsResult.from_estimate(estimate, score),
            growth=estimate_growth(subscribers, estimate.average_views, self.rng),
            content=profile_content(channel),
            demographics=demographics,
            data_source=DATA_SOURCE_SYNTHESIZED,
            analyzed_at=now,
        )
