"""Keyword-based content profiling of a channel's description and recent titles."""
from __future__ import annotations

import re
from collections import Counter
from typing import Dict, List, Optional, Sequence

from langdetect import DetectorFactory, LangDetectException, detect_langs

from ..snapshots import ChannelSnapshot, Collaboration, ContentProfile, VideoSample
from .engagement import average_video_length, detect_upload_schedule

DetectorFactory.seed = 0

DEFAULT_LANGUAGE = "en"
MIN_LANGUAGE_CONFIDENCE = 0.5
MAX_TAGS = 10

CATEGORY_KEYWORDS: Dict[str, List[str]] = {
    "gaming": ["game", "gaming", "play", "stream", "walkthrough", "review"],
    "tech": ["tech", "technology", "review", "unbox", "gadget", "phone", "computer"],
    "education": ["tutorial", "learn", "guide", "how to", "explain", "course"],
    "entertainment": ["funny", "comedy", "entertainment", "reaction", "vlog"],
    "music": ["music", "song", "cover", "instrumental", "audio"],
    "lifestyle": ["lifestyle", "daily", "routine", "life", "personal"],
    "beauty": ["makeup", "beauty", "skincare", "hair", "fashion"],
    "fitness": ["workout", "fitness", "exercise", "gym", "health"],
    "cooking": ["cooking", "recipe", "food", "kitchen", "chef"],
    "travel": ["travel", "trip", "journey", "explore", "adventure"],
}

CONTENT_TYPE_KEYWORDS = [
    ("live-stream", ("live", "stream")),
    ("shorts", ("short", "#shorts")),
    ("tutorial", ("tutorial", "how")),
    ("review", ("review", "unbox")),
    ("vlog", ("vlog", "daily")),
    ("reaction", ("reaction", "react")),
]

COLLAB_KEYWORDS = ("feat", "featuring", "with", "vs", "collaboration", "collab")


def extract_categories(text: str) -> List[str]:
    lowered = text.lower()
    categories = [
        category
        for category, keywords in CATEGORY_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]
    return categories or ["general"]


def extract_tags(text: str, limit: int = MAX_TAGS) -> List[str]:
    words = [word for word in re.sub(r"[^\w\s]", "", text.lower()).split() if len(word) > 3]
    return [word for word, _ in Counter(words).most_common(limit)]


def detect_content_types(titles: str) -> List[str]:
    lowered = titles.lower()
    types = [
        label for label, keywords in CONTENT_TYPE_KEYWORDS if any(keyword in lowered for keyword in keywords)
    ]
    return types or ["standard"]


def detect_collaborations(videos: Sequence[VideoSample]) -> Collaboration:
    if not videos:
        return Collaboration(has_collaborations=False, collaboration_frequency_percent=0)
    collab_count = sum(
        1 for video in videos if any(keyword in video.title.lower() for keyword in COLLAB_KEYWORDS)
    )
    return Collaboration(
        has_collaborations=collab_count > 0,
        collaboration_frequency_percent=round(collab_count / len(videos) * 100),
    )


def detect_language(text: str) -> Optional[str]:
    cleaned = text.strip()
    if not cleaned:
        return None
    try:
        langs = detect_langs(cleaned)
    except LangDetectException:
        return None
    if not langs or langs[0].prob < MIN_LANGUAGE_CONFIDENCE:
        return None
    return langs[0].lang


def profile_content(snapshot: ChannelSnapshot) -> ContentProfile:
    videos = snapshot.recent_videos
    titles = " ".join(video.title for video in videos).lower()
    description = snapshot.description or ""
    language = (
        snapshot.default_language
        or detect_language(f"{description}\n{titles}")
        or DEFAULT_LANGUAGE
    )
    return ContentProfile(
        categories=extract_categories(f"{description} {titles}"),
        tags=extract_tags(titles),
        language=language,
        average_video_length_seconds=average_video_length(videos),
        upload_schedule=detect_upload_schedule(videos),
        content_types=detect_content_types(titles),
        collaboration=detect_collaborations(videos),
    )
