import math
from typing import Optional

BASE_SCORE = 85
DEFAULT_FAKE_FOLLOWER_PERCENT = 0.0
DEFAULT_GROWTH_CONSISTENCY_PERCENT = 50.0

QUALITY_LABELS = [
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Fair"),
]


def _engagement_adjustment(rate: float) -> int:
    if rate > 5:
        return 10
    if rate > 3:
        return 5
    if rate < 1:
        return -15
    return 0


def _fake_follower_adjustment(percent: float) -> int:
    if percent > 20:
        return -25
    if percent > 10:
        return -15
    if percent < 5:
        return 5
    return 0


def _growth_adjustment(percent: float) -> int:
    if percent > 80:
        return 10
    if percent < 30:
        return -10
    return 0


def _or_default(value: Optional[float], default: float) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(number) else number


def score(
    engagement_rate_percent: Optional[float],
    fake_follower_percent: Optional[float] = None,
    growth_consistency_percent: Optional[float] = None,
) -> int:
    """Fold engagement, fake-follower and growth signals into a 0-100 score."""
    total = BASE_SCORE
    total += _engagement_adjustment(_or_default(engagement_rate_percent, 0.0))
    total += _fake_follower_adjustment(_or_default(fake_follower_percent, DEFAULT_FAKE_FOLLOWER_PERCENT))
    total += _growth_adjustment(
        _or_default(growth_consistency_percent, DEFAULT_GROWTH_CONSISTENCY_PERCENT)
    )
    return int(max(0, min(100, round(total))))


def quality_label(value: int) -> str:
    for threshold, label in QUALITY_LABELS:
        if value >= threshold:
            return label
    return "Poor"


def quality_class(value: int) -> str:
    if value >= 80:
        return "positive"
    if value >= 60:
        return "neutral"
    return "negative"
