import itertools

import pytest

from channel_insights.services import quality


@pytest.mark.parametrize(
    "engagement_rate, fake_followers, growth, expected",
    [
        (6, 2, 90, 100),
        (0.5, 25, 10, 35),
        (2, 7, 50, 85),
        (4, 12, None, 75),
        (None, None, None, 75),
        (3, 5, 80, 85),
        (5.5, 15, 20, 70),
    ],
)
def test_score(engagement_rate, fake_followers, growth, expected):
    assert quality.score(engagement_rate, fake_followers, growth) == expected


def test_score_always_within_bounds():
    values = [-100, 0, 0.5, 1, 3, 4.9, 5, 10, 20, 29, 30, 80, 81, 1000, None, float("nan")]
    for engagement_rate, fake_followers, growth in itertools.product(values, repeat=3):
        result = quality.score(engagement_rate, fake_followers, growth)
        assert 0 <= result <= 100
        assert isinstance(result, int)


@pytest.mark.parametrize(
    "value, label",
    [(95, "Excellent"), (90, "Excellent"), (85, "Very Good"), (75, "Good"), (65, "Fair"), (10, "Poor")],
)
def test_quality_label(value, label):
    assert quality.quality_label(value) == label


def test_quality_class():
    assert quality.quality_class(80) == "positive"
    assert quality.quality_class(60) == "neutral"
    assert quality.quality_class(59) == "negative"
