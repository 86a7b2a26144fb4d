import dataclasses
import random

from channel_insights.analytics import AnalyticsService
from channel_insights.services import quality
from channel_insights.snapshots import ChannelSeed

from conftest import FIXED_NOW, FakeClient, fixed_clock, make_snapshot


def _service(snapshot=None, rng_seed=5):
    client = FakeClient(snapshot)
    return client, AnalyticsService(client=client, rng=random.Random(rng_seed), clock=fixed_clock)


def _shape(value):
    if isinstance(value, dict):
        return {key: _shape(item) for key, item in value.items()}
    return type(value).__name__ if value is not None else None


def _keys(value, prefix=""):
    if isinstance(value, dict):
        keys = set()
        for key, item in value.items():
            keys.add(prefix + key)
            keys |= _keys(item, prefix + key + ".")
        return keys
    return set()


def test_analyze_uses_live_snapshot():
    client, service = _service(make_snapshot())

    result = service.analyze(ChannelSeed(channel_id="UC1234567890123456789012"))

    assert client.seeds == [ChannelSeed(channel_id="UC1234567890123456789012")]
    assert result.data_source == "youtube_api"
    assert result.analyzed_at == FIXED_NOW
    assert result.channel.name == "Example Channel"
    assert result.metrics.average_views == 2000
    assert result.metrics.engagement_rate_percent == 1.0
    assert result.metrics.engagement_trend_percent == -50.0
    assert result.metrics.upload_frequency_per_week == 1.0
    assert result.metrics.quality_score == 90
    assert result.metrics.last_upload_date == FIXED_NOW
    assert result.content.categories == ["cooking"]


def test_growth_consistency_feeds_quality_score():
    _, service = _service(make_snapshot())

    high = service.analyze(ChannelSeed(handle="example"), growth_consistency_percent=95)
    low = service.analyze(ChannelSeed(handle="example"), growth_consistency_percent=10)

    assert high.metrics.quality_score == 100
    assert low.metrics.quality_score == 80


def test_analyze_falls_back_to_synthesized_data():
    client, service = _service(None)

    result = service.analyze(ChannelSeed(name="Offline Channel", subscriber_count=75_000))

    assert len(client.seeds) == 1
    assert result.data_source == "synthesized"
    assert result.channel.name == "Offline Channel"
    assert result.channel.subscriber_count == 75_000
    assert result.analyzed_at == FIXED_NOW


def test_real_and_synthesized_results_share_shape():
    _, live = _service(make_snapshot())
    _, offline = _service(None)

    real = dataclasses.asdict(live.analyze(ChannelSeed(handle="example")))
    fake = dataclasses.asdict(offline.analyze(ChannelSeed(handle="example")))

    assert _keys(real) == _keys(fake)
    for section in ("metrics", "growth", "demographics"):
        assert _shape(real[section]) == _shape(fake[section])


def test_growth_consistency_feeds_synthesized_quality_score():
    _, low_service = _service(None, rng_seed=8)
    _, high_service = _service(None, rng_seed=8)

    low = low_service.analyze(ChannelSeed(name="Offline"), growth_consistency_percent=10)
    high = high_service.analyze(ChannelSeed(name="Offline"), growth_consistency_percent=90)

    assert low.metrics.engagement_rate_percent == high.metrics.engagement_rate_percent
    assert low.metrics.quality_score == quality.score(
        low.metrics.engagement_rate_percent, low.demographics.fake_follower_percent, 10
    )
    assert high.metrics.quality_score == quality.score(
        high.metrics.engagement_rate_percent, high.demographics.fake_follower_percent, 90
    )
    assert high.metrics.quality_score > low.metrics.quality_score
