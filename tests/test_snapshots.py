import pytest

from channel_insights.snapshots import ChannelSeed, InvalidChannelInput, seed_from_payload

from conftest import make_snapshot


def test_seed_from_extension_payload():
    seed = seed_from_payload(
        {
            "channelName": " Example ",
            "channelHandle": "@example",
            "subscriberCount": "1.5K subscribers",
            "avatarUrl": "https://img.example/a.jpg",
            "channelUrl": "https://www.youtube.com/@example",
        }
    )

    assert seed == ChannelSeed(
        name="Example",
        handle="example",
        subscriber_count=1500,
        avatar_url="https://img.example/a.jpg",
        url="https://www.youtube.com/@example",
    )


def test_seed_from_snake_case_payload():
    seed = seed_from_payload({"channel_id": "UC123", "subscriber_count": 42, "category": "Music"})

    assert seed.channel_id == "UC123"
    assert seed.subscriber_count == 42
    assert seed.category == "Music"
    assert seed.display_name == "UC123"


def test_seed_ignores_blank_values():
    seed = seed_from_payload({"channelName": "  ", "title": "Fallback Title", "subscriberCount": ""})

    assert seed.name == "Fallback Title"
    assert seed.subscriber_count is None


@pytest.mark.parametrize("payload", [None, "channel", ["a"], 42])
def test_seed_rejects_non_objects(payload):
    with pytest.raises(InvalidChannelInput):
        seed_from_payload(payload)


def test_snapshot_requires_an_identity():
    with pytest.raises(ValueError):
        make_snapshot(channel_id=None, handle=None)


def test_snapshot_rejects_negative_subscribers():
    with pytest.raises(ValueError):
        make_snapshot(subscriber_count=-1)
