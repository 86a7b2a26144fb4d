import random
import string
from typing import List

from ..snapshots import ChannelSeed, SimilarChannel
from .numbers import format_count

DEFAULT_BASE_SUBSCRIBERS = 100_000
DEFAULT_CATEGORY = "Entertainment"
SUBSCRIBER_VARIATION = 0.3
CHANNEL_NAMES = [
    "Tech Reviews Central",
    "Gaming Hub Pro",
    "Music Vibes Studio",
    "Cooking Masters",
    "Fitness Journey",
    "Travel Adventures",
    "DIY Creative",
    "Science Explained",
    "Art Design Hub",
    "Business Insights",
]
_ID_ALPHABET = string.digits + string.ascii_lowercase


def _random_channel_id(rng: random.Random) -> str:
    return "UC" + "".join(rng.choice(_ID_ALPHABET) for _ in range(22))


def find_similar_channels(seed: ChannelSeed, rng: random.Random, count: int = 5) -> List[SimilarChannel]:
    """Placeholder similarity: channels of comparable size in the seed's category."""
    base = seed.subscriber_count or DEFAULT_BASE_SUBSCRIBERS
    results = []
    for name in CHANNEL_NAMES[: max(0, count)]:
        variation = rng.uniform(-SUBSCRIBER_VARIATION, SUBSCRIBER_VARIATION)
        subscribers = round(base * (1 + variation))
        results.append(
            SimilarChannel(
                channel_id=_random_channel_id(rng),
                name=name,
                subscriber_count=subscribers,
                subscribers_display=format_count(subscribers),
                similarity_percent=round(rng.uniform(85, 95), 1),
                category=seed.category or DEFAULT_CATEGORY,
            )
        )
    return results
