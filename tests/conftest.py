import datetime as dt
import os
import tempfile
from typing import List, Optional

import pytest

# Keep imports of the app away from the working directory and the live API.
os.environ.setdefault("DB_PATH", tempfile.mkdtemp(prefix="channel-insights-"))
os.environ.pop("YT_API_KEY", None)

from channel_insights import db, database, youtube  # noqa: E402
from channel_insights.snapshots import ChannelSeed, ChannelSnapshot, VideoSample  # noqa: E402

FIXED_NOW = dt.datetime(2026, 1, 15, 12, 0, tzinfo=dt.timezone.utc)


def fixed_clock() -> dt.datetime:
    return FIXED_NOW


def make_videos(views, likes, comments, *, gap_days: float = 7.0) -> List[VideoSample]:
    return [
        VideoSample(
            id=f"vid{index}",
            title=f"Video {index}",
            published_at=FIXED_NOW - dt.timedelta(days=gap_days * index),
            views=view,
            likes=like,
            comments=comment,
            duration_seconds=600,
        )
        for index, (view, like, comment) in enumerate(zip(views, likes, comments))
    ]


def make_snapshot(**overrides) -> ChannelSnapshot:
    values = dict(
        name="Example Channel",
        channel_id="UC1234567890123456789012",
        handle="example",
        description="Cooking recipes every week. Business: business@studio.com",
        url="https://www.youtube.com/channel/UC1234567890123456789012",
        subscriber_count=50_000,
        default_language="en",
        recent_videos=tuple(make_videos([1000, 2000, 3000], [10, 20, 30], [0, 0, 0])),
    )
    values.update(overrides)
    return ChannelSnapshot(**values)


class FakeClient:
    def __init__(self, snapshot: Optional[ChannelSnapshot] = None) -> None:
        self.snapshot = snapshot
        self.seeds: List[ChannelSeed] = []

    def fetch_snapshot(self, seed: ChannelSeed) -> Optional[ChannelSnapshot]:
        self.seeds.append(seed)
        return self.snapshot


@pytest.fixture(autouse=True)
def _no_rate_limit(monkeypatch):
    monkeypatch.setattr(youtube.RATE_LIMITER, "wait", lambda: None)


@pytest.fixture
def temp_db(tmp_path):
    db.configure(f"sqlite:///{tmp_path / 'channels.db'}")
    database.init_db()
    yield
    db.engine.dispose()
