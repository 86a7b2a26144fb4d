import time
from typing import Optional

from sqlalchemy import Column, Float, Integer, String, Text

from .db import Base


def _timestamp() -> int:
    return int(time.time())


class ChannelRecord(Base):
    __tablename__ = "channels"

    channel_id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    handle = Column(String, nullable=True)
    url = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    subscribers = Column(Integer, nullable=False, default=0)
    average_views = Column(Integer, nullable=False, default=0)
    engagement_rate = Column(Float, nullable=False, default=0.0)
    upload_frequency = Column(Float, nullable=False, default=0.0)
    quality_score = Column(Integer, nullable=False, default=0)
    email = Column(String, nullable=True)
    business_email = Column(String, nullable=True)
    data_source = Column(String, nullable=False)
    payload = Column(Text, nullable=False)
    analysis_count = Column(Integer, nullable=False, default=0)
    first_seen = Column(Integer, default=_timestamp)
    last_updated = Column(Integer, default=_timestamp)

    def update_timestamps(self, *, seen: Optional[int] = None) -> None:
        now = seen or int(time.time())
        if not self.first_seen:
            self.first_seen = now
        self.last_updated = now
