"""Persistence of analysed channels."""
from __future__ import annotations

import dataclasses
import datetime as dt
import json
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select

from . import db
from .models import ChannelRecord
from .snapshots import DATA_SOURCE_SYNTHESIZED, AnalysisResult, EmailLookup

logger = logging.getLogger(__name__)


def init_db() -> None:
    db.init_db()


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    raise TypeError(f"Unserializable value: {value!r}")


def _record_to_dict(record: ChannelRecord) -> Dict[str, Any]:
    return {
        "channel_id": record.channel_id,
        "name": record.name,
        "handle": record.handle,
        "url": record.url,
        "category": record.category,
        "subscribers": record.subscribers,
        "average_views": record.average_views,
        "engagement_rate": record.engagement_rate,
        "upload_frequency": record.upload_frequency,
        "quality_score": record.quality_score,
        "email": record.email,
        "business_email": record.business_email,
        "data_source": record.data_source,
        "analysis_count": record.analysis_count,
        "first_seen": record.first_seen,
        "last_updated": record.last_updated,
        "analysis": json.loads(record.payload),
    }


def save_analysis(result: AnalysisResult, email: Optional[EmailLookup] = None) -> Optional[Dict[str, Any]]:
    """Upsert ``result`` keyed by channel id; synthesized results are skipped."""

    if result.data_source == DATA_SOURCE_SYNTHESIZED:
        logger.info("Not persisting synthesized analysis for %s", result.channel.name)
        return None
    channel = result.channel
    key = channel.channel_id or f"@{channel.handle}"
    payload = json.dumps(dataclasses.asdict(result), default=_json_default)

    with db.get_session() as session:
        record = session.get(ChannelRecord, key)
        if record is None:
            record = ChannelRecord(channel_id=key, analysis_count=0)
            session.add(record)
        record.name = channel.name
        record.handle = channel.handle
        record.url = channel.url
        record.category = result.content.categories[0] if result.content.categories else None
        record.subscribers = channel.subscriber_count
        record.average_views = result.metrics.average_views
        record.engagement_rate = result.metrics.engagement_rate_percent
        record.upload_frequency = result.metrics.upload_frequency_per_week
        record.quality_score = result.metrics.quality_score
        record.data_source = result.data_source
        record.payload = payload
        if email is not None and email.email:
            record.email = email.email
            record.business_email = email.business_email
        record.analysis_count = (record.analysis_count or 0) + 1
        record.update_timestamps()
        session.flush()
        saved = _record_to_dict(record)

    logger.info("Channel data saved: %s", channel.name)
    return saved


def get_channel(channel_id: str) -> Optional[Dict[str, Any]]:
    with db.get_session() as session:
        record = session.get(ChannelRecord, channel_id)
        if record is None:
            return None
        return _record_to_dict(record)


def get_channels(
    *, limit: int, offset: int, category: Optional[str] = None
) -> Tuple[List[Dict[str, Any]], int]:
    """Return one page of saved channels (most recently analysed first) and the total."""

    query = select(ChannelRecord)
    count_query = select(func.count()).select_from(ChannelRecord)
    if category:
        query = query.where(ChannelRecord.category == category.lower())
        count_query = count_query.where(ChannelRecord.category == category.lower())
    query = (
        query.order_by(ChannelRecord.last_updated.desc(), ChannelRecord.channel_id)
        .limit(limit)
        .offset(offset)
    )

    with db.get_session() as session:
        records = session.execute(query).scalars().all()
        total = session.execute(count_query).scalar_one()
        return [_record_to_dict(record) for record in records], total


def list_channels(page: int = 1, limit: int = 20, category: Optional[str] = None) -> Dict[str, Any]:
    page = max(1, page)
    limit = max(1, limit)
    items, total = get_channels(limit=limit, offset=(page - 1) * limit, category=category)
    return {
        "channels": items,
        "pagination": {
            "currentPage": page,
            "totalPages": math.ceil(total / limit),
            "totalItems": total,
            "hasNext": page * limit < total,
            "hasPrev": page > 1,
        },
    }
