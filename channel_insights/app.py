"""FastAPI application exposing channel analysis to the browser extension."""
from __future__ import annotations

import datetime as dt
import logging
import random
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import database
from .analytics import AnalyticsService
from .config import settings
from .services import quality
from .services.emails import EmailFinder
from .services.similar import find_similar_channels
from .services.synthesizer import fallback_email
from .snapshots import AnalysisResult, ChannelSeed, InvalidChannelInput, seed_from_payload

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Channel Insights")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

database.init_db()

rng = random.Random()
analytics_service = AnalyticsService(rng=rng)
email_finder = EmailFinder()
started_at = dt.datetime.now(dt.timezone.utc)


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat()


def _respond(data: Any) -> JSONResponse:
    return JSONResponse({"success": True, "data": jsonable_encoder(data), "timestamp": _now_iso()})


def _seed(payload: Any) -> ChannelSeed:
    try:
        return seed_from_payload(payload)
    except InvalidChannelInput as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _parse_optional_float(value: Any, *, field: str) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise HTTPException(status_code=400, detail=f"{field} must be a number")
    try:
        return float(str(value).strip().rstrip("%"))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be a number")


def _analysis_payload(result: AnalysisResult) -> Dict[str, Any]:
    payload = jsonable_encoder(result)
    score = result.metrics.quality_score
    payload["quality_label"] = quality.quality_label(score)
    payload["quality_class"] = quality.quality_class(score)
    return payload


@app.get("/health")
def health() -> JSONResponse:
    uptime = (dt.datetime.now(dt.timezone.utc) - started_at).total_seconds()
    return JSONResponse({"status": "OK", "timestamp": _now_iso(), "uptime": round(uptime, 1)})


@app.post("/api/analyze-channel")
def api_analyze_channel(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    seed = _seed(payload)
    growth = _parse_optional_float(payload.get("growthConsistency"), field="growthConsistency")
    result = analytics_service.analyze(seed, growth_consistency_percent=growth)
    return _respond(_analysis_payload(result))


@app.get("/api/analytics/channel/{channel_id}")
def api_channel_analytics(channel_id: str) -> JSONResponse:
    seed = ChannelSeed(channel_id=channel_id, url=f"https://www.youtube.com/channel/{channel_id}")
    result = analytics_service.analyze(seed)
    return _respond(_analysis_payload(result))


@app.post("/api/analytics/batch")
def api_analytics_batch(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    channels = payload.get("channels")
    if not isinstance(channels, list) or not channels:
        raise HTTPException(status_code=400, detail="Invalid channels array")

    logger.info("Batch analytics request for %d channels", len(channels))
    successful: List[Dict[str, Any]] = []
    failed: List[str] = []
    for channel in channels:
        try:
            seed = seed_from_payload(channel)
        except InvalidChannelInput as exc:
            failed.append(str(exc))
            continue
        successful.append(_analysis_payload(analytics_service.analyze(seed)))

    return _respond(
        {
            "successful": successful,
            "failed": failed,
            "totalRequested": len(channels),
            "successCount": len(successful),
            "failureCount": len(failed),
        }
    )


@app.post("/api/find-email")
def api_find_email(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    seed = _seed(payload)
    try:
        lookup = email_finder.find(seed)
    except Exception:
        logger.exception("Email discovery failed for %s", seed.display_name)
        lookup = fallback_email(seed.name, rng)
    return _respond(lookup)


@app.post("/api/similar-channels")
def api_similar_channels(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    seed = _seed(payload)
    channels = find_similar_channels(seed, rng)
    return _respond({"channels": channels, "algorithm": "content-based-filtering", "confidence": 0.85})


@app.post("/api/save-channel")
def api_save_channel(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    seed = _seed(payload)
    result = analytics_service.analyze(seed)
    lookup = email_finder.find(seed)
    saved = database.save_analysis(result, email=lookup)
    return _respond(
        {
            "persisted": saved is not None,
            "channel": saved,
            "analysis": _analysis_payload(result),
            "email": lookup,
        }
    )


@app.get("/api/channels")
def api_channels(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    category: Optional[str] = Query(default=None),
) -> JSONResponse:
    return _respond(database.list_channels(page=page, limit=limit, category=category))


@app.get("/api/channels/{channel_id}")
def api_get_channel(channel_id: str) -> JSONResponse:
    record = database.get_channel(channel_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Channel not found")
    return _respond(record)


@app.post("/api/quality-score")
def api_quality_score(payload: Dict[str, Any] = Body(...)) -> JSONResponse:
    engagement_rate = _parse_optional_float(payload.get("engagementRate"), field="engagementRate")
    fake_followers = _parse_optional_float(
        payload.get("fakeFollowerPercentage"), field="fakeFollowerPercentage"
    )
    growth = _parse_optional_float(payload.get("growthConsistency"), field="growthConsistency")
    score = quality.score(engagement_rate, fake_followers, growth)
    return _respond(
        {
            "qualityScore": score,
            "label": quality.quality_label(score),
            "class": quality.quality_class(score),
        }
    )
