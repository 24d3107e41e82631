# streams.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, HTTPException

import config
from durability import (
    MetricsError,
    baseline_window_start,
    calculate_metrics,
    compute_durability_baseline,
    compute_hrr_zones,
    process_activity_stream,
    sanitize_streams,
    summarize_cadence_fatigue,
)
from profiles import get_renderer, is_valid_profile_key, resolve_profile_key

logger = logging.getLogger(__name__)
logger.setLevel(config.LOG_LEVEL)
handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
handler.setFormatter(formatter)
if not logger.handlers:
    logger.addHandler(handler)

router = APIRouter(prefix="/streams", tags=["streams"])


def _require_metrics(result):
    if isinstance(result, MetricsError):
        logger.warning("Durability metrics unavailable: %s", result.error)
        raise HTTPException(status_code=422, detail=result.error)
    return result


@router.post("/process")
def process_streams(streams: dict = Body(...), heart_rate_max: Optional[float] = None,
                    heart_rate_rest: Optional[float] = None):
    """
    Accept activity streams ({channel: {"data": [...]}}) and return the
    durability metrics record.
    """
    logger.info("process_streams called with channels: %s", sorted(streams.keys()))
    result = process_activity_stream(streams, heart_rate_max=heart_rate_max, heart_rate_rest=heart_rate_rest)
    return _require_metrics(result).to_dict()


@router.post("/report")
def report_streams(
    streams: dict = Body(...),
    history: List[dict] = Body(default=[]),
    context: dict = Body(default={}),
    activity: dict = Body(default={}),
    profile: Optional[str] = None,
    heart_rate_max: Optional[float] = None,
    heart_rate_rest: Optional[float] = None,
    since: Optional[datetime] = None,
    window_days: Optional[int] = None,
):
    """
    Compute metrics, compare them against the history baseline and render the
    description block with the requested profile.

    History rows are windowed the same way as on /baseline.
    """
    if window_days is not None and window_days <= 0:
        raise HTTPException(status_code=400, detail="window_days must be positive")
    requested = profile or config.DEFAULT_PROFILE
    profile_key = resolve_profile_key(requested)
    if not is_valid_profile_key(requested):
        logger.info("Profile %r resolved to %s", requested, profile_key)

    stream = sanitize_streams(streams)
    metrics = _require_metrics(
        calculate_metrics(stream, heart_rate_max=heart_rate_max, heart_rate_rest=heart_rate_rest)
    )
    boundary = since or baseline_window_start(days=window_days or config.BASELINE_WINDOW_DAYS)
    baseline = compute_durability_baseline(history, since=boundary)
    hrr = compute_hrr_zones(heart_rate_max, heart_rate_rest, stream.heartrate)
    cadence_summary = summarize_cadence_fatigue(metrics.cadence_drop, metrics.hr_creep)

    renderer = get_renderer(profile_key)
    text = renderer.render(
        metrics,
        baseline=baseline,
        context=context,
        hrr=hrr,
        cadence_summary=cadence_summary,
        activity=activity,
    )
    logger.info("Rendered report with profile %s (%d chars)", profile_key, len(text))
    return {
        "profile": profile_key,
        "metrics": metrics.to_dict(),
        "row": metrics.persisted_row(),
        "baseline": baseline.to_dict() if baseline is not None else None,
        "hrr": hrr,
        "cadenceSummary": cadence_summary,
        "text": text,
    }
