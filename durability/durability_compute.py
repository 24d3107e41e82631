import logging
from typing import Any, Dict, Optional, Sequence, Union

from . import config
from .core import (
    compute_segments,
    durability_score,
    efficiency_decline,
    fatigue_resistance,
    mean_delta,
    power_at_hr_delta,
    power_fade,
    pw_hr_drift,
    rolling5_diff,
    sanitize_streams,
    summarize_quartile,
    watts_per_beat_trend,
    zone_classifier,
)
from .models import DurabilityMetrics, EfficiencyFactor, MetricsError, SampleStream
from .utils import is_missing, ratio_to_percent, rebase_time

logger = logging.getLogger(__name__)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
if not logger.handlers:
    logger.addHandler(handler)

INSUFFICIENT_DATA = "Insufficient data"
UNABLE_TO_SPLIT = "Unable to split segments"


def calculate_metrics(stream: SampleStream,
                      heart_rate_max: Optional[float] = None,
                      heart_rate_rest: Optional[float] = None) -> Union[DurabilityMetrics, MetricsError]:
    """
    Run the durability pipeline over a sanitized stream.

    Returns a MetricsError sentinel when there are fewer than MIN_SAMPLES
    time/watts/heartrate samples or the ride cannot be segmented. Any other
    missing input only nulls the affected field.
    """
    if min(len(stream.time), len(stream.watts), len(stream.heartrate)) < config.MIN_SAMPLES:
        logger.warning(f"Insufficient samples for durability metrics: {stream.lengths()}")
        return MetricsError(INSUFFICIENT_DATA)

    segments = compute_segments(stream)
    if segments is None:
        logger.warning("Unable to split ride into segments")
        return MetricsError(UNABLE_TO_SPLIT)

    time, watts, heartrate = stream.time, stream.watts, stream.heartrate
    first, second = segments.first_half, segments.second_half

    early_watts, late_watts = first.slice(watts), second.slice(watts)
    early_hr, late_hr = first.slice(heartrate), second.slice(heartrate)
    early_time, late_time = rebase_time(first.slice(time)), rebase_time(second.slice(time))

    logger.info("Computing drift and rolling power")
    drift = pw_hr_drift(early_watts, early_hr, late_watts, late_hr)
    rolling_delta = rolling5_diff(early_watts, early_time, late_watts, late_time)
    power_150 = power_at_hr_delta(early_watts, early_hr, late_watts, late_hr)

    logger.info("Classifying Z2 share early vs late")
    classify = zone_classifier(heart_rate_max, heart_rate_rest)
    early_z2 = classify(rebase_time(segments.early.slice(time)), segments.early.slice(heartrate))
    late_z2 = classify(rebase_time(segments.late.slice(time)), segments.late.slice(heartrate))

    cadence_drop = mean_delta(segments.early.slice(stream.cadence), segments.late.slice(stream.cadence))
    hr_creep = mean_delta(early_hr, late_hr)

    logger.info("Summarizing quartiles")
    quartiles = tuple(summarize_quartile(stream, segment) for segment in segments.quartiles)
    fade = power_fade(quartiles[0], quartiles[3])
    efficiency = EfficiencyFactor(quartiles[0].efficiency_factor, quartiles[3].efficiency_factor)
    decline = efficiency_decline(efficiency)

    trend = watts_per_beat_trend(watts, heartrate, time)
    curve = fatigue_resistance(watts, time)
    score = durability_score(fade, drift, decline, trend.slope_percent_per_hour)
    logger.info(f"Durability score: {score}")

    return DurabilityMetrics(
        segments=segments,
        pw_hr_drift=drift,
        rolling5_diff=rolling_delta,
        power_150_delta=power_150,
        z2_early=ratio_to_percent(early_z2.ratio),
        z2_late=ratio_to_percent(late_z2.ratio),
        cadence_drop=cadence_drop,
        hr_creep=hr_creep,
        quartiles=quartiles,
        power_fade=fade,
        efficiency_decline=decline,
        watts_per_beat_trend=trend,
        fatigue_resistance=curve,
        durability_score=score,
        efficiency_factor=efficiency,
    )


def process_activity_stream(stream_data: Dict[str, Any],
                            heart_rate_max: Optional[float] = None,
                            heart_rate_rest: Optional[float] = None) -> Union[DurabilityMetrics, MetricsError]:
    """Sanitize a raw stream payload and compute its durability metrics."""
    logger.info("Processing activity stream")
    stream = sanitize_streams(stream_data)
    return calculate_metrics(stream, heart_rate_max=heart_rate_max, heart_rate_rest=heart_rate_rest)


def compute_hrr_zones(heart_rate_max: Optional[float], heart_rate_rest: Optional[float],
                      heartrate: Sequence) -> Optional[Dict[str, float]]:
    """Share of HR samples (not time) inside the 60-70% HRR band."""
    if not heart_rate_max or not heart_rate_rest or not heartrate:
        return None
    reserve = heart_rate_max - heart_rate_rest
    if reserve <= 0:
        return None

    low, high = config.Z2_HRR_BAND
    in_z2 = [
        value for value in heartrate
        if not is_missing(value) and low <= (value - heart_rate_rest) / reserve * 100 <= high
    ]
    return {"z2HrrShare": len(in_z2) / len(heartrate) * 100}


def summarize_cadence_fatigue(cadence_drop: Optional[float], hr_creep: Optional[float]) -> str:
    if cadence_drop is None and hr_creep is None:
        return "Cadence fatigue not detected."
    parts = []
    if cadence_drop is not None:
        parts.append(f"Cadence change: {cadence_drop:.1f} rpm")
    if hr_creep is not None:
        parts.append(f"HR creep: {hr_creep:.1f} bpm")
    if (cadence_drop is not None and cadence_drop < config.CADENCE_DROP_WARN
            and hr_creep is not None and hr_creep > config.HR_CREEP_WARN):
        parts.append("Cadence drop with HR creep suggests accumulating fatigue.")
    return " | ".join(parts)
