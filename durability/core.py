import logging
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from . import config
from .models import (
    EfficiencyFactor,
    FatigueResistanceEntry,
    QuartileSummary,
    SampleStream,
    Segment,
    SegmentPlan,
    WattsPerBeatTrend,
    Window,
    ZoneShare,
)
from .utils import clamp, is_missing, linear_regression_slope, mean, percentage_change, rebase_time

# Configure logging
logger = logging.getLogger(__name__)
handler = logging.StreamHandler()
formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
handler.setFormatter(formatter)
if not logger.handlers:
    logger.addHandler(handler)


def _extract_stream_list(streams: Dict[str, Any], key: str) -> List:
    """
    Handles different shapes of Strava stream responses:
    - streams[key] might be {'data': [...]} (common with key_by_type=true)
    - or streams[key] might be a plain list already
    - or key might be absent -> return []
    """
    val = streams.get(key)
    if isinstance(val, dict):
        val = val.get('data')
    if isinstance(val, (list, tuple, pd.Series, np.ndarray)):
        return list(val)
    # Anything else is not a stream
    return []


def _scalars(values: List) -> List:
    # nested entries (e.g. latlng pairs) are not samples
    return [v if np.isscalar(v) else None for v in values]


def _coerce_channel(values: List, lo: Optional[float] = None, hi: Optional[float] = None) -> Tuple:
    if not values:
        return ()
    series = pd.to_numeric(pd.Series(_scalars(values), dtype=object), errors='coerce').astype(float)
    if lo is not None:
        series = series.clip(lo, hi)
    return tuple(None if pd.isna(v) else float(v) for v in series)


def _coerce_time(values: List) -> Tuple[float, ...]:
    if not values:
        return ()
    series = pd.to_numeric(pd.Series(_scalars(values), dtype=object), errors='coerce').astype(float)
    if series.isna().all():
        logger.warning("Time channel has no numeric samples; treating it as empty")
        return ()
    # fill sensor gaps so every sample keeps a timestamp
    series = series.interpolate(method='linear', limit_direction='both')
    return tuple(float(v) for v in series)


def sanitize_streams(stream_data: Dict[str, Any]) -> SampleStream:
    """
    Normalize a raw stream payload into a SampleStream.

    watts are clamped to [0, 2000] and heartrate to [40, 220]; non-numeric
    entries become None. Missing channels come back empty. Never raises.
    """
    logger.info("Sanitizing stream arrays")
    if not isinstance(stream_data, dict):
        logger.warning(f"Stream payload is {type(stream_data).__name__}, not a dict; using empty streams")
        stream_data = {}

    raw = {canon: _extract_stream_list(stream_data, key) for key, canon in config.CHANNELS.items()}
    stream = SampleStream(
        time=_coerce_time(raw['time']),
        watts=_coerce_channel(raw['watts'], config.WATTS_MIN, config.WATTS_MAX),
        heartrate=_coerce_channel(raw['heartrate'], config.HEARTRATE_MIN, config.HEARTRATE_MAX),
        distance=_coerce_channel(raw['distance']),
        altitude=_coerce_channel(raw['altitude']),
        velocity=_coerce_channel(raw['velocity']),
        cadence=_coerce_channel(raw['cadence']),
    )
    logger.debug(f"Sanitized stream lengths per channel: {stream.lengths()}")
    return stream


# ---------------------------------------------------------------------------
# Segment planning
# ---------------------------------------------------------------------------

def quartile_segments(times: Sequence[float]) -> Tuple[Segment, ...]:
    last = len(times) - 1
    duration = times[last]
    boundaries = [duration * fraction for fraction in config.QUARTILE_FRACTIONS]

    segments = []
    boundary_idx = 0
    current_start = 0
    for idx, t in enumerate(times):
        if boundary_idx < len(boundaries) and t >= boundaries[boundary_idx]:
            segments.append(Segment(current_start, idx))
            current_start = idx
            boundary_idx += 1
    segments.append(Segment(current_start, last))

    while len(segments) < 4:
        segments.append(Segment(last, last))
    return tuple(segments[:4])


def compute_segments(stream: SampleStream) -> Optional[SegmentPlan]:
    """Split the ride into time quartiles; None when there is no time channel."""
    if not stream.time:
        logger.warning("compute_segments called with empty time channel")
        return None

    quartiles = quartile_segments(stream.time)
    plan = SegmentPlan(
        quartiles=quartiles,
        first_half=Segment(quartiles[0].start, quartiles[1].end),
        second_half=Segment(quartiles[2].start, quartiles[3].end),
    )
    logger.debug(f"Segment plan: {plan.to_dict()}")
    return plan


# ---------------------------------------------------------------------------
# Windowed statistics
# ---------------------------------------------------------------------------

def _power(value) -> float:
    return 0.0 if is_missing(value) else float(value)


def rolling_average(values: Sequence, times: Sequence[float], window_seconds: float) -> List[Window]:
    """
    Sliding time-window means, one per right edge.

    A window is emitted once its span reaches window_seconds - 1, so windows
    just short of the nominal width still count.
    """
    windows = []
    start = 0
    total = 0.0
    for end in range(min(len(values), len(times))):
        total += _power(values[end])
        while times[end] - times[start] > window_seconds and start < end:
            total -= _power(values[start])
            start += 1
        if times[end] - times[start] >= window_seconds - 1:
            windows.append(Window(start, end, total / (end - start + 1)))
    return windows


def best_rolling_average(values: Sequence, times: Sequence[float], window_seconds: float) -> float:
    """Highest rolling mean, 0 when no window qualifies."""
    return max((w.average for w in rolling_average(values, times, window_seconds)), default=0.0)


def best_average_power(values: Sequence, times: Sequence[float], window_seconds: float,
                       start_time: float) -> Optional[float]:
    """Best rolling mean over windows starting at or after start_time."""
    if len(values) < 2 or len(times) < 2:
        return None
    start_idx = next((idx for idx, t in enumerate(times) if t >= start_time), None)
    if start_idx is None:
        return None

    best = None
    total = 0.0
    start = start_idx
    for end in range(start_idx, min(len(values), len(times))):
        total += _power(values[end])
        while times[end] - times[start] > window_seconds and start < end:
            total -= _power(values[start])
            start += 1
        if times[end] - times[start] >= window_seconds - 1:
            average = total / (end - start + 1)
            if best is None or average > best:
                best = average
    return best


def normalized_power(values: Sequence, times: Sequence[float]) -> Optional[float]:
    if len(values) < config.NP_MIN_SAMPLES:
        return None
    windows = rolling_average(values, rebase_time(times), config.NP_WINDOW_SEC)
    if not windows:
        return None
    averages = np.array([w.average for w in windows])
    return float(np.mean(averages ** 4) ** 0.25)


# ---------------------------------------------------------------------------
# Drift & efficiency
# ---------------------------------------------------------------------------

def _power_to_hr(watts: Sequence, heartrate: Sequence) -> Optional[float]:
    avg_power = mean(watts)
    avg_hr = mean(heartrate)
    if avg_power is None or avg_hr is None or avg_hr <= 0:
        return None
    return avg_power / avg_hr


def pw_hr_drift(early_watts: Sequence, early_hr: Sequence,
                late_watts: Sequence, late_hr: Sequence) -> Optional[float]:
    """Percent change of the power:HR ratio from first half to second half."""
    return percentage_change(_power_to_hr(early_watts, early_hr), _power_to_hr(late_watts, late_hr))


def power_at_hr(watts: Sequence, heartrate: Sequence,
                center: float = config.POWER_AT_HR_CENTER,
                tolerance: float = config.POWER_AT_HR_TOLERANCE) -> Optional[float]:
    low, high = center - tolerance, center + tolerance
    return mean(
        power for hr, power in zip(heartrate, watts)
        if not is_missing(hr) and low <= hr <= high
    )


def power_at_hr_delta(early_watts: Sequence, early_hr: Sequence,
                      late_watts: Sequence, late_hr: Sequence,
                      center: float = config.POWER_AT_HR_CENTER,
                      tolerance: float = config.POWER_AT_HR_TOLERANCE) -> Optional[float]:
    early = power_at_hr(early_watts, early_hr, center, tolerance)
    late = power_at_hr(late_watts, late_hr, center, tolerance)
    if early is None or late is None:
        return None
    return late - early


def rolling5_diff(early_watts: Sequence, early_time: Sequence[float],
                  late_watts: Sequence, late_time: Sequence[float]) -> float:
    early_best = best_rolling_average(early_watts, early_time, config.ROLLING_BEST_SEC)
    late_best = best_rolling_average(late_watts, late_time, config.ROLLING_BEST_SEC)
    return late_best - early_best


def mean_delta(early: Sequence, late: Sequence) -> Optional[float]:
    """Late mean minus early mean (cadence drop, HR creep)."""
    early_mean = mean(early)
    late_mean = mean(late)
    if early_mean is None or late_mean is None:
        return None
    return late_mean - early_mean


def summarize_quartile(stream: SampleStream, segment: Segment) -> QuartileSummary:
    watts = segment.slice(stream.watts)
    avg_power = mean(watts)
    np_value = normalized_power(watts, segment.slice(stream.time))
    avg_hr = mean(segment.slice(stream.heartrate))

    efficiency_factor = None
    if avg_hr:
        numerator = np_value if np_value is not None else (avg_power if avg_power is not None else 0.0)
        efficiency_factor = numerator / avg_hr
    return QuartileSummary(avg_power, np_value, avg_hr, efficiency_factor)


def power_fade(first: QuartileSummary, last: QuartileSummary) -> Optional[float]:
    """Percent drop from Q1 to Q4 average power."""
    if first.avg_power is None or last.avg_power is None or first.avg_power == 0:
        return None
    return (first.avg_power - last.avg_power) / first.avg_power * 100


def efficiency_decline(efficiency: EfficiencyFactor) -> Optional[float]:
    if efficiency.early is None or efficiency.late is None or efficiency.early == 0:
        return None
    return (efficiency.early - efficiency.late) / efficiency.early * 100


def watts_per_beat_trend(watts: Sequence, heartrate: Sequence, times: Sequence[float]) -> WattsPerBeatTrend:
    ratios = []
    ratio_times = []
    for idx in range(min(len(watts), len(heartrate), len(times))):
        hr = heartrate[idx]
        power = watts[idx]
        if is_missing(hr) or hr <= 0 or is_missing(power):
            continue
        ratios.append(power / hr)
        ratio_times.append(times[idx])

    if not ratios:
        return WattsPerBeatTrend()

    slope = linear_regression_slope(rebase_time(ratio_times), ratios)
    slope_per_hour = slope * 3600 if slope is not None else None
    mean_ratio = mean(ratios)
    slope_percent = None
    if slope_per_hour is not None and mean_ratio:
        slope_percent = slope_per_hour / mean_ratio * 100
    return WattsPerBeatTrend(
        slope_per_hour=slope_per_hour,
        slope_percent_per_hour=slope_percent,
        start=ratios[0],
        end=ratios[-1],
        mean=mean_ratio,
    )


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------

def time_in_range(times: Sequence[float], values: Sequence, low: float, high: float) -> ZoneShare:
    """Time-weighted share of samples inside [low, high]; the last sample carries no duration."""
    if not values or not times:
        return ZoneShare(0.0, 0.0)
    seconds = 0.0
    total = 0.0
    for idx in range(min(len(values), len(times)) - 1):
        duration = times[idx + 1] - times[idx]
        total += duration
        value = values[idx]
        if not is_missing(value) and low <= value <= high:
            seconds += duration
    ratio = seconds / total if total else 0.0
    return ZoneShare(seconds, ratio)


def hrr_time_in_range(times: Sequence[float], values: Sequence, heart_rate_rest: float,
                      heart_rate_max: float, min_percent: float, max_percent: float) -> ZoneShare:
    if not values or not times:
        return ZoneShare(0.0, 0.0)
    reserve = heart_rate_max - heart_rate_rest
    if reserve <= 0:
        logger.info(f"Heart rate reserve is {reserve}; zone share degrades to zero")
        return time_in_range(times, values, 0.0, 0.0)

    seconds = 0.0
    total = 0.0
    for idx in range(min(len(values), len(times)) - 1):
        duration = times[idx + 1] - times[idx]
        total += duration
        value = values[idx]
        if is_missing(value):
            continue
        hrr = (value - heart_rate_rest) / reserve * 100
        if min_percent <= hrr <= max_percent:
            seconds += duration
    ratio = seconds / total if total else 0.0
    return ZoneShare(seconds, ratio)


def zone_classifier(heart_rate_max: Optional[float] = None,
                    heart_rate_rest: Optional[float] = None) -> Callable[[Sequence, Sequence], ZoneShare]:
    """Pick the Z2 classifier: HRR band when both HR anchors are known, fixed bpm band otherwise."""
    if heart_rate_max and heart_rate_rest:
        low, high = config.Z2_HRR_BAND
        return partial(hrr_time_in_range, heart_rate_rest=heart_rate_rest, heart_rate_max=heart_rate_max,
                       min_percent=low, max_percent=high)
    low, high = config.Z2_FIXED_BAND
    return partial(time_in_range, low=low, high=high)


# ---------------------------------------------------------------------------
# Fatigue resistance & score
# ---------------------------------------------------------------------------

def fatigue_resistance(watts: Sequence, times: Sequence[float],
                       offsets: Sequence[int] = config.FATIGUE_OFFSETS_SEC,
                       durations: Sequence[int] = config.FATIGUE_DURATIONS_SEC) -> Tuple[FatigueResistanceEntry, ...]:
    total_duration = times[-1] if times else 0
    shortest = min(durations)
    entries = []
    for offset in offsets:
        if total_duration < offset + shortest:
            continue
        best_by_duration = {}
        for duration in durations:
            if total_duration < offset + duration:
                continue
            best = best_average_power(watts, times, duration, offset)
            if best is not None:
                best_by_duration[duration] = best
        if best_by_duration:
            entries.append(FatigueResistanceEntry(offset, best_by_duration))
        else:
            logger.debug(f"No qualifying fatigue-resistance window at offset {offset}s")
    return tuple(entries)


def _health(penalty: float) -> float:
    return config.SCORE_MAX - clamp(max(penalty, 0), config.SCORE_MIN, config.SCORE_MAX)


def durability_score(power_fade: Optional[float], pw_hr_drift: Optional[float],
                     efficiency_decline: Optional[float],
                     slope_percent_per_hour: Optional[float]) -> Optional[float]:
    """Equal-weight mean of the available health components, or None."""
    components = []
    if power_fade is not None:
        components.append(_health(power_fade))
    if pw_hr_drift is not None:
        components.append(_health(pw_hr_drift))
    if efficiency_decline is not None:
        components.append(_health(efficiency_decline))
    if slope_percent_per_hour is not None:
        # only a falling W/HR slope costs points
        components.append(_health(-slope_percent_per_hour))

    if not components:
        return None
    return clamp(sum(components) / len(components), config.SCORE_MIN, config.SCORE_MAX)
