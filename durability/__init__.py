# Expose the main wrapper and other functions for easy imports
from .durability_compute import (
    calculate_metrics,
    process_activity_stream,
    compute_hrr_zones,
    summarize_cadence_fatigue,
)
from .core import (
    sanitize_streams,
    compute_segments,
    rolling_average,
    best_average_power,
    normalized_power,
    time_in_range,
    hrr_time_in_range,
    fatigue_resistance,
    durability_score,
)
from .baseline import compute_durability_baseline, baseline_window_start
from .models import Baseline, DurabilityMetrics, MetricsError, SampleStream
from .config import *
__all__ = [
    "calculate_metrics",
    "process_activity_stream",
    "compute_hrr_zones",
    "summarize_cadence_fatigue",
    "sanitize_streams",
    "compute_segments",
    "rolling_average",
    "best_average_power",
    "normalized_power",
    "time_in_range",
    "hrr_time_in_range",
    "fatigue_resistance",
    "durability_score",
    "compute_durability_baseline",
    "baseline_window_start",
    "Baseline",
    "DurabilityMetrics",
    "MetricsError",
    "SampleStream",
]
