from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd


def is_missing(value) -> bool:
    return value is None or pd.isna(value)


def clamp(value, lo: float, hi: float) -> Optional[float]:
    """Clamp value into [lo, hi]; null or NaN stays null."""
    if is_missing(value):
        return None
    return min(max(float(value), lo), hi)


def mean(values: Iterable) -> Optional[float]:
    """Mean of the non-null entries, or None when there are none."""
    clean = [float(v) for v in values if not is_missing(v)]
    if not clean:
        return None
    return float(np.mean(clean))


def rebase_time(times: Sequence[float]) -> List[float]:
    """Shift timestamps so the first one is zero."""
    if not times:
        return []
    offset = times[0]
    return [t - offset for t in times]


def percentage_change(old: Optional[float], new: Optional[float]) -> Optional[float]:
    if old is None or new is None or old == 0:
        return None
    return (new - old) / old * 100


def ratio_to_percent(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return value * 100


def linear_regression_slope(xs: Sequence[float], ys: Sequence[float]) -> Optional[float]:
    """Ordinary least-squares slope of ys against xs."""
    if len(xs) != len(ys) or len(xs) < 2:
        return None
    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    denominator = float((dx * dx).sum())
    if denominator == 0:
        return None
    return float((dx * (y - y.mean())).sum() / denominator)
