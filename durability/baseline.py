import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from . import config
from .models import Baseline

logger = logging.getLogger(__name__)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
if not logger.handlers:
    logger.addHandler(handler)


def baseline_window_start(now: Optional[datetime] = None, days: int = config.BASELINE_WINDOW_DAYS) -> datetime:
    """Start of the trailing window used to pick historical rows."""
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


def _within_window(rows: pd.DataFrame, since: datetime) -> pd.DataFrame:
    if 'activity_date' not in rows.columns:
        logger.debug("History rows carry no activity_date; window filter skipped")
        return rows
    dates = pd.to_datetime(rows['activity_date'], errors='coerce', utc=True)
    boundary = pd.Timestamp(since)
    boundary = boundary.tz_localize('UTC') if boundary.tzinfo is None else boundary.tz_convert('UTC')
    # undated rows are kept
    return rows[dates.isna() | (dates >= boundary)]


def compute_durability_baseline(rows: Iterable[Mapping[str, Any]],
                                since: Optional[datetime] = None) -> Optional[Baseline]:
    """
    Average historical per-ride rows into a Baseline.

    Rows are keyed by the persisted snake_case column names. Each field is
    the mean of its non-null values; a field nobody reported stays None.
    Returns None when there are no rows (or none inside the window).
    """
    rows = list(rows or [])
    if not rows:
        logger.info("No history rows; baseline unavailable")
        return None

    df = pd.DataFrame.from_records(rows)
    if since is not None:
        df = _within_window(df, since)
        if df.empty:
            logger.info(f"No history rows since {since}; baseline unavailable")
            return None

    averages = {}
    for column in config.BASELINE_FIELDS:
        if column not in df.columns:
            averages[column] = None
            continue
        values = pd.to_numeric(df[column], errors='coerce').dropna()
        averages[column] = float(values.mean()) if len(values) else None

    logger.info(f"Baseline computed over {len(df)} rows")
    return Baseline(**averages)
