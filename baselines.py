# baselines.py
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Body, HTTPException

import config
from durability import baseline_window_start, compute_durability_baseline

logger = logging.getLogger(__name__)
logger.setLevel(config.LOG_LEVEL)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s"))
if not logger.handlers:
    logger.addHandler(handler)

router = APIRouter(tags=["baseline"])


@router.post("/baseline")
def baseline(rows: List[dict] = Body(...), since: Optional[datetime] = None, window_days: Optional[int] = None):
    """
    Average historical metric rows into a comparison baseline.

    Rows are keyed by the persisted column names (pw_hr_drift, rolling5_diff, ...).
    `since` bounds the window explicitly; otherwise `window_days` (default
    BASELINE_WINDOW_DAYS) counts back from now.
    """
    if window_days is not None and window_days <= 0:
        raise HTTPException(status_code=400, detail="window_days must be positive")
    boundary = since or baseline_window_start(days=window_days or config.BASELINE_WINDOW_DAYS)
    logger.info("Computing baseline over %d rows since %s", len(rows), boundary)

    result = compute_durability_baseline(rows, since=boundary)
    return {"baseline": result.to_dict() if result is not None else None}
