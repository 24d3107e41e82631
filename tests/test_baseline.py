"""
Tests for the historical baseline aggregator.
"""
from datetime import datetime, timezone

import pytest

from durability import Baseline, baseline_window_start, compute_durability_baseline

ROW = {
    "pw_hr_drift": 4.0,
    "rolling5_diff": -12.0,
    "power_150_delta": -5.0,
    "z2_early": 80.0,
    "z2_late": 60.0,
    "cadence_drop": -3.0,
    "hr_creep": 6.0,
}


class TestBaseline:

    def test_empty_history(self):
        assert compute_durability_baseline([]) is None
        assert compute_durability_baseline(None) is None

    def test_single_row_is_returned_as_is(self):
        baseline = compute_durability_baseline([ROW])
        assert baseline == Baseline(**ROW)

    def test_nulls_do_not_count(self):
        rows = [
            dict(ROW, pw_hr_drift=2.0, hr_creep=None),
            dict(ROW, pw_hr_drift=None, hr_creep=None),
            dict(ROW, pw_hr_drift=6.0, hr_creep=None),
        ]
        baseline = compute_durability_baseline(rows)
        assert baseline.pw_hr_drift == pytest.approx(4.0)
        assert baseline.hr_creep is None
        assert baseline.z2_early == pytest.approx(80.0)

    def test_missing_field_is_none(self):
        baseline = compute_durability_baseline([{"pw_hr_drift": 3}])
        assert baseline.pw_hr_drift == pytest.approx(3)
        assert baseline.cadence_drop is None

    def test_order_does_not_matter(self):
        rows = [dict(ROW, rolling5_diff=value) for value in (-30.0, 10.0, 5.5)]
        forward = compute_durability_baseline(rows)
        backward = compute_durability_baseline(list(reversed(rows)))
        assert forward.rolling5_diff == pytest.approx(backward.rolling5_diff)

    def test_window_excludes_old_rows(self):
        rows = [
            dict(ROW, pw_hr_drift=10.0, activity_date="2024-01-01T08:00:00Z"),
            dict(ROW, pw_hr_drift=2.0, activity_date="2024-03-01T08:00:00Z"),
            dict(ROW, pw_hr_drift=4.0),
        ]
        since = datetime(2024, 2, 1, tzinfo=timezone.utc)
        baseline = compute_durability_baseline(rows, since=since)
        assert baseline.pw_hr_drift == pytest.approx(3.0)

    def test_window_with_no_rows_left(self):
        rows = [dict(ROW, activity_date="2020-01-01")]
        assert compute_durability_baseline(rows, since=datetime(2024, 1, 1)) is None

    def test_to_dict_uses_camel_case(self):
        payload = compute_durability_baseline([ROW]).to_dict()
        assert payload["pwHrDrift"] == 4.0
        assert payload["rolling5Diff"] == -12.0
        assert payload["power150Delta"] == -5.0

    def test_window_start(self):
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert baseline_window_start(now, days=56) == datetime(2024, 1, 5, tzinfo=timezone.utc)
