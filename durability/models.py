"""
Immutable records produced by the durability engine.

Every numeric field that may be unavailable is ``Optional[float]`` and is
``None`` rather than NaN. ``to_dict()`` renders the camelCase shape that the
HTTP layer and the renderers consume.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from . import config


@dataclass(frozen=True)
class SampleStream:
    """Sanitized, index-aligned ride channels."""
    time: Tuple[float, ...] = ()
    watts: Tuple[Optional[float], ...] = ()
    heartrate: Tuple[Optional[float], ...] = ()
    distance: Tuple[Optional[float], ...] = ()
    altitude: Tuple[Optional[float], ...] = ()
    velocity: Tuple[Optional[float], ...] = ()
    cadence: Tuple[Optional[float], ...] = ()

    def lengths(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in config.CHANNELS.values()}


@dataclass(frozen=True)
class Segment:
    """Closed index range ``[start, end]`` into a SampleStream."""
    start: int
    end: int

    def slice(self, values: Sequence) -> list:
        if not values:
            return []
        return list(values[self.start:self.end + 1])

    def to_dict(self) -> list:
        return [self.start, self.end]


@dataclass(frozen=True)
class SegmentPlan:
    quartiles: Tuple[Segment, Segment, Segment, Segment]
    first_half: Segment
    second_half: Segment

    @property
    def early(self) -> Segment:
        return self.quartiles[0]

    @property
    def late(self) -> Segment:
        return self.quartiles[3]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quartiles": [q.to_dict() for q in self.quartiles],
            "firstHalf": self.first_half.to_dict(),
            "secondHalf": self.second_half.to_dict(),
            "early": self.early.to_dict(),
            "late": self.late.to_dict(),
        }


@dataclass(frozen=True)
class Window:
    start: int
    end: int
    average: float


@dataclass(frozen=True)
class ZoneShare:
    seconds: float
    ratio: float


@dataclass(frozen=True)
class QuartileSummary:
    avg_power: Optional[float]
    normalized_power: Optional[float]
    avg_hr: Optional[float]
    efficiency_factor: Optional[float]

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "avgPower": self.avg_power,
            "normalizedPower": self.normalized_power,
            "avgHr": self.avg_hr,
            "efficiencyFactor": self.efficiency_factor,
        }


@dataclass(frozen=True)
class WattsPerBeatTrend:
    slope_per_hour: Optional[float] = None
    slope_percent_per_hour: Optional[float] = None
    start: Optional[float] = None
    end: Optional[float] = None
    mean: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "slopePerHour": self.slope_per_hour,
            "slopePercentPerHour": self.slope_percent_per_hour,
            "start": self.start,
            "end": self.end,
            "mean": self.mean,
        }


@dataclass(frozen=True)
class FatigueResistanceEntry:
    offset_seconds: int
    best_power_by_duration: Mapping[int, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offsetSeconds": self.offset_seconds,
            "bestPowerByDurationSeconds": {
                str(duration): power
                for duration, power in sorted(self.best_power_by_duration.items())
            },
        }


@dataclass(frozen=True)
class EfficiencyFactor:
    early: Optional[float] = None
    late: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {"early": self.early, "late": self.late}


@dataclass(frozen=True)
class MetricsError:
    """Hard-failure sentinel returned instead of a metrics record."""
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.error}


@dataclass(frozen=True)
class DurabilityMetrics:
    segments: SegmentPlan
    pw_hr_drift: Optional[float]
    rolling5_diff: float
    power_150_delta: Optional[float]
    z2_early: Optional[float]
    z2_late: Optional[float]
    cadence_drop: Optional[float]
    hr_creep: Optional[float]
    quartiles: Tuple[QuartileSummary, ...]
    power_fade: Optional[float]
    efficiency_decline: Optional[float]
    watts_per_beat_trend: WattsPerBeatTrend
    fatigue_resistance: Tuple[FatigueResistanceEntry, ...]
    durability_score: Optional[float]
    efficiency_factor: EfficiencyFactor

    error = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segments": self.segments.to_dict(),
            "pwHrDrift": self.pw_hr_drift,
            "rolling5Diff": self.rolling5_diff,
            "power150Delta": self.power_150_delta,
            "z2Early": self.z2_early,
            "z2Late": self.z2_late,
            "cadenceDrop": self.cadence_drop,
            "hrCreep": self.hr_creep,
            "quartiles": [q.to_dict() for q in self.quartiles],
            "powerFade": self.power_fade,
            "efficiencyDecline": self.efficiency_decline,
            "wattsPerBeatTrend": self.watts_per_beat_trend.to_dict(),
            "fatigueResistance": [entry.to_dict() for entry in self.fatigue_resistance],
            "durabilityScore": self.durability_score,
            "efficiencyFactor": self.efficiency_factor.to_dict(),
        }

    def persisted_row(self) -> Dict[str, Optional[float]]:
        """Snake-case subset stored per ride and fed back to the baseline."""
        return {column: getattr(self, column) for column in config.BASELINE_FIELDS}


@dataclass(frozen=True)
class Baseline:
    pw_hr_drift: Optional[float] = None
    rolling5_diff: Optional[float] = None
    power_150_delta: Optional[float] = None
    z2_early: Optional[float] = None
    z2_late: Optional[float] = None
    cadence_drop: Optional[float] = None
    hr_creep: Optional[float] = None

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {key: getattr(self, column) for column, key in config.BASELINE_FIELDS.items()}
