from typing import Any, List, Mapping, Optional

from durability.models import Baseline, DurabilityMetrics

from .base import Profile, format_number


def format_baseline_comparison(current: Optional[float], baseline: Optional[float],
                               suffix: str = '', digits: int = 1) -> str:
    if current is None:
        return 'n/a'
    value = format_number(current, suffix, digits)
    if baseline is None:
        return value
    return f"{value} ({current - baseline:+.{digits}f}{suffix} vs baseline)"


class DurableProfile(Profile):
    key = 'durable'
    label = 'Durable baseline summary'
    description = 'Detailed durability, cadence, and power fade analysis.'
    marker = '[DurableRider summary v0.1]'

    def render(self, metrics: DurabilityMetrics, baseline: Optional[Baseline] = None,
               context: Optional[Mapping[str, Any]] = None, hrr: Optional[Mapping[str, float]] = None,
               cadence_summary: Optional[str] = None, **extra: Any) -> str:
        baseline = baseline or Baseline()
        score = 'n/a' if metrics.durability_score is None else f"{round(metrics.durability_score)}/100"
        lines = [
            self.marker,
            'Durability snapshot:',
            f"• Durability score: {score}",
            f"• Power fade Q1→Q4: {format_number(metrics.power_fade, '%')}",
            f"• Pw:HR drift (1st vs 2nd half): "
            f"{format_baseline_comparison(metrics.pw_hr_drift, baseline.pw_hr_drift, '%')}",
            f"• Efficiency decline: {format_number(metrics.efficiency_decline, '%')}",
            f"• W/HR slope: {format_number(metrics.watts_per_beat_trend.slope_percent_per_hour, '%/h')}",
            f"• Rolling 5min delta: "
            f"{format_baseline_comparison(metrics.rolling5_diff, baseline.rolling5_diff, ' W', 0)}",
            f"• Power @150 bpm delta: "
            f"{format_baseline_comparison(metrics.power_150_delta, baseline.power_150_delta, ' W', 0)}",
            f"• Z2 share early→late: {format_number(metrics.z2_early, '%')} → {format_number(metrics.z2_late, '%')}",
        ]
        if cadence_summary:
            lines.append(f"• Cadence/HR fatigue: {cadence_summary}")
        if hrr and hrr.get('z2HrrShare') is not None:
            lines.append(f"• HRR-based Z2 share: {format_number(hrr['z2HrrShare'], '%')}")
        lines.append('')

        lines.extend(self._quartile_lines(metrics))
        lines.extend(self._trend_lines(metrics))
        lines.extend(self._fatigue_lines(metrics))
        if context and context.get('indoor') is not None:
            lines.append(f"• Ride context: {self._context_tags(context)}")
        lines.append('')
        return '\n'.join(lines)

    @staticmethod
    def _quartile_lines(metrics: DurabilityMetrics) -> List[str]:
        if not metrics.quartiles:
            return []
        lines = ['Quartile profile (Avg P | NP | HR | EF):']
        for idx, quartile in enumerate(metrics.quartiles, start=1):
            lines.append(
                f"Q{idx}: {format_number(quartile.avg_power, ' W', 0)}"
                f" | NP {format_number(quartile.normalized_power, ' W', 0)}"
                f" | {format_number(quartile.avg_hr, ' bpm', 0)}"
                f" | EF {format_number(quartile.efficiency_factor, digits=2)}"
            )
        lines.append('')
        return lines

    @staticmethod
    def _trend_lines(metrics: DurabilityMetrics) -> List[str]:
        trend = metrics.watts_per_beat_trend
        return [
            f"W/HR trend: {format_number(trend.slope_per_hour, digits=2)} W·bpm⁻¹/h"
            f" ({format_number(trend.start, digits=2)} → {format_number(trend.end, digits=2)})",
            '',
        ]

    @staticmethod
    def _fatigue_lines(metrics: DurabilityMetrics) -> List[str]:
        if not metrics.fatigue_resistance:
            return []
        lines = ['Fatigue resistance (best average power):']
        for entry in metrics.fatigue_resistance:
            parts = [
                f"{round(duration / 60)}' {format_number(power, ' W', 0)}"
                for duration, power in sorted(entry.best_power_by_duration.items())
            ]
            lines.append(f"T+{entry.offset_seconds / 3600:.1f}h → {' | '.join(parts)}")
        lines.append('')
        return lines

    @staticmethod
    def _context_tags(context: Mapping[str, Any]) -> str:
        tags = ['Indoor' if context['indoor'] else 'Outdoor']
        if context.get('temperature'):
            tags.append(f"Temp: {context['temperature']}°C")
        if context.get('altitude') is not None:
            tags.append(f"Altitude gain: {float(context['altitude']):.0f} m")
        return ' | '.join(tags)
