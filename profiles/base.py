from typing import Any, Dict, Mapping, Optional

from durability.models import Baseline, DurabilityMetrics


def format_number(value: Optional[float], suffix: str = '', digits: int = 1, default: str = 'n/a') -> str:
    if value is None or value != value:
        return default
    return f"{value:.{digits}f}{suffix}"


class Profile:
    """A named way of turning durability metrics into description text."""

    key: str = ''
    label: str = ''
    description: str = ''
    marker: str = ''

    def render(self, metrics: DurabilityMetrics, baseline: Optional[Baseline] = None,
               context: Optional[Mapping[str, Any]] = None, **extra: Any) -> str:
        raise NotImplementedError

    def summary(self) -> Dict[str, str]:
        return {"key": self.key, "label": self.label, "description": self.description}
