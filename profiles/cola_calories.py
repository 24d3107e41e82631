from typing import Any, Mapping, Optional

from durability.models import Baseline, DurabilityMetrics

from .base import Profile, format_number

COLA_CALORIES = 139            # kcal in a 12oz can
SUGAR_GRAMS_PER_CAN = 39
SUGAR_GRAMS_PER_CUBE = 4


class ColaCaloriesProfile(Profile):
    key = 'cola_calories'
    label = 'Coca-Cola equivalents'
    description = 'Express calories burned as cans of Coca-Cola and sugar cubes.'
    marker = '[DurableRider profile: cola_calories]'

    def render(self, metrics: DurabilityMetrics, baseline: Optional[Baseline] = None,
               context: Optional[Mapping[str, Any]] = None, activity: Optional[Mapping[str, Any]] = None,
               **extra: Any) -> str:
        activity = activity or {}
        calories = activity.get('calories')
        if calories is None:
            calories = activity.get('kilojoules')
        lines = [self.marker, 'Coca-Cola burn report:']

        if calories is None:
            lines.append('• Calories not available for this activity.')
            return '\n'.join(lines)

        calories = float(calories)
        cans = calories / COLA_CALORIES
        cubes = cans * SUGAR_GRAMS_PER_CAN / SUGAR_GRAMS_PER_CUBE
        lines.append(f"• Estimated ride calories: {format_number(calories, ' kcal', digits=0)}")
        lines.append(f"• Coca-Cola cans burned: {format_number(cans)} × 12oz")
        lines.append(f"• Equivalent sugar cubes: {format_number(cubes, ' cubes')}")
        lines.append('')
        lines.append('Fuel idea: swap those cans for real food, like fruit, whole grains and protein.')
        return '\n'.join(lines)
