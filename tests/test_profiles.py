"""
Tests for renderer profiles and the profile registry.
"""
from durability import Baseline, process_activity_stream
from profiles import (
    DEFAULT_PROFILE,
    format_number,
    get_all_markers,
    get_renderer,
    is_valid_profile_key,
    list_profiles,
    resolve_profile_key,
    strip_existing_block,
)


class TestRegistry:

    def test_default_profile(self):
        assert DEFAULT_PROFILE == 'durable'
        assert resolve_profile_key(None) == 'durable'

    def test_resolve_by_key_and_label(self):
        assert resolve_profile_key(' COLA_CALORIES ') == 'cola_calories'
        assert resolve_profile_key('Coca-Cola equivalents') == 'cola_calories'
        assert resolve_profile_key('unknown') == 'durable'

    def test_valid_keys(self):
        assert is_valid_profile_key('durable')
        assert not is_valid_profile_key('Durable baseline summary')
        assert not is_valid_profile_key('')

    def test_list_and_markers(self):
        keys = [profile['key'] for profile in list_profiles()]
        assert keys == ['durable', 'cola_calories']
        assert len(get_all_markers()) == 2

    def test_strip_existing_block(self):
        marker = get_renderer('durable').marker
        description = f"Morning ride\n\n{marker}\nDurability snapshot:\n• score"
        assert strip_existing_block(description) == "Morning ride"
        assert strip_existing_block("Just a ride") == "Just a ride"
        assert strip_existing_block(None) == ''


class TestFormatting:

    def test_format_number(self):
        assert format_number(None) == 'n/a'
        assert format_number(12.345, '%') == '12.3%'
        assert format_number(199.6, ' W', 0) == '200 W'


class TestDurableProfile:

    def test_render_constant_ride(self, constant_ride):
        metrics = process_activity_stream(constant_ride)
        text = get_renderer('durable').render(
            metrics,
            baseline=Baseline(pw_hr_drift=2.0),
            context={"indoor": True, "temperature": 21},
            cadence_summary="Cadence change: 0.0 rpm",
        )
        assert text.startswith('[DurableRider summary v0.1]')
        assert '• Durability score: 100/100' in text
        assert 'vs baseline' in text
        assert 'Q4:' in text
        assert "T+0.0h → 5' 200 W | 10' 200 W" in text
        assert '• Ride context: Indoor | Temp: 21°C' in text

    def test_render_without_baseline(self, fading_ride):
        metrics = process_activity_stream(fading_ride)
        text = get_renderer(None).render(metrics)
        assert 'vs baseline' not in text
        assert 'Power @150 bpm delta: n/a' in text


class TestColaCaloriesProfile:

    def test_render_with_calories(self, constant_ride):
        metrics = process_activity_stream(constant_ride)
        text = get_renderer('cola_calories').render(metrics, activity={"calories": 278})
        assert '278 kcal' in text
        assert '2.0 × 12oz' in text

    def test_render_without_calories(self, constant_ride):
        metrics = process_activity_stream(constant_ride)
        text = get_renderer('cola_calories').render(metrics)
        assert 'Calories not available' in text
