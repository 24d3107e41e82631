"""
Pytest configuration and fixtures

Synthetic ride streams shaped like the activity stream payload
({channel: {"data": [...]}}) used across the engine and API tests.
"""
import os
import sys

import pytest

# Add the project root to the path so the top-level modules import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def build_payload(times, watts=None, heartrate=None, cadence=None):
    payload = {"time": {"data": list(times)}}
    if watts is not None:
        payload["watts"] = {"data": list(watts)}
    if heartrate is not None:
        payload["heartrate"] = {"data": list(heartrate)}
    if cadence is not None:
        payload["cadence"] = {"data": list(cadence)}
    return payload


@pytest.fixture
def payload_factory():
    return build_payload


@pytest.fixture
def constant_ride():
    """20 samples, 50 s apart, steady 200 W at 130 bpm."""
    times = [i * 50 for i in range(20)]
    return build_payload(times, [200] * 20, [130] * 20, [90] * 20)


@pytest.fixture
def fading_ride():
    """One hour at 1 Hz, power ramping 300 W -> 100 W, heart rate flat at 140."""
    times = list(range(3601))
    watts = [300 - 200 * t / 3600 for t in times]
    return build_payload(times, watts, [140] * len(times))


@pytest.fixture
def two_hour_ride():
    times = list(range(7201))
    return build_payload(times, [200] * len(times), [135] * len(times))
