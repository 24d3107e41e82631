"""
Renderer profiles.

A profile turns a DurabilityMetrics record (plus optional baseline and ride
context) into the text block appended to an activity description. Callers
pick one by key; unknown keys fall back to DEFAULT_PROFILE.
"""
import re
from typing import Dict, List, Optional

from .base import Profile, format_number
from .cola_calories import ColaCaloriesProfile
from .durable import DurableProfile

PROFILES: Dict[str, Profile] = {
    profile.key: profile for profile in (DurableProfile(), ColaCaloriesProfile())
}
DEFAULT_PROFILE = DurableProfile.key

LEGACY_MARKERS = ['<!-- durability-post v0.1 -->', '<!-- durability-post -->']


def list_profiles() -> List[Dict[str, str]]:
    return [profile.summary() for profile in PROFILES.values()]


def resolve_profile_key(value: Optional[str]) -> str:
    """Map a key or label (case-insensitive) to a known profile key."""
    if not value:
        return DEFAULT_PROFILE
    normalized = str(value).strip().lower()
    if normalized in PROFILES:
        return normalized
    for profile in PROFILES.values():
        if profile.label.lower() == normalized:
            return profile.key
    return DEFAULT_PROFILE


def is_valid_profile_key(value: Optional[str]) -> bool:
    if not value:
        return False
    return str(value).strip().lower() in PROFILES


def get_renderer(value: Optional[str]) -> Profile:
    return PROFILES[resolve_profile_key(value)]


def get_all_markers() -> List[str]:
    return list(dict.fromkeys(profile.marker for profile in PROFILES.values() if profile.marker))


def strip_existing_block(description: Optional[str]) -> str:
    """Drop a previously rendered block (marker to end of text) from a description."""
    if not description:
        return ''
    text = description
    for marker in get_all_markers() + LEGACY_MARKERS:
        text = re.sub(re.escape(marker) + r'[\s\S]*$', '', text).strip()
    return text.strip()


__all__ = [
    "Profile",
    "PROFILES",
    "DEFAULT_PROFILE",
    "format_number",
    "list_profiles",
    "resolve_profile_key",
    "is_valid_profile_key",
    "get_renderer",
    "get_all_markers",
    "strip_existing_block",
]
