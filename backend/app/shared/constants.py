"""
Unified constants for activity and challenge categories.

This module provides a single source of truth for category naming
across the entire application.
"""

from enum import Enum


class ActivityCategory(str, Enum):
    """
    Kinds of self-logged activities.

    Used in:
    - Activity rows (category)
    - XP rewards per logged action
    """
    EXERCISE = "exercise"
    SLEEP = "sleep"
    BIOHACKING = "biohacking"


class ChallengeCategory(str, Enum):
    """Challenge categories a user can create."""
    CARDIO = "cardio"
    SLEEP = "sleep"
    STRENGTH = "strength"
    HYDRATION = "hydration"
    MEDITATION = "meditation"


class StravaActivityType(str, Enum):
    """
    Activity types from Strava API.

    These are Strava's naming conventions, not ours.
    Only the cardio-like ones we verify challenges against are listed.
    """
    RUN = "Run"
    RIDE = "Ride"
    WALK = "Walk"
    HIKE = "Hike"
    SWIM = "Swim"
    ROWING = "Rowing"
    ELLIPTICAL = "Elliptical"
    STAIR_STEPPER = "StairStepper"
    CROSSTRAINING = "Crosstraining"
    VIRTUAL_RIDE = "VirtualRide"
    VIRTUAL_RUN = "VirtualRun"
    EBIKE_RIDE = "EBikeRide"


# Strava types that may contribute to challenge verification
CARDIO_ACTIVITY_TYPES: frozenset[str] = frozenset(t.value for t in StravaActivityType)


# Cosmetic every user falls back to when nothing else is active
DEFAULT_COSMETIC = "default"


def is_cardio_activity(activity_type: str) -> bool:
    """Check if a Strava activity type counts as cardio."""
    return activity_type in CARDIO_ACTIVITY_TYPES
