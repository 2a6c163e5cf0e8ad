"""
Progression rules: experience to evolution stage, XP rewards.

Usage:
    from app.features.progression import stage_for, xp_for

All functions are pure; persistence of XP lives in
app.features.challenges.tracker.ChallengeTracker.record_xp_gain.
"""
from .rules import (
    HATCHLING,
    STAGES,
    STAGE_THRESHOLDS,
    stage_for,
    stage_rank,
    stage_progress,
    xp_for,
    xp_for_challenge_completion,
    xp_for_wellness,
)

__all__ = [
    "HATCHLING",
    "STAGES",
    "STAGE_THRESHOLDS",
    "stage_for",
    "stage_rank",
    "stage_progress",
    "xp_for",
    "xp_for_challenge_completion",
    "xp_for_wellness",
]
