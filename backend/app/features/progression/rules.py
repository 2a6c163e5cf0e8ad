"""
XP and Evolution Stage Rules

Maps accumulated experience to a named stage and defines XP rewards.

Stage ladder (inclusive lower bounds):
- 0+   XP: Batchling Hatchling
- 50+  XP: Spry Snapper
- 150+ XP: Shelless Seeker
- 300+ XP: Shadow Shell
- 500+ XP: Tough Turtle Titan

XP Award Rules:
- Exercise logged: 25 XP
- Sleep logged: 20 XP
- Biohacking session logged: 20 XP
- Challenge completed: 15-30 XP depending on category
- Wellness check-in with 8+ hours of sleep: 5 XP bonus
"""

from typing import Dict, Optional

from app.shared.constants import ActivityCategory, ChallengeCategory
from app.shared.exceptions import ValidationError


HATCHLING = "Batchling Hatchling"

# (minimum xp, stage name), ascending
STAGE_THRESHOLDS: list[tuple[int, str]] = [
    (0, HATCHLING),
    (50, "Spry Snapper"),
    (150, "Shelless Seeker"),
    (300, "Shadow Shell"),
    (500, "Tough Turtle Titan"),
]

STAGES: list[str] = [name for _, name in STAGE_THRESHOLDS]

ACTION_XP: Dict[str, int] = {
    ActivityCategory.EXERCISE.value: 25,
    ActivityCategory.SLEEP.value: 20,
    ActivityCategory.BIOHACKING.value: 20,
}

CHALLENGE_COMPLETION_XP: Dict[str, int] = {
    ChallengeCategory.CARDIO.value: 25,
    ChallengeCategory.STRENGTH.value: 30,
    ChallengeCategory.SLEEP.value: 20,
    ChallengeCategory.HYDRATION.value: 15,
    ChallengeCategory.MEDITATION.value: 25,
}
DEFAULT_CHALLENGE_COMPLETION_XP = 20

WELL_RESTED_HOURS = 8
WELL_RESTED_XP = 5


def _value(kind) -> str:
    return kind.value if hasattr(kind, "value") else kind


def stage_for(xp: int) -> str:
    """
    Stage name for an experience total.

    Raises:
        ValidationError: If xp is negative
    """
    if xp < 0:
        raise ValidationError("Experience cannot be negative", field="experience", value=xp)

    stage = HATCHLING
    for threshold, name in STAGE_THRESHOLDS:
        if xp >= threshold:
            stage = name
        else:
            break
    return stage


def stage_rank(stage: str) -> int:
    """0-based position of a stage in the ladder."""
    try:
        return STAGES.index(stage)
    except ValueError:
        raise ValidationError(f"Unknown stage: {stage}", field="stage", value=stage)


def stage_progress(xp: int) -> Dict[str, Optional[object]]:
    """
    Describe where an experience total sits on the ladder.

    Returns:
        {
            'stage': str,
            'stage_rank': int,
            'next_stage': str | None (None at the top),
            'xp_to_next_stage': int (0 at the top),
        }
    """
    stage = stage_for(xp)
    rank = stage_rank(stage)

    if rank + 1 < len(STAGE_THRESHOLDS):
        next_threshold, next_stage = STAGE_THRESHOLDS[rank + 1]
        xp_to_next = next_threshold - xp
    else:
        next_stage = None
        xp_to_next = 0

    return {
        "stage": stage,
        "stage_rank": rank,
        "next_stage": next_stage,
        "xp_to_next_stage": xp_to_next,
    }


def xp_for(action_kind) -> int:
    """
    XP reward for a logged action.

    Args:
        action_kind: ActivityCategory or its string value

    Raises:
        ValidationError: If the action kind has no reward
    """
    kind = _value(action_kind)
    if kind not in ACTION_XP:
        raise ValidationError(f"No XP reward for action: {kind}", field="category", value=kind)
    return ACTION_XP[kind]


def xp_for_challenge_completion(category) -> int:
    """XP awarded when a challenge of this category is completed."""
    return CHALLENGE_COMPLETION_XP.get(_value(category), DEFAULT_CHALLENGE_COMPLETION_XP)


def xp_for_wellness(sleep_hours: float) -> int:
    """Bonus for a wellness check-in; only a full night's sleep earns XP."""
    if sleep_hours < 0:
        raise ValidationError("Sleep hours cannot be negative", field="sleep_hours", value=sleep_hours)
    return WELL_RESTED_XP if sleep_hours >= WELL_RESTED_HOURS else 0
