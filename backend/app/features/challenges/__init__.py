"""
Challenge module.

Usage:
    from app.features.challenges import ChallengeTracker

Components:
- Challenge: SQLAlchemy model
- ChallengeRepository: Data access
- ChallengeTracker: Progress, completion/streak transitions, daily reset, XP
"""
from .models import Challenge
from .repository import ChallengeRepository
from .tracker import ChallengeTracker, ProgressResult

__all__ = [
    "Challenge",
    "ChallengeRepository",
    "ChallengeTracker",
    "ProgressResult",
]
