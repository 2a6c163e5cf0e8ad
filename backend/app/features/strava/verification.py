"""
Challenge verification against Strava.

Checks whether a user's Strava activities in a time window reach a
challenge target.

Steps:
1. Window: today (local midnight), week (midnight of the last week
   start day) or month (midnight on the 1st), ending now
2. Fetch activities that started in the window
3. Keep cardio-like activity types only
4. Accumulate by measurement kind:
   - distance:   sum of meters, reported in km
   - time:       sum of moving seconds, reported in minutes
   - elevation:  sum of elevation gain (meters)
   - calories:   sum of calories, activities without calories skipped
   - activities: number of matching activities
5. completed = progress >= target
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from app.config import settings
from app.shared.constants import ChallengeCategory, is_cardio_activity
from app.shared.exceptions import ValidationError
from .schemas import ExternalActivity
from .session import StravaSession

logger = logging.getLogger(__name__)


class Timeframe(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class MeasurementKind(str, Enum):
    DISTANCE = "distance"
    TIME = "time"
    ELEVATION = "elevation"
    CALORIES = "calories"
    ACTIVITIES = "activities"


# Only cardio has a real measurement; every other category just counts
# cardio activities. Pass a MeasurementKind to verify() to be explicit.
CATEGORY_MEASUREMENTS: dict[str, MeasurementKind] = {
    ChallengeCategory.CARDIO.value: MeasurementKind.DISTANCE,
    ChallengeCategory.STRENGTH.value: MeasurementKind.ACTIVITIES,
    ChallengeCategory.SLEEP.value: MeasurementKind.ACTIVITIES,
    ChallengeCategory.HYDRATION.value: MeasurementKind.ACTIVITIES,
    ChallengeCategory.MEDITATION.value: MeasurementKind.ACTIVITIES,
}

# Contribution of one activity, None = activity doesn't count
_CONTRIBUTIONS: dict[MeasurementKind, Callable[[ExternalActivity], Optional[float]]] = {
    MeasurementKind.DISTANCE: lambda a: a.distance / 1000,
    MeasurementKind.TIME: lambda a: a.moving_time / 60,
    MeasurementKind.ELEVATION: lambda a: a.elevation_gain,
    MeasurementKind.CALORIES: lambda a: a.calories or None,
    MeasurementKind.ACTIVITIES: lambda a: 1,
}


@dataclass
class VerificationResult:
    completed: bool
    progress: float
    measurement: MeasurementKind
    window_start: datetime
    window_end: datetime
    activities: list[ExternalActivity] = field(default_factory=list)


def resolve_measurement(challenge_type: str) -> MeasurementKind:
    """
    Measurement kind for a challenge type.

    Accepts either a measurement kind ("distance", ...) or a challenge
    category ("cardio", ...).

    Raises:
        ValidationError: If the value is neither
    """
    value = challenge_type.value if isinstance(challenge_type, Enum) else challenge_type
    try:
        return MeasurementKind(value)
    except ValueError:
        pass
    if value in CATEGORY_MEASUREMENTS:
        return CATEGORY_MEASUREMENTS[value]
    raise ValidationError(f"Unknown challenge type: {value}", field="challenge_type", value=value)


def window_start(
    timeframe: Timeframe | str,
    now: datetime,
    week_start_day: Optional[int] = None
) -> datetime:
    """
    Start of the verification window containing ``now``.

    Args:
        timeframe: today / week / month
        now: Timezone-aware current time, in the zone whose midnight counts
        week_start_day: Python weekday the week starts on (Monday=0)

    Raises:
        ValidationError: If timeframe is unknown
    """
    try:
        timeframe = Timeframe(timeframe)
    except ValueError:
        raise ValidationError(f"Unknown timeframe: {timeframe}", field="timeframe", value=timeframe)

    if week_start_day is None:
        week_start_day = settings.week_start_day

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    if timeframe == Timeframe.TODAY:
        return midnight
    if timeframe == Timeframe.WEEK:
        days_back = (now.weekday() - week_start_day) % 7
        return midnight - timedelta(days=days_back)
    return midnight.replace(day=1)


def accumulate(
    activities: list[ExternalActivity],
    measurement: MeasurementKind
) -> tuple[float, list[ExternalActivity]]:
    """
    Sum the contribution of every cardio activity.

    Returns:
        (progress, contributing activities in input order)
    """
    contribution = _CONTRIBUTIONS[measurement]
    progress = 0.0
    matched: list[ExternalActivity] = []

    for activity in activities:
        if not is_cardio_activity(activity.activity_type):
            continue
        value = contribution(activity)
        if value is None:
            continue
        progress += value
        matched.append(activity)

    return progress, matched


class ChallengeVerifier:
    """
    Verifies challenge completion from a user's Strava activities.

    Usage:
        verifier = ChallengeVerifier(session)
        result = await verifier.verify("cardio", target=5, timeframe="week")
    """

    def __init__(self, session: StravaSession, tz: Optional[str] = None):
        self.session = session
        self.tz = ZoneInfo(tz or settings.timezone)

    async def verify(
        self,
        challenge_type: str,
        target: float,
        timeframe: Timeframe | str = Timeframe.TODAY,
        now: Optional[datetime] = None
    ) -> VerificationResult:
        """
        Compare Strava activity in the window against ``target``.

        Fetch errors propagate unchanged (after the session's single
        refresh-and-retry on 401).
        """
        measurement = resolve_measurement(challenge_type)
        now = now.astimezone(self.tz) if now else datetime.now(self.tz)
        start = window_start(timeframe, now)

        activities = await self.session.call(
            self.session.client.get_activities_in_range, start, now
        )
        progress, matched = accumulate(activities, measurement)
        completed = progress >= target

        logger.info(
            f"Verified {measurement.value} challenge ({Timeframe(timeframe).value}): "
            f"{progress:.2f}/{target} from {len(matched)} of {len(activities)} activities"
        )

        return VerificationResult(
            completed=completed,
            progress=progress,
            measurement=measurement,
            window_start=start,
            window_end=now,
            activities=matched,
        )
