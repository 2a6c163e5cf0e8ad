"""
Tests for Strava challenge verification.

Windows, measurement resolution, accumulation and the verifier.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from zoneinfo import ZoneInfo

import pytest

from app.features.strava import (
    ChallengeVerifier,
    ExternalActivity,
    MeasurementKind,
    accumulate,
    resolve_measurement,
    window_start,
)
from app.shared.exceptions import ValidationError


UTC = ZoneInfo("UTC")

# Wednesday afternoon
NOW = datetime(2024, 5, 15, 14, 30, tzinfo=UTC)


def activity(activity_id: int, activity_type: str = "Run", **fields) -> ExternalActivity:
    return ExternalActivity.model_validate({
        "id": activity_id,
        "type": activity_type,
        "start_date": "2024-05-15T07:00:00Z",
        **fields,
    })


# =============================================================================
# Test Windows
# =============================================================================

class TestWindowStart:
    """Tests for window_start."""

    def test_today_is_local_midnight(self):
        assert window_start("today", NOW) == datetime(2024, 5, 15, tzinfo=UTC)

    def test_week_starting_sunday(self):
        assert window_start("week", NOW, week_start_day=6) == datetime(2024, 5, 12, tzinfo=UTC)

    def test_week_starting_monday(self):
        assert window_start("week", NOW, week_start_day=0) == datetime(2024, 5, 13, tzinfo=UTC)

    def test_week_on_start_day_is_today(self):
        sunday = datetime(2024, 5, 12, 9, 0, tzinfo=UTC)
        assert window_start("week", sunday, week_start_day=6) == datetime(2024, 5, 12, tzinfo=UTC)

    def test_month(self):
        assert window_start("month", NOW) == datetime(2024, 5, 1, tzinfo=UTC)

    def test_local_timezone_midnight(self):
        almaty = ZoneInfo("Asia/Almaty")
        now = datetime(2024, 5, 15, 2, 0, tzinfo=almaty)

        start = window_start("today", now)

        assert start == datetime(2024, 5, 15, tzinfo=almaty)
        assert start.tzinfo == almaty

    def test_unknown_timeframe(self):
        with pytest.raises(ValidationError):
            window_start("year", NOW)


# =============================================================================
# Test Measurement
# =============================================================================

class TestResolveMeasurement:
    """Tests for resolve_measurement."""

    @pytest.mark.parametrize("value,expected", [
        ("distance", MeasurementKind.DISTANCE),
        ("time", MeasurementKind.TIME),
        ("calories", MeasurementKind.CALORIES),
        ("cardio", MeasurementKind.DISTANCE),
        ("strength", MeasurementKind.ACTIVITIES),
        ("meditation", MeasurementKind.ACTIVITIES),
    ])
    def test_known(self, value, expected):
        assert resolve_measurement(value) == expected

    def test_unknown(self):
        with pytest.raises(ValidationError):
            resolve_measurement("karaoke")


class TestAccumulate:
    """Tests for accumulate."""

    def test_distance_in_km(self):
        activities = [
            activity(1, "Run", distance=1000),
            activity(2, "Ride", distance=2500),
            activity(3, "Run", distance=0),
        ]

        progress, matched = accumulate(activities, MeasurementKind.DISTANCE)

        assert progress == pytest.approx(3.5)
        assert len(matched) == 3

    def test_non_cardio_types_excluded(self):
        activities = [activity(1, "Run"), activity(2, "Yoga"), activity(3, "Swim")]

        progress, matched = accumulate(activities, MeasurementKind.ACTIVITIES)

        assert progress == 2
        assert [a.id for a in matched] == [1, 3]

    def test_time_in_minutes(self):
        activities = [activity(1, moving_time=1800), activity(2, "Walk", moving_time=600)]

        progress, _ = accumulate(activities, MeasurementKind.TIME)

        assert progress == pytest.approx(40)

    def test_elevation(self):
        activities = [
            activity(1, "Hike", total_elevation_gain=350.5),
            activity(2, total_elevation_gain=20),
        ]

        progress, _ = accumulate(activities, MeasurementKind.ELEVATION)

        assert progress == pytest.approx(370.5)

    def test_activities_without_calories_skipped(self):
        activities = [
            activity(1),
            activity(2, calories=300),
            activity(3, calories=0),
        ]

        progress, matched = accumulate(activities, MeasurementKind.CALORIES)

        assert progress == 300
        assert [a.id for a in matched] == [2]

    def test_empty(self):
        assert accumulate([], MeasurementKind.DISTANCE) == (0.0, [])


# =============================================================================
# Test Verifier
# =============================================================================

class TestChallengeVerifier:
    """Tests for ChallengeVerifier.verify."""

    def make_session(self, activities):
        session = MagicMock()
        session.call = AsyncMock(return_value=activities)
        return session

    async def test_completed(self):
        session = self.make_session([
            activity(1, "Run", distance=1000),
            activity(2, "Ride", distance=2500),
            activity(3, "Run", distance=0),
        ])

        result = await ChallengeVerifier(session, tz="UTC").verify("cardio", 3, "today", now=NOW)

        assert result.completed is True
        assert result.progress == pytest.approx(3.5)
        assert result.measurement == MeasurementKind.DISTANCE
        assert result.window_start == datetime(2024, 5, 15, tzinfo=UTC)
        assert result.window_end == NOW
        session.call.assert_awaited_once_with(
            session.client.get_activities_in_range, result.window_start, NOW
        )

    async def test_not_reached(self):
        session = self.make_session([activity(1, distance=2000)])

        result = await ChallengeVerifier(session, tz="UTC").verify("distance", 5, "week", now=NOW)

        assert result.completed is False
        assert result.progress == pytest.approx(2)

    async def test_target_met_exactly(self):
        session = self.make_session([activity(1), activity(2)])

        result = await ChallengeVerifier(session, tz="UTC").verify("activities", 2, now=NOW)

        assert result.completed is True

    async def test_unknown_type_does_not_fetch(self):
        session = self.make_session([])

        with pytest.raises(ValidationError):
            await ChallengeVerifier(session, tz="UTC").verify("karaoke", 1, now=NOW)

        session.call.assert_not_awaited()

    async def test_fetch_errors_propagate(self):
        from app.features.strava import StravaAuthError

        session = MagicMock()
        session.call = AsyncMock(side_effect=StravaAuthError("reconnect"))

        with pytest.raises(StravaAuthError):
            await ChallengeVerifier(session, tz="UTC").verify("cardio", 1, now=NOW)
