"""
Tests for ChallengeTracker.

Progress clamping, completion/streak transitions, daily reset,
XP bookkeeping and compare-and-set conflicts.
"""

import pytest
from unittest.mock import AsyncMock

from app.features.challenges import ChallengeRepository, ChallengeTracker
from app.shared.exceptions import ConflictError, NotFoundError, ValidationError


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def tracker(db):
    return ChallengeTracker(db)


@pytest.fixture
async def challenge(tracker, make_user):
    await make_user("owner-1")
    return await tracker.create_challenge("owner-1", "Run 5 km", "cardio", 5, "km")


# =============================================================================
# Test Progress
# =============================================================================

class TestAddProgress:
    """Tests for add_progress."""

    async def test_partial_progress(self, tracker, challenge):
        result = await tracker.add_progress(challenge.id, 3)

        assert result.challenge.progress == 3
        assert result.challenge.completed is False
        assert result.just_completed is False
        assert result.challenge.streak == 0

    async def test_reaching_target_completes_and_clamps(self, tracker, challenge):
        await tracker.add_progress(challenge.id, 3)
        result = await tracker.add_progress(challenge.id, 3)

        assert result.challenge.progress == 5
        assert result.challenge.completed is True
        assert result.just_completed is True
        assert result.challenge.streak == 1

    async def test_streak_only_bumps_on_transition(self, tracker, challenge):
        await tracker.add_progress(challenge.id, 5)
        result = await tracker.add_progress(challenge.id, 2)

        assert result.just_completed is False
        assert result.challenge.completed is True
        assert result.challenge.streak == 1
        assert result.challenge.progress == 5

    async def test_zero_delta_is_noop(self, tracker, challenge):
        result = await tracker.add_progress(challenge.id, 0)
        assert result.challenge.progress == 0
        assert result.just_completed is False

    async def test_negative_delta_rejected(self, tracker, challenge):
        with pytest.raises(ValidationError):
            await tracker.add_progress(challenge.id, -1)

    async def test_unknown_challenge(self, tracker):
        with pytest.raises(NotFoundError):
            await tracker.add_progress("missing", 1)

    async def test_each_write_bumps_version(self, tracker, challenge):
        before = challenge.version
        result = await tracker.add_progress(challenge.id, 1)
        assert result.challenge.version == before + 1


class TestSetProgress:
    """Tests for set_progress."""

    async def test_not_clamped(self, tracker, challenge):
        result = await tracker.set_progress(challenge.id, 7.5)

        assert result.challenge.progress == 7.5
        assert result.challenge.completed is True
        assert result.just_completed is True

    async def test_dropping_below_target_uncompletes(self, tracker, challenge):
        await tracker.set_progress(challenge.id, 5)
        result = await tracker.set_progress(challenge.id, 2)

        assert result.challenge.completed is False
        assert result.challenge.streak == 1

    async def test_negative_rejected(self, tracker, challenge):
        with pytest.raises(ValidationError):
            await tracker.set_progress(challenge.id, -0.5)


class TestCompareAndSet:
    """Tests for optimistic concurrency."""

    async def test_stale_version_does_not_write(self, db, tracker, challenge):
        repo = ChallengeRepository(db)
        stale_version = challenge.version

        await tracker.add_progress(challenge.id, 1)
        written = await repo.update_if_version(challenge.id, stale_version, progress=4)

        assert written is False
        fresh = await repo.get_by_id(challenge.id)
        assert fresh.progress == 1

    async def test_conflict_after_max_attempts(self, db, challenge):
        tracker = ChallengeTracker(db, max_attempts=3)
        tracker.challenges.update_if_version = AsyncMock(return_value=False)

        with pytest.raises(ConflictError):
            await tracker.add_progress(challenge.id, 1)

        assert tracker.challenges.update_if_version.await_count == 3

    async def test_retry_succeeds_after_one_conflict(self, db, challenge):
        tracker = ChallengeTracker(db, max_attempts=3)
        real_update = tracker.challenges.update_if_version
        calls = []

        async def flaky(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                return False
            return await real_update(*args, **kwargs)

        tracker.challenges.update_if_version = flaky
        result = await tracker.add_progress(challenge.id, 2)

        assert len(calls) == 2
        assert result.challenge.progress == 2


# =============================================================================
# Test Daily Reset
# =============================================================================

class TestResetDaily:
    """Tests for reset_daily."""

    async def test_reset_keeps_streak(self, tracker, challenge):
        await tracker.add_progress(challenge.id, 5)

        count = await tracker.reset_daily("owner-1")
        fresh = await tracker.get_challenge(challenge.id)

        assert count == 1
        assert fresh.progress == 0
        assert fresh.completed is False
        assert fresh.streak == 1

    async def test_completing_again_after_reset_extends_streak(self, tracker, challenge):
        await tracker.add_progress(challenge.id, 5)
        await tracker.reset_daily("owner-1")
        result = await tracker.add_progress(challenge.id, 5)

        assert result.just_completed is True
        assert result.challenge.streak == 2

    async def test_reset_only_touches_owner(self, tracker, make_user, challenge):
        await make_user("owner-2")
        other = await tracker.create_challenge("owner-2", "Sleep", "sleep", 8, "hours")
        await tracker.add_progress(other.id, 4)

        await tracker.reset_daily("owner-1")

        assert (await tracker.get_challenge(other.id)).progress == 4


# =============================================================================
# Test XP
# =============================================================================

class TestRecordXpGain:
    """Tests for record_xp_gain."""

    async def test_experience_and_stage_written_together(self, tracker, make_user):
        await make_user("xp-user", experience=40)

        user = await tracker.record_xp_gain("xp-user", 25)

        assert user.experience == 65
        assert user.stage == "Spry Snapper"

    async def test_stage_unchanged_below_threshold(self, tracker, make_user):
        await make_user("xp-user")

        user = await tracker.record_xp_gain("xp-user", 20)

        assert user.experience == 20
        assert user.stage == "Batchling Hatchling"

    async def test_unknown_user(self, tracker):
        with pytest.raises(NotFoundError):
            await tracker.record_xp_gain("ghost", 10)

    async def test_negative_gain_rejected(self, tracker, make_user):
        await make_user("xp-user")
        with pytest.raises(ValidationError):
            await tracker.record_xp_gain("xp-user", -5)

    async def test_conflict_after_max_attempts(self, db, make_user):
        await make_user("xp-user")
        tracker = ChallengeTracker(db, max_attempts=2)
        tracker.users.update_if_version = AsyncMock(return_value=False)

        with pytest.raises(ConflictError):
            await tracker.record_xp_gain("xp-user", 10)

    async def test_award_completion_only_on_transition(self, tracker, challenge):
        first = await tracker.add_progress(challenge.id, 5)
        second = await tracker.add_progress(challenge.id, 1)

        xp, user = await tracker.award_completion(first)
        again = await tracker.award_completion(second)

        assert xp == 25
        assert user.experience == 25
        assert again == (0, None)


# =============================================================================
# Test CRUD
# =============================================================================

class TestChallengeCrud:
    """Tests for create / list / delete."""

    async def test_create_requires_owner(self, tracker):
        with pytest.raises(NotFoundError):
            await tracker.create_challenge("nobody", "Run", "cardio", 5, "km")

    async def test_create_rejects_unknown_category(self, tracker, make_user):
        await make_user("owner-1")
        with pytest.raises(ValidationError):
            await tracker.create_challenge("owner-1", "Juggle", "juggling", 5, "balls")

    async def test_create_rejects_non_positive_target(self, tracker, make_user):
        await make_user("owner-1")
        with pytest.raises(ValidationError):
            await tracker.create_challenge("owner-1", "Run", "cardio", 0, "km")

    async def test_list_and_completed(self, tracker, challenge):
        other = await tracker.create_challenge("owner-1", "Meditate", "meditation", 10, "minutes")
        await tracker.add_progress(other.id, 10)

        assert {c.id for c in await tracker.list_for_owner("owner-1")} == {challenge.id, other.id}
        assert [c.id for c in await tracker.list_completed("owner-1")] == [other.id]
        assert [c.id for c in await tracker.list_by_category("owner-1", "cardio")] == [challenge.id]

    async def test_get_by_name(self, tracker, challenge):
        assert (await tracker.get_by_name("owner-1", "Run 5 km")).id == challenge.id
        assert await tracker.get_by_name("owner-1", "Swim") is None

    async def test_delete(self, tracker, challenge):
        await tracker.delete_challenge(challenge.id)
        with pytest.raises(NotFoundError):
            await tracker.get_challenge(challenge.id)
