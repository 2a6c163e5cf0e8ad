"""
Tests for WellnessService.

Check-ins are stored; eight hours of sleep earns the bonus.
"""

import pytest

from app.features.wellness import WellnessService
from app.shared.exceptions import NotFoundError, ValidationError


@pytest.fixture
def service(db):
    return WellnessService(db)


@pytest.fixture
async def owner(make_user):
    return await make_user("owner-1")


class TestCheckIn:
    """Tests for check_in."""

    async def test_full_night_earns_bonus(self, service, owner):
        result = await service.check_in("owner-1", 8, mood="rested")

        assert result.entry.sleep_hours == 8
        assert result.entry.mood == "rested"
        assert result.xp_awarded == 5
        assert result.user.experience == 5

    async def test_short_night_is_stored_without_xp(self, service, owner):
        result = await service.check_in("owner-1", 6.5, mood="grumpy")

        assert result.xp_awarded == 0
        assert result.user.experience == 0
        assert [e.mood for e in await service.list_for_owner("owner-1")] == ["grumpy"]

    async def test_bonus_can_evolve_stage(self, service, make_user):
        await make_user("owner-2", experience=47)

        result = await service.check_in("owner-2", 9)

        assert result.user.experience == 52
        assert result.user.stage == "Spry Snapper"

    async def test_mood_optional(self, service, owner):
        result = await service.check_in("owner-1", 7)
        assert result.entry.mood is None

    async def test_unknown_owner(self, service):
        with pytest.raises(NotFoundError):
            await service.check_in("ghost", 8)

    async def test_negative_sleep(self, service, owner):
        with pytest.raises(ValidationError):
            await service.check_in("owner-1", -2)
        assert await service.list_for_owner("owner-1") == []
