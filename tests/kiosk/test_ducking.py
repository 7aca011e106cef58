"""
Tests for DuckCoordinator volume ramps
"""

import pytest

from fakes import FakeVolume
from weathernow_kiosk.audio.ducking import AudioDucker, DuckCoordinator


@pytest.fixture
def volume():
    return FakeVolume(0.8)


@pytest.fixture
def coordinator(volume, no_sleep):
    return DuckCoordinator(volume, duck_ratio=0.15, duck_ms=600, unduck_ms=1000, steps=20, sleep=no_sleep)


class TestDuck:

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_ramps_down_in_steps(self, coordinator, volume, no_sleep):
        await coordinator.duck()
        await coordinator.wait_for_ramp()

        assert coordinator.is_ducked
        assert volume.volume == pytest.approx(0.12)
        assert len(volume.history) == 20
        assert volume.history == sorted(volume.history, reverse=True)
        assert no_sleep.delays == [pytest.approx(0.03)] * 20

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_duck_twice_is_one_ramp(self, coordinator, volume):
        await coordinator.duck()
        await coordinator.duck()
        await coordinator.wait_for_ramp()

        assert len(volume.history) == 20
        assert volume.volume == pytest.approx(0.12)

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_unduck_restores(self, coordinator, volume, no_sleep):
        await coordinator.duck()
        await coordinator.wait_for_ramp()
        await coordinator.unduck()
        await coordinator.wait_for_ramp()

        assert not coordinator.is_ducked
        assert volume.volume == pytest.approx(0.8)
        assert no_sleep.delays[-1] == pytest.approx(0.05)

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_unduck_when_not_ducked_is_noop(self, coordinator, volume):
        await coordinator.unduck()
        await coordinator.wait_for_ramp()
        assert volume.history == []


class TestUserVolume:

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_change_while_ducked_applies_on_unduck(self, coordinator, volume):
        await coordinator.duck()
        await coordinator.wait_for_ramp()

        coordinator.set_user_volume(0.5)
        assert volume.volume == pytest.approx(0.12)
        assert coordinator.normal_volume == 0.5

        await coordinator.unduck()
        await coordinator.wait_for_ramp()
        assert volume.volume == pytest.approx(0.5)

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_change_while_not_ducked_applies_now(self, coordinator, volume):
        coordinator.set_user_volume(0.3)
        assert volume.volume == 0.3

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_volume_is_clamped(self, coordinator, volume):
        coordinator.set_user_volume(1.7)
        assert volume.volume == 1.0


class TestWithoutMusic:

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_absent_collaborator_is_noop(self):
        coordinator = DuckCoordinator(None)
        await coordinator.duck()
        await coordinator.unduck()
        coordinator.set_user_volume(0.4)
        await coordinator.close()
        assert not coordinator.is_ducked

    @pytest.mark.unit
    def test_satisfies_protocol(self):
        assert isinstance(DuckCoordinator(None), AudioDucker)
