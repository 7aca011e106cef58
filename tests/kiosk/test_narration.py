"""
Tests for Narrator: single current utterance, ducking, voice selection
"""

import asyncio

import pytest

from fakes import settle
from weathernow_kiosk.announcements.narration import Narrator, voice_for
from weathernow_kiosk.models import AnnouncementType


@pytest.fixture
def narrator(speech, ducker):
    return Narrator(speech, ducker)


class TestVoice:

    @pytest.mark.unit
    def test_emergency_is_faster_and_higher(self):
        assert voice_for(AnnouncementType.EMERGENCY) == (1.1, 1.1)

    @pytest.mark.unit
    @pytest.mark.parametrize("ann_type", [AnnouncementType.INFO, AnnouncementType.WARNING])
    def test_normal_voice(self, ann_type):
        assert voice_for(ann_type) == (1.0, 1.0)


class TestNarrate:

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_ducks_for_duration_of_speech(self, narrator, speech, ducker):
        task = narrator.narrate("Travel. Roads are icy", AnnouncementType.INFO)
        await settle()

        assert speech.spoken == [("Travel. Roads are icy", 1.0, 1.0)]
        assert ducker.calls == ["duck"]
        assert narrator.is_speaking

        speech.finish()
        await task

        assert ducker.calls == ["duck", "unduck"]
        assert narrator.current is None

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_emergency_voice(self, narrator, speech):
        task = narrator.narrate("Take shelter", AnnouncementType.EMERGENCY)
        await settle()
        speech.finish()
        await task
        assert speech.spoken == [("Take shelter", 1.1, 1.1)]

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_new_narration_replaces_current(self, narrator, speech, ducker):
        first = narrator.narrate("first")
        await settle()
        second = narrator.narrate("second")
        await settle()

        assert first.cancelled()
        assert speech.stops == 1
        assert [text for text, _, _ in speech.spoken] == ["first", "second"]
        assert "unduck" not in ducker.calls
        assert narrator.current is second

        speech.finish()
        await second
        assert ducker.calls.count("unduck") == 1

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_failure_still_unducks(self, narrator, speech, ducker):
        task = narrator.narrate("hello")
        await settle()
        speech.fail(RuntimeError("synth crashed"))
        await task

        assert ducker.calls == ["duck", "unduck"]
        assert not narrator.is_speaking

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_close_cancels_and_unducks(self, narrator, speech, ducker):
        task = narrator.narrate("hello")
        await settle()
        await narrator.close()

        assert task.cancelled()
        assert ducker.calls == ["duck", "unduck"]

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_without_engine(self, ducker):
        narrator = Narrator(None, ducker)
        assert narrator.narrate("hello") is None
        await asyncio.sleep(0)
        assert ducker.calls == []

    @pytest.mark.kiosk
    @pytest.mark.asyncio
    async def test_without_ducker(self, speech):
        narrator = Narrator(speech)
        task = narrator.narrate("hello")
        await settle()
        speech.finish()
        await task
        assert speech.spoken == [("hello", 1.0, 1.0)]
