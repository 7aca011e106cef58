"""
Pytest Fixtures for WeatherNow Kiosk Tests
"""

import pytest

from fakes import FakeMessagesClient, FakeSpeechEngine, RecordingDisplay, RecordingDucker


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def fake_client():
    return FakeMessagesClient()


@pytest.fixture
def speech():
    return FakeSpeechEngine()


@pytest.fixture
def ducker():
    return RecordingDucker()
