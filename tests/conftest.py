"""
Root Conftest - Shared Fixtures for All Tests

Provides:
- src/ on sys.path so tests run without an editable install
- Environment configuration applied before any weathernow module is imported
"""

import asyncio
import os
import sys
from pathlib import Path

import pytest

# Settings are read at import time, so the environment must be set first
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("ADMIN_PASSWORD", "weathernow")

# Add project paths to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
SRC_PATH = PROJECT_ROOT / "src"

sys.path.insert(0, str(SRC_PATH))


@pytest.fixture(scope="session")
def project_root():
    """Return project root path"""
    return PROJECT_ROOT


@pytest.fixture
def no_sleep():
    """Sleep replacement that only yields to the event loop, recording delays."""
    delays = []

    async def _sleep(seconds):
        delays.append(seconds)
        await asyncio.sleep(0)

    _sleep.delays = delays
    return _sleep
