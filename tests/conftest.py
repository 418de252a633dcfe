"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from luma_task.config import Config  # noqa: E402

# 2026-10-14 is a Wednesday, 2026-10-19 a Monday.
WEDNESDAY_MORNING = datetime(2026, 10, 14, 10, 0)
MONDAY_MORNING = datetime(2026, 10, 19, 10, 0)


@pytest.fixture(autouse=True)
def reset_config():
    """Never leak a cached configuration between tests."""
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def now():
    return WEDNESDAY_MORNING


@pytest.fixture
def utc_now():
    return WEDNESDAY_MORNING.replace(tzinfo=timezone.utc)
