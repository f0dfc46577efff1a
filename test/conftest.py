"""
Test Configuration

Environment setup MUST happen before importing any application module:
settings and the loguru sinks are configured at import time.
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Keep tests independent of a developer's local .env
    os.environ['API_BASE_URL'] = 'http://api.test/api'
    os.environ.pop('AUTH_TOKEN', None)


_early_setup_test_environment()

import pytest  # noqa: E402

from test.service.seat_hold.fakes import FakeScheduler, MockEventSourceFactory  # noqa: E402


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def event_sources() -> MockEventSourceFactory:
    return MockEventSourceFactory()
