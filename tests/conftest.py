# tests/conftest.py
"""
Shared pytest fixtures for feed_curator tests.

Nothing here touches a browser, the network or a real model; see
``tests/fakes.py`` for the stand-ins.
"""

import asyncio
import logging

import httpx
import pytest

from feed_curator.config import CuratorConfig
from feed_curator.content_bridge import FeedTarget
from feed_curator.storage.providers.memory import InMemoryStore

from tests.fakes import (
    FEED_URL,
    PROBE_URL,
    FakeEmbeddingProvider,
    FakeFeedObserver,
    FakeProviderFactory,
    ProbeServer,
    RecordingUI,
)

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)
logging.getLogger("feed_curator").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def config():
    """Config with test-sized delays."""
    return CuratorConfig(
        probe_url=PROBE_URL,
        probe_backoff_base=0.0,
        download_timeout=5.0,
        auto_retry_delay=0.01,
        keep_alive_interval=0.05,
        reinject_grace=0.0,
        classify_timeout=2.0,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def factory(provider):
    return FakeProviderFactory(provider)


@pytest.fixture
def probe_server():
    return ProbeServer()


@pytest.fixture
async def http_client(probe_server):
    async with httpx.AsyncClient(transport=httpx.MockTransport(probe_server)) as client:
        yield client


@pytest.fixture
def feed_target():
    return FeedTarget(target_id=1, url=FEED_URL)


@pytest.fixture
def observer(feed_target):
    return FakeFeedObserver([feed_target], active=feed_target.target_id)


@pytest.fixture
def ui():
    return RecordingUI()


@pytest.fixture
def recorded_sleeps():
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps):
    """Sleep that records its delay and only yields to the loop."""

    async def _sleep(delay):
        recorded_sleeps.append(delay)
        await asyncio.sleep(0)

    return _sleep
