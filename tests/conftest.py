"""
Root pytest configuration.

Seeds the environment before any application module imports config.settings,
and exposes the in-memory collaborators from fakes.py as fixtures.
"""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("CLICKHOUSE_URL", "http://clickhouse.test:8123/")

import pytest

from fakes import FakeMetricTree, FakeRedis, FakeStore, RecordingSleep


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "integration: Mark test as an end-to-end pass over fake collaborators",
    )


# ============================================================================
# Shared Fixtures
# ============================================================================


@pytest.fixture
def tree():
    """Small namespace used by the end-to-end examples."""
    return FakeMetricTree(["a.b.leaf1", "a.b.leaf2", "a.c.leaf3"])


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def fake_redis():
    return FakeRedis()
