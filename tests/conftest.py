"""Shared fixtures.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import time
import uuid

import pytest

from cachestore_core.store.base import StoreConfig
from cachestore_core.store.memory import MemoryStore


class FakeClock:
    """Controllable replacement for time.time()."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    """Freeze time.time() and let tests move it forward."""
    fake = FakeClock()
    monkeypatch.setattr(time, "time", fake)
    return fake


@pytest.fixture
def store():
    """Fresh in-memory store with default settings."""
    return MemoryStore()


@pytest.fixture
def shared_name():
    """Unique name for memory stores sharing one dictionary."""
    name = f"test-{uuid.uuid4().hex}"
    yield name
    MemoryStore(name=name).clear()


@pytest.fixture
def namespaced_store(shared_name):
    """Memory store with a namespace on a shared dictionary."""
    return MemoryStore(StoreConfig(namespace="app"), name=shared_name)
