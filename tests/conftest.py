"""Shared fixtures for watchfilter tests."""

import pytest

from watchfilter.config import FilterConfig, FilterType, toggle_filter
from watchfilter.storage import FilterConfigStore, MemoryStore


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def config_store(memory_store):
    return FilterConfigStore(memory_store)


@pytest.fixture
def all_disabled():
    """Config with every stage switched off."""
    config = FilterConfig()
    for filter_type in FilterType:
        config = toggle_filter(config, filter_type, False)
    return config
