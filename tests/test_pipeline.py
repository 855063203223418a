"""Tests for the debounce stage and the combined filter pipeline."""

import pytest

from watchfilter.config import (
    DebounceConfig,
    DirectoryConfig,
    EventTypeConfig,
    ExtensionConfig,
    FilterConfig,
    FilterType,
    PatternConfig,
    toggle_filter,
)
from watchfilter.events import FileChangeEvent
from watchfilter.filters import (
    FilterPipeline,
    RecentChanges,
    apply_all_filters,
    cleanup_recent_changes,
    create_debounce_key,
    filter_events,
    should_debounce_event,
)


def _event(path="/repo/src/app.ts", kind="modified", watch_id="w1"):
    return FileChangeEvent(path=path, kind=kind, watch_id=watch_id)


class TestDebounce:
    """Tests for should_debounce_event and RecentChanges."""

    def test_key_combines_path_and_kind(self):
        assert create_debounce_key(_event("/a.txt", "created")) == "/a.txt:created"

    def test_window_measured_from_first_occurrence(self):
        """A burst does not extend the window."""
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        event = _event()

        assert should_debounce_event(event, state, config, now=0) is False
        assert should_debounce_event(event, state, config, now=50) is True
        assert should_debounce_event(event, state, config, now=250) is True
        assert should_debounce_event(event, state, config, now=400) is False

    def test_suppressed_event_keeps_original_timestamp(self):
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        event = _event()

        should_debounce_event(event, state, config, now=100)
        should_debounce_event(event, state, config, now=200)

        assert state.get(create_debounce_key(event)).timestamp == 100

    def test_window_boundary_passes(self):
        """An event exactly one window later is not suppressed."""
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        should_debounce_event(_event(), state, config, now=0)
        assert should_debounce_event(_event(), state, config, now=300) is False

    def test_different_kind_is_independent(self):
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        should_debounce_event(_event(kind="modified"), state, config, now=0)
        assert should_debounce_event(_event(kind="created"), state, config, now=10) is False

    def test_disabled_leaves_state_untouched(self):
        state = RecentChanges()
        config = DebounceConfig(enabled=False, time_window_ms=300)
        assert should_debounce_event(_event(), state, config, now=0) is False
        assert should_debounce_event(_event(), state, config, now=1) is False
        assert len(state) == 0

    def test_cleanup_removes_only_stale_entries(self):
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        should_debounce_event(_event("/old.ts"), state, config, now=0)
        should_debounce_event(_event("/new.ts"), state, config, now=2_500)

        removed = cleanup_recent_changes(state, max_age_ms=3_000, now=3_500)

        assert removed == 1
        assert "/old.ts:modified" not in state
        assert "/new.ts:modified" in state

    def test_clear(self):
        state = RecentChanges()
        config = DebounceConfig(enabled=True, time_window_ms=300)
        should_debounce_event(_event(), state, config, now=0)
        state.clear()
        assert len(state) == 0


class TestApplyAllFilters:
    """Tests for apply_all_filters stage ordering and short-circuiting."""

    def test_everything_disabled_shows_every_event(self, all_disabled):
        state = RecentChanges()
        events = [
            _event("/repo/node_modules/x.tmp", "chmod"),
            _event("", ""),
            _event("C:\\repo\\.git\\HEAD", "Removed"),
        ]
        for event in events:
            assert apply_all_filters(event, all_disabled, state, now=0) is True
            assert apply_all_filters(event, all_disabled, state, now=1) is True
        assert len(state) == 0

    def test_default_config_ignores_build_directories(self):
        config = FilterConfig()
        state = RecentChanges()
        assert apply_all_filters(_event("node_modules/react/index.js"), config, state) is False
        assert apply_all_filters(_event("src/index.js"), config, state) is True

    def test_filtered_events_do_not_touch_debounce_state(self):
        config = FilterConfig(
            patterns=PatternConfig(enabled=True, ignored_patterns=["*.tmp"]),
            directories=DirectoryConfig(enabled=True, ignored_directories=["/repo/dist"]),
            event_types=EventTypeConfig(enabled=True, allowed_types=["modified"]),
            extensions=ExtensionConfig(enabled=True, watched_extensions=[".ts"], mode="include"),
            debounce=DebounceConfig(enabled=True, time_window_ms=300),
        )
        state = RecentChanges()

        assert apply_all_filters(_event("/repo/a.tmp"), config, state, now=0) is False
        assert apply_all_filters(_event("/repo/dist/a.ts"), config, state, now=0) is False
        assert apply_all_filters(_event("/repo/a.ts", "created"), config, state, now=0) is False
        assert apply_all_filters(_event("/repo/a.js"), config, state, now=0) is False
        assert len(state) == 0

        assert apply_all_filters(_event("/repo/a.ts"), config, state, now=0) is True
        assert len(state) == 1
        assert apply_all_filters(_event("/repo/a.ts"), config, state, now=10) is False

    def test_filter_events_preserves_order(self):
        config = toggle_filter(FilterConfig(), FilterType.DEBOUNCE, True)
        state = RecentChanges()
        events = [
            _event("/repo/b.ts"),
            _event("node_modules/x.js"),
            _event("/repo/a.ts"),
            _event("/repo/b.ts"),
            _event("/repo/c.ts"),
        ]

        kept = filter_events(events, config, state, now=0)

        assert [e.path for e in kept] == ["/repo/b.ts", "/repo/a.ts", "/repo/c.ts"]


class TestFilterPipeline:
    """Tests for the FilterPipeline class."""

    @pytest.fixture
    def debounced(self):
        return toggle_filter(FilterConfig(), FilterType.DEBOUNCE, True)

    def test_burst_scenario(self, clock, debounced):
        """Second event 50ms later is dropped, third 400ms after the first passes."""
        pipeline = FilterPipeline(clock=clock)
        event = _event()

        assert pipeline.evaluate(event, debounced) is True
        clock.advance(50)
        assert pipeline.evaluate(event, debounced) is False
        clock.advance(350)
        assert pipeline.evaluate(event, debounced) is True

    def test_pipelines_do_not_share_state(self, clock, debounced):
        first = FilterPipeline(clock=clock)
        second = FilterPipeline(clock=clock)
        event = _event()

        assert first.evaluate(event, debounced) is True
        assert second.evaluate(event, debounced) is True

    def test_injected_state_is_used(self, clock, debounced):
        state = RecentChanges()
        pipeline = FilterPipeline(state, clock=clock)
        pipeline.evaluate(_event(), debounced)
        assert pipeline.recent_changes is state
        assert len(state) == 1

    def test_filter_list(self, clock, debounced):
        pipeline = FilterPipeline(clock=clock)
        events = [_event("/r/a.ts"), _event("/r/a.ts"), _event("/r/b.ts")]
        assert [e.path for e in pipeline.filter_list(events, debounced)] == ["/r/a.ts", "/r/b.ts"]

    def test_sweep_uses_clock(self, clock, debounced):
        pipeline = FilterPipeline(clock=clock)
        pipeline.evaluate(_event(), debounced)
        clock.advance(5_000)
        assert pipeline.sweep(3_000) == 1
        assert len(pipeline.recent_changes) == 0
