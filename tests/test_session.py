"""Tests for FilterSession and the watchdog adapter."""

import time

import pytest
from watchdog.events import (
    DirCreatedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from watchfilter.config import FilterType
from watchfilter.events import FileChangeEvent, RepoType
from watchfilter.session import FilterSession
from watchfilter.settings import WatchFilterSettings
from watchfilter.watchdog_adapter import FilteringEventHandler, to_change_event


@pytest.fixture
def settings(tmp_path):
    return WatchFilterSettings(data_dir=tmp_path, sweep_interval_s=0.01)


@pytest.fixture
def session(config_store, settings, clock):
    return FilterSession(config_store=config_store, settings=settings, clock=clock)


class TestFilterSession:
    """Tests for FilterSession."""

    def test_should_show_uses_current_config(self, session):
        event = FileChangeEvent("build/out.js", "modified", "w1")
        assert session.should_show(event) is False

        session.config_store.toggle_filter(FilterType.DIRECTORIES, False)
        assert session.should_show(event) is True

    def test_sessions_have_independent_debounce_state(self, config_store, settings, clock):
        config_store.toggle_filter(FilterType.DEBOUNCE, True)
        first = FilterSession(config_store=config_store, settings=settings, clock=clock)
        second = FilterSession(config_store=config_store, settings=settings, clock=clock)
        event = FileChangeEvent("/repo/a.ts", "modified", "w1")

        assert first.should_show(event) is True
        assert first.should_show(event) is False
        assert second.should_show(event) is True

    def test_filter_events(self, session):
        session.config_store.toggle_filter(FilterType.DEBOUNCE, True)
        events = [
            FileChangeEvent("/r/a.ts", "modified"),
            FileChangeEvent("/r/a.ts", "modified"),
            FileChangeEvent("dist/a.js", "modified"),
            FileChangeEvent("/r/b.ts", "created"),
        ]
        assert [e.path for e in session.filter_events(events)] == ["/r/a.ts", "/r/b.ts"]

    def test_sweep_uses_retention_factor(self, session, clock):
        session.config_store.toggle_filter(FilterType.DEBOUNCE, True)
        session.config_store.update_debounce_time(100)
        session.should_show(FileChangeEvent("/r/a.ts", "modified"))

        clock.advance(900)
        assert session.sweep_now() == 0
        clock.advance(200)
        assert session.sweep_now() == 1
        assert len(session.recent_changes) == 0

    def test_sweep_is_noop_when_debounce_disabled(self, session, clock):
        session.config_store.toggle_filter(FilterType.DEBOUNCE, True)
        session.should_show(FileChangeEvent("/r/a.ts", "modified"))
        session.config_store.toggle_filter(FilterType.DEBOUNCE, False)
        clock.advance(1_000_000)
        assert session.sweep_now() == 0
        assert len(session.recent_changes) == 1

    def test_background_sweep_runs_and_stops(self, session, clock):
        session.config_store.toggle_filter(FilterType.DEBOUNCE, True)
        session.should_show(FileChangeEvent("/r/a.ts", "modified"))
        clock.advance(10_000)

        with session:
            assert session.is_running
            deadline = time.monotonic() + 2.0
            while len(session.recent_changes) and time.monotonic() < deadline:
                time.sleep(0.01)

        assert len(session.recent_changes) == 0
        assert not session.is_running

    def test_stop_without_start(self, session):
        session.stop()
        assert not session.is_running

    def test_auto_detect_applies_preset(self, session):
        detected = session.auto_detect_and_apply("/work/proj", lambda path: ["Cargo.toml", "target"])
        assert detected is RepoType.RUST
        assert session.config.active_preset is RepoType.RUST
        assert session.config.extensions.watched_extensions == [".rs", ".toml", ".lock"]

    def test_auto_detect_generic_leaves_config(self, session):
        assert session.auto_detect_and_apply("/work/proj", lambda path: ["README.md"]) is None
        assert session.config.active_preset is None

    def test_auto_detect_listing_failure(self, session):
        def failing(path):
            raise OSError("gone")

        assert session.auto_detect_and_apply("/work/proj", failing) is None

    def test_reset_clears_debounce_state(self, session):
        session.config_store.toggle_filter(FilterType.DEBOUNCE, True)
        session.should_show(FileChangeEvent("/r/a.ts", "modified"))

        session.reset()

        assert len(session.recent_changes) == 0
        assert session.config.debounce.enabled is False

    def test_open_persists_and_detects(self, tmp_path):
        project = tmp_path / "project"
        project.mkdir()
        (project / "go.mod").write_text("module x\n", encoding="utf-8")
        settings = WatchFilterSettings(data_dir=tmp_path / "data")

        session = FilterSession.open(settings, root_path=project)
        assert session.config.active_preset is RepoType.GO

        reopened = FilterSession.open(settings)
        assert reopened.config.active_preset is RepoType.GO


class TestWatchdogAdapter:
    """Tests for to_change_event and FilteringEventHandler."""

    def test_conversion(self):
        assert to_change_event(FileCreatedEvent("/r/a.py"), "w1") == FileChangeEvent("/r/a.py", "created", "w1")
        assert to_change_event(FileModifiedEvent("/r/a.py")).kind == "modified"
        assert to_change_event(FileDeletedEvent("/r/a.py")).kind == "removed"

    def test_move_uses_destination(self):
        event = to_change_event(FileMovedEvent("/r/old.py", "/r/new.py"))
        assert event == FileChangeEvent("/r/new.py", "renamed", "")

    def test_directories_and_other_types_are_skipped(self):
        assert to_change_event(DirCreatedEvent("/r/pkg")) is None
        assert to_change_event(FileClosedEvent("/r/a.py")) is None

    def test_handler_forwards_shown_events(self, session):
        received = []
        handler = FilteringEventHandler(session, received.append, watch_id="w9")

        handler.dispatch(FileCreatedEvent("src/main.py"))
        handler.dispatch(FileCreatedEvent("node_modules/lib.js"))
        handler.dispatch(DirCreatedEvent("src/pkg"))

        assert received == [FileChangeEvent("src/main.py", "created", "w9")]

    def test_callback_errors_are_contained(self, session):
        def explode(event):
            raise RuntimeError("callback failed")

        handler = FilteringEventHandler(session, explode)
        handler.dispatch(FileModifiedEvent("/r/src/main.py"))
