"""Tests for the navigation session: cursor moves, refresh and error handling."""

import os

import pytest
from conftest import FakeDisplay

from backup_walker.utils.config import Config
from backup_walker.utils.diff_engine import DiffError, UnifiedDiffEngine
from backup_walker.walker.errors import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    OutOfRangeError,
    SessionClosedError,
)
from backup_walker.walker.session import ORIGINAL_LABEL, NavigationSession


class RecordingEngine:
    """Diff engine returning a readable marker and remembering its calls."""

    def __init__(self):
        self.calls = []

    def diff(self, left_path, right_path):
        self.calls.append((left_path, right_path))
        return f"diff {os.path.basename(left_path)} {os.path.basename(right_path)}\n"


class FailingEngine(RecordingEngine):
    """Fails whenever the right-hand file is in ``broken``."""

    def __init__(self, broken):
        super().__init__()
        self.broken = set(broken)

    def diff(self, left_path, right_path):
        if right_path in self.broken:
            raise DiffError(f"cannot diff {right_path}")
        return super().diff(left_path, right_path)


@pytest.fixture
def session(three_backups, display, cfg):
    return NavigationSession.start(three_backups, display=display, diff_engine=RecordingEngine(), cfg=cfg)


def labels(session):
    result = session.last_refresh
    return result.left_label, result.right_label


class TestStart:
    def test_starts_at_newest_against_original(self, session, display, three_backups):
        assert session.cursor == 0
        assert labels(session) == (ORIGINAL_LABEL, "9")
        assert session.current_file() == three_backups + ".~9~"
        assert display.text == "diff foo.txt foo.txt.~9~\n"
        assert "orig → 9" in display.status

    def test_disabled_backups_fail_before_discovery(self, make_backups, display):
        original = make_backups({})  # would be NotFoundError if discovery ran
        disabled = Config().with_overrides(backups_enabled=False)
        with pytest.raises(ConfigurationError, match="disabled"):
            NavigationSession.start(original, display=display, cfg=disabled)
        assert display.rendered == []

    def test_no_backups_raises_not_found(self, make_backups, display, cfg):
        original = make_backups({})
        with pytest.raises(NotFoundError):
            NavigationSession.start(original, display=display, cfg=cfg)
        assert display.rendered == []

    def test_failed_initial_diff_raises_collaborator_error(self, three_backups, display, cfg):
        engine = FailingEngine({three_backups + ".~9~"})
        with pytest.raises(CollaboratorError):
            NavigationSession.start(three_backups, display=display, diff_engine=engine, cfg=cfg)
        assert display.rendered == []

    def test_default_engine_comes_from_config(self, three_backups, display, cfg):
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        assert isinstance(session.diff_engine, UnifiedDiffEngine)
        assert "-four" in display.text


class TestScenario:
    def test_walk_back_and_forth(self, session):
        """Backups 3, 5 and 9: orig/9, then 9/5, then back to orig/9."""
        assert session.backup_set.numbers == [9, 5, 3]
        assert (session.cursor, *labels(session)) == (0, "orig", "9")

        session.previous(1)
        assert (session.cursor, *labels(session)) == (1, "9", "5")

        session.next(1)
        assert (session.cursor, *labels(session)) == (0, "orig", "9")

    def test_status_names_neighbours(self, session):
        session.previous()
        result = session.last_refresh
        assert result.newer_label == "9"
        assert result.older_label == "3"
        assert result.status_text() == "9 → 5   [n] newer: 9   [p] older: 3"

    def test_status_at_ends(self, session):
        assert session.last_refresh.newer_label is None
        session.goto_oldest()
        assert session.last_refresh.older_label is None
        assert "[p] older: -" in session.last_refresh.status_text()

    def test_diff_uses_predecessor(self, session, three_backups):
        session.previous(2)
        assert session.diff_engine.calls[-1] == (three_backups + ".~5~", three_backups + ".~3~")


class TestBounds:
    def test_next_at_newest_is_out_of_range(self, session, display):
        rendered = len(display.rendered)
        with pytest.raises(OutOfRangeError, match="not enough newer backups, max is 0"):
            session.next(1)
        assert session.cursor == 0
        assert len(display.rendered) == rendered

    def test_previous_at_oldest_is_out_of_range(self, session):
        session.previous(2)
        with pytest.raises(OutOfRangeError, match="not enough older backups, max is 0"):
            session.previous(1)
        assert session.cursor == 2

    def test_previous_too_far_reports_available_steps(self, session):
        with pytest.raises(OutOfRangeError, match="max is 2"):
            session.previous(3)
        assert session.cursor == 0

    def test_next_too_far_reports_available_steps(self, session):
        session.previous(2)
        with pytest.raises(OutOfRangeError, match="max is 2"):
            session.next(5)
        assert session.cursor == 2

    def test_negative_counts_delegate(self, session):
        session.next(-2)
        assert session.cursor == 2
        session.previous(-1)
        assert session.cursor == 1

    def test_zero_count_is_noop_without_refresh(self, session, display):
        rendered = len(display.rendered)
        assert session.next(0) is None
        assert session.previous(0) is None
        assert session.cursor == 0
        assert len(display.rendered) == rendered

    def test_cursor_invariant_over_random_walk(self, session):
        import random

        rng = random.Random(1234)
        size = len(session.backup_set)
        for _ in range(200):
            step = rng.randint(-3, 3)
            try:
                session.previous(step)
            except OutOfRangeError:
                pass
            assert 0 <= session.cursor < size

    def test_round_trip_restores_cursor_and_diff(self, session, display):
        before = (session.cursor, display.text, display.status)
        session.previous(2)
        session.next(2)
        assert (session.cursor, display.text, display.status) == before


class TestAbsoluteMoves:
    def test_goto_oldest_and_newest(self, session):
        session.goto_oldest()
        assert session.cursor == 2
        assert session.goto_oldest() is None
        session.goto_newest()
        assert session.cursor == 0
        assert session.goto_newest() is None

    def test_jump_to(self, session):
        session.jump_to(1)
        assert labels(session) == ("9", "5")
        assert session.jump_to(1) is None
        with pytest.raises(OutOfRangeError, match="valid range is 0..2"):
            session.jump_to(3)
        with pytest.raises(OutOfRangeError):
            session.jump_to(-1)
        assert session.cursor == 1


class TestCollaboratorFailure:
    def test_failed_move_keeps_cursor_and_display(self, three_backups, display, cfg):
        engine = FailingEngine({three_backups + ".~5~"})
        session = NavigationSession.start(three_backups, display=display, diff_engine=engine, cfg=cfg)
        text, status = display.text, display.status
        with pytest.raises(CollaboratorError, match="cannot diff 9 against 5"):
            session.previous()
        assert session.cursor == 0
        assert (display.text, display.status) == (text, status)
        assert labels(session) == ("orig", "9")

    def test_vanished_backup(self, three_backups, display, cfg):
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        os.remove(three_backups + ".~5~")
        with pytest.raises(CollaboratorError) as excinfo:
            session.previous()
        assert isinstance(excinfo.value.__cause__, OSError)
        assert session.cursor == 0

    def test_session_still_usable_after_failure(self, three_backups, display, cfg):
        engine = FailingEngine({three_backups + ".~5~"})
        session = NavigationSession.start(three_backups, display=display, diff_engine=engine, cfg=cfg)
        with pytest.raises(CollaboratorError):
            session.previous()
        engine.broken.clear()
        session.previous()
        assert session.cursor == 1


class TestRefresh:
    def test_refresh_picks_up_original_changes(self, three_backups, display, cfg):
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        assert "-four" in display.text
        with open(three_backups, "w", encoding="utf-8") as f:
            f.write("one\ntwo\nthree\nFIVE\n")
        session.refresh()
        assert "-FIVE" in display.text
        assert session.cursor == 0


class TestBlame:
    def test_moves_to_oldest_backup_containing_line(self, session):
        version = session.blame("two")
        assert version.number == 5
        assert session.cursor == 1

    def test_line_in_every_backup(self, session):
        assert session.blame("one").number == 3
        assert session.cursor == 2

    def test_line_not_found(self, session):
        session.previous()
        assert session.blame("four") is None
        assert session.cursor == 1

    def test_empty_line_rejected(self, session):
        with pytest.raises(ValueError):
            session.blame("")


class TestOpenAndQuit:
    def test_open_current_in_other_view(self, session, display, three_backups):
        handle = session.open_current_in_other_view()
        assert handle.path == three_backups + ".~9~"
        assert display.open == {handle.view_id: handle.path}

    def test_quit_closes_surface_and_session(self, session, display):
        assert session.quit() == 0
        assert display.surface_closed
        assert session.closed
        with pytest.raises(SessionClosedError):
            session.next()
        with pytest.raises(SessionClosedError):
            session.quit()

    def test_quit_closes_surface_even_if_confirm_fails(self, three_backups, cfg):
        class BrokenConfirm(FakeDisplay):
            def confirm(self, prompt):
                raise RuntimeError("dialog crashed")

        display = BrokenConfirm()
        session = NavigationSession.start(three_backups, display=display, diff_engine=RecordingEngine(), cfg=cfg)
        session.open_current_in_other_view()
        with pytest.raises(RuntimeError):
            session.quit()
        assert display.surface_closed
        assert session.closed
