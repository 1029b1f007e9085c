"""Tests for closing backup views when a walk ends."""

from conftest import FakeDisplay

from backup_walker.walker.cleanup import ResourceTracker
from backup_walker.walker.session import NavigationSession


def open_every_backup(session):
    """Open a view on each backup, walking from newest to oldest."""
    handles = [session.open_current_in_other_view()]
    for _ in range(len(session.backup_set) - 1):
        session.previous()
        handles.append(session.open_current_in_other_view())
    return handles


class TestQuit:
    def test_declined_keeps_views_open(self, three_backups, cfg):
        display = FakeDisplay(confirm_answer=False)
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        open_every_backup(session)

        assert session.quit() == 0
        assert display.prompts == ["Close 3 open backup views?"]
        assert len(display.open) == 3
        assert display.destroyed == []
        assert display.surface_closed

    def test_confirmed_skips_failing_view(self, three_backups, cfg):
        display = FakeDisplay(failing_paths={three_backups + ".~5~"})
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        handles = open_every_backup(session)

        assert session.quit() == 2
        assert display.destroyed == [handles[0].view_id, handles[2].view_id]
        assert list(display.open.values()) == [three_backups + ".~5~"]
        assert display.surface_closed

    def test_no_prompt_without_backup_views(self, three_backups, cfg):
        display = FakeDisplay()
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)

        assert session.quit() == 0
        assert display.prompts == []
        assert display.surface_closed

    def test_singular_prompt(self, three_backups, cfg):
        display = FakeDisplay()
        session = NavigationSession.start(three_backups, display=display, cfg=cfg)
        session.open_current_in_other_view()

        assert session.quit() == 1
        assert display.prompts == ["Close 1 open backup view?"]


class TestResourceTracker:
    def test_only_views_under_prefix_match(self, three_backups, tmp_path):
        display = FakeDisplay()
        display.open_in_secondary_view(three_backups)  # the original itself
        display.open_in_secondary_view(str(tmp_path / "other.txt.~1~"))
        display.open_in_secondary_view(str(tmp_path / "foobar.txt.~1~"))
        backup = display.open_in_secondary_view(three_backups + ".~3~")

        tracker = ResourceTracker(display, three_backups + ".~")
        assert tracker.matching_resources() == [(backup.path, backup)]

        assert tracker.cleanup() == 1
        assert display.destroyed == [backup.view_id]
        assert len(display.open) == 3

    def test_views_opened_elsewhere_are_included(self, three_backups):
        display = FakeDisplay()
        display.open_in_secondary_view(three_backups + ".~9~")
        display.open_in_secondary_view(three_backups + ".~9~")

        tracker = ResourceTracker(display, three_backups + ".~")
        assert tracker.cleanup() == 2
        assert display.open == {}

    def test_destroy_all_counts_successes(self, three_backups):
        display = FakeDisplay(failing_paths={three_backups + ".~9~"})
        display.open_in_secondary_view(three_backups + ".~9~")
        display.open_in_secondary_view(three_backups + ".~3~")

        tracker = ResourceTracker(display, three_backups + ".~")
        assert tracker.destroy_all(tracker.matching_resources()) == 1
