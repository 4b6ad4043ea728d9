"""
Tests for the session state machine and its display projection.

No terminal involved: events are fed directly and the launch gateway
is a recording stub.
"""

import pytest

from geekymenu.panels.session import (
    NO_DESCRIPTION,
    NO_MATCHES,
    NO_SELECTION,
    KeyEvent,
    KeyKind,
    SessionController,
    SessionState,
    project,
)
from geekymenu.services.desktop_entry import Entry

DOWN = KeyEvent(KeyKind.DOWN)
UP = KeyEvent(KeyKind.UP)
PAGE_DOWN = KeyEvent(KeyKind.PAGE_DOWN)
PAGE_UP = KeyEvent(KeyKind.PAGE_UP)
BACKSPACE = KeyEvent(KeyKind.BACKSPACE)
CONFIRM = KeyEvent(KeyKind.CONFIRM)
CANCEL = KeyEvent(KeyKind.CANCEL)


class RecordingLauncher:
    """Stand-in for the launch gateway."""

    def __init__(self):
        self.commands = []

    def __call__(self, command):
        self.commands.append(command)


@pytest.fixture
def launched():
    return RecordingLauncher()


@pytest.fixture
def session(launched):
    entries = [
        Entry("GIMP", "gimp", "Image editor"),
        Entry("Firefox", "firefox", "Web Browser"),
        Entry("Files", "nautilus --new-window"),
    ]
    return SessionController(entries, launch=launched)


def _type(session, text):
    for ch in text:
        session.handle(KeyEvent.character(ch))


def _many(n):
    return [Entry(f"App {i:02d}", f"app{i}") for i in range(n)]


class TestInitialState:

    def test_starts_browsing_with_alphabetical_view(self, session):
        assert session.state is SessionState.BROWSING
        assert session.query == ""
        assert session.selected_index == 0
        assert [e.name for e in session.view] == ["Files", "Firefox", "GIMP"]

    def test_entries_are_frozen(self, session):
        assert isinstance(session.entries, tuple)


class TestQueryEditing:

    def test_typing_filters_and_resets_selection(self, session):
        session.handle(DOWN)
        session.handle(DOWN)
        _type(session, "f")
        assert session.selected_index == 0
        assert [e.name for e in session.view] == ["Files", "Firefox"]

    def test_fx_leaves_only_firefox(self, session):
        _type(session, "fx")
        assert [e.name for e in session.view] == ["Firefox"]

    def test_backspace_restores_view(self, session):
        _type(session, "fx")
        session.handle(BACKSPACE)
        assert session.query == "f"
        session.handle(BACKSPACE)
        assert session.query == ""
        assert len(session.view) == 3

    def test_backspace_on_empty_query_keeps_query_empty(self, session):
        session.handle(DOWN)
        session.handle(BACKSPACE)
        assert session.query == ""
        assert session.selected_index == 0
        assert len(session.view) == 3

    def test_no_matches_keeps_session_usable(self, session):
        _type(session, "zzz")
        assert session.view == []
        assert session.snapshot().selected_description == NO_MATCHES
        session.handle(BACKSPACE)
        session.handle(BACKSPACE)
        session.handle(BACKSPACE)
        assert len(session.view) == 3


class TestCursorMovement:

    def test_up_at_top_stays(self, session):
        assert session.handle(UP) is False
        assert session.selected_index == 0

    def test_down_at_bottom_stays(self, session):
        session.handle(DOWN)
        session.handle(DOWN)
        assert session.selected_index == 2
        assert session.handle(DOWN) is False
        assert session.selected_index == 2

    def test_page_down_clamps(self, launched):
        session = SessionController(_many(15), launch=launched)
        session.handle(PAGE_DOWN)
        assert session.selected_index == 10
        session.handle(PAGE_DOWN)
        assert session.selected_index == 14

    def test_page_up_clamps(self, launched):
        session = SessionController(_many(15), launch=launched)
        session.handle(PAGE_DOWN)
        session.handle(DOWN)
        session.handle(PAGE_UP)
        assert session.selected_index == 1
        session.handle(PAGE_UP)
        assert session.selected_index == 0

    def test_custom_page_step(self, launched):
        session = SessionController(_many(15), launch=launched, page_step=3)
        session.handle(PAGE_DOWN)
        assert session.selected_index == 3

    def test_movement_on_empty_view_is_noop(self, session):
        _type(session, "zzz")
        for event in (DOWN, UP, PAGE_DOWN, PAGE_UP):
            assert session.handle(event) is False
            assert session.selected_index == 0


class TestConfirmAndCancel:

    def test_confirm_launches_selected(self, session, launched):
        session.handle(DOWN)
        session.handle(CONFIRM)
        assert launched.commands == ["firefox"]
        assert session.state is SessionState.TERMINATED
        assert session.outcome == "launched"

    def test_confirm_after_filter(self, session, launched):
        _type(session, "gmp")
        session.handle(CONFIRM)
        assert launched.commands == ["gimp"]

    def test_confirm_on_empty_view_is_noop(self, session, launched):
        _type(session, "zzz")
        session.handle(CONFIRM)
        assert launched.commands == []
        assert session.state is SessionState.BROWSING

    def test_cancel_terminates_without_launch(self, session, launched):
        _type(session, "fi")
        session.handle(DOWN)
        session.handle(CANCEL)
        assert launched.commands == []
        assert session.is_terminated
        assert session.outcome == "cancelled"

    def test_events_after_termination_are_ignored(self, session, launched):
        session.handle(CANCEL)
        assert session.handle(KeyEvent.character("f")) is False
        session.handle(CONFIRM)
        assert session.query == ""
        assert launched.commands == []

    def test_launch_happens_once(self, session, launched):
        session.handle(CONFIRM)
        session.handle(CONFIRM)
        assert launched.commands == ["nautilus --new-window"]


class TestRenderNotifications:

    def test_listener_receives_snapshots(self, session):
        frames = []
        session.connect(frames.append)
        _type(session, "f")
        session.handle(DOWN)
        assert len(frames) == 2
        assert frames[-1].query_text == "f"
        assert frames[-1].items[1].is_selected

    def test_no_render_when_nothing_changes(self, session):
        frames = []
        session.connect(frames.append)
        session.handle(UP)
        assert frames == []


class TestProjection:

    def test_selected_description(self, session):
        session.handle(DOWN)
        snap = session.snapshot()
        assert snap.selected_description == "Web Browser"
        assert [i.label for i in snap.items] == ["Files", "Firefox", "GIMP"]
        assert [i.is_selected for i in snap.items] == [False, True, False]

    def test_missing_comment_placeholder(self, session):
        assert session.snapshot().selected_description == NO_DESCRIPTION

    def test_empty_view_placeholder(self):
        assert project("q", [], 0).selected_description == NO_MATCHES

    def test_out_of_range_placeholder(self):
        view = [Entry("a", "a", "x")]
        snap = project("", view, 5)
        assert snap.selected_description == NO_SELECTION
        assert not any(i.is_selected for i in snap.items)
