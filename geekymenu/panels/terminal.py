"""
Terminal Panel - curses front end for a launcher session.

Layout:
  +-------------------------------------------+
  | query                                     |
  +---------------------+---------------------+
  | Applications        | Description         |
  |  Firefox            |  Web Browser        |
  |  Files              |                     |
  +---------------------+---------------------+

The panel keeps no launcher state of its own apart from the list scroll
offset. It paints whatever Snapshot the SessionController hands it and
feeds classified key presses back.
"""

import curses
import os
import textwrap
from typing import Optional, Union

from loguru import logger

from geekymenu.panels.session import KeyEvent, KeyKind, SessionController, Snapshot

QUERY_HEIGHT = 3

_STR_KEYS = {
    "\n": KeyKind.CONFIRM,
    "\r": KeyKind.CONFIRM,
    "\x1b": KeyKind.CANCEL,   # Escape
    "\x03": KeyKind.CANCEL,   # Ctrl-C in raw mode
    "\x7f": KeyKind.BACKSPACE,
    "\b": KeyKind.BACKSPACE,
}

_CODE_KEYS = {
    curses.KEY_BACKSPACE: KeyKind.BACKSPACE,
    curses.KEY_DC: KeyKind.BACKSPACE,
    curses.KEY_UP: KeyKind.UP,
    curses.KEY_DOWN: KeyKind.DOWN,
    curses.KEY_PPAGE: KeyKind.PAGE_UP,
    curses.KEY_NPAGE: KeyKind.PAGE_DOWN,
    curses.KEY_ENTER: KeyKind.CONFIRM,
}

# Color pair ids
_BORDER = 1
_FOCUS = 2
_SELECTED = 3


def classify_key(key: Union[str, int]) -> Optional[KeyEvent]:
    """
    Map a raw get_wch() result to a KeyEvent.

    Returns:
        KeyEvent, or None for keys the launcher ignores (Tab, F-keys, ...)
    """
    if isinstance(key, str):
        if key in _STR_KEYS:
            return KeyEvent(_STR_KEYS[key])
        if key.isprintable():
            return KeyEvent.character(key)
        return None

    kind = _CODE_KEYS.get(key)
    return KeyEvent(kind) if kind else None


def scroll_offset(selected: int, offset: int, rows: int) -> int:
    """First visible list row so that the selected row stays on screen."""
    if rows <= 0:
        return 0
    if selected < offset:
        return selected
    if selected >= offset + rows:
        return selected - rows + 1
    return offset


class TerminalPanel:
    """
    curses window pair (list + description) below a query box.

    Args:
        stdscr: Screen from curses.wrapper
        session: Controller driving this run
    """

    def __init__(self, stdscr, session: SessionController):
        self.stdscr = stdscr
        self.session = session
        self._offset = 0
        self._colors = False

        self._init_screen()
        session.connect(self.draw)

    def _init_screen(self):
        try:
            curses.curs_set(1)
        except curses.error:
            pass

        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(_BORDER, curses.COLOR_WHITE, -1)
            curses.init_pair(_FOCUS, curses.COLOR_GREEN, -1)
            curses.init_pair(_SELECTED, curses.COLOR_WHITE, curses.COLOR_BLUE)
            self._colors = True

        self.stdscr.keypad(True)

    def _attr(self, pair: int, fallback: int = 0) -> int:
        return curses.color_pair(pair) if self._colors else fallback

    def _safe_add(self, y: int, x: int, text: str, attr: int = 0):
        """addstr that clips to the screen instead of raising."""
        h, w = self.stdscr.getmaxyx()
        if y < 0 or y >= h or x >= w:
            return
        try:
            self.stdscr.addnstr(y, x, text, max(0, w - x - 1), attr)
        except curses.error:
            pass

    def _box(self, y: int, x: int, height: int, width: int, label: str = "", attr: int = 0):
        if height < 2 or width < 2:
            return
        try:
            win = self.stdscr.derwin(height, width, y, x)
            win.attrset(attr)
            win.box()
            win.attrset(0)
        except curses.error:
            return
        if label:
            self._safe_add(y, x + 2, f" {label} ", attr)

    def draw(self, snapshot: Optional[Snapshot] = None):
        """Paint one frame from a snapshot (or the session's current one)."""
        snapshot = snapshot or self.session.snapshot()
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()

        # Query box (has focus)
        self._box(0, 0, QUERY_HEIGHT, w, attr=self._attr(_FOCUS))
        query_width = max(0, w - 4)
        self._safe_add(1, 2, snapshot.query_text[-query_width:] if query_width else "")

        # Application list
        body_h = max(0, h - QUERY_HEIGHT)
        split = w // 2
        self._box(QUERY_HEIGHT, 0, body_h, split, "Applications", self._attr(_BORDER))

        rows = max(0, body_h - 2)
        self._offset = scroll_offset(snapshot.selected_index, self._offset, rows)
        visible = snapshot.items[self._offset:self._offset + rows]
        for i, item in enumerate(visible):
            label = item.label[:max(0, split - 3)]
            if item.is_selected:
                attr = self._attr(_SELECTED, curses.A_REVERSE)
                label = label.ljust(max(0, split - 2))
            else:
                attr = 0
            self._safe_add(QUERY_HEIGHT + 1 + i, 1, label, attr)

        # Description panel
        self._box(QUERY_HEIGHT, split, body_h, w - split, "Description", self._attr(_BORDER))
        desc_width = max(1, w - split - 4)
        for i, line in enumerate(textwrap.wrap(snapshot.selected_description, desc_width)[:rows]):
            self._safe_add(QUERY_HEIGHT + 1 + i, split + 2, line)

        # Keep the caret at the end of the query text
        try:
            self.stdscr.move(1, min(2 + len(snapshot.query_text), max(2, w - 2)))
        except curses.error:
            pass
        self.stdscr.refresh()

    def run(self):
        """Read keys until the session terminates."""
        self.draw()
        while not self.session.is_terminated:
            try:
                key = self.stdscr.get_wch()
            except KeyboardInterrupt:
                key = "\x03"
            except curses.error:
                # No input (e.g. interrupted by a signal)
                continue

            if key == curses.KEY_RESIZE:
                self.draw()
                continue

            event = classify_key(key)
            if event is None:
                logger.debug(f"Ignoring key {key!r}")
                continue
            self.session.handle(event)


def run_terminal_session(session: SessionController) -> Optional[str]:
    """
    Run the session inside curses and restore the terminal afterwards.

    Returns:
        Session outcome ("launched" / "cancelled")
    """
    # Make a lone Escape register quickly instead of after ~1s
    os.environ.setdefault("ESCDELAY", "25")

    def _main(stdscr):
        TerminalPanel(stdscr, session).run()

    try:
        curses.wrapper(_main)
    except KeyboardInterrupt:
        # Interrupt during curses setup/teardown
        if not session.is_terminated:
            session.handle(KeyEvent(KeyKind.CANCEL))

    return session.outcome
