"""
Session Controller - Keyboard-driven state machine for one launcher run.

Owns the live query, the ranked view, and the selection cursor. Key
events arrive already classified (see KeyEvent); each one is handled to
completion before the next. Rendering code never touches this state: it
receives a read-only Snapshot after every change.

States:
  BROWSING   - initial; editing the query or moving the cursor
  TERMINATED - final; reached by confirm (launch) or cancel
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from loguru import logger

from geekymenu.search.ranker import rank
from geekymenu.services.desktop_entry import Entry, sort_entries

NO_DESCRIPTION = "(No description)"
NO_MATCHES = "(No matches)"
NO_SELECTION = "(No selection)"

DEFAULT_PAGE_STEP = 10


class KeyKind(Enum):
    CHARACTER = "character"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    CONFIRM = "confirm"
    CANCEL = "cancel"


@dataclass(frozen=True)
class KeyEvent:
    """A key press classified into what it means to the session."""
    kind: KeyKind
    char: str = ""

    @classmethod
    def character(cls, char: str) -> "KeyEvent":
        return cls(KeyKind.CHARACTER, char)


class SessionState(Enum):
    BROWSING = "browsing"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ListItem:
    """One row of the application list as the renderer sees it."""
    label: str
    is_selected: bool


@dataclass(frozen=True)
class Snapshot:
    """Everything the rendering layer needs to paint one frame."""
    query_text: str
    items: tuple[ListItem, ...]
    selected_description: str
    selected_index: int = 0


def project(query: str, view: list[Entry], selected_index: int) -> Snapshot:
    """Pure projection of session state into a display snapshot."""
    items = tuple(
        ListItem(label=entry.name, is_selected=(i == selected_index))
        for i, entry in enumerate(view)
    )

    if not view:
        description = NO_MATCHES
    elif 0 <= selected_index < len(view):
        description = view[selected_index].comment or NO_DESCRIPTION
    else:
        description = NO_SELECTION

    return Snapshot(
        query_text=query,
        items=items,
        selected_description=description,
        selected_index=selected_index,
    )


class SessionController:
    """
    Interactive launcher session.

    Args:
        entries: Scanned application entries (frozen for the session)
        launch: Fire-and-forget callable receiving the chosen command
        page_step: Rows moved by page-up / page-down

    Example:
        session = SessionController(entries, launch=launch_command)
        session.handle(KeyEvent.character("f"))
        session.handle(KeyEvent(KeyKind.CONFIRM))
    """

    def __init__(self, entries: Iterable[Entry], launch: Callable[[str], None],
                 page_step: int = DEFAULT_PAGE_STEP):
        self._entries = tuple(sort_entries(entries))
        self._launch = launch
        self.page_step = page_step

        self.query = ""
        self.view = list(self._entries)
        self.selected_index = 0

        self.state = SessionState.BROWSING
        self.outcome: Optional[str] = None  # "launched" or "cancelled"

        self._listeners: list[Callable[[Snapshot], None]] = []

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def is_terminated(self) -> bool:
        return self.state is SessionState.TERMINATED

    @property
    def selected_entry(self) -> Optional[Entry]:
        if 0 <= self.selected_index < len(self.view):
            return self.view[self.selected_index]
        return None

    def connect(self, callback: Callable[[Snapshot], None]) -> None:
        """Register a callback fired with a fresh Snapshot after each change."""
        self._listeners.append(callback)

    def snapshot(self) -> Snapshot:
        return project(self.query, self.view, self.selected_index)

    def handle(self, event: KeyEvent) -> bool:
        """
        Apply one key event.

        Returns:
            True if query, view or selection changed (a re-render happened)
        """
        if self.is_terminated:
            logger.debug(f"Ignoring {event.kind.value} after session ended")
            return False

        if event.kind is KeyKind.CONFIRM:
            self._confirm()
            return False
        if event.kind is KeyKind.CANCEL:
            self._terminate("cancelled")
            return False

        if event.kind is KeyKind.CHARACTER:
            changed = self._set_query(self.query + event.char)
        elif event.kind is KeyKind.BACKSPACE:
            # Removing from an empty query still re-ranks and resets the cursor
            changed = self._set_query(self.query[:-1])
        elif event.kind in (KeyKind.UP, KeyKind.DOWN):
            changed = self._move(-1 if event.kind is KeyKind.UP else 1)
        else:
            changed = self._move(-self.page_step if event.kind is KeyKind.PAGE_UP else self.page_step)

        if changed:
            self._emit_changed()
        return changed

    def _set_query(self, query: str) -> bool:
        # Full re-rank over the frozen collection on every edit
        before = (self.query, self.view, self.selected_index)
        self.query = query
        self.view = rank(self._entries, query)
        self.selected_index = 0
        return before != (self.query, self.view, self.selected_index)

    def _move(self, step: int) -> bool:
        if not self.view:
            return False
        before = self.selected_index
        self.selected_index = max(0, min(self.selected_index + step, len(self.view) - 1))
        return self.selected_index != before

    def _confirm(self) -> None:
        entry = self.selected_entry
        if entry is None:
            # Empty view: nothing to launch, stay in BROWSING
            return

        logger.info(f"Launching {entry.name}: {entry.exec}")
        self._launch(entry.exec)
        self._terminate("launched")

    def _terminate(self, outcome: str) -> None:
        self.state = SessionState.TERMINATED
        self.outcome = outcome
        logger.debug(f"Session ended: {outcome}")

    def _emit_changed(self) -> None:
        snapshot = self.snapshot()
        for callback in self._listeners:
            callback(snapshot)
