"""
Launcher Controller - Visibility and selection state machine.

Owns the search state (query, results, selection, visibility) and turns
input events into UI intents. The controller never touches widgets or
spawns processes itself: the rendering surface listens for intents and
snapshots, and launching goes through a ProcessLauncher.

States:
  HIDDEN   - nothing on screen
  COMPACT  - search box only
  EXPANDED - search box and results list

The launcher expands as soon as the query text is non-empty, even when
nothing matches; an empty match list is shown as an empty expanded list.

Signals (via connect):
  intent:  called with each Show/Hide/ResizeTo/Launch intent
  changed: called with a LauncherSnapshot after state changes
"""

import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Optional

from loguru import logger

from quicklaunch.search.engine import SearchEngine
from quicklaunch.services.app_index import AppEntry, ApplicationIndex


class Visibility(Enum):
    HIDDEN = "hidden"
    COMPACT = "compact"
    EXPANDED = "expanded"


# Events

@dataclass(frozen=True)
class ToggleVisibility:
    pass


@dataclass(frozen=True)
class QueryChanged:
    text: str


@dataclass(frozen=True)
class EscapePressed:
    pass


@dataclass(frozen=True)
class MoveSelection:
    delta: int


@dataclass(frozen=True)
class Submit:
    pass


@dataclass(frozen=True)
class Click:
    index: int


@dataclass(frozen=True)
class IndexReady:
    index: ApplicationIndex


# Intents

@dataclass(frozen=True)
class Show:
    pass


@dataclass(frozen=True)
class Hide:
    pass


@dataclass(frozen=True)
class ResizeTo:
    width: int
    height: int


@dataclass(frozen=True)
class Launch:
    entry: AppEntry


@dataclass(frozen=True)
class WindowSizes:
    width: int = 600
    compact_height: int = 60
    expanded_height: int = 400


@dataclass(frozen=True)
class LauncherSnapshot:
    """What the rendering surface needs to draw the launcher."""
    visibility: Visibility
    query: str
    results: tuple[AppEntry, ...]
    selected_index: int


def run_inline(callback: Callable[[], object]) -> None:
    callback()


class LauncherController:
    """
    Single owner of the launcher's search state.

    Events are processed one at a time. handle() serializes callers with a
    lock and queues events raised from inside listeners until the current
    one finishes. post() hands the event to the scheduler first, so hosts
    with a main loop pass GLib.idle_add to get everything onto that loop.
    """

    SIGNALS = ("intent", "changed")

    def __init__(
        self,
        index: Optional[ApplicationIndex] = None,
        index_builder=None,
        process_launcher=None,
        sizes: WindowSizes = WindowSizes(),
        scheduler: Callable[[Callable[[], object]], object] = run_inline,
    ):
        self.index_builder = index_builder
        self.process_launcher = process_launcher
        self.sizes = sizes
        self._scheduler = scheduler

        self._engine = SearchEngine(index)
        self._visibility = Visibility.HIDDEN
        self._query = ""
        self._results = self._engine.search("")
        self._selected_index = 0

        self._listeners: dict[str, list[Callable]] = {name: [] for name in self.SIGNALS}
        self._lock = threading.RLock()
        self._pending: deque = deque()
        self._dispatching = False
        self._hotkey_source = None

        self._handlers = {
            ToggleVisibility: self._on_toggle,
            QueryChanged: self._on_query_changed,
            EscapePressed: self._on_escape,
            MoveSelection: self._on_move_selection,
            Submit: self._on_submit,
            Click: self._on_click,
            IndexReady: self._on_index_ready,
        }

    # State accessors

    @property
    def visibility(self) -> Visibility:
        return self._visibility

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> tuple[AppEntry, ...]:
        return self._results

    @property
    def selected_index(self) -> int:
        return self._selected_index

    @property
    def index(self) -> ApplicationIndex:
        return self._engine.index

    @property
    def snapshot(self) -> LauncherSnapshot:
        return LauncherSnapshot(
            visibility=self._visibility,
            query=self._query,
            results=self._results,
            selected_index=self._selected_index,
        )

    # Listeners

    def connect(self, signal: str, callback: Callable) -> None:
        if signal not in self._listeners:
            raise ValueError(f"Unknown signal: {signal}")
        self._listeners[signal].append(callback)

    def disconnect(self, signal: str, callback: Callable) -> None:
        if callback in self._listeners.get(signal, []):
            self._listeners[signal].remove(callback)

    def _emit(self, signal: str, payload) -> None:
        for callback in list(self._listeners[signal]):
            try:
                callback(payload)
            except Exception:
                logger.exception(f"'{signal}' listener failed")

    # Hotkey

    def attach_hotkey(self, source) -> None:
        """Subscribe to a HotkeySource; toggles are posted, never handled inline."""
        self.detach_hotkey()
        source.subscribe(self._on_hotkey)
        self._hotkey_source = source

    def detach_hotkey(self) -> None:
        if self._hotkey_source is not None:
            self._hotkey_source.unsubscribe(self._on_hotkey)
            self._hotkey_source = None

    def _on_hotkey(self) -> None:
        self.post(ToggleVisibility())

    def shutdown(self) -> None:
        """Detach from the hotkey source and drop all listeners."""
        self.detach_hotkey()
        for callbacks in self._listeners.values():
            callbacks.clear()
        logger.debug("Launcher controller shut down")

    # Event intake

    def post(self, event) -> None:
        """Queue an event from any thread via the scheduler."""
        self._scheduler(partial(self._handle_posted, event))

    def _handle_posted(self, event) -> bool:
        self.handle(event)
        return False  # one-shot for GLib.idle_add

    def handle(self, event) -> None:
        """Process an event, plus anything queued while processing it."""
        with self._lock:
            self._pending.append(event)
            if self._dispatching:
                return
            self._dispatching = True
            try:
                while self._pending:
                    self._process(self._pending.popleft())
            finally:
                self._dispatching = False

    def _process(self, event) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning(f"Ignoring unknown event {event!r}")
            return

        before = self.snapshot
        handler(event)
        after = self.snapshot
        if after != before:
            self._emit("changed", after)

    # Transitions

    def _on_toggle(self, event: ToggleVisibility) -> None:
        if self._visibility is Visibility.HIDDEN:
            self._show()
        else:
            self._hide()

    def _on_escape(self, event: EscapePressed) -> None:
        if self._visibility is not Visibility.HIDDEN:
            self._hide()

    def _on_query_changed(self, event: QueryChanged) -> None:
        if self._visibility is Visibility.HIDDEN:
            logger.debug("Query changed while hidden, ignoring")
            return

        self._query = event.text
        self._set_results(self._engine.search(self._query))

        target = Visibility.EXPANDED if self._query else Visibility.COMPACT
        if target is not self._visibility:
            self._visibility = target
            self._emit("intent", self._resize_intent(target))

    def _on_move_selection(self, event: MoveSelection) -> None:
        if self._visibility is not Visibility.EXPANDED or not self._results:
            return
        last = len(self._results) - 1
        self._selected_index = max(0, min(self._selected_index + event.delta, last))

    def _on_submit(self, event: Submit) -> None:
        if self._visibility is Visibility.HIDDEN:
            return
        if not self._results:
            logger.debug("Submit with no results, ignoring")
            return
        self._launch(self._results[self._selected_index])

    def _on_click(self, event: Click) -> None:
        if self._visibility is Visibility.HIDDEN:
            return
        if not 0 <= event.index < len(self._results):
            logger.warning(f"Click on row {event.index} outside {len(self._results)} results")
            return
        self._selected_index = event.index
        self._launch(self._results[event.index])

    def _on_index_ready(self, event: IndexReady) -> None:
        current = self._engine.index.generation
        if event.index.generation <= current:
            logger.debug(
                f"Discarding index build {event.index.generation} "
                f"(installed: {current})"
            )
            return

        self._engine.index = event.index
        self._set_results(self._engine.search(self._query))
        logger.debug(
            f"Installed index build {event.index.generation} "
            f"with {len(event.index)} applications"
        )

    # Helpers

    def _show(self) -> None:
        self._visibility = Visibility.COMPACT
        self._query = ""
        self._set_results(self._engine.search(""))
        self._emit("intent", Show())

        if self.index_builder is not None and self.index_builder.is_stale(self._engine.index):
            self.index_builder.request_build(lambda index: self.post(IndexReady(index)))

    def _hide(self) -> None:
        was_expanded = self._visibility is Visibility.EXPANDED
        self._visibility = Visibility.HIDDEN
        self._query = ""
        self._set_results(self._engine.search(""))
        self._emit("intent", Hide())
        if was_expanded:
            self._emit("intent", self._resize_intent(Visibility.COMPACT))

    def _launch(self, entry: AppEntry) -> None:
        self._emit("intent", Launch(entry))

        if self.process_launcher is not None:
            try:
                launched = self.process_launcher.launch(entry.path)
            except Exception:
                logger.exception(f"Process launcher raised for {entry.path}")
                launched = False
            if not launched:
                logger.warning(f"Could not launch {entry.name} ({entry.path})")

        self._hide()

    def _set_results(self, results: tuple[AppEntry, ...]) -> None:
        self._results = results
        self._selected_index = 0

    def _resize_intent(self, visibility: Visibility) -> ResizeTo:
        if visibility is Visibility.EXPANDED:
            return ResizeTo(self.sizes.width, self.sizes.expanded_height)
        return ResizeTo(self.sizes.width, self.sizes.compact_height)
