"""
Hotkey Source - Deliver the global toggle chord to subscribers.

Registering the chord with the compositor or OS is the host's job; the host
calls fire() from whatever context receives it. Subscribers are expected to
marshal the event onto their own queue (LauncherController.post does).
"""

from typing import Callable

from loguru import logger


class HotkeySource:
    """Subscription point for the toggle-visibility chord."""

    def __init__(self, chord: str = "Mod+Space"):
        self.chord = chord
        self._handlers: list[Callable[[], None]] = []

    def subscribe(self, handler: Callable[[], None]) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: Callable[[], None]) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    def fire(self) -> None:
        """Notify every subscriber. Handler errors never reach the caller."""
        for handler in list(self._handlers):
            try:
                handler()
            except Exception:
                logger.exception(f"Hotkey handler failed for {self.chord}")
