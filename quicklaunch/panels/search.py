"""
Search Panel - Floating search box with an expandable results list.

Renders LauncherController snapshots and forwards user input back as
events:
- Entry changes post QueryChanged
- Up/Down post MoveSelection, Return posts Submit, Escape posts EscapePressed
- Left-click on a row posts Click(row)

Show/Hide/ResizeTo intents drive the window; the panel holds no search
state of its own.
"""

from gi.repository import Gdk, Gtk
from ignis import widgets
from loguru import logger

from quicklaunch.controller import (
    Click,
    EscapePressed,
    Hide,
    LauncherSnapshot,
    MoveSelection,
    QueryChanged,
    ResizeTo,
    Show,
    Submit,
    Visibility,
)
from quicklaunch.utils.helpers import is_test_mode, window_sizes

DEFAULT_ICON = "application-x-executable"


class SearchPanel:
    """Ignis window bound to a LauncherController."""

    def __init__(self, controller, settings: dict):
        self.controller = controller
        self.settings = settings
        self.sizes = window_sizes(settings)

        # Widgets (created in create_window)
        self.window = None
        self.search_entry = None
        self.results_box = None
        self.results_scroll = None
        self.result_buttons = []
        self._rendered_results = None
        self._highlighted = None

        # Set while the panel writes to the entry itself
        self._syncing = False

        controller.connect("intent", self._on_intent)
        controller.connect("changed", self._on_changed)

    def create_window(self):
        """
        Create the launcher window, hidden and compact.

        Returns:
            widgets.Window (or widgets.RegularWindow in test mode)
        """
        self.search_entry = widgets.Entry(
            placeholder_text="Search applications...",
            css_classes=["search-entry"],
            on_change=lambda x: self._on_search_changed(),
        )

        self.results_box = widgets.Box(
            vertical=True,
            spacing=1,
            css_classes=["search-results"],
        )
        self.results_scroll = widgets.Scroll(
            vexpand=True,
            hexpand=True,
            visible=False,
            child=self.results_box,
        )

        content = widgets.Box(
            vertical=True,
            css_classes=["panel", "search-panel"],
            child=[self.search_entry, self.results_scroll],
        )

        if is_test_mode(self.settings):
            self.window = widgets.RegularWindow(
                namespace="quicklaunch-search",
                title="Quicklaunch",
                default_width=self.sizes.width,
                default_height=self.sizes.compact_height,
                visible=False,
                child=content,
            )
        else:
            self.window = widgets.Window(
                namespace="quicklaunch-search",
                anchor=["top"],
                exclusivity="normal",
                kb_mode="on_demand",
                layer="overlay",
                default_width=self.sizes.width,
                default_height=self.sizes.compact_height,
                visible=False,
                child=content,
            )

        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_press)
        self.window.add_controller(key_controller)

        self._render(self.controller.snapshot)
        return self.window

    # Controller -> widgets

    def _on_intent(self, intent):
        if self.window is None:
            return

        if isinstance(intent, Show):
            self.window.set_visible(True)
            self.search_entry.grab_focus()
        elif isinstance(intent, Hide):
            self.window.set_visible(False)
        elif isinstance(intent, ResizeTo):
            self.window.set_default_size(intent.width, intent.height)

    def _on_changed(self, snapshot: LauncherSnapshot):
        if self.window is not None:
            self._render(snapshot)

    def _render(self, snapshot: LauncherSnapshot):
        # The entry owns the text while typing; only push cleared queries back
        if not snapshot.query and self.search_entry.text:
            self._syncing = True
            try:
                self.search_entry.set_text("")
            finally:
                self._syncing = False

        self.results_scroll.set_visible(snapshot.visibility is Visibility.EXPANDED)

        if snapshot.results != self._rendered_results:
            self._update_results(snapshot.results)
        self._update_selection_highlight(snapshot.selected_index)
        self._scroll_to_selected(snapshot.selected_index)

    def _update_results(self, results):
        """Rebuild results list from the snapshot."""
        child = self.results_box.get_first_child()
        while child:
            next_child = child.get_next_sibling()
            self.results_box.remove(child)
            child = next_child

        self.result_buttons = []
        for row, entry in enumerate(results):
            button = self._create_result_button(entry, row)
            self.results_box.append(button)
            self.result_buttons.append(button)

        self._rendered_results = results
        self._highlighted = None

    def _update_selection_highlight(self, selected_index: int):
        """Move the keyboard highlight without touching the other rows."""
        if selected_index == self._highlighted:
            return
        if self._highlighted is not None and self._highlighted < len(self.result_buttons):
            self.result_buttons[self._highlighted].remove_css_class("keyboard-selected")
        if 0 <= selected_index < len(self.result_buttons):
            self.result_buttons[selected_index].add_css_class("keyboard-selected")
            self._highlighted = selected_index
        else:
            self._highlighted = None

    def _scroll_to_selected(self, selected_index: int):
        """Scroll just far enough to keep the selected row visible."""
        if not 0 <= selected_index < len(self.result_buttons):
            return

        button = self.result_buttons[selected_index]
        found, _x, y = button.translate_coordinates(self.results_box, 0, 0)
        if not found:
            return

        adjustment = self.results_scroll.get_vadjustment()
        top = adjustment.get_value()
        page = adjustment.get_page_size()
        height = button.get_height()

        if y < top:
            adjustment.set_value(y)
        elif y + height > top + page:
            adjustment.set_value(y + height - page)

    def _create_result_button(self, entry, row: int):
        """
        Create a row for one application.

        Args:
            entry: AppEntry to display
            row: Position in the current results

        Returns:
            widgets.Button with icon and name
        """
        button = widgets.Button(
            css_classes=["app-item", "result-item"],
            child=widgets.Box(
                spacing=12,
                child=[
                    widgets.Icon(
                        image=entry.icon or DEFAULT_ICON,
                        pixel_size=32,
                        css_classes=["app-icon"],
                    ),
                    widgets.Label(
                        label=entry.name,
                        css_classes=["app-name"],
                        ellipsize="end",
                        max_width_chars=45,
                    ),
                ],
            ),
        )

        gesture = Gtk.GestureClick()
        gesture.set_button(1)
        gesture.connect("pressed", lambda g, n, x, y, row=row: self.controller.post(Click(row)))
        button.add_controller(gesture)

        return button

    # Widgets -> controller

    def _on_search_changed(self):
        if self._syncing:
            return
        self.controller.post(QueryChanged(self.search_entry.text))

    def _on_key_press(self, controller, keyval, keycode, state):
        """Arrows move the selection, Enter launches, Escape closes."""
        if keyval == Gdk.KEY_Escape:
            self.controller.post(EscapePressed())
            return True
        if keyval == Gdk.KEY_Down:
            self.controller.post(MoveSelection(1))
            return True
        if keyval == Gdk.KEY_Up:
            self.controller.post(MoveSelection(-1))
            return True
        if keyval in (Gdk.KEY_Return, Gdk.KEY_KP_Enter):
            self.controller.post(Submit())
            return True

        logger.trace(f"Unhandled key {keyval}")
        return False
