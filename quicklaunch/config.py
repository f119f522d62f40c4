"""
Quicklaunch - Main Ignis Configuration

This file is the entry point for Ignis. It loads settings, builds the
application index, and wires the controller to the search window and the
toggle hotkey.

Bind the toggle chord in the compositor to send SIGUSR1, e.g. for Hyprland:
  bind = SUPER, SPACE, exec, pkill -USR1 -f "ignis init"

Usage:
  ignis init -c /path/to/quicklaunch/config.py
"""

import signal

from gi.repository import GLib
from ignis.app import IgnisApp
from loguru import logger

from quicklaunch.controller import LauncherController
from quicklaunch.panels.search import SearchPanel
from quicklaunch.services import HotkeySource, IndexBuilder, ProcessLauncher
from quicklaunch.utils.helpers import load_settings, window_sizes

app = IgnisApp.get_default()
settings = load_settings()

index_builder = IndexBuilder(
    directories=settings["index"]["directories"],
    suffix=settings["index"]["bundle_suffix"],
    max_age_seconds=settings["index"]["max_age_seconds"],
)

controller = LauncherController(
    index=index_builder.build_now(),
    index_builder=index_builder,
    process_launcher=ProcessLauncher(settings["launcher"]["open_command"]),
    sizes=window_sizes(settings),
    scheduler=GLib.idle_add,
)

search_panel = SearchPanel(controller, settings)
search_window = search_panel.create_window()
search_window.panel = search_panel

hotkey = HotkeySource()
controller.attach_hotkey(hotkey)


def _on_toggle_signal():
    hotkey.fire()
    return GLib.SOURCE_CONTINUE


GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signal.SIGUSR1, _on_toggle_signal)
app.connect("shutdown", lambda *_: controller.shutdown())

logger.info(f"Quicklaunch initialized with {len(controller.index)} applications")
logger.info(f"Send SIGUSR1 ({hotkey.chord}) to toggle the launcher")
