# Quicklaunch Services Package
"""
Backend services for the Quicklaunch launcher.

Services handle application discovery, process launching, and hotkey delivery.
"""

from .app_index import AppEntry, ApplicationIndex, build_index, default_directories
from .hotkey import HotkeySource
from .index_builder import IndexBuilder
from .process import ProcessLauncher

__all__ = [
    "AppEntry",
    "ApplicationIndex",
    "build_index",
    "default_directories",
    "HotkeySource",
    "IndexBuilder",
    "ProcessLauncher",
]
