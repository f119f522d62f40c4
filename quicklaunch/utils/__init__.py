# Quicklaunch Utilities Package
"""
Shared utility functions and helpers for the Quicklaunch launcher.
"""

from .helpers import is_test_mode, load_settings, window_sizes

__all__ = ["is_test_mode", "load_settings", "window_sizes"]
