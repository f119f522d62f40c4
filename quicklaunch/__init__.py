# Quicklaunch Package
"""
Hotkey-driven application launcher for Ignis.

Pieces:
  - services: application index, background builds, process launching, hotkey
  - search: prefix search over the index
  - controller: visibility/selection state machine
  - panels: Ignis rendering surface
"""

__version__ = "0.1.0.dev0"
