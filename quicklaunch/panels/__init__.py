# Quicklaunch Panels Package
"""
UI panels for the Quicklaunch launcher.

Panels:
  - SearchPanel: floating search box with expandable results
"""

from .search import SearchPanel

__all__ = ["SearchPanel"]
