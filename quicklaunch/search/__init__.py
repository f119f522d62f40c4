"""
Search package - Prefix search over the application index.

Queries are trimmed and lowercased, then matched against the start of each
application name. Results are ordered alphabetically.
"""

from .engine import SearchEngine, filter_apps, normalize_query

__all__ = ["SearchEngine", "filter_apps", "normalize_query"]
