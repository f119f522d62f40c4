"""
Application Index - Discover installed application bundles.

Scans an ordered list of root directories for entries ending in the bundle
suffix (".app" by default), collapses duplicates reached through overlapping
roots, and sorts the result by name, ignoring case and accents.

An index is an immutable snapshot. Rebuilding produces a new index with a
higher generation number; nothing is updated in place.
"""

import os
import plistlib
import time
import unicodedata
import xml.parsers.expat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from loguru import logger

BUNDLE_SUFFIX = ".app"

# (relative_path, is_bundle) pairs for one root
Enumerator = Callable[[str, str], Iterable[tuple[str, bool]]]


@dataclass(frozen=True)
class AppEntry:
    """A single discoverable application. Identity is (name, path) only."""
    name: str
    path: str
    icon: Optional[str] = field(default=None, compare=False, hash=False)


def collation_key(name: str) -> str:
    """
    Fold a name for ordering: decompose, drop combining marks, casefold.

    Independent of the process locale, so "Éclair" sorts beside "Editor"
    on every machine.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def sort_key(entry: AppEntry) -> tuple[str, str, str]:
    """Accent- and case-insensitive name order, ties broken by the raw name, then path."""
    return collation_key(entry.name), entry.name, entry.path


@dataclass(frozen=True)
class ApplicationIndex:
    """Immutable, alphabetically ordered sequence of AppEntry."""
    entries: tuple[AppEntry, ...] = ()
    generation: int = 0
    built_at: float = 0.0

    @classmethod
    def empty(cls) -> "ApplicationIndex":
        return cls()

    def __iter__(self) -> Iterator[AppEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index):
        return self.entries[index]


def default_directories() -> list[str]:
    """
    Standard application roots, in scan order.

    Returns:
        Primary, system, utilities and per-user application folders
    """
    return [
        "/Applications",
        "/System/Applications",
        "/Applications/Utilities",
        str(Path.home() / "Applications"),
    ]


def enumerate_bundles(root: str, suffix: str = BUNDLE_SUFFIX) -> Iterator[tuple[str, bool]]:
    """
    Walk a root directory and yield every visible entry below it.

    Bundles are reported but never descended into, so helper bundles nested
    inside an application are not listed. Missing or unreadable directories
    yield nothing.

    Args:
        root: Directory to scan
        suffix: Case-sensitive bundle suffix

    Yields:
        Tuples of (relative_path, is_bundle)
    """
    def _on_error(error: OSError):
        logger.debug(f"Skipping unreadable directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel_dir = os.path.relpath(dirpath, root)

        visible_dirs = sorted(d for d in dirnames if not d.startswith("."))
        dirnames[:] = [d for d in visible_dirs if not _is_bundle(d, suffix)]
        visible_files = sorted(f for f in filenames if not f.startswith("."))

        for name in visible_dirs + visible_files:
            rel_path = name if rel_dir == os.curdir else os.path.join(rel_dir, name)
            yield rel_path, _is_bundle(name, suffix)


def _is_bundle(name: str, suffix: str) -> bool:
    return len(name) > len(suffix) and name.endswith(suffix)


def resolve_icon(bundle_path: str) -> Optional[str]:
    """
    Find the icon file declared by a bundle.

    Reads CFBundleIconFile from Contents/Info.plist and looks for it in
    Contents/Resources, adding the .icns extension when the plist omits it.

    Returns:
        Absolute icon path, or None if the bundle declares no usable icon
    """
    contents = Path(bundle_path) / "Contents"
    try:
        with open(contents / "Info.plist", "rb") as f:
            info = plistlib.load(f)
    except (OSError, ValueError, xml.parsers.expat.ExpatError):
        return None

    if not isinstance(info, dict):
        return None
    icon_file = info.get("CFBundleIconFile")
    if not isinstance(icon_file, str) or not icon_file:
        return None

    if not os.path.splitext(icon_file)[1]:
        icon_file += ".icns"
    icon_path = contents / "Resources" / icon_file
    return str(icon_path) if icon_path.is_file() else None


def build_index(
    directories: Iterable[str],
    suffix: str = BUNDLE_SUFFIX,
    generation: int = 0,
    enumerate_root: Enumerator = enumerate_bundles,
    clock: Callable[[], float] = time.monotonic,
) -> ApplicationIndex:
    """
    Build an index snapshot from the given roots.

    Args:
        directories: Ordered roots to scan (~ is expanded)
        suffix: Bundle suffix to match and strip from names
        generation: Build counter value stamped on the snapshot
        enumerate_root: Directory enumerator, (root, suffix) -> (rel_path, is_bundle)
        clock: Time source stamped on the snapshot once the scan finishes

    Returns:
        ApplicationIndex sorted by name, free of exact duplicates
    """
    found: set[AppEntry] = set()
    roots = [os.path.normpath(os.path.expanduser(str(d))) for d in directories]

    for root in roots:
        root_entries = []
        try:
            for rel_path, is_bundle in enumerate_root(root, suffix):
                if not is_bundle:
                    continue
                leaf = os.path.basename(rel_path)
                path = os.path.join(root, rel_path)
                root_entries.append(AppEntry(
                    name=leaf[:-len(suffix)],
                    path=path,
                    icon=resolve_icon(path),
                ))
        except OSError as e:
            # A root that fails mid-scan contributes nothing
            logger.debug(f"Skipping {root}: {e}")
            continue

        before = len(found)
        found.update(root_entries)
        logger.debug(f"{root}: {len(found) - before} new applications")

    entries = tuple(sorted(found, key=sort_key))
    logger.debug(f"Indexed {len(entries)} applications from {len(roots)} roots")

    return ApplicationIndex(
        entries=entries,
        generation=generation,
        built_at=clock(),
    )
