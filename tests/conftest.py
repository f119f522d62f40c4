"""
Shared test fixtures for the Quicklaunch test suite.

Provides real application trees in temporary directories (no mocking of
the filesystem) and prebuilt index snapshots.
"""

from pathlib import Path

import pytest
import toml

from quicklaunch.services.app_index import AppEntry, ApplicationIndex, sort_key

SAMPLE_APPS = [
    "Cursor",
    "Cider",
    "1Password",
    "Calculator",
    "Calendar",
    "Chrome",
    "Safari",
    "Spotify",
    "System Preferences",
    "Terminal",
    "App Store",
    "AppCleaner",
]


def make_bundle(root: Path, rel_path: str) -> Path:
    """Create a minimal bundle directory with a Contents folder."""
    bundle = root / rel_path
    (bundle / "Contents").mkdir(parents=True)
    (bundle / "Contents" / "Info.plist").write_text("<plist/>")
    return bundle


def make_index(names, generation: int = 1, root: str = "/Applications") -> ApplicationIndex:
    entries = {AppEntry(name=name, path=f"{root}/{name}.app") for name in names}
    return ApplicationIndex(
        entries=tuple(sorted(entries, key=sort_key)),
        generation=generation,
        built_at=0.0,
    )


@pytest.fixture
def apps_root(tmp_path):
    """
    Create an Applications tree:

        Applications/
          Safari.app, Calculator.app, calendar.app
          Utilities/Terminal.app
          Xcode.app/Contents/Helpers/Instruments.app   (nested, not listed)
          .Hidden.app                                  (hidden, not listed)
          README.txt
    """
    root = tmp_path / "Applications"
    root.mkdir()
    make_bundle(root, "Safari.app")
    make_bundle(root, "Calculator.app")
    make_bundle(root, "calendar.app")
    make_bundle(root, "Utilities/Terminal.app")
    make_bundle(root, "Xcode.app")
    make_bundle(root, "Xcode.app/Contents/Helpers/Instruments.app")
    make_bundle(root, ".Hidden.app")
    (root / "README.txt").write_text("not an app")
    return root


@pytest.fixture
def sample_index():
    """Index over the standard sample application names."""
    return make_index(SAMPLE_APPS)


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file overriding a few values."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "index": {"directories": ["/Applications", "~/Applications"], "max_age_seconds": 60},
        "window": {"expanded_height": 480},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
