"""
Tests for application discovery and index construction.

Uses real directory trees under tmp_path.
"""

import os
import plistlib

from quicklaunch.services.app_index import (
    AppEntry,
    ApplicationIndex,
    build_index,
    collation_key,
    default_directories,
    enumerate_bundles,
    resolve_icon,
    sort_key,
)

from conftest import make_bundle


class TestAppEntry:
    """Test entry identity."""

    def test_equal_on_name_and_path(self):
        a = AppEntry(name="Safari", path="/Applications/Safari.app")
        b = AppEntry(name="Safari", path="/Applications/Safari.app")
        assert a == b
        assert hash(a) == hash(b)

    def test_icon_excluded_from_identity(self):
        a = AppEntry(name="Safari", path="/Applications/Safari.app", icon="safari")
        b = AppEntry(name="Safari", path="/Applications/Safari.app", icon=None)
        assert a == b
        assert len({a, b}) == 1

    def test_different_path_is_different_entry(self):
        a = AppEntry(name="Safari", path="/Applications/Safari.app")
        b = AppEntry(name="Safari", path="/Users/me/Applications/Safari.app")
        assert a != b


class TestEnumerateBundles:
    """Test the directory enumerator."""

    def test_reports_bundles_and_other_entries(self, apps_root):
        found = dict(enumerate_bundles(str(apps_root), ".app"))
        assert found["Safari.app"] is True
        assert found[os.path.join("Utilities", "Terminal.app")] is True
        assert found["Utilities"] is False
        assert found["README.txt"] is False

    def test_does_not_descend_into_bundles(self, apps_root):
        paths = [rel for rel, _ in enumerate_bundles(str(apps_root), ".app")]
        assert not any("Instruments" in p for p in paths)
        assert not any("Contents" in p for p in paths)

    def test_skips_hidden_entries(self, apps_root):
        paths = [rel for rel, _ in enumerate_bundles(str(apps_root), ".app")]
        assert ".Hidden.app" not in paths

    def test_suffix_match_is_case_sensitive(self, tmp_path):
        make_bundle(tmp_path, "Loud.APP")
        make_bundle(tmp_path, "Quiet.app")
        bundles = [rel for rel, is_bundle in enumerate_bundles(str(tmp_path), ".app") if is_bundle]
        assert bundles == ["Quiet.app"]

    def test_missing_root_yields_nothing(self, tmp_path):
        assert list(enumerate_bundles(str(tmp_path / "nope"), ".app")) == []


class TestBuildIndex:
    """Test index construction from real directories."""

    def test_names_strip_suffix(self, apps_root):
        index = build_index([str(apps_root)])
        names = [e.name for e in index]
        assert "Safari" in names
        assert "Terminal" in names

    def test_paths_join_root_and_relative_path(self, apps_root):
        index = build_index([str(apps_root)])
        by_name = {e.name: e for e in index}
        assert by_name["Terminal"].path == os.path.join(str(apps_root), "Utilities", "Terminal.app")

    def test_nested_helpers_and_hidden_bundles_excluded(self, apps_root):
        names = [e.name for e in build_index([str(apps_root)])]
        assert "Instruments" not in names
        assert ".Hidden" not in names
        assert "Xcode" in names

    def test_sorted_case_insensitively(self, apps_root):
        names = [e.name for e in build_index([str(apps_root)])]
        assert names == ["Calculator", "calendar", "Safari", "Terminal", "Xcode"]

    def test_overlapping_roots_are_deduplicated(self, apps_root):
        index = build_index([str(apps_root), str(apps_root / "Utilities"), str(apps_root)])
        terminals = [e for e in index if e.name == "Terminal"]
        assert len(terminals) == 1
        assert len(index) == 5

    def test_trailing_slash_roots_deduplicate(self, apps_root):
        index = build_index([str(apps_root), str(apps_root) + os.sep])
        assert len(index) == 5

    def test_same_name_in_different_roots_kept(self, tmp_path):
        system = tmp_path / "System"
        user = tmp_path / "User"
        make_bundle(system, "Notes.app")
        make_bundle(user, "Notes.app")
        index = build_index([str(system), str(user)])
        assert [e.name for e in index] == ["Notes", "Notes"]
        assert len({e.path for e in index}) == 2

    def test_order_independent_of_root_order(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"
        for name in ("Zed", "alpha", "Beta"):
            make_bundle(first, f"{name}.app")
        for name in ("Alpha", "beta", "zed"):
            make_bundle(second, f"{name}.app")

        forward = build_index([str(first), str(second)])
        backward = build_index([str(second), str(first)])
        assert [e.name for e in forward] == [e.name for e in backward]
        assert [e.name for e in forward] == ["Alpha", "alpha", "Beta", "beta", "Zed", "zed"]

    def test_accented_names_sort_with_their_base_letter(self, tmp_path):
        for name in ("Zoom", "Éclair", "Editor", "Ångström"):
            make_bundle(tmp_path, f"{name}.app")
        names = [e.name for e in build_index([str(tmp_path)])]
        assert names == ["Ångström", "Éclair", "Editor", "Zoom"]

    def test_empty_roots_build_empty_index(self, tmp_path):
        index = build_index([str(tmp_path)])
        assert len(index) == 0
        assert list(index) == []

    def test_generation_is_stamped(self, apps_root):
        index = build_index([str(apps_root)], generation=7)
        assert index.generation == 7
        assert index.built_at > 0

    def test_custom_enumerator(self):
        def fake_enumerate(root, suffix):
            yield "Tools", False
            yield "Tools/Hammer.app", True

        index = build_index(["/opt/apps"], enumerate_root=fake_enumerate)
        assert list(index) == [AppEntry(name="Hammer", path="/opt/apps/Tools/Hammer.app")]


class TestApplicationIndex:
    """Test the snapshot container."""

    def test_empty_index(self):
        index = ApplicationIndex.empty()
        assert len(index) == 0
        assert index.generation == 0

    def test_indexable(self, sample_index):
        assert sample_index[0].name == "1Password"


class TestDefaultDirectories:
    def test_standard_roots_in_order(self):
        dirs = default_directories()
        assert dirs[:3] == ["/Applications", "/System/Applications", "/Applications/Utilities"]
        assert dirs[3].endswith("Applications")
        assert not dirs[3].startswith("~")


class TestCollation:
    """Ordering ignores case and accents without consulting the locale."""

    def test_folds_accents_and_case(self):
        assert collation_key("Éclair") == "eclair"
        assert collation_key("ÅNGSTRÖM") == "angstrom"

    def test_accented_and_plain_names_interleave(self):
        entries = [
            AppEntry(name=name, path=f"/Applications/{name}.app")
            for name in ("Écran", "Ecran", "Zephyr", "édition", "Dock")
        ]
        ordered = [e.name for e in sorted(entries, key=sort_key)]
        assert ordered == ["Dock", "Ecran", "Écran", "édition", "Zephyr"]

    def test_ties_broken_by_path(self):
        a = AppEntry(name="Notes", path="/Applications/Notes.app")
        b = AppEntry(name="Notes", path="/Users/me/Applications/Notes.app")
        assert sorted([b, a], key=sort_key) == [a, b]


class TestResolveIcon:
    """Icons come from CFBundleIconFile in the bundle's Info.plist."""

    def _write_plist(self, bundle, data):
        with open(bundle / "Contents" / "Info.plist", "wb") as f:
            plistlib.dump(data, f)

    def test_icon_without_extension_gets_icns(self, tmp_path):
        bundle = make_bundle(tmp_path, "Safari.app")
        self._write_plist(bundle, {"CFBundleIconFile": "AppIcon"})
        (bundle / "Contents" / "Resources").mkdir()
        (bundle / "Contents" / "Resources" / "AppIcon.icns").write_bytes(b"icns")

        assert resolve_icon(str(bundle)) == str(bundle / "Contents" / "Resources" / "AppIcon.icns")

    def test_icon_with_extension(self, tmp_path):
        bundle = make_bundle(tmp_path, "Notes.app")
        self._write_plist(bundle, {"CFBundleIconFile": "notes.png"})
        (bundle / "Contents" / "Resources").mkdir()
        (bundle / "Contents" / "Resources" / "notes.png").write_bytes(b"png")

        assert resolve_icon(str(bundle)).endswith("notes.png")

    def test_declared_icon_missing_on_disk(self, tmp_path):
        bundle = make_bundle(tmp_path, "Ghost.app")
        self._write_plist(bundle, {"CFBundleIconFile": "Ghost"})
        assert resolve_icon(str(bundle)) is None

    def test_no_icon_key(self, tmp_path):
        bundle = make_bundle(tmp_path, "Plain.app")
        self._write_plist(bundle, {"CFBundleName": "Plain"})
        assert resolve_icon(str(bundle)) is None

    def test_malformed_plist(self, tmp_path):
        bundle = make_bundle(tmp_path, "Broken.app")
        (bundle / "Contents" / "Info.plist").write_bytes(b"<?xml version='1.0'?><plist><dict><key>")
        assert resolve_icon(str(bundle)) is None

    def test_missing_bundle(self, tmp_path):
        assert resolve_icon(str(tmp_path / "Nowhere.app")) is None

    def test_build_index_populates_icons(self, tmp_path):
        bundle = make_bundle(tmp_path, "Safari.app")
        self._write_plist(bundle, {"CFBundleIconFile": "AppIcon"})
        (bundle / "Contents" / "Resources").mkdir()
        (bundle / "Contents" / "Resources" / "AppIcon.icns").write_bytes(b"icns")
        make_bundle(tmp_path, "Bare.app")

        icons = {e.name: e.icon for e in build_index([str(tmp_path)])}
        assert icons["Safari"].endswith("AppIcon.icns")
        assert icons["Bare"] is None
