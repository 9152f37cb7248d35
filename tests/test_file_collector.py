"""Tests for local path resolution, enumeration and key derivation."""
import os
from pathlib import Path, PurePosixPath, PureWindowsPath

import pytest

from dogeup.errors import PathNotFoundError, UnsupportedPathTypeError
from dogeup.orchestrator.file_collector import FileCollector, default_workspace
from dogeup.orchestrator.keys import derive_key, normalize_separators


@pytest.fixture
def dist(tmp_path):
    root = tmp_path / "dist"
    (root / "css").mkdir(parents=True)
    (root / "js" / "vendor").mkdir(parents=True)
    (root / "index.html").write_text("<html></html>")
    (root / "a.js").write_text("a")
    (root / "css" / "b.css").write_text("b")
    (root / "js" / "vendor" / "c.js").write_text("c")
    return root


class TestResolvePath:
    def test_relative_path_joins_workspace(self, dist, tmp_path):
        assert FileCollector.resolve_path("dist", tmp_path) == dist

    def test_absolute_path_ignores_workspace(self, dist):
        assert FileCollector.resolve_path(str(dist), Path("/elsewhere")) == dist

    def test_missing_path(self, tmp_path):
        with pytest.raises(PathNotFoundError, match="missing"):
            FileCollector.resolve_path("missing", tmp_path)

    def test_default_workspace_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GITHUB_WORKSPACE", str(tmp_path))
        assert default_workspace() == tmp_path

    def test_default_workspace_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITHUB_WORKSPACE", raising=False)
        monkeypatch.chdir(tmp_path)
        assert default_workspace() == Path(os.getcwd())


class TestCollect:
    def test_directory_is_walked_recursively(self, dist):
        base_dir, entries = FileCollector().collect(dist)

        assert base_dir == dist
        relative = [entry.relative_path.as_posix() for entry in entries]
        assert sorted(relative) == ["a.js", "css/b.css", "index.html", "js/vendor/c.js"]
        assert len(set(relative)) == len(relative)
        assert all(entry.absolute_path.is_file() for entry in entries)

    def test_walk_order_is_deterministic_depth_first(self, dist):
        collector = FileCollector()
        first = [e.relative_path.as_posix() for e in collector.collect(dist)[1]]
        second = [e.relative_path.as_posix() for e in collector.collect(dist)[1]]

        assert first == second
        assert first == ["a.js", "css/b.css", "index.html", "js/vendor/c.js"]

    def test_empty_directory(self, tmp_path):
        empty = tmp_path / "empty"
        (empty / "nested").mkdir(parents=True)

        base_dir, entries = FileCollector().collect(empty)

        assert base_dir == empty
        assert entries == []

    def test_single_file_uses_parent_as_base(self, dist):
        base_dir, entries = FileCollector().collect(dist / "a.js")

        assert base_dir == dist
        assert len(entries) == 1
        assert entries[0].relative_path == Path("a.js")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinks_are_skipped(self, dist, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("x")
        os.symlink(outside, dist / "link.txt")
        os.symlink(dist / "css", dist / "css-link")

        _, entries = FileCollector().collect(dist)

        relative = {e.relative_path.as_posix() for e in entries}
        assert "link.txt" not in relative
        assert not any(r.startswith("css-link") for r in relative)
        assert len(entries) == 4

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="fifo unavailable")
    def test_special_files_are_skipped_inside_directory(self, dist):
        os.mkfifo(dist / "pipe")

        _, entries = FileCollector().collect(dist)

        assert "pipe" not in {e.relative_path.as_posix() for e in entries}
        assert len(entries) == 4

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="fifo unavailable")
    def test_special_file_as_root_is_unsupported(self, tmp_path):
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)

        with pytest.raises(UnsupportedPathTypeError):
            FileCollector().collect(fifo)

    def test_unreadable_entry_is_path_not_found(self, dist, monkeypatch):
        real_lstat = Path.lstat

        def lstat(self):
            if self.name == "b.css":
                raise PermissionError(13, "Permission denied", str(self))
            return real_lstat(self)

        monkeypatch.setattr(Path, "lstat", lstat)

        with pytest.raises(PathNotFoundError, match="b.css") as exc_info:
            FileCollector().collect(dist)

        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_resolve_combines_both_steps(self, dist, tmp_path):
        base_dir, entries = FileCollector().resolve("dist/css/b.css", tmp_path)

        assert base_dir == dist / "css"
        assert [e.relative_path for e in entries] == [Path("b.css")]


class TestDeriveKey:
    def test_no_prefix(self):
        assert derive_key(Path("index.js")) == "index.js"
        assert derive_key(Path("css") / "b.css") == "css/b.css"

    def test_prefix_trailing_slash_is_stripped(self):
        assert derive_key("index.js", "assets/") == "assets/index.js"
        assert derive_key("index.js", "assets") == "assets/index.js"
        assert derive_key("css/b.css", "static/assets//") == "static/assets/css/b.css"

    def test_empty_prefix_means_none(self):
        assert derive_key("a.js", "") == "a.js"
        assert derive_key("a.js", None) == "a.js"

    def test_windows_path_components(self):
        assert normalize_separators(PureWindowsPath("css\\b.css")) == "css/b.css"
        assert derive_key(PureWindowsPath("js\\vendor\\c.js"), "assets") == "assets/js/vendor/c.js"

    @pytest.mark.skipif(os.sep != "/", reason="backslash is a separator on this platform")
    def test_backslash_in_posix_filename_is_kept(self):
        assert derive_key(PurePosixPath("a\\b.txt")) == "a\\b.txt"
        assert derive_key("a\\b.txt", "assets") == "assets/a\\b.txt"

    @pytest.mark.skipif(os.sep != "/", reason="backslash is a separator on this platform")
    def test_keys_stay_distinct_for_backslash_names(self, tmp_path):
        root = tmp_path / "site"
        (root / "a").mkdir(parents=True)
        (root / "a" / "b.txt").write_text("nested")
        (root / "a\\b.txt").write_text("flat")

        _, entries = FileCollector().collect(root)
        keys = [derive_key(entry.relative_path) for entry in entries]

        assert len(keys) == 2
        assert sorted(keys) == ["a/b.txt", "a\\b.txt"]

    @pytest.mark.parametrize(
        "relative, prefix",
        [("a.js", None), (PureWindowsPath("css\\b.css"), "assets/"), ("js/vendor/c.js", "static")],
    )
    def test_normalization_is_idempotent(self, relative, prefix):
        once = derive_key(relative, prefix)
        assert derive_key(once) == once
        assert normalize_separators(once) == once
