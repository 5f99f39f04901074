"""Tests for file system helpers."""

import pytest

from pluginkit.system import path_utils


class TestNextDuplicateName:
    """Test duplicate name generation."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            pytest.param("config.yml", "config (1).yml", id="first_duplicate"),
            pytest.param("config (1).yml", "config (2).yml", id="second_duplicate"),
            pytest.param("config (3).yml", "config (4).yml", id="increments_existing"),
            pytest.param("config (9).yml", "config (10).yml", id="more_digits"),
            pytest.param("config (a).yml", "config (a) (1).yml", id="non_integer_suffix"),
            pytest.param("archive", "archive (1)", id="no_extension"),
            pytest.param("data.tar.gz", "data.tar (1).gz", id="last_extension_only"),
            pytest.param("outdated config.yml", "outdated config (1).yml", id="spaces"),
            pytest.param("a b(3).yml", "a b (4).yml", id="adds_space_before_counter"),
            pytest.param("config(3).yml", "config(4).yml", id="keeps_missing_space"),
            pytest.param("outdated config (2).yml", "outdated config (3).yml", id="one_space"),
        ],
    )
    def test_next_duplicate_name(self, name, expected):
        """Should append or increment the parenthesized counter."""
        assert path_utils.next_duplicate_name(name) == expected


class TestUniquePath:
    """Test free path allocation."""

    def test_free_path_is_returned_unchanged(self, tmp_path):
        """Should return the path itself when nothing is there."""
        path = tmp_path / "config.yml"
        assert path_utils.unique_path(path) == path

    def test_skips_existing_duplicates(self, tmp_path):
        """Should return the first free name in the series."""
        for name in ("config.yml", "config (1).yml", "config (2).yml"):
            (tmp_path / name).write_text("", encoding="utf-8")

        assert path_utils.unique_path(tmp_path / "config.yml") == tmp_path / "config (3).yml"

    def test_continues_from_numbered_path(self, tmp_path):
        """Should count up from a path that already carries a counter."""
        (tmp_path / "config (3).yml").write_text("", encoding="utf-8")

        assert path_utils.unique_path(tmp_path / "config (3).yml") == tmp_path / "config (4).yml"

    def test_successive_allocations_differ(self, tmp_path):
        """Should move on once the returned path has been created."""
        first = path_utils.unique_path(tmp_path / "config.yml")
        first.write_text("", encoding="utf-8")
        second = path_utils.unique_path(tmp_path / "config.yml")

        assert first != second
        assert second == tmp_path / "config (1).yml"

    def test_directories(self, tmp_path):
        """Should treat existing directories as taken."""
        (tmp_path / "backups").mkdir()
        assert path_utils.unique_path(tmp_path / "backups") == tmp_path / "backups (1)"

    def test_does_not_create_anything(self, tmp_path):
        """Should only compute the path."""
        path_utils.unique_path(tmp_path / "config.yml")
        assert list(tmp_path.iterdir()) == []


class TestReadWrite:
    """Test reading and writing files."""

    def test_write_creates_parents(self, tmp_path):
        """Should create missing parent directories."""
        path = tmp_path / "plugins" / "MyPlugin" / "config.yml"
        path_utils.write_text("Version: '1.0'\n", path)
        assert path.read_text(encoding="utf-8") == "Version: '1.0'\n"

    def test_write_keeps_exact_bytes(self, tmp_path):
        """Should not translate newlines."""
        path = tmp_path / "config.yml"
        path_utils.write_text("a: 1\r\nb: 2\n", path)
        assert path.read_bytes() == b"a: 1\r\nb: 2\n"

    def test_write_to_directory_fails(self, tmp_path):
        """Should refuse to write over a directory."""
        with pytest.raises(IsADirectoryError):
            path_utils.write_text("content", tmp_path)

    def test_read_missing_returns_none(self, tmp_path):
        """Should return None for missing files and directories."""
        assert path_utils.read_text(tmp_path / "missing.yml") is None
        assert path_utils.read_text(tmp_path) is None

    def test_read_existing(self, tmp_path):
        """Should read file content."""
        path = tmp_path / "config.yml"
        path.write_text("Version: '1.0'\n", encoding="utf-8")
        assert path_utils.read_text(path) == "Version: '1.0'\n"

