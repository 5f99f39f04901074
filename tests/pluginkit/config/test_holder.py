"""Tests for ConfigurationHolder."""

import pytest

from pluginkit.config import ConfigurationDocument, ConfigurationHolder, DocumentParseError


class TestConfigurationHolder:
    """Test holder construction, identity and document swapping."""

    def test_parses_default_content_eagerly(self, tmp_path):
        """Should fail at construction when the default content is broken."""
        with pytest.raises(DocumentParseError):
            ConfigurationHolder(tmp_path / "config.yml", "Version: [broken\n")

    def test_properties(self, make_holder, plugin_dir, default_config):
        """Should expose path, name and defaults."""
        holder = make_holder("messages.yml")

        assert holder.path == plugin_dir / "messages.yml"
        assert holder.name == "messages"
        assert holder.default_content == default_config
        assert holder.default_document == ConfigurationDocument.parse(default_config)

    def test_current_starts_as_default(self, make_holder):
        """Should serve the default document until a load replaces it."""
        holder = make_holder()
        assert holder.current() is holder.default_document

    def test_replace(self, make_holder):
        """Should swap the current document without touching the defaults."""
        holder = make_holder()
        document = ConfigurationDocument.parse("Version: '3.0'\n")

        holder.replace(document)

        assert holder.current() is document
        assert holder.default_document.get_string("Version") == "2.0"

    def test_equality_uses_normalized_path(self, tmp_path):
        """Should treat paths that resolve to the same file as one holder."""
        first = ConfigurationHolder(tmp_path / "a" / ".." / "a" / "config.yml", "")
        second = ConfigurationHolder(tmp_path / "a" / "config.yml", "Other: 1\n")

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_different_paths_differ(self, make_holder):
        """Should distinguish holders for different files."""
        assert make_holder("config.yml") != make_holder("messages.yml")

    def test_not_equal_to_other_types(self, make_holder):
        """Should not compare equal to paths or strings."""
        holder = make_holder()
        assert holder != holder.path
        assert holder != holder.key
