"""Tests for version acceptance rules."""

import pytest

from pluginkit.config import AcceptedVersions, InvalidVersionFormat, Version, VersionRange


class TestAcceptedVersions:
    """Test exact version sets."""

    def test_accepts_listed_versions(self):
        """Should accept only the listed versions."""
        rule = AcceptedVersions(["2.0", Version("2.1")])
        assert rule.accepts(Version("2.0"))
        assert rule.accepts(Version("2.1"))
        assert not rule.accepts(Version("1.9"))
        assert not rule.accepts(Version("2.2"))

    def test_accepts_zero_padded_equivalent(self):
        """Should accept versions that differ only by trailing zeros."""
        assert AcceptedVersions(["2.0"]).accepts(Version("2.0.0"))

    def test_requires_a_version(self):
        """Should reject an empty set."""
        with pytest.raises(ValueError, match="at least one version"):
            AcceptedVersions([])

    def test_rejects_malformed_version(self):
        """Should validate version strings."""
        with pytest.raises(InvalidVersionFormat):
            AcceptedVersions(["2"])


class TestVersionRange:
    """Test inclusive version ranges."""

    @pytest.mark.parametrize(
        "minimum,maximum,version,expected",
        [
            pytest.param("1.0", "2.0", "1.0", True, id="lower_bound_inclusive"),
            pytest.param("1.0", "2.0", "2.0.0", True, id="upper_bound_inclusive"),
            pytest.param("1.0", "2.0", "1.5.3", True, id="inside"),
            pytest.param("1.0", "2.0", "0.9", False, id="below"),
            pytest.param("1.0", "2.0", "2.0.1", False, id="above"),
            pytest.param("1.0", None, "99.0", True, id="open_maximum"),
            pytest.param(None, "2.0", "0.0.1", True, id="open_minimum"),
            pytest.param(None, "2.0", "2.1", False, id="open_minimum_above"),
        ],
    )
    def test_accepts(self, minimum, maximum, version, expected):
        """Should accept versions within the bounds."""
        assert VersionRange(minimum, maximum).accepts(Version(version)) is expected

    def test_requires_a_bound(self):
        """Should reject a range without bounds."""
        with pytest.raises(ValueError, match="minimum or a maximum"):
            VersionRange()

    def test_rejects_inverted_bounds(self):
        """Should reject a minimum above the maximum."""
        with pytest.raises(ValueError, match="greater than maximum"):
            VersionRange("3.0", "2.0")
