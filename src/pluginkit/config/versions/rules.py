"""Acceptance rules deciding whether an on-disk config version is current."""

from collections.abc import Iterable
from typing import Protocol

from pluginkit.config.versions.version import Version


class AcceptanceRule(Protocol):
    """Protocol for version acceptance rules."""

    def accepts(self, version: Version) -> bool:
        """Return True if a document with this version can be kept as-is."""
        ...


def _coerce(version: Version | str) -> Version:
    return version if isinstance(version, Version) else Version(version)


class AcceptedVersions:
    """Accepts an exact set of versions.

    Membership uses version equality, so ``"2.0"`` also accepts ``"2.0.0"``.
    """

    def __init__(self, versions: Iterable[Version | str]):
        self.versions = frozenset(_coerce(version) for version in versions)
        if not self.versions:
            raise ValueError("AcceptedVersions requires at least one version")

    def accepts(self, version: Version) -> bool:
        return version in self.versions

    def __repr__(self) -> str:
        listed = ", ".join(sorted(str(version) for version in self.versions))
        return f"AcceptedVersions({{{listed}}})"


class VersionRange:
    """Accepts versions between two inclusive bounds.

    Either bound may be None to leave that side open, but not both.
    """

    def __init__(
        self,
        minimum: Version | str | None = None,
        maximum: Version | str | None = None,
    ):
        if minimum is None and maximum is None:
            raise ValueError("VersionRange requires a minimum or a maximum version")

        self.minimum = _coerce(minimum) if minimum is not None else None
        self.maximum = _coerce(maximum) if maximum is not None else None

        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError(
                f"Minimum version {self.minimum} is greater than maximum {self.maximum}"
            )

    def accepts(self, version: Version) -> bool:
        if self.minimum is not None and version < self.minimum:
            return False
        if self.maximum is not None and version > self.maximum:
            return False
        return True

    def __repr__(self) -> str:
        return f"VersionRange(minimum={self.minimum!s}, maximum={self.maximum!s})"
