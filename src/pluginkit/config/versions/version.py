"""Dotted-integer version values."""

import functools
import re

from pluginkit.config.exceptions import InvalidVersionFormat

VERSION_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)+$")


@functools.total_ordering
class Version:
    """Immutable version such as ``1.2`` or ``2.0.13``.

    Components are compared left to right with missing trailing components
    treated as zero, so ``Version("1.2") == Version("1.2.0")``. The version
    string is kept verbatim for display and serialization.
    """

    __slots__ = ("_text", "_components")

    def __init__(self, version: str):
        if not isinstance(version, str) or not VERSION_PATTERN.fullmatch(version):
            raise InvalidVersionFormat(str(version))

        self._text = version
        self._components = tuple(int(node) for node in version.split("."))

    @classmethod
    def parse(cls, version: str) -> "Version":
        """Parse a version string.

        Raises:
            InvalidVersionFormat: If the string is not a dotted-integer version
        """
        return cls(version)

    @property
    def components(self) -> tuple[int, ...]:
        return self._components

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1 as this version is lower, equal or greater than ``other``."""
        length = max(len(self._components), len(other._components))

        for index in range(length):
            mine = self._components[index] if index < len(self._components) else 0
            theirs = other._components[index] if index < len(other._components) else 0

            if mine < theirs:
                return -1
            if mine != theirs:
                return 1

        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        components = list(self._components)
        while components and components[-1] == 0:
            components.pop()
        return hash(tuple(components))

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Version('{self._text}')"


def compare(a: Version, b: Version) -> int:
    """Compare two versions, returning -1, 0 or 1."""
    return a.compare(b)
