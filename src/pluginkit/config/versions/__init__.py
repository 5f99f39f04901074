"""Configuration version handling.

- Version: dotted-integer version values with zero-padded comparison
- AcceptedVersions / VersionRange: rules deciding whether a stored
  configuration is current enough to keep
"""

from .rules import AcceptanceRule, AcceptedVersions, VersionRange
from .version import Version, compare

__all__ = [
    "AcceptanceRule",
    "AcceptedVersions",
    "Version",
    "VersionRange",
    "compare",
]
