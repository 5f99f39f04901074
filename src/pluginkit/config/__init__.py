"""pluginkit configuration package.

This package provides versioned, comment-preserving configuration files:
- ConfigurationDocument: ordered key/value documents that keep comments
- ConfigurationHolder: default and live document for one file
- ConfigurationLoader: migration of outdated files and default restoration
- Version tracking and acceptance rules
"""

from .document import Comment, ConfigurationDocument, MappingGroup
from .exceptions import (
    ConfigurationError,
    DocumentParseError,
    InvalidKey,
    InvalidKeyQuoting,
    InvalidVersionFormat,
)
from .holder import ConfigurationHolder
from .loader import ConfigurationLoader
from .models import LoadOutcome, LoadStatus, LoggingConfig
from .versions import AcceptedVersions, Version, VersionRange

__all__ = [
    "AcceptedVersions",
    "Comment",
    "ConfigurationDocument",
    "ConfigurationError",
    "ConfigurationHolder",
    "ConfigurationLoader",
    "DocumentParseError",
    "InvalidKey",
    "InvalidKeyQuoting",
    "InvalidVersionFormat",
    "LoadOutcome",
    "LoadStatus",
    "LoggingConfig",
    "MappingGroup",
    "Version",
    "VersionRange",
]
