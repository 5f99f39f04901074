"""Pairing of a configuration file's default content with its live document."""

import os
import threading
from pathlib import Path

from pluginkit.config.document import ConfigurationDocument


def normalize_path(path: Path) -> str:
    """Normalized absolute form of a path, used as the identity of a holder."""
    return os.path.normcase(os.path.abspath(path))


class ConfigurationHolder:
    """Holds the default and the current document for one configuration file.

    The default content is parsed on construction, so a broken hard-coded
    default fails immediately instead of on first load. Until a loader
    replaces it, the current document is the default document.

    Holders compare equal when their normalized paths are equal.
    """

    def __init__(self, path: Path, default_content: str):
        """Initialize ConfigurationHolder.

        Args:
            path: Destination file of this configuration
            default_content: Raw document text written when the file is missing or outdated

        Raises:
            DocumentParseError: If default_content is not a valid document
        """
        self._default_document = ConfigurationDocument.parse(default_content)
        self._path = Path(path)
        self._key = normalize_path(self._path)
        self._default_content = default_content
        self._document = self._default_document
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        """Normalized path string identifying this holder."""
        return self._key

    @property
    def name(self) -> str:
        """File name without its extension."""
        return self._path.stem

    @property
    def default_content(self) -> str:
        return self._default_content

    @property
    def default_document(self) -> ConfigurationDocument:
        return self._default_document

    def current(self) -> ConfigurationDocument:
        """Return the latest successfully loaded document."""
        with self._lock:
            return self._document

    def replace(self, document: ConfigurationDocument) -> None:
        """Swap in a freshly loaded document."""
        with self._lock:
            self._document = document

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationHolder):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return f"ConfigurationHolder(path={str(self._path)!r})"
