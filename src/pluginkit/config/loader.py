"""Configuration loading with version-gated migration."""

import logging
import threading
from pathlib import Path

from pluginkit.config.document import ConfigurationDocument
from pluginkit.config.exceptions import DocumentParseError, InvalidVersionFormat
from pluginkit.config.holder import ConfigurationHolder, normalize_path
from pluginkit.config.models import LoadOutcome, LoadStatus
from pluginkit.config.versions import AcceptanceRule, Version, VersionRange
from pluginkit.system import path_utils

logger = logging.getLogger(__name__)

VERSION_KEY = "Version"
ARCHIVE_PREFIX = "outdated "


class ConfigurationLoader:
    """Reconciles registered configuration holders against their files on disk.

    Each ``load_all()`` writes defaults for missing files, archives files whose
    ``Version`` is missing or not accepted by the holder's rule, and swaps the
    freshly parsed document into every holder that loaded successfully.
    Registration may happen from any thread; the registry lock is never held
    while files are read or written.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._registry: dict[str, tuple[ConfigurationHolder, AcceptanceRule | None]] = {}

    def register(self, holder: ConfigurationHolder, rule: AcceptanceRule | None = None) -> None:
        """Register a holder, replacing any holder registered for the same path.

        Args:
            holder: Holder to update on load_all()
            rule: Versions the file may have to be kept, or None to skip the version check
        """
        with self._lock:
            self._registry[holder.key] = (holder, rule)

    def register_range(
        self,
        holder: ConfigurationHolder,
        minimum: Version | str | None = None,
        maximum: Version | str | None = None,
    ) -> None:
        """Register a holder whose file must have a version between minimum and maximum.

        With neither bound given the holder is registered without a version check.
        """
        rule = None if minimum is None and maximum is None else VersionRange(minimum, maximum)
        self.register(holder, rule)

    def unregister(self, holder: ConfigurationHolder) -> bool:
        """Stop updating a holder.

        Returns:
            bool: True if the holder was registered
        """
        with self._lock:
            return self._registry.pop(holder.key, None) is not None

    def holders(self) -> frozenset[ConfigurationHolder]:
        """Snapshot of the registered holders."""
        with self._lock:
            return frozenset(holder for holder, _ in self._registry.values())

    def holder_for(self, path: Path) -> ConfigurationHolder | None:
        """Return the holder registered for a path, if any."""
        with self._lock:
            entry = self._registry.get(normalize_path(path))
        return entry[0] if entry is not None else None

    def load_all(self) -> dict[ConfigurationHolder, LoadOutcome]:
        """Load every registered configuration.

        A failure in one holder never stops the others; it is reported in the
        returned mapping and the holder keeps its previous document.

        Returns:
            dict: Outcome for each registered holder
        """
        with self._lock:
            entries = list(self._registry.values())

        outcomes: dict[ConfigurationHolder, LoadOutcome] = {}
        for holder, rule in entries:
            try:
                outcome, document = self._reconcile(holder, rule)
            except (OSError, DocumentParseError) as e:
                logger.error("Failed to load configuration %s: %s", holder.path, e)
                outcomes[holder] = LoadOutcome.failed(e)
                continue

            holder.replace(document)
            outcomes[holder] = outcome

        return outcomes

    def _reconcile(
        self, holder: ConfigurationHolder, rule: AcceptanceRule | None
    ) -> tuple[LoadOutcome, ConfigurationDocument]:
        """Bring one holder's file up to date and parse it."""
        path = holder.path

        if path.is_dir():
            raise IsADirectoryError(f"Configuration path is a directory: {path}")

        if not path.exists():
            path_utils.write_text(holder.default_content, path)
            logger.info("Created default configuration at %s", path)
            return LoadOutcome(LoadStatus.FRESH), ConfigurationDocument.load(path)

        if rule is None:
            return LoadOutcome(LoadStatus.LOADED), ConfigurationDocument.load(path)

        document, version = self._read_version(path)
        if document is not None and version is not None and rule.accepts(version):
            return LoadOutcome(LoadStatus.LOADED), document

        archived = self._archive(path)
        path_utils.write_text(holder.default_content, path)
        logger.warning(
            "Configuration %s had version %s, outside %r; moved it to %s and restored defaults",
            path,
            version,
            rule,
            archived,
        )
        return (
            LoadOutcome(LoadStatus.MIGRATED, archived_path=archived),
            ConfigurationDocument.load(path),
        )

    def _read_version(self, path: Path) -> tuple[ConfigurationDocument | None, Version | None]:
        """Parse a file and its version key, treating any failure as no version."""
        try:
            document = ConfigurationDocument.load(path)
        except (OSError, DocumentParseError) as e:
            logger.debug("Could not read version of %s: %s", path, e)
            return None, None

        text = document.get_string(VERSION_KEY)
        if text is None:
            return document, None

        try:
            return document, Version(text)
        except InvalidVersionFormat:
            logger.debug("Configuration %s has malformed version %r", path, text)
            return document, None

    def _archive(self, path: Path) -> Path:
        """Move a file aside under a name that does not collide with earlier archives."""
        destination = path_utils.unique_path(path.parent / f"{ARCHIVE_PREFIX}{path.name}")
        path.rename(destination)
        return destination
