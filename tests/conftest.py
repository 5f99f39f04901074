import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from pluginkit.config import ConfigurationHolder

DEFAULT_CONFIG = """\
# MyPlugin configuration
# Do not change the version, it is used to restore outdated files.
Version: '2.0'

General:
  Prefix: '&8[&aMyPlugin&8] '
  Locale: EN_US

# Seconds between checks
Update Interval: 30
"""


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo logging and structlog configuration done by a test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level

    yield

    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def plugin_dir(tmp_path: Path) -> Path:
    """Provide a plugin data folder that does not exist yet.

    Files are written under tmp_path so tests never touch a real server folder.
    """
    return tmp_path / "plugins" / "MyPlugin"


@pytest.fixture
def default_config() -> str:
    return DEFAULT_CONFIG


@pytest.fixture
def make_holder(plugin_dir: Path) -> Callable[..., ConfigurationHolder]:
    """Factory for holders rooted in the plugin folder."""

    def factory(name: str = "config.yml", content: str = DEFAULT_CONFIG) -> ConfigurationHolder:
        return ConfigurationHolder(plugin_dir / name, content)

    return factory
