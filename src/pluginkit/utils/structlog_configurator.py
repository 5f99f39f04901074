"""Structlog-based logging configuration for pluginkit.

Library modules log through the standard ``logging`` module. This module
routes those records through structlog so applications get the same
structured output for library and application messages.

Supports different deployment targets:
- Docker: JSON lines on stdout
- Development: human-readable console output, JSON on request
"""

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import structlog

from pluginkit.config.models import LoggingConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def is_development_environment() -> bool:
    return os.environ.get("PLUGINKIT_ENV", "production") == "development"


def get_deployment_environment() -> str:
    """Get deployment environment with 'unknown' fallback."""
    if is_docker_environment():
        return "docker"
    elif is_development_environment():
        return "development"
    else:
        return "unknown"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _shared_processors(config: LoggingConfig) -> list:
    """Processors applied to both structlog and standard library records."""
    extra_fields = {
        "deployment": get_deployment_environment(),
        **config.extra_fields,
    }

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    return processors


def _use_json(config: LoggingConfig) -> bool:
    """Decide between JSON and console output."""
    use_json = config.json_logs
    if use_json is None:
        # Auto-detect: JSON in containers, human-readable elsewhere
        use_json = is_docker_environment()

    if is_development_environment():
        if os.environ.get("PLUGINKIT_JSON_LOGS", "false").lower() == "true":
            use_json = True

    return use_json


def _configure_handlers(config: LoggingConfig, formatter: logging.Formatter) -> None:
    """Replace root handlers with a single stdout handler using the structlog formatter."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.level.upper(), logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def configure_structlog(config: LoggingConfig | None = None) -> None:
    """Configure structlog-based logging system.

    Args:
        config: Logging settings; defaults to LoggingConfig()
    """
    config = config or LoggingConfig()
    shared = _shared_processors(config)
    use_json = _use_json(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    _configure_handlers(config, formatter)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        log_level=config.level,
        environment=get_deployment_environment(),
        json_output=use_json,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)
