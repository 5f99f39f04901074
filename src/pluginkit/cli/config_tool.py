"""Command-line access to pluginkit configuration files.

Lets server operators check a configuration file, read single values and
run the same default-restoring migration a plugin performs at startup.
"""

import sys
from pathlib import Path
from typing import Any

import click

from pluginkit.config import (
    AcceptedVersions,
    ConfigurationDocument,
    ConfigurationHolder,
    ConfigurationLoader,
    DocumentParseError,
    InvalidVersionFormat,
    LoadStatus,
    LoggingConfig,
    Version,
    VersionRange,
)
from pluginkit.config.document import dump_yaml
from pluginkit.utils.structlog_configurator import configure_structlog


def _parse_version(
    ctx: click.Context, param: click.Parameter, value: Any
) -> Version | tuple[Version, ...] | None:
    """Click callback turning version options into Version objects."""
    if value is None:
        return None
    try:
        if isinstance(value, tuple):
            return tuple(Version(item) for item in value)
        return Version(value)
    except InvalidVersionFormat as e:
        raise click.BadParameter(str(e)) from e


def _load_document(file: Path) -> ConfigurationDocument:
    try:
        return ConfigurationDocument.load(file)
    except DocumentParseError as e:
        click.echo(click.style(f"✗ {file}: {e}", fg="red"), err=True)
        sys.exit(1)


@click.group()
@click.option("--log-level", default="WARNING", show_default=True, help="Logging level")
@click.option("--json-logs/--console-logs", default=None, help="Force JSON or console logs")
@click.pass_context
def cli(ctx: click.Context, log_level: str, json_logs: bool | None) -> None:
    """Pluginkit configuration tools.

    Examples:
      # Check that a file parses
      pluginkit-config validate plugins/MyPlugin/config.yml

      # Read one value
      pluginkit-config get plugins/MyPlugin/config.yml General.Prefix

      # Restore defaults if the file is older than 2.0
      pluginkit-config reconcile config.yml --defaults defaults.yml --min-version 2.0
    """
    try:
        logging_config = LoggingConfig(level=log_level, json_logs=json_logs)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e

    configure_structlog(logging_config)
    ctx.ensure_object(dict)
    ctx.obj["logging_config"] = logging_config


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(file: Path) -> None:
    """Check that FILE is a valid configuration document."""
    document = _load_document(file)

    keys = document.keys()
    version = document.get_string("Version")
    click.echo(click.style(f"✓ {file}: {len(keys)} keys", fg="green"))
    if version is not None:
        click.echo(f"  Version: {version}")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("key")
def get(file: Path, key: str) -> None:
    """Print the value of KEY in FILE."""
    document = _load_document(file)

    value = document.get(key)
    if value is None and not document.contains(key):
        click.echo(click.style(f"✗ Key not found: {key}", fg="red"), err=True)
        sys.exit(1)

    if isinstance(value, dict | list):
        click.echo(dump_yaml(value), nl=False)
    else:
        click.echo(document.get_string(key, ""))


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--defaults",
    "defaults_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File holding the default configuration content",
)
@click.option("--min-version", callback=_parse_version, help="Lowest version to keep")
@click.option("--max-version", callback=_parse_version, help="Highest version to keep")
@click.option(
    "--accept",
    multiple=True,
    callback=_parse_version,
    help="Exact version to keep (repeatable, overrides --min/--max-version)",
)
def reconcile(
    file: Path,
    defaults_file: Path,
    min_version: Version | None,
    max_version: Version | None,
    accept: tuple[Version, ...],
) -> None:
    """Create FILE from defaults, or restore defaults if FILE is outdated."""
    try:
        holder = ConfigurationHolder(file, defaults_file.read_text(encoding="utf-8"))
    except DocumentParseError as e:
        click.echo(click.style(f"✗ Invalid defaults in {defaults_file}: {e}", fg="red"), err=True)
        sys.exit(1)

    loader = ConfigurationLoader()
    if accept:
        loader.register(holder, AcceptedVersions(accept))
    elif min_version is not None or max_version is not None:
        try:
            loader.register(holder, VersionRange(min_version, max_version))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--min-version/--max-version") from e
    else:
        loader.register(holder)

    outcome = loader.load_all()[holder]

    if outcome.status is LoadStatus.FAILED:
        click.echo(click.style(f"✗ {file}: {outcome.error}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"✓ {file}: {outcome.status.value}", fg="green"))
    if outcome.archived_path is not None:
        click.echo(f"  Previous file moved to: {outcome.archived_path}")


def main() -> None:
    """Entry point for the configuration CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
