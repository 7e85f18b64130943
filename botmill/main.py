"""
Main entry point for BotMill.

This module provides the command-line interface for bootstrapping bot
definitions and inspecting configuration.
"""

import inspect
import logging
import sys
from typing import List, Optional

import typer

from .application.startup import ApplicationStartup
from .bootstrap import set_config_manager
from .core.exceptions import BotMillConfigurationError, BotMillError
from .infrastructure.config.loader import CONFIG_PATH, ConfigLoader
from .infrastructure.config.manager import ConfigManager
from .infrastructure.config.models import DEFAULT_ENTRY_POINT_GROUP, ApplicationConfig
from .infrastructure.config.properties import dumps_properties
from .plugins.registry import default_registry, qualified_name

# Create CLI application
cli = typer.Typer(
    name="botmill",
    help="Configuration loading and bot definition discovery for BotMill chatbots"
)

logger = logging.getLogger(__name__)


def _make_loader(search_path: Optional[List[str]], resource_package: Optional[str]) -> ConfigLoader:
    return ConfigLoader(search_path=search_path or None, resource_package=resource_package)


@cli.command()
def start(
    config_file: str = typer.Option(
        CONFIG_PATH, "--config", "-c", help="Configuration resource name"
    ),
    search_path: Optional[List[str]] = typer.Option(
        None, "--search-path", "-s", help="Directory to search for the configuration resource"
    ),
    resource_package: Optional[str] = typer.Option(
        None, "--resource-package", help="Package holding the configuration resource"
    ),
    package: Optional[List[str]] = typer.Option(
        None, "--package", "-p", help="Package to scan for bot definitions"
    ),
    plugin_dir: Optional[List[str]] = typer.Option(
        None, "--plugin-dir", "-d", help="Directory to scan for bot definitions"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Logging level"
    ),
    collect_errors: bool = typer.Option(
        False, "--collect-errors", help="Try every bot definition and report all failures"
    )
) -> None:
    """Load configuration and activate all bot definitions."""

    config_manager = ConfigManager(_make_loader(search_path, resource_package), config_file)
    # Bot definitions read the process-wide store
    set_config_manager(config_manager)
    startup = ApplicationStartup(config_manager)

    try:
        report = startup.start(
            packages=package or [],
            plugin_directories=plugin_dir or [],
            fail_fast=False if collect_errors else None,
            log_level=log_level
        )
    except BotMillConfigurationError as e:
        logger.error(f"BotMill startup failed: {e}")
        typer.echo(f"Startup failed: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    typer.echo(
        f"Loaded {len(report.loaded)} bot definitions "
        f"({len(report.skipped_abstract)} abstract skipped)")


@cli.command()
def show_config(
    config_file: str = typer.Option(
        CONFIG_PATH, "--config", "-c", help="Configuration resource name"
    ),
    search_path: Optional[List[str]] = typer.Option(
        None, "--search-path", "-s", help="Directory to search for the configuration resource"
    ),
    resource_package: Optional[str] = typer.Option(
        None, "--resource-package", help="Package holding the configuration resource"
    )
) -> None:
    """Print the key/value pairs of a configuration resource."""

    loader = _make_loader(search_path, resource_package)

    try:
        properties = loader.load(config_file)
    except BotMillError as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        for directory in getattr(e, "search_path", []):
            typer.echo(f"  searched: {directory}", err=True)
        sys.exit(1)

    typer.echo(dumps_properties(properties), nl=False)


@cli.command()
def list_bots(
    package: Optional[List[str]] = typer.Option(
        None, "--package", "-p", help="Package to scan for bot definitions"
    ),
    plugin_dir: Optional[List[str]] = typer.Option(
        None, "--plugin-dir", "-d", help="Directory to scan for bot definitions"
    ),
    entry_points: bool = typer.Option(
        True, "--entry-points/--no-entry-points", help="Include installed entry points"
    ),
    entry_point_group: str = typer.Option(
        DEFAULT_ENTRY_POINT_GROUP, "--group", help="Entry point group"
    )
) -> None:
    """List discovered bot definitions without activating them."""

    try:
        if entry_points:
            default_registry.load_entry_points(entry_point_group)
        for package_name in package or []:
            default_registry.scan_package(package_name)
        for directory in plugin_dir or []:
            default_registry.scan_directory(directory)
    except BotMillConfigurationError as e:
        typer.echo(f"Discovery failed: {e}", err=True)
        sys.exit(1)

    definitions = default_registry.definitions()
    if not definitions:
        typer.echo("No bot definitions found")
        return

    for definition in definitions:
        marker = " (abstract)" if inspect.isclass(definition) and inspect.isabstract(definition) else ""
        typer.echo(f"{qualified_name(definition)}{marker}")


@cli.command()
def init_config(
    output: str = typer.Option(
        CONFIG_PATH, "--output", "-o", help="Output configuration file"
    )
) -> None:
    """Generate a configuration file with the default bootstrap settings."""

    properties = ApplicationConfig().to_properties()

    try:
        ConfigLoader().save(properties, output, comments="BotMill configuration")
        typer.echo(f"Default configuration saved to {output}")
    except OSError as e:
        typer.echo(f"Error saving configuration: {e}", err=True)
        sys.exit(1)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
