"""CLI interface for wikiserve.

Command-line tool for serving a directory tree of wiki pages.
"""

import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

from wikiserve.config import Config
from wikiserve.log import ALERT, Component, configure_logging, get_logger

logger = get_logger(Component.MAIN)


def _package_version() -> str:
    try:
        return version("wikiserve")
    except PackageNotFoundError:
        return "unknown"


@click.group()
@click.version_option(_package_version(), prog_name="wikiserve")
def cli() -> None:
    """wikiserve - a minimal wiki backed by a directory of pages."""


def _load_config(
    config_path: Path | None,
    *,
    binding: str | None = None,
    root_dir: Path | None = None,
    log_level: str | None = None,
) -> Config:
    try:
        config = Config.load(config_path)
        return config.with_overrides(binding=binding, root_dir=root_dir, log_level=log_level)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: search ~/.wikiserve, then /etc/wikiserve)",
)
@click.option(
    "--binding",
    "-b",
    default=None,
    help="host:port to listen on (overrides config)",
)
@click.option(
    "--root-dir",
    "-r",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Directory containing the pages folder (overrides config)",
)
@click.option(
    "--log-level",
    "-l",
    default=None,
    help="Log level: trace, debug, info, notice, warning, error, critical (overrides config)",
)
def serve(
    config_path: Path | None,
    binding: str | None,
    root_dir: Path | None,
    log_level: str | None,
) -> None:
    """Start the wiki server."""
    from wikiserve.server import run_server

    config = _load_config(config_path, binding=binding, root_dir=root_dir, log_level=log_level)
    configure_logging(config.logging.numeric_level)

    logger.info(f"Version: {_package_version()}")
    if config.config_path is not None:
        logger.info(f"Configuration: {config.config_path}")

    try:
        run_server(config)
    except OSError as e:
        logger.log(ALERT, f"can not listen on binding {config.server.binding}: {e}")
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command("show-config")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: search ~/.wikiserve, then /etc/wikiserve)",
)
def show_config(config_path: Path | None) -> None:
    """Print the effective configuration."""
    config = _load_config(config_path)

    click.echo(f"Config file: {config.config_path}")
    click.echo(f"Binding: {config.server.binding}")
    click.echo(f"Cancel on disconnect: {config.server.cancel_on_disconnect}")
    click.echo(f"Pages folder: {config.pages.folder}")
    click.echo(f"Content directory: {config.pages.content_dir}")
    click.echo(f"Log level: {config.logging.level}")
    if config.render.timeout is None:
        click.echo("Render timeout: disabled")
    else:
        click.echo(f"Render timeout: {config.render.timeout:g}s")
    for extension, command in sorted(config.render.extensions.items()):
        click.echo(f"Renderer {extension}: {' '.join(command)}")
