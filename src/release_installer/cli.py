"""
Command line entry point.

Thin wrapper over ``release_installer.installer.ensure_installed``.
"""

import asyncio
import dataclasses
import os
import sys
from pathlib import Path
from typing import Optional

import click

from release_installer import __version__
from release_installer.config import load_settings
from release_installer.errors import InstallerError, log_error
from release_installer.installer import ensure_installed
from release_installer.logging import LOG_LEVELS, configure_logging, get_logger
from release_installer.types import PackageRequest

logger = get_logger(__name__)


def add_to_path(directory: Path) -> None:
    """Expose directory on PATH for this process and, under CI, later steps."""
    os.environ["PATH"] = f"{directory}{os.pathsep}{os.environ.get('PATH', '')}"

    github_path = os.environ.get("GITHUB_PATH")
    if github_path:
        with open(github_path, "a", encoding="utf-8") as f:
            f.write(f"{directory}\n")
        logger.debug("github_path_updated", file=github_path, directory=str(directory))


@click.group()
@click.version_option(__version__, prog_name="release-installer")
def cli() -> None:
    """Install prebuilt binaries from GitHub releases."""


@cli.command()
@click.argument("owner")
@click.argument("name")
@click.option("--version", "version_spec", default="", help="Semver range, e.g. ^2.0.0.")
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    default=None,
    help="Token for higher rate limits and private repositories.",
)
@click.option("--bin", "bin_path", default=None, help="Binary path inside the release archive.")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Tool cache root.",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default INFO).",
)
def install(
    owner: str,
    name: str,
    version_spec: str,
    github_token: Optional[str],
    bin_path: Optional[str],
    cache_dir: Optional[Path],
    log_level: Optional[str],
) -> None:
    """Install NAME from OWNER's GitHub releases and print its directory.

    Examples:

        release-installer install BurntSushi ripgrep --version "^14"
    """
    settings = load_settings()
    if cache_dir is not None:
        settings = dataclasses.replace(settings, cache_dir=cache_dir)
    configure_logging((log_level or settings.log_level).upper())

    request = PackageRequest(
        owner=owner,
        name=name,
        version_spec=version_spec or None,
        bin=bin_path,
    )

    try:
        installed = asyncio.run(
            ensure_installed(request, github_token or None, settings=settings)
        )
    except InstallerError as e:
        log_error(e, {"owner": owner, "name": name, "version_spec": version_spec})
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    add_to_path(installed.directory)
    click.echo(f"Successfully setup {installed.name} v{installed.version}", err=True)
    click.echo(str(installed.directory))


def main() -> None:
    """Run the CLI."""
    cli()
