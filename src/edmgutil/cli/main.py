"""Main CLI implementation using Typer."""

import os
import subprocess
import sys
from pathlib import Path
from typing import Optional, List, Callable, Any, Sequence

import typer
from rich.console import Console

from edmgutil.backends.registry import ARCHIVE_TOOL, CRONTAB_TOOL, DISK_IMAGE_TOOL, BackendRegistry
from edmgutil.cli.commands import (
    CommandContext,
    new_volume,
    import_volume,
    list_volumes,
    eject_volumes,
    install_cron,
    find_downloads,
)
from edmgutil.config import ConfigManager
from edmgutil.core import crontab
from edmgutil.errors import EdmgError
from edmgutil.utils.logging import setup_logging


# Create Typer app
app = typer.Typer(
    name="edmgutil",
    help="A utility to work with disposable encrypted DMGs.",
    add_completion=False,
    no_args_is_help=True,
)

# Errors go to stderr
console = Console(stderr=True)

VOLUME_TOOLS = (DISK_IMAGE_TOOL, ARCHIVE_TOOL)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Configuration file path"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Shortcut for --log-level DEBUG"
    ),
):
    """A utility to work with disposable encrypted DMGs."""
    ctx.obj = {"config": config, "log_level": "DEBUG" if debug else log_level}


def _options(ctx: typer.Context) -> dict:
    return ctx.obj or {}


def _run_cli_command(
    handler: Callable[..., Any],
    config_path: Optional[Path] = None,
    log_level: Optional[str] = None,
    requires: Sequence[str] = (),
    **kwargs: Any,
):
    """Helper to run a CLI command with loaded config, backends and error handling."""
    try:
        config = ConfigManager(config_path).load()
        setup_logging(log_level or config.log_level)
        backends = BackendRegistry.from_config(config)
        backends.require(*requires)
        handler(CommandContext(config=config, backends=backends), **kwargs)
    except (EdmgError, OSError, subprocess.CalledProcessError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command("new")
def new_command(
    ctx: typer.Context,
    days: Optional[int] = typer.Option(
        None, "--days", min=1, help="The amount of days the image is good to keep"
    ),
    volume_name: Optional[str] = typer.Option(
        None, "--name", "-n", help="The volume name of the DMG"
    ),
    keep: bool = typer.Option(
        False, "--keep", "-k", help="Keep the source DMG instead of deleting it"
    ),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Provide the passphrase for the image"
    ),
    size: Optional[int] = typer.Option(
        None, "--size", "-s", min=1, help="The size for the encrypted DMG in megabytes"
    ),
):
    """Create a new encrypted DMG and mount it.

    The source DMG is normally disposed of so that everything is gone once
    the volume is unmounted.
    """
    opts = _options(ctx)
    _run_cli_command(
        new_volume,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        requires=VOLUME_TOOLS,
        size=size,
        days=days,
        keep_dmg=keep,
        password=password,
        volume_name=volume_name,
    )


@app.command("import")
def import_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="The path of the input zip archive"),
    days: Optional[int] = typer.Option(
        None, "--days", min=1, help="The amount of days the image is good to keep"
    ),
    volume_name: Optional[str] = typer.Option(
        None, "--name", "-n", help="The volume name of the DMG"
    ),
    keep: bool = typer.Option(
        False, "--keep", "-k", help="Keep the source DMG instead of deleting it"
    ),
    password: Optional[str] = typer.Option(
        None, "--password", "-p", help="Provide the passphrase for the image"
    ),
    extra_size: Optional[int] = typer.Option(
        None, "--extra-size", min=0, help="The extra size for the encrypted DMG in megabytes"
    ),
):
    """Import an encrypted zip as encrypted DMG and mount it."""
    opts = _options(ctx)
    _run_cli_command(
        import_volume,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        requires=VOLUME_TOOLS,
        path=path,
        extra_size=extra_size,
        days=days,
        keep_dmg=keep,
        password=password,
        volume_name=volume_name,
    )


@app.command("list")
def list_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show when each volume expires"
    ),
):
    """List all mounted encrypted DMGs."""
    opts = _options(ctx)
    _run_cli_command(
        list_volumes,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        requires=VOLUME_TOOLS,
        verbose=verbose,
    )


@app.command("eject")
def eject_command(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(None, help="The path of the volume to eject"),
    all: bool = typer.Option(
        False, "--all", "-a", help="Eject all mounted encrypted volumes"
    ),
    expired: bool = typer.Option(
        False, "--expired", "-e", help="Eject expired encrypted volumes"
    ),
):
    """Eject encrypted DMGs."""
    if path is None and not all and not expired:
        console.print("[red]Error:[/red] Specify a volume path, --all or --expired")
        raise typer.Exit(1)
    if path is not None and (all or expired):
        console.print("[red]Error:[/red] A volume path cannot be combined with --all or --expired")
        raise typer.Exit(1)

    opts = _options(ctx)
    _run_cli_command(
        eject_volumes,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        requires=VOLUME_TOOLS,
        path=path,
        all_volumes=all,
        expired=expired,
    )


@app.command("cron")
def cron_command(
    ctx: typer.Context,
    install: bool = typer.Option(False, "--install", help="Install the cron"),
    uninstall: bool = typer.Option(False, "--uninstall", help="Uninstall the cron"),
):
    """Install or uninstall the cron that ejects expired volumes."""
    if install == uninstall:
        console.print("[red]Error:[/red] Specify exactly one of --install or --uninstall")
        raise typer.Exit(1)

    opts = _options(ctx)
    _run_cli_command(
        install_cron,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        requires=(CRONTAB_TOOL,),
        install=install,
    )


@app.command("find-downloads")
def find_downloads_command(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None, help="An alternative folder than the default download folder to search"
    ),
    domains: Optional[List[str]] = typer.Option(
        None, "--domain", "-d",
        help="A domain to look out for. *.domain.tld matches the domain and any subdomain",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show the source URL of every file"
    ),
    delete: bool = typer.Option(False, "--delete", help="Delete all found files"),
    days: Optional[int] = typer.Option(
        None, "--days", min=0, help="Only list or delete files older than this many days"
    ),
):
    """Find downloads coming from problematic sources."""
    opts = _options(ctx)
    _run_cli_command(
        find_downloads,
        config_path=opts.get("config"),
        log_level=opts.get("log_level"),
        path=path,
        domains=domains or [],
        verbose=verbose,
        delete=delete,
        days=days,
    )


def crontab_editor_main(mode: crontab.CronMode, argv: List[str]) -> int:
    """Entry path used when crontab starts this program as its editor."""
    if not argv:
        console.print("[red]Error:[/red] No crontab file given")
        return 1
    try:
        config = ConfigManager().load()
        setup_logging(config.log_level)
        command = crontab.prune_command(crontab.executable_path(config.cron.executable))
        crontab.edit_crontab_file(Path(argv[0]), command, mode, config.cron.schedule)
    except (EdmgError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1
    return 0


def main():
    """Main entry point for CLI."""
    mode = crontab.editor_mode(os.environ)
    if mode is not None:
        sys.exit(crontab_editor_main(mode, sys.argv[1:]))
    app()
