"""Command implementations for CLI."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from edmgutil.backends.registry import BackendRegistry
from edmgutil.core import crontab, expiry
from edmgutil.core.downloads import DownloadAuditor
from edmgutil.core.lifecycle import VolumeLifecycle
from edmgutil.models.config import EdmgConfig


console = Console(highlight=False)


@dataclass
class CommandContext:
    """Configuration and backends shared by the command handlers."""
    config: EdmgConfig
    backends: BackendRegistry


def _say(message: str):
    console.print(escape(message))


def _prompt_password() -> str:
    return typer.prompt("password", hide_input=True)


def _lifecycle(ctx: CommandContext) -> VolumeLifecycle:
    volume_config = ctx.config.volume
    return VolumeLifecycle(
        disk_images=ctx.backends.disk_images,
        archives=ctx.backends.archives,
        prompt_password=_prompt_password,
        progress=_say,
        temp_dir=Path(volume_config.temp_dir).expanduser() if volume_config.temp_dir else None,
        default_name=volume_config.default_name,
    )


def new_volume(
    ctx: CommandContext,
    size: Optional[int] = None,
    days: Optional[int] = None,
    keep_dmg: bool = False,
    password: Optional[str] = None,
    volume_name: Optional[str] = None,
):
    """Create and mount a scratch volume."""
    volume_config = ctx.config.volume
    _lifecycle(ctx).create(
        size=size or volume_config.default_size,
        days=days or volume_config.default_days,
        keep_dmg=keep_dmg or volume_config.keep_dmg,
        password=password,
        volume_name=volume_name,
    )


def import_volume(
    ctx: CommandContext,
    path: Path,
    extra_size: Optional[int] = None,
    days: Optional[int] = None,
    keep_dmg: bool = False,
    password: Optional[str] = None,
    volume_name: Optional[str] = None,
):
    """Create a volume from an encrypted archive."""
    volume_config = ctx.config.volume
    _lifecycle(ctx).import_archive(
        source=path,
        extra_size=volume_config.default_extra_size if extra_size is None else extra_size,
        days=days or volume_config.default_days,
        keep_dmg=keep_dmg or volume_config.keep_dmg,
        password=password,
        volume_name=volume_name,
    )


def list_volumes(ctx: CommandContext, verbose: bool = False):
    """Print every managed volume."""
    for volume in _lifecycle(ctx).list_volumes():
        _say(str(volume.path))
        if verbose:
            _say(f"  expires: {expiry.format_expiry(volume.good_until)}")


def eject_volumes(
    ctx: CommandContext,
    path: Optional[Path] = None,
    all_volumes: bool = False,
    expired: bool = False,
):
    """Eject the selected volumes."""
    ejected = _lifecycle(ctx).eject(path=path, all_volumes=all_volumes, expired=expired)
    if not ejected and path is None:
        console.print("[dim]No volumes to eject[/dim]")


def install_cron(ctx: CommandContext, install: bool):
    """Install or uninstall the hourly prune job."""
    mode = crontab.CronMode.INSTALL if install else crontab.CronMode.UNINSTALL
    editor = crontab.executable_path(ctx.config.cron.executable)
    crontab.run_crontab_editor(mode, editor)
    verb = "Installed" if install else "Uninstalled"
    console.print(f"[green]✓[/green] {verb} cron job")


def find_downloads(
    ctx: CommandContext,
    path: Optional[Path] = None,
    domains: Optional[List[str]] = None,
    verbose: bool = False,
    delete: bool = False,
    days: Optional[int] = None,
):
    """List (and optionally delete) downloads coming from the given domains."""
    directory = Path(path).expanduser() if path else ctx.config.downloads.path
    patterns = domains if domains else ctx.config.downloads.domains
    auditor = DownloadAuditor(ctx.backends.metadata)

    records = auditor.find(directory, domains=patterns, days=days)
    for record in records:
        _say(str(record.path))
        if verbose:
            _say(f"  source: {record.source}")

    if delete:
        results = auditor.delete(records)
        deleted = sum(1 for result in results if result.deleted)
        _say(f"Deleted {deleted} file(s)")
