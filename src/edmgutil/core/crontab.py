"""Crontab integration for pruning expired volumes.

``crontab -e`` is run with ``EDITOR`` pointing back at this program and the
edit mode in ``EDMGUTIL_CRONTAB_MODE``. When started that way the program
rewrites the temporary crontab file given as its first argument and exits,
which ``crontab`` takes as a finished edit.
"""

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

from edmgutil.utils.commands import run_command, which


logger = logging.getLogger(__name__)

CRONTAB_MODE_ENV = "EDMGUTIL_CRONTAB_MODE"
SCRIPT_NAME = "edmgutil"
PRUNE_ARGS = "eject --expired"


class CronMode(Enum):
    """Edit applied to the crontab."""
    INSTALL = "install"
    UNINSTALL = "uninstall"


def executable_path(override: Optional[str] = None) -> str:
    """Path of this program as cron should invoke it.

    Prefers the installed console script; under ``python -m`` argv[0] is a
    module file that cannot be run directly.
    """
    if override:
        return override
    script = which(SCRIPT_NAME)
    if script:
        return str(Path(script).resolve())
    return str(Path(sys.argv[0]).resolve())


def prune_command(executable: str) -> str:
    """The command string that identifies the managed crontab line."""
    return f"{executable} {PRUNE_ARGS}"


def rewrite_crontab(content: str, command: str, mode: CronMode, schedule: str = "0 * * * *") -> str:
    """Add or remove the managed line, passing every other line through in order."""
    lines: List[str] = []
    found = False

    for line in content.splitlines():
        if line.strip().endswith(command):
            found = True
            if mode is CronMode.UNINSTALL:
                continue
        lines.append(line)

    if mode is CronMode.INSTALL and not found:
        lines.append(f"{schedule} {command}")

    return "".join(f"{line}\n" for line in lines)


def edit_crontab_file(path: Path, command: str, mode: CronMode, schedule: str = "0 * * * *") -> None:
    """Rewrite a crontab file in place."""
    path = Path(path)
    updated = rewrite_crontab(path.read_text(), command, mode, schedule)
    path.write_text(updated)
    logger.debug(f"Applied crontab {mode.value} to {path}")


def editor_mode(environ: Mapping[str, str]) -> Optional[CronMode]:
    """Return the edit mode if this process was started as the crontab editor."""
    value = environ.get(CRONTAB_MODE_ENV)
    if not value:
        return None
    try:
        return CronMode(value)
    except ValueError:
        logger.warning(f"Ignoring unknown {CRONTAB_MODE_ENV}={value!r}")
        return None


def run_crontab_editor(mode: CronMode, editor: str) -> None:
    """Run ``crontab -e`` with this program standing in as the editor."""
    env = dict(os.environ)
    env[CRONTAB_MODE_ENV] = mode.value
    env["EDITOR"] = editor
    env["VISUAL"] = editor
    run_command(["crontab", "-e"], capture_output=False, env=env)
