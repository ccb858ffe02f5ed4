"""External command execution helpers."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union


logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Result from running a command."""
    returncode: int
    stdout: str = ""
    stderr: str = ""


def _display(cmd: Sequence[str], secret: Optional[str]) -> str:
    """Render a command line for logging with the secret masked."""
    parts = []
    for part in cmd:
        if secret and secret in part:
            part = part.replace(secret, "****")
        parts.append(part)
    return " ".join(parts)


def run_command(
    cmd: List[Union[str, Path]],
    check: bool = True,
    capture_output: bool = True,
    input: Optional[str] = None,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[int] = None,
    secret: Optional[str] = None,
) -> CommandResult:
    """Run a command and wait for it to finish.

    ``input`` is written to the process' stdin. ``secret`` is only used to
    mask the command line in debug logs. Raises
    ``subprocess.CalledProcessError`` on a non-zero exit when ``check`` is set.
    """
    cmd = [str(part) for part in cmd]
    logger.debug(f"Running command: {_display(cmd, secret)}")

    process = subprocess.run(
        cmd,
        input=input,
        cwd=cwd,
        env=env,
        stdout=subprocess.PIPE if capture_output else subprocess.DEVNULL,
        stderr=subprocess.PIPE if capture_output else subprocess.DEVNULL,
        text=True,
        timeout=timeout,
    )

    result = CommandResult(
        returncode=process.returncode,
        stdout=process.stdout or "",
        stderr=process.stderr or "",
    )

    if check and process.returncode != 0:
        error = subprocess.CalledProcessError(
            process.returncode, _display(cmd, secret)
        )
        error.stdout = result.stdout
        error.stderr = result.stderr
        raise error

    return result


def which(tool: str) -> Optional[str]:
    """Return the full path of ``tool`` or None when it is not installed."""
    return shutil.which(tool)
