"""Archive backend driving the 7z command line tool."""

import logging
from pathlib import Path

from edmgutil.backends.base import ArchiveBackend
from edmgutil.errors import ArchiveError
from edmgutil.utils.commands import run_command


logger = logging.getLogger(__name__)


class SevenZipBackend(ArchiveBackend):
    """Password protected archives through ``7z``."""

    def uncompressed_size(self, path: Path) -> int:
        """Read the total uncompressed size from the summary line of ``7z l``."""
        result = run_command(["7z", "l", path])
        return parse_listing_size(result.stdout)

    def check_password(self, path: Path, password: str) -> bool:
        """Test the archive with the given password."""
        result = run_command(
            ["7z", "t", f"-p{password}", path],
            check=False,
            secret=password,
        )
        ok = "Wrong password" not in result.stderr and "Everything is Ok" in result.stdout
        logger.debug(f"Password check for {path}: {'ok' if ok else 'failed'}")
        return ok

    def extract(self, path: Path, target: Path, password: str) -> None:
        """Extract into ``target``, overwriting without prompting."""
        run_command(
            ["7z", "x", "-bsp2", f"-p{password}", "-y", path],
            cwd=target,
            capture_output=False,
            secret=password,
        )


def parse_listing_size(output: str) -> int:
    """Parse the uncompressed byte count from ``7z l`` output.

    The last line reads ``<date> <time> <size> <compressed> N files``; the
    date and time columns are blank for some archives.
    """
    lines = output.strip().splitlines()
    if not lines:
        raise ArchiveError("empty 7z listing")

    for token in lines[-1].split():
        if "-" in token or ":" in token:
            continue
        if token.isdigit():
            return int(token)

    raise ArchiveError(f"unexpected 7z summary line: {lines[-1]!r}")
