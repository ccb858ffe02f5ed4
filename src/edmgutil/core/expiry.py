"""Expiry bookkeeping for managed volumes."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

EXPIRY_MARKER = ".encrypted-volume-good-until"
SECONDS_PER_DAY = 60 * 60 * 24


def now() -> int:
    """Current time in whole seconds since the Unix epoch."""
    return int(datetime.now(tz=timezone.utc).timestamp())


def compute_expiry(current: int, days: int) -> int:
    """Return the instant ``days`` days after ``current``."""
    return current + days * SECONDS_PER_DAY


def is_expired(good_until: int, current: int) -> bool:
    """A volume expires strictly after its good-until instant."""
    return good_until < current


def write_marker(mount_point: Path, good_until: int) -> Path:
    """Persist the expiry inside the mounted volume."""
    marker = mount_point / EXPIRY_MARKER
    marker.write_text(str(good_until))
    return marker


def read_marker(mount_point: Path) -> Optional[int]:
    """Read the expiry marker; None means the volume is not managed by us."""
    marker = mount_point / EXPIRY_MARKER
    try:
        content = marker.read_text()
    except OSError:
        return None
    try:
        return int(content.strip())
    except ValueError:
        logger.debug(f"Ignoring unparseable expiry marker in {mount_point}")
        return None


def format_expiry(good_until: int) -> str:
    """Human readable UTC timestamp."""
    return datetime.fromtimestamp(good_until, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
