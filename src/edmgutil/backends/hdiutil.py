"""Disk image backend driving macOS hdiutil."""

import logging
import plistlib
import shutil
from pathlib import Path
from typing import List, Optional
from xml.parsers.expat import ExpatError

from edmgutil.backends.base import DiskImageBackend
from edmgutil.errors import DiskImageError, MountError
from edmgutil.utils.commands import run_command, which


logger = logging.getLogger(__name__)

NEVER_INDEX_FILE = ".metadata_never_index"
VOLUME_ICON_FILE = ".VolumeIcon.icns"


class HdiutilBackend(DiskImageBackend):
    """Encrypted HFS+ images through ``hdiutil``."""

    def __init__(self, icon_path: Optional[str] = None):
        """Initialize hdiutil backend."""
        self.icon_path = Path(icon_path) if icon_path else None

    def create(self, path: Path, volume_name: str, size: int, password: str) -> None:
        """Create an AES-256 encrypted image, reading the password from stdin."""
        run_command([
            "hdiutil", "create",
            "-megabytes", str(size),
            "-ov",
            "-volname", volume_name,
            "-fs", "HFS+",
            "-encryption", "AES-256",
            "-stdinpass",
            path,
        ], input=password)
        logger.debug(f"Created encrypted image {path}")

    def attach(self, path: Path, password: str) -> Path:
        """Attach the image and parse the mount point from hdiutil's output."""
        result = run_command(
            ["hdiutil", "attach", "-stdinpass", path],
            input=password,
        )
        mount_point = parse_attach_output(result.stdout)
        if mount_point is None:
            raise MountError(f"failed to mount {path}")
        logger.debug(f"Attached {path} at {mount_point}")
        return mount_point

    def mount_points(self) -> List[Path]:
        """List mount points of all attached images via ``hdiutil info -plist``."""
        result = run_command(["hdiutil", "info", "-plist"])
        return parse_info_plist(result.stdout.encode())

    def detach(self, mount_point: Path) -> None:
        """Eject a volume."""
        run_command(["hdiutil", "eject", mount_point], capture_output=False)

    def secure(self, mount_point: Path) -> None:
        """Opt the volume out of Spotlight and give it a distinct icon."""
        (mount_point / NEVER_INDEX_FILE).write_text("")

        if self._apply_icon(mount_point):
            run_command(["SetFile", "-a", "C", mount_point])

        run_command(
            ["mdutil", "-E", "-i", "off", mount_point],
            capture_output=False,
        )

    def _apply_icon(self, mount_point: Path) -> bool:
        """Copy the volume icon in place. Returns False if it could not be applied."""
        if self.icon_path is None or not self.icon_path.is_file():
            logger.debug("Volume icon not available, skipping")
            return False
        if which("SetFile") is None:
            logger.debug("SetFile not installed, skipping volume icon")
            return False
        shutil.copyfile(self.icon_path, mount_point / VOLUME_ICON_FILE)
        return True


def parse_attach_output(output: str) -> Optional[Path]:
    """Find the mount point in ``hdiutil attach`` output.

    The HFS partition line is tab separated: device, content hint, mount point.
    """
    for line in output.splitlines():
        if "\tApple_HFS" not in line:
            continue
        parts = line.rstrip("\n").split("\t", 2)
        if len(parts) == 3 and parts[2].strip():
            return Path(parts[2].strip())
    return None


def parse_info_plist(data: bytes) -> List[Path]:
    """Collect every mount point from ``hdiutil info -plist`` output."""
    try:
        info = plistlib.loads(data)
    except (ValueError, ExpatError) as e:
        raise DiskImageError(f"unreadable hdiutil info output: {e}") from e
    if not isinstance(info, dict):
        raise DiskImageError("unexpected hdiutil info output")
    mount_points = []
    for image in info.get("images", []):
        for entity in image.get("system-entities", []):
            mount_point = entity.get("mount-point")
            if mount_point:
                mount_points.append(Path(mount_point))
    return mount_points
