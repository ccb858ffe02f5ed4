"""Creation, import and ejection of encrypted volumes."""

import logging
import tempfile
import uuid
from pathlib import Path
from typing import Callable, List, Optional

from edmgutil.backends.base import ArchiveBackend, DiskImageBackend
from edmgutil.core import expiry
from edmgutil.core.volumes import VolumeRegistry
from edmgutil.errors import InvalidPasswordError, SourceArchiveError, VolumeNotMountedError
from edmgutil.models.volume import PendingImage, PreparedImage, Volume


logger = logging.getLogger(__name__)

MEGABYTE = 1024 * 1024

ProgressCallback = Callable[[str], None]


def generate_password() -> str:
    """Random opaque password for scratch volumes."""
    return uuid.uuid4().hex


def required_size(uncompressed_bytes: int, extra_size: int) -> int:
    """Image size in megabytes needed to hold an archive's contents plus a margin."""
    return uncompressed_bytes // MEGABYTE + 1 + extra_size


def resolve_volume_name(
    volume_name: Optional[str],
    source: Optional[Path],
    default: str,
) -> str:
    """Explicit name, else the source archive's stem, else ``default``."""
    if volume_name:
        return volume_name
    if source is not None and source.stem:
        return source.stem
    return default


class VolumeLifecycle:
    """Drives the create, mount, secure and import steps for volumes."""

    def __init__(
        self,
        disk_images: DiskImageBackend,
        archives: Optional[ArchiveBackend] = None,
        prompt_password: Optional[Callable[[], str]] = None,
        progress: Optional[ProgressCallback] = None,
        temp_dir: Optional[Path] = None,
        default_name: str = "EncryptedScratchpad",
        clock: Callable[[], int] = expiry.now,
    ):
        """Initialize the orchestrator with its backends."""
        self.disk_images = disk_images
        self.archives = archives
        self.prompt_password = prompt_password
        self.progress = progress or (lambda message: None)
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir())
        self.default_name = default_name
        self.clock = clock
        self.registry = VolumeRegistry(disk_images)

    def resolve_password(
        self,
        password: Optional[str],
        keep_dmg: bool,
        source: Optional[Path],
    ) -> str:
        """Pick the password for a new image.

        Only throwaway scratch volumes get a generated password; anything that
        outlives the session or holds imported data uses one the user knows.
        """
        if password is not None:
            return password
        if not keep_dmg and source is None:
            return generate_password()
        if self.prompt_password is None:
            raise InvalidPasswordError("a password is required")
        return self.prompt_password()

    def pending_image(
        self,
        size: int,
        days: int,
        keep_dmg: bool = False,
        password: Optional[str] = None,
        volume_name: Optional[str] = None,
        source: Optional[Path] = None,
    ) -> PendingImage:
        """Collect everything needed to create an image."""
        return PendingImage(
            password=self.resolve_password(password, keep_dmg, source),
            size=size,
            volume_name=resolve_volume_name(volume_name, source, self.default_name),
            keep_dmg=keep_dmg,
            days=days,
        )

    def prepare(self, pending: PendingImage) -> PreparedImage:
        """Create, mount and secure an image.

        A failure in any step aborts; an image file created before the failure
        is left in the temp directory.
        """
        dmg_path = self.temp_dir / f"encrypted-{uuid.uuid4()}-{pending.volume_name}.dmg"

        self.progress("[1] Creating encrypted DMG")
        self.disk_images.create(dmg_path, pending.volume_name, pending.size, pending.password)

        self.progress("[2] Mounting DMG")
        mounted_at = self.disk_images.attach(dmg_path, pending.password)

        self.progress("[3] Securing mounted volume")
        good_until = expiry.compute_expiry(self.clock(), pending.days)
        expiry.write_marker(mounted_at, good_until)
        self.disk_images.secure(mounted_at)
        logger.info(f"Volume {mounted_at} good until {expiry.format_expiry(good_until)}")

        return PreparedImage(
            password=pending.password,
            dmg_path=dmg_path,
            mounted_at=mounted_at,
        )

    def finalize(self, pending: PendingImage, prepared: PreparedImage) -> PreparedImage:
        """Keep or delete the image file; the mount stays either way."""
        if pending.keep_dmg:
            self.progress(f"Placed encrypted DMG at: {prepared.dmg_path}")
        else:
            # hdiutil keeps serving the mounted volume after the backing file is unlinked
            prepared.dmg_path.unlink()
            logger.debug(f"Removed image file {prepared.dmg_path}")
        self.progress(f"Mounted encrypted DMG at: {prepared.mounted_at}")
        self.progress(f'Unmount with: umount "{prepared.mounted_at}"')
        return prepared

    def create(
        self,
        size: int,
        days: int,
        keep_dmg: bool = False,
        password: Optional[str] = None,
        volume_name: Optional[str] = None,
    ) -> PreparedImage:
        """Create and mount a new scratch volume."""
        pending = self.pending_image(
            size=size,
            days=days,
            keep_dmg=keep_dmg,
            password=password,
            volume_name=volume_name,
        )
        return self.finalize(pending, self.prepare(pending))

    def import_archive(
        self,
        source: Path,
        extra_size: int,
        days: int,
        keep_dmg: bool = False,
        password: Optional[str] = None,
        volume_name: Optional[str] = None,
    ) -> PreparedImage:
        """Create a volume sized for an encrypted archive and extract it there."""
        if self.archives is None:
            raise SourceArchiveError("no archive backend configured")

        source = Path(source).expanduser()
        if not source.exists():
            raise SourceArchiveError(f"source archive does not exist: {source}")
        source = source.resolve()
        if not source.is_file():
            raise SourceArchiveError("source archive is not a file")

        size = required_size(self.archives.uncompressed_size(source), extra_size)
        pending = self.pending_image(
            size=size,
            days=days,
            keep_dmg=keep_dmg,
            password=password,
            volume_name=volume_name,
            source=source,
        )

        if not self.archives.check_password(source, pending.password):
            raise InvalidPasswordError()

        prepared = self.prepare(pending)

        self.progress("[4] Extracting encrypted zip")
        self.archives.extract(source, prepared.mounted_at, pending.password)

        return self.finalize(pending, prepared)

    def list_volumes(self) -> List[Volume]:
        """All mounted volumes carrying an expiry marker."""
        return self.registry.list_volumes()

    def select_for_eject(
        self,
        volumes: List[Volume],
        path: Optional[Path] = None,
        all_volumes: bool = False,
        expired: bool = False,
    ) -> List[Volume]:
        """Pick volumes matching any of the selectors.

        Raises VolumeNotMountedError when ``path`` was given but matched nothing.
        """
        reference = _canonical(path) if path is not None else None
        current = self.clock()
        selected = []
        found = False

        for volume in volumes:
            is_match = reference is not None and _canonical(volume.path) == reference
            if is_match:
                found = True
            if all_volumes or is_match or (expired and expiry.is_expired(volume.good_until, current)):
                selected.append(volume)

        if path is not None and not found:
            raise VolumeNotMountedError()

        return selected

    def eject(
        self,
        path: Optional[Path] = None,
        all_volumes: bool = False,
        expired: bool = False,
    ) -> List[Volume]:
        """Eject the selected managed volumes and return them."""
        selected = self.select_for_eject(
            self.list_volumes(),
            path=path,
            all_volumes=all_volumes,
            expired=expired,
        )
        current = self.clock()
        for volume in selected:
            label = "expired " if expiry.is_expired(volume.good_until, current) else ""
            self.progress(f"Ejecting {label}volume {volume.path}")
            self.disk_images.detach(volume.path)
        return selected

    def prune(self) -> List[Volume]:
        """Eject every expired volume."""
        return self.eject(expired=True)


def _canonical(path: Path) -> Optional[Path]:
    """Resolve a path, or None if it does not exist."""
    try:
        return Path(path).expanduser().resolve(strict=True)
    except OSError:
        return None
