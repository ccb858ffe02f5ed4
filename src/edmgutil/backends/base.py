"""Base backend interfaces."""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Optional


class BackendStatus(Enum):
    """Availability of the tool behind a backend."""
    AVAILABLE = "available"
    MISSING = "missing"


class DiskImageBackend(ABC):
    """Creates, mounts and ejects encrypted disk images."""

    @abstractmethod
    def create(self, path: Path, volume_name: str, size: int, password: str) -> None:
        """Create an encrypted image of ``size`` megabytes at ``path``."""
        pass

    @abstractmethod
    def attach(self, path: Path, password: str) -> Path:
        """Mount the image and return its mount point."""
        pass

    @abstractmethod
    def mount_points(self) -> List[Path]:
        """Return the mount points of all attached images."""
        pass

    @abstractmethod
    def detach(self, mount_point: Path) -> None:
        """Eject a mounted volume."""
        pass

    @abstractmethod
    def secure(self, mount_point: Path) -> None:
        """Disable indexing and mark the volume visually."""
        pass


class ArchiveBackend(ABC):
    """Inspects and extracts password protected archives."""

    @abstractmethod
    def uncompressed_size(self, path: Path) -> int:
        """Return the total uncompressed size of the archive in bytes."""
        pass

    @abstractmethod
    def check_password(self, path: Path, password: str) -> bool:
        """Return True if ``password`` unlocks the archive."""
        pass

    @abstractmethod
    def extract(self, path: Path, target: Path, password: str) -> None:
        """Extract the archive into ``target``."""
        pass


class MetadataStore(ABC):
    """Reads download origin metadata attached to files."""

    @abstractmethod
    def origin_urls(self, path: Path) -> Optional[List[str]]:
        """Return the stored origin URLs, or None when there is no readable metadata."""
        pass
