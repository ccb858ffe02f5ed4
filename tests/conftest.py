"""Shared fakes for the external backends."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from edmgutil.backends.base import ArchiveBackend, DiskImageBackend, MetadataStore


class FakeDiskImages(DiskImageBackend):
    """In-memory disk image backend that mounts images under a directory."""

    def __init__(self, volumes_root: Path):
        self.volumes_root = volumes_root
        self.created: List[tuple] = []
        self.attached: List[Path] = []
        self.detached: List[Path] = []
        self.secured: List[Path] = []
        self.mounted: List[Path] = []
        self.fail_on: Optional[str] = None

    def _maybe_fail(self, step: str):
        if self.fail_on == step:
            raise OSError(f"{step} failed")

    def create(self, path, volume_name, size, password):
        self._maybe_fail("create")
        path.write_bytes(b"dmg")
        self.created.append((path, volume_name, size, password))

    def attach(self, path, password):
        self._maybe_fail("attach")
        mount_point = self.volumes_root / self.created[-1][1]
        mount_point.mkdir(parents=True, exist_ok=True)
        self.attached.append(path)
        self.mounted.append(mount_point)
        return mount_point

    def mount_points(self):
        return list(self.mounted)

    def detach(self, mount_point):
        self._maybe_fail("detach")
        self.detached.append(mount_point)

    def secure(self, mount_point):
        self._maybe_fail("secure")
        self.secured.append(mount_point)


class FakeArchives(ArchiveBackend):
    """Archive backend with a scripted size and password."""

    def __init__(self, size: int = 0, password: str = "secret"):
        self.size = size
        self.password = password
        self.extracted: List[tuple] = []
        self.checked: List[str] = []

    def uncompressed_size(self, path):
        return self.size

    def check_password(self, path, password):
        self.checked.append(password)
        return password == self.password

    def extract(self, path, target, password):
        (target / "extracted.txt").write_text(path.name)
        self.extracted.append((path, target, password))


class FakeMetadata(MetadataStore):
    """Metadata store backed by a dict of file name to URL list."""

    def __init__(self, urls: Optional[Dict[str, List[str]]] = None):
        self.urls = urls or {}

    def origin_urls(self, path):
        return self.urls.get(Path(path).name)


@pytest.fixture
def disk_images(tmp_path):
    """Fake disk image backend mounting under tmp_path/Volumes."""
    root = tmp_path / "Volumes"
    root.mkdir()
    return FakeDiskImages(root)


@pytest.fixture
def archives():
    """Fake archive backend."""
    return FakeArchives()


@pytest.fixture
def make_volume(disk_images):
    """Create a mounted volume directory, optionally with an expiry marker."""
    def _make(name: str, good_until: Optional[int] = None, marker: Optional[str] = None) -> Path:
        mount_point = disk_images.volumes_root / name
        mount_point.mkdir()
        if good_until is not None:
            marker = str(good_until)
        if marker is not None:
            (mount_point / ".encrypted-volume-good-until").write_text(marker)
        disk_images.mounted.append(mount_point)
        return mount_point
    return _make


@pytest.fixture
def fake_metadata():
    """Factory for metadata stores keyed by file name."""
    return FakeMetadata
