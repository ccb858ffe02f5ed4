"""Tests for the volume lifecycle orchestrator."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from edmgutil.core.expiry import EXPIRY_MARKER
from edmgutil.core.lifecycle import (
    VolumeLifecycle,
    generate_password,
    required_size,
    resolve_volume_name,
)
from edmgutil.errors import InvalidPasswordError, SourceArchiveError, VolumeNotMountedError

NOW = 1_700_000_000
DAY = 86_400


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path


@pytest.fixture
def prompt():
    return MagicMock(return_value="secret")


@pytest.fixture
def lifecycle(disk_images, archives, prompt, temp_dir):
    """Orchestrator wired to fakes with a frozen clock."""
    return VolumeLifecycle(
        disk_images=disk_images,
        archives=archives,
        prompt_password=prompt,
        temp_dir=temp_dir,
        clock=lambda: NOW,
    )


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "holiday-photos.zip"
    path.write_bytes(b"PK")
    return path


class TestPolicies:
    """Password, name and size policies."""

    def test_generated_password_is_opaque_hex(self):
        password = generate_password()
        assert len(password) == 32
        assert int(password, 16) >= 0
        assert generate_password() != password

    def test_explicit_password_wins(self, lifecycle, prompt):
        assert lifecycle.resolve_password("pw", keep_dmg=True, source=Path("a.zip")) == "pw"
        prompt.assert_not_called()

    def test_scratch_volume_gets_generated_password(self, lifecycle, prompt):
        password = lifecycle.resolve_password(None, keep_dmg=False, source=None)
        assert len(password) == 32
        prompt.assert_not_called()

    def test_kept_volume_prompts(self, lifecycle, prompt):
        assert lifecycle.resolve_password(None, keep_dmg=True, source=None) == "secret"
        prompt.assert_called_once()

    def test_import_prompts(self, lifecycle, prompt):
        assert lifecycle.resolve_password(None, keep_dmg=False, source=Path("a.zip")) == "secret"
        prompt.assert_called_once()

    def test_prompt_required_without_prompter(self, disk_images):
        lifecycle = VolumeLifecycle(disk_images=disk_images)
        with pytest.raises(InvalidPasswordError):
            lifecycle.resolve_password(None, keep_dmg=True, source=None)

    def test_volume_name_policy(self):
        assert resolve_volume_name("Mine", Path("/x/archive.zip"), "Default") == "Mine"
        assert resolve_volume_name(None, Path("/x/archive.zip"), "Default") == "archive"
        assert resolve_volume_name(None, None, "Default") == "Default"

    def test_required_size_rounds_up_and_adds_margin(self):
        assert required_size(0, 100) == 101
        assert required_size(1024 * 1024 - 1, 10) == 11
        assert required_size(1024 * 1024, 10) == 12
        assert required_size(5 * 1024 * 1024 + 1, 0) == 6


class TestCreate:
    """Test creating scratch volumes."""

    def test_create_runs_steps_in_order(self, lifecycle, disk_images, temp_dir):
        """The image is created, mounted, marked, secured and its file removed."""
        messages = []
        lifecycle.progress = messages.append

        result = lifecycle.create(size=50, days=3)

        dmg_path, volume_name, size, password = disk_images.created[0]
        assert volume_name == "EncryptedScratchpad"
        assert size == 50
        assert dmg_path.parent == temp_dir
        assert dmg_path.name.startswith("encrypted-")
        assert dmg_path.name.endswith("-EncryptedScratchpad.dmg")
        assert disk_images.attached == [dmg_path]
        assert disk_images.secured == [result.mounted_at]

        marker = result.mounted_at / EXPIRY_MARKER
        assert marker.read_text() == str(NOW + 3 * DAY)

        assert not dmg_path.exists()
        assert messages[:3] == [
            "[1] Creating encrypted DMG",
            "[2] Mounting DMG",
            "[3] Securing mounted volume",
        ]
        assert messages[-2] == f"Mounted encrypted DMG at: {result.mounted_at}"

    def test_keep_dmg_leaves_file(self, lifecycle, prompt):
        messages = []
        lifecycle.progress = messages.append

        result = lifecycle.create(size=10, days=1, keep_dmg=True, volume_name="Keep")

        assert result.dmg_path.exists()
        assert f"Placed encrypted DMG at: {result.dmg_path}" in messages
        prompt.assert_called_once()

    def test_failure_aborts_remaining_steps(self, lifecycle, disk_images):
        """A failed mount stops the operation and leaves the image file behind."""
        disk_images.fail_on = "attach"

        with pytest.raises(OSError):
            lifecycle.create(size=10, days=1)

        dmg_path = disk_images.created[0][0]
        assert dmg_path.exists()
        assert disk_images.secured == []


class TestImport:
    """Test importing encrypted archives."""

    def test_import_extracts_into_volume(self, lifecycle, disk_images, archives, archive):
        archives.size = 3 * 1024 * 1024

        result = lifecycle.import_archive(archive, extra_size=20, days=2)

        _, volume_name, size, password = disk_images.created[0]
        assert volume_name == "holiday-photos"
        assert size == 3 + 1 + 20
        assert password == "secret"
        assert archives.extracted == [(archive.resolve(), result.mounted_at, "secret")]
        assert (result.mounted_at / "extracted.txt").exists()
        assert (result.mounted_at / EXPIRY_MARKER).read_text() == str(NOW + 2 * DAY)

    def test_wrong_password_fails_before_creating(self, lifecycle, disk_images, archive):
        with pytest.raises(InvalidPasswordError, match="invalid password"):
            lifecycle.import_archive(archive, extra_size=0, days=1, password="nope")

        assert disk_images.created == []

    def test_missing_source(self, lifecycle, tmp_path):
        with pytest.raises(SourceArchiveError):
            lifecycle.import_archive(tmp_path / "missing.zip", extra_size=0, days=1)

    def test_source_must_be_a_file(self, lifecycle, tmp_path):
        with pytest.raises(SourceArchiveError, match="not a file"):
            lifecycle.import_archive(tmp_path, extra_size=0, days=1)


class TestEject:
    """Test volume selection and ejection."""

    @pytest.fixture
    def volumes(self, make_volume):
        expired = make_volume("A", good_until=NOW - 1)
        fresh = make_volume("B", good_until=NOW + DAY)
        return expired, fresh

    def test_expired_only(self, lifecycle, disk_images, volumes):
        expired, fresh = volumes
        ejected = lifecycle.eject(expired=True)
        assert [v.path for v in ejected] == [expired]
        assert disk_images.detached == [expired]

    def test_all(self, lifecycle, disk_images, volumes):
        lifecycle.eject(all_volumes=True)
        assert disk_images.detached == list(volumes)

    def test_explicit_path(self, lifecycle, disk_images, volumes):
        expired, fresh = volumes
        lifecycle.eject(path=fresh)
        assert disk_images.detached == [fresh]

    def test_explicit_path_is_canonicalized(self, lifecycle, disk_images, volumes):
        expired, fresh = volumes
        lifecycle.eject(path=fresh.parent / "A" / ".." / "B")
        assert disk_images.detached == [fresh]

    def test_explicit_path_not_mounted(self, lifecycle, disk_images, volumes, tmp_path):
        with pytest.raises(VolumeNotMountedError, match="volume was not mounted"):
            lifecycle.eject(path=tmp_path)
        assert disk_images.detached == []

    def test_unmanaged_path_is_not_mounted(self, lifecycle, make_volume):
        unmanaged = make_volume("Plain")
        with pytest.raises(VolumeNotMountedError):
            lifecycle.eject(path=unmanaged)

    def test_no_match_is_fine_for_flags(self, lifecycle, disk_images, make_volume):
        make_volume("Fresh", good_until=NOW + DAY)
        assert lifecycle.eject(expired=True) == []
        assert disk_images.detached == []

    def test_exactly_now_is_not_expired(self, lifecycle, disk_images, make_volume):
        make_volume("Edge", good_until=NOW)
        assert lifecycle.prune() == []

    def test_eject_reports_expired_volumes(self, lifecycle, volumes):
        expired, fresh = volumes
        messages = []
        lifecycle.progress = messages.append

        lifecycle.eject(all_volumes=True)

        assert messages == [
            f"Ejecting expired volume {expired}",
            f"Ejecting volume {fresh}",
        ]
