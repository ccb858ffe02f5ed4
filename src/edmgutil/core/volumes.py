"""Read side of the volume registry."""

import logging
from typing import List

from edmgutil.backends.base import DiskImageBackend
from edmgutil.core.expiry import read_marker
from edmgutil.models.volume import Volume


logger = logging.getLogger(__name__)


class VolumeRegistry:
    """Finds mounted volumes that carry an expiry marker."""

    def __init__(self, disk_images: DiskImageBackend):
        self.disk_images = disk_images

    def list_volumes(self) -> List[Volume]:
        """Return managed volumes in the order the disk image backend reports them."""
        volumes = []
        for mount_point in self.disk_images.mount_points():
            good_until = read_marker(mount_point)
            if good_until is None:
                logger.debug(f"Skipping unmanaged volume {mount_point}")
                continue
            volumes.append(Volume(path=mount_point, good_until=good_until, name=mount_point.name))
        return volumes
