"""Backend registry and required tool checks."""

import logging
from typing import Dict, Optional

from edmgutil.backends.base import ArchiveBackend, BackendStatus, DiskImageBackend, MetadataStore
from edmgutil.backends.hdiutil import HdiutilBackend
from edmgutil.backends.sevenzip import SevenZipBackend
from edmgutil.backends.xattr_store import XattrMetadataStore
from edmgutil.errors import ToolNotFoundError
from edmgutil.models.config import EdmgConfig
from edmgutil.utils.commands import which


logger = logging.getLogger(__name__)

DISK_IMAGE_TOOL = "hdiutil"
ARCHIVE_TOOL = "7z"
CRONTAB_TOOL = "crontab"


class BackendRegistry:
    """Holds the backends used by the volume and download commands."""

    def __init__(
        self,
        disk_images: Optional[DiskImageBackend] = None,
        archives: Optional[ArchiveBackend] = None,
        metadata: Optional[MetadataStore] = None,
    ):
        """Initialize backend registry."""
        self.disk_images = disk_images
        self.archives = archives
        self.metadata = metadata

    @classmethod
    def from_config(cls, config: EdmgConfig) -> "BackendRegistry":
        """Build the default macOS backends."""
        return cls(
            disk_images=HdiutilBackend(icon_path=config.volume.icon_path),
            archives=SevenZipBackend(),
            metadata=XattrMetadataStore(),
        )

    def status(self, *tools: str) -> Dict[str, BackendStatus]:
        """Report availability of each tool."""
        return {
            tool: BackendStatus.AVAILABLE if which(tool) else BackendStatus.MISSING
            for tool in tools
        }

    def require(self, *tools: str) -> None:
        """Raise ToolNotFoundError for the first tool that is not installed."""
        for tool, status in self.status(*tools).items():
            if status is BackendStatus.MISSING:
                logger.debug(f"Required tool not found: {tool}")
                raise ToolNotFoundError(tool)
            logger.debug(f"Found required tool: {tool}")
