"""Pydantic models for configuration and validation."""

from edmgutil.models.config import EdmgConfig, VolumeConfig, DownloadsConfig, CronConfig
from edmgutil.models.volume import Volume, PendingImage, PreparedImage
from edmgutil.models.download import DomainPattern, DownloadRecord, DeleteResult

__all__ = [
    "EdmgConfig",
    "VolumeConfig",
    "DownloadsConfig",
    "CronConfig",
    "Volume",
    "PendingImage",
    "PreparedImage",
    "DomainPattern",
    "DownloadRecord",
    "DeleteResult",
]
