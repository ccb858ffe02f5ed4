"""
edmgutil - disposable encrypted DMG volumes.

Creates encrypted disk images that expire, imports encrypted archives into
them, ejects expired volumes from cron and audits the downloads folder by
origin URL.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from edmgutil.models.config import EdmgConfig
from edmgutil.models.volume import Volume, PendingImage
from edmgutil.models.download import DownloadRecord

__all__ = [
    "EdmgConfig",
    "Volume",
    "PendingImage",
    "DownloadRecord",
]
