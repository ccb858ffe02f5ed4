"""Configuration models."""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_ICON = (
    "/System/Library/CoreServices/CoreTypes.bundle/Contents/Resources/iDiskUserIcon.icns"
)


class VolumeConfig(BaseModel):
    """Defaults for newly created volumes."""
    model_config = ConfigDict(extra="ignore")

    default_days: int = Field(default=7, ge=1)
    default_size: int = Field(default=100, ge=1, description="Size in megabytes")
    default_extra_size: int = Field(default=100, ge=0, description="Import margin in megabytes")
    default_name: str = Field(default="EncryptedScratchpad", min_length=1)
    keep_dmg: bool = Field(default=False)
    temp_dir: Optional[str] = None
    icon_path: str = Field(default=DEFAULT_ICON)


class DownloadsConfig(BaseModel):
    """Download auditing configuration."""
    model_config = ConfigDict(extra="ignore")

    directory: str = Field(default="~/Downloads")
    domains: List[str] = Field(default_factory=list)

    @property
    def path(self) -> Path:
        """Expanded downloads directory."""
        return Path(self.directory).expanduser()


class CronConfig(BaseModel):
    """Crontab integration configuration."""
    model_config = ConfigDict(extra="ignore")

    schedule: str = Field(default="0 * * * *")
    executable: Optional[str] = None

    @field_validator("schedule")
    @classmethod
    def validate_schedule(cls, v):
        """Require the five cron time fields."""
        if len(v.split()) != 5:
            raise ValueError(f"Invalid cron schedule: {v}")
        return v


class EdmgConfig(BaseModel):
    """Main configuration model."""
    model_config = ConfigDict(extra="ignore")

    log_level: str = Field(default="WARNING")
    volume: VolumeConfig = Field(default_factory=VolumeConfig)
    downloads: DownloadsConfig = Field(default_factory=DownloadsConfig)
    cron: CronConfig = Field(default_factory=CronConfig)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()
