"""Volume and image creation models."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Volume(BaseModel):
    """A mounted encrypted volume managed by edmgutil."""
    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Mount point of the volume")
    good_until: int = Field(..., description="Expiry as seconds since the Unix epoch")
    name: Optional[str] = None

    @property
    def expires(self) -> datetime:
        """Expiry as an aware UTC datetime."""
        return datetime.fromtimestamp(self.good_until, tz=timezone.utc)


class PendingImage(BaseModel):
    """An image that is being created."""
    model_config = ConfigDict(extra="forbid")

    password: str = Field(..., repr=False)
    size: int = Field(..., ge=1, description="Size in megabytes")
    volume_name: str = Field(..., min_length=1)
    keep_dmg: bool = Field(default=False)
    days: int = Field(default=7, ge=1)


class PreparedImage(BaseModel):
    """Result of creating, mounting and securing an image."""

    password: str = Field(..., repr=False)
    dmg_path: Path
    mounted_at: Path
