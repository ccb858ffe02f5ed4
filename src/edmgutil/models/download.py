"""Download audit models."""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field


WILDCARD_PREFIX = "*."


class DomainPattern(BaseModel):
    """A domain filter, either a literal host or ``*.domain`` for domain and subdomains."""

    pattern: str

    @property
    def is_wildcard(self) -> bool:
        return self.pattern.startswith(WILDCARD_PREFIX)

    @property
    def host(self) -> str:
        """The pattern with the wildcard marker stripped."""
        if self.is_wildcard:
            return self.pattern[len(WILDCARD_PREFIX):]
        return self.pattern


class DownloadRecord(BaseModel):
    """A downloaded file together with the URL it came from."""

    path: Path
    source: str = Field(..., description="First origin URL matching the filters")
    host: Optional[str] = None

    @property
    def file_name(self) -> str:
        return self.path.name


class DeleteResult(BaseModel):
    """Outcome of a best-effort delete of a download."""

    path: Path
    deleted: bool
    error: Optional[str] = None
