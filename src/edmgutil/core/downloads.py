"""Auditing the downloads folder by origin URL."""

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from urllib.parse import SplitResult, urlsplit

from edmgutil.backends.base import MetadataStore
from edmgutil.core.matcher import matches_any
from edmgutil.models.download import DeleteResult, DownloadRecord


logger = logging.getLogger(__name__)


def parse_url(candidate: str) -> Optional[SplitResult]:
    """Parse an absolute URL; None for anything that is not one."""
    try:
        url = urlsplit(candidate.strip())
        # Accessing port validates it
        url.port
    except ValueError:
        return None
    if not url.scheme or not (url.netloc or url.path):
        return None
    return url


def created_at(path: Path) -> datetime:
    """File creation time, using the change time where birth time is unavailable."""
    stat = path.stat()
    timestamp = getattr(stat, "st_birthtime", stat.st_ctime)
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


class DownloadAuditor:
    """Finds downloaded files whose origin matches a set of domain patterns."""

    def __init__(
        self,
        metadata: MetadataStore,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=timezone.utc),
    ):
        self.metadata = metadata
        self.clock = clock

    def is_old_enough(self, path: Path, days: Optional[int]) -> bool:
        """True when no age cutoff is set or the file predates it."""
        if days is None:
            return True
        try:
            return created_at(path) < self.clock() - timedelta(days=days)
        except OSError as e:
            logger.debug(f"Cannot stat {path}: {e}")
            return False

    def source_of(
        self,
        path: Path,
        domains: Sequence[str] = (),
        days: Optional[int] = None,
    ) -> Optional[DownloadRecord]:
        """Return the record for ``path`` if one of its origin URLs matches."""
        candidates = self.metadata.origin_urls(path)
        if not candidates:
            return None

        urls = []
        for candidate in candidates:
            url = parse_url(candidate)
            if url is None:
                logger.debug(f"Ignoring unparseable origin {candidate!r} on {path}")
                continue
            urls.append((candidate, url))

        if not urls or not self.is_old_enough(path, days):
            return None

        for candidate, url in urls:
            if matches_any(domains, url.hostname):
                return DownloadRecord(path=path, source=candidate, host=url.hostname)
        return None

    def find(
        self,
        directory: Path,
        domains: Sequence[str] = (),
        days: Optional[int] = None,
    ) -> List[DownloadRecord]:
        """Scan ``directory`` (not recursively) and return matches sorted by file name."""
        records = []
        with os.scandir(directory) as entries:
            for entry in entries:
                record = self.source_of(Path(entry.path), domains, days)
                if record is not None:
                    records.append(record)
        records.sort(key=lambda record: record.file_name)
        return records

    def delete(self, records: Sequence[DownloadRecord]) -> List[DeleteResult]:
        """Remove every matched file; failures are reported per file, never raised."""
        results = []
        for record in records:
            try:
                record.path.unlink()
            except OSError as e:
                logger.debug(f"Could not delete {record.path}: {e}")
                results.append(DeleteResult(path=record.path, deleted=False, error=str(e)))
                continue
            results.append(DeleteResult(path=record.path, deleted=True))
        return results
