"""Origin URL metadata read from extended attributes."""

import logging
import plistlib
from pathlib import Path
from typing import List, Optional
from xml.parsers.expat import ExpatError

import xattr

from edmgutil.backends.base import MetadataStore


logger = logging.getLogger(__name__)

WHERE_FROMS_ATTR = "com.apple.metadata:kMDItemWhereFroms"


class XattrMetadataStore(MetadataStore):
    """Reads the ``kMDItemWhereFroms`` attribute browsers set on downloads."""

    def __init__(self, attribute: str = WHERE_FROMS_ATTR):
        self.attribute = attribute

    def origin_urls(self, path: Path) -> Optional[List[str]]:
        """Return the decoded URL list, or None when it is absent or unreadable."""
        try:
            raw = xattr.getxattr(str(path), self.attribute)
        except OSError as e:
            logger.debug(f"No {self.attribute} on {path}: {e}")
            return None
        return decode_where_froms(raw)


def decode_where_froms(raw: bytes) -> Optional[List[str]]:
    """Decode the binary plist stored in ``kMDItemWhereFroms``."""
    try:
        value = plistlib.loads(raw)
    except (ValueError, ExpatError) as e:
        logger.debug(f"Undecodable origin metadata: {e}")
        return None
    if not isinstance(value, list):
        return None
    return [item for item in value if isinstance(item, str)]
