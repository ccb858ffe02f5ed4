"""Domain pattern matching for the download auditor."""

from typing import Iterable, Optional

from edmgutil.models.download import DomainPattern


def matches(pattern: str, host: str) -> bool:
    """Check ``host`` against a literal host or a ``*.domain`` pattern.

    ``*.example.com`` matches ``example.com`` and any subdomain of it.
    """
    domain = DomainPattern(pattern=pattern)
    if not domain.is_wildcard:
        return host == domain.host

    suffix = domain.host
    if host == suffix:
        return True
    return host.endswith(suffix) and host[:-len(suffix)].endswith(".")


def matches_any(patterns: Iterable[str], host: Optional[str]) -> bool:
    """An empty pattern list matches every host."""
    patterns = list(patterns)
    if not patterns:
        return True
    if not host:
        return False
    return any(matches(pattern, host) for pattern in patterns)
