"""Backends wrapping the external macOS tools."""

from edmgutil.backends.base import ArchiveBackend, BackendStatus, DiskImageBackend, MetadataStore
from edmgutil.backends.registry import BackendRegistry

__all__ = [
    "ArchiveBackend",
    "BackendStatus",
    "DiskImageBackend",
    "MetadataStore",
    "BackendRegistry",
]
