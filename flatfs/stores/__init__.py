"""FlatFS Backing Stores.

Stores hold the actual files and expose them as a flat PathSource; the
directory hierarchy on top is derived by the HierarchyEngine:
- FlatFileSystem: abstract base with read, metadata and mutation operations
- MemoryFileSystem: writable in-memory store
- ZipFileSystem: read-only zip archive
- PackageResourceFileSystem: read-only package resources
"""

from .base import EntryStat, FlatFileSystem, PathSource
from .factory import detect_store_type, open_store
from .memory import MemoryFileSystem
from .resources import PackageResourceFileSystem
from .zipfs import ZipFileSystem

__all__ = [
    "PathSource",
    "EntryStat",
    "FlatFileSystem",
    "MemoryFileSystem",
    "ZipFileSystem",
    "PackageResourceFileSystem",
    "detect_store_type",
    "open_store",
]
