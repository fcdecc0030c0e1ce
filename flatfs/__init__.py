"""FlatFS - hierarchical file-system view over flat backing stores.

Zip archives, package resources and in-memory mappings only know a flat
list of file paths. FlatFS derives the directory tree from those paths and
answers existence checks and wildcard searches over it.

Example:
    >>> from flatfs import MemoryFileSystem
    >>> fs = MemoryFileSystem({"/a.txt": b"", "/a/b.txt": b""})
    >>> fs.directory_exists("/a")
    True
    >>> [str(p) for p in fs.enumerate_files("/", "*.txt", recursive=True)]
    ['/a.txt', '/a/b.txt']
"""

from flatfs.core.constants import FLATFS_VERSION, SearchTarget
from flatfs.core.errors import (
    DestinationExistsError,
    DirectoryNotFoundError,
    EntryNotFoundError,
    FlatFSError,
    InvalidArgumentError,
    InvalidPathError,
    ReadOnlyFileSystemError,
)
from flatfs.core.path_utils import PathComparer, VirtualPath
from flatfs.hierarchy import HierarchyEngine, PathQuery
from flatfs.search import SearchPattern
from flatfs.stores import (
    FlatFileSystem,
    MemoryFileSystem,
    PackageResourceFileSystem,
    PathSource,
    ZipFileSystem,
    open_store,
)

__version__ = FLATFS_VERSION

__all__ = [
    "SearchTarget",
    "VirtualPath",
    "PathComparer",
    "SearchPattern",
    "HierarchyEngine",
    "PathQuery",
    "PathSource",
    "FlatFileSystem",
    "MemoryFileSystem",
    "ZipFileSystem",
    "PackageResourceFileSystem",
    "open_store",
    "FlatFSError",
    "InvalidPathError",
    "InvalidArgumentError",
    "DirectoryNotFoundError",
    "EntryNotFoundError",
    "DestinationExistsError",
    "ReadOnlyFileSystemError",
]
