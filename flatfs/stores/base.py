"""
FlatFS Stores: Base Classes and Data Structures.

This module provides the foundation for backing stores:
- PathSource: capability interface supplying the flat list of file paths
- EntryStat: immutable metadata for a file or synthesized directory
- FlatFileSystem: abstract store exposing a hierarchical interface

A store only knows its files. Directories, existence checks and searches
come from the HierarchyEngine the store owns.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Iterable, List, Optional

from flatfs.core.constants import DEFAULT_FILE_TIME, SearchTarget
from flatfs.core.errors import (
    DirectoryNotFoundError,
    EntryNotFoundError,
    InvalidPathError,
    ReadOnlyFileSystemError,
)
from flatfs.core.path_utils import PathComparer, PathLike, VirtualPath, require_absolute
from flatfs.hierarchy.engine import HierarchyEngine, PathQuery
from flatfs.infrastructure.logger import Logger


class PathSource(ABC):
    """Anything that can list the absolute paths of the files it holds."""

    @abstractmethod
    def paths(self) -> Iterable[PathLike]:
        """
        Return the absolute paths of all files, never directories.

        Called again for every query; implementations must not assume the
        result is cached.
        """
        pass


@dataclass(frozen=True)
class EntryStat:
    """
    Immutable metadata for an entry.

    Attributes:
        path: Absolute path of the entry
        is_directory: True for synthesized directories
        size: File length in bytes, 0 for directories
        mtime: Last write time
        ctime: Creation time
        atime: Last access time
        readonly: Whether the store rejects writes
    """

    path: VirtualPath
    is_directory: bool
    size: int
    mtime: datetime
    ctime: datetime
    atime: datetime
    readonly: bool

    @property
    def is_file(self) -> bool:
        return not self.is_directory


class FlatFileSystem(PathSource):
    """
    Abstract backing store with a derived directory hierarchy.

    Subclasses implement paths(), _open() and _length(). Mutating
    operations raise ReadOnlyFileSystemError unless a subclass overrides
    them.
    """

    readonly = True

    def __init__(self, name: str, case_sensitive: bool = False):
        """
        Initialize the store.

        Args:
            name: Display name (archive path, package name, ...)
            case_sensitive: Compare paths exactly instead of ignoring case
        """
        self.name = name
        self.comparer = PathComparer.ORDINAL if case_sensitive else PathComparer.IGNORE_CASE
        self.engine = HierarchyEngine(self, self.comparer)
        self.logger = Logger(f"flatfs.stores.{type(self).__name__.lower()}")
        self.closed = False

    # =========================================================================
    # Hierarchy
    # =========================================================================

    def directory_exists(self, path: PathLike) -> bool:
        return self.engine.directory_exists(path)

    def file_exists(self, path: PathLike) -> bool:
        return self.engine.file_exists(path)

    def enumerate_paths(
        self,
        path: PathLike,
        pattern: str = "*",
        recursive: bool = False,
        target: SearchTarget = SearchTarget.BOTH,
    ) -> PathQuery:
        return self.engine.enumerate_paths(path, pattern, recursive, target)

    def enumerate_files(self, path: PathLike, pattern: str = "*", recursive: bool = False) -> PathQuery:
        return self.engine.enumerate_files(path, pattern, recursive)

    def enumerate_directories(
        self, path: PathLike, pattern: str = "*", recursive: bool = False
    ) -> PathQuery:
        return self.engine.enumerate_directories(path, pattern, recursive)

    # =========================================================================
    # Reading
    # =========================================================================

    @abstractmethod
    def _open(self, path: VirtualPath) -> BinaryIO:
        """Open an existing file for reading."""
        pass

    @abstractmethod
    def _length(self, path: VirtualPath) -> int:
        """Length of an existing file."""
        pass

    def _last_write_time(self, path: VirtualPath) -> datetime:
        return DEFAULT_FILE_TIME

    def _require_file(self, path: PathLike) -> VirtualPath:
        """
        Resolve a path to an existing file.

        Raises:
            InvalidPathError: If path is not absolute
            EntryNotFoundError: If no such file exists
        """
        path = require_absolute(path)
        if not self.engine.file_exists(path):
            raise EntryNotFoundError(f"File not found: {path}")
        return path

    def _require_directory(self, path: PathLike) -> VirtualPath:
        path = require_absolute(path)
        if not self.engine.directory_exists(path):
            raise DirectoryNotFoundError(f"Directory not found: {path}")
        return path

    def open_file(self, path: PathLike) -> BinaryIO:
        """
        Open a file for reading.

        Raises:
            EntryNotFoundError: If the file does not exist
        """
        path = self._require_file(path)
        self.logger.debug("Opening file", store=self.name, path=str(path))
        return self._open(path)

    def read_bytes(self, path: PathLike) -> bytes:
        with self.open_file(path) as stream:
            return stream.read()

    def get_file_length(self, path: PathLike) -> int:
        return self._length(self._require_file(path))

    def get_last_write_time(self, path: PathLike) -> datetime:
        return self._last_write_time(self._require_file(path))

    def get_creation_time(self, path: PathLike) -> datetime:
        self._require_file(path)
        return DEFAULT_FILE_TIME

    def get_last_access_time(self, path: PathLike) -> datetime:
        self._require_file(path)
        return DEFAULT_FILE_TIME

    def stat(self, path: PathLike) -> EntryStat:
        """
        Describe a file or directory.

        Raises:
            EntryNotFoundError: If path is neither a file nor a directory
        """
        path = require_absolute(path)
        if self.engine.file_exists(path):
            return EntryStat(
                path=path,
                is_directory=False,
                size=self._length(path),
                mtime=self._last_write_time(path),
                ctime=DEFAULT_FILE_TIME,
                atime=DEFAULT_FILE_TIME,
                readonly=self.readonly,
            )
        if self.engine.directory_exists(path):
            return EntryStat(
                path=path,
                is_directory=True,
                size=0,
                mtime=DEFAULT_FILE_TIME,
                ctime=DEFAULT_FILE_TIME,
                atime=DEFAULT_FILE_TIME,
                readonly=self.readonly,
            )
        raise EntryNotFoundError(f"No such file or directory: {path}")

    # =========================================================================
    # Writing
    # =========================================================================

    def _read_only(self) -> ReadOnlyFileSystemError:
        return ReadOnlyFileSystemError(f"This filesystem is read-only: {self.name}")

    def write_file(self, path: PathLike, data: bytes) -> None:
        raise self._read_only()

    def create_directory(self, path: PathLike) -> None:
        raise self._read_only()

    def delete_file(self, path: PathLike) -> None:
        raise self._read_only()

    def delete_directory(self, path: PathLike, recursive: bool = False) -> None:
        raise self._read_only()

    def copy_file(self, src: PathLike, dest: PathLike, overwrite: bool = False) -> None:
        raise self._read_only()

    def move_file(self, src: PathLike, dest: PathLike) -> None:
        """Move a file by copying it and deleting the source."""
        if self.readonly:
            raise self._read_only()
        self.copy_file(src, dest, overwrite=False)
        self.delete_file(src)

    def move_directory(self, src: PathLike, dest: PathLike) -> None:
        """
        Move every file below src to the same relative location below dest.

        Each file is attempted even after a failure. A single failure is
        re-raised as is; several are raised together in an ExceptionGroup.

        Raises:
            ReadOnlyFileSystemError: If the store is read-only
            DirectoryNotFoundError: If src is not a directory
            OSError: The only failure, when exactly one file failed
            ExceptionGroup: All failures, when more than one file failed
        """
        if self.readonly:
            raise self._read_only()
        src = self._require_directory(src)
        dest = require_absolute(dest, "dest")
        if src.is_root:
            raise InvalidPathError("Cannot move the root directory")

        errors: List[OSError] = []
        for src_file in list(self.enumerate_files(src, "*", recursive=True)):
            dest_file = dest / src_file.relative_to(src, self.comparer)
            try:
                self.move_file(src_file, dest_file)
            except OSError as e:
                self.logger.warning("Failed to move file", src=str(src_file), dest=str(dest_file), error=str(e))
                errors.append(e)

        if len(errors) > 1:
            raise ExceptionGroup(f"Failed to move {len(errors)} files from {src} to {dest}", errors)
        if len(errors) == 1:
            raise errors[0]

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FlatFileSystem":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


def read_stream(data: bytes) -> BinaryIO:
    """Wrap bytes in a read-only binary stream."""
    return io.BytesIO(data)


def lookup(entries: Iterable[VirtualPath], path: VirtualPath, comparer: PathComparer) -> Optional[VirtualPath]:
    """Find the stored spelling of path among entries under a case policy."""
    key = comparer.key(path)
    for entry in entries:
        if comparer.key(entry) == key:
            return entry
    return None
