"""
In-memory backing store.

Holds file contents in a dictionary keyed by path. Used as the writable
reference store and as the test fixture store.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Mapping, Optional, Tuple

from flatfs.core.errors import DestinationExistsError, EntryNotFoundError, InvalidPathError
from flatfs.core.path_utils import PathLike, VirtualPath, require_absolute
from flatfs.stores.base import FlatFileSystem, read_stream


@dataclass
class MemoryEntry:
    """A stored file."""

    path: VirtualPath
    data: bytes
    mtime: datetime


class MemoryFileSystem(FlatFileSystem):
    """
    Writable store backed by a dictionary.

    Directories cannot exist on their own: create_directory() is a no-op
    and a directory disappears with its last file.
    """

    readonly = False

    def __init__(
        self,
        files: Optional[Mapping[str, bytes]] = None,
        name: str = "memory",
        case_sensitive: bool = False,
    ):
        """
        Initialize the store.

        Args:
            files: Initial contents, absolute path to bytes
            name: Display name
            case_sensitive: Compare paths exactly instead of ignoring case
        """
        super().__init__(name, case_sensitive)
        self._entries: Dict[Tuple, MemoryEntry] = {}
        self._lock = threading.RLock()
        if files:
            self._load(files)

    def _load(self, files: Mapping[str, bytes]) -> None:
        """
        Fill an empty store from its initial mapping.

        The layout is checked once for the whole mapping: no path may be
        the root, and no file may also be an ancestor of another file.

        Raises:
            InvalidPathError: If the mapping holds an invalid layout
        """
        now = datetime.now(timezone.utc)
        entries: Dict[Tuple, MemoryEntry] = {}
        for raw, data in files.items():
            path = require_absolute(raw)
            if path.is_root:
                raise InvalidPathError("Cannot write to the root directory")
            key = self.comparer.key(path)
            existing = entries.get(key)
            entries[key] = MemoryEntry(existing.path if existing else path, bytes(data), now)

        directories: Dict[Tuple, VirtualPath] = {}
        for entry in entries.values():
            for ancestor in entry.path.ancestors():
                directories.setdefault(self.comparer.key(ancestor), ancestor)

        clashes = sorted(entries.keys() & directories.keys())
        if clashes:
            raise InvalidPathError(f"Path is both a file and a directory: {directories[clashes[0]]}")

        with self._lock:
            self._entries = entries

    def paths(self) -> List[VirtualPath]:
        with self._lock:
            return [entry.path for entry in self._entries.values()]

    def _get(self, path: VirtualPath) -> MemoryEntry:
        with self._lock:
            entry = self._entries.get(self.comparer.key(path))
        if entry is None:
            raise EntryNotFoundError(f"File not found: {path}")
        return entry

    def _open(self, path: VirtualPath) -> BinaryIO:
        return read_stream(self._get(path).data)

    def _length(self, path: VirtualPath) -> int:
        return len(self._get(path).data)

    def _last_write_time(self, path: VirtualPath) -> datetime:
        return self._get(path).mtime

    def write_file(self, path: PathLike, data: bytes) -> None:
        """
        Create or replace a file.

        Raises:
            InvalidPathError: If path is root or lies below an existing file
        """
        path = require_absolute(path)
        if path.is_root:
            raise InvalidPathError("Cannot write to the root directory")

        with self._lock:
            if self.engine.directory_exists(path):
                raise InvalidPathError(f"Path is a directory: {path}")
            for ancestor in path.ancestors():
                if self.engine.file_exists(ancestor):
                    raise InvalidPathError(f"Parent is a file: {ancestor}")

            key = self.comparer.key(path)
            existing = self._entries.get(key)
            stored_path = existing.path if existing else path
            self._entries[key] = MemoryEntry(stored_path, bytes(data), datetime.now(timezone.utc))

    def create_directory(self, path: PathLike) -> None:
        require_absolute(path)

    def delete_file(self, path: PathLike) -> None:
        path = self._require_file(path)
        with self._lock:
            self._entries.pop(self.comparer.key(path), None)
        self.logger.debug("Deleted file", store=self.name, path=str(path))

    def delete_directory(self, path: PathLike, recursive: bool = False) -> None:
        """
        Delete the files below a directory.

        Only direct children are removed unless recursive is set, so a
        non-recursive delete can leave the directory in place.
        """
        path = self._require_directory(path)
        for file_path in list(self.enumerate_files(path, "*", recursive)):
            self.delete_file(file_path)

    def copy_file(self, src: PathLike, dest: PathLike, overwrite: bool = False) -> None:
        """
        Copy a file.

        Raises:
            EntryNotFoundError: If src does not exist
            DestinationExistsError: If dest exists and overwrite is False
        """
        src = self._require_file(src)
        dest = require_absolute(dest, "dest")
        with self._lock:
            if not overwrite and self.engine.file_exists(dest):
                raise DestinationExistsError(f"Destination file already exists: {dest}")
            self.write_file(dest, self._get(src).data)

