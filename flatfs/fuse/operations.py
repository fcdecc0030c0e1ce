"""
FUSE filesystem operations for FlatFS.

This module implements the FUSE (Filesystem in Userspace) interface over a
FlatFileSystem:
- Metadata operations (getattr, access, statfs)
- Directory operations (readdir, mkdir, rmdir, rename)
- File operations (open, read, release, unlink)

Directories shown through the mount are the synthesized directories of the
store's hierarchy engine. Store errors are translated to errno values.
"""

import errno
import os
import stat
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from functools import wraps
from typing import Any, BinaryIO, Dict, List

from fuse import FuseOSError, Operations

from flatfs.core.constants import DEFAULT_FILE_TIME, Limits, SearchTarget
from flatfs.core.errors import FlatFSError, ReadOnlyFileSystemError
from flatfs.infrastructure.logger import Logger
from flatfs.stores.base import FlatFileSystem


@dataclass
class FileHandle:
    """Represents an open file handle."""

    stream: BinaryIO  # Stream opened from the store
    path: str  # Virtual path used to open file
    flags: int  # Open flags


def to_errno(exc: BaseException) -> int:
    """Map a store exception to an errno value."""
    if isinstance(exc, ReadOnlyFileSystemError):
        return errno.EROFS
    if isinstance(exc, FileNotFoundError):
        return errno.ENOENT
    if isinstance(exc, FileExistsError):
        return errno.EEXIST
    if isinstance(exc, ValueError):
        return errno.EINVAL
    if isinstance(exc, OSError) and exc.errno:
        return exc.errno
    return errno.EIO


def translate_errors(func):
    """Re-raise store exceptions as FuseOSError."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FuseOSError:
            raise
        except (FlatFSError, OSError, ExceptionGroup) as e:
            raise FuseOSError(to_errno(e))

    return wrapper


def to_timestamp(value: datetime) -> float:
    """Seconds since the epoch; the store default time maps to 0."""
    if value == DEFAULT_FILE_TIME:
        return 0.0
    return value.timestamp()


class FlatFSOperations(Operations):
    """
    FUSE filesystem operations implementation for FlatFS.

    Thread Safety:
    - File handle tracking uses a lock
    - Store queries are stateless in the hierarchy engine
    """

    def __init__(self, filesystem: FlatFileSystem, readonly: bool = True):
        """
        Initialize FUSE operations.

        Args:
            filesystem: Backing store to expose
            readonly: Reject all mutations even if the store allows them
        """
        self.filesystem = filesystem
        self.readonly = readonly or filesystem.readonly
        self.logger = Logger("flatfs.fuse")

        # File handle tracking
        self.fds: Dict[int, FileHandle] = {}
        self.fd_counter = 0
        self.fd_lock = threading.Lock()

        self.uid = os.getuid() if hasattr(os, "getuid") else 0
        self.gid = os.getgid() if hasattr(os, "getgid") else 0
        self.mount_time = time.time()

        self.logger.info("FUSE operations initialized", store=filesystem.name, readonly=self.readonly)

    # =========================================================================
    # FUSE Metadata Operations
    # =========================================================================

    @translate_errors
    def getattr(self, path: str, fh=None) -> Dict[str, Any]:
        """
        Get file attributes (equivalent to stat()).

        Raises:
            FuseOSError: ENOENT if path doesn't exist
        """
        entry = self.filesystem.stat(path)

        if entry.is_directory:
            mode = Limits.DEFAULT_DIRECTORY_MODE if self.readonly else Limits.WRITABLE_DIRECTORY_MODE
            st_mode = stat.S_IFDIR | mode
            nlink = 2
            mtime = self.mount_time if entry.path.is_root else to_timestamp(entry.mtime)
        else:
            mode = Limits.DEFAULT_FILE_MODE if self.readonly else Limits.WRITABLE_FILE_MODE
            st_mode = stat.S_IFREG | mode
            nlink = 1
            mtime = to_timestamp(entry.mtime)

        return {
            "st_mode": st_mode,
            "st_nlink": nlink,
            "st_size": entry.size,
            "st_ctime": to_timestamp(entry.ctime) or mtime,
            "st_mtime": mtime,
            "st_atime": to_timestamp(entry.atime) or mtime,
            "st_uid": self.uid,
            "st_gid": self.gid,
        }

    def statfs(self, path: str) -> Dict[str, Any]:
        return {"f_bsize": 4096, "f_frsize": 4096, "f_namemax": Limits.MAX_FILENAME_LENGTH}

    @translate_errors
    def access(self, path: str, mode: int) -> None:
        """
        Check file access permissions.

        Raises:
            FuseOSError: ENOENT if doesn't exist, EROFS for write access on readonly mount
        """
        self.filesystem.stat(path)
        if self.readonly and (mode & os.W_OK):
            raise FuseOSError(errno.EROFS)

    # =========================================================================
    # FUSE Directory Operations
    # =========================================================================

    @translate_errors
    def readdir(self, path: str, fh: int) -> List[str]:
        """
        List directory contents.

        Returns:
            List of directory entries (including "." and "..")

        Raises:
            FuseOSError: ENOENT if directory doesn't exist
        """
        entries = self.filesystem.enumerate_paths(path, "*", recursive=False, target=SearchTarget.BOTH)
        return [".", ".."] + [entry.name for entry in entries]

    @translate_errors
    def mkdir(self, path: str, mode: int) -> None:
        self._check_writable()
        self.filesystem.create_directory(path)

    @translate_errors
    def rmdir(self, path: str) -> None:
        """
        Remove directory.

        A flat store has no empty directories, so an existing directory is
        never removable.

        Raises:
            FuseOSError: EROFS on readonly mounts, ENOTEMPTY or ENOENT otherwise
        """
        self._check_writable()
        if self.filesystem.directory_exists(path):
            raise FuseOSError(errno.ENOTEMPTY)
        raise FuseOSError(errno.ENOENT)

    @translate_errors
    def rename(self, old: str, new: str) -> None:
        self._check_writable()
        if self.filesystem.directory_exists(old):
            self.filesystem.move_directory(old, new)
        else:
            self.filesystem.move_file(old, new)
        self.logger.debug("Renamed entry", old=old, new=new)

    # =========================================================================
    # FUSE File Operations
    # =========================================================================

    @translate_errors
    def open(self, path: str, flags: int) -> int:
        """
        Open file and return file handle.

        Raises:
            FuseOSError: ENOENT if file doesn't exist, EROFS if opened for writing
        """
        if flags & (os.O_WRONLY | os.O_RDWR | os.O_APPEND | os.O_CREAT | os.O_TRUNC):
            raise FuseOSError(errno.EROFS)

        stream = self.filesystem.open_file(path)
        fh = self._allocate_file_handle(stream, path, flags)
        self.logger.debug("Opened file", path=path, fh=fh)
        return fh

    @translate_errors
    def read(self, path: str, size: int, offset: int, fh: int) -> bytes:
        """
        Read file content.

        Raises:
            FuseOSError: EBADF if invalid handle
        """
        handle = self._get_file_handle(fh)
        with self.fd_lock:
            handle.stream.seek(offset)
            return handle.stream.read(size)

    def release(self, path: str, fh: int) -> int:
        handle = self._release_file_handle(fh)
        if handle is not None:
            handle.stream.close()
            self.logger.debug("Closed file", path=path, fh=fh)
        return 0

    @translate_errors
    def unlink(self, path: str) -> None:
        self._check_writable()
        self.filesystem.delete_file(path)

    def create(self, path: str, mode: int, fi=None) -> int:
        raise FuseOSError(errno.EROFS)

    def write(self, path: str, data: bytes, offset: int, fh: int) -> int:
        raise FuseOSError(errno.EROFS)

    def truncate(self, path: str, length: int, fh=None) -> None:
        raise FuseOSError(errno.EROFS)

    def chmod(self, path: str, mode: int) -> None:
        raise FuseOSError(errno.EROFS)

    def chown(self, path: str, uid: int, gid: int) -> None:
        raise FuseOSError(errno.EROFS)

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _check_writable(self) -> None:
        if self.readonly:
            raise FuseOSError(errno.EROFS)

    def _allocate_file_handle(self, stream: BinaryIO, path: str, flags: int) -> int:
        with self.fd_lock:
            fh_id = self.fd_counter
            self.fds[fh_id] = FileHandle(stream=stream, path=path, flags=flags)
            self.fd_counter += 1
            return fh_id

    def _get_file_handle(self, fh: int) -> FileHandle:
        """
        Get file handle by ID.

        Raises:
            FuseOSError: EBADF if handle doesn't exist
        """
        if fh not in self.fds:
            raise FuseOSError(errno.EBADF)
        return self.fds[fh]

    def _release_file_handle(self, fh: int):
        with self.fd_lock:
            return self.fds.pop(fh, None)

    def destroy(self, path: str) -> None:
        """Close every handle left open at unmount."""
        with self.fd_lock:
            handles = list(self.fds.values())
            self.fds.clear()
        for handle in handles:
            handle.stream.close()
        self.logger.info("FUSE operations destroyed", store=self.filesystem.name)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "open_files": len(self.fds),
            "store": self.filesystem.name,
            "readonly": self.readonly,
        }
