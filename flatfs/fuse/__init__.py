"""FlatFS FUSE Interface.

This module mounts a FlatFileSystem through FUSE:
- FlatFSOperations: FUSE callback implementations

Importing this package loads libfuse through fusepy.

Usage:
    from flatfs.fuse import FlatFSOperations
    from flatfs.stores import ZipFileSystem

    ops = FlatFSOperations(ZipFileSystem("data.zip"))
"""

from flatfs.fuse.operations import FileHandle, FlatFSOperations

__all__ = [
    "FlatFSOperations",
    "FileHandle",
]
