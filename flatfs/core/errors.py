"""
FlatFS Core: Error Taxonomy.

Every error raised by the engine and the backing stores derives from
FlatFSError and carries an ErrorCode. Errors that have a natural builtin
counterpart also derive from it, so callers can catch FileNotFoundError
or ValueError without importing FlatFS.
"""
from typing import Optional

from flatfs.core.constants import ErrorCode


class FlatFSError(Exception):
    """Base exception for FlatFS errors."""

    error_code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        """Initialize FlatFSError.

        Args:
            message: Error message
            error_code: Associated error code (class default if omitted)
        """
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code

    def __str__(self) -> str:
        return self.message


class InvalidPathError(FlatFSError, ValueError):
    """A path argument is relative, empty or malformed."""

    error_code = ErrorCode.INVALID_INPUT


class InvalidArgumentError(FlatFSError, ValueError):
    """A required non-path argument is absent or malformed."""

    error_code = ErrorCode.INVALID_INPUT


class DirectoryNotFoundError(FlatFSError, FileNotFoundError):
    """A directory does not exist in the virtual hierarchy."""

    error_code = ErrorCode.NOT_FOUND


class EntryNotFoundError(FlatFSError, FileNotFoundError):
    """A file does not exist in the backing store."""

    error_code = ErrorCode.NOT_FOUND


class DestinationExistsError(FlatFSError, FileExistsError):
    """A copy or move target already exists."""

    error_code = ErrorCode.CONFLICT


class ReadOnlyFileSystemError(FlatFSError, OSError):
    """A mutating operation was requested on a read-only store."""

    error_code = ErrorCode.PERMISSION_DENIED
