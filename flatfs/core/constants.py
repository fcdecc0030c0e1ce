"""
FlatFS Core: Constants and Type Definitions

This module provides system-wide constants, error codes, and type definitions
shared by the hierarchy engine, the backing stores and the outer surfaces.
"""
from datetime import datetime, timezone
from enum import Enum, IntEnum

# Version information
FLATFS_VERSION = "1.0.0"
FLATFS_API_VERSION = 1


# Error codes (0-9 range)
class ErrorCode(IntEnum):
    """Standardized error codes for FlatFS operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad path, bad argument, invalid configuration
    NOT_FOUND = 2  # File or directory doesn't exist
    PERMISSION_DENIED = 3  # Read-only store
    CONFLICT = 4  # Destination already exists
    DEPENDENCY_ERROR = 5  # Missing dependency (libfuse)
    INTERNAL_ERROR = 6  # Bug in FlatFS


# Path syntax
PATH_SEPARATOR = "/"
ALTERNATE_SEPARATOR = "\\"
CURRENT_DIRECTORY = "."
PARENT_DIRECTORY = ".."

# Wildcards understood by search patterns
WILDCARD_ANY = "*"
WILDCARD_ONE = "?"

# Timestamp reported when a store has no real value for an entry
DEFAULT_FILE_TIME = datetime(1601, 1, 1, tzinfo=timezone.utc)


class SearchTarget(Enum):
    """Which kind of entries an enumeration returns."""

    FILE = "file"
    DIRECTORY = "directory"
    BOTH = "both"

    @property
    def includes_files(self) -> bool:
        return self in (SearchTarget.FILE, SearchTarget.BOTH)

    @property
    def includes_directories(self) -> bool:
        return self in (SearchTarget.DIRECTORY, SearchTarget.BOTH)


# Backing store kinds selectable from config and the CLI
class StoreType(Enum):
    """Types of backing stores."""

    AUTO = "auto"  # Zip if the source is an archive, package otherwise
    ZIP = "zip"  # Zip archive entries
    PACKAGE = "package"  # Python package resources


# Resource limits and defaults
class Limits:
    """System resource limits and default values."""

    # Path limits
    MAX_PATH_LENGTH = 4096
    MAX_FILENAME_LENGTH = 255

    # FUSE
    DEFAULT_FILE_MODE = 0o444
    DEFAULT_DIRECTORY_MODE = 0o555
    WRITABLE_FILE_MODE = 0o644
    WRITABLE_DIRECTORY_MODE = 0o755


# Configuration keys
class ConfigKey:
    """Configuration key constants."""

    # Top-level keys
    ROOT = "flatfs"
    CASE_SENSITIVE = "case_sensitive"
    STORE = "store"
    LOGGING = "logging"
    MOUNT = "mount"

    # Store configuration
    STORE_TYPE = "type"

    # Logging configuration
    LOG_LEVEL = "level"
    LOG_FILE = "file"

    # Mount configuration
    MOUNT_READONLY = "readonly"
    MOUNT_ALLOW_OTHER = "allow_other"
    MOUNT_FOREGROUND = "foreground"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.ROOT: {
        ConfigKey.CASE_SENSITIVE: False,
        ConfigKey.STORE: {
            ConfigKey.STORE_TYPE: StoreType.AUTO.value,
        },
        ConfigKey.LOGGING: {
            ConfigKey.LOG_LEVEL: "INFO",
            ConfigKey.LOG_FILE: None,
        },
        ConfigKey.MOUNT: {
            ConfigKey.MOUNT_READONLY: True,
            ConfigKey.MOUNT_ALLOW_OTHER: False,
            ConfigKey.MOUNT_FOREGROUND: False,
        },
    }
}
