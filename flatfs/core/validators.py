"""
FlatFS Core: Input Validators.

This module validates configuration trees and user-supplied values before
they reach the stores, the engine or the FUSE layer.
"""
from typing import Any, Dict

from flatfs.core.constants import ConfigKey, ErrorCode, StoreType
from flatfs.core.path_utils import VirtualPath
from flatfs.core.errors import InvalidPathError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ValidationError(Exception):
    """Base exception for validation errors."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INVALID_INPUT):
        """Initialize ValidationError.

        Args:
            message: Error message
            error_code: Associated error code
        """
        super().__init__(message)
        self.error_code = error_code


def validate_config(config: Dict[str, Any]) -> bool:
    """Validate a merged FlatFS configuration tree.

    Args:
        config: Configuration dictionary with a top-level "flatfs" key

    Returns:
        True if valid

    Raises:
        ValidationError: If configuration is invalid
    """
    if not isinstance(config, dict):
        raise ValidationError("Configuration must be a dictionary")

    section = config.get(ConfigKey.ROOT)
    if not isinstance(section, dict):
        raise ValidationError(f"Configuration must have a '{ConfigKey.ROOT}' mapping")

    if ConfigKey.CASE_SENSITIVE in section:
        validate_bool(section[ConfigKey.CASE_SENSITIVE], ConfigKey.CASE_SENSITIVE)

    if ConfigKey.STORE in section:
        validate_store_config(section[ConfigKey.STORE])

    if ConfigKey.LOGGING in section:
        validate_logging_config(section[ConfigKey.LOGGING])

    if ConfigKey.MOUNT in section:
        validate_mount_config(section[ConfigKey.MOUNT])

    return True


def validate_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"'{name}' must be boolean: {value!r}")
    return True


def validate_store_config(store: Dict[str, Any]) -> bool:
    """Validate store configuration.

    Raises:
        ValidationError: If the store type is unknown
    """
    if not isinstance(store, dict):
        raise ValidationError("Store configuration must be a dictionary")

    if ConfigKey.STORE_TYPE in store:
        store_type = store[ConfigKey.STORE_TYPE]
        try:
            StoreType(store_type)
        except ValueError:
            valid_types = [t.value for t in StoreType]
            raise ValidationError(f"Invalid store type: {store_type}. Must be one of {valid_types}")

    return True


def validate_logging_config(logging_config: Dict[str, Any]) -> bool:
    """Validate logging configuration.

    Raises:
        ValidationError: If the level or file is invalid
    """
    if not isinstance(logging_config, dict):
        raise ValidationError("Logging configuration must be a dictionary")

    level = logging_config.get(ConfigKey.LOG_LEVEL)
    if level is not None:
        validate_log_level(level)

    log_file = logging_config.get(ConfigKey.LOG_FILE)
    if log_file is not None and (not isinstance(log_file, str) or not log_file):
        raise ValidationError(f"Log file must be a non-empty string: {log_file!r}")

    return True


def validate_log_level(level: Any) -> bool:
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ValidationError(f"Invalid log level: {level!r}. Must be one of {list(VALID_LOG_LEVELS)}")
    return True


def validate_mount_config(mount: Dict[str, Any]) -> bool:
    """Validate mount configuration.

    Raises:
        ValidationError: If a mount flag is not boolean
    """
    if not isinstance(mount, dict):
        raise ValidationError("Mount configuration must be a dictionary")

    for key in (ConfigKey.MOUNT_READONLY, ConfigKey.MOUNT_ALLOW_OTHER, ConfigKey.MOUNT_FOREGROUND):
        if key in mount:
            validate_bool(mount[key], f"mount.{key}")

    return True


def validate_search_path(path: Any) -> bool:
    """Check that a user-supplied path parses as a virtual path.

    Relative input is accepted; it is resolved against the root by callers.

    Raises:
        ValidationError: If the path is malformed
    """
    if not isinstance(path, str):
        raise ValidationError(f"Path must be a string: {path!r}")
    try:
        VirtualPath.parse(path)
    except InvalidPathError as e:
        raise ValidationError(str(e))
    return True
