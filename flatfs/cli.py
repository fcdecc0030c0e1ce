#!/usr/bin/env python3
"""Command-line interface for FlatFS.

This module provides the CLI for inspecting and mounting flat stores:
- Argument parsing and validation
- Configuration loading (YAML file, environment, arguments)
- Store opening from a zip archive or a package name
- ls / stat / mount subcommands

Example:
    >>> from flatfs.cli import parse_arguments
    >>> args = parse_arguments(["ls", "data.zip", "/docs", "-p", "*.md"])
"""

import argparse
import os
import sys
import zipfile
from pathlib import Path
from typing import Dict, List, Optional

from flatfs.core.constants import FLATFS_VERSION, ConfigKey, SearchTarget, StoreType
from flatfs.core.errors import FlatFSError
from flatfs.core.path_utils import VirtualPath
from flatfs.core.validators import ValidationError, validate_config, validate_search_path
from flatfs.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from flatfs.infrastructure.logger import Logger, set_global_logger
from flatfs.stores.base import FlatFileSystem
from flatfs.stores.factory import open_store

# Version information
VERSION = FLATFS_VERSION
DESCRIPTION = "FlatFS - Hierarchical view over flat file stores"


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If arguments are well-formed but unusable
    """
    parser = argparse.ArgumentParser(
        prog="flatfs",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the top level of an archive
  flatfs ls data.zip

  # Find every Markdown file below /docs
  flatfs ls data.zip /docs -p "*.md" -r --files

  # Describe an entry of a package's resources
  flatfs stat mypackage.templates /emails/welcome.txt

  # Mount an archive in the foreground for debugging
  flatfs --debug mount data.zip /mnt/data --foreground
        """,
    )

    # Version
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    # Configuration file
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    # Store options
    store_group = parser.add_argument_group("store options")

    store_group.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Compare paths exactly (default: ignore case)",
    )

    store_group.add_argument(
        "--store",
        choices=[t.value for t in StoreType],
        default=None,
        help="Kind of SOURCE (default: auto)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # ls
    ls_parser = subparsers.add_parser("ls", help="List entries below a directory")
    ls_parser.add_argument("source", metavar="SOURCE", help="Zip archive or package name")
    ls_parser.add_argument("path", metavar="PATH", nargs="?", default="/", help="Directory (default: /)")
    ls_parser.add_argument("-p", "--pattern", default="*", help="Search pattern (default: *)")
    ls_parser.add_argument("-r", "--recursive", action="store_true", help="Include all descendants")
    kind_group = ls_parser.add_mutually_exclusive_group()
    kind_group.add_argument("--files", action="store_true", help="List files only")
    kind_group.add_argument("--dirs", action="store_true", help="List directories only")

    # stat
    stat_parser = subparsers.add_parser("stat", help="Describe a file or directory")
    stat_parser.add_argument("source", metavar="SOURCE", help="Zip archive or package name")
    stat_parser.add_argument("path", metavar="PATH", help="Entry to describe")

    # mount
    mount_parser = subparsers.add_parser("mount", help="Mount SOURCE with FUSE")
    mount_parser.add_argument("source", metavar="SOURCE", help="Zip archive or package name")
    mount_parser.add_argument("mountpoint", metavar="MOUNTPOINT", help="Empty directory to mount on")
    mount_parser.add_argument(
        "--foreground",
        action="store_true",
        help="Run in foreground (don't daemonize)",
    )
    mount_parser.add_argument(
        "--read-write",
        action="store_true",
        help="Mount in read-write mode when the store allows it (default: read-only)",
    )
    mount_parser.add_argument(
        "--allow-other",
        action="store_true",
        help="Allow other users to access the filesystem",
    )

    # Parse arguments
    parsed = parser.parse_args(args)

    # Validate arguments
    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Args:
        args: Parsed arguments namespace

    Raises:
        CLIError: If validation fails
    """
    # Validate config file (if specified)
    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    if args.command in ("ls", "stat"):
        try:
            validate_search_path(args.path)
        except ValidationError as e:
            raise CLIError(f"Invalid path: {e}")

    if args.command == "mount":
        mount_path = Path(args.mountpoint)

        # Mount point must exist
        if not mount_path.exists():
            raise CLIError(f"Mount point does not exist: {args.mountpoint}")

        # Mount point must be a directory
        if not mount_path.is_dir():
            raise CLIError(f"Mount point is not a directory: {args.mountpoint}")

        # Mount point must be empty (safety check)
        if list(mount_path.iterdir()):
            raise CLIError(
                f"Mount point is not empty: {args.mountpoint}\n"
                "For safety, FlatFS requires an empty mount point"
            )


def build_config_from_args(args: argparse.Namespace) -> Dict:
    """
    Build configuration dictionary from command-line arguments.

    Only options given on the command line are included, so values from
    configuration files and the environment are kept otherwise.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration dictionary for ConfigManager
    """
    section: Dict = {}

    if args.case_sensitive:
        section[ConfigKey.CASE_SENSITIVE] = True

    if args.store:
        section[ConfigKey.STORE] = {ConfigKey.STORE_TYPE: args.store}

    if args.debug:
        section[ConfigKey.LOGGING] = {ConfigKey.LOG_LEVEL: "DEBUG"}

    if args.command == "mount":
        mount = {}
        if args.read_write:
            mount[ConfigKey.MOUNT_READONLY] = False
        if args.allow_other:
            mount[ConfigKey.MOUNT_ALLOW_OTHER] = True
        if args.foreground:
            mount[ConfigKey.MOUNT_FOREGROUND] = True
        if mount:
            section[ConfigKey.MOUNT] = mount

    return {ConfigKey.ROOT: section}


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Load configuration from file, environment and arguments.

    Args:
        args: Parsed arguments namespace

    Returns:
        Configuration manager holding the validated configuration

    Raises:
        ConfigError: If the file cannot be loaded or the result is invalid
    """
    config = ConfigManager()

    for path, source in (
        (ConfigManager.SYSTEM_CONFIG_PATH, ConfigSource.SYSTEM_CONFIG),
        (ConfigManager.USER_CONFIG_PATH, ConfigSource.USER_CONFIG),
    ):
        if Path(path).expanduser().is_file():
            config.load_file(path, source)

    # An explicit file replaces the user config file
    if args.config:
        config.load_file(args.config, ConfigSource.USER_CONFIG)

    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)

    try:
        validate_config(config.get_all())
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", e.error_code)

    return config


def setup_logging(config: ConfigManager) -> Logger:
    """
    Setup logging based on configuration.

    Configures the "flatfs" logger every module logger propagates to.

    Args:
        config: Configuration manager

    Returns:
        Configured logger instance
    """
    log_level = config.get("flatfs.logging.level", "INFO")
    log_file = config.get("flatfs.logging.file")

    logger = Logger("flatfs", level=log_level)

    if log_file:
        logger.add_handler(logger.create_file_handler(os.path.expanduser(log_file)))
        logger.debug("Logging to file", path=log_file)

    set_global_logger(logger)
    return logger


def open_source(args: argparse.Namespace, config: ConfigManager) -> FlatFileSystem:
    """
    Open the store named by SOURCE.

    Raises:
        CLIError: If the archive or package cannot be opened
    """
    store_type = config.get("flatfs.store.type", StoreType.AUTO.value)
    case_sensitive = config.get("flatfs.case_sensitive", False)

    try:
        return open_store(args.source, store_type, case_sensitive=case_sensitive)
    except (OSError, ImportError, zipfile.BadZipFile) as e:
        raise CLIError(f"Cannot open source {args.source}: {e}")


def resolve_path(raw: str) -> VirtualPath:
    """Resolve a user-supplied path against the root."""
    return VirtualPath.ROOT / raw


def command_ls(args: argparse.Namespace, store: FlatFileSystem) -> int:
    """Print the entries matching the ls arguments, one full path per line."""
    if args.files:
        target = SearchTarget.FILE
    elif args.dirs:
        target = SearchTarget.DIRECTORY
    else:
        target = SearchTarget.BOTH

    query = store.enumerate_paths(resolve_path(args.path), args.pattern, args.recursive, target)
    for entry in query:
        print(entry)
    return 0


def command_stat(args: argparse.Namespace, store: FlatFileSystem) -> int:
    """Print the metadata of one entry."""
    entry = store.stat(resolve_path(args.path))
    print(f"Path: {entry.path}")
    print(f"Type: {'directory' if entry.is_directory else 'file'}")
    print(f"Size: {entry.size}")
    print(f"Modified: {entry.mtime.isoformat()}")
    print(f"Read-only: {'yes' if entry.readonly else 'no'}")
    return 0


def validate_runtime_environment() -> None:
    """
    Validate runtime environment for mounting.

    Checks:
    - FUSE availability
    - Required permissions

    Raises:
        CLIError: If environment validation fails
    """
    # Check FUSE availability; fusepy raises OSError when libfuse is missing
    try:
        import fuse

        # Check FUSE version
        if not hasattr(fuse, "FUSE"):
            raise CLIError(
                "FUSE library is too old or incompatible\n" "Install fusepy: pip install fusepy"
            )

    except ImportError:
        raise CLIError("FUSE library not found\n" "Install fusepy: pip install fusepy")

    except OSError as e:
        raise CLIError(f"libfuse could not be loaded: {e}")

    # Check for /dev/fuse
    if not os.path.exists("/dev/fuse"):
        raise CLIError(
            "/dev/fuse not found\n"
            "FUSE kernel module may not be loaded\n"
            "Try: sudo modprobe fuse"
        )

    # Check permissions
    if not os.access("/dev/fuse", os.R_OK | os.W_OK):
        raise CLIError(
            "No permission to access /dev/fuse\n"
            "You may need to add your user to the 'fuse' group"
        )


def print_banner(logger: Logger) -> None:
    """
    Print startup banner with version information.

    Args:
        logger: Logger instance
    """
    logger.info("=" * 60)
    logger.info(f"FlatFS v{VERSION}")
    logger.info(DESCRIPTION)
    logger.info("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Parses arguments, loads configuration, opens the store and runs the
    selected subcommand. Mounting is handed to flatfs.main.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    try:
        # Parse arguments
        args = parse_arguments(argv)

        # Load configuration
        config = load_config(args)

        # Setup logging
        logger = setup_logging(config)

        if args.command == "mount":
            validate_runtime_environment()

        with open_source(args, config) as store:
            if args.command == "ls":
                return command_ls(args, store)

            if args.command == "stat":
                return command_stat(args, store)

            if config.get("flatfs.mount.foreground", False):
                print_banner(logger)

            # Import and run mount
            from flatfs.main import run_mount

            return run_mount(args, config, store, logger)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except (FlatFSError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
