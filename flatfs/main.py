#!/usr/bin/env python3
"""Mount controller for FlatFS.

This module handles:
- FUSE operations construction over an opened store
- FUSE filesystem mounting
- Signal handling for graceful shutdown
- Cleanup on exit

Example:
    >>> from flatfs.main import run_mount
    >>> run_mount(args, config, store, logger)
"""

import argparse
import signal
import sys
from typing import Dict, Optional

from fuse import FUSE

from flatfs.fuse.operations import FlatFSOperations
from flatfs.infrastructure.config_manager import ConfigManager
from flatfs.infrastructure.logger import Logger
from flatfs.stores.base import FlatFileSystem


class FlatFSMain:
    """
    Main class for FlatFS mounts.

    Handles operations lifecycle, FUSE mounting, and shutdown. The store is
    owned by the caller and is not closed here.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        config: ConfigManager,
        store: FlatFileSystem,
        logger: Logger,
    ):
        """
        Initialize FlatFS main controller.

        Args:
            args: Parsed command-line arguments
            config: Configuration manager
            store: Opened backing store to expose
            logger: Logger instance
        """
        self.args = args
        self.config = config
        self.store = store
        self.logger = logger
        self.fuse = None
        self.shutdown_signal: Optional[int] = None
        self.fuse_ops: Optional[FlatFSOperations] = None

    def initialize_components(self) -> None:
        """Create the FUSE operations for the store."""
        readonly = self.config.get("flatfs.mount.readonly", True)
        self.logger.debug("Creating FlatFSOperations", store=self.store.name, readonly=readonly)
        self.fuse_ops = FlatFSOperations(self.store, readonly=readonly)

    def setup_signal_handlers(self) -> None:
        """
        Setup signal handlers for graceful shutdown.

        Handles:
        - SIGTERM: Graceful shutdown
        - SIGINT: Graceful shutdown (Ctrl+C)

        The last signal received sets the exit code of run().
        """

        def signal_handler(signum, frame):
            """Handle shutdown signals."""
            sig_name = signal.Signals(signum).name
            self.logger.info(f"Received signal {sig_name}, shutting down...")
            self.shutdown_signal = signum

        # Register handlers
        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

        self.logger.debug("Signal handlers registered")

    def mount_filesystem(self) -> int:
        """
        Mount the FUSE filesystem.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        mount_point = self.args.mountpoint

        self.logger.info("Mounting FlatFS", store=self.store.name, mountpoint=mount_point)
        self.logger.info(f"Read-only mode: {self.fuse_ops.readonly}")

        # Build FUSE options
        fuse_options = self._build_fuse_options()

        try:
            self.logger.info("Starting FUSE...")

            # Run FUSE (blocks until unmount)
            self.fuse = FUSE(
                self.fuse_ops,
                mount_point,
                foreground=self.config.get("flatfs.mount.foreground", False),
                nothreads=False,
                **fuse_options,
            )

            self.logger.info("FUSE unmounted successfully")
            return 0

        except RuntimeError as e:
            self.logger.error(f"FUSE mount failed: {e}")
            return 1

    def _build_fuse_options(self) -> Dict:
        """
        Build FUSE mount options dictionary.

        Returns:
            Dictionary of FUSE options
        """
        options = {}

        # Read-only mode
        if self.fuse_ops.readonly:
            options["ro"] = True

        # Allow other users
        if self.config.get("flatfs.mount.allow_other", False):
            options["allow_other"] = True

        options["fsname"] = f"flatfs:{self.store.name}"

        return options

    def cleanup(self) -> None:
        """Log final statistics."""
        self.logger.info("Cleaning up...")

        if self.fuse_ops:
            stats = self.fuse_ops.get_stats()
            self.logger.info(f"Final statistics: {stats}")

        self.logger.info("Cleanup complete")

    def run(self) -> int:
        """
        Run the mount until it is unmounted.

        Returns:
            Exit code (0 for success, 128 + signal number after a
            shutdown signal, non-zero for failure)
        """
        try:
            # Initialize components
            self.initialize_components()

            # Setup signal handlers
            self.setup_signal_handlers()

            # Mount filesystem (blocks until unmount)
            exit_code = self.mount_filesystem()
            if exit_code == 0 and self.shutdown_signal is not None:
                # Shell convention for a process ended by a signal
                return 128 + self.shutdown_signal
            return exit_code

        except KeyboardInterrupt:
            self.logger.info("Interrupted by user")
            return 130

        finally:
            # Cleanup
            self.cleanup()


def run_mount(
    args: argparse.Namespace,
    config: ConfigManager,
    store: FlatFileSystem,
    logger: Logger,
) -> int:
    """
    Main entry point for mounting a store.

    Args:
        args: Parsed command-line arguments
        config: Configuration manager
        store: Opened backing store
        logger: Logger instance

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    # Create main controller
    main = FlatFSMain(args, config, store, logger)

    # Run
    return main.run()


def main():
    """
    Entry point when run as standalone script.

    Typically called via cli.py, but can be run directly for testing.
    """
    from flatfs.cli import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
