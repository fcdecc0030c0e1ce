"""
Package resource backing store.

Exposes the data files shipped inside an importable Python package through
importlib.resources. The package's own tree is walked on every query and
flattened into absolute paths relative to the package root.
"""

from importlib import resources
from importlib.resources.abc import Traversable
from typing import BinaryIO, Iterator, Optional, Tuple

from flatfs.core.errors import EntryNotFoundError
from flatfs.core.path_utils import VirtualPath
from flatfs.stores.base import FlatFileSystem

# Never exposed as resources
SKIPPED_DIRECTORIES = frozenset({"__pycache__"})


class PackageResourceFileSystem(FlatFileSystem):
    """Read-only store over the resources of a package."""

    def __init__(self, package: str, case_sensitive: bool = False):
        """
        Initialize the store.

        Args:
            package: Dotted name of an importable package
            case_sensitive: Compare paths exactly instead of ignoring case

        Raises:
            ModuleNotFoundError: If the package cannot be imported
        """
        self.package = package
        self.root = resources.files(package)
        super().__init__(package, case_sensitive)
        self.logger.info("Opened package resources", package=package)

    def _walk(self, node: Traversable, prefix: Tuple[str, ...]) -> Iterator[Tuple[Tuple[str, ...], Traversable]]:
        for child in node.iterdir():
            if child.is_dir():
                if child.name in SKIPPED_DIRECTORIES:
                    continue
                yield from self._walk(child, prefix + (child.name,))
            elif child.is_file():
                yield prefix + (child.name,), child

    def paths(self) -> Iterator[VirtualPath]:
        for segments, _ in self._walk(self.root, ()):
            yield VirtualPath(segments, True)

    def _resource(self, path: VirtualPath) -> Traversable:
        found: Optional[Traversable] = None
        key = self.comparer.key(path)
        for segments, node in self._walk(self.root, ()):
            if self.comparer.key(VirtualPath(segments, True)) == key:
                found = node
                break
        if found is None:
            raise EntryNotFoundError(f"Resource not found: {self.package}:{path}")
        return found

    def _open(self, path: VirtualPath) -> BinaryIO:
        return self._resource(path).open("rb")

    def _length(self, path: VirtualPath) -> int:
        return len(self._resource(path).read_bytes())

