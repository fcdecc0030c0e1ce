"""
FlatFS Hierarchy: Virtual Hierarchy Engine.

Derives a directory tree from a flat list of absolute file paths:
- directory_exists: a directory is any strict ancestor of a known file
- file_exists: a file is any path the source lists
- enumerate_paths: glob search over files and synthesized directories

The engine keeps no index. Every query re-reads the PathSource in one pass,
so the derived tree always reflects the current contents of the store.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from flatfs.core.constants import SearchTarget
from flatfs.core.errors import DirectoryNotFoundError, InvalidArgumentError, InvalidPathError
from flatfs.core.path_utils import PathComparer, PathLike, VirtualPath, require_absolute
from flatfs.infrastructure.logger import Logger
from flatfs.search.pattern import SearchPattern


class PathQuery:
    """
    Lazy, restartable result of an enumeration.

    Iterating runs the search against the current PathSource contents.
    Iterating again runs it again.
    """

    def __init__(
        self,
        engine: "HierarchyEngine",
        base: VirtualPath,
        pattern: str,
        recursive: bool,
        target: SearchTarget,
    ):
        self.engine = engine
        self.base = base
        self.pattern = pattern
        self.recursive = recursive
        self.target = target

    def __iter__(self) -> Iterator[VirtualPath]:
        return iter(self.engine.search(self.base, self.pattern, self.recursive, self.target))

    def __repr__(self) -> str:
        return (
            f"PathQuery(base='{self.base}', pattern={self.pattern!r}, "
            f"recursive={self.recursive}, target={self.target.name})"
        )


class HierarchyEngine:
    """
    Existence checks and search over a flat PathSource.

    Thread Safety:
    - No mutable state; concurrent queries are safe whenever the
      PathSource tolerates concurrent reads
    """

    def __init__(self, source, comparer: Optional[PathComparer] = None):
        """
        Initialize the engine.

        Args:
            source: PathSource supplying absolute file paths
            comparer: Case policy (case-insensitive by default)
        """
        self.source = source
        self.comparer = comparer or PathComparer.IGNORE_CASE
        self.logger = Logger("flatfs.hierarchy")

    # =========================================================================
    # Source access
    # =========================================================================

    def _entries(self) -> Iterator[VirtualPath]:
        """Read the PathSource, yielding normalized file paths.

        Raises:
            InvalidPathError: If the source yields a relative path
        """
        for raw in self.source.paths():
            entry = VirtualPath.parse(raw)
            if entry.is_root or entry.is_empty:
                continue
            if not entry.absolute:
                raise InvalidPathError(f"Path source yielded a relative path: {entry}")
            yield entry

    # =========================================================================
    # Existence
    # =========================================================================

    def directory_exists(self, path: PathLike) -> bool:
        """
        Check whether a directory exists in the derived hierarchy.

        Args:
            path: Absolute path

        Returns:
            True for root, or when path is a strict ancestor of a known file

        Raises:
            InvalidPathError: If path is None, empty or relative
        """
        path = require_absolute(path)
        if path.is_root:
            return True
        return any(self.comparer.is_ancestor(path, entry) for entry in self._entries())

    def file_exists(self, path: PathLike) -> bool:
        """
        Check whether a file exists in the PathSource.

        Args:
            path: Absolute path

        Returns:
            True if the source lists path under the case policy

        Raises:
            InvalidPathError: If path is None, empty or relative
        """
        path = require_absolute(path)
        if path.is_root:
            return False
        key = self.comparer.key(path)
        return any(self.comparer.key(entry) == key for entry in self._entries())

    # =========================================================================
    # Enumeration
    # =========================================================================

    def enumerate_paths(
        self,
        path: PathLike,
        pattern: str = "*",
        recursive: bool = False,
        target: SearchTarget = SearchTarget.BOTH,
    ) -> PathQuery:
        """
        Enumerate files and/or directories below a directory.

        Arguments are checked immediately; the search itself runs each time
        the returned PathQuery is iterated.

        Args:
            path: Absolute path of an existing directory
            pattern: Glob, optionally prefixed with literal directories
            recursive: Include all descendants instead of direct children
            target: Files, directories, or both

        Returns:
            PathQuery yielding VirtualPath entries in comparer order

        Raises:
            InvalidPathError: If path is None, empty or relative
            InvalidArgumentError: If pattern is None
            DirectoryNotFoundError: If path is not an existing directory
        """
        base = require_absolute(path)
        if pattern is None:
            raise InvalidArgumentError("'pattern' must not be None")
        if not isinstance(target, SearchTarget):
            raise InvalidArgumentError(f"'target' must be a SearchTarget, got {target!r}")
        if not self.directory_exists(base):
            raise DirectoryNotFoundError(f"Directory not found: {base}")

        # Parse now so malformed patterns fail before iteration
        SearchPattern.parse(base, pattern, self.comparer)
        return PathQuery(self, base, pattern, recursive, target)

    def enumerate_files(self, path: PathLike, pattern: str = "*", recursive: bool = False) -> PathQuery:
        return self.enumerate_paths(path, pattern, recursive, SearchTarget.FILE)

    def enumerate_directories(
        self, path: PathLike, pattern: str = "*", recursive: bool = False
    ) -> PathQuery:
        return self.enumerate_paths(path, pattern, recursive, SearchTarget.DIRECTORY)

    def search(
        self,
        path: VirtualPath,
        pattern: str,
        recursive: bool,
        target: SearchTarget,
    ) -> List[VirtualPath]:
        """
        Run a search without argument checks.

        One pass over the PathSource. Each file is offered as a file entry
        and each of its strict ancestors as a directory entry; candidates
        outside the effective base, the recursion depth, or the pattern are
        dropped.

        Args:
            path: Base directory
            pattern: Raw search pattern
            recursive: Include all descendants
            target: Files, directories, or both

        Returns:
            Deduplicated entries sorted by the comparer
        """
        base, matcher = SearchPattern.parse(path, pattern, self.comparer)
        found: Dict[Tuple, VirtualPath] = {}
        comparer = self.comparer

        def add(candidate: VirtualPath) -> None:
            key = comparer.key(candidate)
            current = found.get(key)
            if current is None or candidate.full_name < current.full_name:
                found[key] = candidate

        for entry in self._entries():
            if not comparer.is_ancestor(base, entry):
                continue

            if (
                target.includes_files
                and comparer.is_in_directory(entry, base, recursive)
                and matcher.match(entry)
            ):
                add(entry)

            if target.includes_directories:
                for directory in entry.ancestors():
                    if directory.depth <= base.depth:
                        break
                    if comparer.is_in_directory(directory, base, recursive) and matcher.match(
                        directory
                    ):
                        add(directory)

        results = sorted(found.values(), key=comparer.sort_key)
        self.logger.debug(
            "Search completed",
            base=str(base),
            pattern=pattern,
            recursive=recursive,
            target=target.name,
            matches=len(results),
        )
        return results

    def __repr__(self) -> str:
        return f"HierarchyEngine(source={self.source!r}, comparer={self.comparer!r})"
