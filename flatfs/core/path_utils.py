"""
FlatFS Core: Virtual Path Model.

This module provides the path type used throughout FlatFS:
- VirtualPath: immutable, normalized, slash-separated path
- PathComparer: explicit case policy for equality and ordering
- require_absolute: argument check for operations needing a concrete path

Paths are purely lexical. Nothing here touches the host filesystem.

Example:
    >>> path = VirtualPath.parse("/a//b/./c.txt")
    >>> str(path)
    '/a/b/c.txt'
    >>> path.parent
    VirtualPath('/a/b')
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from flatfs.core.constants import (
    ALTERNATE_SEPARATOR,
    CURRENT_DIRECTORY,
    Limits,
    PARENT_DIRECTORY,
    PATH_SEPARATOR,
)
from flatfs.core.errors import InvalidPathError

PathLike = Union[str, "VirtualPath"]


@dataclass(frozen=True)
class VirtualPath:
    """
    Immutable normalized path.

    Attributes:
        segments: Non-empty path segments, outermost first
        absolute: Whether the path is rooted at "/"
    """

    segments: Tuple[str, ...] = ()
    absolute: bool = False

    @classmethod
    def parse(cls, raw: Optional[PathLike]) -> "VirtualPath":
        """
        Parse and normalize a path string.

        Both "/" and "\\" separate segments. Duplicate separators and "."
        segments are dropped, ".." removes the previous segment.

        Args:
            raw: Path string, VirtualPath, or None

        Returns:
            Normalized VirtualPath (EMPTY for None or "")

        Raises:
            InvalidPathError: If the path is too long or ".." climbs above root
        """
        if isinstance(raw, VirtualPath):
            return raw
        if raw is None or raw == "":
            return EMPTY
        if not isinstance(raw, str):
            raise InvalidPathError(f"Path must be a string, got {type(raw).__name__}")
        if len(raw) > Limits.MAX_PATH_LENGTH:
            raise InvalidPathError(f"Path exceeds maximum length of {Limits.MAX_PATH_LENGTH}")
        if "\x00" in raw:
            raise InvalidPathError(f"Path contains a null character: {raw!r}")

        text = raw.replace(ALTERNATE_SEPARATOR, PATH_SEPARATOR)
        absolute = text.startswith(PATH_SEPARATOR)

        segments = []
        for part in text.split(PATH_SEPARATOR):
            if part == "" or part == CURRENT_DIRECTORY:
                continue
            if part == PARENT_DIRECTORY:
                if segments and segments[-1] != PARENT_DIRECTORY:
                    segments.pop()
                elif absolute:
                    raise InvalidPathError(f"Path climbs above the root: {raw}")
                else:
                    segments.append(part)
                continue
            segments.append(part)

        return cls(tuple(segments), absolute)

    @property
    def is_root(self) -> bool:
        return self.absolute and not self.segments

    @property
    def is_empty(self) -> bool:
        return not self.absolute and not self.segments

    @property
    def name(self) -> str:
        """Last segment, or "" for root and the empty path."""
        return self.segments[-1] if self.segments else ""

    @property
    def parent(self) -> "VirtualPath":
        """Containing directory. Root and the empty path are their own parent."""
        if not self.segments:
            return self
        return VirtualPath(self.segments[:-1], self.absolute)

    @property
    def full_name(self) -> str:
        joined = PATH_SEPARATOR.join(self.segments)
        return PATH_SEPARATOR + joined if self.absolute else joined

    @property
    def depth(self) -> int:
        return len(self.segments)

    def ancestors(self):
        """Yield strict ancestors from the nearest to the outermost.

        Root is not yielded; it is nobody's synthesized ancestor.
        """
        for end in range(len(self.segments) - 1, 0, -1):
            yield VirtualPath(self.segments[:end], self.absolute)

    def join(self, other: PathLike) -> "VirtualPath":
        """Append a relative path. An absolute argument replaces this path."""
        other = VirtualPath.parse(other)
        if other.absolute:
            return other
        if not other.segments:
            return self
        combined = PATH_SEPARATOR.join(self.segments + other.segments)
        return VirtualPath.parse(PATH_SEPARATOR + combined if self.absolute else combined)

    def __truediv__(self, other: PathLike) -> "VirtualPath":
        return self.join(other)

    def to_relative(self) -> "VirtualPath":
        return VirtualPath(self.segments, False)

    def to_absolute(self) -> "VirtualPath":
        return VirtualPath(self.segments, True)

    def relative_to(self, base: "VirtualPath", comparer: Optional["PathComparer"] = None) -> "VirtualPath":
        """
        Express this path relative to one of its ancestors.

        Raises:
            InvalidPathError: If base is not this path or one of its ancestors
        """
        comparer = comparer or PathComparer.IGNORE_CASE
        if not (comparer.equals(self, base) or comparer.is_ancestor(base, self)):
            raise InvalidPathError(f"{self} is not inside {base}")
        return VirtualPath(self.segments[len(base.segments):], False)

    def __str__(self) -> str:
        return self.full_name

    def __repr__(self) -> str:
        return f"VirtualPath({self.full_name!r})"


ROOT = VirtualPath((), True)
EMPTY = VirtualPath((), False)
VirtualPath.ROOT = ROOT
VirtualPath.EMPTY = EMPTY


class PathComparer:
    """
    Case policy for path equality, membership and ordering.

    The case-insensitive policy compares upper-cased text ordinally.
    Sort keys break ties on the exact spelling so ordering is total.
    """

    IGNORE_CASE: "PathComparer"
    ORDINAL: "PathComparer"

    def __init__(self, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive

    def normalize(self, text: str) -> str:
        """Fold text according to the case policy."""
        return text if self.case_sensitive else text.upper()

    def key(self, path: VirtualPath) -> Tuple[bool, Tuple[str, ...]]:
        """Hashable equality key."""
        return path.absolute, tuple(self.normalize(s) for s in path.segments)

    def sort_key(self, path: VirtualPath) -> Tuple[str, str]:
        """Total order: policy-folded full name, then exact full name."""
        return self.normalize(path.full_name), path.full_name

    def equals(self, left: VirtualPath, right: VirtualPath) -> bool:
        return self.key(left) == self.key(right)

    def is_ancestor(self, ancestor: VirtualPath, path: VirtualPath) -> bool:
        """True if ancestor's segments are a proper prefix of path's."""
        if ancestor.absolute != path.absolute:
            return False
        if len(ancestor.segments) >= len(path.segments):
            return False
        return all(
            self.normalize(a) == self.normalize(b)
            for a, b in zip(ancestor.segments, path.segments)
        )

    def is_in_directory(self, path: VirtualPath, directory: VirtualPath, recursive: bool) -> bool:
        """
        True if path lies below directory.

        Args:
            path: Candidate entry
            directory: Containing directory
            recursive: Accept any descendant instead of direct children only
        """
        if not recursive and len(path.segments) != len(directory.segments) + 1:
            return False
        return self.is_ancestor(directory, path)

    def __eq__(self, other) -> bool:
        return isinstance(other, PathComparer) and other.case_sensitive == self.case_sensitive

    def __hash__(self) -> int:
        return hash(self.case_sensitive)

    def __repr__(self) -> str:
        return f"PathComparer(case_sensitive={self.case_sensitive})"


PathComparer.IGNORE_CASE = PathComparer(case_sensitive=False)
PathComparer.ORDINAL = PathComparer(case_sensitive=True)


def require_absolute(path: Optional[PathLike], argument: str = "path") -> VirtualPath:
    """
    Parse a path that must be concrete and absolute.

    Args:
        path: Path string or VirtualPath
        argument: Argument name used in the error message

    Returns:
        Normalized absolute VirtualPath

    Raises:
        InvalidPathError: If path is None, empty, relative or malformed
    """
    parsed = VirtualPath.parse(path)
    if parsed.is_empty:
        raise InvalidPathError(f"'{argument}' must not be empty")
    if not parsed.absolute:
        raise InvalidPathError(f"'{argument}' must be absolute: {parsed}")
    return parsed
