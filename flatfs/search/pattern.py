#!/usr/bin/env python3
"""Search pattern parsing and segment-wise glob matching.

A search pattern is a string such as "*.txt" or "docs/??.md" evaluated
against entries below a base directory:
- Directory components of the pattern are folded into the base directory
- The last component is a glob applied to one path segment at a time
- "*" matches any run of characters, "?" exactly one; neither crosses "/"
- Case handling follows the PathComparer in use

Example:
    >>> base, pattern = SearchPattern.parse(VirtualPath.ROOT, "docs/*.md")
    >>> str(base)
    '/docs'
    >>> pattern.match(VirtualPath.parse("/docs/api.md"))
    True
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

from flatfs.core.constants import PATH_SEPARATOR, WILDCARD_ANY, WILDCARD_ONE
from flatfs.core.errors import InvalidArgumentError, InvalidPathError
from flatfs.core.path_utils import PathComparer, PathLike, VirtualPath


def has_wildcards(text: str) -> bool:
    """Check whether text contains glob wildcards."""
    return WILDCARD_ANY in text or WILDCARD_ONE in text


def compile_glob(pattern: str) -> Pattern:
    """Translate a single-segment glob into an anchored regex.

    Args:
        pattern: Glob for one path segment

    Returns:
        Compiled regex matching whole segments
    """
    # Use placeholders so escaping leaves the wildcards alone
    STAR_PLACEHOLDER = "\x00STAR\x00"
    QUESTION_PLACEHOLDER = "\x00QUESTION\x00"

    regex_pattern = pattern.replace(WILDCARD_ANY, STAR_PLACEHOLDER)
    regex_pattern = regex_pattern.replace(WILDCARD_ONE, QUESTION_PLACEHOLDER)
    regex_pattern = re.escape(regex_pattern)

    # * matches any characters except /
    regex_pattern = regex_pattern.replace(re.escape(STAR_PLACEHOLDER), "[^/]*")
    # ? matches single character except /
    regex_pattern = regex_pattern.replace(re.escape(QUESTION_PLACEHOLDER), "[^/]")

    return re.compile(r"\A" + regex_pattern + r"\Z", re.DOTALL)


@dataclass(frozen=True)
class SearchPattern:
    """Compiled glob for the last segment of a search pattern.

    Attributes:
        pattern: The segment glob as given
        comparer: Case policy used for matching
        compiled: Regex over policy-folded names, None for match-all
    """

    pattern: str
    comparer: PathComparer
    compiled: Optional[Pattern] = None

    @classmethod
    def parse(
        cls,
        base: PathLike,
        pattern: str,
        comparer: Optional[PathComparer] = None,
    ) -> Tuple[VirtualPath, "SearchPattern"]:
        """Split a raw pattern into an effective base and a segment matcher.

        Args:
            base: Directory the pattern is relative to
            pattern: Raw pattern, possibly with directory components
            comparer: Case policy (case-insensitive by default)

        Returns:
            (effective base directory, SearchPattern for the last segment)

        Raises:
            InvalidArgumentError: If pattern is None, absolute, climbs above
                the root, or has wildcards in a directory component
        """
        comparer = comparer or PathComparer.IGNORE_CASE
        if pattern is None:
            raise InvalidArgumentError("'pattern' must not be None")

        base = VirtualPath.parse(base)
        normalized = pattern.replace("\\", PATH_SEPARATOR)

        if normalized.startswith(PATH_SEPARATOR):
            raise InvalidArgumentError(f"Search pattern must be relative: {pattern}")

        directory, _, last = normalized.rpartition(PATH_SEPARATOR)
        if directory:
            if has_wildcards(directory):
                raise InvalidArgumentError(
                    f"Search pattern cannot contain wildcards in a directory: {pattern}"
                )
            try:
                base = base / directory
            except InvalidPathError as e:
                raise InvalidArgumentError(f"Search pattern leaves the root: {pattern}") from e

        if last == WILDCARD_ANY:
            return base, cls(last, comparer, None)

        return base, cls(last, comparer, compile_glob(comparer.normalize(last)))

    @property
    def matches_all(self) -> bool:
        return self.compiled is None

    def match_name(self, name: str) -> bool:
        """Match a single segment name."""
        if self.compiled is None:
            return True
        return self.compiled.match(self.comparer.normalize(name)) is not None

    def match(self, path: VirtualPath) -> bool:
        """Match the last segment of a path."""
        return self.match_name(path.name)

    def __repr__(self) -> str:
        return f"SearchPattern({self.pattern!r}, case_sensitive={self.comparer.case_sensitive})"
