"""Tests for the virtual path model."""

import pytest

from flatfs.core.constants import Limits
from flatfs.core.errors import InvalidPathError
from flatfs.core.path_utils import EMPTY, ROOT, PathComparer, VirtualPath, require_absolute


class TestParse:
    """Tests for VirtualPath.parse normalization."""

    def test_absolute_path(self):
        """Absolute paths keep their segments."""
        path = VirtualPath.parse("/a/b.txt")
        assert path.absolute
        assert path.segments == ("a", "b.txt")
        assert str(path) == "/a/b.txt"

    def test_relative_path(self):
        """Relative paths are not absolute."""
        path = VirtualPath.parse("a/b")
        assert not path.absolute
        assert str(path) == "a/b"

    def test_duplicate_separators_and_dots(self):
        """Empty and "." segments are dropped."""
        assert str(VirtualPath.parse("/a//b/./c.txt")) == "/a/b/c.txt"

    def test_backslash_separator(self):
        """Backslashes separate segments."""
        assert str(VirtualPath.parse("\\a\\b.txt")) == "/a/b.txt"

    def test_trailing_separator(self):
        """A trailing separator does not add a segment."""
        assert VirtualPath.parse("/a/") == VirtualPath.parse("/a")

    def test_parent_segments(self):
        """".." removes the previous segment."""
        assert str(VirtualPath.parse("/a/b/../c")) == "/a/c"
        assert VirtualPath.parse("/a/..").is_root

    def test_parent_above_root_raises(self):
        """".." cannot climb above an absolute root."""
        with pytest.raises(InvalidPathError):
            VirtualPath.parse("/..")

    def test_relative_leading_parent_kept(self):
        """A relative path keeps unresolved ".." segments."""
        assert VirtualPath.parse("a/../..").segments == ("..",)

    def test_root(self):
        """"/" parses to root."""
        assert VirtualPath.parse("/").is_root
        assert VirtualPath.parse("/") == ROOT

    def test_empty_inputs(self):
        """None and "" parse to the empty path."""
        assert VirtualPath.parse(None) == EMPTY
        assert VirtualPath.parse("") == EMPTY
        assert VirtualPath.parse("").is_empty

    def test_virtual_path_passthrough(self):
        """Parsing a VirtualPath returns it unchanged."""
        path = VirtualPath.parse("/a")
        assert VirtualPath.parse(path) is path

    def test_non_string_raises(self):
        """Only strings are parsed."""
        with pytest.raises(InvalidPathError):
            VirtualPath.parse(42)

    def test_null_character_raises(self):
        """NUL characters are rejected."""
        with pytest.raises(InvalidPathError):
            VirtualPath.parse("/a\x00b")

    def test_too_long_raises(self):
        """Paths longer than the limit are rejected."""
        with pytest.raises(InvalidPathError):
            VirtualPath.parse("/" + "a" * Limits.MAX_PATH_LENGTH)


class TestProperties:
    """Tests for derived path properties."""

    def test_name(self):
        assert VirtualPath.parse("/a/b.txt").name == "b.txt"
        assert ROOT.name == ""

    def test_parent(self):
        """Parent drops the last segment; root is its own parent."""
        assert VirtualPath.parse("/a/b.txt").parent == VirtualPath.parse("/a")
        assert VirtualPath.parse("/a").parent == ROOT
        assert ROOT.parent == ROOT

    def test_depth(self):
        assert ROOT.depth == 0
        assert VirtualPath.parse("/a/b").depth == 2

    def test_ancestors(self):
        """Ancestors run nearest first and exclude root."""
        ancestors = list(VirtualPath.parse("/a/b/c.txt").ancestors())
        assert [str(a) for a in ancestors] == ["/a/b", "/a"]

    def test_ancestors_of_top_level_file(self):
        assert list(VirtualPath.parse("/a.txt").ancestors()) == []

    def test_repr(self):
        assert repr(VirtualPath.parse("/a")) == "VirtualPath('/a')"


class TestJoin:
    """Tests for joining paths."""

    def test_join_relative(self):
        assert str(VirtualPath.parse("/a") / "b/c.txt") == "/a/b/c.txt"

    def test_join_absolute_replaces(self):
        assert str(VirtualPath.parse("/a") / "/x") == "/x"

    def test_join_empty(self):
        path = VirtualPath.parse("/a")
        assert path / "" == path

    def test_join_parent(self):
        assert str(VirtualPath.parse("/a/b") / "..") == "/a"

    def test_join_onto_root(self):
        assert str(ROOT / "a") == "/a"

    def test_join_relative_stays_relative(self):
        assert not EMPTY.join("a").absolute


class TestRelativeTo:
    """Tests for relative_to."""

    def test_relative_to_ancestor(self):
        path = VirtualPath.parse("/a/b/c.txt")
        assert str(path.relative_to(VirtualPath.parse("/a"))) == "b/c.txt"

    def test_relative_to_ignores_case_by_default(self):
        path = VirtualPath.parse("/a/b.txt")
        assert str(path.relative_to(VirtualPath.parse("/A"))) == "b.txt"

    def test_relative_to_ordinal(self):
        path = VirtualPath.parse("/a/b.txt")
        with pytest.raises(InvalidPathError):
            path.relative_to(VirtualPath.parse("/A"), PathComparer.ORDINAL)

    def test_relative_to_unrelated_raises(self):
        with pytest.raises(InvalidPathError):
            VirtualPath.parse("/a/b.txt").relative_to(VirtualPath.parse("/x"))

    def test_to_relative_and_absolute(self):
        path = VirtualPath.parse("/a/b")
        assert str(path.to_relative()) == "a/b"
        assert path.to_relative().to_absolute() == path


class TestPathComparer:
    """Tests for case policies."""

    def test_ignore_case_equals(self):
        comparer = PathComparer.IGNORE_CASE
        assert comparer.equals(VirtualPath.parse("/A/B.TXT"), VirtualPath.parse("/a/b.txt"))

    def test_ordinal_equals(self):
        comparer = PathComparer.ORDINAL
        assert not comparer.equals(VirtualPath.parse("/A/B.TXT"), VirtualPath.parse("/a/b.txt"))

    def test_key_distinguishes_absolute(self):
        comparer = PathComparer.IGNORE_CASE
        assert comparer.key(VirtualPath.parse("/a")) != comparer.key(VirtualPath.parse("a"))

    def test_sort_key_orders_ignoring_case(self):
        """Ignore-case ordering puts "/b" between "/A" and "/C"."""
        comparer = PathComparer.IGNORE_CASE
        paths = [VirtualPath.parse(p) for p in ("/C", "/b", "/A")]
        assert [str(p) for p in sorted(paths, key=comparer.sort_key)] == ["/A", "/b", "/C"]

    def test_sort_key_tie_break(self):
        """Spellings equal under the policy still order deterministically."""
        comparer = PathComparer.IGNORE_CASE
        paths = [VirtualPath.parse("/a"), VirtualPath.parse("/A")]
        assert [str(p) for p in sorted(paths, key=comparer.sort_key)] == ["/A", "/a"]

    def test_is_ancestor(self):
        comparer = PathComparer.IGNORE_CASE
        assert comparer.is_ancestor(VirtualPath.parse("/A"), VirtualPath.parse("/a/b.txt"))
        assert comparer.is_ancestor(ROOT, VirtualPath.parse("/a"))
        assert not comparer.is_ancestor(VirtualPath.parse("/a"), VirtualPath.parse("/a"))
        assert not comparer.is_ancestor(VirtualPath.parse("/ab"), VirtualPath.parse("/a/b"))

    def test_is_in_directory(self):
        comparer = PathComparer.IGNORE_CASE
        directory = VirtualPath.parse("/a")
        child = VirtualPath.parse("/a/b")
        grandchild = VirtualPath.parse("/a/b/c")
        assert comparer.is_in_directory(child, directory, recursive=False)
        assert not comparer.is_in_directory(grandchild, directory, recursive=False)
        assert comparer.is_in_directory(grandchild, directory, recursive=True)

    def test_comparer_equality(self):
        assert PathComparer(case_sensitive=True) == PathComparer.ORDINAL
        assert PathComparer() != PathComparer.ORDINAL
        assert hash(PathComparer()) == hash(PathComparer.IGNORE_CASE)


class TestRequireAbsolute:
    """Tests for require_absolute."""

    def test_absolute(self):
        assert require_absolute("/a") == VirtualPath.parse("/a")

    @pytest.mark.parametrize("value", [None, "", "a/b"])
    def test_rejects(self, value):
        with pytest.raises(InvalidPathError):
            require_absolute(value)

    def test_argument_name_in_message(self):
        with pytest.raises(InvalidPathError, match="'dest'"):
            require_absolute("", "dest")
