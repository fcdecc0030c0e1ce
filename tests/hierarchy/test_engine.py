"""Tests for the virtual hierarchy engine.

This module tests:
- Directory and file existence over a flat path list
- Enumeration of files and synthesized directories
- Pattern, recursion and target filtering
- Case policies and deterministic ordering
- Argument checks
"""

from typing import List

import pytest

from flatfs.core.constants import SearchTarget
from flatfs.core.errors import DirectoryNotFoundError, InvalidArgumentError, InvalidPathError
from flatfs.core.path_utils import PathComparer, VirtualPath
from flatfs.hierarchy.engine import HierarchyEngine, PathQuery
from flatfs.stores.base import PathSource


class ListSource(PathSource):
    """PathSource over a mutable list, counting how often it is read."""

    def __init__(self, entries: List[str]):
        self.entries = list(entries)
        self.reads = 0

    def paths(self):
        self.reads += 1
        return list(self.entries)


SAMPLE = ["/a.txt", "/a/b.txt", "/a/c.text"]


def names(query) -> List[str]:
    return [str(path) for path in query]


@pytest.fixture
def source() -> ListSource:
    return ListSource(SAMPLE)


@pytest.fixture
def engine(source: ListSource) -> HierarchyEngine:
    return HierarchyEngine(source)


class TestDirectoryExists:
    """Tests for directory_exists."""

    def test_root_always_exists(self):
        """Root exists even for an empty source."""
        assert HierarchyEngine(ListSource([])).directory_exists("/")

    def test_ancestor_of_file(self, engine):
        assert engine.directory_exists("/a")

    def test_every_strict_ancestor_exists(self):
        engine = HierarchyEngine(ListSource(["/x/y/z/file.bin"]))
        assert engine.directory_exists("/x")
        assert engine.directory_exists("/x/y")
        assert engine.directory_exists("/x/y/z")

    def test_unrelated_directory(self, engine):
        assert not engine.directory_exists("/b")

    def test_file_name_prefix_is_not_a_directory(self, engine):
        """/a/b.txt does not make /a/b a directory."""
        assert not engine.directory_exists("/a/b")

    def test_file_is_not_a_directory(self, engine):
        assert not engine.directory_exists("/a.txt")
        assert not engine.directory_exists("/a/b.txt")

    def test_ignores_case(self, engine):
        assert engine.directory_exists("/A")

    def test_ordinal(self, source):
        engine = HierarchyEngine(source, PathComparer.ORDINAL)
        assert engine.directory_exists("/a")
        assert not engine.directory_exists("/A")

    def test_unnormalized_argument(self, engine):
        assert engine.directory_exists("\\a\\")
        assert engine.directory_exists("/x/../a")

    @pytest.mark.parametrize("path", [None, "", "a", "a/b"])
    def test_rejects_empty_and_relative(self, engine, path):
        with pytest.raises(InvalidPathError):
            engine.directory_exists(path)


class TestFileExists:
    """Tests for file_exists."""

    @pytest.mark.parametrize("path", SAMPLE)
    def test_every_entry_exists(self, engine, path):
        assert engine.file_exists(path)

    def test_directory_is_not_a_file(self, engine):
        assert not engine.file_exists("/a")

    def test_root_is_not_a_file(self, engine):
        assert not engine.file_exists("/")

    def test_missing(self, engine):
        assert not engine.file_exists("/a/d.txt")

    def test_ignores_case(self):
        """/A/B.TXT satisfies a lower-case lookup."""
        engine = HierarchyEngine(ListSource(["/A/B.TXT"]))
        assert engine.file_exists("/a/b.txt")
        assert engine.directory_exists("/a")

    def test_ordinal(self):
        engine = HierarchyEngine(ListSource(["/A/B.TXT"]), PathComparer.ORDINAL)
        assert not engine.file_exists("/a/b.txt")
        assert engine.file_exists("/A/B.TXT")

    @pytest.mark.parametrize("path", [None, "", "a.txt"])
    def test_rejects_empty_and_relative(self, engine, path):
        with pytest.raises(InvalidPathError):
            engine.file_exists(path)


class TestSourceEntries:
    """Tests for how source entries are read."""

    def test_unnormalized_entries(self):
        engine = HierarchyEngine(ListSource(["\\docs\\api.md", "/docs//./guide.md"]))
        assert engine.file_exists("/docs/api.md")
        assert names(engine.enumerate_files("/docs")) == ["/docs/api.md", "/docs/guide.md"]

    def test_relative_entry_raises(self):
        engine = HierarchyEngine(ListSource(["docs/api.md"]))
        with pytest.raises(InvalidPathError):
            engine.file_exists("/docs/api.md")

    def test_source_errors_propagate(self):
        class BrokenSource(PathSource):
            def paths(self):
                raise OSError("archive unreadable")

        with pytest.raises(OSError, match="archive unreadable"):
            HierarchyEngine(BrokenSource()).directory_exists("/a")

    def test_source_read_per_query(self, engine, source):
        engine.file_exists("/a.txt")
        engine.directory_exists("/a")
        assert source.reads == 2


class TestEnumerate:
    """Tests for enumerate_paths and its wrappers."""

    def test_recursive_txt_files(self, engine):
        """Recursive search finds .txt files at every depth."""
        assert names(engine.enumerate_paths("/", "*.txt", True, SearchTarget.FILE)) == [
            "/a.txt",
            "/a/b.txt",
        ]

    def test_non_recursive_txt_files(self, engine):
        assert names(engine.enumerate_paths("/", "*.txt", False, SearchTarget.FILE)) == ["/a.txt"]

    def test_root_listing(self, engine):
        """Synthesized directories and files are listed together in order."""
        assert names(engine.enumerate_paths("/")) == ["/a", "/a.txt"]

    def test_recursive_listing(self, engine):
        assert names(engine.enumerate_paths("/", "*", recursive=True)) == [
            "/a",
            "/a.txt",
            "/a/b.txt",
            "/a/c.text",
        ]

    def test_subdirectory_listing(self, engine):
        assert names(engine.enumerate_paths("/a")) == ["/a/b.txt", "/a/c.text"]

    def test_directories_only(self, engine):
        assert names(engine.enumerate_directories("/", "*", recursive=True)) == ["/a"]
        assert names(engine.enumerate_directories("/a")) == []

    def test_files_only(self, engine):
        assert names(engine.enumerate_files("/")) == ["/a.txt"]

    def test_question_mark(self, engine):
        assert names(engine.enumerate_files("/", "?.t?xt", recursive=True)) == ["/a/c.text"]

    def test_pattern_matches_directories(self):
        engine = HierarchyEngine(ListSource(["/src/app.py", "/docs/x.md", "/data/y.csv"]))
        assert names(engine.enumerate_directories("/", "d*")) == ["/data", "/docs"]

    def test_nested_directories(self):
        engine = HierarchyEngine(ListSource(["/x/y/z/file.bin", "/x/top.bin"]))
        assert names(engine.enumerate_directories("/")) == ["/x"]
        assert names(engine.enumerate_directories("/", "*", recursive=True)) == [
            "/x",
            "/x/y",
            "/x/y/z",
        ]
        assert names(engine.enumerate_paths("/x")) == ["/x/top.bin", "/x/y"]

    def test_directory_prefix_in_pattern(self, engine):
        """"a/*.txt" from root equals "*.txt" from /a."""
        assert names(engine.enumerate_files("/", "a/*.txt")) == names(
            engine.enumerate_files("/a", "*.txt")
        )
        assert names(engine.enumerate_files("/", "a/*.txt")) == ["/a/b.txt"]

    def test_pattern_prefix_into_missing_directory(self, engine):
        assert names(engine.enumerate_files("/", "zzz/*.txt")) == []

    def test_empty_pattern_matches_nothing(self, engine):
        assert names(engine.enumerate_paths("/", "", recursive=True)) == []

    def test_empty_source(self):
        assert names(HierarchyEngine(ListSource([])).enumerate_paths("/", "*", True)) == []

    def test_pattern_ignores_case(self, engine):
        assert names(engine.enumerate_files("/", "*.TXT", recursive=True)) == [
            "/a.txt",
            "/a/b.txt",
        ]

    def test_pattern_ordinal(self, source):
        engine = HierarchyEngine(source, PathComparer.ORDINAL)
        assert names(engine.enumerate_files("/", "*.TXT", recursive=True)) == []

    def test_base_ignores_case(self, engine):
        assert names(engine.enumerate_files("/A")) == ["/a/b.txt", "/a/c.text"]

    def test_case_insensitive_order(self):
        engine = HierarchyEngine(ListSource(["/C.txt", "/b.txt", "/A.txt"]))
        assert names(engine.enumerate_files("/")) == ["/A.txt", "/b.txt", "/C.txt"]

    def test_ordinal_order(self):
        engine = HierarchyEngine(ListSource(["/C.txt", "/b.txt", "/A.txt"]), PathComparer.ORDINAL)
        assert names(engine.enumerate_files("/")) == ["/A.txt", "/C.txt", "/b.txt"]

    def test_duplicate_directories_collapse(self):
        """Directories that differ only in case are listed once."""
        engine = HierarchyEngine(ListSource(["/a/x.txt", "/A/y.txt"]))
        assert names(engine.enumerate_directories("/")) == ["/A"]

    def test_duplicate_directories_kept_when_ordinal(self):
        engine = HierarchyEngine(ListSource(["/a/x.txt", "/A/y.txt"]), PathComparer.ORDINAL)
        assert names(engine.enumerate_directories("/")) == ["/A", "/a"]

    def test_idempotent(self, engine):
        """Two identical queries give identical ordered results."""
        first = names(engine.enumerate_paths("/", "*", True))
        second = names(engine.enumerate_paths("/", "*", True))
        assert first == second

    def test_results_are_virtual_paths(self, engine):
        assert all(isinstance(p, VirtualPath) for p in engine.enumerate_paths("/"))


class TestPathQuery:
    """Tests for the lazy query object."""

    def test_returns_query(self, engine):
        query = engine.enumerate_files("/")
        assert isinstance(query, PathQuery)
        assert "pattern='*'" in repr(query)

    def test_lazy(self, engine, source):
        """No search runs until the query is iterated."""
        reads = source.reads
        query = engine.enumerate_files("/", "*", recursive=True)
        after_checks = source.reads
        list(query)
        assert source.reads == after_checks + 1
        assert after_checks >= reads

    def test_reiteration_sees_changes(self, engine, source):
        query = engine.enumerate_files("/", "*", recursive=True)
        assert len(list(query)) == 3
        source.entries.append("/d/e.txt")
        assert names(query) == ["/a.txt", "/a/b.txt", "/a/c.text", "/d/e.txt"]


class TestEnumerateArguments:
    """Argument checks happen when enumerate_paths is called."""

    def test_missing_directory(self, engine):
        with pytest.raises(DirectoryNotFoundError):
            engine.enumerate_paths("/missing")

    def test_file_as_directory(self, engine):
        with pytest.raises(DirectoryNotFoundError):
            engine.enumerate_paths("/a.txt")

    def test_none_pattern(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.enumerate_paths("/", None)

    def test_invalid_target(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.enumerate_paths("/", "*", False, "files")

    @pytest.mark.parametrize("path", [None, "", "a"])
    def test_invalid_path(self, engine, path):
        with pytest.raises(InvalidPathError):
            engine.enumerate_paths(path)

    def test_absolute_pattern(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.enumerate_paths("/", "/a/*.txt")

    def test_wildcard_directory_pattern(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.enumerate_paths("/", "*/b.txt")
