"""
Zip archive backing store.

Exposes the members of a zip archive as files. Member names are relative
("docs/api.md") and become absolute paths ("/docs/api.md"). Members whose
name ends with "/" are directory records and are not listed as files;
directories come from the hierarchy engine like for any other store.
"""

import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, Union

from flatfs.core.constants import DEFAULT_FILE_TIME, PATH_SEPARATOR
from flatfs.core.errors import EntryNotFoundError, InvalidPathError
from flatfs.core.path_utils import VirtualPath
from flatfs.stores.base import FlatFileSystem, lookup


class ZipFileSystem(FlatFileSystem):
    """
    Read-only store over a zip archive.

    The archive is read on every query, so members added through the
    underlying ZipFile object show up immediately. The zip format cannot
    delete or rename members in place, so mutating operations are rejected.
    """

    def __init__(
        self,
        archive: Union[str, Path, zipfile.ZipFile],
        case_sensitive: bool = False,
    ):
        """
        Initialize the store.

        Args:
            archive: Path to a zip file, or an open ZipFile (not closed by us)
            case_sensitive: Compare paths exactly instead of ignoring case

        Raises:
            FileNotFoundError: If the archive path does not exist
            zipfile.BadZipFile: If the file is not a zip archive
        """
        if isinstance(archive, zipfile.ZipFile):
            self.archive = archive
            self._owns_archive = False
            name = str(archive.filename or "<zip>")
        else:
            self.archive = zipfile.ZipFile(archive, "r")
            self._owns_archive = True
            name = str(archive)
        super().__init__(name, case_sensitive)
        self.logger.info("Opened zip archive", archive=self.name, members=len(self.archive.infolist()))

    def _members(self) -> Iterator[zipfile.ZipInfo]:
        for info in self.archive.infolist():
            if info.is_dir():
                continue
            yield info

    def paths(self) -> Iterator[VirtualPath]:
        for info in self._members():
            try:
                path = VirtualPath.parse(PATH_SEPARATOR + info.filename)
            except InvalidPathError:
                self.logger.warning("Skipping unusable member name", member=info.filename)
                continue
            if not path.is_root:
                yield path

    def _member_map(self) -> Dict[VirtualPath, zipfile.ZipInfo]:
        members = {}
        for info in self._members():
            try:
                members[VirtualPath.parse(PATH_SEPARATOR + info.filename)] = info
            except InvalidPathError:
                continue
        return members

    def _info(self, path: VirtualPath) -> zipfile.ZipInfo:
        members = self._member_map()
        stored = lookup(members.keys(), path, self.comparer)
        if stored is None:
            raise EntryNotFoundError(f"File not found: {path}")
        return members[stored]

    def _open(self, path: VirtualPath) -> BinaryIO:
        return self.archive.open(self._info(path), "r")

    def _length(self, path: VirtualPath) -> int:
        return self._info(path).file_size

    def _last_write_time(self, path: VirtualPath) -> datetime:
        try:
            return datetime(*self._info(path).date_time, tzinfo=timezone.utc)
        except ValueError:
            return DEFAULT_FILE_TIME

    def close(self) -> None:
        if self._owns_archive and not self.closed:
            self.archive.close()
            self.logger.debug("Closed zip archive", archive=self.name)
        super().close()
